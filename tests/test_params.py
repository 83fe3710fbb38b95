import pytest

from schotter.core.params import (
    PALETTE,
    SEED_RANGE,
    SketchParams,
    gen_random_color,
    gen_random_seed,
    parse_seed,
    snap_to_step,
)
from schotter.core.rng import seeded


@pytest.mark.parametrize(
    "text,expected",
    [("42", 42), (" 7 ", 7), ("0", 0), ("abc", 0), ("", 0), ("-1", 0),
     ("1.5", 0), (str(2**64), 0), (str(2**64 - 1), 2**64 - 1), (None, 0)],
)
def test_parse_seed(text, expected):
    assert parse_seed(text) == expected


def test_parse_seed_custom_fallback():
    assert parse_seed("nope", fallback=9) == 9


def test_defaults():
    p = SketchParams()
    assert p.displacement == 1.0
    assert p.rotation == 1.0
    assert p.motion == 0.5
    assert 0 <= p.seed < SEED_RANGE
    assert p.color == (0, 0, 0)


def test_nudges_clamp_at_zero():
    p = SketchParams(displacement=0.05, rotation=0.0)
    p.nudge_displacement(-0.1)
    p.nudge_rotation(-0.1)
    assert p.displacement == 0.0
    assert p.rotation == 0.0


def test_nudges_do_not_drift():
    p = SketchParams(displacement=0.0)
    for _ in range(3):
        p.nudge_displacement(0.1)
    assert p.displacement == 0.3


def test_setters_clamp():
    p = SketchParams()
    p.set_motion(2.0)
    assert p.motion == 1.0
    p.set_motion(-1.0)
    assert p.motion == 0.0
    p.set_displacement(-3)
    assert p.displacement == 0.0
    p.set_rotation(12.5)
    assert p.rotation == 12.5
    p.set_color((300, -4, 12))
    assert p.color == (255, 0, 12)


def test_set_seed_from_text():
    p = SketchParams(seed=5)
    p.set_seed("123")
    assert p.seed == 123
    p.set_seed("12x")
    assert p.seed == 0


def test_snapshot_is_independent():
    p = SketchParams(displacement=1.0)
    snap = p.snapshot()
    p.set_displacement(3.0)
    assert snap.displacement == 1.0


def test_reseed_and_recolor_with_source():
    p = SketchParams(seed=0)
    new_seed = p.reseed(seeded(1))
    assert p.seed == new_seed == gen_random_seed(seeded(1))
    color = p.recolor(seeded(2))
    assert color == gen_random_color(seeded(2))
    assert all(0 <= c < 255 for c in color)


def test_random_seed_range():
    for s in range(20):
        assert 0 <= gen_random_seed(seeded(s)) < SEED_RANGE


def test_palette_has_fourteen_colours():
    assert len(PALETTE) == 14
    assert len(set(PALETTE)) == 14


@pytest.mark.parametrize(
    "value,expected",
    [(1.0, 1.0), (1.02, 1.0), (1.03, 1.05), (2.4999, 2.5), (-1.0, 0.0), (7.0, 5.0), (4.99, 5.0)],
)
def test_snap_to_step(value, expected):
    assert snap_to_step(value, 0.0, 5.0, 0.05) == expected


def test_snap_without_step_only_clamps():
    assert snap_to_step(0.123, 0.0, 1.0, 0.0) == 0.123
    assert snap_to_step(1.5, 0.0, 1.0, 0.0) == 1.0
