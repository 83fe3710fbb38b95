import numpy as np
import pytest

from schotter.core.engine import CYCLES_MAX, CYCLES_MIN, AnimatedEngine, make_engine
from schotter.core.params import SketchParams
from schotter.core.rng import seeded
from schotter.core.stones import Gravel


def setup(motion=1.0, displacement=2.0, rotation=2.0, seed=3, rows=6, cols=4):
    g = Gravel.build(rows, cols, source=seeded(0))
    engine = AnimatedEngine(seeded(seed))
    params = SketchParams(displacement=displacement, rotation=rotation, motion=motion, seed=0)
    return g, engine, params


def test_first_tick_decides_without_moving():
    g, engine, params = setup(motion=1.0)
    engine.step(g, params)
    assert np.all(g.offset_x == 0.0)
    assert np.all(g.rotation == 0.0)
    assert np.all((g.cycles >= CYCLES_MIN) & (g.cycles <= CYCLES_MAX))


def test_holding_moves_by_velocity_only():
    g, engine, params = setup(motion=1.0)
    engine.step(g, params)
    vx, vy, vr = g.velocity_x.copy(), g.velocity_y.copy(), g.velocity_rotation.copy()
    cycles = g.cycles.copy()
    for k in range(1, 6):
        engine.step(g, params)
        assert np.allclose(g.offset_x, vx * k)
        assert np.allclose(g.offset_y, vy * k)
        assert np.allclose(g.rotation, vr * k)
        assert np.array_equal(g.velocity_x, vx)
        assert np.array_equal(g.cycles, cycles - k)


def test_cycle_reaches_target():
    g, engine, params = setup(motion=1.0)
    engine.step(g, params)
    i = len(g) - 1
    n = int(g.cycles[i])
    target = (
        g.offset_x[i] + g.velocity_x[i] * n,
        g.offset_y[i] + g.velocity_y[i] * n,
        g.rotation[i] + g.velocity_rotation[i] * n,
    )
    for _ in range(n):
        engine.step(g, params)
    assert g.cycles[i] == 0
    assert g.offset_x[i] == pytest.approx(target[0])
    assert g.offset_y[i] == pytest.approx(target[1])
    assert g.rotation[i] == pytest.approx(target[2])

    engine.step(g, params)
    assert CYCLES_MIN <= g.cycles[i] <= CYCLES_MAX


def test_targets_respect_depth_bounds():
    g, engine, params = setup(motion=1.0, displacement=2.0, rotation=2.0)
    engine.step(g, params)
    n = g.cycles
    tx = g.velocity_x * n
    tr = g.velocity_rotation * n
    assert np.all(np.abs(tx) <= g.depth * 2.0 * 0.5 + 1e-12)
    assert np.all(np.abs(tr) <= g.depth * 2.0 * np.pi / 4 + 1e-12)


def test_dormant_stones_stay_put():
    g, engine, params = setup(motion=0.0)
    g.offset_x[:] = 0.3
    g.rotation[:] = -0.2
    g.velocity_x[:] = 1.0
    g.velocity_rotation[:] = 1.0
    engine.step(g, params)
    assert np.all(g.velocity_x == 0.0)
    assert np.all(g.velocity_y == 0.0)
    assert np.all(g.velocity_rotation == 0.0)
    hold = int(g.cycles.min())
    for _ in range(hold):
        engine.step(g, params)
        assert np.all(g.offset_x == 0.3)
        assert np.all(g.rotation == -0.2)


def test_mixed_motion_splits_field():
    g, engine, params = setup(motion=0.5, rows=20, cols=20)
    engine.step(g, params)
    moving = g.velocity_x != 0.0
    # a bottom-heavy grid with motion 0.5 gets both kinds
    assert moving.any()
    assert (~moving[g.depth > 0]).any()


def test_top_row_never_moves():
    g, engine, params = setup(motion=1.0, displacement=5.0, rotation=5.0)
    for _ in range(400):
        engine.step(g, params)
    top = slice(0, g.cols)
    assert np.all(g.offset_x[top] == 0.0)
    assert np.all(g.offset_y[top] == 0.0)
    assert np.all(g.rotation[top] == 0.0)


def test_parameters_read_each_tick():
    g, engine, params = setup(motion=0.0)
    engine.step(g, params)
    assert np.all(g.velocity_x == 0.0)
    g.cycles[:] = 0
    params.set_motion(1.0)
    engine.step(g, params)
    assert np.any(g.velocity_x != 0.0)


def test_default_source_is_unseeded():
    assert isinstance(make_engine("animated"), AnimatedEngine)
    with pytest.raises(ValueError):
        make_engine("wobbly")
