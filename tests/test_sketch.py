import os
from datetime import datetime

import numpy as np
import pytest

from schotter.core.params import SEED_RANGE, SketchParams
from schotter.core.rng import seeded
from schotter.errors import RecordingError
from schotter.sketch import Sketch


def make(variant="static", tmp_path=None, **params):
    return Sketch(
        variant=variant,
        params=SketchParams(**params),
        source=seeded(1),
        assets_path=str(tmp_path) if tmp_path is not None else None,
    )


def test_static_flat_scenario():
    sk = make(seed=42, displacement=0.0, rotation=0.0)
    sk.tick()
    assert len(sk.gravel) == 22 * 12
    assert np.all(sk.gravel.offset_x == 0.0)
    assert np.all(sk.gravel.rotation == 0.0)


def test_static_keys():
    sk = make(seed=5, displacement=1.0, rotation=1.0)
    assert sk.handle_key("Up")
    assert sk.params.displacement == pytest.approx(1.1)
    sk.handle_key("Down")
    sk.handle_key("Down")
    assert sk.params.displacement == pytest.approx(0.9)
    sk.handle_key("Right")
    assert sk.params.rotation == pytest.approx(1.1)
    sk.handle_key("Left")
    assert sk.params.rotation == pytest.approx(1.0)
    sk.handle_key("R")
    assert 0 <= sk.params.seed < SEED_RANGE
    sk.handle_key("C")
    assert len(sk.params.color) == 3
    assert not sk.handle_key("Q")


def test_param_change_visible_next_tick():
    sk = make(seed=5)
    sk.tick()
    before = sk.gravel.offset_x.copy()
    sk.params.set_seed("6")
    assert np.array_equal(before, sk.gravel.offset_x)
    sk.tick()
    assert not np.array_equal(before, sk.gravel.offset_x)


def test_snapshot_written_on_next_frame(tmp_path):
    sk = make(tmp_path=tmp_path, seed=42, displacement=1.0, rotation=1.0)
    sk.handle_key("S")
    sk.tick()
    sk.frame_done(sk.render())
    path = tmp_path / "snapshots" / "schotter-s42-d1-r1.png"
    assert path.is_file()
    assert not sk.pending_snapshot


def test_animated_snapshot_name(tmp_path):
    sk = make("animated", tmp_path=tmp_path, displacement=2.0, rotation=0.5)
    assert sk.snapshot_path().endswith(os.path.join("snapshots", "schotter-d2-r0.5.png"))


def test_animated_recording_toggle(tmp_path):
    sk = make("animated", tmp_path=tmp_path)
    assert sk.toggle_recording(datetime(2024, 1, 2, 3, 4, 5, 6))
    session = tmp_path / "recordings" / "20240102-030405-000006"
    assert session.is_dir()
    for _ in range(6):
        sk.tick()
        sk.frame_done(sk.render())
    assert sorted(os.listdir(session)) == ["0001.png", "0002.png", "0003.png"]
    assert not sk.toggle_recording()
    sk.tick()
    sk.tick()
    sk.frame_done(sk.render())
    assert len(os.listdir(session)) == 3


def test_animated_r_key_records(tmp_path):
    sk = make("animated", tmp_path=tmp_path)
    sk.handle_key("R")
    assert sk.capture.recording
    sk.handle_key("R")
    assert not sk.capture.recording
    # C is a static-only key
    assert not sk.handle_key("C")


def test_unwritable_recording_dir(tmp_path):
    blocker = tmp_path / "assets"
    blocker.write_text("not a directory")
    sk = make("animated", tmp_path=blocker)
    with pytest.raises(RecordingError):
        sk.handle_key("R")
    assert not sk.capture.recording


def test_render_uses_stone_colours_when_animated():
    sk = make("animated")
    sk.tick()
    img = sk.render()
    assert img.size == (430, 730)


def test_unknown_variant():
    with pytest.raises(ValueError):
        Sketch(variant="wobbly")
