"""
Sketch (Model)
==============
The running sketch: field, parameters, engine and capture state in one place.
Front ends (Qt window, headless CLI) call ``tick`` once per frame, render the
field, and forward key presses to ``handle_key``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from PIL import Image

from schotter import config
from schotter.core.capture import CaptureCoordinator, new_session_id, snapshot_name
from schotter.core.engine import make_engine
from schotter.core.params import NUDGE_STEP, SketchParams
from schotter.core.rng import Source
from schotter.core.stones import Gravel
from schotter.utils import storage
from schotter.utils.image_ops import render_gravel

logger = logging.getLogger(__name__)


class Sketch:
    def __init__(
        self,
        variant: str = "static",
        rows: int = config.ROWS,
        cols: int = config.COLS,
        params: Optional[SketchParams] = None,
        source: Optional[Source] = None,
        assets_path: Optional[str] = None,
        writer: Optional[storage.FrameWriter] = None,
        app_name: str = config.APP_NAME,
    ):
        self.variant = variant
        self.app_name = app_name
        self.params = params or SketchParams()
        self.engine = make_engine(variant, source)
        self.gravel = Gravel.build(rows, cols, source=source)
        self.capture = CaptureCoordinator(root=assets_path)
        self.writer = writer
        self.tick_index = 0
        self.pending_snapshot = False

    # -------------------------------------------------------------- loop

    def tick(self) -> None:
        self.engine.step(self.gravel, self.params.snapshot())
        self.tick_index += 1

    def render(self) -> Image.Image:
        # the static sketch strokes every stone in one colour
        color = self.params.color if self.variant == "static" else None
        return render_gravel(self.gravel, color)

    def frame_done(self, image: Image.Image) -> None:
        """Hand the frame just rendered to the writer if a snapshot or recording wants it."""
        if self.pending_snapshot:
            self.pending_snapshot = False
            self._write(image, self.snapshot_path())
        path = self.capture.advance(self.tick_index)
        if path is not None:
            self._write(image, path)

    def _write(self, image: Image.Image, path: str) -> None:
        if self.writer is None:
            storage.save_frame(image, path)
        else:
            self.writer.submit(image, path)

    # ---------------------------------------------------------- commands

    def snapshot_path(self) -> str:
        p = self.params
        name = snapshot_name(self.app_name, self.variant, p.seed, p.displacement, p.rotation)
        return self.capture.snapshot_path(name)

    def request_snapshot(self) -> None:
        self.pending_snapshot = True
        logger.info("Snapshot requested: %s", self.snapshot_path())

    def toggle_recording(self, now: Optional[datetime] = None) -> bool:
        """Start or stop a recording session; raises RecordingError if its directory can't be made."""
        if self.capture.recording:
            self.capture.stop()
            return False
        session_id = new_session_id(now)
        storage.ensure_directory(self.capture.session_dir(session_id))
        self.capture.start(session_id)
        return True

    def key_bindings(self) -> Dict[str, Callable[[], object]]:
        p = self.params
        keys: Dict[str, Callable[[], object]] = {
            "S": self.request_snapshot,
            "Up": lambda: p.nudge_displacement(NUDGE_STEP),
            "Down": lambda: p.nudge_displacement(-NUDGE_STEP),
            "Right": lambda: p.nudge_rotation(NUDGE_STEP),
            "Left": lambda: p.nudge_rotation(-NUDGE_STEP),
        }
        if self.variant == "static":
            keys["R"] = p.reseed
            keys["C"] = p.recolor
        else:
            keys["R"] = self.toggle_recording
        return keys

    def handle_key(self, key: str) -> bool:
        action = self.key_bindings().get(key)
        if action is None:
            return False
        action()
        return True
