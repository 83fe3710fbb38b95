from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional

from schotter import config

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return f"{round(float(value), 3):g}"


def snapshot_name(app_name: str, variant: str, seed: int, displacement: float, rotation: float) -> str:
    if variant == "static":
        return f"{app_name}-s{seed}-d{_fmt(displacement)}-r{_fmt(rotation)}.png"
    return f"{app_name}-d{_fmt(displacement)}-r{_fmt(rotation)}.png"


def new_session_id(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y%m%d-%H%M%S-%f")


class CaptureCoordinator:
    """Decides which ticks of a recording session get exported and where to.

    Nothing here touches the filesystem; callers create ``session_dir`` before
    ``start`` and persist the frames whose paths ``advance`` hands back.
    """

    def __init__(self, root: Optional[str] = None, limit: int = config.CAPTURE_LIMIT,
                 every: int = config.CAPTURE_EVERY):
        self.root = root or config.ASSETS_PATH
        self.limit = limit
        self.every = every
        self.recording = False
        self.session_id = ""
        self.frame = 0

    def session_dir(self, session_id: str) -> str:
        return os.path.join(self.root, config.RECORDINGS_DIR, session_id)

    def snapshot_path(self, name: str) -> str:
        return os.path.join(self.root, config.SNAPSHOTS_DIR, name)

    def next_capture_path(self, session_id: str, frame_number: int) -> str:
        return os.path.join(self.session_dir(session_id), f"{frame_number:04d}.png")

    def start(self, session_id: str) -> None:
        self.session_id = session_id
        self.frame = 0
        self.recording = True
        logger.info("Recording started: %s", self.session_dir(session_id))

    def stop(self) -> None:
        if self.recording:
            logger.info("Recording stopped after %d frames: %s", self.frame, self.session_id)
        self.recording = False

    def should_capture_this_tick(self, tick_index: int) -> bool:
        return self.recording and tick_index % self.every == 0

    def advance(self, tick_index: int) -> Optional[str]:
        """Path for this tick's frame, or None when nothing is to be captured."""
        if not self.should_capture_this_tick(tick_index):
            return None
        if self.frame + 1 > self.limit:
            logger.warning("Frame limit %d reached", self.limit)
            self.stop()
            return None
        self.frame += 1
        return self.next_capture_path(self.session_id, self.frame)
