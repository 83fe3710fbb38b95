"""
Frame storage
=============
Directory creation, background PNG writing and encoding of recorded
sessions into GIF/MP4. The tick loop only ever hands images over; all
disk access happens here.
"""
from __future__ import annotations

import glob
import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import numpy as np
from PIL import Image

from schotter.errors import RecordingError

logger = logging.getLogger(__name__)


def ensure_directory(path: str) -> str:
    """Create ``path``. An existing directory is fine; anything else is fatal for recording."""
    try:
        os.makedirs(path)
        logger.debug("Created directory %s", path)
    except FileExistsError:
        if not os.path.isdir(path):
            raise RecordingError(f"Problem creating directory {path!r}: a file is in the way")
    except OSError as e:
        raise RecordingError(f"Problem creating directory {path!r}: {e}") from e
    return path


def save_frame(image: Image.Image, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    image.save(path)
    return path


class FrameWriter:
    """Writes frames on a single worker thread so slow disks don't stall ticks."""

    def __init__(self):
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frame-writer")
        self.written = 0
        self.failed = 0

    def submit(self, image: Image.Image, path: str) -> Future:
        future = self._pool.submit(save_frame, image.copy(), path)
        future.add_done_callback(self._on_done)
        return future

    def _on_done(self, future: Future) -> None:
        e = future.exception()
        if e is not None:
            self.failed += 1
            logger.error("Failed to write frame: %s", e)
        else:
            self.written += 1

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


def session_frames(session_dir: str) -> list[str]:
    return sorted(glob.glob(os.path.join(session_dir, "[0-9][0-9][0-9][0-9].png")))


def encode_session(session_dir: str, out_path: str, fps: int = 30, loop: bool = True,
                   crf: Optional[int] = None) -> str:
    """Encode a recorded session into GIF or MP4, chosen by ``out_path``'s extension."""
    frames = session_frames(session_dir)
    if not frames:
        raise RecordingError(f"No frames found in {session_dir!r}")
    logger.info("Encoding %d frames from %s to %s", len(frames), session_dir, out_path)

    ext = os.path.splitext(out_path)[1].lower()
    if ext == ".gif":
        import imageio.v3 as iio
        out = [np.array(Image.open(fn).convert("RGB")) for fn in frames]
        dur = max(10, int(1000 / max(1, fps)))
        iio.imwrite(out_path, out, extension=".gif", duration=dur, loop=0 if loop else 1)
    elif ext == ".mp4":
        import imageio
        params = ["-crf", str(crf)] if crf is not None else None
        writer = imageio.get_writer(
            out_path,
            fps=fps,
            codec="libx264",
            pixelformat="yuv420p",
            macro_block_size=1,
            ffmpeg_log_level="error",
            ffmpeg_params=params,
        )
        try:
            for fn in frames:
                writer.append_data(np.array(Image.open(fn).convert("RGB")))
        finally:
            writer.close()
    else:
        raise ValueError(f"Unsupported output format {ext!r}; use .gif or .mp4")
    return out_path
