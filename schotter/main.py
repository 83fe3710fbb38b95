"""
Application entry point
=======================
``schotter`` opens the sketch window and its control panel.
``schotter --headless`` runs the same loop without Qt and writes a snapshot,
optionally a recording session and an encoded GIF/MP4 of it.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from schotter import config
from schotter.core.engine import VARIANTS
from schotter.core.params import SketchParams
from schotter.errors import SchotterError
from schotter.logging_config import setup_logging
from schotter.sketch import Sketch
from schotter.utils import storage

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=config.APP_NAME, description="Gravel grid sketch")
    ap.add_argument("--variant", choices=VARIANTS, default="static")
    ap.add_argument("--rows", type=int, default=config.ROWS)
    ap.add_argument("--cols", type=int, default=config.COLS)
    ap.add_argument("--seed", type=int, default=None, help="static variant only")
    ap.add_argument("--displacement", type=float, default=1.0)
    ap.add_argument("--rotation", type=float, default=1.0)
    ap.add_argument("--motion", type=float, default=0.5)
    ap.add_argument("--assets", default=None, help="output root (default: ./assets)")
    ap.add_argument("--headless", action="store_true")
    ap.add_argument("--frames", type=int, default=1, help="ticks to run in headless mode")
    ap.add_argument("--record", action="store_true", help="headless: record a frame session")
    ap.add_argument("--encode", default=None, help="headless: encode the session to .gif/.mp4")
    ap.add_argument("--fps", type=int, default=30)
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--log-file", default=None)
    return ap


def make_sketch(args: argparse.Namespace, writer: Optional[storage.FrameWriter] = None) -> Sketch:
    params = SketchParams()
    if args.seed is not None:
        params.set_seed(args.seed)
    params.set_displacement(args.displacement)
    params.set_rotation(args.rotation)
    params.set_motion(args.motion)
    return Sketch(
        variant=args.variant,
        rows=args.rows,
        cols=args.cols,
        params=params,
        assets_path=args.assets,
        writer=writer,
    )


def run_headless(args: argparse.Namespace) -> int:
    sketch = make_sketch(args)
    if args.record:
        sketch.toggle_recording()
    session_dir = sketch.capture.session_dir(sketch.capture.session_id) if args.record else None

    img = None
    for _ in range(max(1, args.frames)):
        sketch.tick()
        img = sketch.render()
        sketch.frame_done(img)
    sketch.capture.stop()

    snap = storage.save_frame(img, sketch.snapshot_path())
    logger.info("Snapshot written: %s", snap)

    if args.encode:
        if session_dir is None:
            logger.error("--encode needs --record")
            return 2
        storage.encode_session(session_dir, args.encode, fps=args.fps)
    return 0


def run_interactive(args: argparse.Namespace) -> int:
    from PySide6.QtWidgets import QApplication

    from schotter.app.main_window import SketchWindow

    app = QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    writer = storage.FrameWriter()
    window = SketchWindow(make_sketch(args, writer))
    window.show_all()
    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    try:
        if args.headless:
            code = run_headless(args)
        else:
            code = run_interactive(args)
    except SchotterError as e:
        logger.critical(str(e))
        code = 1
    except ValueError as e:
        logger.critical("Invalid arguments: %s", e)
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
