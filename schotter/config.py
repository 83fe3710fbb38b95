"""
Configuration & Path Management
===============================
Central registry for grid geometry, capture limits and output paths.

Exports:
    ROWS, COLS (int): Default lattice size.
    SIZE, MARGIN (int): Cell size and frame margin in pixels.
    WIDTH, HEIGHT (int): Output image size derived from the above.
    ASSETS_PATH (str): Root directory for snapshots and recordings.
"""
import os

# Lattice
ROWS: int = 22
COLS: int = 12

# Rendering
SIZE: int = 30
LINE_WIDTH: float = 0.06
MARGIN: int = 35
WIDTH: int = COLS * SIZE + 2 * MARGIN
HEIGHT: int = ROWS * SIZE + 2 * MARGIN
BACKGROUND = (255, 255, 255)

# Loop
TICK_MS: int = 16

# Capture
CAPTURE_LIMIT: int = 9999
CAPTURE_EVERY: int = 2
APP_NAME: str = "schotter"


def get_assets_path() -> str:
    """Output root: $SCHOTTER_ASSETS if set, else ./assets in the working directory."""
    env = os.environ.get("SCHOTTER_ASSETS")
    if env:
        return os.path.abspath(env)
    return os.path.join(os.getcwd(), "assets")


ASSETS_PATH: str = get_assets_path()
SNAPSHOTS_DIR: str = "snapshots"
RECORDINGS_DIR: str = "recordings"
