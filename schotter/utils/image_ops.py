from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw

from schotter import config
from schotter.core.stones import Gravel

# unit square corners, centred on the cell
_CORNERS = ((-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5))


def stone_polygon(
    position: Tuple[float, float],
    offset: Tuple[float, float],
    rotation: float,
    size: float,
    margin: float,
) -> list[tuple[float, float]]:
    """Pixel corners of one stone. Rows grow downward; rotation turns clockwise on screen."""
    cx = margin + (position[0] + 0.5 + offset[0]) * size
    cy = margin + (position[1] + 0.5 + offset[1]) * size
    c, s = math.cos(rotation), math.sin(rotation)
    return [(cx + (dx * c - dy * s) * size, cy + (dx * s + dy * c) * size) for dx, dy in _CORNERS]


def render_stones(
    stones: Iterable,
    rows: int,
    cols: int,
    size: int = config.SIZE,
    margin: int = config.MARGIN,
    line_width: float = config.LINE_WIDTH,
    background: Tuple[int, int, int] = config.BACKGROUND,
    supersample: int = 2,
) -> Image.Image:
    """Draw ``(position, offset, rotation, color)`` tuples as square outlines."""
    ss = max(1, int(supersample))
    W = cols * size + 2 * margin
    H = rows * size + 2 * margin
    img = Image.new("RGB", (W * ss, H * ss), color=background)
    draw = ImageDraw.Draw(img)
    stroke = max(1, int(round(line_width * size * ss)))

    for position, offset, rotation, color in stones:
        pts = stone_polygon(position, offset, rotation, size * ss, margin * ss)
        draw.line(pts + [pts[0]], fill=tuple(color), width=stroke, joint="curve")

    if ss > 1:
        img = img.resize((W, H), Image.LANCZOS)
    return img


def render_gravel(gravel: Gravel, color: Optional[Tuple[int, int, int]] = None, **kwargs) -> Image.Image:
    return render_stones(gravel.renderables(color), gravel.rows, gravel.cols, **kwargs)
