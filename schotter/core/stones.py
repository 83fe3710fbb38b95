from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from .params import PALETTE, RGB
from .rng import Source, ambient


@dataclass(frozen=True)
class Stone:
    """Read-only view of one stone, copied out of the field arrays."""
    grid_x: float
    grid_y: float
    offset_x: float
    offset_y: float
    rotation: float
    velocity_x: float
    velocity_y: float
    velocity_rotation: float
    cycles_remaining: int
    display_color: RGB


class Gravel:
    """Fixed R x C field of stones stored as parallel arrays.

    Index ``i`` is the stone at row ``i // cols``, column ``i % cols``
    (row-major, the same order the renderer draws in). Grid coordinates and
    colours are frozen at construction; everything else is mutated in place
    by the engines.
    """

    def __init__(self, rows: int, cols: int, colors: np.ndarray):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"grid dimensions must be positive, got {rows}x{cols}")
        self.rows = int(rows)
        self.cols = int(cols)
        n = self.rows * self.cols

        yy, xx = np.mgrid[0:self.rows, 0:self.cols].astype(np.float64)
        self.grid_x = xx.ravel()
        self.grid_y = yy.ravel()
        self.depth = self.grid_y / self.rows

        self.offset_x = np.zeros(n)
        self.offset_y = np.zeros(n)
        self.rotation = np.zeros(n)
        self.velocity_x = np.zeros(n)
        self.velocity_y = np.zeros(n)
        self.velocity_rotation = np.zeros(n)
        self.cycles = np.zeros(n, dtype=np.int64)

        colors = np.asarray(colors, dtype=np.uint8)
        if colors.shape != (n, 3):
            raise ValueError(f"expected {n} RGB colours, got shape {colors.shape}")
        self.colors = colors.copy()

        for arr in (self.grid_x, self.grid_y, self.depth, self.colors):
            arr.setflags(write=False)

    @classmethod
    def build(
        cls,
        rows: int,
        cols: int,
        palette: Sequence[RGB] = PALETTE,
        source: Optional[Source] = None,
    ) -> "Gravel":
        source = source or ambient()
        pal = np.asarray(palette, dtype=np.uint8)
        picks = source.index(len(pal), size=max(rows * cols, 0))
        return cls(rows, cols, pal[picks])

    def __len__(self) -> int:
        return self.rows * self.cols

    def __getitem__(self, i: int) -> Stone:
        return Stone(
            grid_x=float(self.grid_x[i]),
            grid_y=float(self.grid_y[i]),
            offset_x=float(self.offset_x[i]),
            offset_y=float(self.offset_y[i]),
            rotation=float(self.rotation[i]),
            velocity_x=float(self.velocity_x[i]),
            velocity_y=float(self.velocity_y[i]),
            velocity_rotation=float(self.velocity_rotation[i]),
            cycles_remaining=int(self.cycles[i]),
            display_color=tuple(int(c) for c in self.colors[i]),  # type: ignore[arg-type]
        )

    def __iter__(self) -> Iterator[Stone]:
        for i in range(len(self)):
            yield self[i]

    def index_of(self, grid_x: int, grid_y: int) -> int:
        return int(grid_y) * self.cols + int(grid_x)

    def renderables(
        self, color: Optional[RGB] = None
    ) -> Iterator[Tuple[Tuple[float, float], Tuple[float, float], float, RGB]]:
        """Yield ``(position, offset, rotation, color)`` per stone in field order.

        ``color`` overrides every stone's own colour (the static sketch strokes
        all stones alike).
        """
        for i in range(len(self)):
            c = color if color is not None else tuple(int(v) for v in self.colors[i])
            yield (
                (float(self.grid_x[i]), float(self.grid_y[i])),
                (float(self.offset_x[i]), float(self.offset_y[i])),
                float(self.rotation[i]),
                c,
            )
