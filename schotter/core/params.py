from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import numpy as np

from .rng import SEED_LIMIT, Source, ambient

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

SEED_RANGE = 1_000_000
NUDGE_STEP = 0.1
SLIDER_MAX = 5.0
SLIDER_STEP = 0.05

# Stroke colours for animated stones
PALETTE: Tuple[RGB, ...] = (
    (0, 0, 255),      # blue
    (138, 43, 226),   # blueviolet
    (127, 255, 0),    # chartreuse
    (255, 127, 80),   # coral
    (220, 20, 60),    # crimson
    (0, 0, 139),      # darkblue
    (255, 140, 0),    # darkorange
    (255, 20, 147),   # deeppink
    (34, 139, 34),    # forestgreen
    (255, 215, 0),    # gold
    (255, 69, 0),     # orangered
    (255, 0, 0),      # red
    (106, 90, 205),   # slateblue
    (255, 255, 0),    # yellow
)


def gen_random_seed(source: Optional[Source] = None) -> int:
    source = source or ambient()
    return int(source.index(SEED_RANGE))


def gen_random_color(source: Optional[Source] = None) -> RGB:
    source = source or ambient()
    r, g, b = source.index(255, size=3)
    return int(r), int(g), int(b)


def parse_seed(text, fallback: int = 0) -> int:
    """Parse a seed typed by the user; anything that isn't a u64 becomes ``fallback``."""
    try:
        seed = int(str(text).strip())
    except (TypeError, ValueError):
        return fallback
    if not 0 <= seed < SEED_LIMIT:
        return fallback
    return seed


def _clamp(value: float, low: float, high: float) -> float:
    return float(np.clip(float(value), low, high))


def snap_to_step(value: float, low: float, high: float, step: float) -> float:
    """Clamp to [low, high] and round to the nearest multiple of ``step`` above ``low``."""
    value = _clamp(value, low, high)
    if step <= 0:
        return value
    snapped = low + round((value - low) / step) * step
    return round(_clamp(snapped, low, high), 6)


@dataclass
class SketchParams:
    displacement: float = 1.0
    rotation: float = 1.0
    motion: float = 0.5
    seed: int = field(default_factory=gen_random_seed)
    color: RGB = (0, 0, 0)

    def snapshot(self) -> "SketchParams":
        return replace(self)

    def set_displacement(self, value: float) -> None:
        self.displacement = _clamp(value, 0.0, np.inf)

    def set_rotation(self, value: float) -> None:
        self.rotation = _clamp(value, 0.0, np.inf)

    def set_motion(self, value: float) -> None:
        self.motion = _clamp(value, 0.0, 1.0)

    def set_seed(self, value) -> None:
        self.seed = parse_seed(value)
        logger.info("Seed set to %d", self.seed)

    def set_color(self, color: RGB) -> None:
        self.color = tuple(int(np.clip(c, 0, 255)) for c in color)  # type: ignore[assignment]

    # Keyboard nudges; rounding keeps repeated steps from drifting (0.30000000000000004)
    def nudge_displacement(self, delta: float) -> None:
        self.set_displacement(round(self.displacement + delta, 6))

    def nudge_rotation(self, delta: float) -> None:
        self.set_rotation(round(self.rotation + delta, 6))

    def reseed(self, source: Optional[Source] = None) -> int:
        self.seed = gen_random_seed(source)
        logger.info("Reseeded: %d", self.seed)
        return self.seed

    def recolor(self, source: Optional[Source] = None) -> RGB:
        self.color = gen_random_color(source)
        logger.debug("Stroke colour: %s", self.color)
        return self.color
