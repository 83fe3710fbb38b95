"""Perturbation engines.

Both engines take the field and a parameter snapshot and mutate the field in
place, once per tick:

- ``StaticEngine`` recomputes every stone from a generator re-seeded with
  ``params.seed`` at the start of the tick, so the picture depends only on
  the seed, the two scales and the grid.
- ``AnimatedEngine`` runs a Holding/Deciding state machine per stone and
  eases offsets and rotation linearly toward randomly drawn targets.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from .params import SketchParams
from .rng import SEED_LIMIT, Source, ambient, seeded
from .stones import Gravel

CYCLES_MIN = 50
CYCLES_MAX = 300
ROTATION_SPAN = math.pi / 2  # targets fall in [-pi/4, pi/4)

VARIANTS = ("static", "animated")


def draw_targets(
    depth: np.ndarray, params: SketchParams, source: Source
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Target offset_x, offset_y and rotation for stones at the given depths.

    Draws three values per stone, stone by stone in order x, y, rotation.
    """
    depth = np.asarray(depth, dtype=np.float64)
    disp = depth * params.displacement
    rot = depth * params.rotation
    draws = source.uniform(-0.5, 0.5, size=(depth.size, 3))
    return disp * draws[:, 0], disp * draws[:, 1], rot * (draws[:, 2] * ROTATION_SPAN)


class StaticEngine:
    variant = "static"

    def step(self, gravel: Gravel, params: SketchParams) -> None:
        # out-of-range seeds wrap instead of failing the tick
        source = seeded(int(params.seed) % SEED_LIMIT)
        gravel.offset_x[:], gravel.offset_y[:], gravel.rotation[:] = draw_targets(
            gravel.depth, params, source
        )


class AnimatedEngine:
    variant = "animated"

    def __init__(self, source: Optional[Source] = None):
        self.source = source or ambient()

    def step(self, gravel: Gravel, params: SketchParams) -> None:
        holding = gravel.cycles > 0
        deciding = np.flatnonzero(~holding)

        gravel.offset_x[holding] += gravel.velocity_x[holding]
        gravel.offset_y[holding] += gravel.velocity_y[holding]
        gravel.rotation[holding] += gravel.velocity_rotation[holding]
        gravel.cycles[holding] -= 1

        if deciding.size == 0:
            return

        rolls = self.source.random(deciding.size)
        dormant = deciding[rolls > params.motion]
        moving = deciding[rolls <= params.motion]

        if dormant.size:
            gravel.velocity_x[dormant] = 0.0
            gravel.velocity_y[dormant] = 0.0
            gravel.velocity_rotation[dormant] = 0.0
            gravel.cycles[dormant] = self.source.integers(CYCLES_MIN, CYCLES_MAX, size=dormant.size)

        if moving.size:
            tx, ty, tr = draw_targets(gravel.depth[moving], params, self.source)
            cycles = self.source.integers(CYCLES_MIN, CYCLES_MAX, size=moving.size)
            gravel.velocity_x[moving] = (tx - gravel.offset_x[moving]) / cycles
            gravel.velocity_y[moving] = (ty - gravel.offset_y[moving]) / cycles
            gravel.velocity_rotation[moving] = (tr - gravel.rotation[moving]) / cycles
            gravel.cycles[moving] = cycles


def make_engine(variant: str, source: Optional[Source] = None):
    if variant == "static":
        return StaticEngine()
    if variant == "animated":
        return AnimatedEngine(source)
    raise ValueError(f"unknown variant {variant!r}, expected one of {VARIANTS}")
