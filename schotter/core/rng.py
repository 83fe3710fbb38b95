from __future__ import annotations

from typing import Optional

import numpy as np

SEED_LIMIT = 2**64


class Source:
    """Thin wrapper over ``numpy.random.Generator`` with the draws the engines need."""

    def __init__(self, generator: np.random.Generator):
        self.generator = generator

    def uniform(self, low: float, high: float, size=None):
        # [low, high)
        return self.generator.uniform(low, high, size)

    def random(self, size=None):
        return self.generator.random(size)

    def integers(self, low: int, high: int, size=None):
        # inclusive on both ends
        return self.generator.integers(low, high, size=size, endpoint=True)

    def index(self, n: int, size=None):
        return self.generator.integers(0, n, size=size)


def seeded(seed: int) -> Source:
    seed = int(seed)
    if not 0 <= seed < SEED_LIMIT:
        raise ValueError(f"seed must be in [0, 2**64), got {seed}")
    return Source(np.random.default_rng(seed))


def ambient(generator: Optional[np.random.Generator] = None) -> Source:
    """Unseeded source backed by OS entropy."""
    return Source(generator if generator is not None else np.random.default_rng())
