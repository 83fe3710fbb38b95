"""schotter: a grid of gravel stones, perturbed by seed-driven randomness."""

__version__ = "0.1.0"
