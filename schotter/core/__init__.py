"""Core simulation primitives for schotter.

Modules:
- rng: seedable random source
- stones: per-stone state and field assembly
- params: tunable parameters
- engine: static and animated perturbation rules
- capture: when and under what name frames are exported
"""
