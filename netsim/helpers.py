"""Random number helpers used by the simulation."""

from __future__ import annotations

import random

_rng = random.Random()


def default_probability_generator() -> float:
    """Return a pseudo-random float in [0, 1)."""
    return _rng.random()