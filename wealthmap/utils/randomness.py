"""Injectable random source for the simulated market terms.

Valuation and market analytics draw a few noise terms (appreciation, price
growth, days on market). Callers pass a ``numpy.random.Generator`` to pin
them; otherwise a generator seeded from ``WEALTHMAP_RANDOM_SEED`` (or OS
entropy) is created per call.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import RANDOM_SEED


def resolve_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(RANDOM_SEED)


def symmetric_noise(rng: np.random.Generator, spread: float) -> float:
    """Uniform draw in ``[-spread / 2, spread / 2)``."""

    return float(rng.uniform(-spread / 2, spread / 2))


__all__ = ["resolve_rng", "symmetric_noise"]
