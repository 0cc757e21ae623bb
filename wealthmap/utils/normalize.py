"""Normalization utilities used for property and portfolio scoring."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Hashable, Iterable

import numpy as np


@dataclass(frozen=True)
class Bounds:
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


SCORE_BOUNDS = Bounds(0.0, 100.0)
RATIO_BOUNDS = Bounds(0.0, 1.0)


def clamp(value: float, minimum: float, maximum: float) -> float:
    return Bounds(minimum, maximum).clamp(value)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (toward +inf), matching JavaScript Math.round."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp_score(value: float) -> int:
    """Round to the nearest integer and clamp into the 0-100 score range."""

    return int(SCORE_BOUNDS.clamp(round_half_up(value)))


def category_shares(labels: Iterable[Hashable]) -> np.ndarray:
    """Return the share of each distinct label, in first-seen order."""

    counts = Counter(labels)
    total = sum(counts.values())
    if total == 0:
        return np.array([], dtype=float)
    return np.array(list(counts.values()), dtype=float) / total


def herfindahl_index(shares: np.ndarray) -> float:
    """Sum of squared shares: 1.0 for a single category, 1/n for n equal ones."""

    if shares.size == 0:
        return 0.0
    return float(np.sum(np.square(shares)))


__all__ = [
    "Bounds",
    "SCORE_BOUNDS",
    "RATIO_BOUNDS",
    "clamp",
    "round_half_up",
    "clamp_score",
    "category_shares",
    "herfindahl_index",
]
