"""Weighting and averaging helpers for pick-position statistics."""

from __future__ import annotations

import math
from typing import Iterable, Tuple

import numpy as np

# Each further copy of a card counts half as much as the previous one
COPY_WEIGHT_DECAY = 0.5
# Copies nobody drafted count half as much as picked copies
UNPICKED_WEIGHT = 0.5


def calculate_pick_weight(copy_number: int, was_picked: bool) -> float:
    """Weight of one observation: ``0.5 ** (copy - 1)``, halved again if unpicked."""
    copy_weight = COPY_WEIGHT_DECAY ** (copy_number - 1)
    unpicked_weight = 1.0 if was_picked else UNPICKED_WEIGHT
    return copy_weight * unpicked_weight


def weighted_geometric_mean(items: Iterable[Tuple[float, float]]) -> float:
    """Compute ``exp(sum(w * ln(v)) / sum(w))`` over ``(weight, value)`` pairs.

    Values <= 0 are dropped since their logarithm is undefined. Returns 0.0 when
    nothing valid remains or the remaining weights sum to zero.
    """
    valid = [(weight, value) for weight, value in items if value > 0]
    if not valid:
        return 0.0

    weights = np.array([weight for weight, _ in valid], dtype=float)
    values = np.array([value for _, value in valid], dtype=float)

    total_weight = weights.sum()
    if total_weight == 0:
        return 0.0

    return float(np.exp(np.sum(weights * np.log(values)) / total_weight))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))
