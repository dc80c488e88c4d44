"""
Normalization primitives shared by every category scorer.

All functions are pure and tolerate out-of-domain input by clamping.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from .constants import (
    MINORITY_BASE,
    MINORITY_DEFICIT_SLOPE,
    MINORITY_SURPLUS_SLOPE,
    NEUTRAL_SCORE,
    PLATEAU_FLOOR,
    PLATEAU_KNEE,
    POPULATION_MAX_PENALTY,
    THRESHOLD_PENALTY_CAP,
    THRESHOLD_PENALTY_SCALE,
)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (72.5 -> 73), unlike the builtin's banker's rounding.

    Returns an int when ``ndigits`` is 0.
    """
    scale = 10**ndigits
    rounded = math.floor(value * scale + 0.5) / scale
    return int(rounded) if ndigits == 0 else rounded


def normalize_to_range(
    value: float,
    low: float,
    high: float,
    higher_is_better: bool = True,
) -> float:
    """Linearly rescale ``value`` from [low, high] onto 0-100.

    Values outside the range are clamped first. When lower raw values are
    better the result is mirrored (100 minus the rescaled value).
    """
    if high <= low:
        return NEUTRAL_SCORE
    position = (clamp(value, low, high) - low) / (high - low)
    score = position * 100.0
    return score if higher_is_better else 100.0 - score


def critical_mass_score(
    value: float,
    minimum: float,
    plateau: float,
    maximum: float,
    floor: float = PLATEAU_FLOOR,
) -> float:
    """Logarithmic plateau curve for amenities where "enough" beats "more".

    At or below ``minimum`` the score is ``floor``; it climbs linearly to 75
    at ``plateau`` and then logarithmically towards 100 at ``maximum``.
    """
    if value <= minimum:
        return floor
    if value >= maximum:
        return 100.0
    if value >= plateau:
        progress = (value - plateau) / (maximum - plateau)
        return PLATEAU_KNEE + (100.0 - PLATEAU_KNEE) * math.log10(1.0 + progress * 9.0)
    progress = (value - minimum) / (plateau - minimum)
    return floor + (PLATEAU_KNEE - floor) * progress


def importance_to_k(weight: float) -> float:
    """Map a 0-100 importance weight to a Gaussian steepness of 1.0-3.0."""
    return 1.0 + clamp(weight) / 50.0


def gaussian_decay(actual: float, target: float, k: float) -> float:
    distance = actual - target
    return 100.0 * math.exp(-k * distance * distance)


def graduated_deficit_penalty(
    actual: float,
    minimum: float,
    max_penalty: float = POPULATION_MAX_PENALTY,
) -> int:
    """Whole points to subtract when ``actual`` falls short of ``minimum``.

    Proportional to the fractional shortfall and capped at ``max_penalty``.
    """
    if minimum <= 0:
        return 0
    actual = max(0.0, actual)
    if actual >= minimum:
        return 0
    shortfall = (minimum - actual) / minimum
    return round_half_up(max_penalty * min(1.0, shortfall))


def minority_presence_score(actual: float, minimum: float) -> float:
    if actual >= minimum:
        return min(100.0, MINORITY_BASE + (actual - minimum) * MINORITY_SURPLUS_SLOPE)
    return max(0.0, MINORITY_BASE - (minimum - actual) * MINORITY_DEFICIT_SLOPE)


def overshoot_penalty(
    actual: float,
    limit: float,
    scale: float = THRESHOLD_PENALTY_SCALE,
    cap: float = THRESHOLD_PENALTY_CAP,
) -> float:
    """Points lost for exceeding a user maximum, proportional to the overshoot."""
    if limit <= 0 or actual <= limit:
        return 0.0
    return min(cap, (actual - limit) / limit * scale)


def weighted_average(pairs: Iterable[tuple[float, float]]) -> float | None:
    """Average of ``(score, weight)`` pairs, or None when no weight is active."""
    total = 0.0
    total_weight = 0.0
    for score, weight in pairs:
        if weight <= 0:
            continue
        total += score * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return total / total_weight
