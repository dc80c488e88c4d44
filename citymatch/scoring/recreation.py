"""
Outdoor recreation sub-scorer shared by quality of life and entertainment.

Blends three access scores by the caller's sub-weights:

- nature: average of trail miles, park acres and protected land
- beach: full credit within 15 mi of coastline, linear decay to zero at 100 mi
- mountain: elevation relief within 30 mi, plus a bonus for a nearby ski resort

Sub-scores whose inputs are missing are left out of the blend.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..metrics.models import RecreationMetrics
from .constants import (
    COAST_DECAY_PER_MI,
    COAST_FULL_CREDIT_MI,
    COAST_NO_CREDIT_MI,
    GOOD_WATER_QUALITY_MIN,
    RECREATION_RANGES,
    SKI_RESORT_BONUS,
    SKI_RESORT_BONUS_MI,
)
from .factors import fmt
from .primitives import clamp, normalize_to_range, weighted_average


@dataclass(frozen=True)
class RecreationScore:
    score: float
    # sub-score per access type that contributed
    parts: dict[str, float] = field(default_factory=dict)
    notes: tuple[str, ...] = ()

    def describe(self) -> str:
        parts = ", ".join(f"{name} {fmt(value)}" for name, value in self.parts.items())
        text = f"Outdoor access: {parts}."
        if self.notes:
            text += " " + " ".join(self.notes)
        return text


def nature_score(rec: RecreationMetrics) -> float | None:
    subscores = []
    if rec.trail_miles_within_10mi is not None:
        low, high = RECREATION_RANGES["trail_miles"]
        subscores.append(normalize_to_range(rec.trail_miles_within_10mi, low, high))
    if rec.park_acres_per_1k is not None:
        low, high = RECREATION_RANGES["park_acres"]
        subscores.append(normalize_to_range(rec.park_acres_per_1k, low, high))
    if rec.protected_land_percent is not None:
        low, high = RECREATION_RANGES["protected_land_percent"]
        subscores.append(normalize_to_range(rec.protected_land_percent, low, high))
    if not subscores:
        return None
    return sum(subscores) / len(subscores)


def beach_score(rec: RecreationMetrics) -> float | None:
    distance = rec.coastline_distance_mi
    if distance is None:
        return None
    if distance <= COAST_FULL_CREDIT_MI:
        return 100.0
    if distance > COAST_NO_CREDIT_MI:
        return 0.0
    return clamp(100.0 - (distance - COAST_FULL_CREDIT_MI) * COAST_DECAY_PER_MI)


def mountain_score(rec: RecreationMetrics) -> float | None:
    if rec.max_elevation_delta is None:
        return None
    low, high = RECREATION_RANGES["elevation_delta"]
    score = normalize_to_range(rec.max_elevation_delta, low, high)
    if rec.nearest_ski_resort_mi is not None and rec.nearest_ski_resort_mi <= SKI_RESORT_BONUS_MI:
        score = min(100.0, score + SKI_RESORT_BONUS)
    return score


def score_recreation(
    rec: RecreationMetrics,
    nature_weight: float,
    beach_weight: float,
    mountain_weight: float,
) -> RecreationScore | None:
    """Weighted blend of nature, beach and mountain access, or None without data."""
    candidates = (
        ("nature", nature_weight, nature_score),
        ("beach", beach_weight, beach_score),
        ("mountain", mountain_weight, mountain_score),
    )
    parts: dict[str, float] = {}
    pairs = []
    for name, weight, scorer in candidates:
        if weight <= 0:
            continue
        score = scorer(rec)
        if score is None:
            continue
        parts[name] = score
        pairs.append((score, weight))

    blended = weighted_average(pairs)
    if blended is None:
        return None

    notes = []
    if "beach" in parts and rec.coastline_distance_mi is not None:
        notes.append(f"Coastline {fmt(rec.coastline_distance_mi)} mi away.")
        if rec.water_quality_index is not None and rec.water_quality_index >= GOOD_WATER_QUALITY_MIN:
            notes.append(f"Clean water (quality index {fmt(rec.water_quality_index)}).")
    if "mountain" in parts and rec.nearest_ski_resort_mi is not None and rec.nearest_ski_resort_mi <= SKI_RESORT_BONUS_MI:
        notes.append(f"Ski resort {fmt(rec.nearest_ski_resort_mi)} mi away.")
    return RecreationScore(score=blended, parts=parts, notes=tuple(notes))
