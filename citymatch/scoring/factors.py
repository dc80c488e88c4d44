from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field

from ..preferences.models import Category
from .constants import NEUTRAL_SCORE
from .primitives import clamp, round_half_up, weighted_average

# Sub-score buckets used when no domain-specific condition applies
GOOD_SCORE = 70.0
WARNING_SCORE = 45.0
BAD_SCORE = 30.0
# Relative threshold miss that turns a warning into a problem
BAD_OVERSHOOT = 0.2


class FactorStatus(str, Enum):
    good = "good"
    warning = "warning"
    bad = "bad"
    neutral = "neutral"


class ThresholdKind(str, Enum):
    min = "min"
    max = "max"


class Threshold(BaseModel):
    value: float
    kind: ThresholdKind
    label: str


class FactorAnalysis(BaseModel):
    key: str
    name: str
    weight: float = Field(..., ge=0.0, description="Effective weight in the category average")
    weight_percent: int = Field(default=0, description="Share of the total active weight")
    value: float | str | None = None
    unit: str = ""
    threshold: Threshold | None = None
    score: float = Field(..., ge=0.0, le=100.0)
    status: FactorStatus = FactorStatus.neutral
    explanation: str = ""
    descriptive: bool = False


class Adjustment(BaseModel):
    """A standalone reduction applied after the weighted average."""

    key: str
    name: str
    points: float
    explanation: str


class CategoryResult(BaseModel):
    category: Category
    value: int = Field(..., ge=0, le=100)
    factors: list[FactorAnalysis] = Field(default_factory=list)
    adjustments: list[Adjustment] = Field(default_factory=list)


def make_factor(
    key: str,
    name: str,
    weight: float,
    value: float | str | None,
    score: float,
    status: FactorStatus,
    explanation: str,
    unit: str = "",
    threshold: Threshold | None = None,
    descriptive: bool = False,
) -> FactorAnalysis:
    """Build a factor, fixing its sub-score to the precision the average uses."""
    return FactorAnalysis(
        key=key,
        name=name,
        weight=weight,
        value=value,
        unit=unit,
        threshold=threshold,
        score=round_half_up(clamp(score), 1),
        status=status,
        explanation=explanation.strip(),
        descriptive=descriptive,
    )


def fmt(value: float) -> str:
    """Compact human-readable number for explanations."""
    if abs(value) >= 1000:
        return f"{value:,.0f}"
    return f"{round(value, 1):g}"


def status_from_score(score: float) -> FactorStatus:
    if score >= GOOD_SCORE:
        return FactorStatus.good
    if score < BAD_SCORE:
        return FactorStatus.bad
    if score < WARNING_SCORE:
        return FactorStatus.warning
    return FactorStatus.neutral


def threshold_miss(value: float, limit: float, kind: ThresholdKind) -> float:
    """Relative amount by which ``value`` misses a threshold, 0 when it is met."""
    if kind is ThresholdKind.max:
        if value <= limit:
            return 0.0
        return (value - limit) / limit if limit > 0 else 1.0
    if value >= limit:
        return 0.0
    return (limit - value) / limit if limit > 0 else 1.0


def status_for_threshold(
    value: float,
    limit: float,
    kind: ThresholdKind,
    score: float,
) -> FactorStatus:
    miss = threshold_miss(value, limit, kind)
    if miss > BAD_OVERSHOOT:
        return FactorStatus.bad
    if miss > 0:
        return FactorStatus.warning
    status = status_from_score(score)
    # meeting the user's own threshold is never reported as a problem
    return FactorStatus.warning if status is FactorStatus.bad else status


def worst(*statuses: FactorStatus) -> FactorStatus:
    order = (FactorStatus.bad, FactorStatus.warning, FactorStatus.neutral, FactorStatus.good)
    for candidate in order:
        if candidate in statuses:
            return candidate
    return FactorStatus.neutral


def category_average(factors: Iterable[FactorAnalysis]) -> float | None:
    return weighted_average((f.score, f.weight) for f in factors if not f.descriptive)


def build_result(
    category: Category,
    factors: list[FactorAnalysis],
    adjustments: list[Adjustment] | None = None,
) -> CategoryResult:
    """Fold factors into a category score.

    Non-descriptive factors with positive weight form the weighted average;
    with none, the category is neutral. Adjustments are subtracted from the
    rounded average, never weighted.
    """
    adjustments = adjustments or []
    active_weight = sum(f.weight for f in factors if not f.descriptive and f.weight > 0)
    for f in factors:
        if f.descriptive or active_weight <= 0:
            f.weight_percent = 0
        else:
            f.weight_percent = round_half_up(f.weight / active_weight * 100)

    value = round_half_up(clamp(base_score(factors) - sum(a.points for a in adjustments)))
    return CategoryResult(category=category, value=value, factors=factors, adjustments=adjustments)


def base_score(factors: Iterable[FactorAnalysis]) -> int:
    """Rounded weighted average before adjustments, neutral when empty."""
    average = category_average(factors)
    return round_half_up(clamp(average if average is not None else NEUTRAL_SCORE))
