"""
Category breakdowns for display.

A breakdown wraps the exact factors the scorer averaged, so every sub-score
shown to the user is the number that produced the category score.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..preferences.models import Category
from .factors import Adjustment, CategoryResult, FactorAnalysis, FactorStatus, fmt


class CategoryBreakdown(BaseModel):
    category: Category
    score: int = Field(..., ge=0, le=100)
    factors: list[FactorAnalysis] = Field(default_factory=list)
    adjustments: list[Adjustment] = Field(default_factory=list)
    summary: str = ""


# (issues prefix, strengths prefix, fallback)
_SUMMARY_TEXT: dict[Category, tuple[str, str, str]] = {
    Category.climate: (
        "Climate concerns",
        "Climate strengths",
        "Climate is average for your preferences.",
    ),
    Category.cost_of_living: (
        "Cost concerns",
        "Cost advantages",
        "Cost of living is average.",
    ),
    Category.demographics: (
        "Demographics concerns",
        "Demographics strengths",
        "Demographics are average for your preferences.",
    ),
    Category.quality_of_life: (
        "The main issues are",
        "Strengths include",
        "This city has average quality of life metrics across the board.",
    ),
    Category.values: (
        "Cultural mismatches",
        "Cultural fits",
        "Cultural factors are neutral for your preferences.",
    ),
    Category.entertainment: (
        "Entertainment gaps",
        "Entertainment highlights",
        "Entertainment options are average for your preferences.",
    ),
}


def summarize(
    category: Category,
    factors: list[FactorAnalysis],
    adjustments: list[Adjustment] | None = None,
) -> str:
    issues_label, strengths_label, fallback = _SUMMARY_TEXT[category]
    bad = [f.name.lower() for f in factors if f.status is FactorStatus.bad]
    good = [f.name.lower() for f in factors if f.status is FactorStatus.good]

    parts = []
    if bad:
        parts.append(f"{issues_label}: {', '.join(bad)}.")
    if good:
        parts.append(f"{strengths_label}: {', '.join(good)}.")
    for adjustment in adjustments or []:
        parts.append(f"{adjustment.name}: -{fmt(adjustment.points)} points.")
    return " ".join(parts) if parts else fallback


def build_breakdown(result: CategoryResult) -> CategoryBreakdown:
    return CategoryBreakdown(
        category=result.category,
        score=result.value,
        factors=result.factors,
        adjustments=result.adjustments,
        summary=summarize(result.category, result.factors, result.adjustments),
    )
