from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

import pandas as pd
from pydantic import BaseModel, Field

from ..metrics.models import MetricRecord
from ..preferences.models import Category, CategoryWeights
from .constants import NEUTRAL_SCORE
from .factors import CategoryResult
from .filters import FilterVerdict
from .primitives import clamp, round_half_up, weighted_average

logger = logging.getLogger(__name__)


class LocationScore(BaseModel):
    location_id: str
    name: str = ""
    category_scores: dict[Category, int] = Field(default_factory=dict)
    total_score: float = Field(..., ge=0.0, le=100.0)
    included: bool = True
    exclusion_reason: str | None = None


class RankingResult(BaseModel):
    rankings: list[LocationScore] = Field(default_factory=list)
    included_count: int = 0
    excluded_count: int = 0


def total_score(category_scores: Mapping[Category, float], weights: CategoryWeights) -> float:
    """Weighted average over categories with nonzero weight, 50 when none are weighted."""
    average = weighted_average(
        (score, weights.for_category(category)) for category, score in category_scores.items()
    )
    if average is None:
        return NEUTRAL_SCORE
    return round_half_up(clamp(average), 1)


def build_location_score(
    record: MetricRecord,
    results: Mapping[Category, CategoryResult],
    weights: CategoryWeights,
    verdict: FilterVerdict,
) -> LocationScore:
    category_scores = {category: result.value for category, result in results.items()}
    return LocationScore(
        location_id=record.location_id,
        name=record.display_name,
        category_scores=category_scores,
        total_score=total_score(category_scores, weights),
        included=verdict.included,
        exclusion_reason=verdict.reason,
    )


def _sort_key(score: LocationScore) -> tuple[float, str]:
    return (-score.total_score, score.location_id)


def rank_scores(scores: Iterable[LocationScore]) -> RankingResult:
    """Included locations by descending total, then every excluded location.

    Ties break on location id so the order is stable for a given input.
    """
    scores = list(scores)
    included = sorted((s for s in scores if s.included), key=_sort_key)
    excluded = sorted((s for s in scores if not s.included), key=_sort_key)
    logger.info("Ranked %d locations (%d included, %d excluded)", len(scores), len(included), len(excluded))
    return RankingResult(
        rankings=included + excluded,
        included_count=len(included),
        excluded_count=len(excluded),
    )


def ranking_to_frame(result: RankingResult) -> pd.DataFrame:
    """Flatten a ranking into one row per location with a column per category."""
    rows = []
    for position, score in enumerate(result.rankings, start=1):
        row = {
            "rank": position,
            "location_id": score.location_id,
            "name": score.name,
            "total_score": score.total_score,
            "included": score.included,
            "exclusion_reason": score.exclusion_reason,
        }
        for category in Category:
            row[category.value] = score.category_scores.get(category)
        rows.append(row)
    columns = ["rank", "location_id", "name", "total_score", "included", "exclusion_reason"]
    columns += [category.value for category in Category]
    return pd.DataFrame(rows, columns=columns)
