"""
Public entry points of the scoring engine.

Every function here is pure with respect to its inputs: neither the metric
records nor the preferences are mutated, and identical inputs always produce
identical output. ``score_all`` results are memoized per (record, prefs).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .metrics.data_store import get_catalog, load_catalog, record_fingerprint, records_from_frame  # noqa: F401
from .metrics.models import MetricRecord
from .preferences.io import PreferenceImportError, export_preferences, import_preferences  # noqa: F401
from .preferences.models import DEFAULT_PREFERENCES, Category, Preferences
from .scoring.aggregator import LocationScore, RankingResult, build_location_score, rank_scores
from .scoring.cache import cache_get, cache_set, make_key
from .scoring.climate import score_climate
from .scoring.cost import score_cost_of_living
from .scoring.demographics import score_demographics
from .scoring.entertainment import score_entertainment
from .scoring.explain import CategoryBreakdown, build_breakdown
from .scoring.factors import CategoryResult, FactorAnalysis
from .scoring.filters import evaluate_filters
from .scoring.quality_of_life import score_quality_of_life
from .scoring.values import score_values

logger = logging.getLogger(__name__)

Scorer = Callable[[MetricRecord, Preferences], CategoryResult]

SCORERS: dict[Category, Scorer] = {
    Category.climate: score_climate,
    Category.cost_of_living: score_cost_of_living,
    Category.demographics: score_demographics,
    Category.quality_of_life: score_quality_of_life,
    Category.values: score_values,
    Category.entertainment: score_entertainment,
}


def score_category(metrics: MetricRecord, prefs: Preferences, category: Category | str) -> CategoryResult:
    return SCORERS[Category(category)](metrics, prefs)


def score_all(
    metrics: MetricRecord,
    prefs: Preferences,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> LocationScore:
    """Score every category, apply hard filters and compute the weighted total."""
    prefs_key = make_key(prefs) if config.cache_enabled else None
    return _score_all(metrics, prefs, config, prefs_key)


def _score_all(
    metrics: MetricRecord,
    prefs: Preferences,
    config: EngineConfig,
    prefs_key: str | None,
) -> LocationScore:
    key = None
    if prefs_key is not None:
        key = make_key("score_all", record_fingerprint(metrics), prefs_key)
        cached = cache_get(key, config)
        if cached is not None:
            return cached.model_copy(deep=True)

    results = {category: scorer(metrics, prefs) for category, scorer in SCORERS.items()}
    verdict = evaluate_filters(metrics, prefs.filters)
    if not verdict.included:
        logger.debug("Excluded %s: %s", metrics.location_id, verdict.reason)

    score = build_location_score(metrics, results, prefs.weights, verdict)
    if key is not None:
        cache_set(key, score.model_copy(deep=True), config)
    return score


def rank(
    locations: Iterable[MetricRecord] | None = None,
    prefs: Preferences = DEFAULT_PREFERENCES,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> RankingResult:
    """Rank locations, defaulting to the loaded catalog.

    Included locations come first by descending total; excluded ones follow
    in the same order. Preferences are hashed once for the whole pass.
    """
    if locations is None:
        locations = get_catalog()
    prefs_key = make_key(prefs) if config.cache_enabled else None
    return rank_scores(_score_all(record, prefs, config, prefs_key) for record in locations)


def explain(metrics: MetricRecord, prefs: Preferences, category: Category | str) -> list[FactorAnalysis]:
    """The factors behind a category score, exactly as the scorer averaged them."""
    return score_category(metrics, prefs, category).factors


def explain_category(metrics: MetricRecord, prefs: Preferences, category: Category | str) -> CategoryBreakdown:
    return build_breakdown(score_category(metrics, prefs, category))
