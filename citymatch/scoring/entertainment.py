from __future__ import annotations

from ..metrics.models import CulturalMetrics, League, MetricRecord
from ..preferences.models import Category, EntertainmentPreferences, Preferences
from .constants import (
    CUISINE_DIVERSITY_RANGE,
    LATE_NIGHT_BONUS,
    LATE_NIGHT_BONUS_MIN_VENUES,
    URBAN_RANGES,
)
from .factors import (
    CategoryResult,
    FactorAnalysis,
    build_result,
    fmt,
    make_factor,
    status_from_score,
)
from .primitives import critical_mass_score, normalize_to_range
from .recreation import score_recreation


def _plateau(value: float, key: str) -> float:
    low, plateau, high = URBAN_RANGES[key]
    return critical_mass_score(value, low, plateau, high)


def sports_score(teams: dict[League, int]) -> float:
    """Step table over total pro teams with a bonus for league variety.

    0 teams scores 30; each added team is worth less, so 5-6 teams land
    around 85-90 and 9+ teams approach 100.
    """
    total = sum(count for count in teams.values() if count > 0)
    leagues = sum(1 for count in teams.values() if count > 0)

    if total == 0:
        score = 30.0
    elif total <= 2:
        score = 50.0 + total * 10
    elif total <= 4:
        score = 65.0 + (total - 2) * 7
    elif total <= 6:
        score = 80.0 + (total - 4) * 5
    elif total <= 8:
        score = 92.0 + (total - 6) * 2
    else:
        score = min(100.0, 97.0 + (total - 8))

    if leagues >= 4:
        score = min(100.0, score + 5)
    elif leagues >= 3:
        score = min(100.0, score + 3)
    return score


def _nightlife(cultural: CulturalMetrics, weight: float) -> FactorAnalysis | None:
    bars = cultural.bars_and_clubs_per_10k
    if bars is None:
        return None
    score = _plateau(bars, "bars_and_clubs_per_10k")
    explanation = f"{fmt(bars)} bars and clubs per 10K residents."
    late = cultural.late_night_venues
    if late is not None and late >= LATE_NIGHT_BONUS_MIN_VENUES:
        score = min(100.0, score + LATE_NIGHT_BONUS)
        explanation += f" {fmt(late)} late-night venues."
    return make_factor(
        key="nightlife",
        name="Nightlife",
        weight=weight,
        value=bars,
        unit="per 10K",
        score=score,
        status=status_from_score(score),
        explanation=explanation,
    )


def _arts(cultural: CulturalMetrics, weight: float) -> FactorAnalysis | None:
    subscores = []
    parts = []
    if cultural.museums is not None:
        subscores.append(_plateau(cultural.museums, "museums"))
        parts.append(f"{fmt(cultural.museums)} museums")
    if cultural.theaters is not None and cultural.theaters > 0:
        subscores.append(min(100.0, 50.0 + cultural.theaters * 3))
        parts.append(f"{fmt(cultural.theaters)} theaters")
    if cultural.music_venues is not None and cultural.music_venues > 0:
        subscores.append(min(100.0, 50.0 + cultural.music_venues * 2))
        parts.append(f"{fmt(cultural.music_venues)} music venues")
    if not subscores:
        return None
    score = sum(subscores) / len(subscores)
    return make_factor(
        key="arts",
        name="Arts & Culture",
        weight=weight,
        value=cultural.museums,
        unit="museums",
        score=score,
        status=status_from_score(score),
        explanation=", ".join(parts) + ".",
    )


def _dining(cultural: CulturalMetrics, weight: float) -> FactorAnalysis | None:
    subscores = []
    parts = []
    if cultural.restaurants_per_10k is not None:
        subscores.append(_plateau(cultural.restaurants_per_10k, "restaurants_per_10k"))
        parts.append(f"{fmt(cultural.restaurants_per_10k)} restaurants per 10K")
    if cultural.cuisine_diversity is not None:
        low, high = CUISINE_DIVERSITY_RANGE
        subscores.append(normalize_to_range(cultural.cuisine_diversity, low, high))
        parts.append(f"{fmt(cultural.cuisine_diversity)} distinct cuisines")
    if not subscores:
        return None
    score = sum(subscores) / len(subscores)
    return make_factor(
        key="dining",
        name="Dining",
        weight=weight,
        value=cultural.restaurants_per_10k,
        unit="per 10K",
        score=score,
        status=status_from_score(score),
        explanation=", ".join(parts) + ".",
    )


def _sports(cultural: CulturalMetrics, weight: float) -> FactorAnalysis | None:
    teams = cultural.sports_teams
    if teams is None:
        return None
    score = sports_score(teams)
    total = sum(count for count in teams.values() if count > 0)
    if total:
        roster = ", ".join(f"{count} {league.value.upper()}" for league, count in sorted(teams.items()) if count > 0)
        explanation = f"{total} pro teams: {roster}."
    else:
        explanation = "No major professional sports teams."
    return make_factor(
        key="sports",
        name="Pro Sports",
        weight=weight,
        value=total,
        unit="teams",
        score=score,
        status=status_from_score(score),
        explanation=explanation,
    )


def _recreation(record: MetricRecord, prefs: EntertainmentPreferences, weight: float) -> FactorAnalysis | None:
    result = score_recreation(
        record.quality_of_life.recreation,
        prefs.nature_importance,
        prefs.beach_importance,
        prefs.mountain_importance,
    )
    if result is None:
        return None
    return make_factor(
        key="recreation",
        name="Outdoor Recreation",
        weight=weight,
        value=record.quality_of_life.recreation.trail_miles_within_10mi,
        unit="mi trails",
        score=result.score,
        status=status_from_score(result.score),
        explanation=result.describe(),
    )


def score_entertainment(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    """Urban amenities on critical-mass curves, pro sports and outdoor recreation."""
    ent = prefs.advanced.entertainment
    cultural = record.cultural
    candidates = (
        (ent.nightlife_importance, lambda w: _nightlife(cultural, w)),
        (ent.arts_importance, lambda w: _arts(cultural, w)),
        (ent.dining_importance, lambda w: _dining(cultural, w)),
        (ent.sports_importance, lambda w: _sports(cultural, w)),
        (ent.recreation_importance, lambda w: _recreation(record, ent, w)),
    )
    factors = []
    for weight, builder in candidates:
        if weight <= 0:
            continue
        factor = builder(weight)
        if factor is not None:
            factors.append(factor)
    return build_result(Category.entertainment, factors)
