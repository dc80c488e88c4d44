from __future__ import annotations

from ..metrics.models import CulturalMetrics, MetricRecord
from ..preferences.models import Category, PartisanPreference, Preferences, ValuesPreferences
from .constants import (
    DEALBREAKER_MAX_SCORE,
    DEALBREAKER_MIN_WEIGHT,
    NATIONAL_TRADITION_BASELINES,
    PARTISAN_TARGETS,
    STRONG_PARTISAN_MIN,
    TRIBAL_PENALTY_LEAN,
    TRIBAL_PENALTY_STRONG,
    TURNOUT_BLEND,
    TURNOUT_ONLY_WEIGHT,
    TURNOUT_RANGE,
)
from .factors import (
    Adjustment,
    CategoryResult,
    FactorAnalysis,
    FactorStatus,
    Threshold,
    ThresholdKind,
    base_score,
    build_result,
    fmt,
    make_factor,
    status_from_score,
)
from .primitives import clamp, gaussian_decay, importance_to_k, normalize_to_range


def lean_label(partisan_index: float) -> str:
    """Human label such as ``D+12`` or ``R+4`` for a -1..+1 partisan index."""
    points = round(abs(partisan_index) * 100)
    if points == 0:
        return "EVEN"
    return f"{'D' if partisan_index > 0 else 'R'}+{points}"


def political_score(partisan_index: float, prefs: ValuesPreferences, turnout: float | None) -> float:
    """Gaussian alignment against the preferred lean, with tribal penalty and optional turnout blend."""
    k = importance_to_k(prefs.partisan_weight)
    target = PARTISAN_TARGETS[prefs.partisan_preference.value]

    if prefs.partisan_preference is PartisanPreference.swing:
        # competitiveness: distance from an even split
        alignment = gaussian_decay(abs(partisan_index), 0.0, k)
    else:
        alignment = gaussian_decay(partisan_index, target, k)
        opposite = (partisan_index > 0 > target) or (partisan_index < 0 < target)
        if opposite:
            if abs(target) >= STRONG_PARTISAN_MIN:
                alignment *= TRIBAL_PENALTY_STRONG
            else:
                alignment *= TRIBAL_PENALTY_LEAN

    if prefs.prefer_high_turnout and turnout is not None:
        turnout_score = normalize_to_range(turnout, TURNOUT_RANGE.min, TURNOUT_RANGE.max)
        return clamp(alignment * (1.0 - TURNOUT_BLEND) + turnout_score * TURNOUT_BLEND)
    return clamp(alignment)


def turnout_tier_score(turnout: float) -> float:
    if turnout >= 75:
        return 100.0
    if turnout >= 70:
        return 90.0
    if turnout >= 65:
        return 80.0
    if turnout >= 60:
        return 65.0
    if turnout >= 55:
        return 50.0
    return 35.0


def traditions_score(
    adherents: dict[str, float | None],
    prefs: ValuesPreferences,
) -> tuple[float, list[str]] | None:
    """Presence of the selected traditions per 1,000 residents.

    Each tradition meeting the minimum earns a bonus tiered by how
    concentrated it is relative to the national rate; each one below it
    loses up to 20 points. Returns None when no selected tradition has data.
    """
    score = 50.0
    found = 0
    met = 0
    notes = []
    for tradition in prefs.religious_traditions:
        presence = adherents.get(tradition.value)
        if presence is None:
            continue
        found += 1
        if presence >= prefs.min_tradition_presence:
            met += 1
            concentration = presence / NATIONAL_TRADITION_BASELINES.get(tradition.value, 100.0)
            if concentration > 2.0:
                score += 20
            elif concentration > 1.5:
                score += 15
            elif concentration > 1.0:
                score += 10
            else:
                score += 5
            notes.append(f"{tradition.value} {fmt(presence)}/1K ({concentration:.1f}x national)")
        else:
            score -= min(20.0, (prefs.min_tradition_presence - presence) / 5.0)
            notes.append(f"{tradition.value} {fmt(presence)}/1K (below your minimum)")
    if found == 0:
        return None

    met_ratio = met / len(prefs.religious_traditions)
    if met_ratio == 1:
        score += 10
    elif met_ratio < 0.5:
        score -= 15
    return clamp(score), notes


def _political_factor(cultural: CulturalMetrics, prefs: ValuesPreferences) -> FactorAnalysis | None:
    pi = cultural.partisan_index
    if pi is None:
        return None
    score = political_score(pi, prefs, cultural.voter_turnout)
    preference = prefs.partisan_preference.value
    if prefs.partisan_preference is PartisanPreference.swing:
        explanation = f"Electorate leans {lean_label(pi)}; you prefer a competitive swing area."
    else:
        explanation = f"Electorate leans {lean_label(pi)} against your {preference} preference."
    if prefs.prefer_high_turnout and cultural.voter_turnout is not None:
        explanation += f" Voter turnout {fmt(cultural.voter_turnout)}% is blended in."
    return make_factor(
        key="political_alignment",
        name="Political Alignment",
        weight=prefs.partisan_weight,
        value=lean_label(pi),
        unit="",
        score=score,
        status=status_from_score(score),
        explanation=explanation,
    )


def _turnout_factor(cultural: CulturalMetrics) -> FactorAnalysis | None:
    turnout = cultural.voter_turnout
    if turnout is None:
        return None
    score = turnout_tier_score(turnout)
    return make_factor(
        key="voter_turnout",
        name="Civic Engagement",
        weight=TURNOUT_ONLY_WEIGHT,
        value=turnout,
        unit="% turnout",
        score=score,
        status=status_from_score(score),
        explanation=f"{fmt(turnout)}% of eligible voters turned out.",
    )


def _traditions_factor(cultural: CulturalMetrics, prefs: ValuesPreferences) -> FactorAnalysis | None:
    result = traditions_score(cultural.religious_adherents, prefs)
    if result is None:
        return None
    score, notes = result
    threshold = None
    if prefs.min_tradition_presence > 0:
        threshold = Threshold(value=prefs.min_tradition_presence, kind=ThresholdKind.min, label="Min per 1K")
    return make_factor(
        key="religious_traditions",
        name="Faith Communities",
        weight=prefs.traditions_weight,
        value=", ".join(t.value for t in prefs.religious_traditions),
        threshold=threshold,
        score=score,
        status=status_from_score(score),
        explanation="Presence: " + "; ".join(notes) + ".",
    )


def _religious_diversity_factor(cultural: CulturalMetrics, prefs: ValuesPreferences) -> FactorAnalysis | None:
    index = cultural.religious_diversity_index
    if index is None:
        return None
    return make_factor(
        key="religious_diversity",
        name="Religious Diversity",
        weight=prefs.diversity_weight,
        value=index,
        unit="/100",
        score=index,
        status=status_from_score(index),
        explanation=f"Religious diversity index of {fmt(index)}/100.",
    )


def score_values(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    """Political alignment and faith community fit.

    A heavily weighted political preference that matches poorly is a
    dealbreaker: the category is scaled by ``0.5 + political/80`` after
    averaging so good religious matches cannot dilute it.
    """
    cultural = record.cultural
    values_prefs = prefs.advanced.values
    factors = []
    adjustments = []

    political = None
    partisan_active = (
        values_prefs.partisan_preference is not PartisanPreference.neutral
        and values_prefs.partisan_weight > 0
    )
    if partisan_active:
        political = _political_factor(cultural, values_prefs)
        if political is not None:
            factors.append(political)
    elif values_prefs.prefer_high_turnout:
        turnout = _turnout_factor(cultural)
        if turnout is not None:
            factors.append(turnout)

    if values_prefs.religious_traditions and values_prefs.traditions_weight > 0:
        traditions = _traditions_factor(cultural, values_prefs)
        if traditions is not None:
            factors.append(traditions)

    if values_prefs.prefer_religious_diversity and values_prefs.diversity_weight > 0:
        diversity = _religious_diversity_factor(cultural, values_prefs)
        if diversity is not None:
            factors.append(diversity)

    if (
        political is not None
        and values_prefs.partisan_weight > DEALBREAKER_MIN_WEIGHT
        and political.score < DEALBREAKER_MAX_SCORE
    ):
        multiplier = 0.5 + political.score / 80.0
        political.status = FactorStatus.bad
        adjustments.append(Adjustment(
            key="political_dealbreaker",
            name="Political Dealbreaker",
            points=base_score(factors) * (1.0 - multiplier),
            explanation=(
                f"Political alignment of {fmt(political.score)} on a high-priority preference "
                f"scales the category by {multiplier:.2f}."
            ),
        ))

    return build_result(Category.values, factors, adjustments)
