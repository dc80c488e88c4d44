from __future__ import annotations

from ..metrics.models import CrimeTrend, MetricRecord, QualityOfLifeMetrics
from ..preferences.models import Category, Preferences, QualityOfLifePreferences
from .constants import (
    BELOW_MINIMUM_FACTOR,
    CRIME_RANGE,
    CRIME_TREND_POINTS,
    FIBER_REQUIRED_PENALTY,
    FIBER_REQUIRED_THRESHOLD,
    GRADUATION_RANGE,
    HEALTHY_AIR_RANGE,
    HPSA_PENALTY_CAP,
    PHYSICIAN_SHORTFALL_PENALTY,
    PHYSICIANS_RANGE,
    PROVIDER_COMPETITION_BONUS,
    SCHOOL_RATIO_PENALTY,
    STUDENT_TEACHER_RANGE,
)
from .factors import (
    CategoryResult,
    FactorAnalysis,
    FactorStatus,
    Threshold,
    ThresholdKind,
    build_result,
    fmt,
    make_factor,
    status_for_threshold,
    status_from_score,
    worst,
)
from .primitives import normalize_to_range, overshoot_penalty
from .recreation import score_recreation


def _walkability(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    subscores = []
    notes = []
    status = FactorStatus.neutral

    walk = qol.walk_score
    if walk is not None:
        if walk < prefs.min_walk_score:
            subscores.append(walk * BELOW_MINIMUM_FACTOR)
            status = FactorStatus.bad
            notes.append(f"Walk Score {fmt(walk)} is below your minimum of {fmt(prefs.min_walk_score)}.")
        else:
            subscores.append(walk)
            if walk >= 70:
                status = FactorStatus.good
                notes.append(f"Walk Score {fmt(walk)} indicates a very walkable area.")

    transit = qol.transit_score
    if transit is not None:
        if transit < prefs.min_transit_score:
            subscores.append(transit * BELOW_MINIMUM_FACTOR)
            status = worst(status, FactorStatus.warning)
            notes.append(f"Transit Score {fmt(transit)} is below your minimum of {fmt(prefs.min_transit_score)}.")
        else:
            subscores.append(transit)
            if transit < 40:
                status = worst(status, FactorStatus.warning)
                notes.append(f"Transit Score {fmt(transit)} is weak, with limited public transportation.")

    if qol.bike_score is not None:
        subscores.append(qol.bike_score)

    if not subscores:
        return None
    threshold = None
    if prefs.min_walk_score > 0:
        threshold = Threshold(value=prefs.min_walk_score, kind=ThresholdKind.min, label="Min Walk Score")
    return make_factor(
        key="walkability",
        name="Walkability",
        weight=weight,
        value=walk if walk is not None else transit,
        unit="/100",
        threshold=threshold,
        score=sum(subscores) / len(subscores),
        status=status,
        explanation=" ".join(notes) or "Walkability is average for your preferences.",
    )


def _safety(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    rate = qol.violent_crime_rate
    if rate is None:
        return None
    limit = prefs.max_violent_crime_rate
    score = normalize_to_range(rate, CRIME_RANGE.min, CRIME_RANGE.max, higher_is_better=False)
    score -= overshoot_penalty(rate, limit)

    if qol.crime_trend is CrimeTrend.falling and prefs.prefer_falling_crime:
        score += CRIME_TREND_POINTS
    elif qol.crime_trend is CrimeTrend.rising:
        score -= CRIME_TREND_POINTS

    if rate > limit:
        over = (rate - limit) / limit * 100
        explanation = f"Violent crime rate of {fmt(rate)}/100K exceeds your max of {fmt(limit)} by {over:.0f}%."
    elif rate < 300:
        explanation = f"Violent crime rate of {fmt(rate)}/100K is well below average (US avg ~380)."
    else:
        explanation = f"Violent crime rate of {fmt(rate)}/100K is within your acceptable range."
    if qol.crime_trend is not None:
        explanation += f" Three-year trend: {qol.crime_trend.value}."

    status = status_for_threshold(rate, limit, ThresholdKind.max, score)
    if qol.crime_trend is CrimeTrend.rising:
        status = worst(status, FactorStatus.warning)
    return make_factor(
        key="safety",
        name="Safety (Crime Rate)",
        weight=weight,
        value=rate,
        unit="/100K",
        threshold=Threshold(value=limit, kind=ThresholdKind.max, label="Max Crime Rate"),
        score=score,
        status=status,
        explanation=explanation,
    )


def _air_quality(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    healthy = qol.healthy_air_days_percent
    if healthy is None:
        return None
    score = normalize_to_range(healthy, HEALTHY_AIR_RANGE.min, HEALTHY_AIR_RANGE.max)
    hazardous = qol.hazardous_air_days
    limit = prefs.max_hazardous_days
    if hazardous is not None:
        score -= overshoot_penalty(hazardous, limit)

    notes = []
    if healthy < HEALTHY_AIR_RANGE.min:
        status = FactorStatus.bad
        notes.append(f"Only {fmt(healthy)}% of days have healthy air quality.")
    elif healthy >= 85:
        status = FactorStatus.good
        notes.append(f"{fmt(healthy)}% of days have healthy air quality.")
    else:
        status = status_from_score(score)
    if hazardous is not None and limit > 0 and hazardous > limit:
        status = worst(status, FactorStatus.warning)
        notes.append(f"{fmt(hazardous)} hazardous air days a year exceeds your max of {fmt(limit)}.")

    threshold = None
    if limit > 0:
        threshold = Threshold(value=limit, kind=ThresholdKind.max, label="Max Hazardous Days")
    return make_factor(
        key="air_quality",
        name="Air Quality",
        weight=weight,
        value=healthy,
        unit="% healthy days",
        threshold=threshold,
        score=score,
        status=status,
        explanation=" ".join(notes) or "Air quality is average.",
    )


def _internet(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    fiber = qol.fiber_coverage_percent
    if fiber is None:
        return None
    providers = qol.broadband_provider_count
    score = fiber
    if providers is not None and providers > 2:
        score += PROVIDER_COMPETITION_BONUS

    notes = []
    status = status_from_score(score)
    if prefs.require_fiber and fiber < FIBER_REQUIRED_THRESHOLD:
        score -= FIBER_REQUIRED_PENALTY
        status = FactorStatus.bad
        notes.append(f"Only {fmt(fiber)}% fiber coverage, but you require fiber internet.")
    elif fiber >= 70:
        status = FactorStatus.good
        count = fmt(providers) if providers is not None else "multiple"
        notes.append(f"{fmt(fiber)}% fiber coverage with {count} providers.")
    if providers is not None and providers < prefs.min_providers:
        status = worst(status, FactorStatus.warning)
        notes.append(f"Only {fmt(providers)} provider(s), below your minimum of {prefs.min_providers}.")

    return make_factor(
        key="internet",
        name="Internet/Broadband",
        weight=weight,
        value=fiber,
        unit="% fiber",
        score=score,
        status=status,
        explanation=" ".join(notes) or "Internet infrastructure is average.",
    )


def _schools(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    ratio = qol.student_teacher_ratio
    if ratio is None:
        return None
    limit = prefs.max_student_teacher_ratio
    score = normalize_to_range(ratio, STUDENT_TEACHER_RANGE.min, STUDENT_TEACHER_RANGE.max, higher_is_better=False)
    notes = []
    if ratio > limit:
        score -= SCHOOL_RATIO_PENALTY
        notes.append(f"Student-teacher ratio of {fmt(ratio)}:1 exceeds your max of {fmt(limit)}:1.")
    elif ratio <= 15:
        notes.append(f"Excellent student-teacher ratio of {fmt(ratio)}:1.")

    grad = qol.graduation_rate
    if grad is not None:
        grad_score = normalize_to_range(grad, GRADUATION_RANGE.min, GRADUATION_RANGE.max)
        score = score * 0.6 + grad_score * 0.4
        if grad >= 90:
            notes.append(f"{fmt(grad)}% graduation rate is excellent.")
        elif grad < GRADUATION_RANGE.min:
            notes.append(f"{fmt(grad)}% graduation rate is below average.")

    status = status_for_threshold(ratio, limit, ThresholdKind.max, score)
    if grad is not None and grad < GRADUATION_RANGE.min:
        status = worst(status, FactorStatus.warning)
    return make_factor(
        key="schools",
        name="Schools/Education",
        weight=weight,
        value=ratio,
        unit=":1 ratio",
        threshold=Threshold(value=limit, kind=ThresholdKind.max, label="Max Ratio"),
        score=score,
        status=status,
        explanation=" ".join(notes) or "School metrics are average.",
    )


def _healthcare(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    physicians = qol.primary_care_physicians_per_100k
    if physicians is None:
        return None
    minimum = prefs.min_physicians_per_100k
    score = normalize_to_range(physicians, PHYSICIANS_RANGE.min, PHYSICIANS_RANGE.max)
    notes = []
    if physicians < minimum:
        score -= PHYSICIAN_SHORTFALL_PENALTY
        notes.append(f"{fmt(physicians)} physicians/100K is below your preferred {fmt(minimum)}.")
    elif physicians >= 100:
        notes.append(f"{fmt(physicians)} physicians/100K indicates good healthcare access.")

    hpsa = qol.hpsa_score
    if hpsa is not None:
        score -= min(HPSA_PENALTY_CAP, max(0.0, hpsa))

    status = status_for_threshold(physicians, minimum, ThresholdKind.min, score)
    if hpsa is not None and hpsa > 10:
        status = worst(status, FactorStatus.warning)
        notes.append(f"Shortage-area score of {fmt(hpsa)} indicates some provider shortage.")
    return make_factor(
        key="healthcare",
        name="Healthcare Access",
        weight=weight,
        value=physicians,
        unit="/100K",
        threshold=Threshold(value=minimum, kind=ThresholdKind.min, label="Min Physicians"),
        score=score,
        status=status,
        explanation=" ".join(notes) or "Healthcare access is average.",
    )


def _recreation(qol: QualityOfLifeMetrics, prefs: QualityOfLifePreferences, weight: float) -> FactorAnalysis | None:
    result = score_recreation(
        qol.recreation,
        prefs.nature_importance,
        prefs.beach_importance,
        prefs.mountain_importance,
    )
    if result is None:
        return None
    return make_factor(
        key="recreation",
        name="Recreation/Outdoors",
        weight=weight,
        value=qol.recreation.trail_miles_within_10mi,
        unit="mi trails",
        score=result.score,
        status=status_from_score(result.score),
        explanation=result.describe(),
    )


_QOL_FACTORS = (
    ("walkability", _walkability),
    ("safety", _safety),
    ("air_quality", _air_quality),
    ("internet", _internet),
    ("schools", _schools),
    ("healthcare", _healthcare),
    ("recreation", _recreation),
)


def score_quality_of_life(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    qol = record.quality_of_life
    qol_prefs = prefs.advanced.quality_of_life
    factors = []
    for weight_field, builder in _QOL_FACTORS:
        weight = getattr(qol_prefs.weights, weight_field)
        if weight <= 0:
            continue
        factor = builder(qol, qol_prefs, weight)
        if factor is not None:
            factors.append(factor)
    return build_result(Category.quality_of_life, factors)
