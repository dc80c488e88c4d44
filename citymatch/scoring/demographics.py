from __future__ import annotations

from dataclasses import dataclass

from ..metrics.models import DemographicMetrics, MetricRecord
from ..preferences.models import (
    ASIAN_SUBGROUPS,
    HISPANIC_SUBGROUPS,
    AgeGroup,
    Category,
    CompatibilityAgeRange,
    DemographicsPreferences,
    MinorityGroup,
    MinoritySubgroup,
    PartisanPreference,
    Preferences,
    SeekingGender,
)
from .constants import (
    BASELINE_ANNUAL_RENT,
    BASELINE_CRIME_RATE,
    BASELINE_DATING_DISPOSABLE,
    BASELINE_NEVER_MARRIED_PERCENT,
    BASELINE_WALK_SCORE,
    COMPATIBILITY_ALIGNMENT_K,
    COMPATIBILITY_SUBWEIGHTS,
    DISPOSABLE_DOLLARS_PER_POINT,
    DIVERSITY_FULL_CREDIT,
    NEUTRAL_SCORE,
    PARTISAN_TARGETS,
)
from .factors import (
    Adjustment,
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
)
from .primitives import clamp, gaussian_decay, graduated_deficit_penalty, minority_presence_score

_MINORITY_FIELDS = {
    MinorityGroup.hispanic: "hispanic_percent",
    MinorityGroup.black: "black_percent",
    MinorityGroup.asian: "asian_percent",
    MinorityGroup.pacific_islander: "pacific_islander_percent",
    MinorityGroup.native_american: "native_american_percent",
}

_AGE_GROUP_LABELS = {
    AgeGroup.young: "young",
    AgeGroup.mixed: "family-age",
    AgeGroup.mature: "mature",
    AgeGroup.any: "any",
}


def _min_threshold(minimum: float, label: str) -> Threshold | None:
    if minimum <= 0:
        return None
    return Threshold(value=minimum, kind=ThresholdKind.min, label=label)


def _status(value: float, threshold: Threshold | None, score: float) -> FactorStatus:
    if threshold is None:
        return status_from_score(score)
    return status_for_threshold(value, threshold.value, threshold.kind, score)


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


def diversity_score(index: float, minimum: float) -> float:
    if index >= minimum:
        return min(100.0, index / DIVERSITY_FULL_CREDIT * 100.0)
    return max(0.0, 50.0 - (minimum - index) * 2.0)


def age_group_score(median_age: float, group: AgeGroup) -> float:
    if group is AgeGroup.young:
        if median_age < 30:
            return 100.0
        if median_age < 35:
            return 80.0
        return 50.0 if median_age < 40 else 20.0
    if group is AgeGroup.mixed:
        if 35 <= median_age <= 45:
            return 100.0
        return 70.0 if 30 <= median_age <= 50 else 40.0
    if group is AgeGroup.mature:
        if median_age > 50:
            return 100.0
        if median_age > 45:
            return 80.0
        return 50.0 if median_age > 40 else 20.0
    return 70.0


def education_score(percent: float, minimum: float) -> float:
    if percent >= minimum:
        return min(100.0, 20.0 + percent * 1.3)
    return max(0.0, 50.0 - (minimum - percent) * 2.0)


def foreign_born_score(percent: float, minimum: float) -> float:
    if percent >= minimum:
        return min(100.0, 30.0 + percent * 2.3)
    return max(0.0, 50.0 - (minimum - percent) * 3.0)


def economic_health_score(
    income: float | None,
    poverty: float | None,
    min_income: float,
    max_poverty: float,
) -> float | None:
    parts = []
    if income is not None:
        if income >= min_income:
            parts.append(min(100.0, income / 900.0))
        else:
            parts.append(max(0.0, 50.0 - (min_income - income) / 1000.0))
    if poverty is not None:
        if poverty <= max_poverty:
            parts.append(max(0.0, 120.0 - poverty * 4.0))
        else:
            parts.append(max(0.0, 30.0 - (poverty - max_poverty) * 3.0))
    if not parts:
        return None
    return sum(parts) / len(parts)


def minority_percent(demo: DemographicMetrics, group: MinorityGroup, subgroup: MinoritySubgroup) -> float | None:
    """Presence of the selected group, preferring the subgroup breakdown when one is named."""
    if subgroup is not MinoritySubgroup.any:
        table = None
        if group is MinorityGroup.hispanic and subgroup in HISPANIC_SUBGROUPS:
            table = demo.hispanic_subgroups
        elif group is MinorityGroup.asian and subgroup in ASIAN_SUBGROUPS:
            table = demo.asian_subgroups
        if table is not None and table.get(subgroup.value) is not None:
            return table[subgroup.value]
    field = _MINORITY_FIELDS.get(group)
    return getattr(demo, field) if field else None


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompatibilityBreakdown:
    pool: float
    economic: float
    alignment: float
    walk_safety: float
    # false when every sub-score fell back to neutral for lack of data
    has_data: bool = True

    @property
    def score(self) -> float:
        return (
            self.pool * COMPATIBILITY_SUBWEIGHTS["pool"]
            + self.economic * COMPATIBILITY_SUBWEIGHTS["economic"]
            + self.alignment * COMPATIBILITY_SUBWEIGHTS["alignment"]
            + self.walk_safety * COMPATIBILITY_SUBWEIGHTS["walk_safety"]
        )


def _gender_ratio(demo: DemographicMetrics, age_range: CompatibilityAgeRange | None) -> float | None:
    ratios = demo.gender_ratios
    if age_range is CompatibilityAgeRange.age_20_29:
        return ratios.age_20_29
    if age_range is CompatibilityAgeRange.age_30_39:
        return ratios.age_30_39
    if age_range is CompatibilityAgeRange.age_40_49:
        return ratios.age_40_49
    return ratios.overall


def compatibility_breakdown(record: MetricRecord, prefs: Preferences) -> CompatibilityBreakdown:
    """Partner-market sub-scores, each centered on 50 at national averages."""
    demo = record.demographics
    demo_prefs = prefs.advanced.demographics
    seeking_women = demo_prefs.seeking_gender is SeekingGender.women

    present = False
    pool = NEUTRAL_SCORE
    ratio = _gender_ratio(demo, demo_prefs.compatibility_age_range)
    if ratio is not None:
        # more men is good when seeking men and bad when seeking women
        direction = -1.0 if seeking_women else 1.0
        pool = 50.0 + direction * (ratio - 100.0) * 2.5
        present = True
    single = demo.never_married_female_percent if seeking_women else demo.never_married_male_percent
    if single is not None:
        pool += (single - BASELINE_NEVER_MARRIED_PERCENT) * 1.5
        present = True
    pool = clamp(pool)

    economic = NEUTRAL_SCORE
    econ = record.economic
    if econ.per_capita_income is not None:
        housing = econ.rpp_housing if econ.rpp_housing is not None else 100.0
        disposable = econ.per_capita_income - BASELINE_ANNUAL_RENT * housing / 100.0
        economic = clamp(50.0 + (disposable - BASELINE_DATING_DISPOSABLE) / DISPOSABLE_DOLLARS_PER_POINT)
        present = True

    alignment = NEUTRAL_SCORE
    preference = prefs.advanced.values.partisan_preference
    partisan_index = record.cultural.partisan_index
    if preference is not PartisanPreference.neutral and partisan_index is not None:
        target = PARTISAN_TARGETS[preference.value]
        alignment = gaussian_decay(partisan_index, target, COMPATIBILITY_ALIGNMENT_K)
        present = True

    walk_safety = NEUTRAL_SCORE
    qol = record.quality_of_life
    if qol.walk_score is not None and qol.violent_crime_rate is not None:
        walk = 50.0 + (qol.walk_score - BASELINE_WALK_SCORE)
        safety = 50.0 + (BASELINE_CRIME_RATE - qol.violent_crime_rate) / 5.0
        walk_safety = clamp((walk + safety) / 2.0)
        present = True

    return CompatibilityBreakdown(
        pool=pool,
        economic=economic,
        alignment=alignment,
        walk_safety=walk_safety,
        has_data=present,
    )


def _compatibility_active(prefs: DemographicsPreferences) -> bool:
    return prefs.compatibility_enabled and prefs.seeking_gender is not None and prefs.compatibility_weight > 0


# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------


def _base_factors(demo: DemographicMetrics, prefs: DemographicsPreferences) -> list[FactorAnalysis]:
    factors = []

    if prefs.weight_diversity > 0 and demo.diversity_index is not None:
        value = demo.diversity_index
        threshold = _min_threshold(prefs.min_diversity_index, "Min Diversity Index")
        score = diversity_score(value, prefs.min_diversity_index)
        if value < prefs.min_diversity_index:
            explanation = f"Diversity index of {fmt(value)} is below your minimum of {fmt(prefs.min_diversity_index)}."
        else:
            explanation = f"Diversity index of {fmt(value)}/100; {fmt(DIVERSITY_FULL_CREDIT)}+ earns full credit."
        factors.append(make_factor(
            key="diversity",
            name="Diversity Index",
            weight=prefs.weight_diversity,
            value=value,
            unit="/100",
            threshold=threshold,
            score=score,
            status=_status(value, threshold, score),
            explanation=explanation,
        ))

    if prefs.weight_age > 0 and demo.median_age is not None:
        value = demo.median_age
        score = age_group_score(value, prefs.preferred_age_group)
        if prefs.preferred_age_group is AgeGroup.any:
            explanation = f"Median age is {fmt(value)} years; no age preference set."
        else:
            label = _AGE_GROUP_LABELS[prefs.preferred_age_group]
            explanation = f"Median age is {fmt(value)} years against your {label} preference."
        factors.append(make_factor(
            key="age",
            name="Median Age",
            weight=prefs.weight_age,
            value=value,
            unit="years",
            score=score,
            status=status_from_score(score),
            explanation=explanation,
        ))

    if prefs.weight_education > 0 and demo.bachelors_or_higher_percent is not None:
        value = demo.bachelors_or_higher_percent
        threshold = _min_threshold(prefs.min_bachelors_percent, "Min Bachelor's %")
        score = education_score(value, prefs.min_bachelors_percent)
        factors.append(make_factor(
            key="education",
            name="Bachelor's Degree+",
            weight=prefs.weight_education,
            value=value,
            unit="%",
            threshold=threshold,
            score=score,
            status=_status(value, threshold, score),
            explanation=f"{fmt(value)}% have a bachelor's degree or higher (US avg ~33%).",
        ))

    if prefs.weight_foreign_born > 0 and demo.foreign_born_percent is not None:
        value = demo.foreign_born_percent
        threshold = _min_threshold(prefs.min_foreign_born_percent, "Min Foreign-Born %")
        score = foreign_born_score(value, prefs.min_foreign_born_percent)
        factors.append(make_factor(
            key="foreign_born",
            name="Foreign-Born Population",
            weight=prefs.weight_foreign_born,
            value=value,
            unit="%",
            threshold=threshold,
            score=score,
            status=_status(value, threshold, score),
            explanation=f"{fmt(value)}% of residents were born abroad (US avg ~14%).",
        ))

    if prefs.minority_group is not MinorityGroup.none and prefs.minority_importance > 0:
        value = minority_percent(demo, prefs.minority_group, prefs.minority_subgroup)
        if value is not None:
            group = prefs.minority_group.value
            if prefs.minority_subgroup is not MinoritySubgroup.any:
                group = f"{prefs.minority_subgroup.value} ({group})"
            minimum = prefs.min_minority_presence
            threshold = _min_threshold(minimum, "Min Presence")
            score = minority_presence_score(value, minimum)
            if value >= minimum:
                explanation = f"{fmt(value)}% {group} community meets your {fmt(minimum)}% minimum."
            else:
                explanation = f"{fmt(value)}% {group} community is below your {fmt(minimum)}% minimum."
            factors.append(make_factor(
                key="minority_presence",
                name="Community Presence",
                weight=prefs.minority_importance,
                value=value,
                unit="%",
                threshold=threshold,
                score=score,
                status=_status(value, threshold, score),
                explanation=explanation,
            ))

    if prefs.weight_economic_health > 0:
        score = economic_health_score(
            demo.median_household_income,
            demo.poverty_rate,
            prefs.min_median_household_income,
            prefs.max_poverty_rate,
        )
        if score is not None:
            parts = []
            if demo.median_household_income is not None:
                parts.append(f"median household income ${fmt(demo.median_household_income)}")
            if demo.poverty_rate is not None:
                parts.append(f"poverty rate {fmt(demo.poverty_rate)}%")
            status = status_from_score(score)
            if demo.poverty_rate is not None and demo.poverty_rate > prefs.max_poverty_rate:
                status = FactorStatus.bad
            elif (
                demo.median_household_income is not None
                and demo.median_household_income < prefs.min_median_household_income
            ):
                status = FactorStatus.bad
            factors.append(make_factor(
                key="economic_health",
                name="Economic Health",
                weight=prefs.weight_economic_health,
                value=demo.median_household_income,
                unit="$",
                score=score,
                status=status,
                explanation="Blends " + " and ".join(parts) + ".",
            ))

    return factors


def _compatibility_factor(
    breakdown: CompatibilityBreakdown,
    weight: float,
    prefs: DemographicsPreferences,
) -> FactorAnalysis:
    seeking = prefs.seeking_gender.value if prefs.seeking_gender else ""
    age = f" aged {prefs.compatibility_age_range.value}" if prefs.compatibility_age_range else ""
    score = breakdown.score
    return make_factor(
        key="compatibility",
        name="Partner Compatibility",
        weight=weight,
        value=round(score, 1),
        unit="/100",
        score=score,
        status=status_from_score(score),
        explanation=(
            f"Seeking {seeking}{age}: pool {fmt(breakdown.pool)}, economics {fmt(breakdown.economic)}, "
            f"alignment {fmt(breakdown.alignment)}, walkability and safety {fmt(breakdown.walk_safety)}."
        ),
    )


def _population_adjustment(demo: DemographicMetrics, prefs: DemographicsPreferences) -> Adjustment | None:
    if demo.total_population is None:
        return None
    penalty = graduated_deficit_penalty(demo.total_population, prefs.min_population)
    if penalty <= 0:
        return None
    return Adjustment(
        key="population",
        name="Population Below Minimum",
        points=penalty,
        explanation=(
            f"Population of {fmt(demo.total_population)} is below your minimum of "
            f"{fmt(prefs.min_population)}: -{penalty} points."
        ),
    )


def score_demographics(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    """Weighted demographic factors, the optional compatibility blend, then the population penalty.

    Compatibility is blended by its own importance: at weight ``w`` the final
    average is ``(1 - w/100) * base + w/100 * compatibility``. The base
    factors are rescaled so that blend falls out of the ordinary weighted
    average and every factor reports its true effective share.
    """
    demo = record.demographics
    demo_prefs = prefs.advanced.demographics
    factors = _base_factors(demo, demo_prefs)

    breakdown = compatibility_breakdown(record, prefs) if _compatibility_active(demo_prefs) else None
    if breakdown is not None and breakdown.has_data:
        influence = demo_prefs.compatibility_weight / 100.0
        base_weight = sum(f.weight for f in factors)
        if base_weight > 0:
            for factor in factors:
                factor.weight = factor.weight * (1.0 - influence)
            factors = [f for f in factors if f.weight > 0]
            compatibility_weight = base_weight * influence
        else:
            compatibility_weight = demo_prefs.compatibility_weight
        factors.append(_compatibility_factor(breakdown, compatibility_weight, demo_prefs))

    adjustments = []
    population = _population_adjustment(demo, demo_prefs)
    if population is not None:
        adjustments.append(population)

    return build_result(Category.demographics, factors, adjustments)
