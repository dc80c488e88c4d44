from __future__ import annotations

from dataclasses import dataclass

from ..metrics.models import ClimateMetrics, MetricRecord
from ..preferences.models import Category, ClimatePreferences, Preferences
from .constants import CLIMATE_RANGES, Range
from .factors import (
    CategoryResult,
    FactorAnalysis,
    Threshold,
    ThresholdKind,
    build_result,
    fmt,
    make_factor,
    status_for_threshold,
    status_from_score,
)
from .primitives import normalize_to_range


@dataclass(frozen=True)
class ClimateFactor:
    key: str
    name: str
    unit: str
    weight_field: str
    higher_is_better: bool
    threshold_field: str | None = None
    threshold_kind: ThresholdKind | None = None
    threshold_label: str = ""
    # preference flag that flips the scoring direction when set
    invert_field: str | None = None

    @property
    def range(self) -> Range:
        return CLIMATE_RANGES[self.key]


CLIMATE_FACTORS: tuple[ClimateFactor, ...] = (
    ClimateFactor(
        "comfort_days", "Comfortable Days", "days/yr", "weight_comfort_days", True,
        "min_comfort_days", ThresholdKind.min, "Min Comfortable Days",
    ),
    ClimateFactor(
        "extreme_heat_days", "Extreme Heat", "days/yr", "weight_extreme_heat", False,
        "max_extreme_heat_days", ThresholdKind.max, "Max Extreme Heat Days",
    ),
    ClimateFactor(
        "freeze_days", "Freezing Days", "days/yr", "weight_freeze_days", False,
        "max_freeze_days", ThresholdKind.max, "Max Freeze Days",
    ),
    ClimateFactor(
        "rain_days", "Rainy Days", "days/yr", "weight_rain_days", False,
        "max_rain_days", ThresholdKind.max, "Max Rainy Days",
    ),
    ClimateFactor(
        "snow_days", "Snowy Days", "days/yr", "weight_snow_days", False,
        "max_snow_days", ThresholdKind.max, "Max Snow Days",
        invert_field="prefer_snow",
    ),
    ClimateFactor(
        "cloudy_days", "Cloudy Days", "days/yr", "weight_cloudy_days", False,
        "max_cloudy_days", ThresholdKind.max, "Max Cloudy Days",
    ),
    ClimateFactor(
        "july_dewpoint", "Summer Humidity", "°F dewpoint", "weight_humidity", False,
        "max_july_dewpoint", ThresholdKind.max, "Max July Dewpoint",
    ),
    ClimateFactor(
        "degree_days", "Utility Costs", "degree days", "weight_utility_costs", False,
    ),
    ClimateFactor(
        "growing_season_days", "Growing Season", "days", "weight_growing_season", True,
        "min_growing_season_days", ThresholdKind.min, "Min Growing Season",
    ),
    ClimateFactor(
        "seasonal_stability", "Seasonal Stability", "°F std-dev", "weight_seasonal_stability", False,
        invert_field="prefer_distinct_seasons",
    ),
    ClimateFactor(
        "diurnal_swing", "Day/Night Swing", "°F", "weight_diurnal_swing", False,
        "max_diurnal_swing", ThresholdKind.max, "Max Diurnal Swing",
    ),
)


def _metric(climate: ClimateMetrics, key: str) -> float | None:
    if key == "degree_days":
        if climate.heating_degree_days is None or climate.cooling_degree_days is None:
            return None
        return climate.heating_degree_days + climate.cooling_degree_days
    return getattr(climate, key)


def _climate_factor(
    definition: ClimateFactor,
    climate: ClimateMetrics,
    prefs: ClimatePreferences,
) -> FactorAnalysis | None:
    weight = getattr(prefs, definition.weight_field)
    value = _metric(climate, definition.key)
    if weight <= 0 or value is None:
        return None

    inverted = bool(definition.invert_field and getattr(prefs, definition.invert_field))
    higher_is_better = definition.higher_is_better != inverted
    low, high = definition.range
    score = normalize_to_range(value, low, high, higher_is_better)

    threshold = None
    if definition.threshold_field is not None and definition.threshold_kind is not None:
        limit = getattr(prefs, definition.threshold_field)
        kind = definition.threshold_kind
        label = definition.threshold_label
        if inverted:
            # wanting snow turns the snow-day limit into a floor
            kind = ThresholdKind.min if kind is ThresholdKind.max else ThresholdKind.max
            label = label.replace("Max", "Min")
        threshold = Threshold(value=limit, kind=kind, label=label)

    if threshold is not None:
        status = status_for_threshold(value, threshold.value, threshold.kind, score)
        if threshold.kind is ThresholdKind.max and value > threshold.value:
            explanation = f"{fmt(value)} {definition.unit} exceeds your max of {fmt(threshold.value)}."
        elif threshold.kind is ThresholdKind.min and value < threshold.value:
            explanation = f"{fmt(value)} {definition.unit} is below your minimum of {fmt(threshold.value)}."
        else:
            explanation = f"{fmt(value)} {definition.unit} meets your {threshold.label.lower()} of {fmt(threshold.value)}."
    else:
        status = status_from_score(score)
        explanation = f"{fmt(value)} {definition.unit} against a national range of {fmt(low)}-{fmt(high)}."

    if inverted:
        explanation += " Scored in favor of more, as you prefer."

    return make_factor(
        key=definition.key,
        name=definition.name,
        weight=weight,
        value=value,
        unit=definition.unit,
        threshold=threshold,
        score=score,
        status=status,
        explanation=explanation,
    )


def score_climate(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    climate_prefs = prefs.advanced.climate
    factors = []
    for definition in CLIMATE_FACTORS:
        factor = _climate_factor(definition, record.climate, climate_prefs)
        if factor is not None:
            factors.append(factor)
    return build_result(Category.climate, factors)
