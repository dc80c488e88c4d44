from __future__ import annotations

import pytest

from citymatch.metrics.models import MetricRecord
from citymatch.preferences.models import ClimatePreferences, Preferences
from citymatch.scoring.climate import CLIMATE_FACTORS, score_climate
from citymatch.scoring.factors import FactorStatus

WEIGHT_FIELDS = [definition.weight_field for definition in CLIMATE_FACTORS]


def _only(weight_field: str, **overrides) -> Preferences:
    """Preferences with a single climate factor enabled."""
    values = {field: 0 for field in WEIGHT_FIELDS}
    values[weight_field] = 50
    values.update(overrides)
    prefs = Preferences()
    prefs.advanced.climate = ClimatePreferences(**values)
    return prefs


def _record(**climate) -> MetricRecord:
    return MetricRecord(location_id="x", climate=climate)


def test_eleven_climate_factors():
    assert len(CLIMATE_FACTORS) == 11


def test_single_factor_uses_range_normalization():
    result = score_climate(_record(comfort_days=165), _only("weight_comfort_days", min_comfort_days=0))
    assert [f.key for f in result.factors] == ["comfort_days"]
    assert result.factors[0].score == 50.0
    assert result.factors[0].weight_percent == 100
    assert result.value == 50


def test_zero_weight_factor_is_absent(sample_record):
    prefs = Preferences()
    prefs.advanced.climate.weight_rain_days = 0
    keys = {f.key for f in score_climate(sample_record, prefs).factors}
    assert "rain_days" not in keys
    # default weight is zero for growing season
    assert "growing_season_days" not in keys


def test_missing_metric_is_skipped_not_zeroed():
    prefs = Preferences()
    result = score_climate(_record(comfort_days=280), prefs)
    assert [f.key for f in result.factors] == ["comfort_days"]
    assert result.value == 100


def test_no_data_is_neutral():
    result = score_climate(_record(), Preferences())
    assert result.factors == []
    assert result.value == 50


def test_prefer_snow_inverts_direction():
    record = _record(snow_days=65)
    dislikes = score_climate(record, _only("weight_snow_days"))
    likes = score_climate(record, _only("weight_snow_days", prefer_snow=True))
    assert dislikes.factors[0].score == 0.0
    assert likes.factors[0].score == 100.0
    assert likes.factors[0].threshold.kind.value == "min"


def test_prefer_distinct_seasons_inverts_stability():
    record = _record(seasonal_stability=28)
    stable = score_climate(record, _only("weight_seasonal_stability"))
    distinct = score_climate(record, _only("weight_seasonal_stability", prefer_distinct_seasons=True))
    assert stable.value == 0
    assert distinct.value == 100


def test_threshold_drives_status_not_score():
    record = _record(comfort_days=165)
    loose = score_climate(record, _only("weight_comfort_days", min_comfort_days=100)).factors[0]
    strict = score_climate(record, _only("weight_comfort_days", min_comfort_days=200)).factors[0]
    harsh = score_climate(record, _only("weight_comfort_days", min_comfort_days=250)).factors[0]
    assert loose.score == strict.score == harsh.score
    assert loose.status is FactorStatus.neutral
    assert strict.status is FactorStatus.warning
    assert harsh.status is FactorStatus.bad
    assert "below your minimum" in harsh.explanation


def test_utility_costs_sum_degree_days():
    record = _record(heating_degree_days=4500, cooling_degree_days=1000)
    factor = score_climate(record, _only("weight_utility_costs")).factors[0]
    assert factor.value == 5500
    assert factor.score == pytest.approx(50.0)


def test_utility_costs_need_both_degree_day_totals():
    record = _record(heating_degree_days=4500)
    assert score_climate(record, _only("weight_utility_costs")).factors == []


def test_weight_percent_is_share_of_active_weight():
    prefs = _only("weight_comfort_days", weight_freeze_days=50)
    prefs.advanced.climate.weight_comfort_days = 100
    result = score_climate(_record(comfort_days=200, freeze_days=20), prefs)
    shares = {f.key: f.weight_percent for f in result.factors}
    assert shares == {"comfort_days": 67, "freeze_days": 33}


def test_scores_stay_in_bounds(sample_record):
    result = score_climate(sample_record, Preferences())
    assert 0 <= result.value <= 100
    assert all(0 <= f.score <= 100 for f in result.factors)
