from __future__ import annotations

import pytest

from citymatch.metrics.models import MetricRecord, RecreationMetrics
from citymatch.preferences.models import Preferences, QualityOfLifePreferences, QualityOfLifeWeights
from citymatch.scoring.factors import FactorStatus
from citymatch.scoring.quality_of_life import score_quality_of_life
from citymatch.scoring.recreation import beach_score, mountain_score, score_recreation

NO_WEIGHTS = {field: 0 for field in QualityOfLifeWeights.model_fields}


def _only(factor: str, **overrides) -> Preferences:
    weights = dict(NO_WEIGHTS, **{factor: 50})
    prefs = Preferences()
    prefs.advanced.quality_of_life = QualityOfLifePreferences(weights=QualityOfLifeWeights(**weights), **overrides)
    return prefs


def _record(**qol) -> MetricRecord:
    return MetricRecord(location_id="x", quality_of_life=qol)


def test_walk_score_below_minimum_is_halved():
    result = score_quality_of_life(_record(walk_score=60), _only("walkability", min_walk_score=70))
    factor = result.factors[0]
    assert factor.score == 30.0
    assert factor.status is FactorStatus.bad
    assert "below your minimum" in factor.explanation


def test_walkability_averages_available_scores():
    result = score_quality_of_life(_record(walk_score=80, transit_score=60, bike_score=70), _only("walkability"))
    assert result.factors[0].score == 70.0
    assert result.factors[0].status is FactorStatus.good


def test_crime_at_midpoint():
    factor = score_quality_of_life(_record(violent_crime_rate=400), _only("safety")).factors[0]
    assert factor.score == 50.0
    assert factor.status is FactorStatus.neutral


def test_crime_over_limit_bottoms_out():
    factor = score_quality_of_life(
        _record(violent_crime_rate=750),
        _only("safety", max_violent_crime_rate=500),
    ).factors[0]
    assert factor.score == 0.0
    assert factor.status is FactorStatus.bad
    assert "exceeds your max" in factor.explanation


def test_crime_trend():
    rising = score_quality_of_life(_record(violent_crime_rate=400, crime_trend="rising"), _only("safety"))
    falling = score_quality_of_life(_record(violent_crime_rate=400, crime_trend="falling"), _only("safety"))
    rewarded = score_quality_of_life(
        _record(violent_crime_rate=400, crime_trend="falling"),
        _only("safety", prefer_falling_crime=True),
    )
    assert rising.factors[0].score == 45.0
    assert rising.factors[0].status is FactorStatus.warning
    assert falling.factors[0].score == 50.0
    assert rewarded.factors[0].score == 55.0


def test_required_fiber_penalty():
    factor = score_quality_of_life(
        _record(fiber_coverage_percent=40, broadband_provider_count=2),
        _only("internet", require_fiber=True),
    ).factors[0]
    assert factor.score == 20.0
    assert factor.status is FactorStatus.bad


def test_provider_competition_bonus():
    factor = score_quality_of_life(
        _record(fiber_coverage_percent=75, broadband_provider_count=4),
        _only("internet"),
    ).factors[0]
    assert factor.score == 85.0
    assert factor.status is FactorStatus.good


def test_schools_blend_ratio_and_graduation():
    factor = score_quality_of_life(
        _record(student_teacher_ratio=17, graduation_rate=87.5),
        _only("schools"),
    ).factors[0]
    assert factor.score == pytest.approx(50.0)


def test_healthcare_shortfall():
    factor = score_quality_of_life(
        _record(primary_care_physicians_per_100k=40, hpsa_score=12),
        _only("healthcare", min_physicians_per_100k=60),
    ).factors[0]
    assert factor.score == 0.0
    assert factor.status is FactorStatus.bad


def test_zero_weight_and_missing_metrics_are_absent(sample_record):
    prefs = Preferences()
    keys = [f.key for f in score_quality_of_life(sample_record, prefs).factors]
    assert "recreation" not in keys
    result = score_quality_of_life(_record(walk_score=70), prefs)
    assert [f.key for f in result.factors] == ["walkability"]


def test_empty_record_is_neutral():
    result = score_quality_of_life(_record(), Preferences())
    assert result.factors == []
    assert result.value == 50


def test_beach_access_decay():
    assert beach_score(RecreationMetrics(coastline_distance_mi=10)) == 100.0
    assert beach_score(RecreationMetrics(coastline_distance_mi=57.5)) == pytest.approx(49.0)
    assert beach_score(RecreationMetrics(coastline_distance_mi=150)) == 0.0
    assert beach_score(RecreationMetrics()) is None


def test_mountain_ski_bonus():
    assert mountain_score(RecreationMetrics(max_elevation_delta=2000)) == pytest.approx(50.0)
    assert mountain_score(RecreationMetrics(max_elevation_delta=2000, nearest_ski_resort_mi=30)) == pytest.approx(60.0)
    assert mountain_score(RecreationMetrics(max_elevation_delta=4000, nearest_ski_resort_mi=30)) == 100.0


def test_recreation_skips_missing_access_types():
    rec = RecreationMetrics(coastline_distance_mi=10, water_quality_index=80)
    result = score_recreation(rec, 50, 50, 50)
    assert result.parts == {"beach": 100.0}
    assert result.score == 100.0
    assert "Clean water" in result.describe()
    assert score_recreation(RecreationMetrics(), 50, 50, 50) is None


def test_recreation_factor_in_quality_of_life():
    record = _record(recreation={"coastline_distance_mi": 150, "max_elevation_delta": 4000})
    factor = score_quality_of_life(record, _only("recreation")).factors[0]
    assert factor.key == "recreation"
    assert factor.score == 50.0
