from __future__ import annotations

import math

import pytest

from citymatch.metrics.models import MetricRecord
from citymatch.preferences.models import (
    PartisanPreference,
    Preferences,
    ReligiousTradition,
    ValuesPreferences,
)
from citymatch.scoring.factors import FactorStatus
from citymatch.scoring.values import lean_label, political_score, score_values, turnout_tier_score


def _prefs(**values) -> Preferences:
    prefs = Preferences()
    prefs.advanced.values = ValuesPreferences(**values)
    return prefs


def _record(**cultural) -> MetricRecord:
    return MetricRecord(location_id="x", cultural=cultural)


def test_lean_labels():
    assert lean_label(0.12) == "D+12"
    assert lean_label(-0.04) == "R+4"
    assert lean_label(0.001) == "EVEN"


def test_swing_prefers_an_even_split():
    prefs = ValuesPreferences(partisan_preference=PartisanPreference.swing, partisan_weight=50)
    assert political_score(0.0, prefs, None) == 100.0
    # symmetric around zero
    assert political_score(0.3, prefs, None) == pytest.approx(political_score(-0.3, prefs, None))


def test_exact_target_scores_full_alignment():
    prefs = ValuesPreferences(partisan_preference=PartisanPreference.strong_dem, partisan_weight=50)
    assert political_score(0.6, prefs, None) == pytest.approx(100.0)


def test_opposite_side_takes_tribal_penalty():
    strong = ValuesPreferences(partisan_preference=PartisanPreference.strong_dem, partisan_weight=50)
    lean = ValuesPreferences(partisan_preference=PartisanPreference.lean_dem, partisan_weight=50)
    assert political_score(-0.2, strong, None) == pytest.approx(100 * math.exp(-2.0 * 0.64) * 0.85)
    assert political_score(-0.2, lean, None) == pytest.approx(100 * math.exp(-2.0 * 0.16) * 0.95)


def test_turnout_blend():
    prefs = ValuesPreferences(
        partisan_preference=PartisanPreference.strong_dem,
        partisan_weight=50,
        prefer_high_turnout=True,
    )
    # full alignment blended 80/20 with a turnout score of 50
    assert political_score(0.6, prefs, 60) == pytest.approx(90.0)


def test_political_factor_reports_lean():
    prefs = _prefs(partisan_preference=PartisanPreference.lean_dem, partisan_weight=50)
    result = score_values(_record(partisan_index=0.2), prefs)
    factor = result.factors[0]
    assert factor.key == "political_alignment"
    assert factor.value == "D+20"
    assert result.value == 100


def test_dealbreaker_adjustment():
    prefs = _prefs(partisan_preference=PartisanPreference.strong_rep, partisan_weight=80)
    result = score_values(_record(partisan_index=0.6), prefs)
    political = result.factors[0]
    assert political.status is FactorStatus.bad
    assert [a.key for a in result.adjustments] == ["political_dealbreaker"]
    assert result.value < round(political.score)


def test_no_dealbreaker_at_moderate_weight():
    prefs = _prefs(partisan_preference=PartisanPreference.strong_rep, partisan_weight=60)
    result = score_values(_record(partisan_index=0.6), prefs)
    assert result.adjustments == []


def test_missing_partisan_index_is_skipped():
    prefs = _prefs(partisan_preference=PartisanPreference.swing, partisan_weight=50)
    result = score_values(_record(), prefs)
    assert result.factors == []
    assert result.value == 50


def test_turnout_tiers():
    assert turnout_tier_score(76) == 100.0
    assert turnout_tier_score(72) == 90.0
    assert turnout_tier_score(66) == 80.0
    assert turnout_tier_score(61) == 65.0
    assert turnout_tier_score(56) == 50.0
    assert turnout_tier_score(50) == 35.0


def test_turnout_only_factor_without_partisan_preference():
    result = score_values(_record(voter_turnout=72), _prefs(prefer_high_turnout=True))
    assert [f.key for f in result.factors] == ["voter_turnout"]
    assert result.factors[0].weight == 30
    assert result.value == 90


def test_concentrated_tradition():
    prefs = _prefs(
        religious_traditions=[ReligiousTradition.catholic],
        min_tradition_presence=50,
        traditions_weight=50,
    )
    result = score_values(_record(religious_adherents={"catholic": 450}), prefs)
    assert result.factors[0].key == "religious_traditions"
    assert result.value == 80


def test_tradition_without_data_is_skipped():
    prefs = _prefs(religious_traditions=[ReligiousTradition.muslim], traditions_weight=50)
    result = score_values(_record(religious_adherents={"catholic": 450}), prefs)
    assert result.factors == []


def test_religious_diversity_factor():
    prefs = _prefs(prefer_religious_diversity=True, diversity_weight=40)
    result = score_values(_record(religious_diversity_index=64), prefs)
    assert result.value == 64
