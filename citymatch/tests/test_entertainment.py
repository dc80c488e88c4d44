from __future__ import annotations

import pytest

from citymatch.metrics.models import League, MetricRecord
from citymatch.preferences.models import EntertainmentPreferences, Preferences
from citymatch.scoring.entertainment import score_entertainment, sports_score


def _only(field: str) -> Preferences:
    weights = {
        "nightlife_importance": 0,
        "arts_importance": 0,
        "dining_importance": 0,
        "sports_importance": 0,
        "recreation_importance": 0,
    }
    weights[field] = 50
    prefs = Preferences()
    prefs.advanced.entertainment = EntertainmentPreferences(**weights)
    return prefs


def _record(**cultural) -> MetricRecord:
    return MetricRecord(location_id="x", cultural=cultural)


def test_sports_step_table():
    assert sports_score({}) == 30.0
    assert sports_score({League.nfl: 1}) == 60.0
    assert sports_score({League.nfl: 1, League.nba: 1, League.mlb: 1, League.nhl: 1}) == 84.0
    assert sports_score({League.nfl: 0, League.nba: 0}) == 30.0


def test_no_teams_is_scored_but_unknown_roster_is_skipped():
    none = score_entertainment(_record(sports_teams={}), _only("sports_importance"))
    unknown = score_entertainment(_record(), _only("sports_importance"))
    assert none.factors[0].score == 30.0
    assert "No major professional sports" in none.factors[0].explanation
    assert unknown.factors == []
    assert unknown.value == 50


def test_sports_explanation_lists_roster(sample_record):
    factor = score_entertainment(sample_record, _only("sports_importance")).factors[0]
    assert factor.value == 5
    # five teams across all five leagues
    assert factor.score == 90.0
    assert "5 pro teams" in factor.explanation


def test_nightlife_plateau_and_late_night_bonus():
    plain = score_entertainment(_record(bars_and_clubs_per_10k=5), _only("nightlife_importance"))
    late = score_entertainment(
        _record(bars_and_clubs_per_10k=5, late_night_venues=12),
        _only("nightlife_importance"),
    )
    assert plain.value == 75
    assert late.value == 80


def test_arts_ignores_zero_venue_counts():
    factor = score_entertainment(
        _record(museums=30, theaters=0, music_venues=0),
        _only("arts_importance"),
    ).factors[0]
    assert factor.score == 75.0
    assert "theaters" not in factor.explanation


def test_dining_blends_density_and_variety():
    factor = score_entertainment(
        _record(restaurants_per_10k=20, cuisine_diversity=50),
        _only("dining_importance"),
    ).factors[0]
    assert factor.score == pytest.approx(87.5)


def test_outdoor_recreation_uses_entertainment_subweights():
    record = MetricRecord(
        location_id="x",
        quality_of_life={"recreation": {"coastline_distance_mi": 5}},
    )
    factor = score_entertainment(record, _only("recreation_importance")).factors[0]
    assert factor.key == "recreation"
    assert factor.score == 100.0


def test_sample_record_in_bounds(sample_record, prefs):
    result = score_entertainment(sample_record, prefs)
    assert {f.key for f in result.factors} == {"nightlife", "arts", "dining", "sports", "recreation"}
    assert 0 <= result.value <= 100
