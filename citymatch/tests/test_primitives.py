from __future__ import annotations

import math

import pytest

from citymatch.preferences.models import Category
from citymatch.scoring.factors import FactorStatus, build_result, make_factor
from citymatch.scoring.primitives import (
    clamp,
    critical_mass_score,
    gaussian_decay,
    graduated_deficit_penalty,
    importance_to_k,
    minority_presence_score,
    normalize_to_range,
    overshoot_penalty,
    round_half_up,
    weighted_average,
)


def test_normalize_higher_is_better():
    assert normalize_to_range(165, 50, 280) == pytest.approx(50.0)
    assert normalize_to_range(280, 50, 280) == 100.0


def test_normalize_lower_is_better_mirrors():
    assert normalize_to_range(0, 0, 800, higher_is_better=False) == 100.0
    assert normalize_to_range(200, 0, 800, higher_is_better=False) == pytest.approx(75.0)


def test_normalize_clamps_out_of_range_values():
    assert normalize_to_range(-40, 0, 100) == 0.0
    assert normalize_to_range(1e9, 0, 100) == 100.0


def test_normalize_degenerate_range_is_neutral():
    assert normalize_to_range(10, 5, 5) == 50.0
    assert normalize_to_range(10, 9, 1) == 50.0


def test_critical_mass_curve_anchors():
    assert critical_mass_score(2, 5, 30, 150) == 30.0
    assert critical_mass_score(5, 5, 30, 150) == 30.0
    assert critical_mass_score(30, 5, 30, 150) == pytest.approx(75.0)
    assert critical_mass_score(150, 5, 30, 150) == 100.0
    assert critical_mass_score(400, 5, 30, 150) == 100.0


def test_critical_mass_linear_then_logarithmic():
    # halfway to the plateau is halfway between floor and knee
    assert critical_mass_score(17.5, 5, 30, 150) == pytest.approx(52.5)
    above = critical_mass_score(90, 5, 30, 150)
    assert above == pytest.approx(75 + 25 * math.log10(1 + 0.5 * 9))
    # diminishing returns past the plateau
    assert above - 75 > (critical_mass_score(150, 5, 30, 150) - above)


def test_importance_to_k_range():
    assert importance_to_k(0) == 1.0
    assert importance_to_k(50) == 2.0
    assert importance_to_k(100) == 3.0
    assert importance_to_k(250) == 3.0


def test_gaussian_decay():
    assert gaussian_decay(0.3, 0.3, 2.0) == 100.0
    assert gaussian_decay(0.0, 0.5, 2.0) == pytest.approx(100 * math.exp(-0.5))
    # steeper k is less forgiving of the same distance
    assert gaussian_decay(0.0, 0.5, 3.0) < gaussian_decay(0.0, 0.5, 1.0)


def test_graduated_deficit_penalty_example():
    assert graduated_deficit_penalty(300_000, 500_000) == 20


def test_graduated_deficit_penalty_edges():
    assert graduated_deficit_penalty(600_000, 500_000) == 0
    assert graduated_deficit_penalty(100, 0) == 0
    assert graduated_deficit_penalty(0, 500_000) == 50
    assert graduated_deficit_penalty(-10, 500_000) == 50


def test_round_half_up_breaks_ties_upwards():
    assert round_half_up(2.5) == 3
    assert round_half_up(72.5) == 73
    assert round_half_up(0.5) == 1
    assert round_half_up(72.4) == 72
    assert round_half_up(61.25, 1) == pytest.approx(61.3)
    assert isinstance(round_half_up(3.0), int)


def test_graduated_deficit_penalty_rounds_half_up():
    # half the minimum with a 5 point cap is exactly 2.5 points
    assert graduated_deficit_penalty(250_000, 500_000, max_penalty=5) == 3


def test_minority_presence_examples():
    assert minority_presence_score(12, 5) == 84
    assert minority_presence_score(3, 10) == 35


def test_minority_presence_bounds():
    assert minority_presence_score(60, 5) == 100.0
    assert minority_presence_score(0, 30) == 0.0


def test_overshoot_penalty():
    assert overshoot_penalty(400, 500) == 0.0
    assert overshoot_penalty(750, 500) == pytest.approx(15.0)
    assert overshoot_penalty(5000, 500) == 25.0
    assert overshoot_penalty(10, 0) == 0.0


def test_weighted_average_skips_zero_weights():
    assert weighted_average([(80, 1), (20, 0)]) == 80
    assert weighted_average([(80, 1), (20, 3)]) == pytest.approx(35.0)
    assert weighted_average([(80, 0)]) is None
    assert weighted_average([]) is None


def test_clamp():
    assert clamp(-5) == 0
    assert clamp(105) == 100
    assert clamp(5, 10, 20) == 10


def test_category_score_rounds_ties_upwards():
    factors = [
        make_factor("a", "A", 1, None, 70, FactorStatus.good, ""),
        make_factor("b", "B", 1, None, 75, FactorStatus.good, ""),
    ]
    assert build_result(Category.climate, factors).value == 73
