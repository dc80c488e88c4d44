"""
Calibrated domain constants.

Ranges are anchored to observed U.S. extremes so a national-average city
lands near the middle of the 0-100 scale.
"""

from __future__ import annotations

from typing import NamedTuple


class Range(NamedTuple):
    min: float
    max: float


class PlateauRange(NamedTuple):
    min: float
    plateau: float
    max: float


NEUTRAL_SCORE = 50.0

# ---------------------------------------------------------------------------
# Climate
# ---------------------------------------------------------------------------

CLIMATE_RANGES: dict[str, Range] = {
    "comfort_days": Range(50, 280),  # Buffalo .. San Diego
    "extreme_heat_days": Range(0, 90),  # coastal .. Phoenix
    "freeze_days": Range(0, 160),  # Miami .. Minneapolis
    "rain_days": Range(30, 180),  # Phoenix .. Seattle
    "snow_days": Range(0, 65),  # SoCal .. Buffalo
    "cloudy_days": Range(50, 220),  # Phoenix .. Seattle
    "july_dewpoint": Range(45, 75),  # desert .. Houston
    "degree_days": Range(2000, 9000),  # San Diego .. Minneapolis
    "growing_season_days": Range(120, 365),
    "seasonal_stability": Range(5, 28),
    "diurnal_swing": Range(10, 35),
}

# ---------------------------------------------------------------------------
# Quality of life
# ---------------------------------------------------------------------------

CRIME_RANGE = Range(0, 800)  # violent crimes per 100k, national avg ~380
HEALTHY_AIR_RANGE = Range(70, 99)
STUDENT_TEACHER_RANGE = Range(12, 22)
GRADUATION_RANGE = Range(80, 95)
PHYSICIANS_RANGE = Range(40, 120)

THRESHOLD_PENALTY_SCALE = 30.0
THRESHOLD_PENALTY_CAP = 25.0
BELOW_MINIMUM_FACTOR = 0.5
CRIME_TREND_POINTS = 5.0
PROVIDER_COMPETITION_BONUS = 10.0
FIBER_REQUIRED_THRESHOLD = 50.0
FIBER_REQUIRED_PENALTY = 20.0
SCHOOL_RATIO_PENALTY = 15.0
PHYSICIAN_SHORTFALL_PENALTY = 15.0
HPSA_PENALTY_CAP = 25.0

# ---------------------------------------------------------------------------
# Recreation
# ---------------------------------------------------------------------------

RECREATION_RANGES: dict[str, Range] = {
    "trail_miles": Range(0, 150),
    "park_acres": Range(5, 100),
    "protected_land_percent": Range(0, 30),
    "elevation_delta": Range(0, 4000),  # Dallas .. Salt Lake City
}

COAST_FULL_CREDIT_MI = 15.0
COAST_NO_CREDIT_MI = 100.0
COAST_DECAY_PER_MI = 1.2
GOOD_WATER_QUALITY_MIN = 70.0
SKI_RESORT_BONUS_MI = 60.0
SKI_RESORT_BONUS = 10.0

# ---------------------------------------------------------------------------
# Entertainment
# ---------------------------------------------------------------------------

URBAN_RANGES: dict[str, PlateauRange] = {
    "bars_and_clubs_per_10k": PlateauRange(0.5, 5, 10),
    "museums": PlateauRange(5, 30, 150),
    "restaurants_per_10k": PlateauRange(3, 20, 45),
}
CUISINE_DIVERSITY_RANGE = Range(5, 50)
LATE_NIGHT_BONUS_MIN_VENUES = 10
LATE_NIGHT_BONUS = 5.0
PLATEAU_FLOOR = 30.0
PLATEAU_KNEE = 75.0

# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------

POPULATION_MAX_PENALTY = 50.0
DIVERSITY_FULL_CREDIT = 70.0
MINORITY_BASE = 70.0
MINORITY_SURPLUS_SLOPE = 2.0
MINORITY_DEFICIT_SLOPE = 5.0

COMPATIBILITY_SUBWEIGHTS = {
    "pool": 0.4,
    "economic": 0.3,
    "alignment": 0.2,
    "walk_safety": 0.1,
}
COMPATIBILITY_ALIGNMENT_K = 4.3  # distance 0.4 -> ~50
BASELINE_NEVER_MARRIED_PERCENT = 55.0
BASELINE_ANNUAL_RENT = 16800.0  # ~$1,400/month at housing index 100
BASELINE_DATING_DISPOSABLE = 25000.0
DISPOSABLE_DOLLARS_PER_POINT = 800.0
BASELINE_WALK_SCORE = 48.0
BASELINE_CRIME_RATE = 380.0

# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

PARTISAN_TARGETS = {
    "strong-dem": 0.6,
    "lean-dem": 0.2,
    "swing": 0.0,
    "lean-rep": -0.2,
    "strong-rep": -0.6,
}
STRONG_PARTISAN_MIN = 0.3
TRIBAL_PENALTY_STRONG = 0.85
TRIBAL_PENALTY_LEAN = 0.95
TURNOUT_RANGE = Range(40, 80)
TURNOUT_BLEND = 0.2
TURNOUT_ONLY_WEIGHT = 30.0
DEALBREAKER_MIN_WEIGHT = 70.0
DEALBREAKER_MAX_SCORE = 40.0

# adherents per 1,000 residents
NATIONAL_TRADITION_BASELINES = {
    "catholic": 205.0,
    "evangelical": 256.0,
    "mainline": 103.0,
    "jewish": 22.0,
    "muslim": 11.0,
    "unaffiliated": 290.0,
}

# ---------------------------------------------------------------------------
# Cost of living
# ---------------------------------------------------------------------------

UTILITIES_NUDGE = 0.10
HOMEOWNER_GOODS_SHARE = 0.70
HOMEOWNER_SERVICES_SHARE = 0.30
BUYER_HOUSING_SHARE = 0.35
DOWN_PAYMENT_FRACTION = 0.20
MORTGAGE_RATE = 0.07
MORTGAGE_TERM_YEARS = 30
NATIONAL_MEDIAN_HOME_PRICE = 340000.0
HOUSING_COMPRESSION_START = 150.0
HOUSING_COMPRESSION_SPAN = 50.0

NATIONAL_REFERENCE_INCOME = 75000.0
NATIONAL_PER_CAPITA_DISPOSABLE = 56014.0
NATIONAL_EFFECTIVE_TAX_RATE = 13.5  # percent
NATIONAL_PROPERTY_TAX_RATE = 0.011
ASSESSED_VALUE_LAG = 0.75
COST_SCORE_SLOPE = 0.75

HOME_PRICE_FALLBACK_FLOOR = 300000.0
HOME_PRICE_FALLBACK_SPAN = 1200000.0
