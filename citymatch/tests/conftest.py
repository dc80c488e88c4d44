from __future__ import annotations

import pytest

from citymatch.metrics.data_store import clear_catalog
from citymatch.metrics.models import MetricRecord
from citymatch.preferences.models import Preferences
from citymatch.scoring.cache import clear_cache

SAMPLE_RECORD = {
    "location_id": "denver-co",
    "name": "Denver",
    "state": "CO",
    "source": "government-api",
    "as_of": "2025-06-01T00:00:00",
    "climate": {
        "comfort_days": 120,
        "extreme_heat_days": 12,
        "freeze_days": 150,
        "rain_days": 85,
        "snow_days": 30,
        "cloudy_days": 115,
        "july_dewpoint": 50,
        "heating_degree_days": 5900,
        "cooling_degree_days": 800,
        "growing_season_days": 160,
        "seasonal_stability": 17,
        "diurnal_swing": 28,
    },
    "economic": {
        "rpp_all_items": 108.5,
        "rpp_goods": 101.2,
        "rpp_housing": 142.0,
        "rpp_utilities": 92.0,
        "rpp_other_services": 104.0,
        "effective_tax_rate": 14.2,
        "per_capita_income": 78000,
        "per_capita_disposable_income": 64000,
        "median_home_price": 590000,
        "property_tax_rate": 0.0055,
    },
    "demographics": {
        "total_population": 715000,
        "diversity_index": 62,
        "median_age": 34.8,
        "bachelors_or_higher_percent": 53,
        "foreign_born_percent": 15,
        "median_household_income": 88000,
        "poverty_rate": 11,
        "hispanic_percent": 28,
        "black_percent": 9,
        "asian_percent": 4,
        "pacific_islander_percent": 0.2,
        "native_american_percent": 1.1,
        "hispanic_subgroups": {"mexican": 22, "puerto-rican": 0.8},
        "asian_subgroups": {"chinese": 1.0, "vietnamese": 0.9},
        "gender_ratios": {"overall": 101, "age_20_29": 104, "age_30_39": 106, "age_40_49": 103},
        "never_married_male_percent": 45,
        "never_married_female_percent": 39,
    },
    "quality_of_life": {
        "walk_score": 61,
        "transit_score": 47,
        "bike_score": 72,
        "violent_crime_rate": 660,
        "crime_trend": "rising",
        "healthy_air_days_percent": 82,
        "hazardous_air_days": 3,
        "fiber_coverage_percent": 48,
        "broadband_provider_count": 4,
        "student_teacher_ratio": 16.5,
        "graduation_rate": 84,
        "primary_care_physicians_per_100k": 98,
        "hpsa_score": 4,
        "recreation": {
            "coastline_distance_mi": 900,
            "trail_miles_within_10mi": 140,
            "park_acres_per_1k": 22,
            "protected_land_percent": 12,
            "max_elevation_delta": 3800,
            "nearest_ski_resort_mi": 55,
        },
    },
    "cultural": {
        "partisan_index": 0.42,
        "democrat_vote_share": 0.70,
        "voter_turnout": 74,
        "religious_adherents": {"catholic": 180, "evangelical": 120, "jewish": 20, "unaffiliated": 410},
        "religious_diversity_index": 58,
        "bars_and_clubs_per_10k": 4.1,
        "late_night_venues": 35,
        "museums": 45,
        "theaters": 12,
        "music_venues": 30,
        "restaurants_per_10k": 24,
        "cuisine_diversity": 38,
        "sports_teams": {"nfl": 1, "nba": 1, "mlb": 1, "nhl": 1, "mls": 1},
    },
}


@pytest.fixture(autouse=True)
def _reset_state():
    clear_cache()
    clear_catalog()
    yield
    clear_cache()
    clear_catalog()


@pytest.fixture
def sample_record() -> MetricRecord:
    return MetricRecord.model_validate(SAMPLE_RECORD)


@pytest.fixture
def prefs() -> Preferences:
    return Preferences()
