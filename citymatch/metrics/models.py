from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _finite_or_none(value: Any) -> Any:
    """Treat NaN and infinities as missing data rather than numbers."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value if math.isfinite(value) else None
    return value


Metric = Annotated[float | None, BeforeValidator(_finite_or_none)]


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DataSource(str, Enum):
    government_api = "government-api"
    manual_fallback = "manual-fallback"


class CrimeTrend(str, Enum):
    rising = "rising"
    falling = "falling"
    stable = "stable"


class League(str, Enum):
    nfl = "nfl"
    nba = "nba"
    mlb = "mlb"
    nhl = "nhl"
    mls = "mls"


class ClimateMetrics(_RecordModel):
    comfort_days: Metric = None  # days with 65-80F highs
    extreme_heat_days: Metric = None  # highs above 95F
    freeze_days: Metric = None  # lows below 32F
    rain_days: Metric = None
    snow_days: Metric = None  # days with more than 1in of snow
    cloudy_days: Metric = None  # cloud cover above 75%
    july_dewpoint: Metric = None
    heating_degree_days: Metric = None
    cooling_degree_days: Metric = None
    growing_season_days: Metric = None
    seasonal_stability: Metric = None  # std-dev of monthly mean temps
    diurnal_swing: Metric = None


class EconomicMetrics(_RecordModel):
    rpp_all_items: Metric = None
    rpp_goods: Metric = None
    rpp_housing: Metric = None
    rpp_utilities: Metric = None
    rpp_other_services: Metric = None
    effective_tax_rate: Metric = None  # percent of income
    per_capita_income: Metric = None
    per_capita_disposable_income: Metric = None
    median_home_price: Metric = None
    property_tax_rate: Metric = None  # fraction of home value


class GenderRatios(_RecordModel):
    """Males per 100 females."""

    overall: Metric = None
    age_20_29: Metric = None
    age_30_39: Metric = None
    age_40_49: Metric = None


class DemographicMetrics(_RecordModel):
    total_population: Metric = None
    diversity_index: Metric = None
    median_age: Metric = None
    bachelors_or_higher_percent: Metric = None
    foreign_born_percent: Metric = None
    median_household_income: Metric = None
    poverty_rate: Metric = None

    hispanic_percent: Metric = None
    black_percent: Metric = None
    asian_percent: Metric = None
    pacific_islander_percent: Metric = None
    native_american_percent: Metric = None
    # keyed by subgroup slug, e.g. "puerto-rican", "vietnamese"
    hispanic_subgroups: dict[str, Metric] = Field(default_factory=dict)
    asian_subgroups: dict[str, Metric] = Field(default_factory=dict)

    gender_ratios: GenderRatios = Field(default_factory=GenderRatios)
    never_married_male_percent: Metric = None
    never_married_female_percent: Metric = None


class RecreationMetrics(_RecordModel):
    coastline_distance_mi: Metric = None
    water_quality_index: Metric = None
    trail_miles_within_10mi: Metric = None
    park_acres_per_1k: Metric = None
    protected_land_percent: Metric = None
    max_elevation_delta: Metric = None  # feet within 30mi
    nearest_ski_resort_mi: Metric = None


class QualityOfLifeMetrics(_RecordModel):
    walk_score: Metric = None
    transit_score: Metric = None
    bike_score: Metric = None
    violent_crime_rate: Metric = None  # per 100k
    crime_trend: CrimeTrend | None = None
    healthy_air_days_percent: Metric = None
    hazardous_air_days: Metric = None
    fiber_coverage_percent: Metric = None
    broadband_provider_count: Metric = None
    student_teacher_ratio: Metric = None
    graduation_rate: Metric = None
    primary_care_physicians_per_100k: Metric = None
    hpsa_score: Metric = None
    recreation: RecreationMetrics = Field(default_factory=RecreationMetrics)


class CulturalMetrics(_RecordModel):
    partisan_index: Metric = None  # -1 strong R .. +1 strong D
    democrat_vote_share: Metric = None
    voter_turnout: Metric = None
    # adherents per 1,000 residents, keyed by tradition slug
    religious_adherents: dict[str, Metric] = Field(default_factory=dict)
    religious_diversity_index: Metric = None

    bars_and_clubs_per_10k: Metric = None
    late_night_venues: Metric = None
    museums: Metric = None
    theaters: Metric = None
    music_venues: Metric = None
    restaurants_per_10k: Metric = None
    cuisine_diversity: Metric = None
    # None means the team roster is unknown; an empty dict means no teams
    sports_teams: dict[League, int] | None = None


class MetricRecord(_RecordModel):
    location_id: str = Field(..., min_length=1)
    name: str = ""
    state: str | None = None
    source: DataSource = DataSource.government_api
    source_note: str | None = None
    as_of: datetime | None = None

    climate: ClimateMetrics = Field(default_factory=ClimateMetrics)
    economic: EconomicMetrics = Field(default_factory=EconomicMetrics)
    demographics: DemographicMetrics = Field(default_factory=DemographicMetrics)
    quality_of_life: QualityOfLifeMetrics = Field(default_factory=QualityOfLifeMetrics)
    cultural: CulturalMetrics = Field(default_factory=CulturalMetrics)

    @property
    def display_name(self) -> str:
        if self.name and self.state:
            return f"{self.name}, {self.state}"
        return self.name or self.location_id
