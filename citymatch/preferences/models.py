from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..metrics.models import League

SCHEMA_VERSION = 3

Weight = float


class _PrefsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _weight(default: float) -> Weight:
    return Field(default=default, ge=0.0, le=100.0)


# ---------------------------------------------------------------------------
# Enum selections
# ---------------------------------------------------------------------------


class Category(str, Enum):
    climate = "climate"
    cost_of_living = "cost_of_living"
    demographics = "demographics"
    quality_of_life = "quality_of_life"
    values = "values"
    entertainment = "entertainment"


class HousingSituation(str, Enum):
    renter = "renter"
    homeowner = "homeowner"
    prospective_buyer = "prospective-buyer"


class WorkSituation(str, Enum):
    local_earner = "local-earner"
    standard = "standard"
    retiree = "retiree"


class AgeGroup(str, Enum):
    young = "young"
    mixed = "mixed"
    mature = "mature"
    any = "any"


class MinorityGroup(str, Enum):
    none = "none"
    hispanic = "hispanic"
    black = "black"
    asian = "asian"
    pacific_islander = "pacific-islander"
    native_american = "native-american"


class MinoritySubgroup(str, Enum):
    any = "any"
    # hispanic
    mexican = "mexican"
    puerto_rican = "puerto-rican"
    cuban = "cuban"
    salvadoran = "salvadoran"
    guatemalan = "guatemalan"
    colombian = "colombian"
    # asian
    chinese = "chinese"
    indian = "indian"
    filipino = "filipino"
    vietnamese = "vietnamese"
    korean = "korean"
    japanese = "japanese"


HISPANIC_SUBGROUPS = frozenset({
    MinoritySubgroup.mexican,
    MinoritySubgroup.puerto_rican,
    MinoritySubgroup.cuban,
    MinoritySubgroup.salvadoran,
    MinoritySubgroup.guatemalan,
    MinoritySubgroup.colombian,
})

ASIAN_SUBGROUPS = frozenset({
    MinoritySubgroup.chinese,
    MinoritySubgroup.indian,
    MinoritySubgroup.filipino,
    MinoritySubgroup.vietnamese,
    MinoritySubgroup.korean,
    MinoritySubgroup.japanese,
})


class SeekingGender(str, Enum):
    men = "men"
    women = "women"


class CompatibilityAgeRange(str, Enum):
    age_20_29 = "20-29"
    age_30_39 = "30-39"
    age_40_49 = "40-49"


class PartisanPreference(str, Enum):
    strong_dem = "strong-dem"
    lean_dem = "lean-dem"
    swing = "swing"
    lean_rep = "lean-rep"
    strong_rep = "strong-rep"
    neutral = "neutral"


class ReligiousTradition(str, Enum):
    catholic = "catholic"
    evangelical = "evangelical"
    mainline = "mainline"
    jewish = "jewish"
    muslim = "muslim"
    unaffiliated = "unaffiliated"


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


class CategoryWeights(_PrefsModel):
    climate: Weight = _weight(50)
    cost_of_living: Weight = _weight(50)
    demographics: Weight = _weight(50)
    quality_of_life: Weight = _weight(50)
    values: Weight = _weight(0)  # off by default
    entertainment: Weight = _weight(0)

    def for_category(self, category: Category) -> float:
        return getattr(self, category.value)


class HardFilters(_PrefsModel):
    max_home_price: float | None = Field(default=None, gt=0)
    required_leagues: list[League] = Field(default_factory=list)
    max_violent_crime_rate: float | None = Field(default=None, gt=0)


# ---------------------------------------------------------------------------
# Advanced, per category
# ---------------------------------------------------------------------------


class ClimatePreferences(_PrefsModel):
    weight_comfort_days: Weight = _weight(50)
    min_comfort_days: float = 150

    weight_extreme_heat: Weight = _weight(50)
    max_extreme_heat_days: float = 10

    weight_freeze_days: Weight = _weight(50)
    max_freeze_days: float = 30

    weight_rain_days: Weight = _weight(50)
    max_rain_days: float = 100

    weight_snow_days: Weight = _weight(25)
    max_snow_days: float = 15
    prefer_snow: bool = False

    weight_cloudy_days: Weight = _weight(40)
    max_cloudy_days: float = 150

    weight_humidity: Weight = _weight(40)
    max_july_dewpoint: float = 65

    weight_utility_costs: Weight = _weight(50)

    weight_growing_season: Weight = _weight(0)
    min_growing_season_days: float = 180

    weight_seasonal_stability: Weight = _weight(25)
    prefer_distinct_seasons: bool = False

    weight_diurnal_swing: Weight = _weight(25)
    max_diurnal_swing: float = 25


class CostPreferences(_PrefsModel):
    housing_situation: HousingSituation = HousingSituation.renter
    include_utilities: bool = True
    work_situation: WorkSituation = WorkSituation.local_earner
    retiree_fixed_income: float = Field(default=50000, ge=0)


class DemographicsPreferences(_PrefsModel):
    min_population: float = Field(default=0, ge=0)

    min_diversity_index: float = Field(default=0, ge=0, le=100)
    weight_diversity: Weight = _weight(25)

    preferred_age_group: AgeGroup = AgeGroup.any
    weight_age: Weight = _weight(0)

    min_bachelors_percent: float = Field(default=0, ge=0, le=100)
    weight_education: Weight = _weight(25)

    min_foreign_born_percent: float = Field(default=0, ge=0, le=100)
    weight_foreign_born: Weight = _weight(0)

    minority_group: MinorityGroup = MinorityGroup.none
    minority_subgroup: MinoritySubgroup = MinoritySubgroup.any
    min_minority_presence: float = Field(default=5, ge=0, le=100)
    minority_importance: Weight = _weight(50)

    min_median_household_income: float = Field(default=0, ge=0)
    max_poverty_rate: float = Field(default=100, ge=0, le=100)
    weight_economic_health: Weight = _weight(25)

    compatibility_enabled: bool = False
    seeking_gender: SeekingGender | None = None
    compatibility_age_range: CompatibilityAgeRange | None = None
    compatibility_weight: Weight = _weight(50)


class QualityOfLifeWeights(_PrefsModel):
    walkability: Weight = _weight(20)
    safety: Weight = _weight(25)
    air_quality: Weight = _weight(15)
    internet: Weight = _weight(10)
    schools: Weight = _weight(15)
    healthcare: Weight = _weight(15)
    recreation: Weight = _weight(0)


class QualityOfLifePreferences(_PrefsModel):
    min_walk_score: float = Field(default=0, ge=0, le=100)
    min_transit_score: float = Field(default=0, ge=0, le=100)
    max_violent_crime_rate: float = Field(default=500, gt=0)
    prefer_falling_crime: bool = False
    max_hazardous_days: float = Field(default=30, ge=0)
    require_fiber: bool = False
    min_providers: int = Field(default=2, ge=0)
    max_student_teacher_ratio: float = Field(default=20, gt=0)
    min_physicians_per_100k: float = Field(default=50, ge=0)

    nature_importance: Weight = _weight(50)
    beach_importance: Weight = _weight(50)
    mountain_importance: Weight = _weight(50)

    weights: QualityOfLifeWeights = Field(default_factory=QualityOfLifeWeights)


class ValuesPreferences(_PrefsModel):
    partisan_preference: PartisanPreference = PartisanPreference.neutral
    partisan_weight: Weight = _weight(0)
    prefer_high_turnout: bool = False

    religious_traditions: list[ReligiousTradition] = Field(default_factory=list)
    min_tradition_presence: float = Field(default=50, ge=0)
    traditions_weight: Weight = _weight(0)

    prefer_religious_diversity: bool = False
    diversity_weight: Weight = _weight(0)


class EntertainmentPreferences(_PrefsModel):
    nightlife_importance: Weight = _weight(50)
    arts_importance: Weight = _weight(50)
    dining_importance: Weight = _weight(50)
    sports_importance: Weight = _weight(50)
    recreation_importance: Weight = _weight(50)

    nature_importance: Weight = _weight(50)
    beach_importance: Weight = _weight(50)
    mountain_importance: Weight = _weight(50)


class AdvancedPreferences(_PrefsModel):
    climate: ClimatePreferences = Field(default_factory=ClimatePreferences)
    cost_of_living: CostPreferences = Field(default_factory=CostPreferences)
    demographics: DemographicsPreferences = Field(default_factory=DemographicsPreferences)
    quality_of_life: QualityOfLifePreferences = Field(default_factory=QualityOfLifePreferences)
    values: ValuesPreferences = Field(default_factory=ValuesPreferences)
    entertainment: EntertainmentPreferences = Field(default_factory=EntertainmentPreferences)


class Preferences(_PrefsModel):
    schema_version: int = SCHEMA_VERSION
    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    filters: HardFilters = Field(default_factory=HardFilters)
    advanced: AdvancedPreferences = Field(default_factory=AdvancedPreferences)


DEFAULT_PREFERENCES = Preferences()
