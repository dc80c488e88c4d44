"""
Hard filters: boolean exclusion rules independent of all weighting.

A record whose metric is unknown is never excluded by that filter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..metrics.models import MetricRecord
from ..preferences.models import HardFilters
from .factors import fmt

FilterCheck = Callable[[MetricRecord, HardFilters], str | None]


@dataclass(frozen=True)
class FilterVerdict:
    reasons: tuple[str, ...] = ()

    @property
    def included(self) -> bool:
        return not self.reasons

    @property
    def reason(self) -> str | None:
        return "; ".join(self.reasons) if self.reasons else None


def _max_home_price(record: MetricRecord, filters: HardFilters) -> str | None:
    limit = filters.max_home_price
    price = record.economic.median_home_price
    if limit is None or price is None or price <= limit:
        return None
    return f"Median home price ${fmt(price)} exceeds your max of ${fmt(limit)}"


def _required_leagues(record: MetricRecord, filters: HardFilters) -> str | None:
    if not filters.required_leagues:
        return None
    teams = record.cultural.sports_teams
    if teams is None:
        return None
    missing = [league for league in filters.required_leagues if teams.get(league, 0) <= 0]
    if not missing:
        return None
    names = ", ".join(league.value.upper() for league in missing)
    return f"No {names} team"


def _max_violent_crime(record: MetricRecord, filters: HardFilters) -> str | None:
    limit = filters.max_violent_crime_rate
    rate = record.quality_of_life.violent_crime_rate
    if limit is None or rate is None or rate <= limit:
        return None
    return f"Violent crime rate {fmt(rate)}/100K exceeds your max of {fmt(limit)}"


HARD_FILTERS: tuple[FilterCheck, ...] = (
    _max_home_price,
    _required_leagues,
    _max_violent_crime,
)


def evaluate_filters(record: MetricRecord, filters: HardFilters) -> FilterVerdict:
    reasons = []
    for check in HARD_FILTERS:
        reason = check(record, filters)
        if reason is not None:
            reasons.append(reason)
    return FilterVerdict(reasons=tuple(reasons))
