from __future__ import annotations

from ..metrics.models import EconomicMetrics, MetricRecord
from ..preferences.models import Category, HousingSituation, Preferences, WorkSituation
from .constants import HOME_PRICE_FALLBACK_FLOOR, HOME_PRICE_FALLBACK_SPAN
from .factors import (
    CategoryResult,
    FactorAnalysis,
    FactorStatus,
    build_result,
    fmt,
    make_factor,
    status_from_score,
)
from .persona import PersonaCost, compute_persona_cost
from .primitives import clamp, normalize_to_range

PRIMARY_WEIGHT = 100.0
INDEX_UNIT = "(100 = national avg)"

_HOUSING_LABELS = {
    HousingSituation.renter: "renter",
    HousingSituation.homeowner: "homeowner",
    HousingSituation.prospective_buyer: "prospective buyer",
}
_WORK_LABELS = {
    WorkSituation.local_earner: "earning the local per-capita income",
    WorkSituation.standard: "on a $75,000 reference income",
    WorkSituation.retiree: "on a fixed retirement income",
}


def _purchasing_power_status(index: float) -> FactorStatus:
    if index >= 110:
        return FactorStatus.good
    if index >= 95:
        return FactorStatus.neutral
    if index >= 85:
        return FactorStatus.warning
    return FactorStatus.bad


def _purchasing_power_factor(persona: PersonaCost) -> FactorAnalysis:
    ppi = persona.purchasing_power_index
    who = f"As a {_HOUSING_LABELS[persona.housing_situation]} {_WORK_LABELS[persona.work_situation]}"
    explanation = (
        f"{who}, ${fmt(persona.disposable_income)} after taxes buys what "
        f"${fmt(persona.purchasing_power)} would at national prices "
        f"({fmt(ppi)}% of the national baseline)."
    )
    if persona.property_tax > 0:
        explanation += f" Includes ~${fmt(persona.property_tax)}/yr in property tax."
    return make_factor(
        key="purchasing_power",
        name="Purchasing Power",
        weight=PRIMARY_WEIGHT,
        value=round(ppi, 1),
        unit=INDEX_UNIT,
        score=persona.score,
        status=_purchasing_power_status(ppi),
        explanation=explanation,
    )


def _home_price_factor(price: float) -> FactorAnalysis:
    score = clamp(100.0 - (price - HOME_PRICE_FALLBACK_FLOOR) / HOME_PRICE_FALLBACK_SPAN * 100.0)
    return make_factor(
        key="home_price",
        name="Median Home Price",
        weight=PRIMARY_WEIGHT,
        value=price,
        unit="$",
        score=score,
        status=status_from_score(score),
        explanation=f"Price indices unavailable; scored on the ${fmt(price)} median home price.",
    )


def _housing_factor(econ: EconomicMetrics, persona: PersonaCost | None) -> FactorAnalysis | None:
    if persona is not None and persona.housing_situation is HousingSituation.prospective_buyer:
        index = persona.housing_index
    else:
        index = econ.rpp_housing
    if index is None:
        return None

    if index > 150:
        status = FactorStatus.bad
        explanation = f"Housing costs {fmt(index - 100)}% above national average, very expensive."
    elif index < 90:
        status = FactorStatus.good
        explanation = f"Housing costs {fmt(100 - index)}% below national average."
    else:
        status = FactorStatus.neutral
        explanation = "Housing costs are near national average."

    if persona is not None and persona.housing_compressed:
        explanation += (
            f" Mortgage payments run {fmt(persona.raw_housing_index)}% of national; "
            f"compressed to {fmt(index)} for scoring."
        )
    if persona is not None and persona.housing_situation is HousingSituation.homeowner:
        explanation += " Excluded from your cost index since your mortgage is fixed."

    return make_factor(
        key="housing_index",
        name="Housing Cost Index",
        weight=0,
        value=round(index, 1),
        unit=INDEX_UNIT,
        score=150.0 - index,
        status=status,
        explanation=explanation,
        descriptive=True,
    )


def _goods_services_factor(econ: EconomicMetrics, persona: PersonaCost | None) -> FactorAnalysis | None:
    if persona is not None and persona.goods_services_index is not None:
        index, name = persona.goods_services_index, "Goods & Services Index"
    elif econ.rpp_all_items is not None:
        index, name = econ.rpp_all_items, "Overall Cost Index"
    else:
        return None

    if index > 115:
        status = FactorStatus.bad
    elif index < 95:
        status = FactorStatus.good
    else:
        status = FactorStatus.neutral
    direction = "above" if index > 100 else "below"
    return make_factor(
        key="goods_services_index",
        name=name,
        weight=0,
        value=round(index, 1),
        unit=INDEX_UNIT,
        score=130.0 - index,
        status=status,
        explanation=f"Everyday prices are {fmt(abs(index - 100))}% {direction} national average.",
        descriptive=True,
    )


def _tax_factor(econ: EconomicMetrics) -> FactorAnalysis | None:
    rate = econ.effective_tax_rate
    if rate is None:
        return None
    if rate > 20:
        status, word = FactorStatus.bad, "high"
    elif rate < 12:
        status, word = FactorStatus.good, "relatively low"
    else:
        status, word = FactorStatus.neutral, "moderate"
    return make_factor(
        key="tax_burden",
        name="Effective Tax Rate",
        weight=0,
        value=round(rate, 1),
        unit="%",
        score=100.0 - rate * 4,
        status=status,
        explanation=f"{fmt(rate)}% effective tax rate is {word}.",
        descriptive=True,
    )


def _income_factor(econ: EconomicMetrics) -> FactorAnalysis | None:
    income = econ.per_capita_income
    if income is None:
        return None
    score = normalize_to_range(income, 30000, 90000)
    return make_factor(
        key="local_income",
        name="Local Per-Capita Income",
        weight=0,
        value=income,
        unit="$",
        score=score,
        status=status_from_score(score),
        explanation=f"Residents earn ${fmt(income)} per capita.",
        descriptive=True,
    )


def score_cost_of_living(record: MetricRecord, prefs: Preferences) -> CategoryResult:
    """Purchasing power for the selected persona carries the whole category.

    Housing, goods and services, tax and income context ride along as
    zero-weight descriptive factors. Without price indices the median home
    price scale is used, and with neither the category is neutral.
    """
    econ = record.economic
    persona = compute_persona_cost(econ, prefs.advanced.cost_of_living)

    factors: list[FactorAnalysis] = []
    if persona is not None:
        factors.append(_purchasing_power_factor(persona))
    elif econ.median_home_price is not None:
        factors.append(_home_price_factor(econ.median_home_price))

    for factor in (
        _housing_factor(econ, persona),
        _goods_services_factor(econ, persona),
        _tax_factor(econ),
        _income_factor(econ),
    ):
        if factor is not None:
            factors.append(factor)

    return build_result(Category.cost_of_living, factors)
