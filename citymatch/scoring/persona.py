"""
Persona cost model.

Turns a housing situation (renter, homeowner, prospective buyer) and a work
situation (local earner, standard, retiree) into a purchasing-power index:

    purchasing power = disposable income / (adjusted cost index / 100)
    index            = purchasing power / persona baseline * 100
    score            = 50 + (index - 100) * 0.75, clamped to 0-100

The baseline is what the same persona would have left at national-average
prices and taxes, so every persona is centered on 100.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..metrics.models import EconomicMetrics
from ..preferences.models import CostPreferences, HousingSituation, WorkSituation
from .constants import (
    ASSESSED_VALUE_LAG,
    BUYER_HOUSING_SHARE,
    COST_SCORE_SLOPE,
    DOWN_PAYMENT_FRACTION,
    HOMEOWNER_GOODS_SHARE,
    HOMEOWNER_SERVICES_SHARE,
    HOUSING_COMPRESSION_SPAN,
    HOUSING_COMPRESSION_START,
    MORTGAGE_RATE,
    MORTGAGE_TERM_YEARS,
    NATIONAL_EFFECTIVE_TAX_RATE,
    NATIONAL_MEDIAN_HOME_PRICE,
    NATIONAL_PER_CAPITA_DISPOSABLE,
    NATIONAL_PROPERTY_TAX_RATE,
    NATIONAL_REFERENCE_INCOME,
    UTILITIES_NUDGE,
)
from .primitives import clamp


def monthly_mortgage_payment(
    home_price: float,
    down_payment: float = DOWN_PAYMENT_FRACTION,
    annual_rate: float = MORTGAGE_RATE,
    years: int = MORTGAGE_TERM_YEARS,
) -> float:
    """Standard amortized monthly payment on the financed part of ``home_price``."""
    principal = max(0.0, home_price) * (1.0 - down_payment)
    months = years * 12
    rate = annual_rate / 12.0
    if rate == 0:
        return principal / months
    return principal * rate / (1.0 - (1.0 + rate) ** -months)


NATIONAL_BASELINE_PAYMENT = monthly_mortgage_payment(NATIONAL_MEDIAN_HOME_PRICE)
NATIONAL_PROPERTY_TAX = NATIONAL_MEDIAN_HOME_PRICE * ASSESSED_VALUE_LAG * NATIONAL_PROPERTY_TAX_RATE


def compress_housing_index(raw_index: float) -> float:
    """Logarithmically compress housing indices above 150.

    Keeps very expensive markets ranked below cheaper ones without letting
    them dominate: 220 becomes ~169 rather than 220.
    """
    if raw_index <= HOUSING_COMPRESSION_START:
        return raw_index
    excess = raw_index - HOUSING_COMPRESSION_START
    return HOUSING_COMPRESSION_START + math.log10(1.0 + excess / HOUSING_COMPRESSION_SPAN) * HOUSING_COMPRESSION_SPAN


@dataclass(frozen=True)
class PersonaCost:
    housing_situation: HousingSituation
    work_situation: WorkSituation
    adjusted_index: float
    goods_services_index: float | None
    housing_index: float | None
    raw_housing_index: float | None
    monthly_payment: float | None
    gross_income: float
    tax_rate: float
    property_tax: float
    disposable_income: float
    baseline_income: float
    purchasing_power: float
    purchasing_power_index: float

    @property
    def score(self) -> float:
        return clamp(50.0 + (self.purchasing_power_index - 100.0) * COST_SCORE_SLOPE)

    @property
    def housing_compressed(self) -> bool:
        return (
            self.raw_housing_index is not None
            and self.housing_index is not None
            and self.raw_housing_index > self.housing_index
        )


def goods_services_index(econ: EconomicMetrics) -> float | None:
    if econ.rpp_goods is None or econ.rpp_other_services is None:
        return None
    return HOMEOWNER_GOODS_SHARE * econ.rpp_goods + HOMEOWNER_SERVICES_SHARE * econ.rpp_other_services


def _adjusted_index(
    econ: EconomicMetrics,
    prefs: CostPreferences,
) -> tuple[float, float | None, float | None, float | None] | None:
    """Return (adjusted index, housing index, raw housing index, monthly payment)."""
    non_housing = goods_services_index(econ)

    if prefs.housing_situation is HousingSituation.renter:
        if econ.rpp_all_items is None:
            return None
        adjusted = econ.rpp_all_items
        if prefs.include_utilities and econ.rpp_utilities is not None:
            adjusted += UTILITIES_NUDGE * (econ.rpp_utilities - 100.0)
        return adjusted, econ.rpp_housing, None, None

    if prefs.housing_situation is HousingSituation.homeowner:
        # mortgage is already fixed, so housing drops out entirely
        if non_housing is not None:
            return non_housing, None, None, None
        if econ.rpp_all_items is not None:
            return econ.rpp_all_items, None, None, None
        return None

    # prospective buyer: today's prices at today's rates
    payment = None
    raw_housing = None
    if econ.median_home_price is not None:
        payment = monthly_mortgage_payment(econ.median_home_price)
        raw_housing = payment / NATIONAL_BASELINE_PAYMENT * 100.0
    elif econ.rpp_housing is not None:
        raw_housing = econ.rpp_housing

    if non_housing is None:
        non_housing = econ.rpp_all_items
    if raw_housing is None:
        if non_housing is None:
            return None
        return non_housing, None, None, None

    housing = compress_housing_index(raw_housing)
    if non_housing is None:
        return housing, housing, raw_housing, payment
    adjusted = BUYER_HOUSING_SHARE * housing + (1.0 - BUYER_HOUSING_SHARE) * non_housing
    return adjusted, housing, raw_housing, payment


def _income(
    econ: EconomicMetrics,
    prefs: CostPreferences,
) -> tuple[float, float, float, float] | None:
    """Return (gross income, tax rate percent, after-tax income, baseline after-tax income)."""
    tax_rate = econ.effective_tax_rate if econ.effective_tax_rate is not None else NATIONAL_EFFECTIVE_TAX_RATE
    tax_rate = clamp(tax_rate, 0.0, 60.0)
    national_share = 1.0 - NATIONAL_EFFECTIVE_TAX_RATE / 100.0

    if prefs.work_situation is WorkSituation.local_earner:
        if econ.per_capita_disposable_income is not None:
            after_tax = econ.per_capita_disposable_income
            gross = econ.per_capita_income if econ.per_capita_income is not None else after_tax
        elif econ.per_capita_income is not None:
            gross = econ.per_capita_income
            after_tax = gross * (1.0 - tax_rate / 100.0)
        else:
            return None
        return gross, tax_rate, after_tax, NATIONAL_PER_CAPITA_DISPOSABLE

    if prefs.work_situation is WorkSituation.standard:
        gross = NATIONAL_REFERENCE_INCOME
    else:
        gross = prefs.retiree_fixed_income
    if gross <= 0:
        return None
    return gross, tax_rate, gross * (1.0 - tax_rate / 100.0), gross * national_share


def compute_persona_cost(econ: EconomicMetrics, prefs: CostPreferences) -> PersonaCost | None:
    """Run the persona model, or return None when the inputs it needs are missing."""
    index = _adjusted_index(econ, prefs)
    income = _income(econ, prefs)
    if index is None or income is None:
        return None
    adjusted, housing, raw_housing, payment = index
    gross, tax_rate, after_tax, baseline = income
    if adjusted <= 0:
        return None

    property_tax = 0.0
    if prefs.housing_situation is HousingSituation.homeowner:
        if econ.median_home_price is not None:
            rate = econ.property_tax_rate if econ.property_tax_rate is not None else NATIONAL_PROPERTY_TAX_RATE
            property_tax = econ.median_home_price * ASSESSED_VALUE_LAG * rate
        else:
            property_tax = NATIONAL_PROPERTY_TAX
        baseline -= NATIONAL_PROPERTY_TAX

    if baseline <= 0:
        return None

    disposable = max(0.0, after_tax - property_tax)
    purchasing_power = disposable / (adjusted / 100.0)
    return PersonaCost(
        housing_situation=prefs.housing_situation,
        work_situation=prefs.work_situation,
        adjusted_index=adjusted,
        goods_services_index=goods_services_index(econ),
        housing_index=housing,
        raw_housing_index=raw_housing,
        monthly_payment=payment,
        gross_income=gross,
        tax_rate=tax_rate,
        property_tax=property_tax,
        disposable_income=disposable,
        baseline_income=baseline,
        purchasing_power=purchasing_power,
        purchasing_power_index=purchasing_power / baseline * 100.0,
    )
