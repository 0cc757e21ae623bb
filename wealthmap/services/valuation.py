"""Automated valuation model (AVM) for a single property.

The estimate is a hedonic multiplicative chain::

    estimated = base * age_depreciation * location * type * market_condition

where ``base`` is the recorded current value (falling back to the assessed
value). Comparable properties, when supplied, only feed the
``marketValueAdjustment`` field; they never move the estimate itself.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..models.analysis import PropertyMetrics
from ..models.property import PropertyRecord, as_property, as_property_list
from ..utils.logging import get_logger
from ..utils.normalize import clamp, round_half_up
from ..utils.randomness import resolve_rng, symmetric_noise
from .scoring import current_year, score_liquidity, score_market, score_risk

LOGGER = get_logger("services.valuation")

DEFAULT_YEAR_BUILT = 2000
MIN_AGE_DEPRECIATION = 0.7
REFERENCE_COUNTY_INCOME = 65_000.0
LOCATION_BOUNDS = (0.8, 1.5)
MARKET_CONDITION = 1.05

TYPE_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {"residential": 1.0, "commercial": 1.2, "industrial": 0.9, "land": 0.7}
)

BASE_APPRECIATION = 0.03
APPRECIATION_VOLATILITY = 0.15

# Commercial income approximation
GROSS_RENT_YIELD = 0.08
EXPENSE_RATIO = 0.35
DOWN_PAYMENT_RATE = 0.25

NATIONAL_MEDIAN_PRICE = 350_000.0
DEFAULT_TAX_RATE = 0.012
MAINTENANCE_RATE = 0.015
INSURANCE_RATE = 0.003


def age_depreciation(age: float) -> float:
    """Non-linear decay, never below 70% of the base value."""

    return max(MIN_AGE_DEPRECIATION, 1 - age * 0.008 - (age * 0.001) ** 2)


def location_multiplier(record: PropertyRecord) -> float:
    income = record.county_median_income
    if not income:
        return 1.0
    return clamp(income / REFERENCE_COUNTY_INCOME, *LOCATION_BOUNDS)


def type_multiplier(record: PropertyRecord) -> float:
    return TYPE_MULTIPLIERS.get(record.property_type or "", 1.0)


def market_value_adjustment(price_per_sqft: float, comparables: Sequence[PropertyRecord]) -> float:
    """Relative premium of this property's price/sqft over the comparables' median."""

    comp_prices = [
        comp.current_value / max(comp.square_footage or 1.0, 1.0)
        for comp in comparables
        if comp.current_value and comp.current_value > 0
    ]
    if not comp_prices:
        return 0.0
    median = float(np.median(comp_prices))
    if median <= 0:
        return 0.0
    return (price_per_sqft - median) / median


def value_percentile(estimated_value: float) -> float:
    if estimated_value <= 0:
        return 1.0
    return clamp(50 + math.log(estimated_value / NATIONAL_MEDIAN_PRICE) * 20, 1.0, 99.0)


def calculate_property_valuation(
    property: Any,
    comparables: Optional[Sequence[Any]] = None,
    *,
    rng: Optional[np.random.Generator] = None,
    as_of_year: Optional[int] = None,
) -> PropertyMetrics:
    """Value a property and score its market, liquidity and risk profile.

    ``rng`` drives the simulated appreciation term; pass a seeded generator
    for reproducible output. ``as_of_year`` pins the year used for building age.
    """

    record = as_property(property)
    comps = as_property_list(comparables, name="comparables") if comparables is not None else []
    generator = resolve_rng(rng)
    year = current_year(as_of_year)

    base_value = max(record.current_value or record.assessed_value or 0.0, 0.0)
    sqft = max(record.square_footage or 1.0, 1.0)
    age = year - (record.year_built or DEFAULT_YEAR_BUILT)

    estimated_value = (
        base_value
        * age_depreciation(age)
        * location_multiplier(record)
        * type_multiplier(record)
        * MARKET_CONDITION
    )
    price_per_sqft = estimated_value / sqft
    adjustment = market_value_adjustment(price_per_sqft, comps)
    appreciation_rate = BASE_APPRECIATION + symmetric_noise(generator, APPRECIATION_VOLATILITY)

    cap_rate = cash_on_cash = roi = None
    if record.property_type == "commercial":
        estimated_rent = estimated_value * GROSS_RENT_YIELD
        operating_expenses = estimated_rent * EXPENSE_RATIO
        noi = estimated_rent - operating_expenses
        if estimated_value > 0:
            cap_rate = noi / estimated_value
            cash_on_cash = noi / (estimated_value * DOWN_PAYMENT_RATE)
            roi = (noi + estimated_value * appreciation_rate) / estimated_value
        else:
            cap_rate = cash_on_cash = roi = 0.0

    market_score = score_market(record, price_per_sqft)
    liquidity_score = score_liquidity(record, as_of_year=year)
    risk_score = score_risk(record, age, market_score)

    tax_amount = record.tax_amount or estimated_value * DEFAULT_TAX_RATE
    tax_burden = tax_amount / estimated_value if estimated_value > 0 else 0.0

    LOGGER.debug(
        "valuation property=%s type=%s age=%s estimated=%.0f market=%s liquidity=%s risk=%s",
        record.id,
        record.property_type,
        age,
        estimated_value,
        market_score,
        liquidity_score,
        risk_score,
    )

    return PropertyMetrics(
        estimated_value=int(round_half_up(estimated_value)),
        price_per_sq_ft=int(round_half_up(price_per_sqft)),
        market_value_adjustment=adjustment,
        appreciation_rate=appreciation_rate,
        cap_rate=cap_rate,
        cash_on_cash_return=cash_on_cash,
        roi=roi,
        market_score=market_score,
        liquidity_score=liquidity_score,
        risk_score=risk_score,
        price_to_area_median=estimated_value / NATIONAL_MEDIAN_PRICE,
        value_percentile=value_percentile(estimated_value),
        tax_burden=tax_burden,
        maintenance_cost_estimate=int(round_half_up(estimated_value * MAINTENANCE_RATE)),
        insurance_cost_estimate=int(round_half_up(estimated_value * INSURANCE_RATE)),
    )


__all__ = [
    "TYPE_MULTIPLIERS",
    "NATIONAL_MEDIAN_PRICE",
    "age_depreciation",
    "location_multiplier",
    "type_multiplier",
    "market_value_adjustment",
    "value_percentile",
    "calculate_property_valuation",
]
