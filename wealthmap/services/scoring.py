"""Deterministic market, liquidity and risk scores for a single property.

All three scores live on a 0-100 integer scale. Market and liquidity are
"higher is better"; risk is "lower is safer". The lookup tables are read-only
mappings keyed by the normalized (lower-case) property type.
"""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..config import CURRENT_YEAR
from ..models.property import as_property
from ..utils.normalize import clamp, clamp_score

# ---------------------------------------------------------------------------
# Scoring configuration
# ---------------------------------------------------------------------------

NATIONAL_AVG_PRICE_PER_SQFT = 150.0

MARKET_TYPE_BONUS: Mapping[str, float] = MappingProxyType(
    {"residential": 5, "commercial": 10, "industrial": 0, "land": -5}
)

LIQUIDITY_TYPE_BONUS: Mapping[str, float] = MappingProxyType(
    {"residential": 20, "commercial": 10, "industrial": 5, "land": 0}
)

RISK_BY_TYPE: Mapping[str, float] = MappingProxyType(
    {"residential": 0, "commercial": 10, "industrial": 20, "land": 25}
)
UNKNOWN_TYPE_RISK = 15.0

URBAN_POPULATION = 100_000
HIGH_VALUE_THRESHOLD = 1_000_000
VERY_HIGH_VALUE_THRESHOLD = 5_000_000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def current_year(as_of_year: Optional[int] = None) -> int:
    if as_of_year is not None:
        return as_of_year
    if CURRENT_YEAR is not None:
        return CURRENT_YEAR
    return date.today().year


def score_market(property: Any, price_per_sqft: float) -> int:
    """Market attractiveness from city size, county income, price efficiency and type."""

    record = as_property(property)
    score = 50.0

    population = record.city_population
    if population:
        score += min(20.0, population / 50_000)

    income = record.county_median_income
    if income:
        score += min(15.0, (income - 50_000) / 5_000)

    score += clamp((NATIONAL_AVG_PRICE_PER_SQFT - price_per_sqft) / 20, -10.0, 10.0)
    score += MARKET_TYPE_BONUS.get(record.property_type or "", 0)

    return clamp_score(score)


def score_liquidity(property: Any, *, as_of_year: Optional[int] = None) -> int:
    """How quickly the property could be sold: type, size, age and urban premium."""

    record = as_property(property)
    score = 50.0
    score += LIQUIDITY_TYPE_BONUS.get(record.property_type or "", 0)

    if record.square_footage:
        score += clamp((3_000 - record.square_footage) / 500, -15.0, 15.0)

    if record.year_built:
        age = current_year(as_of_year) - record.year_built
        score += clamp((30 - age) / 5, -10.0, 10.0)

    population = record.city_population
    if population and population > URBAN_POPULATION:
        score += 15

    return clamp_score(score)


def score_risk(property: Any, age: float, market_score: float) -> int:
    """Risk score (lower is safer) from age bands, market weakness, type and value."""

    record = as_property(property)
    risk = 30.0

    if age > 50:
        risk += 15
    elif age > 30:
        risk += 10
    elif age < 5:
        # new construction
        risk += 5

    risk += (100 - market_score) * 0.3
    risk += RISK_BY_TYPE.get(record.property_type or "", UNKNOWN_TYPE_RISK)

    value = record.current_value or 0.0
    if value > HIGH_VALUE_THRESHOLD:
        risk += 10
    if value > VERY_HIGH_VALUE_THRESHOLD:
        risk += 15

    return clamp_score(risk)


__all__ = [
    "MARKET_TYPE_BONUS",
    "LIQUIDITY_TYPE_BONUS",
    "RISK_BY_TYPE",
    "UNKNOWN_TYPE_RISK",
    "current_year",
    "score_market",
    "score_liquidity",
    "score_risk",
]
