"""Aggregate analytics over one owner's holdings."""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ..models.analysis import OwnershipAnalysis
from ..models.property import PROPERTY_TYPES, as_property_list
from ..utils.logging import get_logger
from ..utils.normalize import (
    RATIO_BOUNDS,
    category_shares,
    clamp_score,
    herfindahl_index,
    round_half_up,
)
from ..utils.randomness import resolve_rng
from .valuation import calculate_property_valuation

LOGGER = get_logger("services.portfolio")

KNOWN_TYPE_COUNT = len(PROPERTY_TYPES)
# Placeholder average leverage; not derived from the holdings.
LEVERAGE_RATIO = 0.65
LIQUID_VALUE_CEILING = 500_000

EMPTY_PORTFOLIO = OwnershipAnalysis(
    portfolio_value=0,
    portfolio_growth=0.0,
    diversification_score=0,
    concentration_risk=100,
    leverage_ratio=LEVERAGE_RATIO,
    liquidity_ratio=0.0,
    performance_score=0,
)


def analyze_owner_portfolio(
    properties: Sequence[Any],
    *,
    rng: Optional[np.random.Generator] = None,
    as_of_year: Optional[int] = None,
) -> OwnershipAnalysis:
    """Score diversification, concentration, liquidity and overall performance.

    Property types and cities are bucketed as-is; missing values fall into an
    ``"unknown"`` bucket. Growth is the mean simulated appreciation of the
    holdings, so it shares the valuation engine's random source.
    """

    records = as_property_list(properties)
    if not records:
        return EMPTY_PORTFOLIO.model_copy()

    generator = resolve_rng(rng)
    count = len(records)

    portfolio_value = sum(record.current_value or 0.0 for record in records)

    type_shares = category_shares(record.property_type or "unknown" for record in records)
    diversification = (len(type_shares) / KNOWN_TYPE_COUNT) * 50 + (1 - float(type_shares.max())) * 50
    diversification_score = clamp_score(diversification)
    concentration_risk = clamp_score(herfindahl_index(type_shares) * 100)

    geo_hhi = herfindahl_index(category_shares(record.city or "unknown" for record in records))

    appreciation = [
        calculate_property_valuation(record, rng=generator, as_of_year=as_of_year).appreciation_rate
        for record in records
    ]
    portfolio_growth = float(np.mean(appreciation))

    liquid_assets = sum(
        1
        for record in records
        if record.property_type == "residential" and (record.current_value or 0.0) < LIQUID_VALUE_CEILING
    )
    liquidity_ratio = RATIO_BOUNDS.clamp(round_half_up(liquid_assets / count, 2))

    performance = (
        diversification_score * 0.3
        + (100 - concentration_risk) * 0.2
        + (100 - geo_hhi * 100) * 0.2
        + min(100.0, portfolio_growth * 1000) * 0.3
    )

    LOGGER.debug(
        "portfolio holdings=%s value=%.0f types=%s type_hhi=%.3f geo_hhi=%.3f growth=%.4f",
        count,
        portfolio_value,
        len(type_shares),
        herfindahl_index(type_shares),
        geo_hhi,
        portfolio_growth,
    )

    return OwnershipAnalysis(
        portfolio_value=int(round_half_up(portfolio_value)),
        portfolio_growth=round_half_up(portfolio_growth, 2),
        diversification_score=diversification_score,
        concentration_risk=concentration_risk,
        leverage_ratio=LEVERAGE_RATIO,
        liquidity_ratio=liquidity_ratio,
        performance_score=clamp_score(performance),
    )


__all__ = ["LEVERAGE_RATIO", "EMPTY_PORTFOLIO", "analyze_owner_portfolio"]
