"""Market-level statistics over a slice of properties."""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ..models.analysis import MarketAnalysis, MarketTrend
from ..models.property import as_property_list
from ..utils.logging import get_logger
from ..utils.normalize import clamp, clamp_score, round_half_up
from ..utils.randomness import resolve_rng, symmetric_noise

LOGGER = get_logger("services.market")

BASE_PRICE_GROWTH = 0.05
PRICE_GROWTH_SPREAD = 0.10
DAYS_ON_MARKET_RANGE = (60.0, 120.0)
DEFAULT_DAYS_ON_MARKET = 90
BULLISH_GROWTH = 0.07
BEARISH_GROWTH = 0.02


def classify_trend(price_growth: float) -> MarketTrend:
    if price_growth > BULLISH_GROWTH:
        return "bullish"
    if price_growth < BEARISH_GROWTH:
        return "bearish"
    return "stable"


def absorption_rate(inventory: int) -> float:
    return round_half_up(clamp(inventory / 100, 0.1, 2.0), 2)


def analyze_market(
    properties: Sequence[Any],
    location: Optional[str] = None,
    *,
    rng: Optional[np.random.Generator] = None,
) -> MarketAnalysis:
    """Summarize prices, simulated growth and competitiveness for a market slice.

    Zero or missing values are excluded from the price statistics. When no
    property carries a positive value the documented defaults are returned,
    with ``inventory`` still reporting how many properties were supplied.
    """

    records = as_property_list(properties)
    inventory = len(records)
    prices = np.array(
        [record.current_value for record in records if record.current_value and record.current_value > 0],
        dtype=float,
    )

    if prices.size == 0:
        if records:
            LOGGER.info("market_without_prices location=%s inventory=%s", location, inventory)
        return MarketAnalysis(
            median_price=0,
            average_price=0,
            price_growth=0.0,
            inventory=inventory,
            days_on_market=DEFAULT_DAYS_ON_MARKET,
            absorption=absorption_rate(inventory) if inventory else 0.0,
            market_trend="stable",
            competitive_index=50,
            location=location,
        )

    generator = resolve_rng(rng)
    median_price = float(np.median(prices))
    average_price = float(np.mean(prices))

    price_growth = BASE_PRICE_GROWTH + symmetric_noise(generator, PRICE_GROWTH_SPREAD)
    days_on_market = float(generator.uniform(*DAYS_ON_MARKET_RANGE))

    # Population variance relative to the mean price.
    price_variance = float(np.var(prices))
    competitive_index = clamp_score(50 + (price_variance / average_price) * 100)

    LOGGER.debug(
        "market location=%s inventory=%s priced=%s median=%.0f growth=%.4f",
        location,
        inventory,
        prices.size,
        median_price,
        price_growth,
    )

    return MarketAnalysis(
        median_price=int(round_half_up(median_price)),
        average_price=int(round_half_up(average_price)),
        price_growth=round_half_up(price_growth, 2),
        inventory=inventory,
        days_on_market=int(round_half_up(days_on_market)),
        absorption=absorption_rate(inventory),
        market_trend=classify_trend(price_growth),
        competitive_index=competitive_index,
        location=location,
    )


__all__ = ["classify_trend", "absorption_rate", "analyze_market"]
