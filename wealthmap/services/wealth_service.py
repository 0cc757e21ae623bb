"""Owner wealth analysis: portfolio, peer comparison and risk assessment."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence

import numpy as np
from pydantic import ValidationError

from ..errors import InvalidInputError
from ..models.analysis import (
    AnalysisMetadata,
    DataQuality,
    MarketComparison,
    OwnerSummary,
    OwnershipAnalysis,
    PortfolioHolding,
    RiskAssessment,
    WealthAnalysis,
    WealthBreakdownEntry,
)
from ..models.property import OwnerRecord, PropertyRecord
from ..utils.logging import get_logger
from ..utils.normalize import clamp, round_half_up
from .portfolio import analyze_owner_portfolio
from .scoring import current_year

LOGGER = get_logger("services.wealth")

MAX_ID_LENGTH = 100
MAX_LISTED_PROPERTIES = 50
MAX_RISK_ITEMS = 8
DEFAULT_NET_WORTH = 1_000_000.0
PEER_AVERAGE_FLOOR = 50_000

INDUSTRY_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "technology": 1.3,
        "finance": 1.2,
        "healthcare": 1.1,
        "real estate": 1.4,
        "manufacturing": 0.9,
        "education": 0.8,
        "government": 0.7,
        "entertainment": 1.1,
        "consulting": 1.15,
        "law": 1.25,
        "energy": 1.1,
        "retail": 0.85,
        "hospitality": 0.8,
        "agriculture": 0.75,
    }
)

STATE_COST_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "CA": 1.4,
        "NY": 1.3,
        "MA": 1.25,
        "WA": 1.2,
        "CT": 1.2,
        "HI": 1.35,
        "NJ": 1.15,
        "MD": 1.1,
        "VA": 1.05,
        "CO": 1.05,
        "FL": 1.0,
        "TX": 0.95,
        "IL": 0.95,
        "NC": 0.9,
        "GA": 0.9,
        "OH": 0.85,
        "PA": 0.85,
        "MI": 0.8,
        "IN": 0.75,
        "TN": 0.75,
        "KY": 0.7,
        "AL": 0.7,
        "MS": 0.65,
        "WV": 0.65,
    }
)

GENERAL_RECOMMENDATIONS = (
    "Conduct annual portfolio reviews and rebalancing",
    "Stay informed about market trends and economic indicators",
    "Maintain adequate insurance coverage for major assets",
)


def validate_identifier(value: Optional[str], name: str, *, required: bool) -> None:
    if value is None and not required:
        return
    if not isinstance(value, str) or not value or len(value) >= MAX_ID_LENGTH:
        raise InvalidInputError(f"Invalid {name} format: {value!r}")


def industry_multiplier(industry: Optional[str]) -> float:
    if not industry:
        return 1.0
    return INDUSTRY_MULTIPLIERS.get(industry.strip().lower(), 1.0)


def location_multiplier(holdings: Sequence[PortfolioHolding]) -> float:
    """Value-weighted cost-of-living multiplier of the states the owner holds in."""

    total_value = sum(h.current_value for h in holdings)
    if total_value <= 0:
        return 1.0
    weighted = sum(h.current_value * STATE_COST_MULTIPLIERS.get(h.state, 1.0) for h in holdings)
    return weighted / total_value


def owner_display_name(owner: OwnerRecord) -> str:
    if owner.type == "individual":
        name = " ".join(part for part in (owner.first_name, owner.last_name) if part)
        return name or "Individual Owner"
    return owner.entity_name or "Entity Owner"


@dataclass
class _RiskBuilder:
    score: float = 25.0
    factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def add(self, delta: float, factor: Optional[str], recommendation: Optional[str]) -> None:
        self.score += delta
        if factor:
            self.factors.append(factor)
        if recommendation:
            self.recommendations.append(recommendation)


def assess_risk(
    owner: OwnerRecord,
    holdings: Sequence[PortfolioHolding],
    portfolio: OwnershipAnalysis,
    *,
    as_of_year: Optional[int] = None,
) -> RiskAssessment:
    """Rule-based owner risk score (5-95) with the factors and advice behind it."""

    risk = _RiskBuilder()

    if portfolio.concentration_risk > 80:
        risk.add(
            20,
            "Very high concentration in single asset type - significant diversification risk",
            "Urgently diversify across multiple property types and asset classes",
        )
    elif portfolio.concentration_risk > 60:
        risk.add(
            12,
            "High concentration in limited asset types",
            "Consider diversifying across different property types and markets",
        )
    elif portfolio.concentration_risk < 30:
        risk.add(-5, None, "Excellent diversification - maintain current portfolio balance")

    unique_states = len({h.state for h in holdings})
    total = len(holdings)
    if unique_states == 1 and total > 3:
        risk.add(
            15,
            "Complete geographic concentration in single state",
            "Diversify investments across multiple states and regions",
        )
    elif unique_states <= 2 and total > 5:
        risk.add(
            10,
            "Limited geographic diversification across states",
            "Expand to additional geographic markets for better risk distribution",
        )
    elif unique_states >= min(5, total // 2):
        risk.add(-5, None, "Good geographic diversification - continue expanding thoughtfully")

    if portfolio.liquidity_ratio < 0.2:
        risk.add(
            15,
            "Very low portfolio liquidity - difficulty accessing cash quickly",
            "Increase allocation to more liquid assets and maintain emergency reserves",
        )
    elif portfolio.liquidity_ratio < 0.4:
        risk.add(
            8,
            "Below-average portfolio liquidity",
            "Consider increasing liquid asset allocation for financial flexibility",
        )
    elif portfolio.liquidity_ratio > 0.7:
        risk.add(-3, None, "Strong liquidity position - well-positioned for opportunities")

    if owner.type == "individual" and owner.date_of_birth:
        age = current_year(as_of_year) - owner.date_of_birth.year
        if age > 70:
            risk.add(
                12,
                "Advanced age requires more conservative investment approach",
                "Focus on income-generating assets and capital preservation strategies",
            )
        elif age > 60:
            risk.add(
                6,
                "Pre-retirement age suggests need for risk assessment",
                "Begin transitioning to more conservative investment strategy",
            )
        elif age < 35:
            risk.add(-5, None, "Young age allows for higher risk tolerance and growth focus")

    net_worth = owner.estimated_net_worth or 0.0
    if net_worth > 50_000_000:
        risk.add(
            8,
            "Ultra-high net worth requires sophisticated wealth management",
            "Engage specialized wealth management and tax planning professionals",
        )
    elif net_worth > 10_000_000:
        risk.add(
            5,
            "High net worth complexity requires professional oversight",
            "Consider comprehensive wealth management and estate planning services",
        )
    elif net_worth < 500_000:
        risk.add(
            3,
            "Limited wealth base requires careful growth strategy",
            "Focus on building diversified wealth foundation",
        )

    confidence = owner.wealth_confidence or 0.0
    if confidence < 0.6:
        risk.add(
            12,
            "Low confidence in wealth estimates creates planning uncertainty",
            "Conduct comprehensive financial audit to improve data accuracy",
        )
    elif confidence < 0.8:
        risk.add(
            6,
            "Moderate uncertainty in wealth estimates",
            "Verify and update financial information for better planning accuracy",
        )

    if portfolio.performance_score < 40:
        risk.add(
            15,
            "Significantly below-average portfolio performance",
            "Comprehensive portfolio review and strategy overhaul recommended",
        )
    elif portfolio.performance_score < 60:
        risk.add(
            8,
            "Below-average portfolio performance",
            "Review investment strategy and consider professional portfolio management",
        )
    elif portfolio.performance_score > 80:
        risk.add(-8, None, "Excellent portfolio performance - maintain successful strategies")

    if holdings:
        average_value = sum(h.current_value for h in holdings) / len(holdings)
        if average_value > 2_000_000:
            risk.add(
                5,
                "High-value properties may be more sensitive to market cycles",
                "Monitor market conditions and consider hedging strategies",
            )

    if portfolio.diversification_score > 75:
        risk.add(-8, None, "Excellent diversification strategy - continue maintaining balance")
    if confidence > 0.85:
        risk.add(-3, None, "High data confidence enables better strategic planning")

    if len(risk.recommendations) < 3:
        risk.recommendations.extend(GENERAL_RECOMMENDATIONS)
    if not risk.factors:
        risk.factors.append("Portfolio shows balanced risk characteristics")

    return RiskAssessment(
        score=int(round_half_up(clamp(risk.score, 5, 95))),
        factors=risk.factors[:MAX_RISK_ITEMS],
        recommendations=risk.recommendations[:MAX_RISK_ITEMS],
    )


def market_comparison(owner: OwnerRecord, holdings: Sequence[PortfolioHolding]) -> MarketComparison:
    net_worth = max(0.0, owner.estimated_net_worth or DEFAULT_NET_WORTH)
    if net_worth > 0:
        base_percentile = clamp(50 + math.log(net_worth / DEFAULT_NET_WORTH) * 15, 5, 95)
    else:
        base_percentile = 5.0
    return MarketComparison(
        percentile=int(round_half_up(clamp(base_percentile, 1, 99))),
        industry_average=int(round_half_up(max(PEER_AVERAGE_FLOOR, net_worth / industry_multiplier(owner.industry)))),
        local_average=int(round_half_up(max(PEER_AVERAGE_FLOOR, net_worth / location_multiplier(holdings)))),
    )


class WealthService:
    """Builds the wealth-analysis payload for one owner."""

    def analyze_owner(
        self,
        owner: Any,
        *,
        owner_id: Optional[str] = None,
        property_id: Optional[str] = None,
        rng: Optional[np.random.Generator] = None,
        as_of_year: Optional[int] = None,
    ) -> WealthAnalysis:
        started = time.perf_counter()
        record = self._coerce_owner(owner)
        if owner_id is not None:
            record = record.model_copy(update={"id": owner_id})
        validate_identifier(record.id, "owner ID", required=True)
        validate_identifier(property_id, "property ID", required=False)

        LOGGER.info("wealth_analysis_start owner=%s property=%s", record.id, property_id)

        holdings, errors = self._holdings(record)
        if errors:
            LOGGER.warning("wealth_analysis_property_errors owner=%s errors=%s", record.id, errors)

        portfolio = analyze_owner_portfolio(
            [self._holding_record(h) for h in holdings], rng=rng, as_of_year=as_of_year
        )
        comparison = market_comparison(record, holdings)
        risk = assess_risk(record, holdings, portfolio, as_of_year=as_of_year)
        breakdown = self._wealth_breakdown(record)

        summary = OwnerSummary(
            id=record.id,
            name=owner_display_name(record),
            type=record.type or "unknown",
            estimated_net_worth=int(round_half_up(max(0.0, record.estimated_net_worth or DEFAULT_NET_WORTH))),
            wealth_confidence=clamp(
                record.wealth_confidence if record.wealth_confidence is not None else 0.5, 0.0, 1.0
            ),
            occupation=record.occupation or "",
            industry=record.industry or "",
            wealth_breakdown=breakdown,
            properties=holdings[:MAX_LISTED_PROPERTIES],
        )

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        LOGGER.info("wealth_analysis_done owner=%s holdings=%s elapsed_ms=%s", record.id, len(holdings), elapsed_ms)

        return WealthAnalysis(
            owner=summary,
            portfolio_analysis=portfolio,
            market_comparison=comparison,
            risk_assessment=risk,
            metadata=AnalysisMetadata(
                processing_time_ms=elapsed_ms,
                property_id=property_id,
                data_quality=DataQuality(
                    properties_processed=len(holdings),
                    wealth_categories_available=len(breakdown),
                    has_errors=bool(errors),
                ),
            ),
        )

    def _coerce_owner(self, owner: Any) -> OwnerRecord:
        if isinstance(owner, OwnerRecord):
            return owner
        if not isinstance(owner, Mapping):
            raise InvalidInputError(f"owner must be a mapping, got {type(owner).__name__}")
        try:
            return OwnerRecord.model_validate(owner)
        except ValidationError as exc:
            raise InvalidInputError(f"malformed owner: {exc}") from exc

    def _holdings(self, owner: OwnerRecord) -> tuple[List[PortfolioHolding], List[str]]:
        holdings: List[PortfolioHolding] = []
        errors: List[str] = []
        active = [o for o in owner.ownerships if o.is_active]
        active.sort(key=lambda o: o.ownership_percent or 0.0, reverse=True)
        for ownership in active:
            prop = ownership.property
            if prop is None:
                errors.append(f"Missing property data for ownership {ownership.id}")
                continue
            holdings.append(
                PortfolioHolding(
                    id=prop.id,
                    address=prop.address or "Unknown Address",
                    current_value=max(0.0, prop.current_value or 0.0),
                    property_type=prop.property_type or "unknown",
                    city=prop.city or "Unknown City",
                    state=prop.state or "Unknown State",
                    ownership_percent=clamp(ownership.ownership_percent or 0.0, 0.0, 100.0),
                )
            )
        return holdings, errors

    def _holding_record(self, holding: PortfolioHolding) -> PropertyRecord:
        return PropertyRecord(
            id=holding.id,
            address=holding.address,
            current_value=holding.current_value,
            property_type=holding.property_type,
            city=holding.city,
            state=holding.state,
        )

    def _wealth_breakdown(self, owner: OwnerRecord) -> List[WealthBreakdownEntry]:
        entries = [
            WealthBreakdownEntry(
                id=item.id,
                category=item.category or "other",
                amount=int(round_half_up(item.amount)),
                percentage=clamp(item.percentage or 0.0, 0.0, 100.0),
                confidence=clamp(item.confidence if item.confidence is not None else 0.5, 0.0, 1.0),
            )
            for item in owner.wealth_breakdown
            if item.amount and item.amount > 0
        ]
        entries.sort(key=lambda entry: entry.amount, reverse=True)
        return entries


__all__ = [
    "INDUSTRY_MULTIPLIERS",
    "STATE_COST_MULTIPLIERS",
    "validate_identifier",
    "industry_multiplier",
    "location_multiplier",
    "owner_display_name",
    "assess_risk",
    "market_comparison",
    "WealthService",
]
