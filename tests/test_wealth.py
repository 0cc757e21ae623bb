import numpy as np
import pytest

from wealthmap.errors import InvalidInputError
from wealthmap.models.analysis import OwnershipAnalysis, PortfolioHolding
from wealthmap.models.property import OwnerRecord
from wealthmap.services.wealth_service import (
    WealthService,
    assess_risk,
    location_multiplier,
    market_comparison,
    owner_display_name,
)


def _owner(**overrides):
    owner = {
        "id": "owner-1",
        "type": "individual",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "estimatedNetWorth": 2_000_000,
        "wealthConfidence": 0.9,
        "industry": "Technology",
        "occupation": "Engineer",
        "wealthBreakdown": [
            {"category": "stocks", "amount": 100, "percentage": 120, "confidence": 2},
            {"category": "cash", "amount": 0},
            {"category": "real_estate", "amount": 500.4},
        ],
        "ownerships": [
            {
                "id": "o1",
                "isActive": True,
                "ownershipPercent": 50,
                "property": {"id": "p1", "address": "1 Main St", "currentValue": 400000, "propertyType": "residential", "state": {"code": "CA", "name": "California"}},
            },
            {
                "id": "o2",
                "ownershipPercent": 100,
                "property": {"id": "p2", "currentValue": 450000, "propertyType": "residential", "state": "CA"},
            },
            {"id": "o3", "isActive": False, "ownershipPercent": 100, "property": {"id": "p3", "currentValue": 9_000_000}},
            {"id": "o4", "ownershipPercent": 10},
        ],
    }
    owner.update(overrides)
    return owner


def _portfolio(**overrides):
    values = dict(
        portfolio_value=1_000_000,
        portfolio_growth=0.03,
        diversification_score=50,
        concentration_risk=50,
        leverage_ratio=0.65,
        liquidity_ratio=0.5,
        performance_score=70,
    )
    values.update(overrides)
    return OwnershipAnalysis(**values)


def test_analyze_owner_builds_full_payload():
    result = WealthService().analyze_owner(_owner(), rng=np.random.default_rng(9), as_of_year=2024)

    assert result.owner.name == "Ada Lovelace"
    holdings = result.owner.properties
    assert [h.id for h in holdings] == ["p2", "p1"]
    assert holdings[1].address == "1 Main St"
    assert holdings[0].address == "Unknown Address"
    assert holdings[0].city == "Unknown City"
    assert holdings[1].state == "CA"

    assert result.portfolio_analysis.portfolio_value == 850000
    assert result.portfolio_analysis.concentration_risk == 100

    quality = result.metadata.data_quality
    assert quality.properties_processed == 2
    assert quality.wealth_categories_available == 2
    assert quality.has_errors is True

    breakdown = result.owner.wealth_breakdown
    assert [entry.category for entry in breakdown] == ["real_estate", "stocks"]
    assert breakdown[0].amount == 500
    assert breakdown[0].confidence == 0.5
    assert breakdown[1].percentage == 100
    assert breakdown[1].confidence == 1

    assert 5 <= result.risk_assessment.score <= 95
    assert (
        "Very high concentration in single asset type - significant diversification risk"
        in result.risk_assessment.factors
    )


def test_analyze_owner_serializes_camel_case():
    payload = WealthService().analyze_owner(_owner(), as_of_year=2024).model_dump(by_alias=True)
    assert "portfolioAnalysis" in payload
    assert "estimatedNetWorth" in payload["owner"]
    assert "processingTimeMs" in payload["metadata"]


def test_owner_id_override_and_validation():
    result = WealthService().analyze_owner(_owner(), owner_id="override", as_of_year=2024)
    assert result.owner.id == "override"
    with pytest.raises(InvalidInputError):
        WealthService().analyze_owner(_owner(), owner_id="x" * 100)
    with pytest.raises(InvalidInputError):
        WealthService().analyze_owner(_owner(id=None))
    with pytest.raises(InvalidInputError):
        WealthService().analyze_owner(_owner(), property_id="")
    with pytest.raises(InvalidInputError):
        WealthService().analyze_owner(["not", "an", "owner"])


def test_display_names():
    assert owner_display_name(OwnerRecord(type="individual")) == "Individual Owner"
    assert owner_display_name(OwnerRecord(type="trust", entity_name="Blue Trust")) == "Blue Trust"
    assert owner_display_name(OwnerRecord(type="llc")) == "Entity Owner"


def test_market_comparison_uses_industry_and_state_tables():
    owner = OwnerRecord(estimated_net_worth=2_000_000, industry="technology")
    holdings = [
        PortfolioHolding(address="a", current_value=100, property_type="land", city="x", state="CA", ownership_percent=100)
    ]
    comparison = market_comparison(owner, holdings)
    assert comparison.percentile == 60
    assert comparison.industry_average == 1538462
    assert comparison.local_average == 1428571


def test_location_multiplier_defaults_without_value():
    assert location_multiplier([]) == 1.0


def test_risk_rules_for_older_low_confidence_owner():
    owner = OwnerRecord(type="individual", date_of_birth="1950-06-01", estimated_net_worth=60_000_000, wealth_confidence=0.5)
    risk = assess_risk(owner, [], _portfolio(liquidity_ratio=0.1, performance_score=30), as_of_year=2024)
    assert "Advanced age requires more conservative investment approach" in risk.factors
    assert "Ultra-high net worth requires sophisticated wealth management" in risk.factors
    assert "Low confidence in wealth estimates creates planning uncertainty" in risk.factors
    assert len(risk.factors) <= 8 and len(risk.recommendations) <= 8
    assert risk.score == 82


def test_balanced_portfolio_gets_general_advice():
    owner = OwnerRecord(type="individual", estimated_net_worth=1_000_000, wealth_confidence=0.9)
    risk = assess_risk(owner, [], _portfolio(), as_of_year=2024)
    assert risk.factors == ["Portfolio shows balanced risk characteristics"]
    assert "Conduct annual portfolio reviews and rebalancing" in risk.recommendations
