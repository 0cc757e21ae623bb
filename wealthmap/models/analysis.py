"""Pydantic schemas for analytics responses and API request bodies."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import Field

from .property import CamelModel, PropertyRecord, SavedPropertyRow

MarketTrend = Literal["bullish", "bearish", "stable"]
ReportFormat = Literal["pdf", "excel", "csv", "json"]


class PropertyMetrics(CamelModel):
    estimated_value: int
    price_per_sq_ft: int
    market_value_adjustment: float
    appreciation_rate: float
    cap_rate: Optional[float] = None
    cash_on_cash_return: Optional[float] = None
    roi: Optional[float] = None
    market_score: int
    liquidity_score: int
    risk_score: int
    price_to_area_median: float
    value_percentile: float
    tax_burden: float
    maintenance_cost_estimate: int
    insurance_cost_estimate: int


class OwnershipAnalysis(CamelModel):
    portfolio_value: int
    portfolio_growth: float
    diversification_score: int
    concentration_risk: int
    leverage_ratio: float
    liquidity_ratio: float
    performance_score: int


class MarketAnalysis(CamelModel):
    median_price: int
    average_price: int
    price_growth: float
    inventory: int
    days_on_market: int
    absorption: float
    market_trend: MarketTrend
    competitive_index: int
    location: Optional[str] = None


class PortfolioHolding(CamelModel):
    id: Optional[str] = None
    address: str
    current_value: float
    property_type: str
    city: str
    state: str
    ownership_percent: float


class WealthBreakdownEntry(CamelModel):
    id: Optional[str] = None
    category: str
    amount: int
    percentage: float
    confidence: float


class OwnerSummary(CamelModel):
    id: str
    name: str
    type: str
    estimated_net_worth: int
    wealth_confidence: float
    occupation: str
    industry: str
    wealth_breakdown: List[WealthBreakdownEntry]
    properties: List[PortfolioHolding]


class MarketComparison(CamelModel):
    percentile: int
    industry_average: int
    local_average: int


class RiskAssessment(CamelModel):
    score: int
    factors: List[str]
    recommendations: List[str]


class DataQuality(CamelModel):
    properties_processed: int
    wealth_categories_available: int
    has_errors: bool


class AnalysisMetadata(CamelModel):
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    processing_time_ms: int
    property_id: Optional[str] = None
    data_quality: DataQuality


class WealthAnalysis(CamelModel):
    owner: OwnerSummary
    portfolio_analysis: OwnershipAnalysis
    market_comparison: MarketComparison
    risk_assessment: RiskAssessment
    metadata: AnalysisMetadata


class ValuationRequest(CamelModel):
    property: PropertyRecord
    comparables: List[PropertyRecord] = Field(default_factory=list)


class PortfolioRequest(CamelModel):
    properties: List[PropertyRecord]


class MarketRequest(CamelModel):
    properties: List[PropertyRecord]
    location: Optional[str] = None


class ReportOptions(CamelModel):
    title: str = "Property Report"
    selected_fields: List[str]
    selected_properties: List[SavedPropertyRow]
    format: ReportFormat
    sort_by: Optional[str] = None
    sort_order: Literal["asc", "desc"] = "asc"


class ReportFieldPayload(CamelModel):
    key: str
    label: str
    category: str
    type: str


class ErrorResponse(CamelModel):
    error: str
    code: str


__all__ = [
    "MarketTrend",
    "ReportFormat",
    "PropertyMetrics",
    "OwnershipAnalysis",
    "MarketAnalysis",
    "PortfolioHolding",
    "WealthBreakdownEntry",
    "OwnerSummary",
    "MarketComparison",
    "RiskAssessment",
    "DataQuality",
    "AnalysisMetadata",
    "WealthAnalysis",
    "ValuationRequest",
    "PortfolioRequest",
    "MarketRequest",
    "ReportOptions",
    "ReportFieldPayload",
    "ErrorResponse",
]
