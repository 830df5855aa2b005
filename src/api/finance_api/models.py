"""Request / response models for the Finance Search API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

class Stock(BaseModel):
    symbol: str
    price: float
    change: str


class MarketIndex(BaseModel):
    name: str
    value: float
    change: str


class Currency(BaseModel):
    pair: str
    rate: float
    change: str


class MarketData(BaseModel):
    """Market data bundle attached to finance search responses."""
    stocks: list[Stock] = []
    indices: list[MarketIndex] = []
    currencies: list[Currency] = []


# ---------------------------------------------------------------------------
# Generic search
# ---------------------------------------------------------------------------

class SearchItem(BaseModel):
    id: int
    title: str
    url: str
    snippet: str


class SearchResponse(BaseModel):
    query: str
    results: list[SearchItem]
    total: int
    timestamp: str


# ---------------------------------------------------------------------------
# Finance search
# ---------------------------------------------------------------------------

class FinanceSearchRequest(BaseModel):
    """Request model for POST /api/finance/search.

    ``query`` is optional at the schema level so that a missing query is
    reported with the same 400 body as a blank one.
    """
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    context: str = "search"
    include_data: bool = Field(default=True, alias="includeData")


class FinanceSearchResponse(BaseModel):
    query: str
    response: str
    data: MarketData | None
    timestamp: str
    sources: list[str]
    suggestions: list[str]


class StockAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str | None = None
    analysis_type: str = Field(default="comprehensive", alias="analysisType")


class StockAnalysisResponse(BaseModel):
    symbol: str
    analysis: dict[str, Any]
    data: dict[str, Any]
    timestamp: str


class MarketInsightsRequest(BaseModel):
    market: str = "US"
    sector: str | None = None
    timeframe: str = "1d"


class MarketInsightsResponse(BaseModel):
    market: str
    sector: str | None
    timeframe: str
    insights: dict[str, Any]
    data: dict[str, Any]
    timestamp: str


class PortfolioAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Validated by the handler so a non-list gets the documented 400 body
    portfolio: Any = None
    analysis_type: str = Field(default="risk_return", alias="analysisType")


class PortfolioAnalysisResponse(BaseModel):
    portfolio: list[Any]
    analysis: dict[str, Any]
    timestamp: str


class EconomicIndicatorsResponse(BaseModel):
    indicators: list[str]
    region: str
    data: dict[str, Any]
    analysis: dict[str, Any]
    timestamp: str


class NewsSentimentRequest(BaseModel):
    query: str | None = None
    sources: list[str] = ["reuters", "bloomberg", "wsj"]


class NewsSentimentResponse(BaseModel):
    query: str | None
    news: list[dict[str, Any]]
    sentiment: dict[str, Any]
    timestamp: str


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    error: str
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


class ServiceHealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
