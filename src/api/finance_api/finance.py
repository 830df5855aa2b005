"""Finance GPT service — narrative answers enriched with mock market data.

The service never lets a narrative provider failure reach the caller:
the canned narrative for the request's context is substituted instead.
Only validation problems (400) and unexpected internal errors (500)
surface as HTTP errors, and those are raised by the route layer.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from finance_api import fixtures
from finance_api.errors import ValidationError
from finance_api.models import (
    EconomicIndicatorsResponse,
    FinanceSearchResponse,
    MarketInsightsResponse,
    NewsSentimentResponse,
    PortfolioAnalysisResponse,
    StockAnalysisResponse,
    utc_timestamp,
)
from finance_api.providers import (
    MarketDataProvider,
    MockNarrativeProvider,
    NarrativeProvider,
    resolve_context,
)

logger = logging.getLogger(__name__)

_SOURCE_PATTERNS = [
    (name, re.compile(re.escape(name), re.IGNORECASE)) for name in fixtures.KNOWN_SOURCES
]


def extract_sources(text: str) -> list[str]:
    """Return the known source names mentioned in ``text``, in fixed order.

    Falls back to the generic labels when no known source is mentioned.
    """
    sources = [name for name, pattern in _SOURCE_PATTERNS if pattern.search(text)]
    return sources or list(fixtures.DEFAULT_SOURCES)


def generate_suggestions(query: str) -> list[str]:
    """Follow-up queries for ``query`` — always the first three fixed suggestions."""
    return list(fixtures.SUGGESTIONS[: fixtures.SUGGESTION_COUNT])


def _change_value(change: str) -> float:
    """``"+1.2%"`` → ``1.2``."""
    try:
        return float(change.strip().rstrip("%"))
    except ValueError:
        return 0.0


def _signal(change: str) -> str:
    value = _change_value(change)
    if value > 0.5:
        return "bullish"
    if value < -0.5:
        return "bearish"
    return "neutral"


def _sentiment_label(score: float) -> str:
    if score > 0.15:
        return "positive"
    if score < -0.15:
        return "negative"
    return "neutral"


def _holding_weight(holding: Any) -> tuple[str, float]:
    """Return ``(symbol, raw weight)`` for a portfolio entry.

    Entries are either a bare symbol or a mapping with ``symbol`` and an
    optional ``weight`` (or ``shares``); missing weights count as 1.
    """
    if isinstance(holding, str):
        return holding.upper(), 1.0
    if not isinstance(holding, dict) or not holding.get("symbol"):
        raise ValidationError(
            "Invalid portfolio holding",
            "Each holding must be a symbol or an object with a 'symbol' field",
        )
    raw = holding.get("weight", holding.get("shares", 1))
    try:
        weight = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            "Invalid portfolio holding",
            f"Holding {holding['symbol']!r} has a non-numeric weight",
        ) from None
    if weight < 0:
        raise ValidationError(
            "Invalid portfolio holding",
            f"Holding {holding['symbol']!r} has a negative weight",
        )
    return str(holding["symbol"]).upper(), weight


class FinanceService:
    """Handlers behind the ``/api/finance/*`` endpoints."""

    def __init__(
        self,
        narrator: NarrativeProvider,
        market_data: MarketDataProvider,
        *,
        fallback: NarrativeProvider | None = None,
    ) -> None:
        self._narrator = narrator
        self._market_data = market_data
        self._fallback = fallback or MockNarrativeProvider()

    async def narrate(self, query: str, context: str) -> str:
        """Generate a narrative, replacing any provider failure with the canned one."""
        try:
            return await self._narrator.generate(query, context)
        except Exception:
            logger.warning(
                "Narrative provider failed — using canned '%s' narrative",
                resolve_context(context),
                exc_info=True,
            )
            return await self._fallback.generate(query, context)

    # ------------------------------------------------------------------
    # Finance search
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str | None,
        context: str = fixtures.DEFAULT_CONTEXT,
        include_data: bool = True,
    ) -> FinanceSearchResponse:
        if not query or not query.strip():
            raise ValidationError("Query is required", "Please provide a search query")

        logger.info("Finance search request (context=%s): %s", context, query[:100])

        narrative = await self.narrate(query, context)
        data = await self._market_data.snapshot(query) if include_data else None

        return FinanceSearchResponse(
            query=query,
            response=narrative,
            data=data,
            timestamp=utc_timestamp(),
            sources=extract_sources(narrative),
            suggestions=generate_suggestions(query),
        )

    # ------------------------------------------------------------------
    # Secondary analyses
    # ------------------------------------------------------------------

    async def stock_analysis(self, symbol: str | None, analysis_type: str) -> StockAnalysisResponse:
        if not symbol or not symbol.strip():
            raise ValidationError("Stock symbol is required", "Please provide a stock symbol")

        symbol = symbol.strip().upper()
        quote = await self._market_data.quote(symbol)
        summary = await self.narrate(f"{analysis_type} analysis of {symbol}", "analysis")

        return StockAnalysisResponse(
            symbol=symbol,
            analysis={
                "type": analysis_type,
                "summary": summary,
                "signal": _signal(quote.change),
            },
            data={"quote": quote.model_dump()},
            timestamp=utc_timestamp(),
        )

    async def market_insights(self, market: str, sector: str | None, timeframe: str) -> MarketInsightsResponse:
        data = await self._market_data.market(market, sector, timeframe)
        indices = data.get("indices", [])
        advancing = sum(1 for i in indices if _change_value(i["change"]) > 0)
        declining = sum(1 for i in indices if _change_value(i["change"]) < 0)

        topic = f"{market} {sector} sector outlook" if sector else f"{market} market outlook"
        summary = await self.narrate(f"{topic} ({timeframe})", "analysis")

        return MarketInsightsResponse(
            market=market,
            sector=sector,
            timeframe=timeframe,
            insights={
                "summary": summary,
                "advancing": advancing,
                "declining": declining,
                "trend": "up" if advancing > declining else "down" if declining > advancing else "flat",
            },
            data=data,
            timestamp=utc_timestamp(),
        )

    async def portfolio_analysis(self, portfolio: Any, analysis_type: str) -> PortfolioAnalysisResponse:
        if not portfolio or not isinstance(portfolio, list):
            raise ValidationError(
                "Portfolio data is required and must be an array",
                "Please provide the portfolio as a list of holdings",
            )

        weights: dict[str, float] = {}
        for holding in portfolio:
            symbol, weight = _holding_weight(holding)
            weights[symbol] = weights.get(symbol, 0.0) + weight

        total = sum(weights.values()) or 1.0
        allocation = {symbol: round(weight / total, 4) for symbol, weight in weights.items()}
        concentration = max(allocation.values())

        if len(allocation) < 3 or concentration > 0.5:
            diversification, risk = "low", "high"
        elif len(allocation) < 5 or concentration > 0.3:
            diversification, risk = "moderate", "moderate"
        else:
            diversification, risk = "high", "low"

        recommendations = []
        if concentration > 0.3:
            top = max(allocation, key=allocation.get)
            recommendations.append(f"Reduce concentration in {top}")
        if len(allocation) < 5:
            recommendations.append("Add holdings across additional sectors")
        recommendations.append("Rebalance periodically to maintain target weights")

        return PortfolioAnalysisResponse(
            portfolio=portfolio,
            analysis={
                "type": analysis_type,
                "holdings": len(allocation),
                "allocation": allocation,
                "concentration": concentration,
                "diversification": diversification,
                "risk_level": risk,
                "recommendations": recommendations,
            },
            timestamp=utc_timestamp(),
        )

    async def economic_indicators(self, indicators: list[str], region: str) -> EconomicIndicatorsResponse:
        data = await self._market_data.economic_indicators(indicators, region)
        trends = {name: value.get("trend") for name, value in data.get("values", {}).items()}
        summary = await self.narrate(f"{region} economic indicators: {', '.join(indicators)}", "analysis")

        return EconomicIndicatorsResponse(
            indicators=indicators,
            region=region,
            data=data,
            analysis={"summary": summary, "trends": trends},
            timestamp=utc_timestamp(),
        )

    async def news_sentiment(self, query: str | None, sources: list[str]) -> NewsSentimentResponse:
        news = await self._market_data.news(query, sources)
        score = round(sum(item["score"] for item in news) / len(news), 2) if news else 0.0

        return NewsSentimentResponse(
            query=query,
            news=news,
            sentiment={
                "score": score,
                "label": _sentiment_label(score),
                "articles": len(news),
            },
            timestamp=utc_timestamp(),
        )
