"""Capability providers — narrative generation and market data.

Each capability has a mock implementation backed by ``fixtures`` and a
real implementation that is selected when its API key is configured.
Handlers only ever see the protocols below.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from openai import AsyncOpenAI

from finance_api import fixtures
from finance_api.config import Config
from finance_api.models import Currency, MarketData, MarketIndex, Stock

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"


class NarrativeError(RuntimeError):
    """Raised when a narrative provider cannot produce text."""


def resolve_context(context: str | None) -> str:
    """Map a context key onto a known one; unknown keys fall back to ``search``."""
    if context in fixtures.CONTEXT_KEYS:
        return context
    return fixtures.DEFAULT_CONTEXT


# ---------------------------------------------------------------------------
# Narrative providers
# ---------------------------------------------------------------------------

class NarrativeProvider(Protocol):
    """Interface for turning a finance query into narrative text."""

    async def generate(self, query: str, context: str) -> str:
        """Generate a narrative answer for ``query`` in the given context."""
        ...


class MockNarrativeProvider:
    """Canned narrative per context key."""

    async def generate(self, query: str, context: str) -> str:
        template = fixtures.NARRATIVE_TEMPLATES[resolve_context(context)]
        return template.format(query=query)


class OpenAINarrativeProvider:
    """Narratives from the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gpt-4",
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._model = model
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def generate(self, query: str, context: str) -> str:
        prompt = fixtures.SYSTEM_PROMPTS[resolve_context(context)]
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": prompt},
                {"role": "user", "content": query},
            ],
            max_tokens=1000,
            temperature=0.3,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise NarrativeError("OpenAI returned an empty completion")
        logger.debug("OpenAI narrative (%d chars) for context=%s", len(content), context)
        return content


# ---------------------------------------------------------------------------
# Market data providers
# ---------------------------------------------------------------------------

class MarketDataProvider(Protocol):
    """Interface for market data lookups."""

    async def snapshot(self, query: str) -> MarketData:
        """Return the market data bundle attached to a finance search."""
        ...

    async def quote(self, symbol: str) -> Stock:
        """Return the latest quote for a single symbol."""
        ...

    async def market(self, market: str, sector: str | None, timeframe: str) -> dict:
        """Return an overview of a market, optionally narrowed to a sector."""
        ...

    async def economic_indicators(self, indicators: list[str], region: str) -> dict:
        """Return the latest values for the requested indicators."""
        ...

    async def news(self, query: str | None, sources: list[str]) -> list[dict]:
        """Return headlines from the requested sources."""
        ...


class MockMarketDataProvider:
    """Market data served from fixtures."""

    async def snapshot(self, query: str) -> MarketData:
        return MarketData(
            stocks=[Stock(**s) for s in fixtures.STOCKS],
            indices=[MarketIndex(**i) for i in fixtures.INDICES],
            currencies=[Currency(**c) for c in fixtures.CURRENCIES],
        )

    async def quote(self, symbol: str) -> Stock:
        symbol = symbol.upper()
        for stock in fixtures.STOCKS:
            if stock["symbol"] == symbol:
                return Stock(**stock)
        return Stock(symbol=symbol, **fixtures.DEFAULT_QUOTE)

    async def market(self, market: str, sector: str | None, timeframe: str) -> dict:
        overview = {
            "market": market,
            "timeframe": timeframe,
            "indices": [dict(i) for i in fixtures.INDICES],
        }
        if sector:
            snapshot = fixtures.SECTORS.get(sector.lower())
            overview["sector"] = dict(snapshot) if snapshot else None
        return overview

    async def economic_indicators(self, indicators: list[str], region: str) -> dict:
        values = {}
        for name in indicators:
            known = fixtures.ECONOMIC_INDICATORS.get(name)
            values[name] = dict(known) if known else {"value": None, "unit": None, "trend": "unavailable"}
        return {"region": region, "values": values}

    async def news(self, query: str | None, sources: list[str]) -> list[dict]:
        wanted = {s.lower() for s in sources}
        return [
            {**item, "query": query}
            for item in fixtures.NEWS_HEADLINES
            if item["source"] in wanted
        ]


def _format_change(raw: str) -> str:
    """Normalise an Alpha Vantage change percent (``"0.5123%"``) to ``"+0.51%"``."""
    value = float(raw.strip().rstrip("%"))
    return f"{value:+.2f}%"


class AlphaVantageMarketDataProvider(MockMarketDataProvider):
    """Live stock quotes from Alpha Vantage; everything else from fixtures.

    A failed or malformed quote for a symbol falls back to its fixture
    quote so the caller always receives a complete bundle.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def quote(self, symbol: str) -> Stock:
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(ALPHA_VANTAGE_URL, params=params)
                response.raise_for_status()
                payload = response.json().get("Global Quote") or {}
            price = float(payload["05. price"])
            change = _format_change(payload["10. change percent"])
        except (httpx.HTTPError, AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Alpha Vantage quote failed for %s — using fixture", symbol, exc_info=True)
            return await super().quote(symbol)
        return Stock(symbol=symbol.upper(), price=price, change=change)

    async def snapshot(self, query: str) -> MarketData:
        data = await super().snapshot(query)
        data.stocks = [await self.quote(stock.symbol) for stock in data.stocks]
        return data


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def create_narrative_provider(config: Config) -> NarrativeProvider:
    """Create the narrative provider selected by configuration."""
    if config.llm_enabled:
        logger.info("Narratives: OpenAI (%s)", config.openai_model)
        return OpenAINarrativeProvider(config.openai_api_key, model=config.openai_model)
    logger.info("Narratives: mock mode (OPENAI_API_KEY not set)")
    return MockNarrativeProvider()


def create_market_data_provider(config: Config) -> MarketDataProvider:
    """Create the market data provider selected by configuration."""
    if config.market_data_enabled:
        logger.info("Market data: Alpha Vantage")
        return AlphaVantageMarketDataProvider(config.alpha_vantage_api_key)
    logger.info("Market data: mock mode (ALPHA_VANTAGE_API_KEY not set)")
    return MockMarketDataProvider()
