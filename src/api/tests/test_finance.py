"""Tests for the Finance GPT service (sources, suggestions, analyses)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from finance_api import fixtures
from finance_api.errors import ValidationError
from finance_api.finance import FinanceService, extract_sources, generate_suggestions
from finance_api.providers import MockMarketDataProvider, MockNarrativeProvider


def _service(narrator=None) -> FinanceService:
    return FinanceService(narrator or MockNarrativeProvider(), MockMarketDataProvider())


class TestExtractSources:
    """Test extract_sources pattern matching."""

    def test_no_mentions_returns_defaults(self) -> None:
        assert extract_sources("Nothing to see here") == ["Market Data Providers", "Financial APIs"]

    def test_case_insensitive(self) -> None:
        assert extract_sources("according to BLOOMBERG and reuters") == ["Bloomberg", "Reuters"]

    def test_fixed_order_regardless_of_text_order(self) -> None:
        text = "Yahoo Finance, then SEC filings, then the Wall Street Journal"
        assert extract_sources(text) == ["Wall Street Journal", "SEC filings", "Yahoo Finance"]

    def test_names_are_returned_intact(self) -> None:
        assert extract_sources("Financial Times reported") == ["Financial Times"]

    def test_each_source_listed_once(self) -> None:
        assert extract_sources("Reuters Reuters reuters") == ["Reuters"]


class TestGenerateSuggestions:
    """Test generate_suggestions."""

    def test_always_first_three(self) -> None:
        assert generate_suggestions("anything") == [
            "Stock performance analysis",
            "Market trends today",
            "Portfolio diversification strategies",
        ]

    def test_returns_fresh_list(self) -> None:
        first = generate_suggestions("a")
        first.append("mutated")
        assert len(generate_suggestions("b")) == 3


class TestFinanceSearch:
    """Test FinanceService.search."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("context", fixtures.CONTEXT_KEYS)
    async def test_sources_and_suggestions_per_context(self, context) -> None:
        result = await _service().search("AAPL", context)
        labels = set(fixtures.KNOWN_SOURCES) | set(fixtures.DEFAULT_SOURCES)
        assert set(result.sources) <= labels
        assert len(result.suggestions) == 3

    @pytest.mark.asyncio
    async def test_blank_query_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await _service().search("  \t")
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict()["error"] == "Query is required"

    @pytest.mark.asyncio
    async def test_none_query_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            await _service().search(None)

    @pytest.mark.asyncio
    async def test_sources_extracted_from_live_narrative(self) -> None:
        narrator = AsyncMock()
        narrator.generate = AsyncMock(return_value="Per Reuters and SEC filings, margins grew.")
        result = await _service(narrator).search("AAPL margins")
        assert result.response == "Per Reuters and SEC filings, margins grew."
        assert result.sources == ["Reuters", "SEC filings"]

    @pytest.mark.asyncio
    async def test_provider_failure_uses_canned_for_context(self) -> None:
        narrator = AsyncMock()
        narrator.generate = AsyncMock(side_effect=TimeoutError())
        result = await _service(narrator).search("AAPL", "analysis")
        assert result.response.startswith('Financial Analysis for "AAPL"')

    @pytest.mark.asyncio
    async def test_include_data_false_skips_market_data(self) -> None:
        market = AsyncMock()
        service = FinanceService(MockNarrativeProvider(), market)
        result = await service.search("AAPL", include_data=False)
        assert result.data is None
        market.snapshot.assert_not_called()


class TestPortfolioAnalysis:
    """Test FinanceService.portfolio_analysis."""

    @pytest.mark.asyncio
    async def test_well_diversified(self) -> None:
        portfolio = ["AAPL", "MSFT", "GOOGL", "JPM", "XOM", "UNH"]
        result = await _service().portfolio_analysis(portfolio, "risk_return")
        assert result.analysis["holdings"] == 6
        assert result.analysis["diversification"] == "high"
        assert result.analysis["risk_level"] == "low"

    @pytest.mark.asyncio
    async def test_duplicate_symbols_are_merged(self) -> None:
        portfolio = [{"symbol": "aapl", "shares": 10}, {"symbol": "AAPL", "shares": 10}]
        result = await _service().portfolio_analysis(portfolio, "risk_return")
        assert result.analysis["allocation"] == {"AAPL": 1.0}
        assert result.analysis["recommendations"][0] == "Reduce concentration in AAPL"

    @pytest.mark.asyncio
    async def test_non_numeric_weight_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            await _service().portfolio_analysis([{"symbol": "AAPL", "weight": "lots"}], "risk_return")

    @pytest.mark.asyncio
    async def test_holding_without_symbol_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            await _service().portfolio_analysis([{"weight": 10}], "risk_return")

    @pytest.mark.asyncio
    async def test_empty_list_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            await _service().portfolio_analysis([], "risk_return")


class TestNewsSentiment:
    """Test FinanceService.news_sentiment."""

    @pytest.mark.asyncio
    async def test_no_matching_sources_is_neutral(self) -> None:
        result = await _service().news_sentiment("tech", ["nowhere"])
        assert result.news == []
        assert result.sentiment == {"score": 0.0, "label": "neutral", "articles": 0}

    @pytest.mark.asyncio
    async def test_negative_source(self) -> None:
        result = await _service().news_sentiment("europe", ["FT"])
        assert result.sentiment["label"] == "negative"
