"""Hardcoded sample data standing in for real data sources.

Nothing here has logic beyond string interpolation; providers and
handlers copy from these tables so callers can never mutate them.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Generic search
# ---------------------------------------------------------------------------

SEARCH_ITEMS: tuple[dict, ...] = (
    {"id": 1, "title": "Sample Result 1", "url": "#", "snippet": "This is a sample search result"},
    {"id": 2, "title": "Sample Result 2", "url": "#", "snippet": "Another sample search result"},
    {"id": 3, "title": "Yet Another Result", "url": "#", "snippet": "Yet another search result"},
)


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

STOCKS: tuple[dict, ...] = (
    {"symbol": "AAPL", "price": 175.50, "change": "+1.2%"},
    {"symbol": "GOOGL", "price": 2750.30, "change": "-0.8%"},
    {"symbol": "MSFT", "price": 378.90, "change": "+0.5%"},
)

INDICES: tuple[dict, ...] = (
    {"name": "S&P 500", "value": 4485.30, "change": "+0.3%"},
    {"name": "NASDAQ", "value": 13924.50, "change": "-0.2%"},
    {"name": "DOW", "value": 34765.80, "change": "+0.1%"},
)

CURRENCIES: tuple[dict, ...] = (
    {"pair": "USD/EUR", "rate": 0.85, "change": "+0.1%"},
    {"pair": "USD/GBP", "rate": 0.73, "change": "-0.05%"},
)

# Fallback quote for symbols outside STOCKS
DEFAULT_QUOTE = {"price": 100.00, "change": "+0.0%"}

SECTORS: dict[str, dict] = {
    "technology": {"performance": "+1.4%", "leaders": ["AAPL", "MSFT"], "laggards": ["GOOGL"]},
    "financials": {"performance": "+0.6%", "leaders": ["JPM", "GS"], "laggards": ["WFC"]},
    "energy": {"performance": "-0.9%", "leaders": ["XOM"], "laggards": ["CVX", "OXY"]},
    "healthcare": {"performance": "+0.2%", "leaders": ["UNH"], "laggards": ["PFE"]},
}

ECONOMIC_INDICATORS: dict[str, dict] = {
    "GDP": {"value": 2.4, "unit": "% YoY", "trend": "stable", "period": "Q2"},
    "CPI": {"value": 3.2, "unit": "% YoY", "trend": "declining", "period": "latest month"},
    "unemployment": {"value": 3.8, "unit": "%", "trend": "stable", "period": "latest month"},
    "interest_rate": {"value": 5.25, "unit": "%", "trend": "flat", "period": "current"},
    "PMI": {"value": 49.6, "unit": "index", "trend": "improving", "period": "latest month"},
}

DEFAULT_INDICATORS: tuple[str, ...] = ("GDP", "CPI", "unemployment")

NEWS_HEADLINES: tuple[dict, ...] = (
    {"source": "reuters", "headline": "Markets steady ahead of central bank decision", "score": 0.1},
    {"source": "bloomberg", "headline": "Tech earnings beat expectations across the sector", "score": 0.6},
    {"source": "wsj", "headline": "Investors weigh slowing growth against easing inflation", "score": -0.2},
    {"source": "ft", "headline": "European equities slip on weaker manufacturing data", "score": -0.4},
)

DEFAULT_NEWS_SOURCES: tuple[str, ...] = ("reuters", "bloomberg", "wsj")


# ---------------------------------------------------------------------------
# Narratives
# ---------------------------------------------------------------------------

CONTEXT_KEYS: tuple[str, ...] = ("search", "analysis", "advisory")
DEFAULT_CONTEXT = "search"

SYSTEM_PROMPTS: dict[str, str] = {
    "analysis": (
        "You are a professional financial analyst AI. Provide comprehensive, accurate "
        "financial analysis based on the user's query. Include relevant market data, "
        "trends, and actionable insights. Format responses in a clear, professional manner."
    ),
    "search": (
        "You are a finance search specialist. Help users find specific financial "
        "information, stocks, market data, economic indicators, and investment insights. "
        "Provide detailed, factual responses with data sources when possible."
    ),
    "advisory": (
        "You are a financial advisory AI. Provide educational financial guidance while "
        "clearly stating this is not personalized financial advice. Include risk "
        "considerations and suggest consulting with financial professionals."
    ),
}

NARRATIVE_TEMPLATES: dict[str, str] = {
    "search": """\
Based on your search for "{query}", here are the key financial insights:

• **Market Analysis**: Current market conditions show mixed signals with volatility in key sectors
• **Investment Considerations**: Consider diversification across asset classes
• **Risk Assessment**: Moderate risk levels with potential for both growth and downside
• **Recommendations**: Consult with a financial advisor for personalized guidance

*Note: This is a simulated response for development purposes.*""",
    "analysis": """\
Financial Analysis for "{query}":

**Key Metrics:**
- Market Cap: Analysis pending real-time data
- P/E Ratio: Within industry standards
- Revenue Growth: Positive trend indicators
- Debt-to-Equity: Manageable levels

**Recommendations:**
- Monitor quarterly earnings reports
- Track sector performance trends
- Consider long-term investment horizon

*This is a development mock response. Connect to real financial APIs for live data.*""",
    "advisory": """\
Financial Advisory Response for "{query}":

**Educational Guidance:**
- Diversification remains a fundamental principle
- Risk tolerance assessment is crucial
- Regular portfolio rebalancing recommended
- Emergency fund maintenance is essential

**Important Disclaimer:**
This is educational content only and not personalized financial advice. Please consult with qualified financial professionals for investment decisions.

*Development mode active - connect to production APIs for real advisory content.*""",
}


# ---------------------------------------------------------------------------
# Sources and suggestions
# ---------------------------------------------------------------------------

KNOWN_SOURCES: tuple[str, ...] = (
    "Bloomberg",
    "Reuters",
    "Wall Street Journal",
    "Financial Times",
    "SEC filings",
    "Yahoo Finance",
)

DEFAULT_SOURCES: tuple[str, ...] = ("Market Data Providers", "Financial APIs")

SUGGESTIONS: tuple[str, ...] = (
    "Stock performance analysis",
    "Market trends today",
    "Portfolio diversification strategies",
    "Economic indicators impact",
    "Sector rotation opportunities",
    "Risk management techniques",
)

SUGGESTION_COUNT = 3
