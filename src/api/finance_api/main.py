"""Finance Search API — FastAPI server for mock search and Finance GPT analysis.

Starts a local HTTP server (port 5001 by default).  All handlers are
stateless per request; narrative and market-data providers run in mock
mode unless their API keys are configured.

Endpoints
---------
- ``GET  /health``                           — service health + version
- ``GET  /api/health``                       — Finance GPT API health
- ``GET  /api/search?q=``                    — generic mock search
- ``POST /api/finance/search``               — Finance GPT search
- ``POST /api/finance/stock-analysis``       — single stock analysis
- ``POST /api/finance/market-insights``      — market / sector insights
- ``POST /api/finance/portfolio-analysis``   — portfolio risk & allocation
- ``GET  /api/finance/economic-indicators``  — economic indicators
- ``POST /api/finance/news-sentiment``       — news headlines + sentiment
- ``GET  /*``                                — single-page app shell
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, TypeVar

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_api import fixtures
from finance_api.config import config
from finance_api.errors import ApiError, InternalError
from finance_api.finance import FinanceService
from finance_api.models import (
    EconomicIndicatorsResponse,
    ErrorResponse,
    FinanceSearchRequest,
    FinanceSearchResponse,
    HealthResponse,
    MarketInsightsRequest,
    MarketInsightsResponse,
    NewsSentimentRequest,
    NewsSentimentResponse,
    PortfolioAnalysisRequest,
    PortfolioAnalysisResponse,
    SearchResponse,
    ServiceHealthResponse,
    StockAnalysisRequest,
    StockAnalysisResponse,
    utc_timestamp,
)
from finance_api.providers import create_market_data_provider, create_narrative_provider
from finance_api.rate_limit import FixedWindowRateLimiter
from finance_api.search import run_search

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
for _name in ("httpx", "openai"):
    logging.getLogger(_name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERVICE_NAME = "Finance GPT API"

# Documented error bodies; every error response shares the {error, message} shape.
_ERRORS = {
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}
_ERRORS_WITH_400 = {400: {"model": ErrorResponse, "description": "Invalid request"}, **_ERRORS}

_FALLBACK_SHELL = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Search Tool with Gen AI</title></head>
<body><div id="root"></div></body>
</html>
"""


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------

service = FinanceService(
    create_narrative_provider(config),
    create_market_data_provider(config),
)

limiter = FixedWindowRateLimiter(
    config.rate_limit_max_requests,
    config.rate_limit_window_ms / 1000,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("[FINANCE-API] Server starting up (version %s)...", config.version)
    yield
    logger.info("[FINANCE-API] Server shutting down...")


app = FastAPI(
    title="Finance Search API",
    description="Mock search and Finance GPT analysis for the search web app",
    version=config.version,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

@app.middleware("http")
async def rate_limit(request: Request, call_next):
    """Cap requests per client IP on ``/api/`` paths."""
    if request.url.path.startswith("/api/"):
        client = request.client.host if request.client else "unknown"
        if not limiter.hit(client):
            logger.warning("[FINANCE-API] Rate limit exceeded for %s", client)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests",
                    "message": "Too many requests from this IP, please try again later.",
                },
                headers={"Retry-After": str(limiter.retry_after(client))},
            )
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# Must stay the outermost middleware (registered last).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in exc.errors())
    logger.info("Rejected malformed request to %s: %s", request.url.path, fields)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "message": f"Malformed request fields: {fields}"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        content = {"error": "Not found", "message": "API endpoint not found"}
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[FINANCE-API] Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


async def _handle(call: Awaitable[T], error: str) -> T:
    """Await a service call, turning unexpected failures into a generic 500."""
    try:
        return await call
    except ApiError:
        raise
    except Exception:
        logger.exception("[FINANCE-API] %s", error)
        raise InternalError(error) from None


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="healthy", timestamp=utc_timestamp(), version=config.version)


@app.get("/api/health", response_model=ServiceHealthResponse, responses=_ERRORS)
async def api_health_check():
    return ServiceHealthResponse(status="healthy", timestamp=utc_timestamp(), service=SERVICE_NAME)


# ---------------------------------------------------------------------------
# Generic search
# ---------------------------------------------------------------------------

@app.get("/api/search", response_model=SearchResponse, responses=_ERRORS)
async def search(q: str = ""):
    """Filter the fixture listing by title; an empty ``q`` lists everything."""
    return await _handle(run_search(q, delay_ms=config.search_delay_ms), "Search failed")


# ---------------------------------------------------------------------------
# Finance GPT
# ---------------------------------------------------------------------------

@app.post("/api/finance/search", response_model=FinanceSearchResponse, responses=_ERRORS_WITH_400)
async def finance_search(request: FinanceSearchRequest):
    """Narrative answer + market data for a finance query.

    Blank queries are rejected with 400; narrative provider failures are
    replaced by the canned narrative for the requested context.
    """
    return await _handle(
        service.search(request.query, request.context, request.include_data),
        "Internal server error",
    )


@app.post("/api/finance/stock-analysis", response_model=StockAnalysisResponse, responses=_ERRORS_WITH_400)
async def stock_analysis(request: StockAnalysisRequest):
    return await _handle(
        service.stock_analysis(request.symbol, request.analysis_type),
        "Failed to analyze stock",
    )


@app.post("/api/finance/market-insights", response_model=MarketInsightsResponse, responses=_ERRORS_WITH_400)
async def market_insights(request: MarketInsightsRequest):
    return await _handle(
        service.market_insights(request.market, request.sector, request.timeframe),
        "Failed to generate market insights",
    )


@app.post("/api/finance/portfolio-analysis", response_model=PortfolioAnalysisResponse, responses=_ERRORS_WITH_400)
async def portfolio_analysis(request: PortfolioAnalysisRequest):
    return await _handle(
        service.portfolio_analysis(request.portfolio, request.analysis_type),
        "Failed to analyze portfolio",
    )


@app.get("/api/finance/economic-indicators", response_model=EconomicIndicatorsResponse, responses=_ERRORS_WITH_400)
async def economic_indicators(
    indicators: list[str] | None = Query(default=None),
    region: str = "US",
):
    """Indicators may be repeated (``?indicators=GDP&indicators=CPI``) or comma-separated."""
    names = [n.strip() for value in indicators or [] for n in value.split(",") if n.strip()]
    return await _handle(
        service.economic_indicators(names or list(fixtures.DEFAULT_INDICATORS), region),
        "Failed to fetch economic indicators",
    )


@app.post("/api/finance/news-sentiment", response_model=NewsSentimentResponse, responses=_ERRORS_WITH_400)
async def news_sentiment(request: NewsSentimentRequest):
    return await _handle(
        service.news_sentiment(request.query, request.sources),
        "Failed to analyze news sentiment",
    )


# ---------------------------------------------------------------------------
# Catch-alls (must stay the last routes)
# ---------------------------------------------------------------------------

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@app.api_route("/api", methods=_ALL_METHODS, include_in_schema=False)
@app.api_route("/api/{rest:path}", methods=_ALL_METHODS, include_in_schema=False)
async def unknown_api_path() -> Response:
    raise ApiError(404, "Not found", "API endpoint not found")


@app.get("/{full_path:path}", include_in_schema=False)
async def spa_shell(full_path: str) -> Response:
    """Serve static assets when they exist, otherwise the app shell."""

    static_dir = config.static_dir.resolve()
    if full_path:
        candidate = (static_dir / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(static_dir):
            return FileResponse(candidate)

    index = static_dir / "index.html"
    if index.is_file():
        return FileResponse(index)
    return HTMLResponse(_FALLBACK_SHELL)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Launch the Finance Search API server."""
    port = config.port

    logger.info("[FINANCE-API] Starting server on port %d", port)
    logger.info("[FINANCE-API] Health:  http://localhost:%d/health", port)
    logger.info("[FINANCE-API] Search:  http://localhost:%d/api/search?q=your-query", port)
    logger.info("[FINANCE-API] Finance: http://localhost:%d/api/finance/search", port)

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    main()
