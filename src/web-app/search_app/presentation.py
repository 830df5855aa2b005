"""Presentation layer — one configurable shell over the search state machine.

Both products (the generic "Search Tool with Gen AI" and the "Finance
Search Tool") are ``Variant`` configurations: copy, quick actions and the
backend they talk to.  Rendering produces Markdown for the chat shell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from search_app.backends import FinanceSearchBackend, GenericSearchBackend, SearchBackend
from search_app.models import FinanceResult, SearchResult, UserSession
from search_app.search import SearchController, SearchView, ViewKind

EMPTY_WARNING = "Please enter a search query to get started"
LOADING_TEXT = "Searching with AI..."


@dataclass(frozen=True)
class QuickAction:
    icon: str
    text: str
    query: str


@dataclass(frozen=True)
class Variant:
    """Copy and behaviour of one product built on the shared shell."""

    name: str
    brand: str
    placeholder: str
    welcome_icon: str
    welcome_title: str
    welcome_text: str
    quick_actions: tuple[QuickAction, ...]
    mode: str
    debounce_delay: float | None = None


GENERIC_VARIANT = Variant(
    name="generic",
    brand="Search Tool with Gen AI",
    placeholder="What can I help you search for?",
    welcome_icon="🚀",
    welcome_title="Welcome to Search Tool with Gen AI",
    welcome_text="Enter your search query above or try one of the quick actions to get started.",
    quick_actions=(
        QuickAction("🧠", "Latest AI Research", "latest AI research"),
        QuickAction("💻", "Programming Help", "python async programming tutorial"),
        QuickAction("📰", "Tech News", "latest technology news"),
    ),
    mode="generic",
    debounce_delay=0.8,
)

FINANCE_VARIANT = Variant(
    name="finance",
    brand="Finance Search Tool",
    placeholder="Ask about stocks, market trends, or financial analysis...",
    welcome_icon="💹",
    welcome_title="Finance Search Tool with AI",
    welcome_text="Ask me about stocks, market trends, investment strategies, or any financial topic.",
    quick_actions=(
        QuickAction("📈", "Stock Analysis", "analyze AAPL stock performance"),
        QuickAction("📊", "Market Trends", "current market trends and outlook"),
        QuickAction("🏦", "Investment Strategy", "portfolio diversification strategies"),
    ),
    mode="finance",
)

VARIANTS: dict[str, Variant] = {v.name: v for v in (GENERIC_VARIANT, FINANCE_VARIANT)}


def get_variant(name: str) -> Variant:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(f"Unknown variant {name!r}; expected one of {sorted(VARIANTS)}") from None


def create_backend(variant: Variant, base_url: str, *, timeout: float = 30.0) -> SearchBackend:
    if variant.mode == "finance":
        return FinanceSearchBackend(base_url, timeout=timeout)
    return GenericSearchBackend(base_url, timeout=timeout)


def create_controller(variant: Variant, backend: SearchBackend) -> SearchController:
    return SearchController(backend, debounce_delay=variant.debounce_delay)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_market_data(data: dict[str, Any]) -> list[str]:
    lines = ["**📊 Live Market Data:**"]
    stocks = data.get("stocks") or []
    if stocks:
        quotes = ", ".join(f"{s['symbol']}: ${s['price']} ({s['change']})" for s in stocks)
        lines.append(f"- **Stocks:** {quotes}")
    indices = data.get("indices") or []
    if indices:
        values = ", ".join(f"{i['name']}: {i['value']} ({i['change']})" for i in indices)
        lines.append(f"- **Indices:** {values}")
    return lines


def render_result(result: SearchResult) -> str:
    """Render a single result record."""
    lines = [f"### {result.title}", "", result.snippet]
    if isinstance(result, FinanceResult):
        if result.data:
            lines += [""] + _render_market_data(result.data)
        if result.sources:
            lines += ["", f"*Sources: {', '.join(result.sources)}*"]
        if result.suggestions:
            lines += ["", "**💡 Related searches:** " + " · ".join(result.suggestions)]
    return "\n".join(lines)


def render_view(view: SearchView, variant: Variant) -> str:
    """Render the current search view as Markdown."""
    parts: list[str] = []
    if view.show_empty_warning:
        parts.append(f"> ⚠️ {EMPTY_WARNING}")

    if view.kind is ViewKind.LOADING:
        parts.append(f"⏳ {LOADING_TEXT}")
    elif view.kind is ViewKind.WELCOME:
        parts.append(f"{variant.welcome_icon} **{variant.welcome_title}**\n\n{variant.welcome_text}")
    elif view.kind is ViewKind.NO_RESULTS:
        parts.append(
            "🔍 **No results found**\n\n"
            f'Try different keywords or check your spelling for "{view.query.strip()}"'
        )
    else:
        count = len(view.results)
        header = (
            f'**{count}** result{"" if count == 1 else "s"} found for '
            f'**"{view.query.strip()}"** • Generated with AI assistance'
        )
        parts.append(header)
        parts.extend(render_result(r) for r in view.results)

    return "\n\n".join(parts)


def render_navigation(variant: Variant, profile: UserSession | None) -> str:
    """Sidebar line: brand plus login hint or the signed-in profile."""
    if profile is None:
        return f"**{variant.brand}** · Log in"
    return f"**{variant.brand}** · Signed in as {profile.display_name}"
