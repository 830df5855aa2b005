"""Shared data models for the web app."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SearchResult:
    """A generic search hit."""

    title: str
    snippet: str


@dataclass
class FinanceResult(SearchResult):
    """A synthesized Finance GPT analysis record."""

    data: dict[str, Any] | None = None
    sources: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    timestamp: str = ""


@dataclass
class SearchState:
    """Component-local state of the search interface.

    Owned and mutated only by ``SearchController``; never persisted.
    """

    query: str = ""
    results: list[SearchResult] = field(default_factory=list)
    is_loading: bool = False
    has_searched: bool = False
    show_empty_warning: bool = False


@dataclass
class UserSession:
    """Typed view over a persisted session blob.

    The blob itself is stored verbatim; this view tolerates missing keys.
    """

    id: str = ""
    email: str = ""
    name: str = ""
    picture: str = ""
    given_name: str = ""
    family_name: str = ""
    verified_email: bool = False
    token: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserSession:
        return cls(
            id=str(data.get("id") or ""),
            email=data.get("email") or "",
            name=data.get("name") or "",
            picture=data.get("picture") or "",
            given_name=data.get("given_name") or "",
            family_name=data.get("family_name") or "",
            verified_email=bool(data.get("verified_email")),
            token=data.get("token") or "",
        )

    @property
    def display_name(self) -> str:
        return self.given_name or self.name or self.email or self.id
