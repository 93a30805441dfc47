"""Search engine protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from . import SearchResult


@runtime_checkable
class SearchEngine(Protocol):
    """Protocol for the runtime search entry point."""

    def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """Search the index. Returns results sorted by relevance, never raises."""
        ...

    def is_ready(self) -> bool:
        """Return True if an index is loaded and searches can match."""
        ...
