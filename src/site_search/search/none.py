"""No-op search engine."""

from __future__ import annotations

from . import SearchResult


class DisabledSearchEngine:
    """Stands in when no index could be loaded. Callers keep their default view."""

    def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        return []

    def is_ready(self) -> bool:
        return False
