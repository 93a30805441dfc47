"""Query execution over an immutable index."""

from __future__ import annotations

import logging
from pathlib import Path

from . import SearchResult, get_scorer, get_tokenizer
from .highlight import DEFAULT_WINDOW, highlight
from .index import DocumentStore, InvertedIndex
from .query import Clause, Presence, parse_query
from .scorer import Scorer, TfIdfScorer

_LOGGER = logging.getLogger(__name__)


def parse(query: str, index: InvertedIndex) -> list[Clause]:
    """Clauses of query, tokenized exactly as the index was."""
    return parse_query(query or "", get_tokenizer(index.tokenizer_name))


def query_terms(query: str, index: InvertedIndex) -> list[str]:
    """Distinct terms to look for (and highlight); prohibited ones excluded."""
    return _wanted_terms(parse(query, index))


def _wanted_terms(clauses: list[Clause]) -> list[str]:
    return list(dict.fromkeys(c.term for c in clauses if c.presence is not Presence.PROHIBITED))


def rank(clauses: list[Clause], index: InvertedIndex, scorer: Scorer) -> list[tuple[int, float]]:
    """Score the documents clauses select; best first, ties by doc_id.

    Optional clauses match any document containing them. Once a required
    clause is present only documents matching every required clause
    qualify. Prohibited clauses remove documents. A query made only of
    prohibited clauses returns every other document with a zero score.
    """
    scores: dict[int, float] = {}
    scored: set[tuple[str, int]] = set()
    required: list[set[int]] = []
    excluded: set[int] = set()

    for clause in clauses:
        matched: set[int] = set()
        for term in clause.expand(index):
            for posting in index.get_postings(term):
                if not clause.accepts(posting):
                    continue
                matched.add(posting.doc_id)
                if clause.presence is Presence.PROHIBITED or (term, posting.doc_id) in scored:
                    continue
                scored.add((term, posting.doc_id))
                scores[posting.doc_id] = scores.get(posting.doc_id, 0.0) + scorer.score(
                    term, posting.doc_id, index
                )
        if clause.presence is Presence.PROHIBITED:
            excluded |= matched
        elif clause.presence is Presence.REQUIRED:
            required.append(matched)

    if required:
        candidates = set.intersection(*required)
    elif clauses and all(c.presence is Presence.PROHIBITED for c in clauses):
        candidates = set(index.document_lengths)
    else:
        candidates = set(scores)
    candidates -= excluded

    return sorted(
        ((doc_id, scores.get(doc_id, 0.0)) for doc_id in candidates),
        key=lambda item: (-item[1], item[0]),
    )


def search(
    query: str,
    index: InvertedIndex,
    store: DocumentStore,
    *,
    scorer: Scorer | None = None,
    window_size: int = DEFAULT_WINDOW,
    limit: int | None = None,
) -> list[SearchResult]:
    """Rank the documents matching query and attach highlighted snippets.

    Plain terms need not all occur; partial matches simply score lower.
    See ``query`` for the +required, -prohibited, field: and prefix*
    operators. Returns an empty list for queries without any terms and
    never raises.
    """
    try:
        clauses = parse(query, index)
        if not clauses:
            return []

        ranked = rank(clauses, index, scorer or TfIdfScorer())
        terms = _wanted_terms(clauses)
        if limit is not None:
            ranked = ranked[: max(limit, 0)]

        results = []
        for doc_id, score in ranked:
            doc = store.get(doc_id)
            if doc is None:
                _LOGGER.warning("Posting references unknown document %s", doc_id)
                continue
            results.append(
                SearchResult(
                    doc_id=doc_id,
                    title=doc.title,
                    url=doc.url,
                    snippet=highlight(doc.content, terms, window_size),
                    score=score,
                )
            )
        return results
    except Exception:
        _LOGGER.exception("Search failed for query %r", query)
        return []


class IndexedSearchEngine:
    """Search over a loaded index. Safe to share between threads."""

    def __init__(
        self,
        index: InvertedIndex,
        store: DocumentStore,
        scorer: Scorer | None = None,
        window_size: int = DEFAULT_WINDOW,
    ) -> None:
        self._index = index
        self._store = store
        self._scorer = scorer or TfIdfScorer()
        self._window_size = window_size

    @property
    def index(self) -> InvertedIndex:
        return self._index

    @property
    def store(self) -> DocumentStore:
        return self._store

    def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        return search(
            query,
            self._index,
            self._store,
            scorer=self._scorer,
            window_size=self._window_size,
            limit=limit,
        )

    def is_ready(self) -> bool:
        return True


def open_engine(
    index_path: Path,
    scorer: str = "tfidf",
    window_size: int = DEFAULT_WINDOW,
) -> "backend.SearchEngine":
    """Load an index artifact, or fall back to a disabled engine.

    A missing, stale or corrupt artifact disables search instead of
    failing, so the caller keeps showing its default content.
    """
    from ..errors import ArtifactError
    from .artifact import load_artifact
    from .none import DisabledSearchEngine

    try:
        index, store = load_artifact(index_path)
    except (ArtifactError, OSError) as exc:
        _LOGGER.warning("Search disabled, cannot load index %s: %s", index_path, exc)
        return DisabledSearchEngine()
    return IndexedSearchEngine(index, store, get_scorer(scorer), window_size)
