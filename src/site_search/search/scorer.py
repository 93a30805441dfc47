"""Per-term relevance scoring."""

from __future__ import annotations

import logging
import math
import threading
from typing import Protocol, runtime_checkable

from .index import InvertedIndex

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Scorer(Protocol):
    """Protocol for scoring strategies."""

    name: str

    def score(self, term: str, doc_id: int, index: InvertedIndex) -> float:
        """Contribution of term to doc_id. Zero when the term is absent."""
        ...


def idf(term: str, index: InvertedIndex) -> float:
    """Smoothed inverse document frequency, log(1 + N / df)."""
    df = index.document_frequency(term)
    if df == 0:
        return 0.0
    return math.log(1 + index.document_count / df)


class TfIdfScorer:
    """(title_tf * boost + content_tf) * idf."""

    name = "tfidf"

    def score(self, term: str, doc_id: int, index: InvertedIndex) -> float:
        posting = index.get_posting(term, doc_id)
        if posting is None:
            return 0.0
        weighted_tf = posting.title_frequency * posting.field_boost + posting.content_frequency
        return weighted_tf * idf(term, index)


class BM25Scorer:
    """Okapi BM25 over content, plus a boosted title component.

    Content scores come from ``rank_bm25.BM25Okapi`` built over each
    document's content tokens, clamped at zero since Okapi IDF turns
    negative for terms in more than half the corpus. The title component
    is saturated but not length-normalized, and weighted by at least
    ``k1 + 1`` so a title hit never scores below a content-only hit.
    """

    name = "bm25"

    def __init__(self, k1: float = 1.5, b: float = 0.75, epsilon: float = 0.25) -> None:
        self.k1 = k1
        self.b = b
        self.epsilon = epsilon
        self._lock = threading.Lock()
        self._index: InvertedIndex | None = None
        self._model = None
        self._positions: dict[int, int] = {}
        self._term_scores: dict[str, list[float]] = {}

    def _prepare(self, index: InvertedIndex) -> None:
        """(Re)build the Okapi model when a different index comes in."""
        if self._index is index:
            return
        from rank_bm25 import BM25Okapi

        doc_ids = sorted(index.document_lengths)
        positions = {doc_id: pos for pos, doc_id in enumerate(doc_ids)}
        corpus: list[list[str]] = [[] for _ in doc_ids]
        for term in index.terms:
            for posting in index.get_postings(term):
                corpus[positions[posting.doc_id]].extend([term] * posting.content_frequency)

        # BM25Okapi divides by the vocabulary size and the average length
        if any(corpus):
            model = BM25Okapi(corpus, k1=self.k1, b=self.b, epsilon=self.epsilon)
        else:
            model = None
        _LOGGER.debug("BM25 model built over %d document(s)", len(corpus))

        self._model = model
        self._positions = positions
        self._term_scores = {}
        self._index = index

    def _content_score(self, term: str, doc_id: int) -> float:
        if self._model is None:
            return 0.0
        scores = self._term_scores.get(term)
        if scores is None:
            scores = [float(s) for s in self._model.get_scores([term])]
            self._term_scores[term] = scores
        return max(0.0, scores[self._positions[doc_id]])

    def score(self, term: str, doc_id: int, index: InvertedIndex) -> float:
        posting = index.get_posting(term, doc_id)
        if posting is None:
            return 0.0

        with self._lock:
            self._prepare(index)
            content = 0.0
            if posting.content_frequency:
                content = self._content_score(term, doc_id)
            okapi_idf = self._model.idf.get(term, 0.0) if self._model is not None else 0.0

        title = 0.0
        if posting.title_frequency:
            k1 = self.k1
            tf = posting.title_frequency
            weight = max(posting.field_boost, k1 + 1)
            title = weight * tf * (k1 + 1) / (tf + k1) * max(idf(term, index), okapi_idf)

        return title + content
