"""Inverted-index search over a static site's posts and pages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldKind(Enum):
    TITLE = "title"
    CONTENT = "content"


@dataclass(frozen=True)
class Document:
    """One post or page as handed over by the site generator."""

    id: int
    title: str
    content: str  # plain text; angle brackets are literal
    url: str


@dataclass(frozen=True)
class Token:
    term: str  # normalized (lowercased) surface form
    position: int
    field: FieldKind


@dataclass(frozen=True)
class SearchResult:
    """A single ranked hit, ready for a rendering layer."""

    doc_id: int
    title: str
    url: str
    snippet: str
    score: float

    def to_dict(self) -> dict:
        return {
            "doc_id": self.doc_id,
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "score": self.score,
        }


def get_tokenizer(name: str) -> "tokenizer.Tokenizer":
    """Resolve a tokenizer name to an instance."""
    if name == "cjk-bigram":
        from .tokenizer import CJKBigramTokenizer

        return CJKBigramTokenizer()
    elif name == "simple":
        from .tokenizer import SimpleTokenizer

        return SimpleTokenizer()
    else:
        raise ValueError(
            f"Unknown tokenizer: {name!r}. Use 'cjk-bigram' or 'simple'."
        )


def get_scorer(name: str) -> "scorer.Scorer":
    """Resolve a scorer name to an instance."""
    if name == "tfidf":
        from .scorer import TfIdfScorer

        return TfIdfScorer()
    elif name == "bm25":
        from .scorer import BM25Scorer

        return BM25Scorer()
    else:
        raise ValueError(f"Unknown scorer: {name!r}. Use 'tfidf' or 'bm25'.")


def reindex(config, corpus_path=None, index_path=None) -> "index.InvertedIndex":
    """Read the site corpus and write a fresh index artifact.

    Paths default to the ones derived from config.

    Returns:
        The index that was written.
    """
    from .artifact import save_artifact
    from .index import build_index, build_store
    from .parser import load_corpus

    documents = load_corpus(corpus_path or config.corpus_path, strip_html=config.strip_html)
    built = build_index(
        documents,
        tokenizer=get_tokenizer(config.tokenizer),
        title_boost=config.title_boost,
    )
    save_artifact(index_path or config.index_path, built, build_store(documents))
    return built
