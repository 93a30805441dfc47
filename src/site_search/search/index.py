"""Inverted index construction and the read-only index types."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from ..errors import DuplicateDocumentError
from . import Document, FieldKind
from .tokenizer import CJKBigramTokenizer, Tokenizer

_LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE_BOOST = 10.0


@dataclass(frozen=True)
class Posting:
    """Occurrences of one term in one document, counted per field."""

    doc_id: int
    title_frequency: int
    content_frequency: int
    field_boost: float = DEFAULT_TITLE_BOOST

    @property
    def term_frequency(self) -> int:
        return self.title_frequency + self.content_frequency


@dataclass(frozen=True)
class StoredDocument:
    title: str
    url: str
    content: str = ""


@dataclass(frozen=True)
class DocumentStore:
    """doc_id -> title/url/content, used to render results."""

    documents: Mapping[int, StoredDocument] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "documents", MappingProxyType(dict(self.documents)))

    def get(self, doc_id: int) -> StoredDocument | None:
        return self.documents.get(doc_id)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.documents

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class InvertedIndex:
    """Term -> postings sorted by doc_id, plus corpus statistics.

    Built once per corpus snapshot; never mutated afterwards.
    """

    postings: Mapping[str, tuple[Posting, ...]]
    document_lengths: Mapping[int, int]
    tokenizer_name: str = CJKBigramTokenizer.name
    title_boost: float = DEFAULT_TITLE_BOOST

    def __post_init__(self) -> None:
        object.__setattr__(self, "postings", MappingProxyType(dict(self.postings)))
        object.__setattr__(
            self, "document_lengths", MappingProxyType(dict(self.document_lengths))
        )

    @property
    def document_count(self) -> int:
        return len(self.document_lengths)

    @property
    def terms(self) -> list[str]:
        return list(self.postings)

    @property
    def average_document_length(self) -> float:
        if not self.document_lengths:
            return 0.0
        return sum(self.document_lengths.values()) / len(self.document_lengths)

    def get_postings(self, term: str) -> tuple[Posting, ...]:
        return self.postings.get(term, ())

    def get_posting(self, term: str, doc_id: int) -> Posting | None:
        for posting in self.get_postings(term):
            if posting.doc_id == doc_id:
                return posting
            if posting.doc_id > doc_id:
                break
        return None

    def document_frequency(self, term: str) -> int:
        return len(self.get_postings(term))

    def document_length(self, doc_id: int) -> int:
        return self.document_lengths.get(doc_id, 0)


def _check_unique(documents: Iterable[Document]) -> list[Document]:
    seen: set[int] = set()
    docs = []
    for doc in documents:
        if doc.id in seen:
            raise DuplicateDocumentError(doc.id)
        seen.add(doc.id)
        docs.append(doc)
    return docs


def build_index(
    documents: Iterable[Document],
    tokenizer: Tokenizer | None = None,
    title_boost: float = DEFAULT_TITLE_BOOST,
) -> InvertedIndex:
    """Tokenize every document and aggregate the occurrences into postings.

    Args:
        documents: The full corpus. Ids must be unique.
        tokenizer: Segmentation strategy; recorded in the index so queries
            are tokenized the same way. Defaults to CJK bigrams.
        title_boost: Weight of a title occurrence relative to a content one.

    Raises:
        DuplicateDocumentError: Two documents share an id.
        ValueError: title_boost is below 1 or not finite.
    """
    if not math.isfinite(title_boost) or title_boost < 1:
        raise ValueError(f"title_boost must be a finite number of at least 1, got {title_boost!r}")
    tokenizer = tokenizer or CJKBigramTokenizer()
    docs = _check_unique(documents)
    if not docs:
        _LOGGER.warning("Building a search index from an empty corpus")

    occurrences: dict[str, list[tuple[int, int, FieldKind]]] = defaultdict(list)
    lengths: dict[int, int] = {}
    for doc in sorted(docs, key=lambda d: d.id):
        length = 0
        for field_kind, text in ((FieldKind.TITLE, doc.title), (FieldKind.CONTENT, doc.content)):
            tokens = tokenizer.tokenize(text or "", field_kind)
            length += len(tokens)
            for token in tokens:
                occurrences[token.term].append((doc.id, token.position, token.field))
        lengths[doc.id] = length

    postings: dict[str, tuple[Posting, ...]] = {}
    for term in sorted(occurrences):
        counts: dict[int, list[int]] = {}
        for doc_id, _position, field_kind in occurrences[term]:
            per_field = counts.setdefault(doc_id, [0, 0])
            per_field[0 if field_kind is FieldKind.TITLE else 1] += 1
        postings[term] = tuple(
            Posting(
                doc_id=doc_id,
                title_frequency=title_tf,
                content_frequency=content_tf,
                field_boost=title_boost,
            )
            for doc_id, (title_tf, content_tf) in sorted(counts.items())
        )

    _LOGGER.debug(
        "Indexed %d document(s), %d term(s) with tokenizer %s",
        len(lengths),
        len(postings),
        tokenizer.name,
    )
    return InvertedIndex(
        postings=postings,
        document_lengths=lengths,
        tokenizer_name=tokenizer.name,
        title_boost=title_boost,
    )


def build_store(documents: Iterable[Document]) -> DocumentStore:
    """Keep what the rendering layer needs, keyed by document id."""
    docs = _check_unique(documents)
    return DocumentStore(
        {
            doc.id: StoredDocument(title=doc.title, url=doc.url, content=doc.content)
            for doc in sorted(docs, key=lambda d: d.id)
        }
    )
