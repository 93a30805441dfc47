"""Versioned JSON serialization of the index and document store.

Layout::

    {
      "format": "site-search-index",
      "version": 1,
      "tokenizer": "cjk-bigram",
      "title_boost": 10.0,
      "documents": [{"id": 1, "title": ..., "url": ..., "content": ..., "length": 12}],
      "postings": {"term": [[doc_id, title_tf, content_tf], ...]}
    }

Keys are sorted and separators compact, so the same corpus always produces
the same bytes.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from ..errors import ArtifactError
from . import get_tokenizer
from .index import DocumentStore, InvertedIndex, Posting, StoredDocument

_LOGGER = logging.getLogger(__name__)

FORMAT_NAME = "site-search-index"
FORMAT_VERSION = 1


def to_payload(index: InvertedIndex, store: DocumentStore) -> dict[str, Any]:
    documents = []
    for doc_id in sorted(store.documents):
        doc = store.documents[doc_id]
        documents.append(
            {
                "id": doc_id,
                "title": doc.title,
                "url": doc.url,
                "content": doc.content,
                "length": index.document_length(doc_id),
            }
        )
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "tokenizer": index.tokenizer_name,
        "title_boost": index.title_boost,
        "documents": documents,
        "postings": {
            term: [[p.doc_id, p.title_frequency, p.content_frequency] for p in postings]
            for term, postings in sorted(index.postings.items())
        },
    }


def dumps(index: InvertedIndex, store: DocumentStore) -> str:
    return json.dumps(
        to_payload(index, store),
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
    )


def _require(payload: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    value = payload.get(key)
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ArtifactError(f"Field {key!r} is missing or has the wrong type")
    return value


def from_payload(payload: Any) -> tuple[InvertedIndex, DocumentStore]:
    """Rebuild the index and store, checking every structural invariant."""
    if not isinstance(payload, dict):
        raise ArtifactError("Index artifact is not a JSON object")
    if payload.get("format") != FORMAT_NAME:
        raise ArtifactError(f"Unknown artifact format: {payload.get('format')!r}")
    if payload.get("version") != FORMAT_VERSION:
        raise ArtifactError(
            f"Unsupported artifact version {payload.get('version')!r}, "
            f"expected {FORMAT_VERSION}"
        )

    tokenizer_name = _require(payload, "tokenizer", str)
    try:
        get_tokenizer(tokenizer_name)
    except ValueError as exc:
        raise ArtifactError(str(exc)) from exc
    title_boost = float(_require(payload, "title_boost", (int, float)))
    if not math.isfinite(title_boost) or title_boost < 1:
        raise ArtifactError(f"Invalid title_boost {title_boost!r}, expected a finite number of at least 1")

    documents: dict[int, StoredDocument] = {}
    lengths: dict[int, int] = {}
    for entry in _require(payload, "documents", list):
        if not isinstance(entry, dict):
            raise ArtifactError("Document entry is not an object")
        doc_id = _require(entry, "id", int)
        if doc_id in documents:
            raise ArtifactError(f"Duplicate document id {doc_id}")
        documents[doc_id] = StoredDocument(
            title=_require(entry, "title", str),
            url=_require(entry, "url", str),
            content=_require(entry, "content", str),
        )
        lengths[doc_id] = _require(entry, "length", int)

    postings: dict[str, tuple[Posting, ...]] = {}
    for term, rows in _require(payload, "postings", dict).items():
        if not isinstance(rows, list) or not rows:
            raise ArtifactError(f"Postings for {term!r} are empty or malformed")
        built = []
        for row in rows:
            if (
                not isinstance(row, list)
                or len(row) != 3
                or not all(isinstance(v, int) and not isinstance(v, bool) for v in row)
            ):
                raise ArtifactError(f"Malformed posting for {term!r}: {row!r}")
            doc_id, title_tf, content_tf = row
            if doc_id not in documents:
                raise ArtifactError(f"Posting for {term!r} references unknown document {doc_id}")
            if built and doc_id <= built[-1].doc_id:
                raise ArtifactError(f"Postings for {term!r} are not sorted by document id")
            built.append(Posting(doc_id, title_tf, content_tf, title_boost))
        postings[term] = tuple(built)

    index = InvertedIndex(
        postings=postings,
        document_lengths=lengths,
        tokenizer_name=tokenizer_name,
        title_boost=title_boost,
    )
    return index, DocumentStore(documents)


def loads(data: str | bytes) -> tuple[InvertedIndex, DocumentStore]:
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ArtifactError(f"Index artifact is not valid JSON: {exc}") from exc
    return from_payload(payload)


def save_artifact(path: Path, index: InvertedIndex, store: DocumentStore) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(index, store), encoding="utf-8")
    _LOGGER.info("Wrote search index for %d document(s) to %s", len(store), path)


def load_artifact(path: Path) -> tuple[InvertedIndex, DocumentStore]:
    """Read an artifact written by save_artifact.

    Raises:
        ArtifactError: The file is missing, unreadable, or not a valid index.
    """
    if not path.exists():
        raise ArtifactError(f"Index artifact not found: {path}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ArtifactError(f"Cannot read index artifact {path}: {exc}") from exc
    return loads(data)
