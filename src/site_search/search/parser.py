"""Parse the site generator's corpus file into searchable documents."""

from __future__ import annotations

import html
import json
import logging
import re
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup

from ..errors import CorpusError
from . import Document

_LOGGER = logging.getLogger(__name__)

_SPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Decode HTML entities and collapse whitespace. Angle brackets are kept."""
    return _SPACE_RE.sub(" ", html.unescape(text)).strip()


def html_to_text(text: str) -> str:
    """Visible text of an HTML fragment, whitespace collapsed."""
    soup = BeautifulSoup(text, "html.parser")
    return _SPACE_RE.sub(" ", soup.get_text(separator=" ")).strip()


def parse_records(records: Any, source: str = "<corpus>", strip_html: bool = False) -> list[Document]:
    """Turn a list of ``{id, title, content, url}`` records into Documents.

    Fields are treated as plain text, so ``Result<T, E>`` stays intact. Pass
    ``strip_html=True`` for corpora whose content still carries markup.

    Records without an ``id`` are numbered from 1 in file order, the way the
    site template numbers posts and pages. Duplicate ids are left for the
    index builder to reject.
    """
    if not isinstance(records, list):
        raise CorpusError(source, "expected a JSON array of documents")

    clean = html_to_text if strip_html else normalize_text
    documents = []
    for position, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise CorpusError(source, f"record {position} is not an object")

        doc_id = record.get("id", position)
        if isinstance(doc_id, str) and doc_id.strip().isdigit():
            doc_id = int(doc_id)
        if not isinstance(doc_id, int) or isinstance(doc_id, bool):
            raise CorpusError(source, f"record {position} has a non-integer id {doc_id!r}")

        title = record.get("title") or ""
        content = record.get("content") or ""
        url = record.get("url") or ""
        for name, value in (("title", title), ("content", content), ("url", url)):
            if not isinstance(value, str):
                raise CorpusError(source, f"record {position} field {name!r} is not a string")

        if not content.strip():
            _LOGGER.debug("Document %s (%s) has no content", doc_id, url)
        documents.append(
            Document(
                id=doc_id,
                title=clean(title),
                content=clean(content),
                url=url,
            )
        )
    return documents


def load_corpus(path: Path, strip_html: bool = False) -> list[Document]:
    """Read the JSON corpus written by the site generator."""
    if not path.exists():
        raise CorpusError(str(path), "file not found")
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusError(str(path), f"cannot read file ({exc})") from exc
    try:
        records = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CorpusError(str(path), f"not valid JSON ({exc})") from exc
    documents = parse_records(records, source=str(path), strip_html=strip_html)
    _LOGGER.info("Loaded %d document(s) from %s", len(documents), path)
    return documents
