"""Snippet extraction with highlighted query terms.

Matching is done on the original text, case-insensitively, so the snippet
keeps the author's casing. Spans already wrapped in ``<mark>`` (for example
when a snippet is highlighted a second time) are folded into the new spans
instead of being wrapped again.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"
ELLIPSIS = "…"
DEFAULT_WINDOW = 80

_MARKED_RE = re.compile(re.escape(MARK_OPEN) + r"(.*?)" + re.escape(MARK_CLOSE), re.DOTALL)


def strip_marks(text: str) -> tuple[str, list[tuple[int, int]]]:
    """Remove mark tags, returning the plain text and the spans they covered."""
    plain = []
    spans = []
    length = 0
    last = 0
    for match in _MARKED_RE.finditer(text):
        before = text[last:match.start()]
        plain.append(before)
        length += len(before)
        inner = match.group(1)
        if inner:
            spans.append((length, length + len(inner)))
        plain.append(inner)
        length += len(inner)
        last = match.end()
    plain.append(text[last:])
    return "".join(plain), spans


def find_matches(text: str, terms: Sequence[str]) -> list[tuple[int, int]]:
    """All case-insensitive occurrences of any term, as (start, end) spans."""
    spans = []
    for term in dict.fromkeys(t for t in terms if t):
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        spans.extend(m.span() for m in pattern.finditer(text))
    return spans


def merge_spans(spans: Sequence[tuple[int, int]]) -> list[tuple[int, int]]:
    """Merge overlapping or touching spans into disjoint, sorted ones."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _slice(text: str, start: int, end: int, spans: Sequence[tuple[int, int]]) -> str:
    clipped = [
        (max(s, start), min(e, end)) for s, e in spans if s < end and e > start
    ]
    body = []
    cursor = start
    for s, e in clipped:
        body.append(text[cursor:s])
        body.append(f"{MARK_OPEN}{text[s:e]}{MARK_CLOSE}")
        cursor = e
    body.append(text[cursor:end])

    snippet = "".join(body)
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def highlight(content: str, query_terms: Sequence[str], window_size: int = DEFAULT_WINDOW) -> str:
    """Excerpt content around the first match and mark every match in it.

    Args:
        content: Original document text.
        query_terms: Terms to mark; matched case-insensitively.
        window_size: Characters kept on each side of the first match.

    Returns:
        The whole content if it fits in ``2 * window_size`` characters,
        otherwise a window around the first match (or a plain prefix when
        nothing matches), with ``…`` where text was cut.
    """
    window_size = max(int(window_size), 0)
    text, existing = strip_marks(content or "")
    spans = merge_spans(existing + find_matches(text, query_terms))

    if len(text) <= 2 * window_size:
        return _slice(text, 0, len(text), spans)
    if not spans:
        return _slice(text, 0, 2 * window_size, [])

    first_start, first_end = spans[0]
    start = max(0, first_start - window_size)
    end = min(len(text), first_end + window_size)
    return _slice(text, start, end, spans)
