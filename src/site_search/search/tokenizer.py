"""Tokenizers turning raw text into normalized, positioned terms."""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from . import FieldKind, Token

# Alphanumeric runs; underscore and everything else is a separator.
_WORD_RE = re.compile(r"[^\W_]+")

# Han (incl. extension A and compatibility ideographs), kana, Hangul.
_CJK_RE = re.compile(
    r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"
    r"\u3040-\u309f\u30a0-\u30ff\u31f0-\u31ff"
    r"\u1100-\u11ff\u3130-\u318f\uac00-\ud7af"
    r"\U00020000-\U0002ebef]+"
)


def is_cjk(text: str) -> bool:
    """True when text is made only of CJK characters."""
    return _CJK_RE.fullmatch(text) is not None

def split_scripts(run: str) -> list[tuple[str, bool]]:
    """Split an alphanumeric run into (segment, is_cjk) pieces, in order."""
    pieces = []
    last = 0
    for match in _CJK_RE.finditer(run):
        if match.start() > last:
            pieces.append((run[last:match.start()], False))
        pieces.append((match.group(), True))
        last = match.end()
    if last < len(run):
        pieces.append((run[last:], False))
    return pieces


def bigrams(segment: str) -> list[str]:
    """Every adjacent character pair; a lone character stays a unigram."""
    if len(segment) < 2:
        return [segment] if segment else []
    return [segment[i:i + 2] for i in range(len(segment) - 1)]


@runtime_checkable
class Tokenizer(Protocol):
    """Protocol for tokenizer strategies."""

    name: str

    def tokenize(self, text: str, field: FieldKind = FieldKind.CONTENT) -> list[Token]:
        """Return the tokens of text, positions counted from zero."""
        ...


class SimpleTokenizer:
    """Lowercased alphanumeric runs. CJK runs are kept as whole words."""

    name = "simple"

    def tokenize(self, text: str, field: FieldKind = FieldKind.CONTENT) -> list[Token]:
        return [
            Token(term=term, position=position, field=field)
            for position, term in enumerate(self.terms(text))
        ]

    def terms(self, text: str) -> list[str]:
        return _WORD_RE.findall(text.lower()) if text else []


class CJKBigramTokenizer(SimpleTokenizer):
    """Word tokens for spaced scripts, character bigrams for CJK runs.

    Mixed runs such as ``rust错误处理`` are cut at script boundaries and each
    piece is segmented on its own; positions keep counting across pieces.
    """

    name = "cjk-bigram"

    def terms(self, text: str) -> list[str]:
        terms = []
        for run in super().terms(text):
            for segment, is_cjk in split_scripts(run):
                if is_cjk:
                    terms.extend(bigrams(segment))
                else:
                    terms.append(segment)
        return terms
