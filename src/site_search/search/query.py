"""Query syntax: required, prohibited, field-scoped and prefix terms.

    rust error          either term (documents matching more rank higher)
    +rust -unsafe       must contain rust, must not contain unsafe
    title:kafka         kafka in the title only
    err*                any term starting with err

A lone CJK character matches every indexed term containing it, since the
index only holds bigrams for longer CJK runs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from . import FieldKind
from .index import InvertedIndex, Posting
from .tokenizer import Tokenizer, is_cjk

_FIELD_RE = re.compile(r"^(title|content):(.*)$", re.IGNORECASE | re.DOTALL)


class Presence(Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    PROHIBITED = "prohibited"


class MatchKind(Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Clause:
    """One normalized query term and how it must match."""

    term: str
    presence: Presence = Presence.OPTIONAL
    field: FieldKind | None = None
    match: MatchKind = MatchKind.EXACT

    def to_string(self) -> str:
        marker = {Presence.REQUIRED: "+", Presence.PROHIBITED: "-"}.get(self.presence, "")
        scope = f"{self.field.value}:" if self.field else ""
        wildcard = "*" if self.match is MatchKind.PREFIX else ""
        return f"{marker}{scope}{self.term}{wildcard}"

    def expand(self, index: InvertedIndex) -> list[str]:
        """Index terms this clause stands for."""
        if self.match is MatchKind.EXACT:
            return [self.term] if index.get_postings(self.term) else []
        if self.match is MatchKind.PREFIX:
            return [t for t in index.terms if t.startswith(self.term)]
        return [t for t in index.terms if self.term in t]

    def accepts(self, posting: Posting) -> bool:
        if self.field is FieldKind.TITLE:
            return posting.title_frequency > 0
        if self.field is FieldKind.CONTENT:
            return posting.content_frequency > 0
        return True


def _parse_word(word: str, tokenizer: Tokenizer) -> list[Clause]:
    presence = Presence.OPTIONAL
    if len(word) > 1 and word[0] in "+-":
        presence = Presence.REQUIRED if word[0] == "+" else Presence.PROHIBITED
        word = word[1:]

    scope = None
    match = _FIELD_RE.match(word)
    if match:
        scope = FieldKind(match.group(1).lower())
        word = match.group(2)

    prefix = word.endswith("*")
    word = word.rstrip("*")

    terms = [token.term for token in tokenizer.tokenize(word)]
    clauses = []
    for position, term in enumerate(terms):
        if prefix and position == len(terms) - 1:
            kind = MatchKind.PREFIX
        elif len(term) == 1 and is_cjk(term):
            kind = MatchKind.CONTAINS
        else:
            kind = MatchKind.EXACT
        clauses.append(Clause(term, presence, scope, kind))
    return clauses


def parse_query(query: str, tokenizer: Tokenizer) -> list[Clause]:
    """Split query on whitespace into distinct clauses, in order."""
    clauses: list[Clause] = []
    for word in (query or "").split():
        clauses.extend(_parse_word(word, tokenizer))
    return list(dict.fromkeys(clauses))
