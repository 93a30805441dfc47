"""Tests for query syntax parsing."""

import pytest

from site_search.search import Document, FieldKind
from site_search.search.index import build_index
from site_search.search.query import Clause, MatchKind, Presence, parse_query
from site_search.search.tokenizer import CJKBigramTokenizer, SimpleTokenizer


def _parse(query):
    return parse_query(query, CJKBigramTokenizer())


class TestParseQuery:
    def test_plain_terms(self):
        assert _parse("Rust error") == [Clause("rust"), Clause("error")]

    def test_required_and_prohibited(self):
        assert _parse("+rust -unsafe") == [
            Clause("rust", Presence.REQUIRED),
            Clause("unsafe", Presence.PROHIBITED),
        ]

    def test_field_scope(self):
        assert _parse("title:Kafka content:stream") == [
            Clause("kafka", field=FieldKind.TITLE),
            Clause("stream", field=FieldKind.CONTENT),
        ]

    def test_unknown_field_is_plain_text(self):
        assert _parse("author:alice") == [Clause("author"), Clause("alice")]

    def test_prefix_wildcard(self):
        assert _parse("err*") == [Clause("err", match=MatchKind.PREFIX)]

    def test_combined_operators(self):
        assert _parse("-title:draft*") == [
            Clause("draft", Presence.PROHIBITED, FieldKind.TITLE, MatchKind.PREFIX)
        ]

    def test_wildcard_applies_to_last_token(self):
        assert _parse("error-hand*") == [
            Clause("error"),
            Clause("hand", match=MatchKind.PREFIX),
        ]

    def test_hyphen_inside_word_is_not_an_operator(self):
        assert _parse("error-handling") == [Clause("error"), Clause("handling")]

    def test_operator_spreads_over_cjk_bigrams(self):
        assert _parse("+错误处理") == [
            Clause("错误", Presence.REQUIRED),
            Clause("误处", Presence.REQUIRED),
            Clause("处理", Presence.REQUIRED),
        ]

    def test_single_cjk_character_contains(self):
        assert _parse("误") == [Clause("误", match=MatchKind.CONTAINS)]

    def test_single_latin_character_is_exact(self):
        assert _parse("a") == [Clause("a")]

    def test_duplicates_collapse(self):
        assert _parse("rust RUST rust") == [Clause("rust")]

    @pytest.mark.parametrize("query", ["", "  ", "+", "-", "*", "+-", "title:", "content:*", None])
    def test_nothing_to_search(self, query):
        assert _parse(query) == []

    def test_uses_given_tokenizer(self):
        assert parse_query("搜索引擎", SimpleTokenizer()) == [Clause("搜索引擎")]

    def test_to_string(self):
        assert Clause("draft", Presence.PROHIBITED, FieldKind.TITLE, MatchKind.PREFIX).to_string() == "-title:draft*"
        assert Clause("rust").to_string() == "rust"


class TestExpand:
    @pytest.fixture
    def index(self):
        return build_index([
            Document(1, "Errors", "error handling", "/1/"),
            Document(2, "错误", "处理", "/2/"),
        ])

    def test_exact(self, index):
        assert Clause("error").expand(index) == ["error"]
        assert Clause("err").expand(index) == []

    def test_prefix(self, index):
        assert sorted(Clause("err", match=MatchKind.PREFIX).expand(index)) == ["error", "errors"]

    def test_contains(self, index):
        assert Clause("误", match=MatchKind.CONTAINS).expand(index) == ["错误"]

    def test_field_filter(self, index):
        posting = index.get_posting("errors", 1)
        assert Clause("errors", field=FieldKind.TITLE).accepts(posting)
        assert not Clause("errors", field=FieldKind.CONTENT).accepts(posting)
        assert Clause("errors").accepts(posting)
