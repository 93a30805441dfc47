"""Tests for reading the site corpus."""

import json

import pytest

from site_search.errors import CorpusError
from site_search.search import Document
from site_search.search.engine import search
from site_search.search.index import build_index, build_store
from site_search.search.parser import html_to_text, load_corpus, normalize_text, parse_records


SAMPLE_CORPUS = [
    {
        "id": 1,
        "title": "Rust Error Handling",
        "content": "thiserror macro for errors",
        "url": "/rust/error-handling/",
    },
    {"id": 2, "title": "Shell Tips", "content": "grep and awk usage", "url": "/shell/tips/"},
]


class TestLoadCorpus:
    def test_reads_documents(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_text(json.dumps(SAMPLE_CORPUS))
        docs = load_corpus(path)
        assert docs == [
            Document(1, "Rust Error Handling", "thiserror macro for errors", "/rust/error-handling/"),
            Document(2, "Shell Tips", "grep and awk usage", "/shell/tips/"),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusError, match="not found"):
            load_corpus(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_text("[{")
        with pytest.raises(CorpusError, match="not valid JSON"):
            load_corpus(path)

    def test_empty_array(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_text("[]")
        assert load_corpus(path) == []

    def test_directory_is_a_corpus_error(self, tmp_path):
        with pytest.raises(CorpusError, match="cannot read"):
            load_corpus(tmp_path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_bytes(b"\xff\xfe[]")
        with pytest.raises(CorpusError, match="cannot read"):
            load_corpus(path)

    def test_utf8(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_text(
            json.dumps([{"id": 1, "title": "错误处理", "content": "中文内容", "url": "/zh/"}], ensure_ascii=False),
            encoding="utf-8",
        )
        assert load_corpus(path)[0].title == "错误处理"


class TestParseRecords:
    def test_missing_ids_numbered_from_one(self):
        records = [{"title": "A", "content": "", "url": "/a/"}, {"title": "B", "content": "", "url": "/b/"}]
        assert [d.id for d in parse_records(records)] == [1, 2]

    def test_numeric_string_id(self):
        assert parse_records([{"id": "7", "title": "T", "content": "c", "url": "/"}])[0].id == 7

    def test_missing_fields_default_to_empty(self):
        doc = parse_records([{"id": 3, "title": None}])[0]
        assert doc == Document(3, "", "", "")

    def test_keeps_angle_brackets_by_default(self):
        doc = parse_records([{"id": 1, "title": "T", "content": "a < b and c > d", "url": "/"}])[0]
        assert doc.content == "a < b and c > d"

    def test_decodes_entities(self):
        doc = parse_records([{"id": 1, "title": "T", "content": "Vec&lt;u8&gt; &amp; more", "url": "/"}])[0]
        assert doc.content == "Vec<u8> & more"

    def test_strips_html_when_asked(self):
        records = [{"id": 1, "title": "T", "content": "<p>Hello &amp; <b>bye</b></p>", "url": "/"}]
        assert parse_records(records, strip_html=True)[0].content == "Hello & bye"

    def test_not_a_list(self):
        with pytest.raises(CorpusError, match="JSON array"):
            parse_records({"id": 1})

    def test_record_not_an_object(self):
        with pytest.raises(CorpusError, match="record 2"):
            parse_records([SAMPLE_CORPUS[0], "oops"])

    def test_bad_id(self):
        with pytest.raises(CorpusError, match="non-integer id"):
            parse_records([{"id": "abc", "title": "T", "content": "c", "url": "/"}])

    def test_bad_field_type(self):
        with pytest.raises(CorpusError, match="'content'"):
            parse_records([{"id": 1, "title": "T", "content": ["x"], "url": "/"}])

    def test_duplicates_left_for_builder(self):
        records = [SAMPLE_CORPUS[0], SAMPLE_CORPUS[0]]
        assert [d.id for d in parse_records(records)] == [1, 1]


class TestNormalizeText:
    def test_collapses_whitespace(self):
        assert normalize_text("a\n\n  b\tc") == "a b c"

    def test_plain_text_unchanged(self):
        assert normalize_text("plain text") == "plain text"

    def test_generic_types_survive(self):
        assert normalize_text("Result<T, E> or Vec<String>") == "Result<T, E> or Vec<String>"


class TestHtmlToText:
    def test_block_tags_separate_words(self):
        assert html_to_text("<p>one</p><p>two</p>") == "one two"

    def test_drops_tags_keeps_text(self):
        assert html_to_text("<ul><li>grep</li> <li>awk</li></ul>") == "grep awk"


GENERICS_CORPUS = [
    {
        "id": 1,
        "title": "Option<T> explained",
        "content": "Return Result<T, E> or Vec<String> when a < b and c > d.",
        "url": "/rust/generics/",
    },
    {"id": 2, "title": "Shell Tips", "content": "grep and awk usage", "url": "/shell/tips/"},
]


class TestPlainTextCorpus:
    def test_generic_types_survive_loading(self, tmp_path):
        path = tmp_path / "search.json"
        path.write_text(json.dumps(GENERICS_CORPUS))
        doc = load_corpus(path)[0]
        assert doc.title == "Option<T> explained"
        assert doc.content == "Return Result<T, E> or Vec<String> when a < b and c > d."

    @pytest.mark.parametrize("query", ["string", "option", "result", "vec", "explained"])
    def test_generic_types_are_searchable(self, tmp_path, query):
        path = tmp_path / "search.json"
        path.write_text(json.dumps(GENERICS_CORPUS))
        documents = load_corpus(path)
        results = search(query, build_index(documents), build_store(documents))
        assert [r.doc_id for r in results] == [1]
