"""Tests for the config module."""

from pathlib import Path

import pytest

from site_search.config import Config


ENV_VARS = (
    "SITE_SEARCH_SITE_DIR",
    "SITE_SEARCH_TOKENIZER",
    "SITE_SEARCH_SCORER",
    "SITE_SEARCH_TITLE_BOOST",
    "SITE_SEARCH_SNIPPET_WINDOW",
    "SITE_SEARCH_LIMIT",
    "SITE_SEARCH_STRIP_HTML",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self, clean_env, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config()
        assert config.site_dir == Path.cwd()
        assert config.tokenizer == "cjk-bigram"
        assert config.scorer == "tfidf"
        assert config.title_boost == 10.0
        assert config.snippet_window == 80
        assert config.result_limit == 20
        assert config.strip_html is False

    def test_derived_paths(self, clean_env, tmp_path):
        config = Config(site_dir=tmp_path)
        assert config.corpus_path == tmp_path / "_site" / "search.json"
        assert config.index_path == tmp_path / "_site" / "assets" / "search-index.json"


class TestEnvOverrides:
    def test_reads_environment(self, clean_env, tmp_path, monkeypatch):
        monkeypatch.setenv("SITE_SEARCH_SITE_DIR", str(tmp_path))
        monkeypatch.setenv("SITE_SEARCH_TOKENIZER", "simple")
        monkeypatch.setenv("SITE_SEARCH_SCORER", "bm25")
        monkeypatch.setenv("SITE_SEARCH_TITLE_BOOST", "4.5")
        monkeypatch.setenv("SITE_SEARCH_SNIPPET_WINDOW", "40")
        monkeypatch.setenv("SITE_SEARCH_LIMIT", "5")
        config = Config()
        assert config.site_dir == tmp_path
        assert config.tokenizer == "simple"
        assert config.scorer == "bm25"
        assert config.title_boost == 4.5
        assert config.snippet_window == 40
        assert config.result_limit == 5

    def test_explicit_arguments_win(self, clean_env, monkeypatch):
        monkeypatch.setenv("SITE_SEARCH_TOKENIZER", "simple")
        assert Config(tokenizer="cjk-bigram").tokenizer == "cjk-bigram"

    def test_empty_value_uses_default(self, clean_env, monkeypatch):
        monkeypatch.setenv("SITE_SEARCH_TITLE_BOOST", "")
        assert Config().title_boost == 10.0

    def test_invalid_number(self, clean_env, monkeypatch):
        monkeypatch.setenv("SITE_SEARCH_SNIPPET_WINDOW", "wide")
        with pytest.raises(ValueError, match="SITE_SEARCH_SNIPPET_WINDOW"):
            Config()

    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("Yes", True), ("0", False), ("no", False)])
    def test_strip_html_flag(self, clean_env, monkeypatch, value, expected):
        monkeypatch.setenv("SITE_SEARCH_STRIP_HTML", value)
        assert Config().strip_html is expected
