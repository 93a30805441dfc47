"""Paths, defaults, and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None



def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")

@dataclass
class Config:
    """Runtime configuration — resolved from env vars and defaults."""

    # Site checkout; the generated site lives in <site_dir>/_site
    site_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("SITE_SEARCH_SITE_DIR", Path.cwd()))
    )

    # Index settings
    tokenizer: str = field(
        default_factory=lambda: os.environ.get("SITE_SEARCH_TOKENIZER", "cjk-bigram")
    )  # "cjk-bigram" | "simple"
    title_boost: float = field(
        default_factory=lambda: _env_float("SITE_SEARCH_TITLE_BOOST", 10.0)
    )
    strip_html: bool = field(
        default_factory=lambda: _env_flag("SITE_SEARCH_STRIP_HTML")
    )  # corpus content still carries markup

    # Query settings
    scorer: str = field(
        default_factory=lambda: os.environ.get("SITE_SEARCH_SCORER", "tfidf")
    )  # "tfidf" | "bm25"
    snippet_window: int = field(
        default_factory=lambda: _env_int("SITE_SEARCH_SNIPPET_WINDOW", 80)
    )  # characters on each side of the first match
    result_limit: int = field(default_factory=lambda: _env_int("SITE_SEARCH_LIMIT", 20))

    @property
    def output_dir(self) -> Path:
        return self.site_dir / "_site"

    @property
    def corpus_path(self) -> Path:
        return self.output_dir / "search.json"

    @property
    def index_path(self) -> Path:
        return self.output_dir / "assets" / "search-index.json"
