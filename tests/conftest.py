"""Shared corpus fixtures."""

import pytest

from site_search.search import Document


RUST_DOC = Document(
    id=1,
    title="Rust Error Handling",
    content="thiserror macro for errors",
    url="/rust/error-handling/",
)
SHELL_DOC = Document(
    id=2,
    title="Shell Tips",
    content="grep and awk usage",
    url="/shell/tips/",
)
NOTES_DOC = Document(
    id=3,
    title="Notes",
    content="rust is mentioned once, error also once",
    url="/gather/notes/",
)
CJK_DOC = Document(
    id=4,
    title="错误处理",
    content="Rust 中的错误处理方式：使用 Result 类型。",
    url="/rust/cjk/",
)


@pytest.fixture
def docs():
    return [RUST_DOC, SHELL_DOC, NOTES_DOC]


@pytest.fixture
def mixed_docs():
    return [RUST_DOC, SHELL_DOC, NOTES_DOC, CJK_DOC]
