"""Tests for mapping navigation leaves to content files."""

from __future__ import annotations

import typing as typ

import pytest

from kb_pages.config import build_nav
from kb_pages.errors import MissingContentError
from kb_pages.resolver import resolve_content

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    for rel_path in ("index.md", "php/index.md", "php/di.md", "javascript/index.md"):
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"# {rel_path}\n", encoding="utf-8")
    return root


def test_resolves_depth_first_in_declared_order(content_root: Path) -> None:
    nav = build_nav([{"Home": "index.md"}, {"PHP": [{"Index": "php/index.md"}]}])

    pages = resolve_content(nav, content_root)

    assert [(page.label_path, page.rel_path) for page in pages] == [
        ("Home", "index.md"),
        ("PHP/Index", "php/index.md"),
    ]
    assert pages[1].source_path == (content_root / "php" / "index.md").resolve()
    assert pages[1].trail == ("PHP",)


def test_output_length_matches_page_leaves(content_root: Path) -> None:
    nav = build_nav(
        [
            "index.md",
            {"PHP": ["php/index.md", {"DI": "php/di.md"}]},
            {"PHP manual": "https://www.php.net/manual/"},
            {"JavaScript": [{"Overview": "javascript/index.md"}]},
        ]
    )

    pages = resolve_content(nav, content_root)

    assert [page.rel_path for page in pages] == [
        "index.md",
        "php/index.md",
        "php/di.md",
        "javascript/index.md",
    ]


def test_collects_every_missing_path(content_root: Path) -> None:
    nav = build_nav(
        [
            {"Home": "index.md"},
            {"Gone": "missing.md"},
            {"PHP": [{"Also gone": "php/nowhere.md"}, "php/index.md"]},
            {"Folder": "php"},
            {"Outside": "../secrets.md"},
        ]
    )
    (content_root.parent / "secrets.md").write_text("secret\n", encoding="utf-8")

    with pytest.raises(MissingContentError) as excinfo:
        resolve_content(nav, content_root)

    assert excinfo.value.missing == [
        "missing.md",
        "php/nowhere.md",
        "php",
        "../secrets.md",
    ]
    assert "4 missing content file(s)" in str(excinfo.value)


def test_resolution_is_idempotent(content_root: Path) -> None:
    nav = build_nav([{"Home": "index.md"}, {"PHP": ["php/index.md", "php/di.md"]}])

    assert resolve_content(nav, content_root) == resolve_content(nav, content_root)
