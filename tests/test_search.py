"""Tests for the client-side search index."""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json
import pytest

from kb_pages.errors import WriteError
from kb_pages.search import SearchIndex, tokenize

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_tokenize_lowercases_and_deduplicates() -> None:
    assert tokenize("Hoisting hoists; HOISTING it's fine") == [
        "hoisting",
        "hoists",
        "it's",
        "fine",
    ]


def test_add_indexes_title_and_visible_text() -> None:
    index = SearchIndex()
    index.add(
        "javascript/hoisting/",
        "Hoisting",
        "<h1>Hoisting</h1><p>Declarations move <code>var</code> up.</p>",
    )

    assert index.tokens() == {
        "javascript/hoisting/": ["hoisting", "declarations", "move", "var", "up"]
    }


def test_re_adding_a_location_replaces_it() -> None:
    index = SearchIndex()
    index.add("php/", "PHP", "<p>old words</p>")
    index.add("php/", "PHP", "<p>new words</p>")

    assert len(index) == 1
    assert index.tokens()["php/"] == ["php", "new", "words"]


def test_written_index_decodes(tmp_path: Path) -> None:
    index = SearchIndex(separator=r"[\s]+", lang=["en", "de"])
    index.add("", "Home", "<p>Welcome</p>")
    index.add("php/", "PHP", "<p>Dependency injection</p>")

    path = index.write(tmp_path)

    assert path == tmp_path / "search" / "search_index.json"
    payload = msgspec_json.decode(path.read_bytes())
    assert payload["config"] == {"lang": ["en", "de"], "separator": r"[\s]+"}
    assert [doc["location"] for doc in payload["docs"]] == ["", "php/"]
    assert payload["docs"][1] == {
        "location": "php/",
        "title": "PHP",
        "tokens": ["php", "dependency", "injection"],
    }


def test_unwritable_index_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "search"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteError):
        SearchIndex().write(tmp_path)
