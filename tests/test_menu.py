"""Tests for the navigation menu context handed to the page template."""

from __future__ import annotations

import typing as typ

from kb_pages.config import load_site_config
from kb_pages.generator import NavMenuBuilder, PageRenderer
from kb_pages.resolver import resolve_content

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from kb_pages.config import SiteConfig
    from kb_pages.generator import ContentPage


def _pages(config_path: Path) -> tuple[SiteConfig, list[ContentPage]]:
    site = load_site_config(config_path)
    renderer = PageRenderer(site)
    pages = [
        renderer.new_page(entry)
        for entry in resolve_content(site.nav, site.content_root)
    ]
    return site, pages


def test_file_listed_twice_marks_only_the_current_entry(
    write_site: cabc.Callable[..., Path],
) -> None:
    site, pages = _pages(
        write_site(
            """
            site_name: KB
            nav:
              - Start: index.md
              - Guide: guide.md
              - Home again: index.md
            """,
            {"index.md": "# Home\n", "guide.md": "# Guide\n"},
        )
    )
    menu = NavMenuBuilder(site.nav, pages)

    first = menu.build(pages[0])
    last = menu.build(pages[2])

    assert [entry["active"] for entry in first] == [True, False, False]
    assert [entry["active"] for entry in last] == [False, False, True]


def test_labelled_index_page_becomes_the_section_link(
    write_site: cabc.Callable[..., Path],
) -> None:
    site, pages = _pages(
        write_site(
            """
            site_name: KB
            nav:
              - PHP:
                  - Overview: php/index.md
                  - Arrays: php/arrays.md
            """,
            {"php/index.md": "# PHP\n", "php/arrays.md": "# Arrays\n"},
        )
    )
    menu = NavMenuBuilder(site.nav, pages, section_indexes=True)

    (section,) = menu.build(pages[1])

    assert section["label"] == "PHP"
    assert section["href"] == "../"
    assert section["expanded"]
    assert [child["label"] for child in section["children"]] == ["Arrays"]


def test_index_page_stays_listed_without_section_indexes(
    write_site: cabc.Callable[..., Path],
) -> None:
    site, pages = _pages(
        write_site(
            "site_name: KB\nnav:\n  - PHP:\n      - Overview: php/index.md\n",
            {"php/index.md": "# PHP\n"},
        )
    )

    (section,) = NavMenuBuilder(site.nav, pages).build(pages[0])

    assert section["href"] is None
    assert section["active"] is False
    assert [child["label"] for child in section["children"]] == ["Overview"]
    assert section["children"][0]["active"]
