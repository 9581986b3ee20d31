"""Tests for blog post URLs, metadata, and the index listing."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from kb_pages.blog import BlogPlugin
from kb_pages.config import NavNode
from kb_pages.errors import ConfigError, RenderError
from kb_pages.generator import ContentPage
from kb_pages.resolver import ResolvedPage


def _post(rel_path: str, title: str, **meta: object) -> ContentPage:
    resolved = ResolvedPage(
        node=NavNode(label=None, path=rel_path),
        source_path=Path("/kb/docs") / rel_path,
        rel_path=rel_path,
    )
    return ContentPage(
        resolved=resolved,
        url="",
        output_path=Path("/kb/site/index.html"),
        meta=dict(meta),
        title=title,
    )


def test_posts_and_index_are_recognised() -> None:
    plugin = BlogPlugin({})

    assert plugin.is_post("blog/posts/hello.md")
    assert not plugin.is_post("blog/index.md")
    assert plugin.is_index("blog/index.md")


def test_post_url_uses_date_and_title_slug() -> None:
    page = _post("blog/posts/hello.md", "Hello World", date="2024-01-15")

    BlogPlugin({}).assign_url(page, use_directory_urls=True)

    assert page.url == "blog/2024/01/15/hello-world/"
    assert page.meta["date"] == dt.date(2024, 1, 15)
    assert page.meta["categories"] == []


def test_post_url_format_and_explicit_slug() -> None:
    plugin = BlogPlugin(
        {"blog_dir": "news", "post_url_format": "{categories}/{slug}"}
    )
    page = _post(
        "news/posts/release.md",
        "Release notes",
        date=dt.date(2024, 3, 1),
        categories=["Product News"],
        slug="v1",
    )

    plugin.assign_url(page, use_directory_urls=False)

    assert page.url == "news/product-news/v1.html"


def test_created_mapping_is_accepted_as_date() -> None:
    page = _post(
        "blog/posts/a.md",
        "A",
        date={"created": dt.datetime(2023, 5, 6, 12, 0)},
        categories="Tips",
    )

    BlogPlugin({}).assign_url(page, use_directory_urls=True)

    assert page.meta["date"] == dt.date(2023, 5, 6)
    assert page.meta["categories"] == ["Tips"]


def test_post_without_date_fails() -> None:
    page = _post("blog/posts/undated.md", "Undated")

    with pytest.raises(RenderError, match="date") as excinfo:
        BlogPlugin({}).assign_url(page, use_directory_urls=True)

    assert excinfo.value.line == 1


def test_listing_is_newest_first_and_skips_failures() -> None:
    plugin = BlogPlugin({})
    old = _post("blog/posts/old.md", "Old", date="2023-01-01")
    new = _post("blog/posts/new.md", "New", date="2024-06-30")
    broken = _post("blog/posts/broken.md", "Broken", date="2024-12-31")
    for page in (old, new, broken):
        plugin.assign_url(page, use_directory_urls=True)
    broken.fail(RenderError(broken.source_path, "boom"))

    listing = plugin.listing([old, new, broken])

    assert [entry["title"] for entry in listing] == ["New", "Old"]
    assert listing[0]["date"] == dt.date(2024, 6, 30)
    assert listing[0]["date_label"] == "June 30, 2024"


@pytest.mark.parametrize(
    ("date_format", "expected"),
    [
        ("full", "Friday, March 1, 2024"),
        ("long", "March 1, 2024"),
        ("medium", "Mar 1, 2024"),
        ("short", "3/1/24"),
        ("unknown", "March 1, 2024"),
    ],
)
def test_format_date(date_format: str, expected: str) -> None:
    plugin = BlogPlugin({"post_date_format": date_format})

    assert plugin.format_date(dt.date(2024, 3, 1)) == expected


@pytest.mark.parametrize(
    "categories",
    [2024, {"name": "News"}, ["News", ["Nested"]], True],
)
def test_malformed_categories_fail_the_post(categories: object) -> None:
    page = _post(
        "blog/posts/odd.md", "Odd", date="2024-01-15", categories=categories
    )

    with pytest.raises(RenderError, match="categories") as excinfo:
        BlogPlugin({}).assign_url(page, use_directory_urls=True)

    assert excinfo.value.line == 1


def test_non_string_slug_fails_the_post() -> None:
    page = _post("blog/posts/odd.md", "Odd", date="2024-01-15", slug=["a", "b"])

    with pytest.raises(RenderError, match="slug"):
        BlogPlugin({}).assign_url(page, use_directory_urls=True)


@pytest.mark.parametrize(
    ("post_url_format", "message"),
    [
        ("{year}/{slug}", "unknown placeholder"),
        ("{}/{slug}", "unknown placeholder"),
        ("{date}/{slug", "invalid format"),
        ("{date}}/{slug}", "invalid format"),
    ],
)
def test_bad_post_url_format_is_a_config_error(
    post_url_format: str, message: str
) -> None:
    with pytest.raises(ConfigError, match=message) as excinfo:
        BlogPlugin({"post_url_format": post_url_format})

    assert excinfo.value.key == "plugins.blog.post_url_format"
