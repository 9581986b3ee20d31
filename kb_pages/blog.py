"""Blog support: dated posts, post URLs, and the blog index listing.

Pages under ``<blog_dir>/posts/`` are treated as posts. Each post needs a
``date`` in its front-matter and may list ``categories`` and a ``slug``. Posts
are published at ``post_url_format`` below ``blog_dir`` and the blog index page
(``<blog_dir>/index.md``) lists them newest first.

Example
-------
>>> plugin = BlogPlugin({"post_url_format": "{categories}/{slug}"})
>>> import datetime as dt
>>> plugin.format_date(dt.date(2025, 1, 31))
'January 31, 2025'
"""

from __future__ import annotations

import datetime as dt
import string
import typing as typ

from .errors import ConfigError, RenderError
from .markdown_parser import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .generator.models import ContentPage

DATE_FORMATS = ("full", "long", "medium", "short")
URL_PLACEHOLDERS = frozenset({"date", "categories", "slug", "file"})
_SCALARS = (str, int, float, dt.date)


def _check_url_format(value: str) -> str:
    """Return ``value`` if it only uses the known post URL placeholders."""
    key = "plugins.blog.post_url_format"
    try:
        fields = [field for _, field, _, _ in string.Formatter().parse(value)]
    except ValueError as exc:
        raise ConfigError(key, f"invalid format {value!r}: {exc}") from exc
    unknown = sorted(
        {field or "{}" for field in fields if field is not None} - URL_PLACEHOLDERS
    )
    if unknown:
        allowed = ", ".join(sorted(URL_PLACEHOLDERS))
        msg = f"unknown placeholder(s) {', '.join(unknown)}; use one of {allowed}"
        raise ConfigError(key, msg)
    return value


def _post_categories(page: ContentPage) -> list[str]:
    categories = page.meta.get("categories") or []
    if isinstance(categories, str):
        categories = [categories]
    if not isinstance(categories, list) or not all(
        isinstance(category, _SCALARS) and not isinstance(category, bool)
        for category in categories
    ):
        raise RenderError(
            page.source_path,
            "'categories' must be a name or a list of names",
            line=1,
        )
    return [str(category) for category in categories]


def _parse_post_date(value: object) -> dt.date | None:
    """Return the post date from a date, datetime, ISO string, or ``created`` map."""
    match value:
        case dt.datetime():
            return value.date()
        case dt.date():
            return value
        case str() as text:
            try:
                return dt.datetime.fromisoformat(text.strip()).date()
            except ValueError:
                return None
        case {"created": created}:
            return _parse_post_date(created)
        case _:
            return None


class BlogPlugin:
    """Assign post URLs and build the listing rendered on the blog index."""

    def __init__(self, options: cabc.Mapping[str, typ.Any]) -> None:
        self.blog_dir = str(options.get("blog_dir", "blog")).strip("/")
        self.post_url_format = _check_url_format(
            str(options.get("post_url_format", "{date}/{slug}"))
        )
        self.post_url_date_format = str(options.get("post_url_date_format", "%Y/%m/%d"))
        self.post_date_format = str(options.get("post_date_format", "long"))
        if self.post_date_format not in DATE_FORMATS:
            self.post_date_format = "long"

    def is_post(self, rel_path: str) -> bool:
        return rel_path.startswith(f"{self.blog_dir}/posts/")

    def is_index(self, rel_path: str) -> bool:
        return rel_path == f"{self.blog_dir}/index.md"

    def assign_url(self, page: ContentPage, *, use_directory_urls: bool) -> None:
        """Validate the post metadata of ``page`` and set its published URL.

        Raises
        ------
        RenderError
            If the post has no usable ``date`` in its front-matter, or its
            ``categories`` or ``slug`` have the wrong shape.
        """
        post_date = _parse_post_date(page.meta.get("date"))
        if post_date is None:
            raise RenderError(
                page.source_path,
                "blog posts need a 'date' (YYYY-MM-DD) in their front-matter",
                line=1,
            )
        page.meta["date"] = post_date
        page.meta["categories"] = _post_categories(page)

        stem = page.rel_path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
        slug = page.meta.get("slug")
        if slug is not None and not isinstance(slug, str | int):
            raise RenderError(page.source_path, "'slug' must be a string", line=1)
        slug = str(slug or slugify(page.title) or stem)
        path = self.post_url_format.format(
            date=post_date.strftime(self.post_url_date_format),
            categories="/".join(slugify(name) for name in page.meta["categories"]),
            slug=slug,
            file=stem,
        )
        segments = [segment for segment in path.split("/") if segment]
        base = "/".join([self.blog_dir, *segments])
        page.url = f"{base}/" if use_directory_urls else f"{base}.html"

    def listing(self, pages: cabc.Iterable[ContentPage]) -> list[dict[str, typ.Any]]:
        """Return template entries for the published posts, newest first."""
        posts = [
            page for page in pages if self.is_post(page.rel_path) and not page.failed
        ]
        posts.sort(key=lambda page: page.meta["date"], reverse=True)
        return [
            {
                "title": page.title,
                "url": page.url,
                "date": page.meta["date"],
                "date_label": self.format_date(page.meta["date"]),
                "categories": page.meta["categories"],
            }
            for page in posts
        ]

    def format_date(self, value: dt.date) -> str:
        """Format ``value`` using the configured ``post_date_format``."""
        match self.post_date_format:
            case "full":
                return f"{value:%A}, {value:%B} {value.day}, {value.year}"
            case "medium":
                return f"{value:%b} {value.day}, {value.year}"
            case "short":
                return f"{value.month}/{value.day}/{value:%y}"
            case _:
                return f"{value:%B} {value.day}, {value.year}"


__all__ = ["BlogPlugin"]
