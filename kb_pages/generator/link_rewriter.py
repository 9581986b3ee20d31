"""Helpers for rewriting relative Markdown links to rendered site URLs."""

from __future__ import annotations

import logging
import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from kb_pages._constants import MARKDOWN_SUFFIXES

from .urls import relative_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

logger = logging.getLogger(__name__)

_LINK_ATTRIBUTES = {"a": "href", "img": "src"}


class RelativeLinkExtension(Extension):
    """Rewrite relative links so they keep working in the rendered site.

    Links to other content pages (``../php/index.md#di``) are replaced with the
    URL the target page is rendered at; links to static files are re-based
    against the current page URL, which may sit deeper than its source file
    when directory URLs are used.
    """

    def __init__(
        self, source_path: str, page_url: str, url_map: cabc.Mapping[str, str]
    ) -> None:
        super().__init__()
        self.source_path = source_path
        self.page_url = page_url
        self.url_map = url_map

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the relative-link treeprocessor on the Markdown instance."""
        processor = RelativeLinkTreeprocessor(
            md, self.source_path, self.page_url, self.url_map
        )
        md.treeprocessors.register(processor, "kb_relative_links", 5)


class RelativeLinkTreeprocessor(Treeprocessor):
    """Rewrite relative anchors and images in the parsed Markdown tree."""

    def __init__(
        self,
        md: Markdown,
        source_path: str,
        page_url: str,
        url_map: cabc.Mapping[str, str],
    ) -> None:
        super().__init__(md)
        self.base_dir = posixpath.dirname(source_path)
        self.source_path = source_path
        self.page_url = page_url
        self.url_map = url_map

    def run(self, root: Element) -> Element:
        """Rewrite relative link targets in place."""
        for element in root.iter():
            attribute = _LINK_ATTRIBUTES.get(element.tag)
            if attribute is None:
                continue
            rewritten = self._rewrite(element.get(attribute))
            if rewritten is not None:
                element.set(attribute, rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the rewritten target, or ``None`` to leave it untouched."""
        if not target or target.startswith(("#", "//")):
            return None
        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc or not parsed.path:
            return None
        if parsed.path.startswith("/"):
            return None

        joined = posixpath.normpath(posixpath.join(self.base_dir, parsed.path))
        if joined.startswith("../"):
            return None
        if joined.endswith(MARKDOWN_SUFFIXES):
            destination = self.url_map.get(joined)
            if destination is None:
                logger.warning(
                    "%s links to '%s', which is not part of the navigation",
                    self.source_path,
                    parsed.path,
                )
                return None
        else:
            destination = joined

        url = relative_url(destination, self.page_url)
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = ["RelativeLinkExtension", "RelativeLinkTreeprocessor"]
