"""Build the navigation menu context passed to the page template."""

from __future__ import annotations

import posixpath
import typing as typ

from .urls import INDEX_STEMS, relative_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from kb_pages.config import NavNode

    from .models import ContentPage


class NavMenuBuilder:
    """Render the nav tree as nested menu entries for one current page.

    Parameters
    ----------
    nav : Sequence[NavNode]
        Top-level navigation entries.
    pages : Iterable[ContentPage]
        Pages in nav order; each is matched to the nav leaf it was resolved
        from, so a file listed twice keeps two distinct entries.
    section_indexes : bool, optional
        When ``True`` (``navigation.indexes``), a section whose first child is
        an ``index.md`` page links to that page instead of listing it.
    """

    def __init__(
        self,
        nav: cabc.Sequence[NavNode],
        pages: cabc.Iterable[ContentPage],
        *,
        section_indexes: bool = False,
    ) -> None:
        self.nav = nav
        self.pages = {id(page.resolved.node): page for page in pages}
        self.section_indexes = section_indexes

    def build(self, current: ContentPage) -> list[dict[str, typ.Any]]:
        """Return menu entries with ``current`` marked active."""
        return [self._entry(node, current) for node in self.nav]

    def _entry(self, node: NavNode, current: ContentPage) -> dict[str, typ.Any]:
        if node.is_link:
            return {
                "label": node.label or node.url,
                "href": node.url,
                "external": True,
                "active": False,
                "expanded": False,
                "icon": None,
                "children": [],
            }
        if node.is_section:
            return self._section(node, current)
        page = self.pages.get(id(node))
        label = node.label or (page.title if page else None) or node.path
        return {
            "label": label,
            "href": (
                relative_url(page.url, current.url)
                if page is not None and not page.failed
                else None
            ),
            "external": False,
            "active": page is current,
            "expanded": False,
            "icon": page.icon if page else None,
            "children": [],
        }

    def _section(self, node: NavNode, current: ContentPage) -> dict[str, typ.Any]:
        children = list(node.children)
        index_page = None
        if self.section_indexes and children and self._is_index_leaf(children[0]):
            index_page = self.pages.get(id(children[0]))
            children = children[1:]
        entries = [self._entry(child, current) for child in children]
        active = index_page is not None and index_page is current
        return {
            "label": node.label,
            "href": (
                relative_url(index_page.url, current.url)
                if index_page and not index_page.failed
                else None
            ),
            "external": False,
            "active": active,
            "expanded": active or any(_contains_active(entry) for entry in entries),
            "icon": index_page.icon if index_page else None,
            "children": entries,
        }

    @staticmethod
    def _is_index_leaf(node: NavNode) -> bool:
        if node.path is None:
            return False
        stem = posixpath.splitext(posixpath.basename(node.path))[0]
        return stem in INDEX_STEMS


def _contains_active(entry: dict[str, typ.Any]) -> bool:
    return bool(entry["active"] or entry["expanded"])


def neighbours(
    pages: cabc.Sequence[ContentPage], index: int
) -> tuple[ContentPage | None, ContentPage | None]:
    """Return the previous and next pages around ``pages[index]``."""
    previous_page = pages[index - 1] if index > 0 else None
    next_page = pages[index + 1] if index + 1 < len(pages) else None
    return previous_page, next_page


__all__ = ["NavMenuBuilder", "neighbours"]
