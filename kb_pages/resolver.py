"""Resolve navigation leaves to Markdown source files on disk.

:func:`resolve_content` walks the nav tree depth-first, children in declared
order, and pairs every page leaf with its absolute source path. Missing paths
are collected rather than failing on the first one, so a single run surfaces
every broken nav entry at once.

Example
-------
>>> from pathlib import Path
>>> from kb_pages.config import build_nav
>>> nav = build_nav([{"Home": "index.md"}, {"PHP": [{"Index": "php/index.md"}]}])
>>> pages = resolve_content(nav, Path("docs"))  # doctest: +SKIP
>>> [(page.label_path, page.rel_path) for page in pages]  # doctest: +SKIP
[('Home', 'index.md'), ('PHP/Index', 'php/index.md')]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from kb_pages.config.nav import walk_nav
from kb_pages.errors import MissingContentError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from kb_pages.config import NavNode

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ResolvedPage:
    """A nav leaf paired with the content file it points at.

    Attributes
    ----------
    node : NavNode
        The navigation leaf.
    source_path : Path
        Absolute path of the Markdown source.
    rel_path : str
        POSIX path relative to the content root, as written in the nav.
    trail : tuple[str, ...]
        Labels of the enclosing sections, outermost first.
    """

    node: NavNode
    source_path: Path
    rel_path: str
    trail: tuple[str, ...] = ()

    @property
    def label_path(self) -> str:
        """Return the slash-joined section trail and leaf label."""
        return "/".join((*self.trail, self.node.label or self.rel_path))


def resolve_content(
    nav: cabc.Iterable[NavNode], content_root: Path
) -> list[ResolvedPage]:
    """Map every page leaf of ``nav`` to an existing file under ``content_root``.

    Parameters
    ----------
    nav : Iterable[NavNode]
        Top-level navigation entries.
    content_root : Path
        Directory that nav paths are relative to.

    Returns
    -------
    list[ResolvedPage]
        One entry per page leaf in depth-first, declared order. External link
        leaves are skipped.

    Raises
    ------
    MissingContentError
        Listing every leaf path that does not exist, is not a file, or points
        outside ``content_root``.
    """
    root = content_root.resolve()
    resolved: list[ResolvedPage] = []
    missing: list[str] = []
    for node, trail in walk_nav(nav):
        if node.path is None:
            continue
        candidate = (root / node.path).resolve()
        if not candidate.is_relative_to(root) or not candidate.is_file():
            missing.append(node.path)
            continue
        resolved.append(
            ResolvedPage(
                node=node, source_path=candidate, rel_path=node.path, trail=trail
            )
        )
    if missing:
        raise MissingContentError(missing)
    logger.debug("Resolved %d page(s) under %s", len(resolved), root)
    return resolved


__all__ = ["ResolvedPage", "resolve_content"]
