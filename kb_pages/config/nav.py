"""Parse the ``nav`` tree of the site configuration into :class:`NavNode` values.

Every entry is either a bare content path (``javascript/index.md``), a
single-key mapping from a label to a path or URL (``Home: index.md``), or a
single-key mapping from a label to a list of child entries (a section). Errors
name the offending entry using a dotted key such as ``nav[1].PHP[0]``.

Examples
--------
>>> nodes = build_nav([{"Home": "index.md"}, {"PHP": [{"Index": "php/index.md"}]}])
>>> [(node.label, trail) for node, trail in walk_nav(nodes)]
[('Home', ()), ('Index', ('PHP',))]
"""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from kb_pages._constants import MARKDOWN_SUFFIXES
from kb_pages.errors import ConfigError

from .models import NavNode

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def build_nav(raw: object, key: str = "nav") -> tuple[NavNode, ...]:
    """Convert the raw ``nav`` list into an ordered tuple of :class:`NavNode`."""
    if not isinstance(raw, list):
        raise ConfigError(key, "must be a list of navigation entries")
    return tuple(
        _build_nav_entry(entry, f"{key}[{idx}]") for idx, entry in enumerate(raw)
    )


def _build_nav_entry(entry: object, key: str) -> NavNode:
    match entry:
        case str() as target:
            return _build_leaf(None, target, key)
        case dict() if len(entry) == 1:
            ((label, value),) = entry.items()
            if not isinstance(label, str) or not label.strip():
                raise ConfigError(key, "navigation labels must be non-empty strings")
            child_key = f"{key}.{label}"
            match value:
                case str():
                    return _build_leaf(label, value, child_key)
                case list():
                    return NavNode(label=label, children=build_nav(value, child_key))
                case _:
                    msg = "must be a content path, a URL, or a list of entries"
                    raise ConfigError(child_key, msg)
        case dict():
            raise ConfigError(key, "navigation mappings must hold exactly one label")
        case _:
            msg = "must be a content path string or a single-key mapping"
            raise ConfigError(key, msg)


def _build_leaf(label: str | None, target: str, key: str) -> NavNode:
    text = target.strip()
    if not text:
        raise ConfigError(key, "content path must not be empty")
    parsed = urlsplit(text)
    if parsed.scheme or parsed.netloc or text.startswith("/"):
        return NavNode(label=label, url=text)
    return NavNode(label=label, path=posixpath.normpath(text.replace("\\", "/")))


def walk_nav(
    nodes: cabc.Iterable[NavNode], trail: tuple[str, ...] = ()
) -> cabc.Iterator[tuple[NavNode, tuple[str, ...]]]:
    """Yield ``(leaf, ancestor_labels)`` pairs depth-first in declared order."""
    for node in nodes:
        if node.is_section:
            yield from walk_nav(node.children, (*trail, node.label or ""))
        else:
            yield node, trail


def derive_nav(content_root: Path) -> tuple[NavNode, ...]:
    """Build a nav tree from the Markdown files under ``content_root``.

    Used when the configuration omits ``nav``. Directories become sections
    labelled after the directory name; ``index`` pages sort first.
    """
    if not content_root.is_dir():
        return ()
    return _derive_level(content_root, content_root)


def _derive_level(directory: Path, root: Path) -> tuple[NavNode, ...]:
    files: list[NavNode] = []
    sections: list[NavNode] = []
    for entry in sorted(directory.iterdir(), key=_derive_sort_key):
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            children = _derive_level(entry, root)
            if children:
                label = entry.name.replace("-", " ").replace("_", " ").title()
                sections.append(NavNode(label=label, children=children))
        elif entry.suffix in MARKDOWN_SUFFIXES:
            files.append(NavNode(label=None, path=entry.relative_to(root).as_posix()))
    return (*files, *sections)


def _derive_sort_key(entry: Path) -> tuple[int, str]:
    return (0 if entry.stem in ("index", "README") else 1, entry.name.lower())


__all__ = ["build_nav", "derive_nav", "walk_nav"]
