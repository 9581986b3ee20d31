r"""Split content files into front-matter metadata and a Markdown body.

Content pages may open with a YAML block fenced by ``---`` lines carrying
``title``, ``icon``, and any other page metadata. This module separates that
block from the body, reports YAML problems with the source line they occur
on, and extracts the first level-one heading for pages without a title.

Example
-------
>>> from kb_pages.markdown_parser import parse_front_matter
>>> doc = parse_front_matter("---\ntitle: Hoisting\n---\n# Hoisting\nBody")
>>> doc.title, doc.body_line
('Hoisting', 4)
>>> first_heading(doc.body)
'Hoisting'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
HEADING_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$")
FENCE_PATTERN = re.compile(r"^[ \t]*(`{3,}|~{3,})")


class FrontMatterError(ValueError):
    """Raised when the front-matter block is not a valid YAML mapping."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)


@dc.dataclass(slots=True)
class ParsedDocument:
    """Front-matter metadata and the Markdown body that follows it.

    Attributes
    ----------
    meta : dict[str, Any]
        Parsed front-matter mapping; empty when the file has none.
    body : str
        Markdown after the front-matter block.
    body_line : int
        1-based line number in the source file where ``body`` starts.
    """

    meta: dict[str, typ.Any]
    body: str
    body_line: int = 1

    @property
    def title(self) -> str | None:
        return self._text("title")

    @property
    def icon(self) -> str | None:
        return self._text("icon")

    def _text(self, key: str) -> str | None:
        value = self.meta.get(key)
        if value is None:
            return None
        return str(value).strip() or None


def parse_front_matter(text: str) -> ParsedDocument:
    """Separate a leading YAML front-matter block from the Markdown body.

    Parameters
    ----------
    text : str
        Full content of a source file.

    Returns
    -------
    ParsedDocument
        Metadata, body, and the line the body starts on.

    Raises
    ------
    FrontMatterError
        If the block is not valid YAML or does not hold a mapping. ``line``
        refers to the source file, not the block.
    """
    text = text.removeprefix("\ufeff")
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return ParsedDocument(meta={}, body=text)

    block = match.group(1)
    loader = YAML(typ="safe", pure=True)
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line = mark.line + 2 if mark is not None else 1
        msg = f"Invalid front-matter: {exc.problem or exc}"
        raise FrontMatterError(msg, line) from exc
    except YAMLError as exc:
        raise FrontMatterError(f"Invalid front-matter: {exc}", 1) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Front-matter must be a mapping of keys to values."
        raise FrontMatterError(msg, 2)

    consumed = match.group(0)
    return ParsedDocument(
        meta=dict(loaded),
        body=text[match.end() :],
        body_line=consumed.count("\n") + 1,
    )


def first_heading(markdown_text: str) -> str | None:
    """Return the text of the first level-one ATX heading outside code fences."""
    fence: str | None = None
    for line in markdown_text.splitlines():
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue
        heading = HEADING_PATTERN.match(line)
        if heading:
            return heading.group(1).strip()
    return None


def slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


__all__ = [
    "FrontMatterError",
    "ParsedDocument",
    "first_heading",
    "parse_front_matter",
    "slugify",
]
