"""Accumulate and serialize the client-side search index.

The index maps every rendered page location to its title and the plain-text
tokens of its body. It defines no ranking: the bundled ``search.js`` only
matches query tokens against these lists.

Example
-------
>>> index = SearchIndex()
>>> index.add("php/", "PHP", "<h1>PHP</h1><p>Dependency injection, IoC.</p>")
>>> index.tokens()["php/"]
['php', 'dependency', 'injection', 'ioc']
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ

from bs4 import BeautifulSoup

from ._constants import SEARCH_INDEX_PATH
from .errors import WriteError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = r"[\s\-]+"
TOKEN_PATTERN = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")


def tokenize(text: str) -> list[str]:
    """Return lower-cased word tokens from ``text``, unique, in first-seen order."""
    seen: dict[str, None] = {}
    for match in TOKEN_PATTERN.finditer(text.lower()):
        seen.setdefault(match.group(0), None)
    return list(seen)


class SearchIndex:
    """Append-only page-location to token mapping built during a build."""

    def __init__(
        self,
        *,
        separator: str = DEFAULT_SEPARATOR,
        lang: cabc.Sequence[str] = ("en",),
    ) -> None:
        self.separator = separator
        self.lang = list(lang)
        self._docs: dict[str, dict[str, typ.Any]] = {}

    def __len__(self) -> int:
        return len(self._docs)

    def add(self, location: str, title: str, html: str) -> None:
        """Index a rendered page, replacing any earlier entry for ``location``."""
        text = BeautifulSoup(html, "html.parser").get_text(" ")
        self._docs[location] = {
            "location": location,
            "title": title,
            "tokens": tokenize(f"{title} {text}"),
        }

    def remove(self, location: str) -> None:
        """Drop the entry for ``location`` if one was indexed."""
        self._docs.pop(location, None)

    def tokens(self) -> dict[str, list[str]]:
        """Return the page-location to token list mapping."""
        return {location: doc["tokens"] for location, doc in self._docs.items()}

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the JSON-serializable index document."""
        return {
            "config": {"lang": self.lang, "separator": self.separator},
            "docs": list(self._docs.values()),
        }

    def write(self, output_dir: Path) -> Path:
        """Serialize the index under ``output_dir`` and return its path."""
        path = output_dir / SEARCH_INDEX_PATH
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(self.to_payload(), ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise WriteError(path, exc) from exc
        logger.debug("Indexed %d page(s) into %s", len(self._docs), path)
        return path


__all__ = ["DEFAULT_SEPARATOR", "SearchIndex", "tokenize"]
