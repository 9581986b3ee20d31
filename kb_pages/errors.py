"""Error taxonomy shared by the kb-pages build pipeline.

Fatal errors (:class:`ConfigError`, :class:`MissingContentError`,
:class:`WriteError`) abort a build before or during rendering. A
:class:`RenderError` only fails the page it belongs to; the builder collects
them into the :class:`~kb_pages.generator.models.BuildReport`.

Examples
--------
>>> from pathlib import Path
>>> str(RenderError(Path("docs/index.md"), "bad front-matter", line=3))
'docs/index.md:3: bad front-matter'
>>> MissingContentError(["a.md", "b.md"]).missing
['a.md', 'b.md']
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class KbPagesError(Exception):
    """Base class for every error raised by kb-pages."""


class ConfigError(KbPagesError, ValueError):
    """Raised when the site configuration is malformed or incomplete."""

    def __init__(self, key: str | None, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}" if key else message)


class MissingContentError(KbPagesError):
    """Raised when navigation entries point at files that do not exist."""

    def __init__(self, missing: cabc.Sequence[str]) -> None:
        self.missing = list(missing)
        listing = ", ".join(self.missing)
        super().__init__(
            f"Navigation references {len(self.missing)} missing content "
            f"file(s): {listing}"
        )


class RenderError(KbPagesError):
    """Raised when a single page cannot be parsed, rendered, or templated."""

    def __init__(
        self, source_path: Path, cause: str | BaseException, *, line: int | None = None
    ) -> None:
        self.source_path = source_path
        self.line = line
        self.cause = cause
        location = f"{source_path}:{line}" if line is not None else str(source_path)
        super().__init__(f"{location}: {cause}")


class WriteError(KbPagesError):
    """Raised when the output tree cannot be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot write '{path}': {cause.strerror or cause}")


__all__ = [
    "ConfigError",
    "KbPagesError",
    "MissingContentError",
    "RenderError",
    "WriteError",
]
