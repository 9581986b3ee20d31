"""Shared fixtures for kb-pages tests.

``write_site`` lays out a throwaway site under ``tmp_path``: an
``mkdocs.yml`` document plus Markdown files below ``docs/``. Tests pass the
YAML text and a mapping of content-relative paths to file contents, and get
back the configuration path ready for :func:`kb_pages.config.load_site_config`.
"""

from __future__ import annotations

import textwrap
import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture
def write_site(tmp_path: Path) -> cabc.Callable[..., Path]:
    """Return a helper that writes a config file and content tree."""

    def _write(config: str, pages: dict[str, str] | None = None) -> Path:
        docs = tmp_path / "docs"
        docs.mkdir(exist_ok=True)
        for rel_path, text in (pages or {}).items():
            target = docs / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        config_path = tmp_path / "mkdocs.yml"
        config_path.write_text(
            textwrap.dedent(config).strip() + "\n", encoding="utf-8"
        )
        return config_path

    return _write
