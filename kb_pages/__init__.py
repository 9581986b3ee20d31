"""Render a Markdown knowledge base into a static documentation site.

This package exposes the CLI entry points used by ``kb-pages build`` and
``kb-pages serve`` to turn an ``mkdocs.yml``-style configuration and its
Markdown content into themed HTML pages plus a search index.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from kb_pages import main
>>> main()  # doctest: +SKIP
>>> from kb_pages import app
>>> app.name[0]
'kb-pages'
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
