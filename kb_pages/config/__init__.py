"""Load and validate the site configuration for kb-pages builds.

This subpackage parses an MkDocs-style ``mkdocs.yml`` document, validates
site metadata, theme options, Markdown extensions, plugins, and the
navigation tree, and produces immutable dataclasses (:class:`SiteConfig`,
:class:`NavNode`, etc.) that the resolver and renderer consume. The primary
entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from kb_pages.config import load_site_config
>>> site = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
>>> [node.label for node in site.nav]  # doctest: +SKIP
['Home', 'JavaScript', 'React']
"""

from .loader import load_site_config
from .models import (
    ConfigError,
    ExtensionConfig,
    FontConfig,
    NavNode,
    PaletteVariant,
    PluginConfig,
    PythonName,
    SiteConfig,
    ThemeConfig,
)
from .nav import build_nav, derive_nav, walk_nav

__all__ = [
    "ConfigError",
    "ExtensionConfig",
    "FontConfig",
    "NavNode",
    "PaletteVariant",
    "PluginConfig",
    "PythonName",
    "SiteConfig",
    "ThemeConfig",
    "build_nav",
    "derive_nav",
    "load_site_config",
    "walk_nav",
]
