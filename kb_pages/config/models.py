"""Typed dataclasses describing kb-pages site configuration structures."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from kb_pages.errors import ConfigError


@dc.dataclass(frozen=True, slots=True)
class PythonName:
    """Dotted reference loaded from a ``!!python/name:`` YAML tag."""

    dotted: str


@dc.dataclass(frozen=True, slots=True)
class ExtensionConfig:
    """A Markdown extension and the options it is configured with."""

    name: str
    options: dict[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class PluginConfig:
    """A site plugin (``search``, ``blog``) and its options."""

    name: str
    options: dict[str, typ.Any] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class PaletteVariant:
    """One colour-scheme variant offered by the theme toggle."""

    media: str | None = None
    scheme: str | None = None
    primary: str | None = None
    accent: str | None = None
    toggle_icon: str | None = None
    toggle_name: str | None = None


@dc.dataclass(frozen=True, slots=True)
class FontConfig:
    """Text and code font families requested by the theme."""

    text: str = "Roboto"
    code: str = "Roboto Mono"


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Visual theming applied to every rendered page."""

    name: str = "material"
    features: frozenset[str] = frozenset()
    palette: tuple[PaletteVariant, ...] = ()
    font: FontConfig | None = FontConfig()
    favicon: str | None = None
    logo: str | None = None
    admonition_icons: dict[str, str] = dc.field(default_factory=dict)

    def has_feature(self, feature: str) -> bool:
        """Return ``True`` when ``feature`` is listed under ``theme.features``."""
        return feature in self.features


@dc.dataclass(frozen=True, slots=True)
class NavNode:
    """A labelled navigation entry: a page leaf, an external link, or a section.

    Attributes
    ----------
    label : str or None
        Display string; ``None`` for bare path entries, which take the page
        title instead.
    path : str or None
        Content-root relative POSIX path of a page leaf.
    url : str or None
        Target of an external link leaf.
    children : tuple[NavNode, ...]
        Ordered child entries of a section.
    """

    label: str | None
    path: str | None = None
    url: str | None = None
    children: tuple[NavNode, ...] = ()

    @property
    def is_section(self) -> bool:
        return self.path is None and self.url is None

    @property
    def is_link(self) -> bool:
        return self.url is not None


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Validated site configuration, read-only for the whole run."""

    site_name: str
    config_path: Path
    content_root: Path
    output_dir: Path
    nav: tuple[NavNode, ...]
    site_url: str | None = None
    site_author: str | None = None
    site_description: str | None = None
    theme: ThemeConfig = ThemeConfig()
    markdown_extensions: tuple[ExtensionConfig, ...] = ()
    plugins: tuple[PluginConfig, ...] = ()
    copyright: str | None = None
    repo_name: str | None = None
    repo_url: str | None = None
    edit_uri: str | None = None
    watch: tuple[Path, ...] = ()
    use_directory_urls: bool = True

    def get_plugin(self, name: str) -> PluginConfig | None:
        """Return the configured plugin called ``name`` or ``None``."""
        return next((plugin for plugin in self.plugins if plugin.name == name), None)


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
]
