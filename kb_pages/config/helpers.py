"""Utility helpers shared by the kb-pages configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from kb_pages.errors import ConfigError

from .models import (
    ExtensionConfig,
    FontConfig,
    PaletteVariant,
    PluginConfig,
    ThemeConfig,
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_mapping(value: object, key: str) -> dict[str, typ.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(key, "must be a mapping")
    return value


def _resolve_dir(base_dir: Path, value: object, key: str) -> Path:
    """Resolve a directory option relative to the configuration file."""
    text = _optional_str(value)
    if text is None:
        raise ConfigError(key, "must be a non-empty path")
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


def _build_named_entries(
    raw: object, key: str
) -> list[tuple[str, dict[str, typ.Any]]]:
    """Normalize a list of bare names or ``{name: options}`` mappings.

    Duplicate names keep the position of their first occurrence; options from
    later occurrences are merged over earlier ones.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(key, "must be a list of names or single-key mappings")
    merged: dict[str, dict[str, typ.Any]] = {}
    for idx, entry in enumerate(raw):
        entry_key = f"{key}[{idx}]"
        match entry:
            case str() as name if name.strip():
                options: dict[str, typ.Any] = {}
            case dict() if len(entry) == 1:
                ((name, payload),) = entry.items()
                if not isinstance(name, str) or not name.strip():
                    raise ConfigError(entry_key, "names must be non-empty strings")
                options = dict(_require_mapping(payload, f"{entry_key}.{name}"))
            case _:
                msg = "must be a bare name or a single-key mapping of options"
                raise ConfigError(entry_key, msg)
        merged.setdefault(name.strip(), {}).update(options)
    return list(merged.items())


def _build_extensions(raw: object) -> tuple[ExtensionConfig, ...]:
    return tuple(
        ExtensionConfig(name=name, options=options)
        for name, options in _build_named_entries(raw, "markdown_extensions")
    )


def _build_plugins(raw: object) -> tuple[PluginConfig, ...]:
    return tuple(
        PluginConfig(name=name, options=options)
        for name, options in _build_named_entries(raw, "plugins")
    )


def _build_palette(raw: object) -> tuple[PaletteVariant, ...]:
    """Build palette variants from a single mapping or a list of mappings."""
    if raw is None:
        return ()
    entries = [raw] if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ConfigError("theme.palette", "must be a mapping or a list of mappings")
    variants: list[PaletteVariant] = []
    for idx, entry in enumerate(entries):
        key = f"theme.palette[{idx}]"
        payload = _require_mapping(entry, key)
        toggle = _require_mapping(payload.get("toggle"), f"{key}.toggle")
        variants.append(
            PaletteVariant(
                media=_optional_str(payload.get("media")),
                scheme=_optional_str(payload.get("scheme")),
                primary=_optional_str(payload.get("primary")),
                accent=_optional_str(payload.get("accent")),
                toggle_icon=_optional_str(toggle.get("icon")),
                toggle_name=_optional_str(toggle.get("name")),
            )
        )
    return tuple(variants)


def _build_font(raw: object) -> FontConfig | None:
    if raw is False:
        return None
    payload = _require_mapping(raw, "theme.font")
    base = FontConfig()
    return FontConfig(
        text=_optional_str(payload.get("text")) or base.text,
        code=_optional_str(payload.get("code")) or base.code,
    )


def _build_theme_config(raw: object) -> ThemeConfig:
    """Build a ThemeConfig instance from a theme name or mapping payload."""
    if isinstance(raw, str):
        return ThemeConfig(name=raw.strip() or ThemeConfig().name)
    payload = _require_mapping(raw, "theme")
    features = payload.get("features") or []
    if not isinstance(features, list):
        raise ConfigError("theme.features", "must be a list of feature flags")
    icons = _require_mapping(payload.get("icon"), "theme.icon")
    admonition = _require_mapping(icons.get("admonition"), "theme.icon.admonition")
    return ThemeConfig(
        name=_optional_str(payload.get("name")) or ThemeConfig().name,
        features=frozenset(str(flag).strip() for flag in features),
        palette=_build_palette(payload.get("palette")),
        font=_build_font(payload.get("font")),
        favicon=_optional_str(payload.get("favicon")),
        logo=_optional_str(payload.get("logo")),
        admonition_icons={
            str(kind): str(icon) for kind, icon in admonition.items() if icon
        },
    )


__all__ = [
    "_build_extensions",
    "_build_named_entries",
    "_build_plugins",
    "_build_theme_config",
    "_optional_str",
    "_require_mapping",
    "_resolve_dir",
]
