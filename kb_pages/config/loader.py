"""Load the site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from kb_pages._constants import (
    DEFAULT_CONTENT_ROOT,
    DEFAULT_EDIT_URI,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PLUGINS,
    PYTHON_NAME_TAG,
)
from kb_pages.errors import ConfigError

from .helpers import (
    _build_extensions,
    _build_plugins,
    _build_theme_config,
    _optional_str,
    _resolve_dir,
)
from .models import PythonName, SiteConfig
from .nav import build_nav, derive_nav

if typ.TYPE_CHECKING:
    from ruamel.yaml.nodes import Node


class _SiteConstructor(SafeConstructor):
    """Safe constructor that keeps ``!!python/name:`` tags as references."""


def _construct_python_name(
    constructor: SafeConstructor, tag_suffix: str, node: Node
) -> PythonName:
    del constructor, node
    return PythonName(tag_suffix)


_SiteConstructor.add_multi_constructor(PYTHON_NAME_TAG, _construct_python_name)


def _read_document(path: Path) -> dict[str, typ.Any]:
    loader = YAML(typ="safe", pure=True)
    loader.version = (1, 2)
    loader.Constructor = _SiteConstructor
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        where = f" (line {mark.line + 1})" if mark is not None else ""
        msg = f"Cannot parse '{path}'{where}: {exc.problem or exc}"
        raise ConfigError(None, msg) from exc
    except YAMLError as exc:
        raise ConfigError(None, f"Cannot parse '{path}': {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(None, f"Cannot read '{path}': {exc}") from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(None, msg)
    return dict(loaded)


def load_site_config(
    path: Path,
    *,
    output_dir: Path | None = None,
    content_root: Path | None = None,
) -> SiteConfig:
    """Load the YAML configuration describing the site, theme, and nav tree.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration document (``mkdocs.yml`` style).
    output_dir : Path, optional
        Override for the ``output_dir`` (``site_dir``) option.
    content_root : Path, optional
        Override for the ``content_root`` (``docs_dir``) option.

    Returns
    -------
    SiteConfig
        Parsed configuration with directories resolved relative to the
        configuration file.

    Raises
    ------
    ConfigError
        If the file is missing or unparsable, or a key is missing or has the
        wrong shape. The error's ``key`` names the offending entry.

    Examples
    --------
    >>> from pathlib import Path
    >>> from kb_pages.config import load_site_config
    >>> site = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
    >>> site.nav[0].label  # doctest: +SKIP
    'Home'
    """
    if not path.is_file():
        raise ConfigError(None, f"Configuration file '{path}' not found.")
    raw = _read_document(path)
    base_dir = path.resolve().parent

    site_name = raw.get("site_name")
    if not isinstance(site_name, str) or not site_name.strip():
        raise ConfigError("site_name", "is required and must be a string")

    if content_root is not None:
        content_dir = content_root.resolve()
    else:
        value, key = _aliased(raw, "content_root", "docs_dir", DEFAULT_CONTENT_ROOT)
        content_dir = _resolve_dir(base_dir, value, key)
    if output_dir is not None:
        site_dir = output_dir.resolve()
    else:
        value, key = _aliased(raw, "output_dir", "site_dir", DEFAULT_OUTPUT_DIR)
        site_dir = _resolve_dir(base_dir, value, key)

    nav_raw = raw.get("nav")
    nav = build_nav(nav_raw) if nav_raw is not None else derive_nav(content_dir)

    plugins_raw = raw["plugins"] if "plugins" in raw else list(DEFAULT_PLUGINS)

    repo_url = _optional_str(raw.get("repo_url"))
    edit_uri = _optional_str(raw.get("edit_uri"))
    if edit_uri is None and repo_url and "edit_uri" not in raw:
        edit_uri = DEFAULT_EDIT_URI

    use_directory_urls = raw.get("use_directory_urls", True)
    if not isinstance(use_directory_urls, bool):
        raise ConfigError("use_directory_urls", "must be true or false")

    return SiteConfig(
        site_name=site_name.strip(),
        config_path=path.resolve(),
        content_root=content_dir,
        output_dir=site_dir,
        nav=nav,
        site_url=_optional_str(raw.get("site_url")),
        site_author=_optional_str(raw.get("site_author")),
        site_description=_optional_str(raw.get("site_description")),
        theme=_build_theme_config(raw.get("theme")),
        markdown_extensions=_build_extensions(raw.get("markdown_extensions")),
        plugins=_build_plugins(plugins_raw),
        copyright=_optional_str(raw.get("copyright")),
        repo_name=_optional_str(raw.get("repo_name")),
        repo_url=repo_url,
        edit_uri=edit_uri,
        watch=_build_watch(raw.get("watch"), base_dir),
        use_directory_urls=use_directory_urls,
    )


def _aliased(
    raw: dict[str, typ.Any], key: str, alias: str, default: str
) -> tuple[object, str]:
    """Return the value and key name for an option that accepts an alias."""
    if key in raw:
        return raw[key], key
    if alias in raw:
        return raw[alias], alias
    return default, key


def _build_watch(raw: object, base_dir: Path) -> tuple[Path, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError("watch", "must be a list of directories")
    return tuple(
        _resolve_dir(base_dir, entry, f"watch[{idx}]") for idx, entry in enumerate(raw)
    )


__all__ = ["load_site_config"]
