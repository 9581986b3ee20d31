"""Render Markdown with the site's configured extensions."""

from __future__ import annotations

import copy
import importlib
import logging
import typing as typ

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter
from pygments.util import ClassNotFound

from kb_pages._constants import PYTHON_NAME_ALIASES
from kb_pages.config import ExtensionConfig, PythonName
from kb_pages.errors import ConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

logger = logging.getLogger(__name__)

SNIPPETS_EXTENSION = "pymdownx.snippets"
HIGHLIGHT_EXTENSIONS = {"pymdownx.highlight": "highlight", "codehilite": "codehilite"}
_EXTENSION_LOAD_ERRORS = (ImportError, AttributeError, KeyError, TypeError, ValueError)


def resolve_python_name(name: PythonName, key: str) -> object:
    """Import the object referenced by a ``!!python/name:`` tag."""
    dotted = PYTHON_NAME_ALIASES.get(name.dotted, name.dotted)
    module_name, _, attribute = dotted.rpartition(".")
    if not module_name:
        raise ConfigError(key, f"'{name.dotted}' is not a dotted module path")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attribute)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(key, f"cannot import '{name.dotted}': {exc}") from exc


def _resolve_options(value: object, key: str) -> object:
    match value:
        case PythonName():
            return resolve_python_name(value, key)
        case dict():
            return {
                name: _resolve_options(item, f"{key}.{name}")
                for name, item in value.items()
            }
        case list():
            return [
                _resolve_options(item, f"{key}[{idx}]")
                for idx, item in enumerate(value)
            ]
        case _:
            return value


class HtmlContentRenderer:
    """Render Markdown with the extensions declared in the site configuration.

    Extensions are registered in their declared order; Python-Markdown then
    runs each extension's processors by priority, so the declared list is the
    single source of ordering for extensions that share a priority.
    """

    def __init__(
        self,
        extensions: cabc.Sequence[ExtensionConfig],
        *,
        base_paths: cabc.Sequence[Path] = (),
        pygments_style: str = "default",
    ) -> None:
        """Prepare and validate the extension set.

        Parameters
        ----------
        extensions : Sequence[ExtensionConfig]
            Extensions in declared order, duplicates already merged.
        base_paths : Sequence[Path], optional
            Default search paths for ``pymdownx.snippets`` when its
            ``base_path`` option is not configured.
        pygments_style : str, optional
            Pygments style used for the highlight stylesheet.

        Raises
        ------
        ConfigError
            If an extension cannot be imported or rejects its options; the
            key names the offending ``markdown_extensions`` entry.
        """
        self.extension_names: list[str] = []
        self.extension_configs: dict[str, dict[str, typ.Any]] = {}
        for idx, extension in enumerate(extensions):
            key = f"markdown_extensions[{idx}]"
            options = typ.cast(
                "dict[str, typ.Any]",
                _resolve_options(extension.options, f"{key}.{extension.name}"),
            )
            if extension.name == SNIPPETS_EXTENSION and "base_path" not in options:
                options["base_path"] = [str(path) for path in base_paths]
            self._validate(extension.name, options, key)
            self.extension_names.append(extension.name)
            self.extension_configs[extension.name] = options
        self.pygments_style = pygments_style
        self._css_class = self._highlight_css_class()

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        try:
            formatter = HtmlFormatter(style=self.pygments_style)
        except ClassNotFound:
            formatter = HtmlFormatter()
        return formatter.get_style_defs(f".{self._css_class}")

    def markdown(self, text: str, *, link_extension: Extension | None = None) -> str:
        """Render ``text`` into HTML using the configured extensions."""
        if not text.strip():
            return ""
        extensions: list[Extension | str] = list(self.extension_names)
        if link_extension is not None:
            extensions.append(link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs=copy.deepcopy(self.extension_configs),
            output_format="html",
        )
        return md.convert(text)

    @staticmethod
    def _validate(name: str, options: dict[str, typ.Any], key: str) -> None:
        try:
            Markdown(
                extensions=[name], extension_configs={name: copy.deepcopy(options)}
            )
        except _EXTENSION_LOAD_ERRORS as exc:
            msg = f"cannot load Markdown extension '{name}': {exc}"
            raise ConfigError(key, msg) from exc
        logger.debug("Loaded Markdown extension %s", name)

    def _highlight_css_class(self) -> str:
        for name, default_class in HIGHLIGHT_EXTENSIONS.items():
            options = self.extension_configs.get(name)
            if options is not None:
                return str(options.get("css_class", default_class))
        return "highlight"


__all__ = ["HtmlContentRenderer", "resolve_python_name"]
