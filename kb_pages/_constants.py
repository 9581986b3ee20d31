"""Common literal values used across kb_pages.

These constants keep filenames and default keys centralized so the loader,
builders, templates, and tests can import the same values without drifting.
Intended for internal use within the kb_pages package.

Examples
--------
>>> from kb_pages import _constants
>>> _constants.SEARCH_INDEX_PATH
'search/search_index.json'
"""

DEFAULT_CONTENT_ROOT = "docs"
DEFAULT_OUTPUT_DIR = "site"
DEFAULT_PLUGINS = ("search",)
DEFAULT_EDIT_URI = "edit/master/docs/"
MARKDOWN_SUFFIXES = (".md", ".markdown")
SEARCH_INDEX_PATH = "search/search_index.json"
THEME_ASSETS_DIR = "assets"
PYTHON_NAME_TAG = "tag:yaml.org,2002:python/name:"

# Theme-provided helpers that pymdown-extensions ships under its own namespace.
PYTHON_NAME_ALIASES = {
    "material.extensions.emoji.twemoji": "pymdownx.emoji.twemoji",
    "material.extensions.emoji.to_svg": "pymdownx.emoji.to_svg",
    "material.extensions.emoji.to_png": "pymdownx.emoji.to_png",
}
