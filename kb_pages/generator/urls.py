"""Map content paths to site URLs and output files.

URLs are site-root relative POSIX strings: ``""`` is the home page, a
trailing slash marks a directory URL (``php/``), anything else is a file
(``javascript/hoisting.html``).

Examples
--------
>>> page_url("javascript/hoisting.md", use_directory_urls=True)
'javascript/hoisting/'
>>> page_url("php/index.md", use_directory_urls=False)
'php/index.html'
>>> relative_url("assets/site.css", "javascript/hoisting/")
'../../assets/site.css'
>>> output_file("php/")
'php/index.html'
"""

from __future__ import annotations

import posixpath

INDEX_STEMS = ("index", "README")


def page_url(rel_path: str, *, use_directory_urls: bool) -> str:
    """Return the site URL for the content file at ``rel_path``."""
    stem_path = posixpath.splitext(rel_path)[0]
    parent, name = posixpath.split(stem_path)
    if not use_directory_urls:
        if name == "README":
            stem_path = posixpath.join(parent, "index")
        return f"{stem_path}.html"
    if name in INDEX_STEMS:
        return f"{parent}/" if parent else ""
    return f"{stem_path}/"


def output_file(url: str) -> str:
    """Return the output file path (relative to the site root) for ``url``."""
    if not url or url.endswith("/"):
        return f"{url}index.html"
    return url


def relative_url(target: str, base: str) -> str:
    """Return ``target`` relative to the page served at ``base``."""
    base_dir = base if not base or base.endswith("/") else posixpath.dirname(base)
    base_dir = base_dir.rstrip("/") or "."
    rel = posixpath.relpath(target.rstrip("/") or ".", base_dir)
    if not target or target.endswith("/"):
        return f"{rel.rstrip('/')}/"
    return rel


__all__ = ["INDEX_STEMS", "output_file", "page_url", "relative_url"]
