"""Utilities for rendering, templating, and writing kb-pages sites."""

from .link_rewriter import RelativeLinkExtension
from .menu import NavMenuBuilder
from .models import BuildReport, ContentPage, PageState
from .page_generator import PageRenderer
from .renderer import HtmlContentRenderer
from .site_builder import SiteBuilder

__all__ = [
    "BuildReport",
    "ContentPage",
    "HtmlContentRenderer",
    "NavMenuBuilder",
    "PageRenderer",
    "PageState",
    "RelativeLinkExtension",
    "SiteBuilder",
]
