"""Per-page rendering: front-matter, Markdown body, theme template, and write.

This module exposes :class:`PageRenderer`, which moves a
:class:`~kb_pages.generator.models.ContentPage` through its lifecycle::

    Loaded -> FrontMatterParsed -> BodyRendered -> TemplateApplied -> Written

Parsing and rendering failures surface as
:class:`~kb_pages.errors.RenderError` carrying the source path and, when
known, the line; the caller decides whether to continue the batch. Write
failures surface as :class:`~kb_pages.errors.WriteError`.

Example
-------
>>> from pathlib import Path
>>> from kb_pages.config import load_site_config
>>> site = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
>>> renderer = PageRenderer(site)  # doctest: +SKIP
>>> renderer.template.name  # doctest: +SKIP
'page.jinja'
"""

from __future__ import annotations

import datetime as dt
import logging
import posixpath
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from kb_pages.errors import RenderError, WriteError
from kb_pages.markdown_parser import FrontMatterError, first_heading, parse_front_matter

from .link_rewriter import RelativeLinkExtension
from .models import ContentPage, PageState
from .renderer import HtmlContentRenderer
from .urls import INDEX_STEMS, output_file, page_url, relative_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from kb_pages.config import SiteConfig
    from kb_pages.resolver import ResolvedPage

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


class PageRenderer:
    """Render resolved content files into themed HTML documents."""

    def __init__(
        self,
        site: SiteConfig,
        *,
        templates_dir: Path | None = None,
        renderer: HtmlContentRenderer | None = None,
    ) -> None:
        """Initialize the renderer with site configuration and template context.

        Parameters
        ----------
        site : SiteConfig
            Site configuration providing extensions, theme, and output layout.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        renderer : HtmlContentRenderer, optional
            Markdown renderer; built from ``site.markdown_extensions`` when
            omitted.
        """
        self.site = site
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.renderer = renderer or HtmlContentRenderer(
            site.markdown_extensions,
            base_paths=(site.config_path.parent, site.content_root),
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("page.jinja")

    def new_page(self, resolved: ResolvedPage) -> ContentPage:
        """Return a ``Loaded`` page for ``resolved`` with its default URL."""
        url = page_url(
            resolved.rel_path, use_directory_urls=self.site.use_directory_urls
        )
        return ContentPage(
            resolved=resolved, url=url, output_path=self.output_path_for(url)
        )

    def render(
        self,
        resolved: ResolvedPage,
        context: cabc.Mapping[str, typ.Any],
        *,
        url_map: cabc.Mapping[str, str] | None = None,
    ) -> ContentPage:
        """Take one page from ``Loaded`` to ``TemplateApplied``.

        Parameters
        ----------
        resolved : ResolvedPage
            The nav leaf and source file to render.
        context : Mapping[str, Any]
            Template context for the page, typically its ``nav`` menu.
        url_map : Mapping[str, str], optional
            Content path to URL mapping used to rewrite ``.md`` links.

        Returns
        -------
        ContentPage
            The page, either ready for :meth:`write` or ``ERRORED`` with its
            :class:`~kb_pages.errors.RenderError` recorded on ``error``.
        """
        page = self.new_page(resolved)
        try:
            self.parse_front_matter(page)
            self.render_body(page, url_map or {page.rel_path: page.url})
            self.apply_template(page, context)
        except RenderError as exc:
            page.fail(exc)
        return page

    def output_path_for(self, url: str) -> Path:
        return self.site.output_dir / output_file(url)

    def parse_front_matter(self, page: ContentPage) -> None:
        """Read the source file and split off its front-matter block."""
        try:
            page.raw_text = page.source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RenderError(page.source_path, f"cannot read source: {exc}") from exc
        try:
            document = parse_front_matter(page.raw_text)
        except FrontMatterError as exc:
            raise RenderError(page.source_path, exc, line=exc.line) from exc

        page.meta = document.meta
        page.markdown = document.body
        page.body_line = document.body_line
        page.icon = document.icon
        page.title = (
            document.title
            or page.resolved.node.label
            or first_heading(document.body)
            or _title_from_path(page.rel_path)
        )
        page.advance(PageState.FRONT_MATTER_PARSED)

    def render_body(self, page: ContentPage, url_map: cabc.Mapping[str, str]) -> None:
        """Convert the Markdown body to HTML with links rewritten for the site."""
        link_extension = RelativeLinkExtension(page.rel_path, page.url, url_map)
        try:
            page.body_html = self.renderer.markdown(
                page.markdown, link_extension=link_extension
            )
        except Exception as exc:  # noqa: BLE001
            raise RenderError(
                page.source_path, f"cannot render Markdown: {exc}", line=page.body_line
            ) from exc
        page.advance(PageState.BODY_RENDERED)

    def apply_template(
        self, page: ContentPage, context: cabc.Mapping[str, typ.Any]
    ) -> None:
        """Wrap the rendered body in the theme template."""
        base_url = relative_url("", page.url)
        full_context = {
            "site": self.site,
            "theme": self.site.theme,
            "page": page,
            "content": page.body_html,
            "base_url": base_url,
            "html_title": self._format_page_title(page),
            "pygments_css": self.renderer.stylesheet,
            "edit_url": self._source_action_url(page, "edit"),
            "view_url": self._source_action_url(page, "raw"),
            "generated_at": dt.datetime.now(dt.UTC),
            **context,
        }
        try:
            html = self.template.render(**full_context)
        except TemplateError as exc:
            raise RenderError(page.source_path, f"template error: {exc}") from exc
        if not html.endswith("\n"):
            html += "\n"
        page.html = html
        page.advance(PageState.TEMPLATE_APPLIED)

    def write(self, page: ContentPage) -> Path:
        """Write the finished document and return its path."""
        if page.state is not PageState.TEMPLATE_APPLIED:
            msg = f"Cannot write page '{page.rel_path}' in state {page.state.value}"
            raise RuntimeError(msg)
        path = page.output_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(page.html, encoding="utf-8")
        except OSError as exc:
            raise WriteError(path, exc) from exc
        page.advance(PageState.WRITTEN)
        logger.debug("Wrote %s -> %s", page.rel_path, path)
        return path

    def _format_page_title(self, page: ContentPage) -> str:
        """Compose the HTML title from the page title and site name."""
        if page.url == "" or page.title == self.site.site_name:
            return self.site.site_name
        return f"{page.title} - {self.site.site_name}"

    def _source_action_url(self, page: ContentPage, action: str) -> str | None:
        """Return the repository edit or raw-view URL for the page source."""
        feature = "content.action.edit" if action == "edit" else "content.action.view"
        if not self.site.repo_url or not self.site.edit_uri:
            return None
        if not self.site.theme.has_feature(feature):
            return None
        edit_uri = self.site.edit_uri.strip("/")
        if action != "edit":
            edit_uri = edit_uri.replace("edit/", f"{action}/", 1)
        return f"{self.site.repo_url.rstrip('/')}/{edit_uri}/{page.rel_path}"


def _title_from_path(rel_path: str) -> str:
    """Derive a title from a file name, using the folder name for index pages."""
    parent, name = posixpath.split(posixpath.splitext(rel_path)[0])
    if name in INDEX_STEMS:
        name = posixpath.basename(parent) or "Home"
    words = name.replace("-", " ").replace("_", " ").strip()
    return words[:1].upper() + words[1:]


__all__ = ["DEFAULT_TEMPLATES_DIR", "PageRenderer"]
