"""Orchestrate a full site build: resolve, render every page, index, copy.

:class:`SiteBuilder` runs the pipeline strictly in order. Content resolution
happens first, so a broken nav aborts the build before any HTML is written.
Pages are then rendered best-effort: a :class:`~kb_pages.errors.RenderError`
fails only its own page and is collected in the returned
:class:`~kb_pages.generator.models.BuildReport`, while a
:class:`~kb_pages.errors.WriteError` aborts the batch.

Example
-------
>>> from pathlib import Path
>>> from kb_pages.config import load_site_config
>>> site = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
>>> report = SiteBuilder(site).build()  # doctest: +SKIP
>>> report.summary()  # doctest: +SKIP
'42 succeeded, 0 failed'
"""

from __future__ import annotations

import logging
import shutil
import typing as typ
from pathlib import Path

from kb_pages._constants import MARKDOWN_SUFFIXES, THEME_ASSETS_DIR
from kb_pages.blog import BlogPlugin
from kb_pages.errors import ConfigError, RenderError, WriteError
from kb_pages.resolver import ResolvedPage, resolve_content
from kb_pages.search import DEFAULT_SEPARATOR, SearchIndex

from .menu import NavMenuBuilder, neighbours
from .models import BuildReport, ContentPage
from .page_generator import PageRenderer
from .urls import relative_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from kb_pages.config import SiteConfig

logger = logging.getLogger(__name__)

KNOWN_PLUGINS = frozenset({"search", "blog"})
THEME_ASSETS_SOURCE = Path(__file__).resolve().parents[1] / THEME_ASSETS_DIR


class SiteBuilder:
    """Render every nav page of a site into its output directory."""

    def __init__(
        self, site: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Prepare renderers and plugins for ``site``.

        Raises
        ------
        ConfigError
            If the output directory would contain the content root, or a
            Markdown extension cannot be loaded.
        """
        if site.content_root.is_relative_to(site.output_dir):
            raise ConfigError("output_dir", "must not contain the content root")
        if site.output_dir.is_relative_to(site.content_root):
            raise ConfigError("output_dir", "must not be inside the content root")
        self.site = site
        self.renderer = PageRenderer(site, templates_dir=templates_dir)
        self.search = self._build_search_index()
        # source path -> (url, output file) of the last successful write
        self._published: dict[Path, tuple[str, Path]] = {}
        blog_config = site.get_plugin("blog")
        self.blog = BlogPlugin(blog_config.options) if blog_config else None
        for plugin in site.plugins:
            if plugin.name not in KNOWN_PLUGINS:
                logger.warning("Ignoring unsupported plugin '%s'", plugin.name)

    def build(self, *, clean: bool = True) -> BuildReport:
        """Resolve content and render all pages.

        Parameters
        ----------
        clean : bool, optional
            Remove the previous output directory first (default ``True``).

        Returns
        -------
        BuildReport
            Written page paths and per-page render errors.

        Raises
        ------
        MissingContentError
            If nav entries reference files that do not exist; nothing is
            written in that case.
        WriteError
            If the output tree cannot be written.
        """
        resolved = resolve_content(self.site.nav, self.site.content_root)
        if clean:
            self._clean_output()
            self._published.clear()
        self._copy_static_files()
        return self._render(resolved)

    def rebuild(self, changed: cabc.Iterable[Path]) -> BuildReport:
        """Re-render the pages affected by ``changed`` source files.

        Changes to the configuration file, watched directories, static files,
        or files outside the nav trigger a full (non-cleaning) build. A page
        that now fails or has moved loses its previously written file and its
        search entry.
        """
        changed_paths = {path.resolve() for path in changed}
        resolved = resolve_content(self.site.nav, self.site.content_root)
        sources = {page.source_path for page in resolved}
        if not changed_paths or not changed_paths <= sources:
            logger.info("Rebuilding the whole site")
            self._copy_static_files()
            return self._render(resolved)
        logger.info("Re-rendering %d changed page(s)", len(changed_paths))
        return self._render(resolved, only=changed_paths)

    def watch_paths(self) -> list[Path]:
        """Return the directories ``serve`` watches for changes."""
        paths = [self.site.content_root, *self.site.watch]
        return [path for path in dict.fromkeys(paths) if path.is_dir()]

    def _render(
        self, resolved: cabc.Sequence[ResolvedPage], *, only: set[Path] | None = None
    ) -> BuildReport:
        report = BuildReport()
        if only is None:
            self.search = self._build_search_index()
        pages = [self._prepare(entry) for entry in resolved]
        url_map = {page.rel_path: page.url for page in pages}
        menu = NavMenuBuilder(
            self.site.nav,
            pages,
            section_indexes=self.site.theme.has_feature("navigation.indexes"),
        )
        posts = self.blog.listing(pages) if self.blog else []
        if only is not None:
            only = self._affected_sources(pages, only)

        for index, page in enumerate(pages):
            if only is not None and page.source_path not in only:
                continue
            if page.error is not None:
                self._retract(page.source_path)
                report.errors.append(page.error)
                continue
            try:
                self.renderer.render_body(page, url_map)
                context = self._page_context(page, pages, index, menu, posts)
                self.renderer.apply_template(page, context)
            except RenderError as exc:
                _record_failure(page, exc)
                self._retract(page.source_path)
                report.errors.append(exc)
                continue
            previous = self._published.get(page.source_path)
            if previous is not None and previous[1] != page.output_path:
                self._retract(page.source_path)
            report.written.append(self.renderer.write(page))
            self._published[page.source_path] = (page.url, page.output_path)
            if self.search is not None:
                self.search.add(page.url, page.title, page.body_html)

        if self.search is not None:
            report.search_index = self.search.write(self.site.output_dir)
        logger.info("Build finished: %s", report.summary())
        return report

    def _prepare(self, resolved: ResolvedPage) -> ContentPage:
        """Load a page, parse its front-matter, and settle its URL."""
        page = self.renderer.new_page(resolved)
        try:
            self.renderer.parse_front_matter(page)
            if self.blog and self.blog.is_post(page.rel_path):
                self.blog.assign_url(
                    page, use_directory_urls=self.site.use_directory_urls
                )
                page.output_path = self.renderer.output_path_for(page.url)
        except RenderError as exc:
            _record_failure(page, exc)
        return page

    def _page_context(
        self,
        page: ContentPage,
        pages: cabc.Sequence[ContentPage],
        index: int,
        menu: NavMenuBuilder,
        posts: list[dict[str, typ.Any]],
    ) -> dict[str, typ.Any]:
        previous_page, next_page = neighbours(pages, index)
        show_footer = self.site.theme.has_feature("navigation.footer")
        is_blog_index = bool(self.blog and self.blog.is_index(page.rel_path))
        return {
            "nav": menu.build(page),
            "previous_page": _link(previous_page, page) if show_footer else None,
            "next_page": _link(next_page, page) if show_footer else None,
            "posts": _post_links(posts, page) if is_blog_index else [],
            "search_enabled": self.search is not None,
        }

    def _retract(self, source_path: Path) -> None:
        """Remove the output and index entry last published for ``source_path``."""
        previous = self._published.pop(source_path, None)
        if previous is None:
            return
        url, path = previous
        if self.search is not None:
            self.search.remove(url)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise WriteError(path, exc) from exc
        logger.debug("Removed stale output %s", path)

    def _affected_sources(
        self, pages: cabc.Sequence[ContentPage], changed: set[Path]
    ) -> set[Path]:
        """Add the blog index to ``changed`` when a post changed."""
        if self.blog is None:
            return changed
        blog = self.blog
        if not any(
            blog.is_post(page.rel_path) and page.source_path in changed
            for page in pages
        ):
            return changed
        return changed | {
            page.source_path for page in pages if blog.is_index(page.rel_path)
        }

    def _build_search_index(self) -> SearchIndex | None:
        plugin = self.site.get_plugin("search")
        if plugin is None:
            return None
        lang = plugin.options.get("lang") or ["en"]
        if isinstance(lang, str):
            lang = [lang]
        return SearchIndex(
            separator=str(plugin.options.get("separator") or DEFAULT_SEPARATOR),
            lang=[str(code) for code in lang],
        )

    def _clean_output(self) -> None:
        output_dir = self.site.output_dir
        if not output_dir.exists():
            return
        try:
            shutil.rmtree(output_dir)
        except OSError as exc:
            raise WriteError(output_dir, exc) from exc

    def _copy_static_files(self) -> None:
        """Copy theme assets and non-Markdown content files into the output."""
        output_dir = self.site.output_dir
        try:
            shutil.copytree(
                THEME_ASSETS_SOURCE, output_dir / THEME_ASSETS_DIR, dirs_exist_ok=True
            )
            for source in sorted(self.site.content_root.rglob("*")):
                rel = source.relative_to(self.site.content_root)
                if any(part.startswith(".") for part in rel.parts):
                    continue
                if source.is_dir() or source.suffix in MARKDOWN_SUFFIXES:
                    continue
                target = output_dir / rel
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
        except OSError as exc:
            path = Path(exc.filename) if exc.filename else output_dir
            raise WriteError(path, exc) from exc


def _record_failure(page: ContentPage, error: RenderError) -> None:
    page.fail(error)
    logger.error("Failed to render %s", error)


def _post_links(
    posts: cabc.Sequence[dict[str, typ.Any]], current: ContentPage
) -> list[dict[str, typ.Any]]:
    return [{**post, "href": relative_url(post["url"], current.url)} for post in posts]


def _link(target: ContentPage | None, current: ContentPage) -> dict[str, str] | None:
    if target is None or target.failed:
        return None
    return {"title": target.title, "href": relative_url(target.url, current.url)}


__all__ = ["SiteBuilder"]
