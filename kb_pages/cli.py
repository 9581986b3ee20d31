"""Cyclopts CLI entrypoint for building and serving kb-pages sites.

The ``kb-pages`` console script defined here renders a documentation site
from an ``mkdocs.yml``-style configuration: ``kb-pages build`` writes the
static HTML tree and search index once, and ``kb-pages serve`` builds, serves
the output locally, and re-renders pages as their sources change.

Exit codes for ``build``: ``0`` when every page rendered, ``1`` when at least
one page failed, ``2`` when the configuration, navigation, or output
directory made the build impossible.

Examples
--------
Build the site described by ``mkdocs.yml`` in the current directory:

>>> from kb_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from kb_pages.cli import app
>>> app(["build", "--output-dir", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .errors import KbPagesError
from .generator import BuildReport, SiteBuilder
from .serve import DevServer, parse_dev_addr

DEFAULT_CONFIG = Path("mkdocs.yml")
EXIT_PAGE_ERRORS = 1
EXIT_FATAL = 2

app = App(name="kb-pages", config=cyclopts.config.Env("KB_PAGES_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_report(report: BuildReport) -> None:
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    if report.search_index is not None:
        print(f"wrote {_format_path(report.search_index)}")
    for error in report.errors:
        print(f"error: {error}", file=sys.stderr)
    print(report.summary())


@app.command(help="Render the site once into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the site config", env_var="KB_PAGES_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="KB_PAGES_OUTPUT_DIR"),
    ] = None,
    content_root: typ.Annotated[
        Path | None,
        Parameter(
            help="Override the content root", env_var="KB_PAGES_CONTENT_ROOT"
        ),
    ] = None,
    clean: typ.Annotated[
        bool, Parameter(help="Remove the previous output before building")
    ] = True,
    verbose: typ.Annotated[bool, Parameter(help="Log progress at INFO level")] = False,
) -> None:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the configuration document (overridable via
        ``KB_PAGES_CONFIG``).
    output_dir : Path or None, optional
        Override for the configured output directory.
    content_root : Path or None, optional
        Override for the configured content root.
    clean : bool, optional
        Remove the previous output directory first (default ``True``).
    verbose : bool, optional
        Log progress at INFO level.

    Returns
    -------
    None
        Writes the site and prints each generated path plus a summary.

    Raises
    ------
    SystemExit
        With status 1 when any page failed to render, or 2 when a fatal
        error (configuration, missing content, unwritable output) stopped the
        build.
    """
    _configure_logging(verbose=verbose)
    try:
        site = load_site_config(
            config, output_dir=output_dir, content_root=content_root
        )
        report = SiteBuilder(site).build(clean=clean)
    except KbPagesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(EXIT_FATAL) from exc
    _print_report(report)
    if not report.ok:
        raise SystemExit(EXIT_PAGE_ERRORS)


@app.command(help="Build, serve locally, and re-render pages on change.")
def serve(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the site config", env_var="KB_PAGES_CONFIG")
    ] = DEFAULT_CONFIG,
    dev_addr: typ.Annotated[
        str, Parameter(help="Address to serve on (HOST:PORT)")
    ] = "127.0.0.1:8000",
    verbose: typ.Annotated[bool, Parameter(help="Log progress at INFO level")] = False,
) -> None:
    """Serve the site and rebuild affected pages until interrupted.

    Parameters
    ----------
    config : Path, optional
        Path to the configuration document.
    dev_addr : str, optional
        ``HOST:PORT`` the development server binds to.
    verbose : bool, optional
        Log progress at INFO level.

    Raises
    ------
    SystemExit
        With status 2 when the initial configuration or build is fatal.
    """
    _configure_logging(verbose=verbose)

    def _load_builder() -> SiteBuilder:
        return SiteBuilder(load_site_config(config))

    try:
        host, port = parse_dev_addr(dev_addr)
        server = DevServer(
            _load_builder(),
            host=host,
            port=port,
            on_report=_print_report,
            reload=_load_builder,
        )
        print(f"serving on http://{host}:{port}/")
        server.run()
    except (KbPagesError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(EXIT_FATAL) from exc


def main() -> None:
    """Invoke the Cyclopts application that powers the ``kb-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
