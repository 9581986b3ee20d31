"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from kb_pages.errors import RenderError
    from kb_pages.resolver import ResolvedPage


class PageState(enum.Enum):
    """Lifecycle of a single page during a build."""

    LOADED = "loaded"
    FRONT_MATTER_PARSED = "front_matter_parsed"
    BODY_RENDERED = "body_rendered"
    TEMPLATE_APPLIED = "template_applied"
    WRITTEN = "written"
    ERRORED = "errored"


_NEXT_STATE = {
    PageState.LOADED: PageState.FRONT_MATTER_PARSED,
    PageState.FRONT_MATTER_PARSED: PageState.BODY_RENDERED,
    PageState.BODY_RENDERED: PageState.TEMPLATE_APPLIED,
    PageState.TEMPLATE_APPLIED: PageState.WRITTEN,
}
TERMINAL_STATES = frozenset({PageState.WRITTEN, PageState.ERRORED})


@dc.dataclass(slots=True)
class ContentPage:
    """A page moving through ``Loaded -> ... -> Written`` (or ``Errored``).

    Attributes
    ----------
    resolved : ResolvedPage
        The nav leaf and source file this page renders.
    url : str
        Site-root relative URL the page is served at.
    output_path : Path
        Absolute path of the HTML file to write.
    raw_text : str
        Source file content.
    meta : dict[str, Any]
        Front-matter metadata.
    title : str
        Resolved page title.
    icon : str or None
        Optional front-matter icon shown next to the nav label.
    markdown : str
        Markdown body without the front-matter block.
    body_line : int
        Source line where ``markdown`` starts.
    body_html : str
        Rendered Markdown body.
    html : str
        Complete document after the theme template is applied.
    state : PageState
        Current lifecycle state.
    error : RenderError or None
        Failure recorded when the page enters ``ERRORED``.
    """

    resolved: ResolvedPage
    url: str
    output_path: Path
    raw_text: str = ""
    meta: dict[str, typ.Any] = dc.field(default_factory=dict)
    title: str = ""
    icon: str | None = None
    markdown: str = ""
    body_line: int = 1
    body_html: str = ""
    html: str = ""
    state: PageState = PageState.LOADED
    error: RenderError | None = None

    @property
    def rel_path(self) -> str:
        return self.resolved.rel_path

    @property
    def source_path(self) -> Path:
        return self.resolved.source_path

    @property
    def failed(self) -> bool:
        return self.state is PageState.ERRORED

    def advance(self, state: PageState) -> None:
        """Move to the next lifecycle state, rejecting out-of-order transitions."""
        expected = _NEXT_STATE.get(self.state)
        if state is not expected:
            msg = (
                f"Cannot move page '{self.rel_path}' from {self.state.value} "
                f"to {state.value}"
            )
            raise RuntimeError(msg)
        self.state = state

    def fail(self, error: RenderError) -> None:
        """Record ``error`` and move the page to ``ERRORED``."""
        if self.state in TERMINAL_STATES:
            msg = f"Page '{self.rel_path}' already finished as {self.state.value}"
            raise RuntimeError(msg)
        self.state = PageState.ERRORED
        self.error = error


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a build: pages written and per-page failures."""

    written: list[Path] = dc.field(default_factory=list)
    errors: list[RenderError] = dc.field(default_factory=list)
    search_index: Path | None = None

    @property
    def succeeded(self) -> int:
        return len(self.written)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Return the one-line summary printed at the end of a build."""
        return f"{self.succeeded} succeeded, {self.failed} failed"


__all__ = ["TERMINAL_STATES", "BuildReport", "ContentPage", "PageState"]
