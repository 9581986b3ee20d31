"""Development server: build once, serve the output, re-render on change.

The watchdog observer thread only queues changed paths; rebuilding happens on
the calling thread, so the search index keeps a single writer. The loop runs
until interrupted.
"""

from __future__ import annotations

import functools
import logging
import queue
import threading
import typing as typ
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import KbPagesError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .generator import BuildReport, SiteBuilder

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3


def parse_dev_addr(value: str) -> tuple[str, int]:
    """Split ``HOST:PORT`` into its parts.

    >>> parse_dev_addr("127.0.0.1:8000")
    ('127.0.0.1', 8000)
    """
    host, sep, port = value.rpartition(":")
    if not sep or not host or not port.isdigit():
        msg = f"Expected HOST:PORT, got '{value}'"
        raise ValueError(msg)
    return host, int(port)


class ChangeQueueHandler(FileSystemEventHandler):
    """Queue the paths of changed files, ignoring the output directory."""

    def __init__(
        self, changes: queue.Queue[Path], *, ignore: Path, only: Path | None = None
    ) -> None:
        super().__init__()
        self.changes = changes
        self.ignore = ignore
        self.only = only

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed_no_write"):
            return
        for raw in (event.src_path, getattr(event, "dest_path", "")):
            if not raw:
                continue
            path = Path(str(raw)).resolve()
            if path.is_relative_to(self.ignore):
                continue
            if self.only is not None and path != self.only:
                continue
            self.changes.put(path)


def _drain(changes: queue.Queue[Path], timeout: float) -> set[Path]:
    """Block for the first change, then collect the burst that follows it."""
    try:
        first = changes.get(timeout=timeout)
    except queue.Empty:
        return set()
    collected = {first}
    while True:
        try:
            collected.add(changes.get(timeout=DEBOUNCE_SECONDS))
        except queue.Empty:
            return collected


class DevServer:
    """Serve a site's output directory while rebuilding changed pages."""

    def __init__(
        self,
        builder: SiteBuilder,
        *,
        host: str = "127.0.0.1",
        port: int = 8000,
        on_report: cabc.Callable[[BuildReport], None] | None = None,
        reload: cabc.Callable[[], SiteBuilder] | None = None,
    ) -> None:
        self.builder = builder
        self.reload = reload
        self.host = host
        self.port = port
        self.on_report = on_report
        self.changes: queue.Queue[Path] = queue.Queue()
        self.config_path = builder.site.config_path
        self._observer = Observer()
        self._httpd: ThreadingHTTPServer | None = None

    def run(self, *, poll_interval: float = 1.0) -> None:
        """Build, serve, and watch until interrupted with Ctrl+C."""
        self._report(self.builder.build(clean=True))
        self._start_http()
        self._start_observer()
        logger.info("Serving on http://%s:%d/", self.host, self.port)
        try:
            while True:
                changed = _drain(self.changes, poll_interval)
                if changed:
                    self._rebuild(changed)
        except KeyboardInterrupt:
            logger.info("Stopping server")
        finally:
            self.stop()

    def stop(self) -> None:
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join()
        if self._httpd is not None:
            self._httpd.shutdown()
            self._httpd.server_close()
            self._httpd = None

    def _rebuild(self, changed: set[Path]) -> None:
        try:
            if self.config_path in changed and self.reload is not None:
                logger.info("%s changed; reloading configuration", self.config_path)
                self.builder = self.reload()
                self._report(self.builder.build(clean=False))
                return
            self._report(self.builder.rebuild(changed - {self.config_path}))
        except KbPagesError as exc:
            logger.error("Rebuild failed: %s", exc)

    def _report(self, report: BuildReport) -> None:
        if self.on_report is not None:
            self.on_report(report)

    def _start_http(self) -> None:
        handler = functools.partial(
            SimpleHTTPRequestHandler, directory=str(self.builder.site.output_dir)
        )
        self._httpd = ThreadingHTTPServer((self.host, self.port), handler)
        thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        thread.start()

    def _start_observer(self) -> None:
        output_dir = self.builder.site.output_dir
        for path in self.builder.watch_paths():
            handler = ChangeQueueHandler(self.changes, ignore=output_dir)
            self._observer.schedule(handler, str(path), recursive=True)
        config_handler = ChangeQueueHandler(
            self.changes, ignore=output_dir, only=self.config_path
        )
        self._observer.schedule(
            config_handler, str(self.config_path.parent), recursive=False
        )
        self._observer.start()


__all__ = ["ChangeQueueHandler", "DevServer", "parse_dev_addr"]
