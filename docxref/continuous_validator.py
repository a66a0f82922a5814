"""Background worker that re-validates documents when told they changed."""

import logging
import queue
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docxref.envelope import ProcessingFailure, ProcessingResult
from docxref.markdown_renderer import Renderer
from docxref.process_document import OptionsLike, as_options, process_document
from docxref.registry import Registries

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class ValidationEvent:
    """The outcome of re-validating one path."""

    path: str
    result: Any


class ContinuousValidator:
    """Watches for change notifications and re-runs validation on a worker thread.

    States are Stopped and Watching. ``trigger`` only enqueues, so callers
    never block on validation. ``stop`` leaves Watching at once, even when
    the worker is still busy with a path and outlives the join timeout; that
    worker exits after the path without taking another. If revalidation or
    the callback raises, the error is logged and the worker stops; ``start``
    may be called again.
    """

    def __init__(
        self,
        revalidate: Callable[[str], Any],
        on_validation: Callable[[ValidationEvent], None] | None = None,
        idle_interval_ms: int = 5_000,
    ) -> None:
        """Initialize a stopped validator."""
        self.revalidate = revalidate
        self.on_validation = on_validation
        self.idle_interval_ms = idle_interval_ms
        self.idle_checks = 0
        self._queue: queue.Queue[Any] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._stop_requested = threading.Event()
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        revalidate: Callable[[str], Any],
        on_validation: Callable[[ValidationEvent], None] | None = None,
    ) -> "ContinuousValidator":
        """Build a validator using the 'watch' section of a loaded config."""
        section = config.get("watch") or {}
        return cls(
            revalidate,
            on_validation,
            idle_interval_ms=section.get("idle_interval_ms", 5_000),
        )

    def start(self) -> bool:
        """Spawn the worker. Returns False if it was already watching."""
        with self._lock:
            if self.is_watching():
                return False
            self._queue = queue.Queue()
            self._stop_requested = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._queue, self._stop_requested),
                name="docxref-continuous-validation",
                daemon=True,
            )
            self._thread.start()
        logger.info("Continuous validation started")
        return True

    def stop(self, timeout: float | None = 5.0) -> None:
        """Ask the worker to exit and wait for it."""
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_requested.set()
            self._queue.put(_STOP)
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Worker still busy after %ss; it exits when done", timeout)
        with self._lock:
            if self._thread is thread:
                self._thread = None
        logger.info("Continuous validation stopped")

    def is_watching(self) -> bool:
        """Return True while the worker is alive and has not been asked to stop."""
        thread = self._thread
        if thread is None or self._stop_requested.is_set():
            return False
        return thread.is_alive()

    def trigger(self, path: str | Path) -> bool:
        """Queue a re-validation of path. Returns False when not watching."""
        if not self.is_watching():
            logger.warning("Ignoring trigger for %s: validator is stopped", path)
            return False
        self._queue.put(str(path))
        return True

    def _run(self, inbox: "queue.Queue[Any]", stop_requested: threading.Event) -> None:
        while not stop_requested.is_set():
            try:
                message = inbox.get(timeout=self.idle_interval_ms / 1000)
            except queue.Empty:
                self.idle_checks += 1
                logger.debug("Idle check #%d", self.idle_checks)
                continue
            if message is _STOP or stop_requested.is_set():
                return
            try:
                event = ValidationEvent(path=message, result=self.revalidate(message))
                if self.on_validation is not None:
                    self.on_validation(event)
            except Exception:
                logger.exception("Continuous validation crashed on %s", message)
                return


def document_revalidator(
    registries: Registries | None = None,
    options: OptionsLike = None,
    renderer: Renderer | None = None,
) -> Callable[[str], ProcessingResult]:
    """Build a revalidate function that reads a file and validates its references."""
    opts = as_options(options).with_changes(validate_cross_refs=True, cache=False)

    def revalidate(path: str) -> ProcessingResult:
        p = Path(path)
        if not p.is_file():
            return ProcessingFailure(error=f"File not found: {path}", kind="internal")
        return process_document(
            p.read_text(encoding="utf-8"),
            registries,
            opts.with_changes(file_path=str(p)),
            renderer,
        )

    return revalidate
