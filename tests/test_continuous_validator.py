"""Tests for the background re-validation worker."""

import threading
import time
from pathlib import Path

from docxref.continuous_validator import (
    ContinuousValidator,
    ValidationEvent,
    document_revalidator,
)
from docxref.ref_kind import RefKind
from docxref.registry import StaticRegistry


def wait_until_stopped(validator: ContinuousValidator, limit: float = 2.0) -> None:
    """Poll until the worker has exited or the limit passes."""
    deadline = time.monotonic() + limit
    while validator.is_watching() and time.monotonic() < deadline:
        time.sleep(0.01)


def test_start_trigger_stop() -> None:
    """Verify a trigger produces one callback with the revalidated result."""
    events: list[ValidationEvent] = []
    received = threading.Event()

    def on_validation(event: ValidationEvent) -> None:
        events.append(event)
        received.set()

    validator = ContinuousValidator(lambda path: f"checked {path}", on_validation)
    assert validator.start() is True
    try:
        assert validator.is_watching()
        assert validator.trigger("docs/guide.md") is True
        assert received.wait(2)
    finally:
        validator.stop()
    assert events == [
        ValidationEvent(path="docs/guide.md", result="checked docs/guide.md")
    ]
    assert validator.is_watching() is False


def test_start_twice_is_refused() -> None:
    """Verify a second start while watching is a no-op."""
    validator = ContinuousValidator(lambda path: None)
    assert validator.start() is True
    try:
        assert validator.start() is False
    finally:
        validator.stop()


def test_trigger_while_stopped() -> None:
    """Verify triggers are rejected when no worker is running."""
    validator = ContinuousValidator(lambda path: None)
    assert validator.trigger("a.md") is False


def test_stop_without_start() -> None:
    """Verify stopping a stopped validator is harmless."""
    validator = ContinuousValidator(lambda path: None)
    validator.stop()
    assert validator.is_watching() is False


def test_crash_stops_worker_and_allows_restart() -> None:
    """Verify a failing revalidation ends the worker; start works again."""

    def explode(path: str) -> None:
        msg = f"cannot read {path}"
        raise OSError(msg)

    validator = ContinuousValidator(explode)
    validator.start()
    validator.trigger("bad.md")
    wait_until_stopped(validator)
    assert validator.is_watching() is False
    assert validator.trigger("bad.md") is False
    assert validator.start() is True
    validator.stop()


def test_idle_checks_counted() -> None:
    """Verify the worker ticks while idle."""
    validator = ContinuousValidator(lambda path: None, idle_interval_ms=10)
    validator.start()
    try:
        deadline = time.monotonic() + 2
        while validator.idle_checks == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        validator.stop()
    assert validator.idle_checks > 0


def test_document_revalidator(tmp_path: Path) -> None:
    """Verify files are read and validated."""
    doc = tmp_path / "guide.md"
    doc.write_text("# Guide\n\n[Setup](dev:setup-guide) [Gone](dev:gone)\n")
    registries = {RefKind.DEV_DOC: StaticRegistry(["setup-guide"])}
    revalidate = document_revalidator(registries)
    result = revalidate(str(doc))
    assert result.success is True
    assert result.validation_report.invalid_count == 1


def test_document_revalidator_missing_file(tmp_path: Path) -> None:
    """Verify a vanished file is reported, not raised."""
    revalidate = document_revalidator()
    result = revalidate(str(tmp_path / "missing.md"))
    assert result.success is False
    assert "File not found" in result.error


def test_from_config_reads_watch_section() -> None:
    """Verify the idle interval comes from the watch section."""
    validator = ContinuousValidator.from_config(
        {"watch": {"idle_interval_ms": 250}}, lambda path: None
    )
    assert validator.idle_interval_ms == 250  # noqa: PLR2004
    defaults = ContinuousValidator.from_config({}, lambda path: None)
    assert defaults.idle_interval_ms == 5_000  # noqa: PLR2004


def test_stop_with_busy_worker_leaves_watching() -> None:
    """Verify a stop that times out still reports the validator as stopped."""
    busy = threading.Event()
    release = threading.Event()
    seen: list[str] = []

    def slow(path: str) -> str:
        seen.append(path)
        busy.set()
        release.wait(2)
        return path

    validator = ContinuousValidator(slow)
    validator.start()
    try:
        validator.trigger("first.md")
        assert busy.wait(2)
        validator.trigger("queued.md")
        validator.stop(timeout=0.05)
        assert validator.is_watching() is False
        assert validator.trigger("late.md") is False
    finally:
        release.set()
    time.sleep(0.1)
    assert seen == ["first.md"]
    assert validator.start() is True
    validator.stop()
