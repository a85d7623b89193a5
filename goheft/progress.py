"""Progress of one goheft run: pipeline phases and the packages go compiles."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

import structlog

log = structlog.get_logger("goheft.progress")


@dataclass
class PhaseProgress:
    phase: str
    status: str = "running"  # "running" | "completed" | "failed" | "skipped"
    started: float = field(default_factory=time.monotonic)
    finished: float | None = None
    detail: str = ""

    @property
    def duration(self) -> float | None:
        if self.finished is None:
            return None
        return round(self.finished - self.started, 2)


class ProgressTracker:
    """Record pipeline phases and compiled packages, and notify listeners.

    ``phase_listeners`` get the :class:`PhaseProgress` when a phase starts
    and again when it ends. ``package_listeners`` get each package name as
    go reports it; they run on the build output reader thread. A failing
    listener is logged and never interrupts the run.
    """

    def __init__(self) -> None:
        self.phases: list[PhaseProgress] = []
        self.packages: list[str] = []
        self.phase_listeners: list[Callable[[PhaseProgress], None]] = []
        self.package_listeners: list[Callable[[str], None]] = []

    @contextmanager
    def phase(self, name: str) -> Iterator[PhaseProgress]:
        """Run the body as phase *name*; an exception marks it failed.

        The body may set ``detail`` on the yielded record.
        """
        record = PhaseProgress(phase=name)
        self.phases.append(record)
        self._emit(self.phase_listeners, record)
        try:
            yield record
        except BaseException as e:
            self._finish(record, "failed", str(e) or type(e).__name__)
            raise
        self._finish(record, "completed")

    def skip(self, name: str, reason: str) -> None:
        record = PhaseProgress(phase=name, status="skipped", detail=reason)
        record.finished = record.started
        self.phases.append(record)
        self._emit(self.phase_listeners, record)

    def note_package(self, name: str) -> None:
        self.packages.append(name)
        self._emit(self.package_listeners, name)

    def summary(self) -> dict[str, Any]:
        return {
            "phases": {p.phase: p.status for p in self.phases},
            "durations": {p.phase: p.duration for p in self.phases},
            "compiled_packages": len(self.packages),
        }

    def _finish(self, record: PhaseProgress, status: str, detail: str | None = None) -> None:
        record.status = status
        record.finished = time.monotonic()
        if detail is not None:
            record.detail = detail
        self._emit(self.phase_listeners, record)

    @staticmethod
    def _emit(listeners: list[Callable[[Any], None]], arg: Any) -> None:
        for listener in listeners:
            try:
                listener(arg)
            except Exception:
                log.debug("progress.listener_error", arg=str(arg), exc_info=True)
