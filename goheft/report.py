"""Turn a package -> archive table into a size-ordered report."""

from __future__ import annotations

import os
from typing import Mapping

import structlog

from goheft.exceptions import ResolutionError
from goheft.models.report import LibraryEntry, LibraryReport

log = structlog.get_logger("goheft.report")


class SizeReportBuilder:
    """Stat every archive and sort packages by archive size."""

    def build(self, table: Mapping[str, str], min_size: int = 0) -> LibraryReport:
        """Build a report from ``{package: archive_path}``.

        With ``min_size > 0`` entries smaller than it are dropped and the
        total is suppressed (``None``); the total only describes the full,
        unfiltered view.

        Raises:
            ResolutionError: an archive cannot be stat'ed.
            ValueError: min_size is negative.
        """
        if min_size < 0:
            raise ValueError(f"min_size must be >= 0, got {min_size}")

        entries = [
            LibraryEntry(name=name, size=self._archive_size(name, path))
            for name, path in table.items()
        ]
        entries.sort(key=lambda e: e.size, reverse=True)

        if min_size:
            kept = tuple(e for e in entries if e.size >= min_size)
            log.debug(
                "report.filtered",
                min_size=min_size,
                kept=len(kept),
                dropped=len(entries) - len(kept),
            )
            return LibraryReport(entries=kept, total=None, min_size=min_size)

        return LibraryReport(entries=tuple(entries), total=sum(e.size for e in entries))

    @staticmethod
    def _archive_size(name: str, path: str) -> int:
        try:
            return os.stat(path).st_size
        except OSError as e:
            raise ResolutionError(name, path, e.strerror or str(e)) from e
