"""goheft pipeline: build, scan the work dir, size the archives."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import structlog

from goheft.build.go import GoBuilder
from goheft.build.workspace import WorkspaceScanner
from goheft.core.config import HeftConfig
from goheft.exceptions import InputNotFoundError
from goheft.models.report import LibraryReport
from goheft.progress import ProgressTracker
from goheft.report import SizeReportBuilder

log = structlog.get_logger("goheft.pipeline")


@dataclass
class PipelineResult:
    """Pipeline return value.

    ``report`` is None when the work dir held no packages.
    """

    report: LibraryReport | None
    work_dir: str | None
    package_count: int = 0


def remove_workspace(work_dir: str | None) -> None:
    """Best-effort removal of the go build work dir."""
    if not work_dir:
        return
    try:
        shutil.rmtree(work_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("pipeline.cleanup_failed", work_dir=work_dir, error=str(e))
    else:
        log.debug("pipeline.cleanup", work_dir=work_dir)


class HeftPipeline:
    """
    Run the three-phase size analysis:

    Phase 1: GoBuilder.build()          -> work dir
    Phase 2: WorkspaceScanner.scan()    -> {package: archive}
    Phase 3: SizeReportBuilder.build()  -> LibraryReport

    The work dir is removed on every exit path.
    """

    def __init__(
        self,
        config: HeftConfig | None = None,
        builder: GoBuilder | None = None,
        scanner: WorkspaceScanner | None = None,
        report_builder: SizeReportBuilder | None = None,
        progress: ProgressTracker | None = None,
    ) -> None:
        self.config = config or HeftConfig()
        self.builder = builder or GoBuilder(self.config.go_binary)
        self.scanner = scanner or WorkspaceScanner(self.config.descriptor_name)
        self.report_builder = report_builder or SizeReportBuilder()
        self.progress = progress or ProgressTracker()

    def run(
        self,
        source_file: str | Path,
        tags: Iterable[str] = (),
        min_size: int = 0,
    ) -> PipelineResult:
        """Size every package linked into *source_file*.

        Raises:
            InputNotFoundError: source_file does not exist; go is not run.
            HeftError: any build, scan or stat failure. The work dir is
                removed before the error propagates, including on
                KeyboardInterrupt.
        """
        if not Path(source_file).exists():
            raise InputNotFoundError(str(source_file))

        progress = self.progress
        work_dir: str | None = None
        try:
            with progress.phase("build") as phase:
                try:
                    build = self.builder.build(source_file, tags, on_package=progress.note_package)
                except BaseException as e:
                    work_dir = getattr(e, "work_dir", None)
                    raise
                work_dir = build.work_dir
                phase.detail = f"{len(build.packages)} packages compiled"

            with progress.phase("scan") as phase:
                table = self.scanner.scan(work_dir)
                phase.detail = f"{len(table)} packages linked"

            if not table:
                log.warning("pipeline.no_archives", work_dir=work_dir)
                progress.skip("report", "no archives found")
                return PipelineResult(report=None, work_dir=work_dir)

            with progress.phase("report") as phase:
                report = self.report_builder.build(table, min_size=min_size)
                phase.detail = f"{report.count} entries"

            return PipelineResult(report=report, work_dir=work_dir, package_count=len(table))
        finally:
            remove_workspace(work_dir)
            log.debug("pipeline.summary", **progress.summary())
