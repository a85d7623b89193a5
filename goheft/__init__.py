"""goheft: list sizes of the static libraries linked into a Go binary."""

__version__ = "0.8.0"

from goheft.build.go import BuildResult, GoBuilder
from goheft.build.importcfg import ImportcfgParser, normalize_package_name
from goheft.build.workspace import WorkspaceScanner
from goheft.models.report import LibraryEntry, LibraryReport
from goheft.pipeline import HeftPipeline, PipelineResult
from goheft.report import SizeReportBuilder

__all__ = [
    "BuildResult",
    "GoBuilder",
    "HeftPipeline",
    "ImportcfgParser",
    "LibraryEntry",
    "LibraryReport",
    "PipelineResult",
    "SizeReportBuilder",
    "WorkspaceScanner",
    "normalize_package_name",
]
