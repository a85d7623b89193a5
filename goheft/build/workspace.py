"""Locate per-package importcfg files in a go build work directory."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from goheft.build.importcfg import ImportcfgParser
from goheft.exceptions import DescriptorReadError

log = structlog.get_logger("goheft.build")


class WorkspaceScanner:
    """Fold every package's importcfg into one package -> archive table."""

    def __init__(
        self,
        descriptor_name: str = "importcfg",
        parser: ImportcfgParser | None = None,
    ) -> None:
        self.descriptor_name = descriptor_name
        self.parser = parser or ImportcfgParser()

    def scan(self, work_dir: str | Path) -> dict[str, str]:
        """Scan *work_dir* and return ``{package: archive_path}``.

        The first archive seen for a package wins. Package directories are
        visited in sorted order, so the result is stable for a given tree.
        An empty work dir yields an empty table.

        Raises:
            DescriptorReadError: work_dir cannot be listed, or a package
                directory has no readable descriptor.
        """
        table: dict[str, str] = {}
        package_dirs = self.list_package_dirs(work_dir)

        for pkg_dir in package_dirs:
            for name, archive in self.parser.parse(pkg_dir / self.descriptor_name):
                if name not in table:
                    table[name] = archive

        log.debug(
            "workspace.scanned",
            work_dir=str(work_dir),
            dirs=len(package_dirs),
            packages=len(table),
        )
        return table

    @staticmethod
    def list_package_dirs(work_dir: str | Path) -> list[Path]:
        """Readable, traversable subdirectories of *work_dir*, sorted by name."""
        root = Path(work_dir)
        try:
            children = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DescriptorReadError(str(root), e.strerror or str(e)) from e
        return [
            child
            for child in children
            if child.is_dir() and os.access(child, os.R_OK | os.X_OK)
        ]
