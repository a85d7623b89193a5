"""Parser for the importcfg files go build leaves in each package work dir.

An importcfg file mixes several directives, one per line:

    # import config
    packagefile fmt=/tmp/go-build123/b002/_pkg_.a
    packagefile github.com/acme/app/vendor/golang.org/x/sys/unix=/tmp/go-build123/b044/_pkg_.a
    importmap golang.org/x/net=vendor/golang.org/x/net

Only ``packagefile`` lines are of interest.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from goheft.exceptions import DescriptorReadError

log = structlog.get_logger("goheft.build")

_PACKAGEFILE = "packagefile "
_VENDOR = "vendor/"


def normalize_package_name(name: str) -> str:
    """Strip a vendoring prefix so vendored packages keep their import path."""
    idx = name.find(_VENDOR)
    if idx == -1:
        return name
    return name[idx + len(_VENDOR) :]


class ImportcfgParser:
    """Extract (package, archive path) pairs from one importcfg file."""

    def parse(self, path: str | Path) -> list[tuple[str, str]]:
        """Parse *path* and return every packagefile pair in file order.

        Duplicates are kept; deduplication happens across files in
        :class:`~goheft.build.workspace.WorkspaceScanner`.

        Raises:
            DescriptorReadError: the file cannot be opened or read.
        """
        pairs: list[tuple[str, str]] = []
        try:
            with open(path, encoding="utf-8", errors="replace") as fh:
                for line in fh:
                    pair = self._parse_line(line.rstrip("\r\n"))
                    if pair is not None:
                        pairs.append(pair)
        except OSError as e:
            raise DescriptorReadError(str(path), e.strerror or str(e)) from e
        return pairs

    @staticmethod
    def _parse_line(line: str) -> tuple[str, str] | None:
        if not line.startswith(_PACKAGEFILE):
            return None
        raw_name, sep, archive = line[len(_PACKAGEFILE) :].partition("=")
        if not sep:
            log.debug("importcfg.malformed_line", line=line)
            return None
        return normalize_package_name(raw_name), archive
