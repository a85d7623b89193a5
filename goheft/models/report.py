"""Data models for the library size report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class LibraryEntry:
    """One compiled package and the size of its archive."""

    name: str  # normalized import path, e.g. golang.org/x/sys/unix
    size: int  # archive size in bytes

    @property
    def is_stdlib(self) -> bool:
        # Standard library import paths contain no dot anywhere
        return "." not in self.name


@dataclass(frozen=True)
class LibraryReport:
    """Libraries ordered by size, largest first.

    ``total`` is only set for the unfiltered view; when a minimum size was
    applied it is None.
    """

    entries: tuple[LibraryEntry, ...] = field(default_factory=tuple)
    total: int | None = 0
    min_size: int = 0

    @property
    def count(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LibraryEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
