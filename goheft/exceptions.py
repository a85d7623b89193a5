"""Custom exceptions for goheft."""

from __future__ import annotations


class HeftError(Exception):
    """Base exception for all goheft errors."""


class InputNotFoundError(HeftError):
    """Raised when the source file to build does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Can't build binary - file {path} does not exist")


class BuildStartError(HeftError):
    """Raised when the go build process cannot be launched."""

    def __init__(self, message: str, work_dir: str | None = None):
        self.work_dir = work_dir
        super().__init__(message)


class BuildError(HeftError):
    """Raised when go build exits with a nonzero status."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        output: str = "",
        work_dir: str | None = None,
    ):
        self.returncode = returncode
        self.output = output
        self.work_dir = work_dir
        super().__init__(message)


class DescriptorReadError(HeftError):
    """Raised when a package importcfg file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Can't read {path}: {reason}")


class ResolutionError(HeftError):
    """Raised when an archive referenced by importcfg cannot be stat'ed."""

    def __init__(self, package: str, path: str, reason: str):
        self.package = package
        self.path = path
        super().__init__(f"Can't get size of {package} archive ({path}): {reason}")
