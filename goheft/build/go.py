"""Run ``go build`` with a preserved work dir and follow its -v output.

``go build -work -a -v`` prints the work directory first, then one line
per package it compiles, all on stderr:

    WORK=/tmp/go-build2791367841
    internal/goarch
    internal/abi
    ...

The stream is consumed by a single reader thread while the main thread
waits for the process to exit.
"""

from __future__ import annotations

import re
import subprocess
import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Callable, Iterable

import structlog

from goheft.build.importcfg import normalize_package_name
from goheft.exceptions import BuildError, BuildStartError

log = structlog.get_logger("goheft.build")

WORK_PREFIX = "WORK="
FATAL_PREFIX = "can't load package"

# Lines of go build output kept for error messages
_DIAGNOSTIC_LINES = 50

_TAG_SPLIT_RE = re.compile(r"[\s,]+")


def join_tags(tags: Iterable[str]) -> str:
    """Join build tags into the comma-separated form ``-tags`` expects.

    Each item may itself hold several tags separated by spaces or commas.
    """
    parts: list[str] = []
    for tag in tags:
        parts.extend(t for t in _TAG_SPLIT_RE.split(tag) if t)
    return ",".join(parts)


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    work_dir: str
    command: list[str]
    packages: list[str] = field(default_factory=list)


class _OutputReader:
    """Consume go build stderr: capture WORK=, report packages, spot failures."""

    def __init__(self, stream: IO[str], on_package: Callable[[str], None] | None) -> None:
        self.stream = stream
        self.on_package = on_package
        self.work_dir: str | None = None
        self.fatal_line: str | None = None
        self.packages: list[str] = []
        self.diagnostics: deque[str] = deque(maxlen=_DIAGNOSTIC_LINES)
        self._first_line = True

    def run(self) -> None:
        for raw in self.stream:
            self._handle(raw.rstrip("\r\n"))

    def _handle(self, line: str) -> None:
        if self._first_line:
            self._first_line = False
            if line.startswith(WORK_PREFIX):
                self.work_dir = line.partition("=")[2]
                log.debug("build.work_dir", work_dir=self.work_dir)
                return

        self.diagnostics.append(line)

        # After a fatal error go only prints diagnostics; keep draining so
        # the child never blocks on a full pipe.
        if self.fatal_line is not None:
            return
        if line.startswith(FATAL_PREFIX):
            self.fatal_line = line
            log.debug("build.fatal", line=line)
            return
        # "# pkg" headers precede compiler errors for that package
        if line.startswith("#"):
            return

        name = normalize_package_name(line)
        self.packages.append(name)
        if self.on_package is not None:
            try:
                self.on_package(name)
            except Exception:
                log.debug("build.package_callback_error", package=name, exc_info=True)

    @property
    def output(self) -> str:
        return "\n".join(self.diagnostics)


class GoBuilder:
    """Run a full, verbose, work-preserving go build for one source file."""

    def __init__(self, go_binary: str = "go") -> None:
        self.go_binary = go_binary

    def command(self, source_file: str | Path, tags: Iterable[str] = ()) -> list[str]:
        cmd = [self.go_binary, "build", "-work", "-a", "-v"]
        joined = join_tags(tags)
        if joined:
            cmd += ["-tags", joined]
        cmd.append(str(source_file))
        return cmd

    def build(
        self,
        source_file: str | Path,
        tags: Iterable[str] = (),
        on_package: Callable[[str], None] | None = None,
    ) -> BuildResult:
        """Build *source_file* and return the preserved work directory.

        Blocks until go exits; there is no timeout.

        Args:
            source_file: Go file (or package path) to build.
            tags: Build tags, forwarded as a single ``-tags a,b`` flag.
            on_package: Called from the reader thread with each package
                name as go compiles it.

        Raises:
            BuildStartError: go could not be launched.
            BuildError: go exited nonzero, never reported a work dir, or
                the wait was interrupted by an error. ``work_dir`` is set
                on the exception when it is known so the caller can still
                remove it. A KeyboardInterrupt propagates as is, with
                ``work_dir`` attached, after go has been killed.
        """
        cmd = self.command(source_file, tags)
        log.info("build.started", command=" ".join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise BuildStartError(f"Can't start build process: {e}") from e

        reader = _OutputReader(proc.stderr, on_package)
        thread = threading.Thread(target=reader.run, name="go-build-output", daemon=True)
        thread.start()

        try:
            returncode = proc.wait()
            thread.join()
        except BaseException as e:
            proc.kill()
            proc.wait()
            thread.join()
            log.info("build.interrupted", work_dir=reader.work_dir)
            if isinstance(e, Exception):
                raise BuildError(
                    f"go build interrupted: {e}",
                    output=reader.output[-1000:],
                    work_dir=reader.work_dir,
                ) from e
            # KeyboardInterrupt and SystemExit keep their type
            e.work_dir = reader.work_dir  # type: ignore[attr-defined]
            raise
        finally:
            proc.stderr.close()

        if returncode != 0:
            detail = reader.fatal_line or (reader.diagnostics[-1] if reader.diagnostics else "")
            message = f"go build failed (exit {returncode})"
            if detail:
                message += f": {detail}"
            log.info("build.failed", returncode=returncode, work_dir=reader.work_dir)
            raise BuildError(
                message,
                returncode=returncode,
                output=reader.output[-1000:],
                work_dir=reader.work_dir,
            )

        if not reader.work_dir:
            raise BuildError(
                "go build did not report a work directory",
                returncode=returncode,
                output=reader.output[-1000:],
            )

        log.info("build.completed", work_dir=reader.work_dir, packages=len(reader.packages))
        return BuildResult(work_dir=reader.work_dir, command=cmd, packages=reader.packages)
