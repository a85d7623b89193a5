"""Shared pytest fixtures for goheft tests."""

import json
import stat
import sys
from pathlib import Path

import pytest
import structlog

# Stand-in for the go tool: writes the work dir described in a JSON file,
# prints WORK= and the configured lines to stderr, then exits.
_FAKE_GO = """#!{python}
import json
import os
import sys

with open({spec!r}) as fh:
    spec = json.load(fh)

with open(spec["argv_file"], "w") as fh:
    json.dump(sys.argv[1:], fh)

work_dir = spec["work_dir"]
if work_dir:
    for rel, content in spec["files"].items():
        path = os.path.join(work_dir, rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as fh:
            fh.write(content)
    sys.stderr.write("WORK=" + work_dir + "\\n")

for line in spec["lines"]:
    sys.stderr.write(line + "\\n")
sys.stderr.flush()
sys.exit(spec["exit_code"])
"""


def write_workspace(root: Path, layout: dict[str, str]) -> Path:
    """Create files under *root* from ``{relative_path: content}``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in layout.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


class FakeGo:
    """Handle returned by the ``fake_go`` fixture."""

    def __init__(self, tmp_path: Path) -> None:
        self.binary = tmp_path / "fake-go"
        self.spec_file = tmp_path / "fake-go.json"
        self.argv_file = tmp_path / "fake-go-argv.json"
        self.work_dir = tmp_path / "go-build123"

    def configure(
        self,
        lines: list[str] | None = None,
        exit_code: int = 0,
        files: dict[str, str] | None = None,
        report_work_dir: bool = True,
    ) -> str:
        self.spec_file.write_text(
            json.dumps(
                {
                    "argv_file": str(self.argv_file),
                    "work_dir": str(self.work_dir) if report_work_dir else "",
                    "files": files or {},
                    "lines": lines or [],
                    "exit_code": exit_code,
                }
            )
        )
        self.binary.write_text(_FAKE_GO.format(python=sys.executable, spec=str(self.spec_file)))
        self.binary.chmod(self.binary.stat().st_mode | stat.S_IEXEC)
        return str(self.binary)

    @property
    def argv(self) -> list[str]:
        return json.loads(self.argv_file.read_text())


@pytest.fixture
def fake_go(tmp_path: Path) -> FakeGo:
    return FakeGo(tmp_path)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    src = tmp_path / "main.go"
    src.write_text("package main\n\nfunc main() {}\n")
    return src


@pytest.fixture
def make_workspace():
    return write_workspace


@pytest.fixture(autouse=True, scope="session")
def _structlog_through_stdlib():
    """Send structlog events to stdlib logging so they never reach stdout."""
    structlog.configure(
        processors=[structlog.stdlib.add_log_level, structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
