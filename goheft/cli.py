"""CLI entry point: goheft.

    goheft application.go               # size of each linked library
    goheft application.go -m 750kb      # only libraries of 750kb or more
    goheft application.go -t "json1 fts5" --raw
"""

from __future__ import annotations

import sys

import click

from goheft import __version__
from goheft.core.config import HeftConfig
from goheft.core.logging import setup_logging
from goheft.exceptions import HeftError
from goheft.formatting import parse_size, pretty_size, size_color
from goheft.models.report import LibraryReport
from goheft.pipeline import HeftPipeline
from goheft.progress import PhaseProgress, ProgressTracker

_PHASE_MESSAGES = {
    "build": "Processing sources…",
    "scan": "Reading importcfg files…",
    "report": "Measuring archives…",
}


def _stdout_is_tty() -> bool:
    return sys.stdout.isatty()


class _StatusLine:
    """Single, rewritable status line on stderr."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def show(self, text: str) -> None:
        if self.enabled:
            click.echo(f"\r\033[K{text}", err=True, nl=False)

    def follow_phase(self, phase: PhaseProgress) -> None:
        if phase.status == "running" and phase.phase in _PHASE_MESSAGES:
            self.show(_PHASE_MESSAGES[phase.phase])

    def clear(self) -> None:
        if self.enabled:
            click.echo("\r\033[K", err=True, nl=False)


def _style(text: str, use_color: bool, **styles) -> str:
    if not use_color or not styles:
        return text
    return click.style(text, **styles)


def _print_raw(report: LibraryReport) -> None:
    for lib in report:
        click.echo(f"{lib.size} {lib.name}")


def _print_report(report: LibraryReport, external: bool, use_color: bool) -> None:
    click.echo()
    for lib in report:
        size = f"{pretty_size(lib.size):>8}"
        if external and lib.is_stdlib:
            click.echo(" " + _style(f"{size}  {lib.name}", use_color, dim=True))
        else:
            click.echo(f" {_style(size, use_color, **size_color(lib.size))}  {lib.name}")

    if report.total is not None:
        total = _style("Total", use_color, bold=True)
        count = _style(f"(packages: {report.count})", use_color, dim=True)
        click.echo(f"\n {pretty_size(report.total):>8}  {total} {count}")
    click.echo()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("source_file", type=click.Path())
@click.option(
    "-t", "--tags", multiple=True, help="Build tags (space or comma separated, repeatable)"
)
@click.option("-E", "--external", is_flag=True, help="Shadow standard library packages")
@click.option("-m", "--min-size", default=None, help="Hide libraries smaller than SIZE (e.g. 750kb)")
@click.option("-r", "--raw", is_flag=True, help="Print raw data")
@click.option("--no-color", is_flag=True, help="Disable colors in output")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(__version__, "--version", prog_name="goheft")
def main(
    source_file: str,
    tags: tuple[str, ...],
    external: bool,
    min_size: str | None,
    raw: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """goheft: list sizes of the static libraries linked into a Go binary."""
    config = HeftConfig.from_env()
    setup_logging("DEBUG" if verbose else config.log_level, config.log_format)

    threshold = 0
    if min_size is not None:
        try:
            threshold = parse_size(min_size)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="'-m' / '--min-size'")

    raw = raw or not _stdout_is_tty()
    use_color = not (no_color or config.no_color or raw)

    progress = ProgressTracker()
    status = _StatusLine(enabled=not raw and not config.is_ci)
    progress.phase_listeners.append(status.follow_phase)
    progress.package_listeners.append(lambda name: status.show(f"Compiling {name}…"))

    pipeline = HeftPipeline(config=config, progress=progress)

    try:
        result = pipeline.run(source_file, tags=tags, min_size=threshold)
    except HeftError as e:
        status.clear()
        click.echo(_style(str(e), not (no_color or config.no_color), fg="red"), err=True)
        sys.exit(1)
    status.clear()

    if result.report is None:
        click.echo(_style("No *.a files are found", use_color, fg="yellow"), err=True)
        return

    if raw:
        _print_raw(result.report)
    else:
        _print_report(result.report, external=external, use_color=use_color)


if __name__ == "__main__":
    main()
