"""Main audit orchestrator: configuration -> checks -> report."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..formatters.base import RenderFailure, ReportFormat, render_report
from ..models.result import ControlCheckResult
from ..probes.base import get_probe
from .config import get_effective_config
from .engine import run_checks, summarize

console = Console()

EXIT_OK = 0
EXIT_RENDER_FAILED = 1
EXIT_CONFIG_ERROR = 2


def _print_result(result: ControlCheckResult) -> None:
    marker = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
    console.print(
        f"  {marker} {result.control_id:<7} {result.description} "
        f"[dim]({escape(result.current_setting)})[/dim]"
    )


def run_audit(
    output_path: Path,
    output_format: Optional[str] = None,
    verbose: bool = False,
    config_path: Optional[Path] = None,
    snapshot: Optional[Path] = None,
    title: Optional[str] = None,
) -> int:
    """Run every control check and write the report. Returns exit code.

    Only a report that cannot be produced (or a configuration error) gives
    a non-zero exit; non-compliant controls do not.
    """
    start_time = time.time()

    cli_overrides: dict = {}
    if output_format:
        cli_overrides.setdefault("report", {})["format"] = output_format
    if title:
        cli_overrides.setdefault("report", {})["title"] = title
    if snapshot:
        cli_overrides["probe"] = {"type": "snapshot", "snapshot": str(snapshot)}

    config = get_effective_config(config_path, cli_overrides=cli_overrides or None)
    report_config = config.get("report") or {}

    try:
        report_format = ReportFormat.parse(report_config.get("format", "HTML"))
        probe = get_probe(config)
    except ValueError as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}", soft_wrap=True)
        return EXIT_CONFIG_ERROR

    # Banner
    console.print()
    console.print(f"  [bold cyan]CMMC AUDIT[/bold cyan] v{__version__}")
    console.print(f"  Probe:  [white]{probe.name}[/white]")
    console.print(f"  Format: [white]{report_format.value}[/white]")
    if config.get("_config_path"):
        console.print(f"  Config: [white]{escape(config['_config_path'])}[/white]")
    console.print()

    console.print("  [cyan]Running control checks...[/cyan]")
    results = run_checks(
        probe,
        options=config.get("probe") or {},
        verbose=verbose,
        on_result=_print_result if verbose else None,
    )

    summary = summarize(results)
    color = "green" if summary.failed == 0 else "yellow"
    console.print(
        f"  [{color}]{summary.passed}/{summary.total} controls passed[/{color}] "
        f"({summary.failed} failed) in {round(time.time() - start_time, 1)}s"
    )

    try:
        written = render_report(
            results,
            report_format,
            output_path,
            title=report_config.get("title") or "CMMC 2.0 Compliance Report",
        )
    except RenderFailure as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}", soft_wrap=True)
        return EXIT_RENDER_FAILED

    if verbose:
        console.print(f"  [green]OK[/green] Report generated: {escape(str(written))}", soft_wrap=True)
    console.print()
    return EXIT_OK
