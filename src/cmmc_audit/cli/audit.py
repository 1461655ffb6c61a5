"""cmmc-audit - CMMC 2.0 / NIST SP 800-171 configuration audit.

Read-only: checks a fixed set of controls on the local host and writes a
pass/fail report.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click


@click.command(name="cmmc-audit")
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Report destination path")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["HTML", "CSV", "JSON", "JUNIT"], case_sensitive=False),
    help="Report format (default: HTML)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show each check and the written report path")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.option("--snapshot", type=click.Path(exists=True, dir_okay=False), help="Audit a recorded snapshot instead of this host")
@click.option("--title", type=str, help="Report title override")
def audit_cli(
    output: str,
    output_format: str | None,
    verbose: bool,
    config_path: str | None,
    snapshot: str | None,
    title: str | None,
) -> None:
    """Audit this host against CMMC 2.0 technical controls."""
    from ..core.auditor import run_audit

    exit_code = run_audit(
        output_path=Path(output),
        output_format=output_format.upper() if output_format else None,
        verbose=verbose,
        config_path=Path(config_path) if config_path else None,
        snapshot=Path(snapshot) if snapshot else None,
        title=title,
    )
    sys.exit(exit_code)


def main() -> None:
    audit_cli()


if __name__ == "__main__":
    main()
