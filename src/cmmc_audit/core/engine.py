"""Check engine: runs the control checks in order against a probe."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from ..models.result import AuditSummary, ControlCheckResult, ControlStatus
from ..probes.base import ObservationFailure, SystemProbe
from ..utils.sanitize import sanitize_error
from .checks import CHECKS, ControlCheck

console = Console()


def run_check(
    check: ControlCheck,
    probe: SystemProbe,
    options: Optional[dict] = None,
    verbose: bool = False,
) -> ControlCheckResult:
    """Observe, normalize and evaluate a single check. Never raises."""
    options = options or {}
    try:
        observed = check.observe(probe, options)
        if observed is None:
            current, passed = check.absent_setting, check.absent_passes
        else:
            current, passed = check.evaluate(observed)
    except ObservationFailure as e:
        if verbose:
            console.print(f"  [yellow]WARN[/yellow] {check.control_id} {check.description}: {escape(str(e))}")
        current, passed = check.absent_setting, check.absent_passes
    except Exception as e:
        console.print(
            f"  [yellow]WARN[/yellow] {check.control_id} {check.description}: "
            f"unexpected error: {escape(sanitize_error(str(e)))}"
        )
        current, passed = check.absent_setting, check.absent_passes

    return ControlCheckResult(
        control_family=check.family,
        control_id=check.control_id,
        description=check.description,
        current_setting=current,
        compliant_setting=check.compliant_setting,
        status=ControlStatus.PASS if passed else ControlStatus.FAIL,
    )


def run_checks(
    probe: SystemProbe,
    checks: Iterable[ControlCheck] = CHECKS,
    options: Optional[dict] = None,
    verbose: bool = False,
    on_result: Optional[Callable[[ControlCheckResult], None]] = None,
) -> list[ControlCheckResult]:
    """Run every check in order and return one result per check."""
    results: list[ControlCheckResult] = []
    for check in checks:
        result = run_check(check, probe, options, verbose=verbose)
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results


def summarize(results: Iterable[ControlCheckResult]) -> AuditSummary:
    return AuditSummary.from_results(list(results))
