"""Standalone HTML formatter with pass/fail row colouring."""

from __future__ import annotations

from html import escape

from ..models.result import AuditReport, ControlCheckResult

COLUMNS = [
    "Control Family",
    "Control ID",
    "Description",
    "Current Setting",
    "Compliant Setting",
    "Status",
]

STYLESHEET = """\
body { font-family: Segoe UI, Arial, sans-serif; margin: 2em; color: #212529; }
h1 { font-size: 1.5em; }
.meta { color: #6c757d; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #dee2e6; padding: 6px 10px; text-align: left; }
th { background-color: #343a40; color: #ffffff; }
tr.pass { background-color: #d4edda; }
tr.fail { background-color: #f8d7da; }
"""


def _row_class(result: ControlCheckResult) -> str:
    return "pass" if result.status.value == "PASS" else "fail"


def _render_row(result: ControlCheckResult) -> str:
    cells = [
        result.control_family,
        result.control_id,
        result.description,
        result.current_setting,
        result.compliant_setting,
        result.status.value,
    ]
    tds = "".join(f"<td>{escape(cell)}</td>" for cell in cells)
    return f'      <tr class="{_row_class(result)}">{tds}</tr>'


def render_html(report: AuditReport) -> str:
    summary = report.summary
    timestamp = report.generated_at.strftime("%Y-%m-%d %H:%M:%S")

    lines: list[str] = []
    lines.append("<!DOCTYPE html>")
    lines.append('<html lang="en">')
    lines.append("<head>")
    lines.append('  <meta charset="utf-8">')
    lines.append(f"  <title>{escape(report.title)}</title>")
    lines.append("  <style>")
    lines.append(STYLESHEET.rstrip("\n"))
    lines.append("  </style>")
    lines.append("</head>")
    lines.append("<body>")
    lines.append(f"  <h1>{escape(report.title)}</h1>")
    meta = f"Host: {report.hostname or 'unknown'} | Generated: {timestamp}"
    if report.tool_version:
        meta += f" | cmmc-audit v{report.tool_version}"
    lines.append(f'  <p class="meta">{escape(meta)}</p>')
    lines.append(
        f'  <p class="summary">{summary.passed} passed, {summary.failed} failed, '
        f"{summary.total} total</p>"
    )
    lines.append("  <table>")
    lines.append("    <thead>")
    lines.append("      <tr>" + "".join(f"<th>{escape(c)}</th>" for c in COLUMNS) + "</tr>")
    lines.append("    </thead>")
    lines.append("    <tbody>")
    for result in report.results:
        lines.append(_render_row(result))
    lines.append("    </tbody>")
    lines.append("  </table>")
    lines.append("</body>")
    lines.append("</html>")
    return "\n".join(lines) + "\n"
