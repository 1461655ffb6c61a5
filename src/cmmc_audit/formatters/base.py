"""Report rendering dispatch and file output.

Every renderer takes an AuditReport and returns the complete document as a
string. The document is built in memory before anything touches disk, so a
report file is either written whole or not at all.
"""

from __future__ import annotations

import os
import socket
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .. import __version__
from ..models.result import AuditReport, ControlCheckResult
from ..utils.sanitize import sanitize_error
from .csv_report import render_csv
from .html import render_html
from .json_report import render_json
from .junit import render_junit

DEFAULT_TITLE = "CMMC 2.0 Compliance Report"


class ReportFormat(str, Enum):
    HTML = "HTML"
    CSV = "CSV"
    JSON = "JSON"
    JUNIT = "JUNIT"

    @classmethod
    def parse(cls, value: Union[str, "ReportFormat"]) -> "ReportFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown report format: {value}") from None


RENDERERS: dict[ReportFormat, Callable[[AuditReport], str]] = {
    ReportFormat.HTML: render_html,
    ReportFormat.CSV: render_csv,
    ReportFormat.JSON: render_json,
    ReportFormat.JUNIT: render_junit,
}


class RenderFailure(Exception):
    """The report file could not be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot write report to {path}: {reason}")
        self.path = path
        self.reason = reason


def build_report(
    results: Iterable[ControlCheckResult],
    title: str = DEFAULT_TITLE,
    hostname: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> AuditReport:
    return AuditReport(
        title=title,
        hostname=socket.gethostname() if hostname is None else hostname,
        generated_at=generated_at or datetime.now(),
        tool_version=__version__,
        results=tuple(results),
    )


def write_report_file(content: str, output_path: Path) -> Path:
    """Write content to output_path, replacing any existing file.

    The parent directory must already exist. Content goes to a temporary
    sibling first and is moved into place once fully written.
    """
    tmp_path = output_path.with_name(f".{output_path.name}.tmp")
    try:
        tmp_path.write_bytes(content.encode("utf-8"))
        os.replace(tmp_path, output_path)
    except OSError as e:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise RenderFailure(output_path, sanitize_error(e.strerror or str(e))) from e
    return output_path


def render_report(
    results: Iterable[ControlCheckResult],
    fmt: Union[str, ReportFormat],
    output_path: Union[str, Path],
    title: str = DEFAULT_TITLE,
    hostname: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Render results in the given format and write them to output_path.

    Returns the resolved path of the written file. Raises RenderFailure when
    the file cannot be written and ValueError for an unknown format.
    """
    report_format = ReportFormat.parse(fmt)
    report = build_report(results, title=title, hostname=hostname, generated_at=generated_at)
    content = RENDERERS[report_format](report)
    path = Path(output_path).expanduser().resolve()
    return write_report_file(content, path)
