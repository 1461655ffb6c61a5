"""CSV formatter: one row per result under a header of the result field names."""

from __future__ import annotations

import csv
import io

from ..models.result import RESULT_FIELDS, AuditReport


def render_csv(report: AuditReport) -> str:
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerow(RESULT_FIELDS)
    for result in report.results:
        row = result.model_dump(mode="json", by_alias=True)
        writer.writerow([row[field] for field in RESULT_FIELDS])
    return buffer.getvalue()
