"""JSON formatter, shaped like a run archive."""

from __future__ import annotations

import json

from ..models.result import AuditReport


def render_json(report: AuditReport) -> str:
    document = {
        "version": "1.0.0",
        "run": {
            "title": report.title,
            "hostname": report.hostname,
            "timestamp": report.generated_at.isoformat(timespec="seconds"),
            "toolVersion": report.tool_version,
        },
        "summary": report.summary.model_dump(),
        "results": [r.model_dump(mode="json", by_alias=True) for r in report.results],
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
