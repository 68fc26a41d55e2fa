from __future__ import annotations

import json

from .base import LapExporter, LapReport


class JsonlLapExporter(LapExporter):
    """One JSON object per lap, then a single summary line."""

    name = "jsonl"
    extension = "jsonl"
    media_type = "application/x-ndjson"

    def _render(self, report: LapReport) -> str:
        lines = []
        for lap in report.laps:
            payload = {"kind": "lap", **lap.model_dump(), "timestamp": report.lap_timestamp(lap)}
            lines.append(json.dumps(payload, ensure_ascii=False))
        summary = {
            "kind": "summary",
            "laps": len(report.laps),
            "average_completed": report.average_completed,
            "overall_average": report.overall_average,
            "elapsed": report.elapsed,
            "started_at_ms": report.started_at_ms,
        }
        lines.append(json.dumps(summary, ensure_ascii=False))
        return "\n".join(lines) + "\n"
