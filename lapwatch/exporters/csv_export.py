from __future__ import annotations

import csv
import io
from typing import List

from ..core.formatting import format_time
from .base import LapExporter, LapReport

HEADERS = [
    "Lap Number",
    "Lap Time (ms)",
    "Lap Time (formatted)",
    "Total Time (ms)",
    "Total Time (formatted)",
    "Timestamp",
]


def _num(value: float) -> str:
    # whole averages print as 2250, not 2250.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CsvLapExporter(LapExporter):
    """Lap table plus summary rows; every cell is double-quoted."""

    name = "csv"
    extension = "csv"
    media_type = "text/csv"

    def rows(self, report: LapReport) -> List[List[str]]:
        rows: List[List[str]] = [
            [
                str(lap.index),
                str(lap.duration),
                format_time(lap.duration),
                str(lap.total_time),
                format_time(lap.total_time),
                report.lap_timestamp(lap),
            ]
            for lap in report.laps
        ]
        rows.append([])
        rows.append(["Statistics"])
        rows.append(["Average Lap Time (Completed)", _num(report.average_completed), format_time(report.average_completed)])
        rows.append(["Average Lap Time (Including Current)", _num(report.overall_average), format_time(report.overall_average)])
        rows.append(["Current Session Time", str(report.elapsed), format_time(report.elapsed)])
        return rows

    def _render(self, report: LapReport) -> str:
        buf = io.StringIO()
        csv.writer(buf, lineterminator="\n").writerow(HEADERS)
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerows(self.rows(report))
        return buf.getvalue().rstrip("\n")


__all__ = ["CsvLapExporter", "HEADERS"]
