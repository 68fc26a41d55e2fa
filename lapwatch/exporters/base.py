"""Shared pieces of the lap exporters."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.events import Lap, StopwatchState

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def iso_timestamp(epoch_ms: int) -> str:
    """``2024-05-01T12:00:01.500Z`` style UTC timestamp, millisecond precision."""
    ts = EPOCH + timedelta(milliseconds=epoch_ms)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LapReport(BaseModel):
    """Everything an exporter needs, decoupled from the live engine."""

    laps: List[Lap] = Field(default_factory=list)
    average_completed: float = 0
    overall_average: float = 0
    elapsed: int = 0
    started_at_ms: Optional[int] = None

    @classmethod
    def from_state(cls, state: StopwatchState) -> "LapReport":
        return cls(
            laps=list(state.laps),
            average_completed=state.average_completed,
            overall_average=state.overall_average,
            elapsed=state.elapsed,
            started_at_ms=state.started_at_ms,
        )

    def lap_timestamp(self, lap: Lap) -> str:
        return iso_timestamp((self.started_at_ms or 0) + lap.total_time)


class LapExporter:
    """Base class: subclasses implement :meth:`_render`.

    Exporting an empty lap list produces nothing: :meth:`render` returns
    ``None`` and :meth:`write` creates no file.
    """

    name = ""
    extension = ""
    media_type = "text/plain"
    prefix = "stopwatch_laps"

    def filename(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"{self.prefix}_{now.strftime('%Y-%m-%d')}.{self.extension}"

    def render(self, report: LapReport) -> Optional[str]:
        if not report.laps:
            logger.debug("%s export skipped: no laps", self.name)
            return None
        return self._render(report)

    def _render(self, report: LapReport) -> str:
        raise NotImplementedError

    def write(self, report: LapReport, directory: Path, now: Optional[datetime] = None) -> Optional[Path]:
        content = self.render(report)
        if content is None:
            return None
        directory.mkdir(parents=True, exist_ok=True)
        out = directory / self.filename(now)
        out.write_text(content, encoding="utf-8")
        logger.info("exported %d laps to %s", len(report.laps), out)
        return out


__all__ = ["LapExporter", "LapReport", "iso_timestamp"]
