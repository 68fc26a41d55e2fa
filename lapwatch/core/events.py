"""Core models shared across the project: laps, state snapshots, journal events."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..sdk.ids import new_ulid, now_utc_ms


def now_ts_ms() -> int:
    """Return the current wall-clock timestamp in milliseconds."""

    return now_utc_ms()


def new_event_id() -> str:
    """Generate a ULID based identifier for events and laps."""

    return new_ulid()


class Lap(BaseModel):
    """A recorded segment of elapsed time. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1)
    duration: int = Field(ge=0)
    total_time: int = Field(ge=0)
    id: str = Field(default_factory=new_event_id)


class StopwatchState(BaseModel):
    """Immutable snapshot of a timing session plus its derived values.

    ``laps`` is in creation order (index 1 first); display order is left to
    the presentation layer.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    elapsed: int = 0
    running: bool = False
    laps: List[Lap] = Field(default_factory=list)
    started_at_ms: Optional[int] = None
    current_lap_time: int = 0
    average_completed: float = 0
    overall_average: float = 0
    min_lap: Optional[int] = None
    max_lap: Optional[int] = None


class Event(BaseModel):
    """Journal entry emitted by the engine for every state-changing command."""

    id: str = Field(default_factory=new_event_id)
    ts_ms: int = Field(default_factory=now_ts_ms)
    kind: Literal["start", "pause", "reset", "lap", "complete"]
    session: str
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")


def event_dump(event: BaseModel) -> Dict[str, Any]:
    """Return a JSON-serialisable ``dict`` for any of the models above."""

    return event.model_dump(mode="json")


__all__ = [
    "Event",
    "Lap",
    "StopwatchState",
    "event_dump",
    "now_ts_ms",
    "new_event_id",
]
