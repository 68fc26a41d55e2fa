"""Derived stopwatch values.

Pure functions of ``(elapsed, running, laps)``. Nothing here keeps state, so
the engine recomputes them for every snapshot instead of caching.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..events import Lap


def completed_duration(laps: Sequence[Lap]) -> int:
    return sum(lap.duration for lap in laps)


def current_lap_time(elapsed: int, laps: Sequence[Lap]) -> int:
    """Time accrued since the last lap boundary."""
    if not laps:
        return elapsed
    return elapsed - completed_duration(laps)


def average_completed(laps: Sequence[Lap]) -> float:
    if not laps:
        return 0
    return completed_duration(laps) / len(laps)


def overall_average(elapsed: int, running: bool, laps: Sequence[Lap]) -> float:
    """Mean lap time counting the unrecorded segment as one more lap while running."""
    if not laps:
        return elapsed if running else 0
    if running:
        return elapsed / (len(laps) + 1)
    return average_completed(laps)


def min_max_laps(laps: Sequence[Lap]) -> Tuple[Optional[int], Optional[int]]:
    """Return the indexes of the shortest and longest laps.

    Both are ``None`` until at least two laps exist. Ties go to the earliest lap.
    """
    if len(laps) < 2:
        return None, None
    fastest = slowest = laps[0]
    for lap in laps[1:]:
        if lap.duration < fastest.duration:
            fastest = lap
        if lap.duration > slowest.duration:
            slowest = lap
    return fastest.index, slowest.index


__all__ = [
    "average_completed",
    "completed_duration",
    "current_lap_time",
    "min_max_laps",
    "overall_average",
]
