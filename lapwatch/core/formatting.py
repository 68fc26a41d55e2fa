"""Clock-face formatting for millisecond values."""

from __future__ import annotations

MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000
MINUTES_PER_HOUR = 60


def format_time(ms: float) -> str:
    """Format ``ms`` as ``MM:SS.CC`` (minutes, seconds, centiseconds).

    Every field is truncated, never rounded. The minutes field is the minutes
    of the hour, so it wraps back to ``00`` after 59.

    >>> format_time(65432)
    '01:05.43'
    """
    total = max(0, int(ms))
    minutes = (total // MS_PER_MINUTE) % MINUTES_PER_HOUR
    seconds = (total // MS_PER_SECOND) % 60
    centis = (total % MS_PER_SECOND) // 10
    return f"{minutes:02d}:{seconds:02d}.{centis:02d}"


__all__ = ["format_time"]
