"""Timing engine: elapsed-time accounting, laps and the periodic refresh.

The engine owns all session state. Readers get immutable
:class:`~lapwatch.core.events.StopwatchState` snapshots; writers go through the
four commands :meth:`TimingEngine.toggle_run`, :meth:`TimingEngine.reset`,
:meth:`TimingEngine.record_lap` and :meth:`TimingEngine.complete_lap`.

Commands never raise for an invalid precondition. Lapping a stopped clock or
completing an untouched one is simply a no-op that returns ``None``.

While running, a :class:`~lapwatch.core.timing.ticker.Ticker` samples the clock
every ``tick_interval_ms``. At most one ticker exists; it is cancelled when the
clock stops and replaced when it starts again.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Tuple

from ...sdk.ids import new_ulid, now_monotonic_ms, now_utc_ms
from ..events import Event, Lap, StopwatchState, event_dump
from . import stats
from .ticker import Ticker

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
Listener = Callable[[StopwatchState], None]

DEFAULT_TICK_MS = 10


class TimingEngine:
    def __init__(
        self,
        clock: Optional[Clock] = None,
        wall_clock: Optional[Clock] = None,
        tick_interval_ms: Optional[int] = DEFAULT_TICK_MS,
        journal=None,
    ) -> None:
        """
        Args:
            clock: monotonic millisecond source used for elapsed time
            wall_clock: epoch millisecond source used for ``started_at_ms``
            tick_interval_ms: refresh period while running; ``None`` disables
                the background ticker (callers drive :meth:`tick` themselves)
            journal: optional writer with ``write(dict)``, receives one event
                per state-changing command
        """
        self._clock = clock or now_monotonic_ms
        self._wall_clock = wall_clock or now_utc_ms
        self._tick_interval_ms = tick_interval_ms
        self._journal = journal

        self._lock = threading.Lock()
        self._ticker_lock = threading.Lock()
        self._ticker: Optional[Ticker] = None
        self._listeners: List[Listener] = []

        self._clear()

    def _clear(self) -> None:
        self._session_id = new_ulid()
        self._elapsed = 0
        self._running = False
        self._laps: List[Lap] = []
        self._reference_start = 0
        self._started_at_ms: Optional[int] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def elapsed(self) -> int:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._running

    @property
    def laps(self) -> Tuple[Lap, ...]:
        return tuple(self._laps)

    def snapshot(self) -> StopwatchState:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> StopwatchState:
        laps = list(self._laps)
        min_lap, max_lap = stats.min_max_laps(laps)
        return StopwatchState(
            session_id=self._session_id,
            elapsed=self._elapsed,
            running=self._running,
            laps=laps,
            started_at_ms=self._started_at_ms,
            current_lap_time=stats.current_lap_time(self._elapsed, laps),
            average_completed=stats.average_completed(laps),
            overall_average=stats.overall_average(self._elapsed, self._running, laps),
            min_lap=min_lap,
            max_lap=max_lap,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def toggle_run(self) -> StopwatchState:
        with self._lock:
            self._sample()
            if self._running:
                self._running = False
                kind = "pause"
            else:
                # resume from the frozen value rather than from zero
                self._reference_start = self._clock() - self._elapsed
                self._running = True
                if self._started_at_ms is None:
                    self._started_at_ms = self._wall_clock() - self._elapsed
                kind = "start"
            logger.debug("%s at elapsed=%dms", kind, self._elapsed)
            self._record(kind, {"elapsed": self._elapsed})
            state = self._snapshot()
        self._sync_ticker()
        self._notify(state)
        return state

    def reset(self) -> StopwatchState:
        with self._lock:
            previous = self._session_id
            self._clear()
            self._record("reset", {"previous_session": previous})
            state = self._snapshot()
        self._sync_ticker()
        logger.info("session reset (was %s)", previous)
        self._notify(state)
        return state

    def record_lap(self) -> Optional[Lap]:
        """Close the current lap and keep the clock running."""
        with self._lock:
            if not self._running:
                logger.debug("lap ignored: clock is not running")
                return None
            self._sample()
            lap = self._append_lap()
            self._record("lap", lap.model_dump())
            state = self._snapshot()
        self._notify(state)
        return lap

    def complete_lap(self) -> Optional[Lap]:
        """Close the current lap and stop the clock."""
        with self._lock:
            if not self._running and self._elapsed <= 0:
                logger.debug("complete ignored: nothing has been timed")
                return None
            self._sample()
            lap = self._append_lap()
            self._running = False
            self._record("complete", lap.model_dump())
            state = self._snapshot()
        self._sync_ticker()
        self._notify(state)
        return lap

    def tick(self) -> StopwatchState:
        """Sample the clock. Called by the ticker; harmless while stopped."""
        with self._lock:
            running = self._running
            if running:
                self._sample()
            state = self._snapshot()
        if running:
            self._notify(state)
        return state

    # ------------------------------------------------------------------
    # Listeners / lifecycle
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        with self._ticker_lock:
            if self._ticker is not None:
                self._ticker.cancel()
                self._ticker = None

    def __enter__(self) -> "TimingEngine":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals (callers hold self._lock)
    # ------------------------------------------------------------------
    def _sample(self) -> None:
        if not self._running:
            return
        value = self._clock() - self._reference_start
        if value > self._elapsed:
            self._elapsed = value

    def _append_lap(self) -> Lap:
        lap = Lap(
            index=len(self._laps) + 1,
            duration=self._elapsed - stats.completed_duration(self._laps),
            total_time=self._elapsed,
        )
        self._laps.append(lap)
        logger.info("lap %d: %dms (total %dms)", lap.index, lap.duration, lap.total_time)
        return lap

    def _record(self, kind: str, data: dict) -> None:
        if self._journal is None:
            return
        self._journal.write(event_dump(Event(kind=kind, session=self._session_id, data=data)))

    def _sync_ticker(self) -> None:
        if self._tick_interval_ms is None:
            return
        with self._ticker_lock:
            if self._ticker is not None:
                self._ticker.cancel()
                self._ticker = None
            if self._running:
                self._ticker = Ticker(self._tick_interval_ms / 1000.0, self.tick)
                self._ticker.start()

    def _notify(self, state: StopwatchState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("stopwatch listener %r failed", listener)


__all__ = ["TimingEngine", "DEFAULT_TICK_MS"]
