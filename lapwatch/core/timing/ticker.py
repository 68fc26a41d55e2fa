from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """
    Cancellable repeating callback on a daemon thread.
    - start() is a no-op while already active
    - cancel() stops the loop and waits for the thread to exit, unless it is
      called from inside the callback itself
    """

    def __init__(self, interval_s: float, callback: Callable[[], None], name: str = "lapwatch-ticker"):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.interval_s = interval_s
        self._callback = callback
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self.active:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop,), name=self._name, daemon=True)
        self._thread.start()

    def cancel(self, timeout: float = 1.0) -> None:
        thread = self._thread
        self._stop.set()
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval_s):
            try:
                self._callback()
            except Exception:
                logger.exception("ticker callback failed; stopping %s", self._name)
                return


__all__ = ["Ticker"]
