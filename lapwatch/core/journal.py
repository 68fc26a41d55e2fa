from __future__ import annotations
import json
from pathlib import Path
from typing import IO
from threading import Lock

class JsonlWriter:
    """
    Minimal, robust JSONL writer with periodic flush.
    Not thread-safe across processes, but thread-safe within a process.
    """
    def __init__(self, out_path: Path, flush_every: int = 50):
        ensure_dir(out_path.parent)
        self.path = out_path
        self._f: IO[str] = out_path.open("a", encoding="utf-8")
        self._n = 0
        self._flush_every = max(1, flush_every)
        self._lock = Lock()

    def write(self, obj) -> None:
        line = json.dumps(obj, ensure_ascii=False)
        with self._lock:
            self._f.write(line + "\n")
            self._n += 1
            if self._n % self._flush_every == 0:
                self._f.flush()

    @property
    def count(self) -> int:
        return self._n

    def close(self):
        with self._lock:
            if self._f.closed:
                return
            try:
                self._f.flush()
            finally:
                self._f.close()

    def __enter__(self) -> "JsonlWriter":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)
