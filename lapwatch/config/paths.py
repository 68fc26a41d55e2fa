# lapwatch/config/paths.py
"""
Centralized, cross-platform path management for LapWatch.

Design goals
- Single source of truth for export, log and journal locations
- Honors these env vars (matching the SDK):
    LAPWATCH_DATA_ROOT, LAPWATCH_EXPORTS_ROOT, LAPWATCH_LOGS_ROOT
- Sensible OS defaults when env vars are not provided
- Safe directory creation with writeability checks
"""

from __future__ import annotations

import errno
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# ---------- OS defaults (used only if env vars not set) ----------

def _platform_default_base() -> Path:
    """
    Returns an OS-specific base directory for user data, following conventions:
    - Windows: %LOCALAPPDATA%/LapWatch
    - macOS:   ~/Library/Application Support/LapWatch
    - Linux:   ~/.local/share/lapwatch
    """
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "LapWatch"
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "LapWatch"
    else:
        # Linux / other POSIX
        return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "lapwatch"


# ---------- Environment overrides ----------

def _env_or_default_data_root() -> Path:
    return Path(os.getenv("LAPWATCH_DATA_ROOT", _platform_default_base()))


def _env_or_default_exports_root(data_root: Path) -> Path:
    return Path(os.getenv("LAPWATCH_EXPORTS_ROOT", data_root / "exports"))


def _env_or_default_logs_root(data_root: Path) -> Path:
    return Path(os.getenv("LAPWATCH_LOGS_ROOT", data_root / "logs"))


# ---------- Core dataclass ----------

@dataclass(frozen=True)
class Paths:
    """
    Canonical path container for LapWatch.

    Most callers should obtain a singleton instance via get_paths().
    """
    data_root: Path
    exports_root: Path
    logs_root: Path

    @staticmethod
    def from_env() -> "Paths":
        data = _env_or_default_data_root()
        return Paths(data, _env_or_default_exports_root(data), _env_or_default_logs_root(data))

    @property
    def journals_root(self) -> Path:
        # one <name>.jsonl per CLI run; events inside carry the engine session id
        return self.logs_root / "journals"

    def journal_path(self, name: str) -> Path:
        """Return the JSONL journal file called ``name``, e.g. a UTC start stamp."""
        return self.journals_root / f"{name}.jsonl"

    def export_path(self, filename: str) -> Path:
        return self.exports_root / filename

    # ----- setup / validation -----

    def ensure_all(self) -> None:
        """Create the directories LapWatch writes into."""
        for p in [self.data_root, self.exports_root, self.logs_root, self.journals_root]:
            p.mkdir(parents=True, exist_ok=True)

    def verify_writeable(self) -> None:
        """
        Raise OSError if critical roots are not writeable.
        """
        for p in [self.exports_root, self.logs_root]:
            try:
                p.mkdir(parents=True, exist_ok=True)
                test = p / ".write_test"
                test.write_text("ok", encoding="utf-8")
                test.unlink(missing_ok=True)
            except Exception as e:
                raise OSError(errno.EACCES, f"Not writeable: {p}", e)


# ---------- Singleton access ----------

_paths_singleton: Optional[Paths] = None

def get_paths(force_refresh: bool = False) -> Paths:
    """
    Return a cached Paths instance. Directories are created lazily by
    ensure_all(), not here.
    """
    global _paths_singleton
    if force_refresh or _paths_singleton is None:
        _paths_singleton = Paths.from_env()
    return _paths_singleton


# ---------- CLI sanity check ----------

if __name__ == "__main__":
    p = get_paths(force_refresh=True)
    try:
        p.ensure_all()
        p.verify_writeable()
    except OSError as e:
        print(f"[WARN] Writeability check failed: {e}")

    print("Data root:     ", p.data_root)
    print("Exports root:  ", p.exports_root)
    print("Logs root:     ", p.logs_root)
    print("Journals root: ", p.journals_root)
