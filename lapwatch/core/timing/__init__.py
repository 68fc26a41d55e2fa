from .engine import DEFAULT_TICK_MS, TimingEngine
from .ticker import Ticker

__all__ = ["DEFAULT_TICK_MS", "TimingEngine", "Ticker"]
