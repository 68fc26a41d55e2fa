# lapwatch/sdk/server.py
"""
Process-wide UI API for uvicorn:
    uvicorn lapwatch.sdk.server:app

One TimingEngine per server process, refreshed at SDK_CONFIG.tick_interval_ms.
Tests and embedders build their own with create_app(engine).
"""

from __future__ import annotations

from ..apps.ui_api.main import create_app
from ..core.timing import TimingEngine
from .config import SDK_CONFIG

engine = TimingEngine(tick_interval_ms=SDK_CONFIG.tick_interval_ms)
app = create_app(engine)
