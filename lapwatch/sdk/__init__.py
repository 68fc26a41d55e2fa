
from __future__ import annotations
from .config import SDK_CONFIG, AppConfig
from .registry import Registry

REGISTRY = Registry(SDK_CONFIG.plugins)

__all__ = ["SDK_CONFIG", "AppConfig", "REGISTRY", "Registry"]
