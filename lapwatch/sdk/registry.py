
from __future__ import annotations
from importlib import import_module
from typing import Mapping
class Registry:
    def __init__(self, targets: Mapping[str, str] | None = None):
        self._map: dict[str, str] = dict(targets or {})
    def register(self, key: str, target: str) -> None:
        self._map[key] = target
    def keys(self) -> list[str]:
        return sorted(self._map)
    def __contains__(self, key: str) -> bool:
        return key in self._map
    def target(self, key: str) -> str:
        return self._map.get(key, key)
    def create(self, key: str, *args, **kwargs):
        target = self.target(key)
        mod_path, _, obj = target.partition(":")
        mod = import_module(mod_path)
        cls = getattr(mod, obj) if obj else mod
        return cls(*args, **kwargs)
