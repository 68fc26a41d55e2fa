"""Lap exporters, resolved by format name through the plugin registry."""

from __future__ import annotations

from typing import List

from ..sdk import REGISTRY
from .base import LapExporter, LapReport, iso_timestamp


def available_formats() -> List[str]:
    return [key.split(".", 1)[1] for key in REGISTRY.keys() if key.startswith("export.")]


def get_exporter(fmt: str) -> LapExporter:
    """Instantiate the exporter registered as ``export.<fmt>``.

    Raises KeyError for a format nobody registered.
    """
    key = f"export.{fmt}"
    if key not in REGISTRY:
        raise KeyError(f"unknown export format: {fmt!r}")
    return REGISTRY.create(key)


__all__ = ["LapExporter", "LapReport", "available_formats", "get_exporter", "iso_timestamp"]
