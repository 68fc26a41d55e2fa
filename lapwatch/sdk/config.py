
from __future__ import annotations
from pydantic import BaseModel, Field
import os

# File locations live in lapwatch.config.paths (get_paths()).
class AppConfig(BaseModel):
    tick_interval_ms: int = Field(default_factory=lambda: int(os.getenv('LAPWATCH_TICK_MS', '10')), ge=1)
    log_level: str = Field(default_factory=lambda: os.getenv('LAPWATCH_LOG_LEVEL', 'INFO'))
    api_host: str = Field(default_factory=lambda: os.getenv('LAPWATCH_API_HOST', '127.0.0.1'))
    api_port: int = Field(default_factory=lambda: int(os.getenv('LAPWATCH_API_PORT', '8000')))
    plugins: dict = Field(default_factory=lambda: {
        "export.csv": "lapwatch.exporters.csv_export:CsvLapExporter",
        "export.jsonl": "lapwatch.exporters.jsonl_export:JsonlLapExporter",
    })

SDK_CONFIG = AppConfig()
