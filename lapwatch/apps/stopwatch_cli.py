from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from ..config.paths import get_paths
from ..core.events import StopwatchState
from ..core.formatting import format_time
from ..core.journal import JsonlWriter
from ..core.timing import TimingEngine
from ..exporters import LapReport, available_formats, get_exporter
from ..sdk import SDK_CONFIG
from ..sdk.log import configure_logging

ISO = "%Y%m%dT%H%M%SZ"

HELP = "s=start/stop  l=lap  c=complete  r=reset  e=export  q=quit"

app = typer.Typer(add_completion=False, no_args_is_help=True)


def status_line(state: StopwatchState) -> str:
    flag = "RUN " if state.running else "STOP"
    return (
        f"[{flag}] lap {format_time(state.current_lap_time)}"
        f"  total {format_time(state.elapsed)}"
        f"  avg {format_time(state.average_completed)}"
        f"  overall {format_time(state.overall_average)}"
        f"  laps {len(state.laps)}"
    )


def lap_table(state: StopwatchState) -> str:
    if not state.laps:
        return "No laps recorded."
    lines = ["Lap   Lap Time   Total"]
    for lap in reversed(state.laps):
        # fastest / slowest markers only appear once two laps exist
        mark = "-" if lap.index == state.min_lap else "+" if lap.index == state.max_lap else " "
        lines.append(f"{lap.index:02d}{mark}  {format_time(lap.duration)}   {format_time(lap.total_time)}")
    return "\n".join(lines)


@app.command()
def run(
    tick_ms: int = typer.Option(SDK_CONFIG.tick_interval_ms, "--tick-ms", min=1, help="Refresh interval while running"),
    export_dir: Optional[Path] = typer.Option(None, "--export-dir", help="Where 'e' writes exports (default: exports root)"),
    fmt: str = typer.Option("csv", "--format", "-f", help="Export format, e.g. csv or jsonl"),
    journal: bool = typer.Option(False, help="Append session events to a JSONL journal"),
    log_level: str = typer.Option(SDK_CONFIG.log_level, "--log-level", help="Logging level"),
) -> None:
    """Interactive stopwatch driven by single-letter commands on stdin."""

    configure_logging(log_level)
    if fmt not in available_formats():
        raise typer.BadParameter(f"choose one of {', '.join(available_formats())}", param_hint="--format")

    paths = get_paths()
    out_dir = export_dir or paths.exports_root

    writer: Optional[JsonlWriter] = None
    if journal:
        name = datetime.now(timezone.utc).strftime(ISO)
        writer = JsonlWriter(paths.journal_path(name), flush_every=1)
        typer.echo(f"[lapwatch] journal → {writer.path}")

    engine = TimingEngine(tick_interval_ms=tick_ms, journal=writer)
    exporter = get_exporter(fmt)

    actions = {
        "s": engine.toggle_run,
        "l": engine.record_lap,
        "c": engine.complete_lap,
        "r": engine.reset,
    }

    typer.echo(HELP)
    try:
        for raw in sys.stdin:
            key = raw.strip().lower()[:1]
            if key == "q":
                break
            if key == "e":
                written = exporter.write(LapReport.from_state(engine.snapshot()), out_dir)
                typer.echo(f"[lapwatch] exported → {written}" if written else "[lapwatch] no laps to export")
                continue
            action = actions.get(key)
            if action is None:
                typer.echo(HELP)
                continue
            action()
            typer.echo(status_line(engine.snapshot()))
    finally:
        engine.close()
        if writer:
            writer.close()

    typer.echo(lap_table(engine.snapshot()))


@app.command("fmt")
def fmt_cmd(ms: float = typer.Argument(..., help="Milliseconds to format")) -> None:
    """Print a millisecond value as MM:SS.CC."""

    typer.echo(format_time(ms))


@app.command()
def serve(
    host: str = typer.Option(SDK_CONFIG.api_host, help="Bind address"),
    port: int = typer.Option(SDK_CONFIG.api_port, help="Bind port"),
    log_level: str = typer.Option(SDK_CONFIG.log_level, "--log-level", help="Logging level"),
) -> None:
    """Serve the UI API (HTTP + WebSocket) with uvicorn."""

    import uvicorn

    configure_logging(log_level)
    uvicorn.run("lapwatch.sdk.server:app", host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    app()
