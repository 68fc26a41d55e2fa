# tests/unit/test_cli.py
import json
import logging
import re

import pytest
from typer.testing import CliRunner

from lapwatch.apps.stopwatch_cli import app, lap_table, status_line

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_roots(monkeypatch, tmp_path):
    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.delenv("LAPWATCH_EXPORTS_ROOT", raising=False)
    monkeypatch.delenv("LAPWATCH_LOGS_ROOT", raising=False)
    from lapwatch.config import paths as paths_mod

    paths_mod.get_paths(force_refresh=True)
    yield
    paths_mod._paths_singleton = None  # type: ignore[attr-defined]
    # configure_logging() bound a handler to the runner's temporary stderr
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


def test_fmt_command():
    result = runner.invoke(app, ["fmt", "65432"])
    assert result.exit_code == 0
    assert result.output.strip() == "01:05.43"


def test_run_records_laps_and_prints_table(tmp_path):
    result = runner.invoke(app, ["run", "--log-level", "WARNING"], input="s\nl\nc\nl\nq\n")
    assert result.exit_code == 0, result.output
    assert "[RUN ]" in result.output
    assert "[STOP]" in result.output
    table = result.output.split("Lap   Lap Time   Total")[1].strip().splitlines()
    assert [row[:2] for row in table] == ["02", "01"]


def test_run_without_laps(tmp_path):
    result = runner.invoke(app, ["run", "--log-level", "WARNING"], input="l\nx\ne\n")
    assert result.exit_code == 0
    assert "no laps to export" in result.output
    assert "No laps recorded." in result.output


def test_run_exports_and_journals(tmp_path):
    out = tmp_path / "exports"
    result = runner.invoke(
        app,
        ["run", "--export-dir", str(out), "--format", "jsonl", "--journal", "--log-level", "WARNING"],
        input="s\nc\ne\nq\n",
    )
    assert result.exit_code == 0, result.output

    exported = list(out.glob("stopwatch_laps_*.jsonl"))
    assert len(exported) == 1
    kinds = [json.loads(line)["kind"] for line in exported[0].read_text(encoding="utf-8").splitlines()]
    assert kinds == ["lap", "summary"]

    journals = list((tmp_path / "data" / "logs" / "journals").glob("*.jsonl"))
    assert len(journals) == 1
    # named after the UTC start of the run, not the engine session id
    assert re.fullmatch(r"\d{8}T\d{6}Z\.jsonl", journals[0].name)
    rows = [json.loads(line) for line in journals[0].read_text(encoding="utf-8").splitlines()]
    events = [row["kind"] for row in rows]
    assert events == ["start", "complete"]
    assert len({row["session"] for row in rows}) == 1


def test_run_rejects_unknown_format():
    result = runner.invoke(app, ["run", "--format", "xml"], input="q\n")
    assert result.exit_code != 0


def test_status_line_and_table(engine, clock):
    engine.toggle_run()
    clock.advance(500)
    engine.record_lap()
    clock.advance(900)
    engine.record_lap()
    state = engine.snapshot()

    assert status_line(state).startswith("[RUN ] lap 00:00.00  total 00:01.40")
    rows = lap_table(state).splitlines()
    assert rows[1].startswith("02+")
    assert rows[2].startswith("01-")
