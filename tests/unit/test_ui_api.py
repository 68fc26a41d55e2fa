# tests/unit/test_ui_api.py
import asyncio

import pytest
from fastapi.testclient import TestClient

from lapwatch.apps.ui_api.main import create_app
from lapwatch.core.timing import TimingEngine


@pytest.fixture
def client(engine):
    with TestClient(create_app(engine)) as c:
        yield c


def test_initial_state(client):
    body = client.get("/state").json()
    assert body["elapsed"] == 0
    assert body["running"] is False
    assert body["laps"] == [] and body["laps_display"] == []
    assert body["formatted"]["elapsed"] == "00:00.00"


def test_commands_drive_the_engine(client, clock):
    assert client.post("/toggle").json()["running"] is True
    clock.advance(1500)
    client.post("/lap")
    clock.advance(1000)
    body = client.post("/complete").json()

    assert body["running"] is False
    assert [lap["index"] for lap in body["laps"]] == [1, 2]
    assert [lap["index"] for lap in body["laps_display"]] == [2, 1]
    assert body["formatted"]["laps"] == {"1": "00:01.50", "2": "00:01.00"}
    assert body["average_completed"] == 1250

    # lapping a stopped clock changes nothing
    assert len(client.post("/lap").json()["laps"]) == 2

    body = client.post("/reset").json()
    assert (body["elapsed"], body["running"], body["laps"]) == (0, False, [])


def test_export_without_laps_is_empty(client):
    resp = client.get("/export")
    assert resp.status_code == 204
    assert resp.content == b""


def test_export_csv_download(client, clock):
    client.post("/toggle")
    clock.advance(2000)
    client.post("/complete")

    resp = client.get("/export", params={"fmt": "csv"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]
    assert 'filename="stopwatch_laps_' in resp.headers["content-disposition"]
    assert '"1","2000","00:02.00"' in resp.text


def test_export_unknown_format(client):
    resp = client.get("/export", params={"fmt": "xml"})
    assert resp.status_code == 404
    assert "xml" in resp.json()["error"]


def test_websocket_streams_state_and_accepts_commands(client):
    with client.websocket_connect("/ws/state?interval=0.01") as ws:
        first = ws.receive_json()
        assert first["running"] is False

        ws.send_text("toggle")
        for _ in range(200):
            if ws.receive_json().get("running"):
                break
        else:
            pytest.fail("engine never reported running over the socket")

        ws.send_text("bogus")
        for _ in range(200):
            msg = ws.receive_json()
            if msg.get("type") == "error":
                assert "bogus" in msg["msg"]
                break
        else:
            pytest.fail("no error message for an unknown command")


class LoopAwareEngine(TimingEngine):
    """Remembers whether each snapshot was taken on a thread running an event loop."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.snapshot_on_loop = []

    def snapshot(self):
        try:
            asyncio.get_running_loop()
            self.snapshot_on_loop.append(True)
        except RuntimeError:
            self.snapshot_on_loop.append(False)
        return super().snapshot()


def test_websocket_snapshots_run_off_the_event_loop(clock, wall_clock):
    eng = LoopAwareEngine(clock=clock, wall_clock=wall_clock, tick_interval_ms=None)
    with TestClient(create_app(eng)) as c:
        with c.websocket_connect("/ws/state?interval=0.01") as ws:
            for _ in range(3):
                ws.receive_json()
        # the socket closed cleanly and the app keeps serving
        assert c.get("/state").status_code == 200

    assert len(eng.snapshot_on_loop) >= 3
    assert not any(eng.snapshot_on_loop)


def test_server_module_serves_the_configured_app():
    from lapwatch.sdk import SDK_CONFIG, server

    assert server.app.state.engine is server.engine
    assert server.engine._tick_interval_ms == SDK_CONFIG.tick_interval_ms
    with TestClient(server.app) as c:
        body = c.get("/state").json()
    assert body["running"] is False
    assert body["session_id"] == server.engine.session_id
