
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse, Response
from fastapi.concurrency import run_in_threadpool
from typing import Any, Callable, Dict, Optional
import asyncio, contextlib, json, logging

from ...core.events import StopwatchState
from ...core.formatting import format_time
from ...core.timing import TimingEngine
from ...exporters import LapReport, get_exporter
from ...sdk import SDK_CONFIG

logger = logging.getLogger(__name__)

COMMANDS: Dict[str, Callable[[TimingEngine], Any]] = {
    "toggle": TimingEngine.toggle_run,
    "reset": TimingEngine.reset,
    "lap": TimingEngine.record_lap,
    "complete": TimingEngine.complete_lap,
}


def state_payload(state: StopwatchState) -> Dict[str, Any]:
    data = state.model_dump(mode="json")
    # the lap table renders newest first
    data["laps_display"] = list(reversed(data["laps"]))
    data["formatted"] = {
        "current_lap_time": format_time(state.current_lap_time),
        "elapsed": format_time(state.elapsed),
        "average_completed": format_time(state.average_completed),
        "overall_average": format_time(state.overall_average),
        "laps": {str(lap.index): format_time(lap.duration) for lap in state.laps},
    }
    return data


def create_app(engine: Optional[TimingEngine] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.engine.close()

    app = FastAPI(title="LapWatch UI API", lifespan=lifespan)
    app.state.engine = engine or TimingEngine(tick_interval_ms=SDK_CONFIG.tick_interval_ms)

    def _engine(request: Request) -> TimingEngine:
        return request.app.state.engine

    @app.get("/state")
    def get_state(request: Request):
        return state_payload(_engine(request).snapshot())

    @app.post("/toggle")
    def toggle(request: Request):
        return state_payload(_engine(request).toggle_run())

    @app.post("/reset")
    def reset(request: Request):
        return state_payload(_engine(request).reset())

    @app.post("/lap")
    def lap(request: Request):
        engine = _engine(request)
        engine.record_lap()
        return state_payload(engine.snapshot())

    @app.post("/complete")
    def complete(request: Request):
        engine = _engine(request)
        engine.complete_lap()
        return state_payload(engine.snapshot())

    @app.get("/export")
    def export(request: Request, fmt: str = "csv"):
        try:
            exporter = get_exporter(fmt)
        except KeyError:
            return JSONResponse(status_code=404, content={"error": f"unknown format: {fmt}"})
        content = exporter.render(LapReport.from_state(_engine(request).snapshot()))
        if content is None:
            return Response(status_code=204)
        return Response(
            content=content,
            media_type=exporter.media_type,
            headers={"Content-Disposition": f'attachment; filename="{exporter.filename()}"'},
        )

    @app.websocket("/ws/state")
    async def ws_state(ws: WebSocket, interval: float = 0.1):
        await ws.accept()
        engine: TimingEngine = ws.app.state.engine

        async def pump() -> None:
            try:
                while True:
                    state = await run_in_threadpool(engine.snapshot)
                    await ws.send_text(json.dumps(state_payload(state)))
                    await asyncio.sleep(max(interval, 0.01))
            except (WebSocketDisconnect, RuntimeError):
                return

        sender = asyncio.create_task(pump())
        try:
            while True:
                msg = (await ws.receive_text()).strip().lower()
                command = COMMANDS.get(msg)
                if command is None:
                    await ws.send_text(json.dumps({"type": "error", "msg": f"unknown command: {msg}"}))
                    continue
                await run_in_threadpool(command, engine)
        except WebSocketDisconnect:
            return
        finally:
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender

    return app
