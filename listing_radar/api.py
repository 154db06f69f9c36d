"""FastAPI routes exposing scans, history, the schedule and settings."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, HTTPException, Query

from .history import HistoryStore, HistoryView
from .models import HistoryFilter, ScanSettings
from .orchestrator import AGENTS, ScanOrchestrator
from .reconciler import ScheduleReconciler
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)


def create_router(
    orchestrator: ScanOrchestrator,
    history: HistoryStore,
    reconciler: ScheduleReconciler,
    settings_store: SettingsStore,
) -> APIRouter:
    """Create the router with scan, history, schedule and settings endpoints."""

    router = APIRouter()

    def _status() -> Dict[str, Any]:
        message = orchestrator.status_message
        return {
            "state": orchestrator.state.value,
            "scanning": orchestrator.scanning,
            "active_agent_id": orchestrator.active_agent_id,
            "message": message.model_dump() if message else None,
            "agents": [a.model_dump() for a in AGENTS],
        }

    @router.get("/history")
    async def get_history(
        filter: HistoryFilter = Query(HistoryFilter.ALL),
        sample: bool = Query(False),
        limit: int = Query(100, ge=1, le=1000),
    ) -> Dict[str, Any]:
        entries = HistoryView(history, sample_mode=sample).filter(filter)
        return {
            "filter": filter.value,
            "count": len(entries),
            "entries": [e.model_dump(mode="json") for e in entries[:limit]],
        }

    @router.get("/latest")
    async def get_latest(sample: bool = Query(False)) -> Dict[str, Any]:
        latest = HistoryView(history, sample_mode=sample).latest()
        return {"latest": latest.model_dump(mode="json") if latest else None}

    @router.get("/stats")
    async def get_stats(sample: bool = Query(False)) -> Dict[str, Any]:
        return HistoryView(history, sample_mode=sample).stats()

    @router.post("/scan")
    async def start_scan() -> Dict[str, Any]:
        transition = await orchestrator.scan()
        if transition is None:
            return {"started": False, **_status()}
        return {
            "started": True,
            "outcome": transition.state.value,
            "entry": transition.entry.model_dump(mode="json") if transition.entry else None,
            **_status(),
        }

    @router.get("/status")
    async def get_status() -> Dict[str, Any]:
        return _status()

    @router.delete("/status")
    async def dismiss_status() -> Dict[str, Any]:
        orchestrator.dismiss_status()
        return _status()

    @router.get("/schedule")
    async def get_schedule() -> Dict[str, Any]:
        return reconciler.snapshot().model_dump(mode="json")

    @router.post("/schedule/refresh")
    async def refresh_schedule() -> Dict[str, Any]:
        snapshot = await reconciler.refresh()
        return snapshot.model_dump(mode="json")

    @router.post("/schedule/toggle")
    async def toggle_schedule() -> Dict[str, Any]:
        if reconciler.schedule is None and not reconciler.busy:
            raise HTTPException(status_code=404, detail="No schedule information available.")
        toggled = await reconciler.toggle()
        return {"toggled": toggled, **reconciler.snapshot().model_dump(mode="json")}

    @router.get("/settings")
    async def get_settings() -> Dict[str, Any]:
        return settings_store.load().model_dump(by_alias=True)

    @router.put("/settings")
    async def put_settings(settings: ScanSettings) -> Dict[str, Any]:
        if not settings_store.save(settings):
            raise HTTPException(status_code=500, detail="Failed to save settings.")
        return settings.model_dump(by_alias=True)

    return router


def create_app(
    orchestrator: ScanOrchestrator,
    history: HistoryStore,
    reconciler: ScheduleReconciler,
    settings_store: SettingsStore,
    refresh_on_startup: bool = True,
) -> FastAPI:
    """Build the ListingRadar HTTP app around already-wired components."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if refresh_on_startup:
            await reconciler.refresh()
        yield

    app = FastAPI(title="ListingRadar", lifespan=lifespan)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now()}

    app.include_router(create_router(orchestrator, history, reconciler, settings_store))
    return app
