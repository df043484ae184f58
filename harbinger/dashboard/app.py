"""Diagnostics API: read-only view of the autonomous engine, plus start/stop.

`harbinger serve` launches this at localhost:8421.
"""

from __future__ import annotations

import asyncio

from fastapi import FastAPI

from harbinger import __version__
from harbinger.agents.profiles import discover_agents
from harbinger.config import HarbingerSettings, settings as default_settings
from harbinger.engine.factory import options_from_settings
from harbinger.engine.registry import EngineRegistry
from harbinger.engine.sinks import LocalBufferSink
from harbinger.events.bus import EventBus


def create_dashboard(
    registry: EngineRegistry,
    settings: HarbingerSettings | None = None,
    event_bus: EventBus | None = None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="harbinger diagnostics", version=__version__)

    @app.get("/api/engine/status")
    async def engine_status() -> dict:
        engine = registry.get_engine()
        if engine is None:
            return {"running": False, "cycle_count": 0, "engine": None}
        return {**engine.get_status().model_dump(), "engine": "autonomous"}

    @app.get("/api/engine/context")
    async def engine_context() -> dict | None:
        engine = registry.get_engine()
        if engine is None:
            return None
        snapshot = engine.get_last_context()
        return snapshot.model_dump(mode="json") if snapshot else None

    @app.get("/api/engine/thoughts")
    async def engine_thoughts(limit: int = 50) -> list[dict]:
        engine = registry.get_engine()
        if engine is None or not isinstance(engine.sink, LocalBufferSink):
            return []
        thoughts = engine.sink.thoughts(limit=limit)
        return [t.model_dump(mode="json") for t in reversed(thoughts)]

    @app.post("/api/engine/start")
    async def engine_start() -> dict:
        engine = await registry.start_engine(options_from_settings(settings))
        return engine.get_status().model_dump()

    @app.post("/api/engine/stop")
    async def engine_stop() -> dict:
        await registry.stop_engine()
        return {"running": False}

    @app.get("/api/agents")
    async def list_agents() -> list[dict]:
        profiles = await asyncio.to_thread(discover_agents, settings.agents_dir)
        return [
            {
                "id": p.id,
                "name": p.display_name,
                "role": p.role,
                "specialization": p.specialization,
                "config": p.config,
            }
            for p in profiles
        ]

    @app.get("/api/events")
    async def list_events(
        topic: str = "engine.*", limit: int = 50, agent_id: str | None = None
    ) -> list[dict]:
        if event_bus is None:
            return []
        events = event_bus.history(topic, limit, agent_id=agent_id)
        return [e.model_dump(mode="json") for e in events]

    @app.get("/api/events/summary")
    async def event_summary(agent_id: str | None = None) -> dict[str, int]:
        if event_bus is None:
            return {}
        return event_bus.topic_counts(agent_id)

    return app
