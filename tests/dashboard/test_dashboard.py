"""Tests for the diagnostics API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from harbinger.config import HarbingerSettings
from harbinger.dashboard.app import create_dashboard
from harbinger.engine.core import AutonomousEngine
from harbinger.engine.models import Candidate
from harbinger.engine.registry import EngineRegistry
from harbinger.engine.scoring import calculate_efficiency
from harbinger.engine.sinks import LocalBufferSink
from harbinger.events.bus import EventBus
from harbinger.types import CandidateKind, Category

from tests.conftest import FakeSource, RecordingSink, local_snapshot


@pytest.fixture
def settings(agents_dir):
    return HarbingerSettings(agents_dir=agents_dir, interval_ms=600_000, agent_name="RECON")


def _registry_with(engine_factory):
    return EngineRegistry(factory=engine_factory)


def test_status_without_engine(settings):
    app = create_dashboard(EngineRegistry(), settings=settings)
    with TestClient(app) as client:
        resp = client.get("/api/engine/status")
        assert resp.status_code == 200
        assert resp.json() == {"running": False, "cycle_count": 0, "engine": None}

        assert client.get("/api/engine/context").json() is None
        assert client.get("/api/engine/thoughts").json() == []


def test_start_status_stop(settings):
    snapshot = local_snapshot(thought_count=60)
    registry = _registry_with(
        lambda options: AutonomousEngine(FakeSource(snapshot), RecordingSink(), options=options)
    )
    app = create_dashboard(registry, settings=settings)

    with TestClient(app) as client:
        started = client.post("/api/engine/start").json()
        assert started["running"] is True
        assert started["agent_name"] == "RECON"
        assert started["interval_ms"] == 600_000

        status = client.get("/api/engine/status").json()
        assert status["running"] is True
        assert status["engine"] == "autonomous"

        assert client.post("/api/engine/stop").json() == {"running": False}
        assert client.get("/api/engine/status").json()["running"] is False
        assert registry.get_engine() is None


def test_context_after_cycle(settings):
    snapshot = local_snapshot(thought_count=60)
    engine = AutonomousEngine(FakeSource(snapshot), RecordingSink())
    asyncio.run(engine.run_cycle())
    registry = _registry_with(lambda options: engine)
    app = create_dashboard(registry, settings=settings)

    with TestClient(app) as client:
        client.post("/api/engine/start")
        ctx = client.get("/api/engine/context").json()
        assert ctx["origin"] == "local"
        assert ctx["thought_count"] == 60
        assert ctx["cycle_count"] >= 1
        client.post("/api/engine/stop")


def test_thoughts_from_local_buffer(settings):
    sink = LocalBufferSink("recon", "RECON")
    for title in ("first", "second"):
        candidate = Candidate(
            kind=CandidateKind.PROPOSAL,
            category=Category.AUTOMATION,
            title=title,
            content="Could schedule proactive scans.",
            priority=2,
            efficiency=calculate_efficiency(Category.AUTOMATION, 2),
        )
        asyncio.run(sink.record(candidate))

    registry = _registry_with(lambda options: AutonomousEngine(FakeSource(), sink, options=options))
    app = create_dashboard(registry, settings=settings)

    with TestClient(app) as client:
        client.post("/api/engine/start")
        thoughts = client.get("/api/engine/thoughts").json()
        assert [t["title"] for t in thoughts] == ["second", "first"]
        assert thoughts[0]["efficiency"]["cost_benefit"] == 4.24
        assert len(client.get("/api/engine/thoughts", params={"limit": 1}).json()) == 1
        assert client.get("/api/engine/status").json()["thought_count"] == 2
        client.post("/api/engine/stop")


def test_list_agents(settings):
    app = create_dashboard(EngineRegistry(), settings=settings)
    with TestClient(app) as client:
        agents = client.get("/api/agents").json()
    assert [a["name"] for a in agents] == ["NIMBUS", "PATHFINDER", "BREACH"]


def test_events_endpoint(settings):
    bus = EventBus()
    asyncio.run(bus.emit("engine.started", {"agent_id": "recon"}))
    app = create_dashboard(EngineRegistry(), settings=settings, event_bus=bus)
    with TestClient(app) as client:
        events = client.get("/api/events").json()
    assert events[0]["topic"] == "engine.started"


def test_events_filtered_by_agent_and_limit(settings):
    bus = EventBus()

    async def _emit_some():
        await bus.emit("engine.started", {"agent_id": "recon"})
        await bus.emit("engine.started", {"agent_id": "web"})
        await bus.emit("engine.thought_accepted", {"agent_id": "recon"})

    asyncio.run(_emit_some())
    app = create_dashboard(EngineRegistry(), settings=settings, event_bus=bus)
    with TestClient(app) as client:
        recon = client.get("/api/events", params={"agent_id": "recon"}).json()
        none = client.get("/api/events", params={"limit": 0}).json()
        summary = client.get("/api/events/summary").json()

    assert [e["topic"] for e in recon] == ["engine.thought_accepted", "engine.started"]
    assert none == []
    assert summary["engine.started"] == 2
    assert summary["engine.thought_accepted"] == 1


def test_event_summary_without_bus(settings):
    app = create_dashboard(EngineRegistry(), settings=settings)
    with TestClient(app) as client:
        assert client.get("/api/events/summary").json() == {}
