"""Shared test fixtures: fake collaborators and agent profile directories."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from harbinger.engine.models import Candidate, ContextSnapshot, EngineOptions
from harbinger.engine.sinks import EnhancementSink
from harbinger.engine.sources import ContextSource
from harbinger.types import ContextOrigin


class FakeSource(ContextSource):
    """Returns a canned snapshot. No I/O."""

    origin = ContextOrigin.LOCAL

    def __init__(self, snapshot: ContextSnapshot | None = None):
        self.snapshot = snapshot or ContextSnapshot.empty(ContextOrigin.LOCAL)
        self.calls = 0

    async def gather(self) -> ContextSnapshot:
        self.calls += 1
        return self.snapshot


class ExplodingSource(ContextSource):
    """Breaks its own contract and raises."""

    origin = ContextOrigin.REMOTE

    def __init__(self):
        self.calls = 0

    async def gather(self) -> ContextSnapshot:
        self.calls += 1
        raise RuntimeError("coordinator exploded")


class GatedSource(ContextSource):
    """Blocks in gather() until released, to keep a cycle in flight."""

    origin = ContextOrigin.LOCAL

    def __init__(self):
        self.gate = asyncio.Event()
        self.calls = 0

    async def gather(self) -> ContextSnapshot:
        self.calls += 1
        await self.gate.wait()
        return ContextSnapshot(origin=self.origin, thought_count=7)


class RecordingSink(EnhancementSink):
    """Collects everything it is given."""

    def __init__(self):
        self.recorded: list[Candidate] = []

    async def record(self, candidate: Candidate) -> None:
        self.recorded.append(candidate)


class ExplodingSink(EnhancementSink):
    async def record(self, candidate: Candidate) -> None:
        raise RuntimeError("sink exploded")


def local_snapshot(**fields) -> ContextSnapshot:
    return ContextSnapshot(origin=ContextOrigin.LOCAL, **fields)


def write_agent(root: Path, name: str, identity: str = "", config: str | None = None) -> Path:
    agent_dir = root / name
    agent_dir.mkdir(parents=True)
    if identity:
        (agent_dir / "IDENTITY.md").write_text(identity)
    if config is not None:
        (agent_dir / "CONFIG.yaml").write_text(config)
    return agent_dir


@pytest.fixture
def options():
    return EngineOptions(agent_id="recon", agent_name="RECON", agent_type="recon")


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def agents_dir(tmp_path):
    root = tmp_path / "agents"
    write_agent(root, "recon", "Name: Recon Agent. Codename: PATHFINDER. Role: Recon.")
    write_agent(root, "web", "# BREACH — Web Application Tester")
    write_agent(root, "cloud", "**Codename:** NIMBUS\n**Role:** Cloud auditor\n")
    write_agent(root, "shared")
    return root
