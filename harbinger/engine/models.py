"""Engine data model: snapshots, candidates, efficiency records, thoughts.

Everything here is frozen: a snapshot is built once per cycle, a candidate
is enriched by copying, and a thought is the durable record a sink keeps.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from harbinger.types import (
    AgentId,
    AutomationType,
    CandidateKind,
    Category,
    ContextOrigin,
    new_id,
)


class AgentRecord(BaseModel):
    """One agent as seen by a context source."""

    model_config = ConfigDict(frozen=True)

    id: AgentId
    name: str = ""
    status: str = "unknown"
    thought_count: int = 0

    @property
    def is_idle(self) -> bool:
        return self.status == "idle"


class SwarmStatus(BaseModel):
    """Swarm report returned by the coordinator."""

    model_config = ConfigDict(frozen=True)

    agents: list[AgentRecord] = Field(default_factory=list)
    pending_proposals: int = 0
    system_health: str = "healthy"


class ContextSnapshot(BaseModel):
    """Point-in-time view of the world handed to the identifier."""

    model_config = ConfigDict(frozen=True)

    origin: ContextOrigin
    agents: list[AgentRecord] = Field(default_factory=list)
    agent_count: int = 0
    self_record: AgentRecord | None = None
    thought_count: int = 0
    cycle_count: int = 0
    swarm: SwarmStatus | None = None
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls, origin: ContextOrigin, cycle_count: int = 0) -> ContextSnapshot:
        """Minimal snapshot used when a source cannot see anything."""
        return cls(origin=origin, cycle_count=cycle_count)

    def idle_peers(self, agent_id: AgentId) -> list[AgentRecord]:
        return [a for a in self.agents if a.is_idle and a.id != agent_id]


class Efficiency(BaseModel):
    """Cost-benefit record attached to an accepted candidate."""

    model_config = ConfigDict(frozen=True)

    time_saved: float
    frequency: float
    implementation_cost: float
    running_cost: float
    cost_benefit: float
    automation_type: AutomationType = AutomationType.SCRIPT


class Candidate(BaseModel):
    """A proposed observation, alert, enhancement or proposal."""

    model_config = ConfigDict(frozen=True)

    kind: CandidateKind
    category: Category
    title: str
    content: str
    priority: int = Field(ge=1, le=4)
    efficiency: Efficiency | None = None

    def with_efficiency(self, efficiency: Efficiency) -> Candidate:
        return self.model_copy(update={"efficiency": efficiency})


class Thought(BaseModel):
    """Durable record of an accepted candidate."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    agent_id: AgentId
    agent_name: str
    kind: CandidateKind = CandidateKind.OBSERVATION
    category: Category | None = None
    title: str = "Untitled thought"
    content: str = ""
    priority: int = 3
    efficiency: Efficiency | None = None

    @classmethod
    def from_candidate(
        cls, candidate: Candidate, agent_id: AgentId, agent_name: str
    ) -> Thought:
        return cls(
            agent_id=agent_id,
            agent_name=agent_name,
            kind=candidate.kind,
            category=candidate.category,
            title=candidate.title or "Untitled thought",
            content=candidate.content,
            priority=candidate.priority,
            efficiency=candidate.efficiency,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body the coordinator's thoughts endpoint accepts."""
        return {
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "type": self.kind.value,
            "category": self.category.value if self.category else "",
            "title": self.title,
            "content": self.content,
            "priority": self.priority,
            "efficiency": (
                self.efficiency.model_dump(mode="json") if self.efficiency else None
            ),
        }


class EngineOptions(BaseModel):
    """Construction options for an engine."""

    agent_id: AgentId = "unknown"
    agent_name: str = "AGENT"
    agent_type: str = "general"
    interval_ms: int = 60_000

    @field_validator("interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("interval_ms must be positive")
        return value


class EngineStatus(BaseModel):
    """Read-only engine status for diagnostics."""

    running: bool
    cycle_count: int
    interval_ms: int
    agent_id: AgentId
    agent_name: str
    thought_count: int | None = None
