"""Enhancement identification: five independent dimensions.

Each dimension looks at one aspect of a context snapshot and proposes at
most one candidate:

- Performance: the agent is producing a lot of thoughts
- Accuracy: proposals pile up unreviewed, or cycles produce nothing
- Cost: the swarm is degraded, or the engine has run for a very long time
- Automation: there is idle capacity to put to work
- Collaboration: several agents could sweep together

Remote snapshots carry coordinator signals (health, backlog, idle flags);
local snapshots only know cycle and profile counts. The category, kind and
priority each dimension emits are the same for both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from harbinger.engine.models import Candidate, ContextSnapshot, EngineOptions
from harbinger.types import CandidateKind, Category, ContextOrigin

HIGH_THOUGHT_VOLUME = 50
PENDING_PROPOSAL_BACKLOG = 10
SILENT_CYCLE_LIMIT = 100
LONG_RUN_CYCLES = 1000
COORDINATED_SWEEP_MIN_AGENTS = 3


class BaseDimension(ABC):
    """Evaluates a snapshot along one dimension."""

    name: str = ""

    @abstractmethod
    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        """Return a candidate if the dimension triggers, else None."""
        ...


class PerformanceDimension(BaseDimension):
    """High thought volume suggests batching or scanning less often."""

    name = "performance"

    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        if snapshot.origin is ContextOrigin.REMOTE and snapshot.self_record is None:
            return None
        if snapshot.thought_count <= HIGH_THOUGHT_VOLUME:
            return None

        who = "Agent" if snapshot.origin is ContextOrigin.REMOTE else "Engine"
        return Candidate(
            kind=CandidateKind.ENHANCEMENT,
            category=Category.PERFORMANCE,
            title=f"{options.agent_name} generating high thought volume",
            content=(
                f"{who} has {snapshot.thought_count} thoughts. "
                "Consider batch processing or reducing scan frequency."
            ),
            priority=2,
        )


class AccuracyDimension(BaseDimension):
    """A review backlog or a long silent streak points at a bad signal-to-noise ratio."""

    name = "accuracy"

    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        if snapshot.origin is ContextOrigin.REMOTE:
            if snapshot.swarm is None:
                return None
            pending = snapshot.swarm.pending_proposals
            if pending <= PENDING_PROPOSAL_BACKLOG:
                return None
            return Candidate(
                kind=CandidateKind.OBSERVATION,
                category=Category.ACCURACY,
                title="Unreviewed proposals accumulating",
                content=(
                    f"{pending} proposals pending review. "
                    "Backlog may indicate poor signal-to-noise ratio."
                ),
                priority=3,
            )

        if snapshot.cycle_count > SILENT_CYCLE_LIMIT and snapshot.thought_count == 0:
            return Candidate(
                kind=CandidateKind.OBSERVATION,
                category=Category.ACCURACY,
                title="No actionable thoughts after many cycles",
                content=(
                    f"{snapshot.cycle_count} cycles completed with no thoughts. "
                    "Consider adjusting thresholds."
                ),
                priority=3,
            )
        return None


class CostDimension(BaseDimension):
    """Degraded health or a very long run is a cue to throttle."""

    name = "cost"

    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        if snapshot.origin is ContextOrigin.REMOTE:
            if snapshot.swarm is None or snapshot.swarm.system_health != "degraded":
                return None
            return Candidate(
                kind=CandidateKind.ALERT,
                category=Category.COST,
                title="System health degraded",
                content=(
                    "Swarm health is degraded. "
                    "Consider throttling non-critical operations."
                ),
                priority=4,
            )

        if snapshot.cycle_count > LONG_RUN_CYCLES:
            return Candidate(
                kind=CandidateKind.ALERT,
                category=Category.COST,
                title="High cycle count - consider throttling",
                content=(
                    f"Engine has run {snapshot.cycle_count} cycles. "
                    "Consider increasing interval to reduce resource usage."
                ),
                priority=4,
            )
        return None


class AutomationDimension(BaseDimension):
    """Idle capacity could be running scheduled scans."""

    name = "automation"

    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        if snapshot.origin is ContextOrigin.REMOTE:
            if snapshot.self_record is None or not snapshot.self_record.is_idle:
                return None
            return Candidate(
                kind=CandidateKind.PROPOSAL,
                category=Category.AUTOMATION,
                title=f"{options.agent_name} idle - suggest proactive scan",
                content=(
                    f"Agent is idle. Could run a scheduled {options.agent_type} "
                    "scan to find new targets."
                ),
                priority=2,
            )

        if snapshot.agent_count > 0:
            names = ", ".join(a.name or a.id for a in snapshot.agents)
            return Candidate(
                kind=CandidateKind.PROPOSAL,
                category=Category.AUTOMATION,
                title=f"{snapshot.agent_count} agent profiles available",
                content=(
                    f"Agent profiles detected: {names}. "
                    "Could schedule proactive scans."
                ),
                priority=2,
            )
        return None


class CollaborationDimension(BaseDimension):
    """Several available agents could run a coordinated sweep."""

    name = "collaboration"

    def evaluate(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> Candidate | None:
        if snapshot.origin is ContextOrigin.REMOTE:
            if snapshot.swarm is None:
                return None
            idle = snapshot.idle_peers(options.agent_id)
            if len(idle) <= COORDINATED_SWEEP_MIN_AGENTS:
                return None
            names = ", ".join(a.name or a.id for a in idle)
            return Candidate(
                kind=CandidateKind.PROPOSAL,
                category=Category.COLLABORATION,
                title="Multiple agents idle - suggest coordinated sweep",
                content=(
                    f"{len(idle)} agents idle: {names}. "
                    "Consider launching a coordinated assessment."
                ),
                priority=3,
            )

        if snapshot.agent_count > COORDINATED_SWEEP_MIN_AGENTS:
            return Candidate(
                kind=CandidateKind.PROPOSAL,
                category=Category.COLLABORATION,
                title="Multiple agents available - suggest coordinated workflow",
                content=(
                    f"{snapshot.agent_count} agent profiles loaded. "
                    "Consider launching coordinated assessments."
                ),
                priority=3,
            )
        return None


DEFAULT_DIMENSIONS: tuple[type[BaseDimension], ...] = (
    PerformanceDimension,
    AccuracyDimension,
    CostDimension,
    AutomationDimension,
    CollaborationDimension,
)


class EnhancementIdentifier:
    """Runs every dimension over a snapshot and collects candidates."""

    def __init__(self, dimensions: list[BaseDimension] | None = None) -> None:
        if dimensions is None:
            dimensions = [cls() for cls in DEFAULT_DIMENSIONS]
        self._dimensions = dimensions

    @property
    def dimensions(self) -> list[BaseDimension]:
        return list(self._dimensions)

    def identify(
        self, snapshot: ContextSnapshot, options: EngineOptions
    ) -> list[Candidate]:
        candidates = []
        for dimension in self._dimensions:
            candidate = dimension.evaluate(snapshot, options)
            if candidate is not None:
                candidates.append(candidate)
        return candidates
