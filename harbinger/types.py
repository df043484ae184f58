"""Core types shared across all harbinger subsystems."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import TypeAlias

# ── ID Types ──────────────────────────────────────────────────────────────────

AgentId: TypeAlias = str


def new_id() -> str:
    return uuid.uuid4().hex[:12]


# ── Candidate vocabulary ──────────────────────────────────────────────────────


class CandidateKind(str, Enum):
    OBSERVATION = "observation"
    ENHANCEMENT = "enhancement"
    ALERT = "alert"
    PROPOSAL = "proposal"


class Category(str, Enum):
    PERFORMANCE = "performance"
    ACCURACY = "accuracy"
    COST = "cost"
    AUTOMATION = "automation"
    COLLABORATION = "collaboration"


class AutomationType(str, Enum):
    SCRIPT = "script"
    CODE_CHANGE = "code_change"
    WORKFLOW = "workflow"
    SKILL = "skill"


# ── Engine modes ──────────────────────────────────────────────────────────────


class ContextOrigin(str, Enum):
    """Where a context snapshot came from. Selects the dimension triggers."""

    REMOTE = "remote"
    LOCAL = "local"


# ── Event topics ──────────────────────────────────────────────────────────────


class EngineTopic(str, Enum):
    """Topics an engine publishes on the event bus."""

    STARTED = "engine.started"
    STOPPED = "engine.stopped"
    THOUGHT_ACCEPTED = "engine.thought_accepted"
    CYCLE_FAILED = "engine.cycle_failed"
    CYCLE_SKIPPED = "engine.cycle_skipped"
