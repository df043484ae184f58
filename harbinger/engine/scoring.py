"""Cost-benefit scoring and automation classification.

    COST_BENEFIT = (TIME_SAVED * FREQUENCY) / (IMPL_COST + RUNNING_COST)

Only candidates with a cost-benefit of at least 1.0 are surfaced. The base
tables are hand-tuned heuristics; changing them changes which thoughts get
accepted.
"""

from __future__ import annotations

import math
from enum import Enum

from harbinger.engine.models import Efficiency
from harbinger.types import AutomationType, Category

COST_BENEFIT_THRESHOLD = 1.0
RUNNING_COST_RATIO = 0.1  # ongoing cost as a share of implementation cost

BASE_TIME_SAVED: dict[str, float] = {
    "performance": 2,
    "accuracy": 1,
    "cost": 3,
    "automation": 4,
    "collaboration": 2,
}
BASE_FREQUENCY: dict[str, float] = {
    "performance": 7,
    "accuracy": 3,
    "cost": 1,
    "automation": 14,
    "collaboration": 2,
}
BASE_COST: dict[str, float] = {
    "performance": 4,
    "accuracy": 2,
    "cost": 1,
    "automation": 8,
    "collaboration": 6,
}

DEFAULT_TIME_SAVED = 1
DEFAULT_FREQUENCY = 1
DEFAULT_COST = 4

_AUTOMATION_BY_CATEGORY: dict[str, AutomationType] = {
    "automation": AutomationType.SCRIPT,  # repetitive work -> script it
    "performance": AutomationType.CODE_CHANGE,
    "collaboration": AutomationType.WORKFLOW,  # multi-agent -> orchestration
    "accuracy": AutomationType.SKILL,
}


def _key(category: Category | str) -> str:
    return category.value if isinstance(category, Enum) else str(category)


def _round2(value: float) -> float:
    """Round half-up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def calculate_efficiency(category: Category | str, priority: int) -> Efficiency:
    """Score a candidate from its category and priority.

    ``frequency`` and ``implementation_cost`` come straight from the tables;
    the other figures are rounded to two decimals. ``cost_benefit`` is
    computed from the unrounded values.
    """
    cat = _key(category)
    time_saved = BASE_TIME_SAVED.get(cat, DEFAULT_TIME_SAVED) * (priority / 3)
    frequency = BASE_FREQUENCY.get(cat, DEFAULT_FREQUENCY)
    implementation_cost = BASE_COST.get(cat, DEFAULT_COST)
    running_cost = implementation_cost * RUNNING_COST_RATIO

    cost_benefit = (time_saved * frequency) / (implementation_cost + running_cost)

    return Efficiency(
        time_saved=_round2(time_saved),
        frequency=frequency,
        implementation_cost=implementation_cost,
        running_cost=_round2(running_cost),
        cost_benefit=_round2(cost_benefit),
    )


def is_profitable(efficiency: Efficiency) -> bool:
    return efficiency.cost_benefit >= COST_BENEFIT_THRESHOLD


def classify_automation(category: Category | str) -> AutomationType:
    """Map a category to the kind of automation it calls for."""
    return _AUTOMATION_BY_CATEGORY.get(_key(category), AutomationType.SCRIPT)
