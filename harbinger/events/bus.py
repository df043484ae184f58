"""Event Bus: pub/sub for engine lifecycle events.

Engines publish the topics in ``EngineTopic`` with their ``agent_id`` in the
payload. Subscribers match topics with shell-style wildcards, so "engine.*"
receives every engine event and "*" receives everything. The bus also keeps
a bounded history that diagnostics can slice by topic and by agent.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field

from harbinger.types import AgentId, EngineTopic, new_id

EventHandler = Callable[["Event"], Awaitable[None]]


def _topic_name(topic: str | EngineTopic) -> str:
    return topic.value if isinstance(topic, EngineTopic) else topic


class Event(BaseModel):
    """Something that happened inside an engine."""

    id: str = Field(default_factory=new_id)
    topic: str
    data: dict[str, Any] = Field(default_factory=dict)
    source: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def agent_id(self) -> AgentId | None:
        return self.data.get("agent_id")

    @property
    def is_engine_event(self) -> bool:
        return self.topic in {t.value for t in EngineTopic}


class EventBus:
    """Async pub/sub with a bounded history for diagnostics."""

    def __init__(self, history_limit: int = 500) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, pattern: str | EngineTopic, handler: EventHandler) -> None:
        self._subscribers[_topic_name(pattern)].append(handler)

    def unsubscribe(self, pattern: str | EngineTopic, handler: EventHandler) -> None:
        handlers = self._subscribers.get(_topic_name(pattern), [])
        if handler in handlers:
            handlers.remove(handler)

    async def emit(
        self, topic: str | EngineTopic, data: dict | None = None, source: str = ""
    ) -> Event:
        """Deliver an event to every matching subscriber.

        Handler exceptions are collected and dropped; one broken subscriber
        cannot stop an engine cycle.
        """
        event = Event(topic=_topic_name(topic), data=data or {}, source=source)

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

        handlers = [
            handler
            for pattern, subscribed in self._subscribers.items()
            if fnmatch.fnmatch(event.topic, pattern)
            for handler in subscribed
        ]
        if handlers:
            await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)

        return event

    def _matching(
        self, topic_filter: str | EngineTopic, agent_id: AgentId | None
    ) -> list[Event]:
        pattern = _topic_name(topic_filter)
        return [
            e
            for e in self._history
            if fnmatch.fnmatch(e.topic, pattern)
            and (agent_id is None or e.agent_id == agent_id)
        ]

    def history(
        self,
        topic_filter: str | EngineTopic = "*",
        limit: int = 50,
        agent_id: AgentId | None = None,
    ) -> list[Event]:
        """Recent events, newest first. ``agent_id`` narrows to one engine."""
        if limit <= 0:
            return []
        events = self._matching(topic_filter, agent_id)
        return list(reversed(events[-limit:]))

    def topic_counts(self, agent_id: AgentId | None = None) -> dict[str, int]:
        """How many engine events of each topic the history holds."""
        counts = Counter(
            e.topic for e in self._matching("engine.*", agent_id) if e.is_engine_event
        )
        return {t.value: counts.get(t.value, 0) for t in EngineTopic}

    @property
    def subscriber_count(self) -> int:
        return sum(len(h) for h in self._subscribers.values())
