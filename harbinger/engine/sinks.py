"""Enhancement sinks: where accepted thoughts go.

A sink takes one efficiency-enriched candidate at a time. Like sources,
sinks absorb their own failures: a rejected or failed POST is logged and
dropped, never retried within the cycle and never raised to the engine.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx

from harbinger.engine.models import Candidate, Thought
from harbinger.engine.sources import auth_headers
from harbinger.types import AgentId

_logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200


class EnhancementSink(ABC):
    """Consumes accepted candidates."""

    @abstractmethod
    async def record(self, candidate: Candidate) -> None:
        """Record one accepted candidate. Must not raise."""
        ...


class RemoteCoordinatorSink(EnhancementSink):
    """POSTs thoughts to the coordinator's ``/api/agents/thoughts`` endpoint.

    Ownership passes to the coordinator; nothing is kept locally.
    """

    def __init__(
        self,
        api_base: str,
        agent_id: AgentId,
        agent_name: str,
        token: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._agent_id = agent_id
        self._agent_name = agent_name
        self._token = token
        self._timeout = timeout

    @property
    def url(self) -> str:
        return f"{self._api_base}/api/agents/thoughts"

    async def record(self, candidate: Candidate) -> None:
        thought = Thought.from_candidate(candidate, self._agent_id, self._agent_name)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self.url,
                    json=thought.to_payload(),
                    headers=auth_headers(self._token),
                )
        except httpx.HTTPError as e:
            _logger.warning("[%s] Could not report thought: %s", self._agent_name, e)
            return

        if resp.is_error:
            _logger.error(
                "[%s] Failed to report thought: %s", self._agent_name, resp.status_code
            )


class LocalBufferSink(EnhancementSink):
    """Keeps the most recent thoughts in memory, evicting the oldest first.

    Sized like a container: an empty buffer is falsy, so compare against
    None rather than relying on truthiness.
    """

    def __init__(
        self,
        agent_id: AgentId,
        agent_name: str,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._agent_id = agent_id
        self._agent_name = agent_name
        self._capacity = capacity
        self._thoughts: list[Thought] = []
        self._lock = asyncio.Lock()

    async def record(self, candidate: Candidate) -> None:
        thought = Thought.from_candidate(candidate, self._agent_id, self._agent_name)
        async with self._lock:
            self._thoughts.append(thought)
            if len(self._thoughts) > self._capacity:
                self._thoughts = self._thoughts[-self._capacity:]
        _logger.debug("[%s] Thought: %s", self._agent_name, thought.title)

    def thoughts(self, limit: int | None = None) -> list[Thought]:
        """Stored thoughts, oldest first. ``limit`` keeps the most recent N."""
        if limit is None:
            return list(self._thoughts)
        if limit <= 0:
            return []
        return self._thoughts[-limit:]

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._thoughts)
