"""Context sources: where an engine looks before it thinks.

A source builds a fresh ContextSnapshot each time it is asked. Sources
absorb their own failures: an unreachable coordinator or an unreadable
agents directory yields an empty snapshot instead of an exception, so a
cycle always has something to evaluate.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

import httpx
from pydantic import ValidationError

from harbinger.agents.profiles import discover_agents
from harbinger.engine.models import ContextSnapshot, SwarmStatus
from harbinger.types import AgentId, ContextOrigin

_logger = logging.getLogger(__name__)


def auth_headers(token: str) -> dict[str, str]:
    """Headers for the coordinator API, with a bearer token when one is set."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class ContextSource(ABC):
    """Produces a context snapshot on demand."""

    origin: ContextOrigin

    @abstractmethod
    async def gather(self) -> ContextSnapshot:
        """Build a snapshot. Must not raise; degrade to ``ContextSnapshot.empty``."""
        ...


class RemoteSwarmSource(ContextSource):
    """Reads swarm status from the coordinator's ``/api/agents/swarm`` endpoint."""

    origin = ContextOrigin.REMOTE

    def __init__(
        self,
        api_base: str,
        agent_id: AgentId,
        token: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._agent_id = agent_id
        self._token = token
        self._timeout = timeout

    @property
    def url(self) -> str:
        return f"{self._api_base}/api/agents/swarm"

    async def gather(self) -> ContextSnapshot:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(self.url, headers=auth_headers(self._token))
                if resp.is_error:
                    _logger.debug("Swarm status returned %s", resp.status_code)
                    return ContextSnapshot.empty(self.origin)
                data = resp.json()
            swarm_data = data.get("swarm") if isinstance(data, dict) else None
            if not swarm_data:
                return ContextSnapshot.empty(self.origin)
            swarm = SwarmStatus.model_validate(swarm_data)
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            _logger.debug("Swarm status unavailable: %s", e)
            return ContextSnapshot.empty(self.origin)

        self_record = next((a for a in swarm.agents if a.id == self._agent_id), None)
        return ContextSnapshot(
            origin=self.origin,
            agents=swarm.agents,
            agent_count=len(swarm.agents),
            self_record=self_record,
            thought_count=self_record.thought_count if self_record else 0,
            swarm=swarm,
        )


class LocalAgentSource(ContextSource):
    """Discovers agent profiles on disk, in-process.

    ``thought_count`` reports how many thoughts this engine has stored so far;
    it is normally bound to the local buffer sink's length.
    """

    origin = ContextOrigin.LOCAL

    def __init__(
        self,
        agents_dir: Path,
        agent_id: AgentId,
        thought_count: Callable[[], int] | None = None,
    ) -> None:
        self._agents_dir = Path(agents_dir)
        self._agent_id = agent_id
        self._thought_count = thought_count or (lambda: 0)

    async def gather(self) -> ContextSnapshot:
        try:
            profiles = await asyncio.to_thread(discover_agents, self._agents_dir)
            agents = [p.to_record() for p in profiles]
            thought_count = self._thought_count()
        except Exception as e:
            _logger.debug("Agent discovery failed in %s: %s", self._agents_dir, e)
            return ContextSnapshot.empty(self.origin)

        return ContextSnapshot(
            origin=self.origin,
            agents=agents,
            agent_count=len(agents),
            self_record=next((a for a in agents if a.id == self._agent_id), None),
            thought_count=thought_count,
        )
