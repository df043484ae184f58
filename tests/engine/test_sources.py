"""Tests for remote and local context sources."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from harbinger.engine.sources import LocalAgentSource, RemoteSwarmSource, auth_headers
from harbinger.types import ContextOrigin

from tests.conftest import write_agent


def _mock_client(get=None, post=None):
    instance = AsyncMock()
    if get is not None:
        instance.get = get
    if post is not None:
        instance.post = post
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    return instance


SWARM = {
    "swarm": {
        "agents": [
            {"id": "recon", "name": "PATHFINDER", "status": "idle", "thought_count": 64},
            {"id": "web", "name": "BREACH", "status": "running"},
        ],
        "pending_proposals": 12,
        "system_health": "degraded",
    }
}


# ── auth_headers ──────────────────────────────────────────────

def test_auth_headers_without_token():
    assert auth_headers("") == {"Content-Type": "application/json"}


def test_auth_headers_with_token():
    assert auth_headers("s3cret")["Authorization"] == "Bearer s3cret"


# ── RemoteSwarmSource ─────────────────────────────────────────

class TestRemoteSwarmSource:
    @pytest.mark.asyncio
    async def test_parses_swarm(self):
        get = AsyncMock(return_value=httpx.Response(200, json=SWARM))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            source = RemoteSwarmSource("http://coord:8080/", "recon", token="tok")
            snapshot = await source.gather()

        assert snapshot.origin is ContextOrigin.REMOTE
        assert snapshot.agent_count == 2
        assert snapshot.self_record.name == "PATHFINDER"
        assert snapshot.thought_count == 64
        assert snapshot.swarm.pending_proposals == 12
        assert snapshot.swarm.system_health == "degraded"

        url = get.call_args.args[0]
        assert url == "http://coord:8080/api/agents/swarm"
        assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_unknown_self_has_no_record(self):
        get = AsyncMock(return_value=httpx.Response(200, json=SWARM))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "ghost").gather()

        assert snapshot.self_record is None
        assert snapshot.thought_count == 0
        assert snapshot.agent_count == 2

    @pytest.mark.asyncio
    async def test_error_status_degrades_to_empty(self):
        get = AsyncMock(return_value=httpx.Response(503, text="down"))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "recon").gather()

        assert snapshot.origin is ContextOrigin.REMOTE
        assert snapshot.swarm is None
        assert snapshot.self_record is None
        assert snapshot.agents == []

    @pytest.mark.asyncio
    async def test_network_error_degrades_to_empty(self):
        get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "recon").gather()

        assert snapshot.swarm is None
        assert snapshot.agent_count == 0

    @pytest.mark.asyncio
    async def test_invalid_json_degrades_to_empty(self):
        get = AsyncMock(return_value=httpx.Response(200, text="<html>not json</html>"))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "recon").gather()

        assert snapshot.swarm is None

    @pytest.mark.asyncio
    async def test_missing_swarm_key_degrades_to_empty(self):
        get = AsyncMock(return_value=httpx.Response(200, json={"swarm": None}))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "recon").gather()

        assert snapshot.swarm is None

    @pytest.mark.asyncio
    async def test_malformed_agents_degrade_to_empty(self):
        bad = {"swarm": {"agents": [{"name": "no id"}]}}
        get = AsyncMock(return_value=httpx.Response(200, json=bad))
        with patch("harbinger.engine.sources.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_client(get=get)
            snapshot = await RemoteSwarmSource("http://coord", "recon").gather()

        assert snapshot.swarm is None


# ── LocalAgentSource ──────────────────────────────────────────

class TestLocalAgentSource:
    @pytest.mark.asyncio
    async def test_discovers_agents(self, agents_dir):
        source = LocalAgentSource(agents_dir, "recon", thought_count=lambda: 9)
        snapshot = await source.gather()

        assert snapshot.origin is ContextOrigin.LOCAL
        assert snapshot.agent_count == 3  # "shared" is skipped
        assert {a.id for a in snapshot.agents} == {"recon", "web", "cloud"}
        assert snapshot.self_record.name == "PATHFINDER"
        assert snapshot.thought_count == 9
        assert snapshot.swarm is None

    @pytest.mark.asyncio
    async def test_missing_directory_is_empty(self, tmp_path):
        snapshot = await LocalAgentSource(tmp_path / "nowhere", "recon").gather()
        assert snapshot.agent_count == 0
        assert snapshot.agents == []
        assert snapshot.thought_count == 0

    @pytest.mark.asyncio
    async def test_thought_counter_failure_degrades(self, agents_dir):
        def broken() -> int:
            raise RuntimeError("counter gone")

        snapshot = await LocalAgentSource(agents_dir, "recon", thought_count=broken).gather()
        assert snapshot.agent_count == 0
        assert snapshot.origin is ContextOrigin.LOCAL

    @pytest.mark.asyncio
    async def test_sees_new_agents_between_calls(self, agents_dir):
        source = LocalAgentSource(agents_dir, "recon")
        assert (await source.gather()).agent_count == 3
        write_agent(agents_dir, "mobile", "Codename: HANDSET")
        assert (await source.gather()).agent_count == 4
