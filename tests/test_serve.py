"""Tests for the server boot sequence."""

import pytest

from harbinger.config import HarbingerSettings
from harbinger.events.bus import EventBus
from harbinger.serve import boot, build_registry


def _settings(agents_dir, **overrides) -> HarbingerSettings:
    return HarbingerSettings(
        agent_id="recon",
        agent_name="RECON",
        interval_ms=60_000,
        engine_mode="local",
        agents_dir=agents_dir,
        **overrides,
    )


@pytest.mark.asyncio
async def test_boot_starts_engine_when_enabled(agents_dir):
    settings = _settings(agents_dir, autonomous_thinking=True)
    bus = EventBus()
    registry = build_registry(settings, bus)

    await boot(registry, settings)
    engine = registry.get_engine()
    try:
        assert engine is not None
        assert engine.is_running
        assert engine.options.agent_name == "RECON"
        assert bus.history("engine.started")
        await engine.wait_for_cycle()
    finally:
        await registry.stop_engine()

    assert registry.get_engine() is None


@pytest.mark.asyncio
async def test_boot_leaves_engine_off_by_default(agents_dir):
    settings = _settings(agents_dir, autonomous_thinking=False)
    registry = build_registry(settings)

    await boot(registry, settings)

    assert registry.get_engine() is None


@pytest.mark.asyncio
async def test_boot_tolerates_missing_agents_dir(tmp_path):
    settings = _settings(tmp_path / "nowhere", autonomous_thinking=True)
    registry = build_registry(settings)

    await boot(registry, settings)
    try:
        engine = registry.get_engine()
        assert engine.is_running
        await engine.wait_for_cycle()
    finally:
        await registry.stop_engine()
