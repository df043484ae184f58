"""harbinger server: diagnostics API with the autonomous engine alongside.

Boot sequence:
1. discover agent profiles and log what was found
2. start the autonomous engine if HARBINGER_AUTONOMOUS_THINKING=true
3. serve the diagnostics API until interrupted, then stop the engine
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from harbinger.agents.profiles import discover_agents
from harbinger.config import HarbingerSettings, settings as default_settings
from harbinger.dashboard.app import create_dashboard
from harbinger.engine.factory import create_engine, options_from_settings
from harbinger.engine.registry import EngineRegistry
from harbinger.events.bus import EventBus

_logger = logging.getLogger(__name__)


def build_registry(
    settings: HarbingerSettings,
    event_bus: EventBus | None = None,
    mode: str | None = None,
) -> EngineRegistry:
    return EngineRegistry(
        factory=lambda options: create_engine(
            options, mode=mode, settings=settings, event_bus=event_bus
        )
    )


async def boot(registry: EngineRegistry, settings: HarbingerSettings) -> None:
    """Discover agents and, when enabled, start thinking."""
    profiles = await asyncio.to_thread(discover_agents, settings.agents_dir)
    if profiles:
        _logger.info(
            "%d agent profiles loaded (%s)",
            len(profiles),
            ", ".join(p.display_name for p in profiles),
        )

    if settings.autonomous_thinking:
        await registry.start_engine(options_from_settings(settings))
        _logger.info("Autonomous thinking engine started (%s mode)", settings.engine_mode)


async def main(settings: HarbingerSettings | None = None) -> None:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())

    event_bus = EventBus()
    registry = build_registry(settings, event_bus)
    await boot(registry, settings)

    config = uvicorn.Config(
        create_dashboard(registry, settings=settings, event_bus=event_bus),
        host=settings.dashboard_host,
        port=settings.dashboard_port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    try:
        await server.serve()
    finally:
        await registry.stop_engine()


if __name__ == "__main__":
    asyncio.run(main())
