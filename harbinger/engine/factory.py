"""Engine factory: wires the right collaborators for a deployment mode.

"remote" reads swarm status from the coordinator and POSTs thoughts back.
"local" scans agent profiles on disk and keeps thoughts in a ring buffer.
"""

from __future__ import annotations

from harbinger.config import HarbingerSettings, settings as default_settings
from harbinger.engine.core import AutonomousEngine
from harbinger.engine.models import EngineOptions
from harbinger.engine.sinks import LocalBufferSink, RemoteCoordinatorSink
from harbinger.engine.sources import LocalAgentSource, RemoteSwarmSource
from harbinger.events.bus import EventBus
from harbinger.exceptions import EngineStateError

ENGINE_MODES = ("local", "remote")


def options_from_settings(settings: HarbingerSettings | None = None) -> EngineOptions:
    settings = settings or default_settings
    return EngineOptions(
        agent_id=settings.agent_id,
        agent_name=settings.agent_name,
        agent_type=settings.agent_type,
        interval_ms=settings.interval_ms,
    )


def create_engine(
    options: EngineOptions | None = None,
    mode: str | None = None,
    settings: HarbingerSettings | None = None,
    event_bus: EventBus | None = None,
) -> AutonomousEngine:
    """Build an engine for ``mode`` (defaults to ``settings.engine_mode``)."""
    settings = settings or default_settings
    options = options or options_from_settings(settings)
    mode = mode or settings.engine_mode

    if mode == "remote":
        source = RemoteSwarmSource(
            settings.api_base,
            options.agent_id,
            token=settings.api_token,
            timeout=settings.http_timeout_seconds,
        )
        sink = RemoteCoordinatorSink(
            settings.api_base,
            options.agent_id,
            options.agent_name,
            token=settings.api_token,
            timeout=settings.http_timeout_seconds,
        )
    elif mode == "local":
        sink = LocalBufferSink(
            options.agent_id, options.agent_name, capacity=settings.max_thoughts
        )
        source = LocalAgentSource(
            settings.agents_dir, options.agent_id, thought_count=sink.__len__
        )
    else:
        raise EngineStateError(
            f"Unknown engine mode: {mode!r} (expected one of {', '.join(ENGINE_MODES)})"
        )

    return AutonomousEngine(source, sink, options=options, event_bus=event_bus)
