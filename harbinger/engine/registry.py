"""Engine registry: at most one running engine per process.

The registry is an ordinary object owned by whoever boots the process
(the CLI context, the server); nothing here is module-global.
"""

from __future__ import annotations

from typing import Callable

import structlog

from harbinger.engine.core import AutonomousEngine
from harbinger.engine.factory import create_engine
from harbinger.engine.models import EngineOptions
from harbinger.engine.sinks import EnhancementSink
from harbinger.engine.sources import ContextSource
from harbinger.exceptions import EngineStateError

logger = structlog.get_logger()

EngineFactory = Callable[[EngineOptions], AutonomousEngine]


class EngineRegistry:
    """Holds the process's engine and controls its lifecycle."""

    def __init__(self, factory: EngineFactory | None = None) -> None:
        self._factory = factory or (lambda options: create_engine(options))
        self._engine: AutonomousEngine | None = None

    async def start_engine(
        self,
        options: EngineOptions | None = None,
        source: ContextSource | None = None,
        sink: EnhancementSink | None = None,
    ) -> AutonomousEngine:
        """Start an engine, or return the one already held.

        An existing engine is returned as-is; ``options`` do not reconfigure it.
        """
        if self._engine is not None:
            return self._engine

        options = options or EngineOptions()
        if (source is None) != (sink is None):
            raise EngineStateError("source and sink must be given together")
        if source is not None and sink is not None:
            engine = AutonomousEngine(source, sink, options=options)
        else:
            engine = self._factory(options)

        self._engine = engine
        await engine.start()
        logger.info("engine_registered", agent=options.agent_name)
        return engine

    async def stop_engine(self) -> None:
        """Stop and discard the held engine. A no-op if there is none."""
        engine, self._engine = self._engine, None
        if engine is not None:
            await engine.stop()

    def get_engine(self) -> AutonomousEngine | None:
        return self._engine
