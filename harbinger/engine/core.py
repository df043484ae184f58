"""Autonomous engine: the background thinking loop every agent runs.

On every cycle the engine gathers context, identifies enhancements along
five dimensions, scores each one, and hands the profitable ones (with an
automation type attached) to its sink.

Where context comes from and where thoughts go are pluggable: the same
engine reports to a remote coordinator or keeps a local buffer depending
on the source and sink it is built with.

Cycles never raise. A failing cycle is logged (for the first few cycles
only), announced on the event bus, and the timer keeps ticking.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from harbinger.engine.identifier import EnhancementIdentifier
from harbinger.engine.models import (
    Candidate,
    ContextSnapshot,
    EngineOptions,
    EngineStatus,
)
from harbinger.engine.scoring import calculate_efficiency, classify_automation, is_profitable
from harbinger.engine.sinks import EnhancementSink, LocalBufferSink
from harbinger.engine.sources import ContextSource
from harbinger.events.bus import EventBus
from harbinger.types import EngineTopic

logger = structlog.get_logger()

# Cycle and context errors are only logged this many cycles into a run.
ERROR_LOG_CYCLES = 3


class AutonomousEngine:
    """Runs think cycles on a fixed interval.

    ``start()`` runs the first cycle right away and then one per interval.
    A tick that arrives while the previous cycle is still running is skipped
    rather than overlapping it.
    """

    def __init__(
        self,
        source: ContextSource,
        sink: EnhancementSink,
        options: EngineOptions | None = None,
        identifier: EnhancementIdentifier | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._source = source
        self._sink = sink
        self._options = options or EngineOptions()
        self._identifier = identifier or EnhancementIdentifier()
        self._event_bus = event_bus
        self._running = False
        self._cycle_count = 0
        self._last_context: ContextSnapshot | None = None
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None

    async def start(self) -> None:
        """Start thinking. A no-op if already running."""
        if self._running:
            return
        self._running = True
        logger.info(
            "engine_started",
            agent=self._options.agent_name,
            interval_s=self._options.interval_ms / 1000,
        )

        self._launch_cycle()
        self._timer = asyncio.create_task(self._tick_loop())
        await self._emit(EngineTopic.STARTED, {"interval_ms": self._options.interval_ms})

    async def stop(self) -> None:
        """Stop the timer. A cycle already in flight runs to completion."""
        if not self._running:
            return
        self._running = False
        if self._timer and not self._timer.done():
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        self._timer = None
        logger.info(
            "engine_stopped", agent=self._options.agent_name, cycles=self._cycle_count
        )
        await self._emit(EngineTopic.STOPPED, {"cycles": self._cycle_count})

    async def run_cycle(self) -> list[Candidate]:
        """Run one think cycle and return the candidates handed to the sink."""
        self._cycle_count += 1
        cycle = self._cycle_count
        accepted: list[Candidate] = []

        try:
            snapshot = await self._gather(cycle)
            self._last_context = snapshot

            for candidate in self._identifier.identify(snapshot, self._options):
                efficiency = calculate_efficiency(candidate.category, candidate.priority)
                if not is_profitable(efficiency):
                    continue

                efficiency = efficiency.model_copy(
                    update={"automation_type": classify_automation(candidate.category)}
                )
                enriched = candidate.with_efficiency(efficiency)
                await self._sink.record(enriched)
                accepted.append(enriched)
                await self._emit(
                    EngineTopic.THOUGHT_ACCEPTED,
                    {
                        "cycle": cycle,
                        "category": enriched.category.value,
                        "title": enriched.title,
                        "cost_benefit": efficiency.cost_benefit,
                    },
                )
        except Exception as e:
            if cycle <= ERROR_LOG_CYCLES:
                logger.error(
                    "engine_cycle_failed",
                    agent=self._options.agent_name,
                    cycle=cycle,
                    error=str(e),
                )
            await self._emit(EngineTopic.CYCLE_FAILED, {"cycle": cycle, "error": str(e)})

        return accepted

    async def wait_for_cycle(self) -> None:
        """Wait for the cycle currently in flight, if any."""
        if self._inflight is not None and not self._inflight.done():
            await asyncio.shield(self._inflight)

    def get_status(self) -> EngineStatus:
        return EngineStatus(
            running=self._running,
            cycle_count=self._cycle_count,
            interval_ms=self._options.interval_ms,
            agent_id=self._options.agent_id,
            agent_name=self._options.agent_name,
            thought_count=(
                len(self._sink) if isinstance(self._sink, LocalBufferSink) else None
            ),
        )

    def get_last_context(self) -> ContextSnapshot | None:
        return self._last_context

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def options(self) -> EngineOptions:
        return self._options

    @property
    def sink(self) -> EnhancementSink:
        return self._sink

    async def _gather(self, cycle: int) -> ContextSnapshot:
        """Ask the source for context, stamped with the current cycle."""
        try:
            snapshot = await self._source.gather()
        except Exception as e:
            if cycle <= ERROR_LOG_CYCLES:
                logger.warning("engine_context_unavailable", cycle=cycle, error=str(e))
            snapshot = ContextSnapshot.empty(self._source.origin)
        return snapshot.model_copy(update={"cycle_count": cycle})

    def _launch_cycle(self) -> bool:
        """Start a cycle task unless one is already running."""
        if self._inflight is not None and not self._inflight.done():
            return False
        self._inflight = asyncio.create_task(self.run_cycle())
        return True

    async def _tick_loop(self) -> None:
        interval_seconds = self._options.interval_ms / 1000
        while self._running:
            try:
                await asyncio.sleep(interval_seconds)
            except asyncio.CancelledError:
                break
            if not self._running:
                break
            if not self._launch_cycle():
                logger.debug("engine_cycle_skipped", cycle=self._cycle_count)
                await self._emit(EngineTopic.CYCLE_SKIPPED, {"cycle": self._cycle_count})

    async def _emit(self, topic: EngineTopic, data: dict[str, Any]) -> None:
        if self._event_bus is not None:
            data = {"agent_id": self._options.agent_id, **data}
            await self._event_bus.emit(topic, data, source="autonomous_engine")
