"""CLI runtime context: bridges the sync CLI to the async engine."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

from harbinger.config import HarbingerSettings, settings
from harbinger.events.bus import EventBus


class HarbingerContext:
    """Process-wide context holding settings and the event bus."""

    _instance: HarbingerContext | None = None

    def __init__(self, settings: HarbingerSettings = settings) -> None:
        self.settings = settings
        self.event_bus = EventBus()

    @classmethod
    def get(cls) -> HarbingerContext:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance


def run_async(coro: Coroutine) -> Any:
    """Run an async coroutine from sync CLI code."""
    return asyncio.run(coro)
