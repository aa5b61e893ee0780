"""Periodic background tasks driven from the application lifespan."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger("balloonwatch.scheduler")

TickCallback = Callable[[], Awaitable[Any]]


class PeriodicTask:
    """Call ``callback`` every ``interval`` seconds until cancelled.

    A failing tick is logged and the loop carries on with the next one.
    """

    def __init__(
        self,
        name: str,
        callback: TickCallback,
        *,
        interval: float,
        run_immediately: bool = True,
        max_ticks: int | None = None,
    ) -> None:
        self.name = name
        self.callback = callback
        self.interval = interval
        self.run_immediately = run_immediately
        self.max_ticks = max_ticks
        self.ticks = 0

    async def run(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval)
        while True:
            try:
                await self.callback()
            except asyncio.CancelledError:
                logger.info("%s task cancelled", self.name)
                raise
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.warning("%s tick failed: %s", self.name, exc)

            self.ticks += 1
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                return
            await asyncio.sleep(self.interval)


__all__ = ["PeriodicTask", "TickCallback"]
