#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Periodic timer driving the engine's auto-refresh gate."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

from provide.foundation.logger import get_logger

if TYPE_CHECKING:
    from gitwork.runtime.engine import SyncEngine

log = get_logger(__name__)


class AutoRefreshTimer:
    """Calls ``engine.on_timer_tick()`` every ``interval_seconds``.

    The engine decides whether a tick actually refreshes. A failing tick is
    logged and the loop carries on.
    """

    def __init__(
        self,
        engine: SyncEngine,
        interval_seconds: float | None = None,
        shutdown_event: asyncio.Event | None = None,
    ) -> None:
        if interval_seconds is None:
            interval_seconds = engine.config.refresh.interval_seconds
        self.engine = engine
        self.interval_seconds = interval_seconds
        self._shutdown_event = shutdown_event or asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        """Start the timer loop as a background task."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self.run(), name="gitwork-auto-refresh")
        return self._task

    async def stop(self) -> None:
        """Stop the loop and wait for it to finish."""
        self._shutdown_event.set()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def run(self) -> None:
        """Tick until the shutdown event is set or the task is cancelled."""
        log.info("Auto-refresh timer started", interval_seconds=self.interval_seconds)
        try:
            while not self._shutdown_event.is_set():
                try:
                    await asyncio.wait_for(self._shutdown_event.wait(), timeout=self.interval_seconds)
                except TimeoutError:
                    await self._tick()
        except asyncio.CancelledError:
            log.debug("Auto-refresh timer was cancelled.")
            raise
        finally:
            log.info("Auto-refresh timer finished.", ticks=self.tick_count)

    async def _tick(self) -> None:
        self.tick_count += 1
        try:
            refreshed = await self.engine.on_timer_tick()
        except Exception:
            log.exception("Auto-refresh tick failed", tick=self.tick_count)
        else:
            log.debug("Auto-refresh tick", tick=self.tick_count, refreshed=refreshed)


# 🔼⚙️🔚
