#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The notification sync engine.

The engine is the single owner of ``SyncState``. All mutations happen on the
event loop in response to a discrete event (timer tick, user intent, network
response). Network calls are awaited, so the loop keeps accepting intents
while a call is outstanding.

Read-state policy:

- ``mark_as_read`` clears the local unread flag once the server confirms;
  the next refresh replaces the sequence and wins unconditionally.
- ``mark_all_as_read`` clears every local unread flag once the server
  confirms, then refreshes for authoritative state.
- When the query scope changes while a refresh is in flight (show-all
  toggled, mark-all confirmed), exactly one follow-up refresh runs after the
  in-flight one lands, so a stale result is never left standing.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Mapping
import time
from typing import Any
import webbrowser

from provide.foundation.logger import get_logger

from gitwork.client.github import create_client_from_env
from gitwork.client.protocol import NotificationClient
from gitwork.config.models import GitWorkConfig
from gitwork.errors import MissingTokenError, NotificationClientError, UnknownNotificationError
from gitwork.mapping import derive_web_url
from gitwork.models import Notification
from gitwork.runtime.intents import Intent, MarkAllRead, MarkRead, Open, Refresh, ToggleShowAll
from gitwork.state.runtime import SyncSnapshot, SyncState

log = get_logger(__name__)

StateListener = Callable[[SyncSnapshot], None]


class SyncEngine:
    """Keeps a local view of the notification feed in sync with GitHub."""

    def __init__(
        self,
        client: NotificationClient | None,
        config: GitWorkConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        opener: Callable[[str], Any] = webbrowser.open,
        initial_error: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            client: Notification backend, or None for the unauthenticated
                state in which no network calls are made.
            config: gitwork configuration; defaults are used when omitted.
            clock: Monotonic time source used by the auto-refresh gate.
            opener: Callable that opens a URL in the user's browser.
            initial_error: Message shown while unauthenticated.
        """
        self.config = config or GitWorkConfig()
        self.state = SyncState(show_all=self.config.display.show_all)
        self._client = client
        self._clock = clock
        self._opener = opener
        self._listeners: list[StateListener] = []
        self._pending_reads: set[str] = set()
        self._refresh_stale = False
        self._tasks: set[asyncio.Task[Any]] = set()
        self._log = log.bind(engine_id=id(self))

        if client is None:
            self.state.set_error(initial_error or "No GitHub client available.")
            self._log.warning("Sync engine started unauthenticated", error=self.state.error_message)
        else:
            self._log.debug("Sync engine initialized", show_all=self.state.show_all)

    @classmethod
    def from_environment(
        cls,
        config: GitWorkConfig | None = None,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> SyncEngine:
        """Build an engine whose GitHub client is authenticated from the environment.

        A missing token does not raise: the engine comes up unauthenticated
        and carries the remediation message in its error slot.
        """
        config = config or GitWorkConfig()
        try:
            client = create_client_from_env(config.github, environ)
        except MissingTokenError as e:
            log.warning("GitHub token missing", env_var=e.env_var)
            return cls(None, config, initial_error=str(e), **kwargs)
        return cls(client, config, **kwargs)

    @property
    def is_authenticated(self) -> bool:
        return self._client is not None

    def snapshot(self) -> SyncSnapshot:
        return self.state.snapshot()

    # --- Listeners ---

    def subscribe(self, listener: StateListener) -> None:
        """Register a callable that receives a snapshot after every state change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self._log.exception("State listener failed", listener=repr(listener))

    # --- Operations ---

    async def refresh(self) -> bool:
        """Fetch notifications and replace the local sequence.

        Returns:
            True if a refresh was issued and succeeded. False when skipped
            (unauthenticated or already loading) or when the fetch failed.
        """
        if self._client is None:
            self._log.debug("Refresh skipped, no authenticated client")
            return False
        if self.state.is_loading:
            self._log.debug("Refresh skipped, another refresh is in flight")
            return False

        show_all = self.state.show_all
        self.state.begin_refresh()
        self._notify()

        try:
            notifications = await self._client.list_notifications(all=show_all)
        except NotificationClientError as e:
            self.state.fail_refresh(str(e))
            self._log.warning("Notification refresh failed", error=str(e), show_all=show_all)
            succeeded = False
        except asyncio.CancelledError:
            self.state.is_loading = False
            self._refresh_stale = False
            self._notify()
            raise
        else:
            self.state.apply_refresh(notifications, self._clock())
            self._log.info(
                "Notifications refreshed",
                count=len(self.state.notifications),
                unread=self.state.unread_count,
                show_all=show_all,
            )
            succeeded = True
        self._notify()

        if self._refresh_stale:
            self._refresh_stale = False
            self._log.debug("Query scope changed during refresh, refreshing again")
            await self.refresh()

        return succeeded

    async def mark_as_read(self, notification_id: str) -> bool:
        """Mark one notification as read on the server, then locally.

        Raises:
            UnknownNotificationError: If the id is not held in the current state.
        """
        if not self.state.contains(notification_id):
            raise UnknownNotificationError(notification_id)
        if self._client is None:
            return False
        if notification_id in self._pending_reads:
            self._log.debug("Mark-as-read already in flight", notification_id=notification_id)
            return False

        self._pending_reads.add(notification_id)
        try:
            await self._client.mark_read(notification_id)
        except NotificationClientError as e:
            self.state.set_error(f"Failed to mark as read: {e}")
            self._log.warning("Mark-as-read failed", notification_id=notification_id, error=str(e))
            self._notify()
            return False
        finally:
            self._pending_reads.discard(notification_id)

        self.state.mark_read_locally(notification_id)
        self.state.clear_error()
        self._log.debug("Notification marked as read", notification_id=notification_id)
        self._notify()
        return True

    async def mark_all_as_read(self) -> bool:
        """Mark every notification read, then refresh for authoritative state."""
        if self._client is None:
            return False

        try:
            await self._client.mark_all_read()
        except NotificationClientError as e:
            self.state.set_error(f"Failed to mark all as read: {e}")
            self._log.warning("Mark-all-as-read failed", error=str(e))
            self._notify()
            return False

        cleared = self.state.mark_all_read_locally()
        self.state.clear_error()
        self._log.info("All notifications marked as read", cleared=cleared)
        self._notify()

        if self.state.is_loading:
            self._refresh_stale = True
        await self.refresh()
        return True

    async def open(self, notification: Notification) -> str | None:
        """Open a notification in the browser and acknowledge it.

        Opening implies the user has seen the item, so an unread notification
        still held in state is marked as read.

        Returns:
            The URL that was opened, or None when there is no navigable target.
        """
        github = self.config.github
        url = derive_web_url(notification, github.api_url, github.web_url)
        if url:
            try:
                await asyncio.to_thread(self._opener, url)
            except webbrowser.Error as e:
                self._log.warning("Failed to open browser", url=url, error=str(e))
        else:
            self._log.info("Notification has no navigable target", notification_id=notification.id)

        if notification.unread and self._client is not None:
            current = self.state.find(notification.id)
            if current is not None and current.unread:
                await self.mark_as_read(notification.id)

        return url

    def should_auto_refresh(self, now: float | None = None) -> bool:
        """Whether a timer tick at ``now`` should refresh.

        Compares against the last successful refresh, so failures never
        suppress the next attempt.
        """
        last = self.state.last_refresh_time
        if last is None:
            return True
        if now is None:
            now = self._clock()
        return now - last > self.config.refresh.guard_seconds

    async def on_timer_tick(self) -> bool:
        """Handle a periodic timer tick."""
        if self._client is None:
            return False
        if not self.should_auto_refresh():
            self._log.debug("Auto-refresh skipped, last refresh is recent")
            return False
        return await self.refresh()

    async def toggle_show_all(self, show_all: bool) -> bool:
        """Change the filter and refresh so the set matches the new scope."""
        self.state.show_all = show_all
        self._log.debug("Show-all filter set", show_all=show_all)
        self._notify()
        if self.state.is_loading:
            self._refresh_stale = True
        return await self.refresh()

    # --- Intent dispatch ---

    def _coroutine_for(self, intent: Intent) -> Coroutine[Any, Any, Any]:
        if isinstance(intent, Refresh):
            return self.refresh()
        if isinstance(intent, Open):
            return self.open(intent.notification)
        if isinstance(intent, MarkRead):
            return self.mark_as_read(intent.notification_id)
        if isinstance(intent, MarkAllRead):
            return self.mark_all_as_read()
        if isinstance(intent, ToggleShowAll):
            return self.toggle_show_all(intent.show_all)
        raise TypeError(f"Unsupported intent: {intent!r}")

    async def handle(self, intent: Intent) -> Any:
        """Run an intent to completion and return its result."""
        return await self._coroutine_for(intent)

    def dispatch(self, intent: Intent) -> asyncio.Task[Any]:
        """Schedule an intent on the running loop without waiting for it."""
        task = asyncio.create_task(self._coroutine_for(intent), name=f"gitwork-{type(intent).__name__}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("Intent failed", task=task.get_name(), error=str(exc), exc_info=exc)

    async def aclose(self) -> None:
        """Cancel outstanding intents and close the client."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
        self._log.debug("Sync engine closed")


# 🔼⚙️🔚
