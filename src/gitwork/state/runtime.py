#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""In-memory notification sync state."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from attrs import define, field
from provide.foundation.logger import get_logger

from gitwork.models import Notification

log = get_logger(__name__)


@define(frozen=True, slots=True)
class SyncSnapshot:
    """Immutable view of the sync state handed to presentation adapters."""

    notifications: tuple[Notification, ...]
    unread_count: int
    is_loading: bool
    error: str | None
    show_all: bool
    last_refresh_at: datetime | None

    @property
    def visible_notifications(self) -> tuple[Notification, ...]:
        """Notifications relevant for display under the current filter."""
        if self.show_all:
            return self.notifications
        return tuple(n for n in self.notifications if n.unread)


@define(slots=True)
class SyncState:
    """Mutable notification state owned by a single SyncEngine.

    The notification sequence keeps server order and is only ever replaced
    wholesale by ``apply_refresh``; read-state edits swap individual items for
    updated copies.
    """

    show_all: bool = field(default=False)
    notifications: list[Notification] = field(factory=list)
    is_loading: bool = field(default=False)
    error_message: str | None = field(default=None)
    last_refresh_time: float | None = field(default=None)
    last_refresh_at: datetime | None = field(default=None)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if n.unread)

    def find(self, notification_id: str) -> Notification | None:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        return None

    def contains(self, notification_id: str) -> bool:
        return self.find(notification_id) is not None

    def begin_refresh(self) -> None:
        self.is_loading = True
        self.error_message = None

    def apply_refresh(self, notifications: Iterable[Notification], now: float) -> None:
        """Replace the notification sequence with a fresh server result."""
        self.notifications = list(notifications)
        self.is_loading = False
        self.error_message = None
        self.last_refresh_time = now
        self.last_refresh_at = datetime.now(UTC)

    def fail_refresh(self, message: str) -> None:
        """Record a failed refresh; previously fetched notifications stay."""
        self.is_loading = False
        self.error_message = message

    def mark_read_locally(self, notification_id: str) -> bool:
        """Clear the unread flag of one notification.

        Returns:
            True if a notification flipped from unread to read.
        """
        for index, notification in enumerate(self.notifications):
            if notification.id == notification_id:
                if not notification.unread:
                    return False
                self.notifications[index] = notification.as_read()
                return True
        log.debug("Notification no longer held, skipping local read flag", notification_id=notification_id)
        return False

    def mark_all_read_locally(self) -> int:
        """Clear every unread flag, returning how many changed."""
        changed = 0
        for index, notification in enumerate(self.notifications):
            if notification.unread:
                self.notifications[index] = notification.as_read()
                changed += 1
        return changed

    def set_error(self, message: str) -> None:
        self.error_message = message

    def clear_error(self) -> None:
        self.error_message = None

    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot(
            notifications=tuple(self.notifications),
            unread_count=self.unread_count,
            is_loading=self.is_loading,
            error=self.error_message,
            show_all=self.show_all,
            last_refresh_at=self.last_refresh_at,
        )


# 🔼⚙️🔚
