#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Contract between the sync engine and a notifications backend."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gitwork.models import Notification


@runtime_checkable
class NotificationClient(Protocol):
    """Protocol for notification backends.

    Implementations own authentication and transport. Every failure is raised
    as ``NotificationClientError``.
    """

    async def list_notifications(self, all: bool = False) -> Sequence[Notification]:
        """Fetch notifications, newest first.

        Args:
            all: Include notifications already marked as read.
        """
        ...

    async def mark_read(self, notification_id: str) -> None:
        """Mark a single notification thread as read."""
        ...

    async def mark_all_read(self) -> None:
        """Mark every notification as read."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""
        ...


# 🔼⚙️🔚
