#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""User intents a presentation adapter sends into the sync engine."""

from __future__ import annotations

from typing import TypeAlias

from attrs import define

from gitwork.models import Notification


@define(frozen=True, slots=True)
class Refresh:
    """Re-fetch notifications now."""


@define(frozen=True, slots=True)
class Open:
    """Open a notification in the browser (marks it read when unread)."""

    notification: Notification


@define(frozen=True, slots=True)
class MarkRead:
    """Mark a single notification as read."""

    notification_id: str


@define(frozen=True, slots=True)
class MarkAllRead:
    """Mark every notification as read."""


@define(frozen=True, slots=True)
class ToggleShowAll:
    """Switch between all notifications and unread only."""

    show_all: bool


Intent: TypeAlias = Refresh | Open | MarkRead | MarkAllRead | ToggleShowAll

# 🔼⚙️🔚
