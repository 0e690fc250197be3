#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Plain-text rendering of sync snapshots for the console."""

from __future__ import annotations

from datetime import UTC, datetime

from gitwork.mapping import format_time_ago, reason_label
from gitwork.models import Notification, SubjectKind
from gitwork.state.runtime import SyncSnapshot

UNREAD_MARKER = "●"
READ_MARKER = "○"

KIND_TAGS = {
    SubjectKind.PULL_REQUEST: "PR",
    SubjectKind.ISSUE: "Issue",
    SubjectKind.RELEASE: "Release",
    SubjectKind.REPOSITORY_INVITATION: "Invite",
    SubjectKind.SECURITY_ALERT: "Security",
    SubjectKind.DISCUSSION: "Discussion",
}

TOKEN_REMEDIATION = (
    "To fix this:",
    "  1. Create a Personal Access Token on GitHub",
    "  2. Set the {env_var} environment variable",
    "  3. Restart gitwork",
)


def format_notification(notification: Notification, now: datetime | None = None) -> str:
    """One line per notification: marker, id, kind, title, repo, reason, age."""
    marker = UNREAD_MARKER if notification.unread else READ_MARKER
    kind = KIND_TAGS.get(notification.subject.kind, notification.subject.type or "Other")
    repo = notification.repository.full_name or "-"
    age = format_time_ago(notification.updated_at, now or datetime.now(UTC))
    return (
        f"{marker} {notification.id:>12} [{kind}] {notification.subject.title} "
        f"({repo}) · {reason_label(notification.reason)} · {age}"
    )


def format_snapshot(snapshot: SyncSnapshot, now: datetime | None = None) -> list[str]:
    """Render a full snapshot, including the error and empty states."""
    lines = []
    if snapshot.error:
        lines.append(f"❌ Error: {snapshot.error}")
    if snapshot.is_loading:
        lines.append("Loading notifications...")
        return lines

    visible = snapshot.visible_notifications
    if not visible:
        if not snapshot.error:
            lines.append("🎉 All caught up! No new notifications")
        return lines

    scope = "all" if snapshot.show_all else "unread"
    lines.append(f"{len(visible)} notifications ({snapshot.unread_count} unread, showing {scope})")
    lines.extend(format_notification(n, now) for n in visible)
    return lines


def remediation_lines(env_var: str) -> list[str]:
    return [line.format(env_var=env_var) for line in TOKEN_REMEDIATION]


# 🔼⚙️🔚
