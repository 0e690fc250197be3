#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Pure display derivations for notifications.

Nothing here holds state or touches the network. Reason codes and subject
types are open sets controlled by GitHub, so every lookup has a default arm.
"""

from __future__ import annotations

from datetime import UTC, datetime

from gitwork.models import Notification, SubjectKind

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"

REASON_LABELS = {
    "assign": "You were assigned",
    "author": "You authored this",
    "comment": "You commented",
    "invitation": "You were invited",
    "manual": "You subscribed",
    "mention": "You were mentioned",
    "review_requested": "Review requested",
    "security_alert": "Security alert",
    "state_change": "State changed",
    "subscribed": "You're subscribed",
    "team_mention": "Team mentioned",
    "ci_activity": "Workflow activity",
}

SUBJECT_ICONS = {
    SubjectKind.PULL_REQUEST: "vcs-pull-request-symbolic",
    SubjectKind.ISSUE: "dialog-information-symbolic",
    SubjectKind.RELEASE: "package-x-generic-symbolic",
    SubjectKind.REPOSITORY_INVITATION: "contact-new-symbolic",
    SubjectKind.SECURITY_ALERT: "security-high-symbolic",
    SubjectKind.DISCUSSION: "user-available-symbolic",
}
DEFAULT_SUBJECT_ICON = "mail-message-new-symbolic"

UNREAD_STATUS_ICON = "mail-unread-symbolic"
READ_STATUS_ICON = "mail-read-symbolic"

# Resource collections rewritten to their browser path segment
_WEB_COLLECTIONS = {
    "pulls": "pull",
    "issues": "issues",
}


def derive_web_url(
    notification: Notification,
    api_url: str = DEFAULT_API_URL,
    web_url: str = DEFAULT_WEB_URL,
) -> str | None:
    """Derive the browser URL for a notification.

    ``{api_url}/repos/o/r/pulls/42`` becomes ``{web_url}/o/r/pull/42`` and
    ``{api_url}/repos/o/r/issues/7`` becomes ``{web_url}/o/r/issues/7``. Any
    other resource, or no resource at all, falls back to the repository page.

    Returns:
        The URL, or None when there is no navigable target.
    """
    fallback = notification.repository.html_url or None
    resource_url = notification.subject.url
    if not resource_url:
        return fallback

    prefix = f"{api_url.rstrip('/')}/repos/"
    if not resource_url.startswith(prefix):
        return fallback

    segments = resource_url[len(prefix) :].split("/")
    # owner / repo / collection / number [/ ...]
    if len(segments) < 4 or segments[2] not in _WEB_COLLECTIONS:
        return fallback

    segments[2] = _WEB_COLLECTIONS[segments[2]]
    return f"{web_url.rstrip('/')}/{'/'.join(segments)}"


def reason_label(code: str) -> str:
    """Human-readable phrase for a reason code; unknown codes pass through."""
    return REASON_LABELS.get(code, code)


def icon_key(kind: SubjectKind | str) -> str:
    """Symbolic icon name for a subject kind (or raw GitHub subject type)."""
    if not isinstance(kind, SubjectKind):
        kind = SubjectKind.from_api(kind)
    return SUBJECT_ICONS.get(kind, DEFAULT_SUBJECT_ICON)


def status_icon(unread_count: int) -> str:
    """Icon for the panel/status indicator."""
    return UNREAD_STATUS_ICON if unread_count > 0 else READ_STATUS_ICON


def format_time_ago(updated_at: datetime, now: datetime | None = None) -> str:
    """Coarse relative age such as ``3 hours ago``."""
    if now is None:
        now = datetime.now(UTC)
    delta = now - updated_at

    days = delta.days
    if days > 0:
        return f"{days} days ago"
    hours = int(delta.total_seconds() // 3600)
    if hours > 0:
        return f"{hours} hours ago"
    minutes = int(delta.total_seconds() // 60)
    if minutes > 0:
        return f"{minutes} minutes ago"
    return "Just now"


# 🔼⚙️🔚
