#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Shared factories for gitwork tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from gitwork.models import Notification, RepositoryRef, Subject, SubjectKind

API = "https://api.github.com/repos"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_notification(
    notification_id: str = "1",
    *,
    unread: bool = True,
    title: str = "Fix the flux capacitor",
    kind: SubjectKind = SubjectKind.PULL_REQUEST,
    url: str | None = None,
    repo: str | None = "octo/repo",
    reason: str = "review_requested",
) -> Notification:
    if url is None and kind is SubjectKind.PULL_REQUEST:
        url = f"{API}/{repo}/pulls/{notification_id}"
    return Notification(
        id=notification_id,
        subject=Subject(title=title, kind=kind, url=url, type=kind.value),
        repository=RepositoryRef(
            full_name=repo,
            html_url=f"https://github.com/{repo}" if repo else None,
        ),
        reason=reason,
        unread=unread,
        updated_at=datetime(2025, 1, 1, 12, 0, tzinfo=UTC),
    )


def notification_payload(
    notification_id: str = "1",
    *,
    unread: bool = True,
    subject_type: str = "Issue",
    subject_url: str | None = f"{API}/octo/repo/issues/7",
    reason: str = "mention",
) -> dict[str, Any]:
    """A ``GET /notifications`` list item as GitHub returns it."""
    return {
        "id": notification_id,
        "unread": unread,
        "reason": reason,
        "updated_at": "2025-01-01T12:00:00Z",
        "last_read_at": None,
        "subject": {
            "title": "Something happened",
            "url": subject_url,
            "latest_comment_url": None,
            "type": subject_type,
        },
        "repository": {
            "id": 42,
            "full_name": "octo/repo",
            "html_url": "https://github.com/octo/repo",
        },
        "url": f"https://api.github.com/notifications/threads/{notification_id}",
    }


class Gate:
    """Blocks an async side effect until released, to hold a call in flight.

    Pass the bound ``call`` method as an AsyncMock side effect so it is awaited.
    """

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.entered = asyncio.Event()
        self._release = asyncio.Event()

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        self.entered.set()
        await self._release.wait()
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result

    def release(self) -> None:
        self._release.set()


# 🔼⚙️🔚
