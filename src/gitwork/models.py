#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Notification data model built from GitHub REST API payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from attrs import define, evolve, field


class SubjectKind(Enum):
    """The kind of entity a notification refers to.

    GitHub controls the set of subject types, so anything unrecognised maps
    to OTHER rather than failing.
    """

    PULL_REQUEST = "PullRequest"
    ISSUE = "Issue"
    RELEASE = "Release"
    REPOSITORY_INVITATION = "RepositoryInvitation"
    SECURITY_ALERT = "SecurityAlert"
    DISCUSSION = "Discussion"
    OTHER = "Other"

    @classmethod
    def from_api(cls, subject_type: str | None) -> SubjectKind:
        """Map a raw GitHub subject type string to a SubjectKind."""
        if not subject_type:
            return cls.OTHER
        return _SUBJECT_TYPE_ALIASES.get(subject_type, cls.OTHER)


_SUBJECT_TYPE_ALIASES = {
    "PullRequest": SubjectKind.PULL_REQUEST,
    "Issue": SubjectKind.ISSUE,
    "Release": SubjectKind.RELEASE,
    "RepositoryInvitation": SubjectKind.REPOSITORY_INVITATION,
    "RepositoryVulnerabilityAlert": SubjectKind.SECURITY_ALERT,
    "RepositoryDependabotAlertsThread": SubjectKind.SECURITY_ALERT,
    "SecurityAdvisory": SubjectKind.SECURITY_ALERT,
    "Discussion": SubjectKind.DISCUSSION,
}


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp (``2024-01-01T12:00:00Z``)."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@define(frozen=True, slots=True)
class Subject:
    """What the notification is about."""

    title: str
    kind: SubjectKind = field(default=SubjectKind.OTHER)
    url: str | None = field(default=None)
    type: str = field(default="")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Subject:
        subject_type = data.get("type") or ""
        return cls(
            title=data.get("title") or "",
            kind=SubjectKind.from_api(subject_type),
            url=data.get("url") or None,
            type=subject_type,
        )


@define(frozen=True, slots=True)
class RepositoryRef:
    """The repository a notification belongs to."""

    full_name: str | None = field(default=None)
    html_url: str | None = field(default=None)

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> RepositoryRef:
        data = data or {}
        return cls(full_name=data.get("full_name"), html_url=data.get("html_url"))


@define(frozen=True, slots=True)
class Notification:
    """A single GitHub notification thread.

    ``id`` is assigned by the server and is stable across refreshes; it is the
    only key used to reconcile local edits against fetched data. Instances are
    immutable: local read-state edits go through ``as_read``.
    """

    id: str
    subject: Subject
    repository: RepositoryRef = field(factory=RepositoryRef)
    reason: str = field(default="")
    unread: bool = field(default=True)
    updated_at: datetime = field(factory=lambda: datetime.now(UTC))
    last_read_at: datetime | None = field(default=None)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Notification:
        """Create a Notification from a ``GET /notifications`` list item.

        Raises:
            KeyError: If the payload has no ``id``.
            ValueError: If a timestamp is malformed.
        """
        return cls(
            id=str(data["id"]),
            subject=Subject.from_api(data.get("subject") or {}),
            repository=RepositoryRef.from_api(data.get("repository")),
            reason=data.get("reason") or "",
            unread=bool(data.get("unread", False)),
            updated_at=parse_timestamp(data.get("updated_at")) or datetime.now(UTC),
            last_read_at=parse_timestamp(data.get("last_read_at")),
        )

    def as_read(self) -> Notification:
        """Return a copy of this notification with the unread flag cleared."""
        if not self.unread:
            return self
        return evolve(self, unread=False)


# 🔼⚙️🔚
