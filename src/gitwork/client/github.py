#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""GitHub REST API notification client built on httpx."""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any

import httpx
from provide.foundation.logger import get_logger

from gitwork.config.models import GitHubConfig
from gitwork.errors import MissingTokenError, NotificationClientError
from gitwork.models import Notification

log = get_logger(__name__)

GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "gitwork"


class GitHubNotificationClient:
    """Async client for the ``/notifications`` endpoints.

    Pagination is not followed: a single page of ``per_page`` items is
    fetched, newest first, which is what the notification list shows.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        per_page: int = 50,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._per_page = per_page
        self._log = log.bind(api_url=api_url)
        self._http = httpx.AsyncClient(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": USER_AGENT,
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, token: str, config: GitHubConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> GitHubNotificationClient:
        return cls(
            token,
            api_url=config.api_url,
            per_page=config.per_page,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            self._log.warning(
                "GitHub API request failed",
                method=method,
                path=path,
                status_code=e.response.status_code,
                error=message,
            )
            raise NotificationClientError(
                f"GitHub API returned {e.response.status_code}: {message}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            self._log.warning("GitHub API request error", method=method, path=path, error=str(e))
            raise NotificationClientError(str(e) or type(e).__name__) from e
        return response

    async def list_notifications(self, all: bool = False) -> list[Notification]:
        params = {"all": "true" if all else "false", "per_page": self._per_page}
        response = await self._request("GET", "/notifications", params=params)
        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise TypeError(f"expected a list, got {type(payload).__name__}")
            notifications = [Notification.from_api(item) for item in payload]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise NotificationClientError(f"Malformed notifications payload: {e}") from e

        self._log.debug("Fetched notifications", count=len(notifications), all=all)
        return notifications

    async def mark_read(self, notification_id: str) -> None:
        await self._request("PATCH", f"/notifications/threads/{notification_id}")
        self._log.debug("Marked notification as read", notification_id=notification_id)

    async def mark_all_read(self) -> None:
        await self._request("PUT", "/notifications", json={"read": True})
        self._log.debug("Marked all notifications as read")

    async def aclose(self) -> None:
        await self._http.aclose()


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's ``message`` field, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or "request failed"


def create_client_from_env(
    config: GitHubConfig,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GitHubNotificationClient:
    """Build a client using the token from the environment.

    Raises:
        MissingTokenError: If the configured token variable is unset or empty.
    """
    if environ is None:
        environ = os.environ
    token = environ.get(config.token_env_var, "").strip()
    if not token:
        raise MissingTokenError(config.token_env_var)
    return GitHubNotificationClient.from_config(token, config, transport=transport)


# 🔼⚙️🔚
