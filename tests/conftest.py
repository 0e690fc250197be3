#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Pytest configuration and fixtures for gitwork tests."""

from __future__ import annotations

from provide.testkit.mocking import AsyncMock, Mock
import pytest

from gitwork.config import GitWorkConfig
from gitwork.runtime import SyncEngine
from tests.helpers import FakeClock, make_notification


@pytest.fixture
def config() -> GitWorkConfig:
    return GitWorkConfig()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def opener() -> Mock:
    return Mock(return_value=True)


@pytest.fixture
def notifications():
    """Two unread notifications and one read one, in server order."""
    return [
        make_notification("101"),
        make_notification("102", reason="mention"),
        make_notification("103", unread=False, reason="subscribed"),
    ]


@pytest.fixture
def mock_client(notifications) -> AsyncMock:
    client = AsyncMock()
    client.list_notifications.return_value = notifications
    client.mark_read.return_value = None
    client.mark_all_read.return_value = None
    return client


@pytest.fixture
def engine(mock_client: AsyncMock, config: GitWorkConfig, clock: FakeClock, opener: Mock) -> SyncEngine:
    return SyncEngine(mock_client, config, clock=clock, opener=opener)


# 🔼⚙️🔚
