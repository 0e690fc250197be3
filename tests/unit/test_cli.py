#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for the gitwork console commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from click.testing import CliRunner
from provide.testkit.mocking import AsyncMock, Mock, patch
import pytest

from gitwork.cli.main import _watch, cli
from gitwork.config import GitWorkConfig
from gitwork.errors import NotificationClientError
from gitwork.runtime import SyncEngine

CREATE_ENGINE = "gitwork.cli.main.create_engine"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def engine_factory(mock_client: AsyncMock, opener: Mock):
    """Build engines from the config the command resolved, backed by the mock client."""

    def _factory(config: GitWorkConfig) -> SyncEngine:
        return SyncEngine(mock_client, config, opener=opener)

    return _factory


class TestMainCLI:
    """Test main CLI entry point."""

    def test_cli_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("list", "watch", "open", "mark-read", "mark-all-read", "config"):
            assert command in result.output

    def test_cli_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        version_file = Path(__file__).parent.parent.parent / "VERSION"
        assert version_file.read_text().strip() in result.output


class TestListCommand:
    """Tests for `gitwork list`."""

    def test_lists_unread(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0, result.output
        assert "2 notifications (2 unread, showing unread)" in result.output
        assert "101" in result.output
        assert "Review requested" in result.output
        assert "You're subscribed" not in result.output
        mock_client.list_notifications.assert_awaited_once_with(all=False)
        mock_client.aclose.assert_awaited_once()

    def test_lists_all(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["list", "--all"])

        assert result.exit_code == 0, result.output
        assert "3 notifications (2 unread, showing all)" in result.output
        mock_client.list_notifications.assert_awaited_once_with(all=True)

    def test_empty(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        mock_client.list_notifications.return_value = []
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "All caught up" in result.output

    def test_fetch_failure(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        mock_client.list_notifications.side_effect = NotificationClientError("GitHub API returned 500: boom")
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        assert "Error: GitHub API returned 500: boom" in result.output

    def test_missing_token(self, runner: CliRunner) -> None:
        def _unauthenticated(config: GitWorkConfig) -> SyncEngine:
            return SyncEngine.from_environment(config, environ={})

        with patch(CREATE_ENGINE, side_effect=_unauthenticated):
            result = runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        assert "GitHub token not found" in result.output
        assert "GITHUB_TOKEN" in result.output
        assert "To fix this:" in result.output


class TestOpenCommand:
    """Tests for `gitwork open`."""

    def test_open_marks_read(self, runner: CliRunner, engine_factory, mock_client: AsyncMock, opener: Mock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["open", "101"])

        assert result.exit_code == 0, result.output
        assert "Opened https://github.com/octo/repo/pull/101" in result.output
        opener.assert_called_once_with("https://github.com/octo/repo/pull/101")
        mock_client.mark_read.assert_awaited_once_with("101")
        mock_client.list_notifications.assert_awaited_once_with(all=True)

    def test_open_read_notification_does_not_mark(
        self, runner: CliRunner, engine_factory, mock_client: AsyncMock
    ) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["open", "103"])

        assert result.exit_code == 0
        mock_client.mark_read.assert_not_awaited()

    def test_open_unknown(self, runner: CliRunner, engine_factory, opener: Mock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["open", "999"])

        assert result.exit_code == 1
        assert "Notification '999' not found" in result.output
        opener.assert_not_called()


class TestMarkReadCommands:
    """Tests for `gitwork mark-read` and `gitwork mark-all-read`."""

    def test_mark_read(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["mark-read", "102"])

        assert result.exit_code == 0, result.output
        assert "Marked '102' as read" in result.output
        mock_client.mark_read.assert_awaited_once_with("102")

    def test_mark_read_unknown(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["mark-read", "999"])

        assert result.exit_code == 1
        assert "is not present in the current state" in result.output
        mock_client.mark_read.assert_not_awaited()

    def test_mark_read_server_failure(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        mock_client.mark_read.side_effect = NotificationClientError("GitHub API returned 403: Forbidden")
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["mark-read", "101"])

        assert result.exit_code == 1
        assert "Failed to mark as read" in result.output

    def test_mark_all_read(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        mock_client.list_notifications.return_value = []
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["mark-all-read"])

        assert result.exit_code == 0, result.output
        assert "All notifications marked as read (0 unread remaining)" in result.output
        mock_client.mark_all_read.assert_awaited_once()

    def test_mark_all_read_failure(self, runner: CliRunner, engine_factory, mock_client: AsyncMock) -> None:
        mock_client.mark_all_read.side_effect = NotificationClientError("timed out")
        with patch(CREATE_ENGINE, side_effect=engine_factory):
            result = runner.invoke(cli, ["mark-all-read"])

        assert result.exit_code == 1
        assert "Failed to mark all as read: timed out" in result.output


class TestConfigCommand:
    """Tests for `gitwork config show`."""

    def test_show_defaults(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["config", "show", "-c", str(tmp_path / "absent.conf")])

        assert result.exit_code == 0
        output = result.output
        data = json.loads(output[output.index("{") : output.rindex("}") + 1])
        assert data["refresh"]["interval_seconds"] == 30.0
        assert data["github"]["token_env_var"] == "GITHUB_TOKEN"

    def test_show_invalid(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "gitwork.conf"
        path.write_text("[refresh]\ninterval_seconds = 10\nguard_seconds = 20\n")

        result = runner.invoke(cli, ["config", "show", "-c", str(path)])

        assert result.exit_code == 1
        assert "guard_seconds" in result.output


@pytest.mark.asyncio
class TestWatch:
    """Tests for the watch loop."""

    async def test_watch_prints_and_shuts_down(
        self, engine: SyncEngine, mock_client: AsyncMock, notifications, capsys
    ) -> None:
        shutdown = asyncio.Event()

        async def _list(all: bool = False):
            shutdown.set()
            return notifications

        mock_client.list_notifications.side_effect = _list

        await asyncio.wait_for(_watch(engine, shutdown_event=shutdown), timeout=2.0)

        out = capsys.readouterr().out
        assert "2 notifications (2 unread, showing unread)" in out
        mock_client.aclose.assert_awaited_once()
        assert engine._listeners == []


# 🔼⚙️🔚
