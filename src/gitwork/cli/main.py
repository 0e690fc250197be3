#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Console entry point for gitwork."""

from __future__ import annotations

import asyncio
import contextlib
import json
from pathlib import Path
import signal
import sys
from typing import Any

from attrs import evolve
import click
from provide.foundation.cli.decorators import logging_options
from provide.foundation.logger import get_logger
from structlog.typing import FilteringBoundLogger as StructLogger

from gitwork import __version__
from gitwork.cli.formatting import format_snapshot, remediation_lines
from gitwork.config import ConfigurationError, DisplayConfig, GitWorkConfig, load_config
from gitwork.errors import UnknownNotificationError
from gitwork.runtime import AutoRefreshTimer, SyncEngine
from gitwork.state import SyncSnapshot

log: StructLogger = get_logger(__name__)

config_path_option = click.option(
    "-c",
    "--config-path",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=Path("gitwork.conf"),
    show_default=True,
    envvar="GITWORK_CONF",
    help="Path to the gitwork configuration file (env var GITWORK_CONF).",
    show_envvar=True,
)


def _configure_logging(log_level: str | None, log_file: Any, log_format: str | None) -> None:
    """Initialise foundation logging when logging options were given."""
    from provide.foundation import TelemetryConfig, get_hub

    overrides: dict[str, Any] = {}
    if log_level:
        overrides["default_level"] = str(log_level).upper()
    if log_file:
        overrides["log_file"] = Path(log_file)
    if log_format:
        overrides["console_formatter"] = log_format
    if not overrides:
        return

    base_config = TelemetryConfig.from_env()
    telemetry_config = evolve(
        base_config,
        service_name="gitwork",
        logging=evolve(base_config.logging, **overrides),
    )
    get_hub().initialize_foundation(telemetry_config)


def _load(config_path: Path) -> GitWorkConfig:
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


def create_engine(config: GitWorkConfig) -> SyncEngine:
    """Build the engine used by every command."""
    return SyncEngine.from_environment(config)


def _require_auth(engine: SyncEngine) -> None:
    if engine.is_authenticated:
        return
    click.echo(f"❌ Error: {engine.state.error_message}", err=True)
    for line in remediation_lines(engine.config.github.token_env_var):
        click.echo(line, err=True)
    sys.exit(1)


def _echo_snapshot(snapshot: SyncSnapshot) -> None:
    for line in format_snapshot(snapshot):
        click.echo(line)


@click.group(name="gitwork")
@click.version_option(version=__version__, prog_name="gitwork")
@logging_options
def cli(**kwargs: Any) -> None:
    """gitwork - keep up with your GitHub notifications."""
    _configure_logging(kwargs.get("log_level"), kwargs.get("log_file"), kwargs.get("log_format"))


@cli.command(name="list")
@config_path_option
@click.option("-a", "--all", "show_all", is_flag=True, default=False, help="Include read notifications.")
def list_cmd(config_path: Path, show_all: bool) -> None:
    """Fetch and print notifications."""
    config = _load(config_path)
    if show_all:
        config = evolve(config, display=DisplayConfig(show_all=show_all))
    engine = create_engine(config)
    _require_auth(engine)

    async def _run() -> SyncSnapshot:
        try:
            await engine.refresh()
            return engine.snapshot()
        finally:
            await engine.aclose()

    snapshot = asyncio.run(_run())
    _echo_snapshot(snapshot)
    if snapshot.error:
        sys.exit(1)


@cli.command(name="open")
@click.argument("notification_id")
@config_path_option
def open_cmd(notification_id: str, config_path: Path) -> None:
    """Open a notification in the browser and mark it read.

    NOTIFICATION_ID: The thread id shown by `gitwork list`
    """
    config = evolve(_load(config_path), display=DisplayConfig(show_all=True))
    engine = create_engine(config)
    _require_auth(engine)

    async def _run() -> tuple[bool, str | None]:
        try:
            await engine.refresh()
            notification = engine.state.find(notification_id)
            if notification is None:
                return False, None
            return True, await engine.open(notification)
        finally:
            await engine.aclose()

    found, url = asyncio.run(_run())
    if engine.state.error_message:
        click.echo(f"❌ Error: {engine.state.error_message}", err=True)
        sys.exit(1)
    if not found:
        click.echo(f"❌ Error: Notification '{notification_id}' not found", err=True)
        sys.exit(1)
    if url:
        click.echo(f"✅ Opened {url}")
    else:
        click.echo(f"⚠️  Notification '{notification_id}' has no page to open")


@cli.command(name="mark-read")
@click.argument("notification_id")
@config_path_option
def mark_read_cmd(notification_id: str, config_path: Path) -> None:
    """Mark one notification as read.

    NOTIFICATION_ID: The thread id shown by `gitwork list`
    """
    config = evolve(_load(config_path), display=DisplayConfig(show_all=True))
    engine = create_engine(config)
    _require_auth(engine)

    async def _run() -> bool:
        try:
            await engine.refresh()
            return await engine.mark_as_read(notification_id)
        finally:
            await engine.aclose()

    try:
        marked = asyncio.run(_run())
    except UnknownNotificationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    if not marked:
        click.echo(f"❌ Error: {engine.state.error_message or 'Notification was not marked read'}", err=True)
        sys.exit(1)
    click.echo(f"✅ Marked '{notification_id}' as read")


@cli.command(name="mark-all-read")
@config_path_option
def mark_all_read_cmd(config_path: Path) -> None:
    """Mark every notification as read."""
    engine = create_engine(_load(config_path))
    _require_auth(engine)

    async def _run() -> bool:
        try:
            return await engine.mark_all_as_read()
        finally:
            await engine.aclose()

    if not asyncio.run(_run()):
        click.echo(f"❌ Error: {engine.state.error_message}", err=True)
        sys.exit(1)
    click.echo(f"✅ All notifications marked as read ({engine.state.unread_count} unread remaining)")


@cli.command(name="watch")
@config_path_option
@click.option("-a", "--all", "show_all", is_flag=True, default=False, help="Include read notifications.")
def watch_cmd(config_path: Path, show_all: bool) -> None:
    """Poll notifications and print the list whenever it changes."""
    config = _load(config_path)
    if show_all:
        config = evolve(config, display=DisplayConfig(show_all=show_all))
    engine = create_engine(config)
    _require_auth(engine)

    try:
        asyncio.run(_watch(engine))
    except KeyboardInterrupt:
        click.echo("\nAborted by user.", err=True)


async def _watch(engine: SyncEngine, shutdown_event: asyncio.Event | None = None) -> None:
    shutdown_event = shutdown_event or asyncio.Event()
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, shutdown_event.set)
            installed.append(sig)

    last_seen: tuple[Any, ...] | None = None

    def _print_changes(snapshot: SyncSnapshot) -> None:
        nonlocal last_seen
        if snapshot.is_loading:
            return
        fingerprint = (
            snapshot.error,
            snapshot.show_all,
            tuple((n.id, n.unread) for n in snapshot.notifications),
        )
        if fingerprint == last_seen:
            return
        last_seen = fingerprint
        click.echo("")
        _echo_snapshot(snapshot)

    engine.subscribe(_print_changes)
    timer = AutoRefreshTimer(engine, shutdown_event=shutdown_event)
    try:
        await engine.refresh()
        timer.start()
        await shutdown_event.wait()
    finally:
        await timer.stop()
        engine.unsubscribe(_print_changes)
        for sig in installed:
            loop.remove_signal_handler(sig)
        await engine.aclose()
        log.info("Watch stopped")


@cli.group(name="config")
def config_cli() -> None:
    """Configuration commands."""


@config_cli.command(name="show")
@config_path_option
def config_show(config_path: Path) -> None:
    """Load, validate, and display the configuration."""
    config = _load(config_path)
    click.echo(json.dumps(config.to_dict(), indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

# 🔼⚙️🔚
