#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration models and TOML loading for gitwork.

Example ``gitwork.conf``::

    [github]
    token_env_var = "GITHUB_TOKEN"
    per_page = 50

    [refresh]
    interval_seconds = 30
    guard_seconds = 25

    [display]
    show_all = false
"""

from __future__ import annotations

from pathlib import Path
import tomllib
from typing import Any

from attrs import define, field
from attrs.validators import instance_of
from provide.foundation.logger import get_logger

from gitwork.errors import ConfigurationError

log = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("gitwork.conf")
MAX_PER_PAGE = 100


def _positive(instance: Any, attribute: Any, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{attribute.name} must be positive, got {value}")


def _strip_trailing_slash(value: Any) -> Any:
    return value.rstrip("/") if isinstance(value, str) else value


def _http_url(instance: Any, attribute: Any, value: str) -> None:
    if not isinstance(value, str) or not value.startswith(("http://", "https://")):
        raise ValueError(f"{attribute.name} must be an http(s) URL, got {value!r}")


def _per_page(instance: Any, attribute: Any, value: int) -> None:
    if not 0 < value <= MAX_PER_PAGE:
        raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {value}")


@define(frozen=True, slots=True)
class GitHubConfig:
    """Connection settings for the GitHub REST API."""

    api_url: str = field(default="https://api.github.com", validator=_http_url, converter=_strip_trailing_slash)
    web_url: str = field(default="https://github.com", validator=_http_url, converter=_strip_trailing_slash)
    token_env_var: str = field(default="GITHUB_TOKEN", validator=instance_of(str))
    per_page: int = field(default=50, validator=_per_page)
    timeout_seconds: float = field(default=10.0, validator=_positive)


@define(frozen=True, slots=True)
class RefreshConfig:
    """Auto-refresh timing.

    The timer ticks every ``interval_seconds``; a tick only refreshes when more
    than ``guard_seconds`` have passed since the last successful refresh.
    """

    interval_seconds: float = field(default=30.0, validator=_positive)
    guard_seconds: float = field(default=25.0, validator=_positive)

    def __attrs_post_init__(self) -> None:
        if self.guard_seconds >= self.interval_seconds:
            raise ValueError(
                f"guard_seconds ({self.guard_seconds}) must be lower than "
                f"interval_seconds ({self.interval_seconds})"
            )


@define(frozen=True, slots=True)
class DisplayConfig:
    """Initial presentation filter."""

    show_all: bool = field(default=False, validator=instance_of(bool))


@define(frozen=True, slots=True)
class GitWorkConfig:
    """Top-level gitwork configuration."""

    github: GitHubConfig = field(factory=GitHubConfig)
    refresh: RefreshConfig = field(factory=RefreshConfig)
    display: DisplayConfig = field(factory=DisplayConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a plain dictionary for display."""
        return {
            "github": {
                "api_url": self.github.api_url,
                "web_url": self.github.web_url,
                "token_env_var": self.github.token_env_var,
                "per_page": self.github.per_page,
                "timeout_seconds": self.github.timeout_seconds,
            },
            "refresh": {
                "interval_seconds": self.refresh.interval_seconds,
                "guard_seconds": self.refresh.guard_seconds,
            },
            "display": {"show_all": self.display.show_all},
        }


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"Section [{name}] must be a table")
    return section


def parse_config(data: dict[str, Any]) -> GitWorkConfig:
    """Build a GitWorkConfig from already-parsed TOML data."""
    try:
        return GitWorkConfig(
            github=GitHubConfig(**_section(data, "github")),
            refresh=RefreshConfig(**_section(data, "refresh")),
            display=DisplayConfig(**_section(data, "display")),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config(config_path: Path | None = None) -> GitWorkConfig:
    """Load configuration from a TOML file.

    A missing file yields the defaults. Unreadable or invalid files raise
    ConfigurationError.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        log.debug("No configuration file found, using defaults", path=str(config_path))
        return GitWorkConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {config_path}: {e}") from e

    config = parse_config(data)
    log.debug("Configuration loaded", path=str(config_path))
    return config


# 🔼⚙️🔚
