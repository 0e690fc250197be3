#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration module for gitwork."""

from __future__ import annotations

from gitwork.config.models import (
    DEFAULT_CONFIG_PATH,
    DisplayConfig,
    GitHubConfig,
    GitWorkConfig,
    RefreshConfig,
    load_config,
    parse_config,
)
from gitwork.errors import ConfigurationError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigurationError",
    "DisplayConfig",
    "GitHubConfig",
    "GitWorkConfig",
    "RefreshConfig",
    "load_config",
    "parse_config",
]

# 🔼⚙️🔚
