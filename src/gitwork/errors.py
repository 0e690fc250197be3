#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Exception hierarchy for gitwork."""

from __future__ import annotations


class GitWorkError(Exception):
    """Base exception for all gitwork errors."""


class ConfigurationError(GitWorkError):
    """Raised when the configuration file or its values are invalid."""


class MissingTokenError(ConfigurationError):
    """Raised when no GitHub token is available in the environment."""

    def __init__(self, env_var: str):
        self.env_var = env_var
        message = f"GitHub token not found. Please set {env_var} environment variable."
        super().__init__(message)


class NotificationClientError(GitWorkError):
    """Raised when a call against the notifications API fails.

    These are transient: the engine stores the message and stays usable.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class UnknownNotificationError(GitWorkError):
    """Raised when an operation references a notification id not held in state."""

    def __init__(self, notification_id: str):
        self.notification_id = notification_id
        super().__init__(f"Notification '{notification_id}' is not present in the current state")


# 🔼⚙️🔚
