#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Notification backends for gitwork."""

from gitwork.client.github import GitHubNotificationClient, create_client_from_env
from gitwork.client.protocol import NotificationClient

__all__ = ["GitHubNotificationClient", "NotificationClient", "create_client_from_env"]

# 🔼⚙️🔚
