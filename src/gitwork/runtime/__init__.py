#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The gitwork runtime: sync engine, intents and the auto-refresh timer."""

from gitwork.runtime.engine import SyncEngine
from gitwork.runtime.intents import Intent, MarkAllRead, MarkRead, Open, Refresh, ToggleShowAll
from gitwork.runtime.scheduler import AutoRefreshTimer

__all__ = [
    "AutoRefreshTimer",
    "Intent",
    "MarkAllRead",
    "MarkRead",
    "Open",
    "Refresh",
    "SyncEngine",
    "ToggleShowAll",
]

# 🔼⚙️🔚
