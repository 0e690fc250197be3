#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Sync state management for gitwork."""

from gitwork.state.runtime import SyncSnapshot, SyncState

__all__ = ["SyncSnapshot", "SyncState"]

# 🔼⚙️🔚
