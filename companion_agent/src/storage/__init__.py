# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Storage module for persisted runtime state.

Provides string key/value stores (in memory, JSON file and SQLite) and the
activity log built on top of them.
"""

from .kv_store import KeyValueStore, MemoryStore, JsonFileStore, SqliteStore
from .activity_log import Activity, ActivityLog

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "Activity",
    "ActivityLog",
]
