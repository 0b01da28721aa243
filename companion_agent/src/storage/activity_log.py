# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""A capped log of what the user has been doing, summarized for agents."""

import uuid
import logging

from typing import Any, Optional
from datetime import datetime, timedelta
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ACTIVITY_KEY = "user-activity-log"
MAX_ACTIVITIES = 500


class Activity(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    type: str
    title: str
    description: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)


_activities_adapter = TypeAdapter(list[Activity])


class ActivityLog:
    def __init__(self, store: KeyValueStore, key: str = ACTIVITY_KEY):
        self.store = store
        self.key = key

    def load(self) -> list[Activity]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return _activities_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to load activities: {e}")
            return []

    def log(
        self,
        type: str,
        title: str,
        description: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Activity:
        activity = Activity(
            type=type, title=title, description=description, metadata=metadata or {}
        )
        activities = self.load()
        activities.append(activity)
        activities = activities[-MAX_ACTIVITIES:]
        self.store.set(self.key, _activities_adapter.dump_json(activities).decode())
        return activity

    def recent(self, days: int = 7) -> list[Activity]:
        cutoff = datetime.now() - timedelta(days=days)
        return [a for a in self.load() if a.timestamp >= cutoff]

    def for_agent(self, days: int = 7, limit: int = 50) -> str:
        """Newest first, one line per activity."""
        activities = sorted(self.recent(days), key=lambda a: a.timestamp, reverse=True)[:limit]
        if not activities:
            return f"No activity recorded in the last {days} day{'' if days == 1 else 's'}."
        lines = []
        for a in activities:
            desc = f" - {a.description}" if a.description else ""
            lines.append(f"- [{a.timestamp.strftime('%Y-%m-%d %H:%M')}] {a.title}{desc}")
        return "\n".join(lines)

