# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json
import logging

from typing import Optional

from ..storage.kv_store import KeyValueStore
from ..storage.activity_log import ActivityLog
from ..types.tool_types import Tool, tool

logger = logging.getLogger(__name__)

MOOD_KEY = "user-mood"
DEFAULT_MOOD = 5
MIN_MOOD = 1
MAX_MOOD = 10


class MoodTracker:
    """The companion's mood, an integer from 1 to 10."""

    def __init__(self, store: KeyValueStore, key: str = MOOD_KEY):
        self.store = store
        self.key = key

    def get(self) -> int:
        raw = self.store.get(self.key)
        if not raw:
            return DEFAULT_MOOD
        try:
            value = json.loads(raw)["value"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.error(f"Failed to load mood data: {e}")
            return DEFAULT_MOOD
        if not isinstance(value, (int, float)) or not MIN_MOOD <= value <= MAX_MOOD:
            return DEFAULT_MOOD
        return int(value)

    def set(self, value: float) -> int:
        clamped = max(MIN_MOOD, min(MAX_MOOD, round(value)))
        self.store.set(self.key, json.dumps({"value": clamped}))
        return clamped

    def increase(self) -> int:
        return self.set(self.get() + 1)

    def decrease(self) -> int:
        return self.set(self.get() - 1)


def mood_tools(tracker: MoodTracker, activity: Optional[ActivityLog] = None) -> list[Tool]:
    def changed(kind: str, title: str, value: int) -> None:
        if activity is not None:
            activity.log(kind, title, f"New mood level: {value}", {"newMood": value})

    def increase() -> str:
        value = tracker.increase()
        changed("mood_increased", "Mood increased", value)
        return f"Mood increased to {value}"

    def decrease() -> str:
        value = tracker.decrease()
        changed("mood_decreased", "Mood decreased", value)
        return f"Mood decreased to {value}"

    return [
        tool(
            name="increaseMood",
            description="Increase the mood. Returns the new mood level.",
            call=increase,
        ),
        tool(
            name="decreaseMood",
            description="Decrease the mood. Returns the new mood level.",
            call=decrease,
        ),
    ]
