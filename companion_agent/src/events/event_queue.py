# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Application events waiting to be shown to the root agent."""

import logging

from typing import Sequence

from ..types.event_types import Event

logger = logging.getLogger(__name__)


class EventQueue:
    """An in-memory FIFO of pending events.

    ``drain`` takes a snapshot and empties the queue in one synchronous step,
    so an event pushed while a drained batch is being processed is kept for
    the next batch.
    """

    def __init__(self):
        self._events: list[Event] = []

    def __len__(self) -> int:
        return len(self._events)

    def push(self, event: Event) -> None:
        logger.debug(f"New event: {event.category}")
        self._events.append(event)

    def drain(self) -> list[Event]:
        events, self._events = self._events, []
        return events


def format_events(events: Sequence[Event]) -> str:
    return "Got events:\n" + "\n".join(str(e) for e in events).strip()
