# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The observable conversational state owned by an agent.

A context holds the system messages, the committed conversation, and the
assistant turn currently being produced. Every mutation notifies all
registered listeners with the context itself.
"""

import logging

from typing import Callable, Optional, Sequence

from ..types.message_types import ChatMessage, AssistantMessage, system_message

logger = logging.getLogger(__name__)

ContextListener = Callable[["Context"], None]


class Context:
    def __init__(self):
        self._system: list[ChatMessage] = []
        self._conversation: list[ChatMessage] = []
        self._in_progress: Optional[AssistantMessage] = None
        self._listeners: dict[int, ContextListener] = {}

    def __repr__(self) -> str:
        return (
            f"Context(system={len(self._system)}, conversation={len(self._conversation)}, "
            f"in_progress={self._in_progress is not None})"
        )

    @property
    def system(self) -> tuple[ChatMessage, ...]:
        return tuple(self._system)

    @system.setter
    def system(self, value: Sequence[ChatMessage]) -> None:
        self._system = list(value)
        self.notify()

    @property
    def conversation(self) -> tuple[ChatMessage, ...]:
        return tuple(self._conversation)

    @conversation.setter
    def conversation(self, value: Sequence[ChatMessage]) -> None:
        self._conversation = list(value)
        self.notify()

    @property
    def in_progress(self) -> Optional[AssistantMessage]:
        return self._in_progress

    @in_progress.setter
    def in_progress(self, value: Optional[AssistantMessage]) -> None:
        self._in_progress = value
        self.notify()

    def add_conversation(self, message: ChatMessage) -> None:
        self._conversation.append(message)
        self.notify()

    def listen(self, callback: ContextListener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        listener_id = 0
        while listener_id in self._listeners:
            listener_id += 1
        self._listeners[listener_id] = callback

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    def notify(self) -> None:
        for callback in list(self._listeners.values()):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in context listener {callback}: {e}")


def system_context(text: str) -> Context:
    context = Context()
    context.system = [system_message(text)]
    return context


def system_context_msg(message: ChatMessage) -> Context:
    context = Context()
    context.system = [message]
    return context
