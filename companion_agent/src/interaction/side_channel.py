# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Interactive side-channels let a running tool ask the human something and
wait for the answer.

A channel holds at most one pending request. Starting a new request while
one is open first rejects the old one, then installs the new one. The UI
observes the channel, shows the request, and settles it with ``resolve`` or
``cancel``.
"""

import asyncio
import logging

from typing import Callable, Optional
from dataclasses import dataclass
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SideChannelCancelled(Exception):
    """The pending request was cancelled by the user or superseded."""


class SideChannelState(BaseModel):
    is_open: bool = False
    message: str = ""


@dataclass
class PendingRequest:
    message: str
    future: asyncio.Future


StateListener = Callable[[SideChannelState], None]


class SideChannel:
    """A single-slot pending request with observers."""

    superseded_reason = "Request cancelled by new request"
    cancelled_reason = "Request cancelled by user"

    def __init__(self, name: str = "side-channel"):
        self.name = name
        self._request: Optional[PendingRequest] = None
        self._listeners: dict[int, StateListener] = {}

    @property
    def is_open(self) -> bool:
        return self._request is not None

    @property
    def current_request(self) -> Optional[PendingRequest]:
        return self._request

    @property
    def state(self) -> SideChannelState:
        if self._request is None:
            return SideChannelState()
        return SideChannelState(is_open=True, message=self._request.message)

    def listen(self, callback: StateListener) -> Callable[[], None]:
        listener_id = 0
        while listener_id in self._listeners:
            listener_id += 1
        self._listeners[listener_id] = callback

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    def _notify(self) -> None:
        state = self.state
        for callback in list(self._listeners.values()):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"Error in {self.name} listener {callback}: {e}")

    def start(self, message: str) -> asyncio.Future:
        """Open a new request and return the future that settles it.

        Must be called from within a running event loop.
        """
        if self._request is not None:
            previous, self._request = self._request, None
            logger.info(f"{self.name}: superseding pending request")
            if not previous.future.done():
                previous.future.set_exception(SideChannelCancelled(self.superseded_reason))

        future = asyncio.get_running_loop().create_future()
        request = PendingRequest(message=message, future=future)
        future.add_done_callback(lambda f: self._on_done(request, f))
        self._request = request
        self._notify()
        return future

    async def request(self, message: str) -> str:
        return await self.start(message)

    def _on_done(self, request: PendingRequest, future: asyncio.Future) -> None:
        # The awaiting task was cancelled; release the slot
        if future.cancelled() and self._request is request:
            self._request = None
            self._notify()

    def _settle(self) -> Optional[asyncio.Future]:
        if self._request is None:
            return None
        request, self._request = self._request, None
        self._notify()
        return None if request.future.done() else request.future

    def resolve(self, value: str) -> None:
        """Answer the pending request. A no-op when nothing is pending."""
        future = self._settle()
        if future is not None:
            future.set_result(value)

    def cancel(self) -> None:
        """Reject the pending request. A no-op when nothing is pending."""
        future = self._settle()
        if future is not None:
            future.set_exception(SideChannelCancelled(self.cancelled_reason))


class PromptChannel(SideChannel):
    """Single question / single answer prompts shown to the user."""

    superseded_reason = "Prompt cancelled by new prompt"
    cancelled_reason = "Prompt cancelled by user"

    def __init__(self):
        super().__init__(name="prompt")

    def submit(self, response: str) -> None:
        self.resolve(response)


class InterviewChannel(SideChannel):
    """Multi-turn interviews, settled with a summary when they end."""

    superseded_reason = "Interview cancelled by new interview"
    cancelled_reason = "Interview cancelled by user"

    def __init__(self):
        super().__init__(name="interview")

    def done(self, summary: str) -> None:
        self.resolve(summary)
