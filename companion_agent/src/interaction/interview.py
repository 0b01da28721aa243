# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The agent side of an interview.

When an interview request opens, the UI starts an ``InterviewSession``: a
fresh agent that talks with the user and, once it has what it needs, calls
its ``done`` tool with a summary. That summary settles the request the
session was opened for, and only that request.
"""

import logging

from typing import Optional

from .side_channel import InterviewChannel, PendingRequest
from ..agents.agent import Agent
from ..context.context import system_context
from ..events.workflow_log import WorkflowLog
from ..llm.chat_model import ChatModel
from ..types.llm_types import ActOptions
from ..types.tool_types import Tool, arg, tool
from ..types.message_types import AssistantMessage, user_message

logger = logging.getLogger(__name__)

DEFAULT_INTERVIEW_PROMPT = """
You are an Interview Agent tasked with gathering information from the user.
You are conducting an interview on behalf of another agent.
Be conversational, friendly, and thorough in your questioning.
When you have gathered the necessary information, call the 'done' tool with a summary.
"""


class InterviewSession:
    def __init__(
        self,
        channel: InterviewChannel,
        model: ChatModel,
        system_prompt: Optional[str] = None,
        workflow_log: Optional[WorkflowLog] = None,
    ):
        request = channel.current_request
        if request is None:
            raise RuntimeError("No interview is pending")
        self.channel = channel
        self.request: PendingRequest = request
        self.agent = Agent(
            system_context(system_prompt or DEFAULT_INTERVIEW_PROMPT),
            model,
            [self._done_tool()],
            workflow_log=workflow_log,
            name="interview",
        )

    @property
    def owns_pending_request(self) -> bool:
        return self.channel.current_request is self.request

    @property
    def finished(self) -> bool:
        return self.request.future.done() or not self.owns_pending_request

    def _done_tool(self) -> Tool:
        async def call(summary: str) -> str:
            if not self.owns_pending_request:
                return "Interview is no longer active."
            logger.info("Interview finished by the interview agent")
            self.channel.done(summary)
            return "Interview ended."

        return tool(
            name="done",
            description=(
                "End the interview and return the gathered information to the calling agent. "
                "Provide a concise summary of what you learned."
            ),
            schema={
                "summary": arg(
                    str,
                    "A summary of the information gathered during the interview",
                    min_length=1,
                )
            },
            call=call,
        )

    async def begin(self) -> Optional[AssistantMessage]:
        """Seed the interview with the message it was requested with."""
        if not self.request.message:
            return None
        return await self.agent.act(
            user_message(self.request.message), ActOptions(workflow_name="Interview")
        )

    async def reply(self, text: str) -> AssistantMessage:
        return await self.agent.act(user_message(text))

    def cancel(self) -> None:
        if self.owns_pending_request:
            self.channel.cancel()
