# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
An agent is a context, a model and a fixed set of tools.

Each call to ``act`` commits the incoming message to the conversation before
the model is called, mirrors the model's progress into ``in_progress`` and
finally commits the assistant's answer. ``in_progress`` is always cleared,
whether the turn succeeds or fails.
"""

import logging

from typing import Optional, Sequence
from contextvars import ContextVar

from ..context.context import Context
from ..events.workflow_log import WorkflowLog
from ..llm.chat_model import ChatModel
from ..types.llm_types import ActOptions
from ..types.tool_types import Tool
from ..types.event_types import Workflow, WorkflowToolCall
from ..types.message_types import (
    ChatMessage,
    AssistantMessage,
    EventMessage,
    UserMessage,
    message_parts,
    text_of,
    tool_parts,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# The agents whose act() is running in the current task, outermost first
_call_chain: ContextVar[tuple["Agent", ...]] = ContextVar("agent_call_chain", default=())


def active_agents() -> tuple["Agent", ...]:
    return _call_chain.get()


def is_active(agent: "Agent") -> bool:
    return any(a is agent for a in _call_chain.get())


def _as_model_input(message: ChatMessage) -> ChatMessage:
    if isinstance(message, EventMessage):
        return UserMessage(content=list(message.content))
    return message


class Agent:
    def __init__(
        self,
        context: Context,
        model: ChatModel,
        tools: Optional[Sequence[Tool]] = None,
        workflow_log: Optional[WorkflowLog] = None,
        name: Optional[str] = None,
    ):
        self.context = context
        self.model = model
        self.tools: list[Tool] = list(tools or [])
        self.workflow_log = workflow_log
        self.name = name

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, model={self.model.model_name!r}, tools={[t.name for t in self.tools]})"

    def add_tools(self, *tools: Tool) -> None:
        self.tools.extend(tools)

    def _on_progress(self, intermediate: AssistantMessage) -> None:
        self.context.in_progress = intermediate

    async def act(
        self, message: ChatMessage, options: Optional[ActOptions] = None
    ) -> AssistantMessage:
        """Send one message and commit the model's answer to the conversation.

        Args:
            message: The new user or event message
            options: Generation options, plus an optional workflow name used
                to record a trace of this turn

        Returns:
            The final assistant message, also appended to the conversation
        """
        options = options or ActOptions()
        workflow_name = options.workflow_name
        if workflow_name:
            logger.info(f"Starting workflow {workflow_name}")

        history = [*self.context.system, *self.context.conversation, message]
        self.context.add_conversation(message)

        token = _call_chain.set(_call_chain.get() + (self,))
        try:
            final = await self.model.act(
                [_as_model_input(m) for m in history],
                self.tools,
                options,
                on_progress=self._on_progress,
            )
            self.context.add_conversation(final)
            if workflow_name:
                self._record_workflow(workflow_name, message, final)
            return final
        finally:
            _call_chain.reset(token)
            self.context.in_progress = None

    def _record_workflow(
        self, name: str, message: ChatMessage, final: AssistantMessage
    ) -> None:
        if self.workflow_log is None:
            return
        try:
            system = "\n".join(
                part.text
                for m in self.context.system
                for part in message_parts(m)
                if part.type == "text"
            )
            self.workflow_log.record(
                Workflow(
                    name=name,
                    system=system,
                    input=text_of(message, "\n"),
                    output=text_of(final, "\n"),
                    tools=[
                        WorkflowToolCall(
                            name=p.tool, input=p.tool_input, output=str(p.tool_output)
                        )
                        for p in tool_parts(final)
                    ],
                )
            )
        except Exception as e:
            logger.error(f"Failed to record workflow {name}: {e}")
