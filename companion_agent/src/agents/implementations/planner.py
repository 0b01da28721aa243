# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""The planner drafts the session plan injected into the root agent's prompt."""

import logging

from typing import Optional, Sequence

from ..agent import Agent
from ...config import AppConfig
from ...context.context import system_context_msg
from ...context.compaction import render_transcript
from ...events.workflow_log import WorkflowLog
from ...llm.chat_model import ChatModel
from ...storage.kv_store import KeyValueStore
from ...tools.memory_tools import memory_tool
from ...types.llm_types import ActOptions
from ...types.tool_types import Tool
from ...types.message_types import ChatMessage, TextPart, text_of, user_message, wrap_interactive_system

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PLANNER_MEMORY_KEY = "planner-memory"

DEFAULT_PLANNER_PROMPT = """
You are an Agent thats tasked with planning for the user.
You can add assignments and check scores.
You are communicating with another user facing Agent.
Respond with an concise Summary of the information.
"""


def planner_input(
    phase_context: str,
    mood: int,
    recent_activity: str,
    past_plan: Optional[str],
    past_conversation: Optional[Sequence[ChatMessage]],
) -> str:
    """The context block the planner plans from."""
    if past_conversation is None:
        last_context = "No Context"
    else:
        last_context = render_transcript(past_conversation, sep="\n")
    return f"""
Current Phase:
{phase_context}
Current Mood:
{mood}
Recent Activity:
{recent_activity}
Last Session Plan:
{past_plan or "First Session"}
Last Session Context:
{last_context}
""".strip()


class Planner:
    def __init__(
        self,
        config: AppConfig,
        model: ChatModel,
        store: KeyValueStore,
        tools: Sequence[Tool] = (),
        workflow_log: Optional[WorkflowLog] = None,
    ):
        prompt = config.sysprompt("planner_agent", DEFAULT_PLANNER_PROMPT)
        memory, set_memory = memory_tool(store, PLANNER_MEMORY_KEY)
        system = wrap_interactive_system(lambda inner: [TextPart(text=prompt), *inner], memory)
        self.agent = Agent(
            system_context_msg(system),
            model,
            [*tools, set_memory],
            workflow_log=workflow_log,
            name="planner",
        )

    async def plan(self, context_block: str) -> str:
        """Run one planning turn and return the plan text.

        The planner's conversation is cleared afterwards so each session
        plans from scratch.
        """
        logger.info("Creating session plan")
        try:
            await self.agent.act(user_message(context_block), ActOptions(workflow_name="Planner"))
            conversation = self.agent.context.conversation
            return text_of(conversation[-1], "\n") if conversation else ""
        finally:
            self.agent.context.conversation = []
