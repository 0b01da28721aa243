# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tools that let one agent delegate work to another.

Every dispatch starts the target from an empty conversation, so sub-agents
keep their system prompt but never see earlier delegations.
"""

import logging

from typing import Optional, Sequence
from pydantic import BaseModel, ConfigDict

from .agent import Agent, is_active
from ..types.llm_types import ActOptions, ReasoningEffort
from ..types.tool_types import Tool, arg, tool
from ..types.message_types import text_of, user_message

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

INVOKE_SUB_AGENT = "invokeSubAgent"


class AgentDef(BaseModel):
    """A named entry in a sub-agent registry."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    agent: Agent
    reasoning: ReasoningEffort = ReasoningEffort.MEDIUM


def _cycle_message(name: str) -> str:
    return f'Sub agent "{name}" is already running in this call chain'


async def execute_agent_call(
    name: str,
    agent: Agent,
    prompt: str,
    reasoning: Optional[ReasoningEffort] = None,
) -> str:
    """Run a fresh turn on ``agent`` and return the text of its last message."""
    if is_active(agent):
        logger.warning(f"Refusing recursive dispatch to sub agent {name}")
        return _cycle_message(name)

    logger.info(f"Dispatching to sub agent {name}")
    agent.context.conversation = []
    await agent.act(
        user_message(prompt),
        ActOptions(workflow_name=f"SubAgent-{name}", reasoning=reasoning),
    )
    conversation = agent.context.conversation
    if not conversation:
        return ""
    return text_of(conversation[-1])


def sub_agent_tool(name: str, description: str, agent: Agent) -> Tool:
    """Expose a single agent as a tool named after it."""

    async def call(input: str) -> str:
        return await execute_agent_call(name, agent, input)

    return tool(
        name=name,
        description=f"Invoke a {name} Sub Agent\n{description}",
        schema={"input": arg(str, "The request for the sub agent")},
        call=call,
    )


def sub_agents_tool(agent_defs: Sequence[AgentDef]) -> Tool:
    """Expose a registry of agents through one ``invokeSubAgent`` tool."""
    registry = list(agent_defs)

    async def call(name: str, prompt: str) -> str:
        agent_def = next((d for d in registry if d.name == name), None)
        if agent_def is None:
            return f'No agent found with name "{name}"'
        return await execute_agent_call(
            agent_def.name, agent_def.agent, prompt, agent_def.reasoning
        )

    return tool(
        name=INVOKE_SUB_AGENT,
        description="Invoke a sub-agent by name and with an prompt",
        schema={
            "name": arg(
                str, "The sub agent to invoke, one of:\n" + get_agent_prompt(registry)
            ),
            "prompt": arg(str, "The prompt to send to the sub agent"),
        },
        call=call,
    )


def get_agent_prompt(agent_defs: Sequence[AgentDef]) -> str:
    """List the available sub-agents, one ``name: description`` per line."""
    return "\n".join(f"{d.name}: {d.description}" for d in agent_defs)
