# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The named sub-agents the root agent can delegate to.

Each sub-agent has a built-in system prompt, name and description that the
app config can override, and takes its domain tools from the toolkits the
application passes in (keyed like the config, e.g. ``"rule_agent"``).
"""

import logging

from typing import Mapping, Optional, Sequence
from dataclasses import dataclass

from ..agent import Agent
from ..agent_calling import AgentDef, sub_agent_tool
from ...config import AppConfig
from ...context.context import system_context, system_context_msg
from ...events.workflow_log import WorkflowLog
from ...llm.chat_model import ChatModel
from ...storage.kv_store import KeyValueStore
from ...tools.interactive_tools import interview_tool, prompt_tool
from ...tools.memory_tools import memory_tool
from ...interaction.side_channel import InterviewChannel, PromptChannel
from ...types.tool_types import Tool
from ...types.message_types import TextPart, wrap_interactive_system

logger = logging.getLogger(__name__)

AFFIRM_MEMORY_KEY = "affirm-memory"

Toolkits = Mapping[str, Sequence[Tool]]


@dataclass(frozen=True)
class SubAgentSpec:
    key: str
    name: str
    description: str
    prompt: str


_DATA_AGENT_SUFFIX = """
You are communicating with another user facing Agent.
Respond with an concise Summary of the information.
"""

INFO_AGENT = SubAgentSpec(
    key="info_agent",
    name="info",
    description="Get Info about the subject",
    prompt="""
You are an Agent thats tasked with providing information about the subject.
You are communicating with another Agent.
Respond concisely with results/data.
""",
)

AFFIRM_AGENT = SubAgentSpec(
    key="affirm_agent",
    name="audio",
    description="Agent that can generate Audio files.",
    prompt="""
You are an Agent thats tasked with generating or managing audio/affirmation content for the user.
Be concise and friendly.
""",
)

# In registry order; the audio agent is inserted after "safe"
DOMAIN_AGENTS: tuple[SubAgentSpec, ...] = (
    SubAgentSpec(
        key="challenge_agent",
        name="challenge",
        description="Agent that manages challenges. Can add and remove challenges.",
        prompt="""
You are an Agent thats tasked with managing Challenges for the User.
Keep the Title concise.
You are communicating with another Agent.
Respond concisely with results/data.
""",
    ),
    SubAgentSpec(
        key="profile_agent",
        name="profile",
        description=(
            "Agent that manages profiles. Can change the Profile Title and Description "
            "and add and query Achievements."
        ),
        prompt="""
You are an Agent thats tasked with maintaining and writing a Profile of the User.
Write the Profile description in Markdown.
You are communicating with another user facing Agent.
Respond with an concise Summary of the information.
""",
    ),
    SubAgentSpec(
        key="rule_agent",
        name="rule",
        description="Agent that manages rules. Can add,read,edit and delete rules.",
        prompt="You are an Agent thats tasked with maintaining a list of Rules for the User."
        + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="reflection_agent",
        name="reflection",
        description=(
            "Agent that manages reflection prompts of the subject. Can add,read,edit and "
            "delete reflection prompts. Also can read recent reflection entries of the subject."
        ),
        prompt="You are an Agent thats tasked with maintaining a list of Reflection Prompts for the User."
        + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="safe_agent",
        name="safe",
        description=(
            "Agent that can check if the key of the subject is locked and how long it has "
            "been locked. Can also unlock the key."
        ),
        prompt="You are an Agent thats tasked with managing a key." + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="inventory_agent",
        name="inventory",
        description="Agent that manages inventory. Can read and search items.",
        prompt="""
You are an Agent thats tasked with managing the Inventory.
You can read and search for items in the inventory."""
        + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="rituals_agent",
        name="rituals",
        description="Agent that manages rituals. Can add, remove, and check status of rituals.",
        prompt="""
You are an Agent thats tasked with managing Rituals for the User.
You can add, remove, and check the status of rituals."""
        + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="voice_agent",
        name="voice",
        description="Agent that manages voice training. Can add assignments and check scores.",
        prompt="""
You are an Agent thats tasked with managing Voice Training for the User.
You can add assignments and check scores."""
        + _DATA_AGENT_SUFFIX,
    ),
    SubAgentSpec(
        key="activity_agent",
        name="activity",
        description=(
            "Agent that can query user activity logs. Can see what the user has been doing, "
            "including challenges completed, rituals done, reflections saved, and more."
        ),
        prompt="""
You are an Agent thats tasked with providing Activity data about the User.
You can query the activity log to see what the user has been doing."""
        + _DATA_AGENT_SUFFIX,
    ),
)


def _resolved(spec: SubAgentSpec, config: AppConfig) -> tuple[str, str, str]:
    return (
        config.agent_name(spec.key, spec.name),
        config.agent_description(spec.key, spec.description),
        config.sysprompt(spec.key, spec.prompt),
    )


class SubAgents:
    """Builds and holds the sub-agent registry for one orchestrator."""

    def __init__(
        self,
        config: AppConfig,
        model: ChatModel,
        store: KeyValueStore,
        prompt_channel: PromptChannel,
        interview_channel: InterviewChannel,
        toolkits: Optional[Toolkits] = None,
        workflow_log: Optional[WorkflowLog] = None,
    ):
        self.config = config
        toolkits = toolkits or {}
        self.interview_tool = interview_tool(interview_channel)

        name, description, prompt = _resolved(INFO_AGENT, config)
        self.info_agent = Agent(
            system_context(prompt),
            model,
            [*toolkits.get(INFO_AGENT.key, ()), prompt_tool(prompt_channel), self.interview_tool],
            workflow_log=workflow_log,
            name=name,
        )
        self.info_name = name
        self.info_description = description

        self.defs: list[AgentDef] = []
        for spec in DOMAIN_AGENTS:
            name, description, prompt = _resolved(spec, config)
            agent = Agent(
                system_context(prompt),
                model,
                toolkits.get(spec.key, ()),
                workflow_log=workflow_log,
                name=name,
            )
            self.defs.append(AgentDef(name=name, description=description, agent=agent))
            if spec.key == "safe_agent":
                self.defs.append(
                    self._affirm_def(model, store, toolkits, workflow_log)
                )

        if len({d.name for d in self.defs}) != len(self.defs):
            logger.warning("Duplicate sub agent names configured; the first one wins")

    def info_tool(self) -> Tool:
        return sub_agent_tool(self.info_name, self.info_description, self.info_agent)

    def _affirm_def(
        self,
        model: ChatModel,
        store: KeyValueStore,
        toolkits: Toolkits,
        workflow_log: Optional[WorkflowLog],
    ) -> AgentDef:
        name, description, prompt = _resolved(AFFIRM_AGENT, self.config)
        memory, set_memory = memory_tool(store, AFFIRM_MEMORY_KEY)
        system = wrap_interactive_system(
            lambda inner: [TextPart(text=prompt), *inner], memory
        )
        agent = Agent(
            system_context_msg(system),
            model,
            [
                *toolkits.get(AFFIRM_AGENT.key, ()),
                set_memory,
                self.interview_tool,
                self.info_tool(),
            ],
            workflow_log=workflow_log,
            name=name,
        )
        return AgentDef(name=name, description=description, agent=agent)

    def get(self, name: str) -> Optional[AgentDef]:
        return next((d for d in self.defs if d.name == name), None)
