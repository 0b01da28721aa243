# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The agents module defines the agents of the companion and how they call each
other.

An agent is a context (system prompt plus conversation), a model and a set
of tools. The root agent talks to the user; it delegates to named sub-agents
through a tool, and each delegation runs the sub-agent from an empty
conversation. Agents never call each other directly, only through tools, so
every delegation shows up in the caller's tool trace.
"""

from .agent import Agent, active_agents, is_active
from .agent_calling import (
    AgentDef,
    execute_agent_call,
    sub_agent_tool,
    sub_agents_tool,
    get_agent_prompt,
)

__all__ = [
    "Agent",
    "active_agents",
    "is_active",
    "AgentDef",
    "execute_agent_call",
    "sub_agent_tool",
    "sub_agents_tool",
    "get_agent_prompt",
]
