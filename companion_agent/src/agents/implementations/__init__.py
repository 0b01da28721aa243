# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .main_orchestrator import MainOrchestrator, PLAN_KEY, MAIN_CONTEXT_KEY
from .planner import Planner, planner_input
from .sub_agents import SubAgents, SubAgentSpec

__all__ = [
    "MainOrchestrator",
    "PLAN_KEY",
    "MAIN_CONTEXT_KEY",
    "Planner",
    "planner_input",
    "SubAgents",
    "SubAgentSpec",
]
