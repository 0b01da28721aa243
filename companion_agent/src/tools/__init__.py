# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Runtime tools shared by the agents.

Domain tool sets (rituals, rules, challenges and so on) are supplied by the
application as plain lists of ``Tool`` and are not defined here.
"""

from .interactive_tools import prompt_tool, interview_tool
from .memory_tools import memory_tool
from .mood_tools import MoodTracker, mood_tools
from .phase_tools import PhaseState, PhaseTracker, mark_challenge_ready_tool

__all__ = [
    "prompt_tool",
    "interview_tool",
    "memory_tool",
    "MoodTracker",
    "mood_tools",
    "PhaseState",
    "PhaseTracker",
    "mark_challenge_ready_tool",
]
