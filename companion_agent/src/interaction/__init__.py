# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .side_channel import (
    SideChannel,
    SideChannelCancelled,
    SideChannelState,
    PendingRequest,
    PromptChannel,
    InterviewChannel,
)
from .interview import InterviewSession, DEFAULT_INTERVIEW_PROMPT

__all__ = [
    "SideChannel",
    "SideChannelCancelled",
    "SideChannelState",
    "PendingRequest",
    "PromptChannel",
    "InterviewChannel",
    "InterviewSession",
    "DEFAULT_INTERVIEW_PROMPT",
]
