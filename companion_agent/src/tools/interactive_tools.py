# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tools through which an agent reaches the human while it is running."""

from ..interaction.side_channel import (
    InterviewChannel,
    PromptChannel,
    SideChannelCancelled,
)
from ..types.tool_types import Tool, arg, tool


def prompt_tool(channel: PromptChannel) -> Tool:
    async def call(message: str) -> str:
        try:
            response = await channel.request(message)
            return f'User responded: "{response}"'
        except SideChannelCancelled as e:
            return f"Failed to get user response: {e}"

    return tool(
        name="prompt",
        description=(
            "Send a message to the user and wait for their response. A dialog will "
            "appear on screen for the user to answer. This is useful when you need "
            "specific information from the user."
        ),
        schema={
            "message": arg(str, "The message/question to show to the user", min_length=1)
        },
        call=call,
    )


def interview_tool(channel: InterviewChannel) -> Tool:
    async def call(message: str) -> str:
        try:
            summary = await channel.request(message)
            return f"Interview completed. Summary: {summary}"
        except SideChannelCancelled as e:
            return f"Interview failed or was cancelled: {e}"

    return tool(
        name="interview",
        description=(
            "Start an interactive interview session with the user. A dialog will open "
            "where you can have a back-and-forth conversation to gather detailed "
            "information. Use this when you need to ask follow-up questions or have a "
            "more nuanced discussion."
        ),
        schema={
            "message": arg(
                str,
                "Initial message or question to start the interview with. This sets "
                "the context for the interview.",
                min_length=1,
            )
        },
        call=call,
    )
