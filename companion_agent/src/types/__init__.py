# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .llm_types import TokenUsage, ReasoningEffort, GenerationOptions, ActOptions
from .message_types import (
    TextPart,
    ThinkingPart,
    ToolPart,
    MessagePart,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    EventMessage,
    InteractiveSystemMessage,
    ChatMessage,
    chat_history_adapter,
    user_message,
    assistant_message,
    system_message,
    event_message,
    wrap_interactive_system,
    text_of,
)
from .tool_types import Tool, ToolArg, arg, tool
from .event_types import Event, Workflow, WorkflowToolCall

__all__ = [
    "TokenUsage",
    "ReasoningEffort",
    "GenerationOptions",
    "ActOptions",
    "TextPart",
    "ThinkingPart",
    "ToolPart",
    "MessagePart",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "EventMessage",
    "InteractiveSystemMessage",
    "ChatMessage",
    "chat_history_adapter",
    "user_message",
    "assistant_message",
    "system_message",
    "event_message",
    "wrap_interactive_system",
    "text_of",
    "Tool",
    "ToolArg",
    "arg",
    "tool",
    "Event",
    "Workflow",
    "WorkflowToolCall",
]
