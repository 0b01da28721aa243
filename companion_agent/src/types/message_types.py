# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Chat messages exchanged between agents, the model adapter and the UI.

Messages and their parts are tagged unions discriminated on the ``type``
field, so they can be matched on ``message.type`` and round-tripped through
JSON with the ``chat_history_adapter``.
"""

from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from .llm_types import TokenUsage


# Message parts ===============================================================


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ThinkingPart(BaseModel):
    type: Literal["thinking"] = "thinking"
    text: str


class ToolPart(BaseModel):
    """A single tool invocation within an assistant message.

    A part without ``tool_output`` is still in flight. The output is written
    exactly once, after which the part is treated as immutable.
    """

    type: Literal["tool"] = "tool"
    id: str
    tool: str
    tool_input: str = Field(description="The raw JSON argument string")
    tool_output: Optional[str] = None
    tool_data: Optional[Any] = None

    @property
    def resolved(self) -> bool:
        return self.tool_output is not None


MessagePart = Annotated[
    Union[TextPart, ThinkingPart, ToolPart], Field(discriminator="type")
]


# Messages ====================================================================


class SystemMessage(BaseModel):
    type: Literal["system"] = "system"
    content: list[MessagePart] = Field(default_factory=list)


class UserMessage(BaseModel):
    type: Literal["user"] = "user"
    content: list[MessagePart] = Field(default_factory=list)


class AssistantMessage(BaseModel):
    type: Literal["assistant"] = "assistant"
    content: list[MessagePart] = Field(default_factory=list)
    stats: Optional[TokenUsage] = None


class EventMessage(BaseModel):
    """Notifications raised by the application rather than typed by the user.

    These are presented to the model as user turns.
    """

    type: Literal["event"] = "event"
    content: list[MessagePart] = Field(default_factory=list)


class InteractiveSystemMessage(BaseModel):
    """A system message whose content is regenerated each time it is sent.

    ``content`` is the static fallback used when no callback is attached,
    for instance after the message was deserialized.
    """

    type: Literal["interactive_system"] = "interactive_system"
    content: list[MessagePart] = Field(default_factory=list)
    callback: Optional[Callable[[], list[MessagePart]]] = Field(
        default=None, exclude=True
    )

    def render(self) -> list[MessagePart]:
        if self.callback is None:
            return list(self.content)
        return self.callback()


ChatMessage = Annotated[
    Union[
        SystemMessage,
        UserMessage,
        AssistantMessage,
        EventMessage,
        InteractiveSystemMessage,
    ],
    Field(discriminator="type"),
]

chat_history_adapter = TypeAdapter(list[ChatMessage])


# Constructors ================================================================


def user_message(text: str) -> UserMessage:
    return UserMessage(content=[TextPart(text=text)])


def assistant_message(text: str = "") -> AssistantMessage:
    return AssistantMessage(content=[TextPart(text=text)])


def system_message(text: str) -> SystemMessage:
    return SystemMessage(content=[TextPart(text=text.strip())])


def event_message(text: str) -> EventMessage:
    return EventMessage(content=[TextPart(text=text)])


def wrap_interactive_system(
    wrapper: Callable[[list[MessagePart]], list[MessagePart]],
    message: InteractiveSystemMessage,
) -> InteractiveSystemMessage:
    """Decorate the lazily rendered content of an interactive system message."""
    return InteractiveSystemMessage(
        content=list(message.content),
        callback=lambda: wrapper(message.render()),
    )


# Readers =====================================================================


def message_parts(message: ChatMessage) -> list[MessagePart]:
    if isinstance(message, InteractiveSystemMessage):
        return message.render()
    return list(message.content)


def text_of(message: ChatMessage, sep: str = "") -> str:
    """Concatenate the text parts of a message."""
    return sep.join(
        part.text for part in message_parts(message) if isinstance(part, TextPart)
    )


def tool_parts(message: ChatMessage) -> list[ToolPart]:
    return [part for part in message.content if isinstance(part, ToolPart)]
