# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Base models and shared functionality for LLM interactions."""

from typing import Optional
from pydantic import BaseModel, Field

from ..types.llm_types import TokenUsage


class ProviderError(RuntimeError):
    """Raised when a completion cannot be obtained from the provider."""


class ProviderNotSetError(ProviderError):
    """The model was used before a provider connection was assigned."""


class MalformedResponseError(ProviderError):
    """The provider answered with a payload we cannot interpret."""


class ToolCallRequest(BaseModel):
    """A function call requested by the model."""

    id: str
    name: Optional[str] = None
    arguments: str = ""


class Completion(BaseModel):
    """A normalized, non-streaming completion response."""

    id: str = ""
    model: str = ""
    content: Optional[str] = None
    reasoning: Optional[str] = None
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)
    finish_reason: Optional[str] = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
    raw_response: Optional[dict] = Field(default=None, exclude=True)

    @property
    def requests_tools(self) -> bool:
        """Whether the model stopped in order to have tools executed."""
        return self.finish_reason == "tool_calls" and len(self.tool_calls) > 0

    def to_wire(self) -> dict:
        """The assistant message to append to the outgoing history."""
        message: dict = {"role": "assistant", "content": self.content or ""}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name or "", "arguments": tc.arguments},
                }
                for tc in self.tool_calls
            ]
        return message

    def __str__(self) -> str:
        parts = [f"{'='*80}"]
        if self.reasoning:
            parts.append(f"Reasoning {'-'*10}\n{self.reasoning}")
        if self.content:
            parts.append(f"Text {'-'*10}\n{self.content}")
        for tc in self.tool_calls:
            parts.append(f"Tool call {tc.name} (id: {tc.id}): {tc.arguments}")
        parts.append(f"Finish reason: {self.finish_reason}, usage: {self.usage}")
        parts.append(f"{'='*80}")
        return "\n".join(parts)
