# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ReasoningEffort(str, Enum):
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TokenUsage(BaseModel):
    """Token counts for one or more completions."""

    input_tokens: int = Field(default=0, description="Prompt tokens sent")
    output_tokens: int = Field(default=0, description="Completion tokens received")

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )

    def __str__(self) -> str:
        return f"{self.input_tokens} in / {self.output_tokens} out"


class GenerationOptions(BaseModel):
    """Sampling options passed through to the completion endpoint."""

    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    reasoning: Optional[ReasoningEffort] = None


class ActOptions(GenerationOptions):
    """Options for a single agent turn.

    The workflow name is only used for tracing; the model adapter ignores it.
    """

    workflow_name: Optional[str] = None
