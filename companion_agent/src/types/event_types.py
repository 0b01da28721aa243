# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from datetime import datetime
from dataclasses import field, dataclass

from pydantic import BaseModel, Field


@dataclass
class Event:
    """An application notification waiting to be shown to the root agent"""

    category: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"Event: {self.category}\n{self.message}"


class WorkflowToolCall(BaseModel):
    name: str
    input: str
    output: str


class Workflow(BaseModel):
    """A trace of one named agent turn."""

    name: str
    system: str
    input: str
    output: str
    tools: list[WorkflowToolCall] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
