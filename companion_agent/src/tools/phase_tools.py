# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from typing import Sequence
from pydantic import BaseModel, Field, ValidationError

from ..config import Phase
from ..storage.kv_store import KeyValueStore
from ..types.tool_types import Tool, tool

logger = logging.getLogger(__name__)

PHASE_STATE_KEY = "user-phase-state"


class PhaseState(BaseModel):
    current_phase_index: int = 0
    challenge_ready: bool = False
    completed_phases: list[int] = Field(default_factory=list)


class PhaseTracker:
    """Progress through the configured phases, persisted in the store."""

    def __init__(self, store: KeyValueStore, phases: Sequence[Phase], key: str = PHASE_STATE_KEY):
        self.store = store
        self.phases = list(phases)
        self.key = key

    def load(self) -> PhaseState:
        raw = self.store.get(self.key)
        if not raw:
            return PhaseState()
        try:
            return PhaseState.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to load phase state: {e}")
            return PhaseState()

    def save(self, state: PhaseState) -> None:
        self.store.set(self.key, state.model_dump_json())

    def mark_challenge_ready(self) -> PhaseState:
        state = self.load().model_copy(update={"challenge_ready": True})
        self.save(state)
        return state

    def context_prompt(self) -> str:
        """Describe the current phase for the planner, or '' without phases."""
        state = self.load()
        index = state.current_phase_index
        if not 0 <= index < len(self.phases):
            return ""
        current = self.phases[index]

        context = "\n\n## Current Phase Context\n"
        context += f"Phase: {current.title}\n"
        context += f"Agent Instructions: {current.agent_prompt}\n"
        context += f"Challenge Ready: {'true' if state.challenge_ready else 'false'}\n"
        if index + 1 < len(self.phases):
            context += f"\nNext Phase: {self.phases[index + 1].title}"
        return context


def mark_challenge_ready_tool(tracker: PhaseTracker) -> Tool:
    def call() -> str:
        tracker.mark_challenge_ready()
        return (
            "User marked as ready for the challenge. They can now complete it "
            "to advance to the next phase."
        )

    return tool(
        name="markChallengeReady",
        description=(
            "Mark the user as ready for the current phase's graduation challenge. "
            "Use this when you determine the user has adequately progressed in their current phase."
        ),
        call=call,
    )
