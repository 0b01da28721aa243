# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Debug trace of named agent turns, for inspecting what each agent did."""

import json
import logging

from pathlib import Path
from typing import Callable, Optional

from ..types.event_types import Workflow

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

WorkflowListener = Callable[[list[Workflow]], None]


class WorkflowLog:
    """Records workflows in order and notifies subscribers after each one."""

    def __init__(self, max_workflows: Optional[int] = None):
        self.max_workflows = max_workflows
        self._workflows: list[Workflow] = []
        self._subscribers: list[WorkflowListener] = []

    @property
    def workflows(self) -> list[Workflow]:
        return list(self._workflows)

    def record(self, workflow: Workflow) -> None:
        logger.debug(f"Workflow {workflow.name} recorded ({len(workflow.tools)} tool calls)")
        self._workflows.append(workflow)
        if self.max_workflows is not None:
            self._workflows = self._workflows[-self.max_workflows:]

        snapshot = self.workflows
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Error in workflow subscriber {callback}: {e}")

    def subscribe(self, callback: WorkflowListener) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def get_workflows(self, name: str) -> list[Workflow]:
        return [w for w in self._workflows if w.name == name]

    def clear(self) -> None:
        self._workflows.clear()

    def save(self, path: Path) -> None:
        """Dump all recorded workflows to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps([w.model_dump(mode="json") for w in self._workflows], indent=2)
        )
        logger.info(f"Saved {len(self._workflows)} workflows to {path}")
