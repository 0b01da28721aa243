# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json

from src.events.event_queue import EventQueue, format_events
from src.events.workflow_log import WorkflowLog
from src.types.event_types import Event, Workflow, WorkflowToolCall


def make_workflow(name="Planner", output="done"):
    return Workflow(
        name=name,
        system="sys",
        input="in",
        output=output,
        tools=[WorkflowToolCall(name="info", input="{}", output="facts")],
    )


class TestEventQueue:
    def test_drain_empties_queue(self):
        queue = EventQueue()
        queue.push(Event(category="timer", message="done"))
        queue.push(Event(category="mood", message="low"))

        events = queue.drain()

        assert [e.category for e in events] == ["timer", "mood"]
        assert len(queue) == 0
        assert queue.drain() == []

    def test_format_events(self):
        events = [
            Event(category="timer", message="Meditation finished"),
            Event(category="ritual", message="Skipped\n"),
        ]

        assert format_events(events) == (
            "Got events:\nEvent: timer\nMeditation finished\nEvent: ritual\nSkipped"
        )


class TestWorkflowLog:
    def test_record_and_filter(self):
        log = WorkflowLog()
        log.record(make_workflow("Planner"))
        log.record(make_workflow("SubAgent-rule"))

        assert [w.name for w in log.workflows] == ["Planner", "SubAgent-rule"]
        assert len(log.get_workflows("Planner")) == 1

    def test_max_workflows(self):
        log = WorkflowLog(max_workflows=2)
        for i in range(3):
            log.record(make_workflow(output=str(i)))

        assert [w.output for w in log.workflows] == ["1", "2"]

    def test_subscribers(self):
        log = WorkflowLog()
        seen = []
        unsubscribe = log.subscribe(lambda workflows: seen.append(len(workflows)))

        log.record(make_workflow())
        unsubscribe()
        log.record(make_workflow())

        assert seen == [1]

    def test_clear(self):
        log = WorkflowLog()
        log.record(make_workflow())
        log.clear()

        assert log.workflows == []

    def test_save(self, tmp_path):
        log = WorkflowLog()
        log.record(make_workflow())
        path = tmp_path / "out" / "workflows.json"

        log.save(path)

        data = json.loads(path.read_text())
        assert data[0]["name"] == "Planner"
        assert data[0]["tools"] == [{"name": "info", "input": "{}", "output": "facts"}]
