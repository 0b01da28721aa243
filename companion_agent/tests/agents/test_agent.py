# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for a single agent turn."""
import pytest

from conftest import ScriptedProvider, text_reply, tool_reply

from src.agents.agent import Agent, active_agents, is_active
from src.context.context import Context, system_context
from src.events.workflow_log import WorkflowLog
from src.llm.chat_model import ChatModel
from src.types.llm_types import ActOptions
from src.types.tool_types import arg, tool
from src.types.message_types import event_message, text_of, user_message


def make_agent(provider, tools=None, workflow_log=None, system="You are a test agent."):
    return Agent(
        system_context(system),
        ChatModel(provider, "test-model"),
        tools,
        workflow_log=workflow_log,
        name="test",
    )


class TestAgentAct:
    @pytest.mark.asyncio
    async def test_commits_message_and_answer(self):
        provider = ScriptedProvider(text_reply("Hi!"))
        agent = make_agent(provider)

        final = await agent.act(user_message("hello"))

        conversation = agent.context.conversation
        assert len(conversation) == 2
        assert text_of(conversation[0]) == "hello"
        assert conversation[1] is final
        assert text_of(final) == "Hi!"
        assert agent.context.in_progress is None

        sent = provider.requests[0]["messages"]
        assert sent[0] == {"role": "system", "content": "You are a test agent."}
        assert sent[1] == {"role": "user", "content": "hello"}

    @pytest.mark.asyncio
    async def test_history_includes_earlier_turns(self):
        provider = ScriptedProvider(text_reply("one"), text_reply("two"))
        agent = make_agent(provider)

        await agent.act(user_message("first"))
        await agent.act(user_message("second"))

        sent = provider.requests[1]["messages"]
        assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]
        assert sent[-1]["content"] == "second"

    @pytest.mark.asyncio
    async def test_message_committed_before_model_call(self):
        seen = []
        agent = None

        def reply(messages):
            seen.append(len(agent.context.conversation))
            return text_reply("ok")

        provider = ScriptedProvider(reply)
        agent = make_agent(provider)

        await agent.act(user_message("hello"))

        assert seen == [1]

    @pytest.mark.asyncio
    async def test_in_progress_cleared_on_failure(self):
        provider = ScriptedProvider(ConnectionError("offline"))
        agent = make_agent(provider)

        with pytest.raises(ConnectionError):
            await agent.act(user_message("hello"))

        assert agent.context.in_progress is None
        # The user message stays committed
        assert len(agent.context.conversation) == 1

    @pytest.mark.asyncio
    async def test_in_progress_tracks_the_turn(self):
        states = []
        provider = ScriptedProvider(
            tool_reply(("c1", "ping", "{}"), text="Checking"),
            text_reply("Done"),
        )
        ping = tool(name="ping", description="Ping", call=lambda: "pong")
        agent = make_agent(provider, [ping])
        agent.context.listen(lambda ctx: states.append(ctx.in_progress))

        await agent.act(user_message("hello"))

        in_progress = [s for s in states if s is not None]
        assert in_progress
        assert text_of(in_progress[0]) == "Checking"
        assert states[-1] is None

    @pytest.mark.asyncio
    async def test_event_sent_as_user(self):
        provider = ScriptedProvider(text_reply("Noted"))
        agent = make_agent(provider)

        await agent.act(event_message("Got events:\nEvent: timer\nfired"))

        assert provider.requests[0]["messages"][-1] == {
            "role": "user",
            "content": "Got events:\nEvent: timer\nfired",
        }
        # The conversation keeps the event type
        assert agent.context.conversation[0].type == "event"

    @pytest.mark.asyncio
    async def test_active_during_turn_only(self):
        observed = []

        def check():
            observed.append((is_active(agent), len(active_agents())))
            return "ok"

        provider = ScriptedProvider(tool_reply(("c1", "check", "{}")), text_reply("done"))
        agent = make_agent(provider, [tool(name="check", description="Check", call=check)])

        await agent.act(user_message("go"))

        assert observed == [(True, 1)]
        assert not is_active(agent)
        assert active_agents() == ()


class TestWorkflowRecording:
    @pytest.mark.asyncio
    async def test_records_named_workflow(self):
        log = WorkflowLog()
        provider = ScriptedProvider(
            tool_reply(("c1", "echo", '{"text": "a"}')),
            text_reply("Finished"),
        )
        echo = tool(
            name="echo",
            description="Echo",
            schema={"text": arg(str, "Text to echo")},
            call=lambda text: text.upper(),
        )
        agent = make_agent(provider, [echo], workflow_log=log)

        await agent.act(user_message("start"), ActOptions(workflow_name="Test"))

        workflows = log.get_workflows("Test")
        assert len(workflows) == 1
        workflow = workflows[0]
        assert workflow.system == "You are a test agent."
        assert workflow.input == "start"
        assert workflow.output == "Finished"
        assert [(t.name, t.input, t.output) for t in workflow.tools] == [
            ("echo", '{"text": "a"}', "A")
        ]

    @pytest.mark.asyncio
    async def test_unnamed_turns_are_not_recorded(self):
        log = WorkflowLog()
        agent = make_agent(ScriptedProvider(text_reply("ok")), workflow_log=log)

        await agent.act(user_message("start"))

        assert log.workflows == []

    @pytest.mark.asyncio
    async def test_recording_failure_does_not_break_turn(self):
        log = WorkflowLog()

        def broken(workflow):
            raise RuntimeError("subscriber failed")

        log.subscribe(broken)
        agent = make_agent(ScriptedProvider(text_reply("ok")), workflow_log=log)

        final = await agent.act(user_message("start"), ActOptions(workflow_name="Test"))

        assert text_of(final) == "ok"
        assert len(log.workflows) == 1

    @pytest.mark.asyncio
    async def test_options_reach_provider(self):
        provider = ScriptedProvider(text_reply("ok"))
        agent = Agent(Context(), ChatModel(provider, "test-model"))
        options = ActOptions(workflow_name="X", temperature=0.2)

        await agent.act(user_message("start"), options)

        assert provider.requests[0]["options"] is options
        assert provider.requests[0]["messages"] == [{"role": "user", "content": "start"}]
