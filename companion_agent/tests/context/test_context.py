# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for agent contexts, their persistence and compaction."""
import pytest

from conftest import ScriptedProvider, text_reply

from src.context.compaction import compacting_context, render_transcript
from src.context.context import Context, system_context
from src.context.persistence import (
    dump_conversation,
    load_conversation,
    persist_conversation,
    restore_conversation,
)
from src.llm.chat_model import ChatModel
from src.storage.kv_store import MemoryStore
from src.types.message_types import (
    AssistantMessage,
    InteractiveSystemMessage,
    TextPart,
    ThinkingPart,
    ToolPart,
    assistant_message,
    event_message,
    text_of,
    user_message,
)


class TestContext:
    def test_mutations_notify_listeners(self):
        context = Context()
        seen = []
        context.listen(lambda ctx: seen.append(len(ctx.conversation)))

        context.add_conversation(user_message("a"))
        context.in_progress = assistant_message("partial")
        context.in_progress = None
        context.conversation = []

        assert seen == [1, 1, 1, 0]

    def test_unsubscribe(self):
        context = Context()
        seen = []
        unsubscribe = context.listen(seen.append)

        unsubscribe()
        unsubscribe()
        context.add_conversation(user_message("a"))

        assert seen == []

    def test_listener_ids_are_reused(self):
        context = Context()
        calls = []
        first = context.listen(lambda ctx: calls.append("first"))
        context.listen(lambda ctx: calls.append("second"))
        first()
        context.listen(lambda ctx: calls.append("third"))

        context.notify()

        assert sorted(calls) == ["second", "third"]

    def test_listener_errors_are_contained(self):
        context = Context()
        seen = []

        def broken(ctx):
            raise RuntimeError("listener failed")

        context.listen(broken)
        context.listen(lambda ctx: seen.append(True))
        context.add_conversation(user_message("a"))

        assert seen == [True]

    def test_views_are_read_only(self):
        context = system_context("  sys  ")

        assert isinstance(context.conversation, tuple)
        assert text_of(context.system[0]) == "sys"


class TestPersistence:
    def test_round_trip_keeps_message_types(self):
        conversation = [
            user_message("hi"),
            event_message("Got events:\nEvent: a\nb"),
            AssistantMessage(
                content=[
                    ThinkingPart(text="hmm"),
                    TextPart(text="Let me check"),
                    ToolPart(id="c1", tool="search", tool_input="{}", tool_output="ok"),
                ]
            ),
        ]
        store = MemoryStore({"k": dump_conversation(conversation)})

        assert load_conversation(store, "k") == conversation

    def test_interactive_callback_is_not_serialized(self):
        message = InteractiveSystemMessage(callback=lambda: [TextPart(text="live")])

        restored = load_conversation(MemoryStore({"k": dump_conversation([message])}), "k")

        assert restored[0].callback is None
        assert restored[0].render() == []

    def test_missing_or_invalid(self):
        store = MemoryStore({"bad": '[{"type": "nonsense"}]'})

        assert load_conversation(store, "absent") is None
        assert load_conversation(store, "bad") is None

    def test_persist_writes_on_change(self):
        store = MemoryStore()
        context = Context()
        persist_conversation(context, store, "chat")

        context.add_conversation(user_message("hello"))

        assert [text_of(m) for m in load_conversation(store, "chat")] == ["hello"]

    def test_persist_skips_unchanged_writes(self):
        writes = []

        class CountingStore(MemoryStore):
            def set(self, key, value):
                writes.append(key)
                super().set(key, value)

        context = Context()
        persist_conversation(context, CountingStore(), "chat")

        context.add_conversation(user_message("hello"))
        context.in_progress = assistant_message("partial")
        context.in_progress = None

        assert writes == ["chat"]

    def test_persist_unsubscribe(self):
        store = MemoryStore()
        context = Context()
        stop = persist_conversation(context, store, "chat")
        stop()

        context.add_conversation(user_message("hello"))

        assert store.get("chat") is None

    def test_restore(self):
        store = MemoryStore({"chat": dump_conversation([user_message("earlier")])})
        context = Context()

        assert restore_conversation(context, store, "chat")
        assert text_of(context.conversation[0]) == "earlier"
        assert not restore_conversation(Context(), store, "other")


class TestCompaction:
    def test_render_transcript(self):
        conversation = [user_message("hi"), assistant_message("hello")]

        assert render_transcript(conversation) == "user:\nhi\nassistant:\nhello"

    @pytest.mark.asyncio
    async def test_no_past_conversation(self):
        store = MemoryStore()
        provider = ScriptedProvider()
        context = Context()

        summary = await compacting_context(context, store, "coach", ChatModel(provider, "m"))

        assert summary is None
        assert provider.requests == []
        context.add_conversation(user_message("now"))
        assert load_conversation(store, "coach-context") is not None

    @pytest.mark.asyncio
    async def test_summarizes_past_conversation(self):
        past = [user_message("I slept badly"), assistant_message("Sorry to hear")]
        store = MemoryStore(
            {
                "coach-context": dump_conversation(past),
                "coach-summary": "Working on sleep",
            }
        )
        provider = ScriptedProvider(text_reply("Still working on sleep"))

        summary = await compacting_context(Context(), store, "coach", ChatModel(provider, "m"))

        assert summary == "Still working on sleep"
        assert store.get("coach-summary") == "Still working on sleep"
        prompt = provider.requests[0]["messages"][0]["content"]
        assert "Current Summary:\nWorking on sleep" in prompt
        assert "user:\nI slept badly\nassistant:\nSorry to hear" in prompt
        assert provider.requests[0]["tools"] is None

    @pytest.mark.asyncio
    async def test_custom_prompt(self):
        store = MemoryStore({"coach-context": dump_conversation([user_message("x")])})
        provider = ScriptedProvider(text_reply("s"))

        await compacting_context(
            Context(), store, "coach", ChatModel(provider, "m"),
            custom_prompt="Summarize {{CONVERSATION}} given {{PAST_CONTENT}}",
        )

        assert provider.requests[0]["messages"][0]["content"] == "Summarize user:\nx given Empty"
