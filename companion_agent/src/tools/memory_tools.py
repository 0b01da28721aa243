# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from ..storage.kv_store import KeyValueStore
from ..types.tool_types import Tool, arg, tool
from ..types.message_types import InteractiveSystemMessage, TextPart


def memory_tool(store: KeyValueStore, key: str) -> tuple[InteractiveSystemMessage, Tool]:
    """A persistent scratchpad for one agent.

    Returns a system message showing the current memory each time it is sent,
    and a ``setMemory`` tool that overwrites it.
    """

    def render() -> list[TextPart]:
        return [TextPart(text=f"Memory: {store.get(key)}")]

    def call(data: str) -> str:
        store.set(key, data)
        return "Memory set"

    return (
        InteractiveSystemMessage(callback=render),
        tool(
            name="setMemory",
            description="Set the memory",
            schema={"data": arg(str, "The full new memory contents")},
            call=call,
        ),
    )
