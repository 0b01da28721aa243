# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .context import Context, system_context, system_context_msg
from .persistence import (
    dump_conversation,
    load_conversation,
    persist_conversation,
    restore_conversation,
)
from .compaction import compacting_context, render_transcript

__all__ = [
    "Context",
    "system_context",
    "system_context_msg",
    "dump_conversation",
    "load_conversation",
    "persist_conversation",
    "restore_conversation",
    "compacting_context",
    "render_transcript",
]
