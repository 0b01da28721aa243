# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from typing import Callable, Optional, Sequence
from pydantic import ValidationError

from .context import Context
from ..storage.kv_store import KeyValueStore
from ..types.message_types import ChatMessage, chat_history_adapter

logger = logging.getLogger(__name__)


def dump_conversation(conversation: Sequence[ChatMessage]) -> str:
    return chat_history_adapter.dump_json(list(conversation)).decode()


def load_conversation(store: KeyValueStore, key: str) -> Optional[list[ChatMessage]]:
    """Read a persisted conversation, or ``None`` if absent or unreadable."""
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return chat_history_adapter.validate_json(raw)
    except ValidationError as e:
        logger.error(f"Discarding unreadable conversation under {key!r}: {e}")
        return None


def persist_conversation(context: Context, store: KeyValueStore, key: str) -> Callable[[], None]:
    """Write the conversation to the store on every context change.

    Returns the unsubscribe function of the installed listener.
    """
    last_written: list[Optional[str]] = [None]

    def write(that: Context) -> None:
        data = dump_conversation(that.conversation)
        # in_progress updates also notify; skip rewriting an unchanged value
        if data == last_written[0]:
            return
        store.set(key, data)
        last_written[0] = data

    return context.listen(write)


def restore_conversation(context: Context, store: KeyValueStore, key: str) -> bool:
    conversation = load_conversation(store, key)
    if not conversation:
        return False
    context.conversation = conversation
    return True
