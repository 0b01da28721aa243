# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from typing import Optional, Sequence

from .context import Context
from .persistence import load_conversation, persist_conversation
from ..llm.chat_model import ChatModel
from ..storage.kv_store import KeyValueStore
from ..types.message_types import ChatMessage, text_of, user_message

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """
You are a summarizer. You will be given a conversation and a summary of the conversation.
Your task is to generate a concise summary of the current state of the conversation.
Prioritize more recent info and more important info.

Current Summary:
{{PAST_CONTENT}}

Current Conversation:
{{CONVERSATION}}
"""


def render_transcript(conversation: Sequence[ChatMessage], sep: str = "") -> str:
    return "\n".join(f"{m.type}:\n{text_of(m, sep)}" for m in conversation)


async def compacting_context(
    context: Context,
    store: KeyValueStore,
    key: str,
    model: ChatModel,
    custom_prompt: Optional[str] = None,
) -> Optional[str]:
    """Persist a context under ``<key>-context`` and summarize the last session.

    If a previous conversation was stored, it is folded into the running
    summary kept under ``<key>-summary`` and the new summary is returned.
    """
    past_conversation = load_conversation(store, f"{key}-context")
    persist_conversation(context, store, f"{key}-context")
    if not past_conversation:
        return None

    past_summary = store.get(f"{key}-summary")
    prompt = (custom_prompt or SUMMARY_PROMPT).strip()
    prompt = prompt.replace("{{PAST_CONTENT}}", past_summary or "Empty")
    prompt = prompt.replace("{{CONVERSATION}}", render_transcript(past_conversation))

    result = await model.generate([user_message(prompt)])
    summary = text_of(result)
    store.set(f"{key}-summary", summary)
    logger.info(f"Compacted {len(past_conversation)} messages under {key!r}")
    return summary
