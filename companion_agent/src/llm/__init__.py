# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""LLM integration module.

The ``ChatModel`` adapter runs the tool calling loop on top of a provider
speaking the OpenAI-compatible chat completions protocol.
"""

import logging

from .base import (
    Completion,
    ToolCallRequest,
    ProviderError,
    ProviderNotSetError,
    MalformedResponseError,
)
from .chat_model import ChatModel, to_wire_messages
from .metering import token_meter, get_total_usage

# Quieten LLM API call logs to make stdout more useful
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

__all__ = [
    "Completion",
    "ToolCallRequest",
    "ProviderError",
    "ProviderNotSetError",
    "MalformedResponseError",
    "ChatModel",
    "to_wire_messages",
    "token_meter",
    "get_total_usage",
]
