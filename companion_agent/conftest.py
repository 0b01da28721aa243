# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import copy
import inspect
import pytest

from src.llm.base import Completion, ToolCallRequest
from src.llm.providers.base_provider import BaseProvider
from src.types.llm_types import TokenUsage

# Enable asyncio support for pytest
pytest_plugins = ["pytest_asyncio"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-llm",
        action="store_true",
        default=False,
        help="Run tests marked with 'uses_llm'",
    )
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run tests marked with 'slow'",
    )


# Skip tests based on markers unless the corresponding option is provided
def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-llm"):
        skip_llm = pytest.mark.skip(reason="need --run-llm option to run")
        for item in items:
            if "uses_llm" in item.keywords:
                item.add_marker(skip_llm)
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


def text_reply(text: str, input_tokens: int = 10, output_tokens: int = 5) -> Completion:
    return Completion(
        id="resp",
        model="scripted",
        content=text,
        finish_reason="stop",
        usage=TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def tool_reply(*calls: tuple, text: str = "") -> Completion:
    """A completion requesting tool calls, given as (id, name, arguments)."""
    return Completion(
        id="resp",
        model="scripted",
        content=text,
        tool_calls=[
            ToolCallRequest(id=call_id, name=name, arguments=arguments)
            for call_id, name, arguments in calls
        ],
        finish_reason="tool_calls",
        usage=TokenUsage(input_tokens=10, output_tokens=5),
    )


class ScriptedProvider(BaseProvider):
    """Returns queued completions and records every request it receives.

    Replies may be a ``Completion``, an exception to raise, or a callable
    taking the wire messages and returning either.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests: list[dict] = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    async def create_completion(self, messages, model, tools=None, options=None):
        self.requests.append(
            {
                "messages": copy.deepcopy(messages),
                "model": model,
                "tools": copy.deepcopy(tools),
                "options": options,
            }
        )
        if not self.replies:
            raise AssertionError("ScriptedProvider ran out of replies")
        reply = self.replies.pop(0)
        if callable(reply) and not isinstance(reply, Completion):
            reply = reply(messages)
            if inspect.isawaitable(reply):
                reply = await reply
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def scripted_provider():
    return ScriptedProvider()
