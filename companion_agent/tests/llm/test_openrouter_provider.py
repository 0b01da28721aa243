# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for the OpenRouter provider against a mocked OpenAI client."""
import pytest

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from src.config import Settings
from src.llm.base import MalformedResponseError, ProviderError
from src.llm.providers.openrouter import OpenRouterProvider, create_provider
from src.types.llm_types import GenerationOptions, ReasoningEffort


def make_response(message, finish_reason="stop", usage=None):
    return SimpleNamespace(
        id="gen-1",
        model="x-ai/grok-4.1-fast",
        created=0,
        choices=[SimpleNamespace(message=message, finish_reason=finish_reason)],
        usage=usage or SimpleNamespace(prompt_tokens=12, completion_tokens=4),
    )


def make_provider(response):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return OpenRouterProvider(api_key="test", client=client), client


class TestOpenRouterProvider:
    @pytest.mark.asyncio
    async def test_text_completion(self):
        message = SimpleNamespace(content="Hello", reasoning="thinking...", tool_calls=None)
        provider, client = make_provider(make_response(message))

        completion = await provider.create_completion(
            [{"role": "user", "content": "hi"}], "x-ai/grok-4.1-fast"
        )

        assert completion.content == "Hello"
        assert completion.reasoning == "thinking..."
        assert completion.tool_calls == []
        assert completion.usage.input_tokens == 12
        assert completion.usage.output_tokens == 4
        assert not completion.requests_tools

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["stream"] is False
        assert kwargs["extra_body"] == {"reasoning": {"summary": "detailed"}}
        assert "tools" not in kwargs
        assert "max_tokens" not in kwargs

    @pytest.mark.asyncio
    async def test_options_and_tools(self):
        message = SimpleNamespace(content="", tool_calls=None)
        provider, client = make_provider(make_response(message))
        tools = [{"type": "function", "function": {"name": "x", "parameters": {}}}]

        await provider.create_completion(
            [],
            "m",
            tools=tools,
            options=GenerationOptions(
                max_tokens=50, temperature=0.3, top_p=0.9, reasoning=ReasoningEffort.LOW
            ),
        )

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["tools"] == tools
        assert kwargs["max_tokens"] == 50
        assert kwargs["temperature"] == 0.3
        assert kwargs["top_p"] == 0.9
        assert kwargs["extra_body"]["reasoning"] == {"summary": "detailed", "effort": "low"}

    @pytest.mark.asyncio
    async def test_tool_calls_are_mapped(self):
        calls = [
            SimpleNamespace(id="c1", function=SimpleNamespace(name="search", arguments='{"q": 1}')),
            SimpleNamespace(id="c2", function=SimpleNamespace(name="", arguments=None)),
        ]
        message = SimpleNamespace(content=None, tool_calls=calls)
        provider, _ = make_provider(make_response(message, finish_reason="tool_calls"))

        completion = await provider.create_completion([], "m")

        assert completion.requests_tools
        assert completion.tool_calls[0].name == "search"
        assert completion.tool_calls[0].arguments == '{"q": 1}'
        assert completion.tool_calls[1].name is None
        assert completion.tool_calls[1].arguments == "{}"

    @pytest.mark.asyncio
    async def test_missing_usage_counts_as_zero(self):
        response = make_response(SimpleNamespace(content="x", tool_calls=None))
        response.usage = None
        provider, _ = make_provider(response)

        completion = await provider.create_completion([], "m")

        assert completion.usage.total_tokens == 0

    @pytest.mark.asyncio
    async def test_no_choices(self):
        response = make_response(None)
        response.choices = []
        provider, _ = make_provider(response)

        with pytest.raises(MalformedResponseError):
            await provider.create_completion([], "m")

    def test_create_provider_requires_key(self):
        with pytest.raises(ProviderError):
            create_provider(Settings(OPENROUTER_API_KEY=None))

    def test_create_provider(self):
        provider = create_provider(
            Settings(OPENROUTER_API_KEY="sk-test", API_BASE_URL="http://localhost:1234/v1")
        )

        assert isinstance(provider, OpenRouterProvider)
        assert provider.base_url == "http://localhost:1234/v1"
