# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""OpenRouter provider, through its OpenAI-compatible chat completions API."""

import json
import logging

from typing import Any, Optional
from openai import AsyncOpenAI

from ..base import Completion, ToolCallRequest, MalformedResponseError, ProviderError
from .base_provider import BaseProvider
from ...config import Settings
from ...types.llm_types import GenerationOptions

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(BaseProvider):
    """Provider implementation for OpenRouter (or any compatible endpoint)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENROUTER_BASE_URL,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.base_url = base_url
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    def _reasoning_hint(self, options: GenerationOptions) -> dict:
        reasoning: dict[str, Any] = {"summary": "detailed"}
        if options.reasoning is not None:
            reasoning["effort"] = options.reasoning.value
        return reasoning

    def _map_tool_calls(self, message: Any) -> list[ToolCallRequest]:
        calls = []
        for tc in getattr(message, "tool_calls", None) or []:
            function = getattr(tc, "function", None)
            name = getattr(function, "name", None) if function else None
            arguments = getattr(function, "arguments", None) if function else None
            if not isinstance(arguments, str):
                arguments = json.dumps(arguments or {})
            calls.append(ToolCallRequest(id=str(tc.id), name=name or None, arguments=arguments))
        return calls

    async def create_completion(
        self,
        messages: list[dict],
        model: str,
        tools: Optional[list[dict]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> Completion:
        options = options or GenerationOptions()

        args: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
            "extra_body": {"reasoning": self._reasoning_hint(options)},
        }
        if options.max_tokens is not None:
            args["max_tokens"] = options.max_tokens
        if options.temperature is not None:
            args["temperature"] = options.temperature
        if options.top_p is not None:
            args["top_p"] = options.top_p
        if tools:
            args["tools"] = tools

        response = await self.client.chat.completions.create(**args)

        if not getattr(response, "choices", None):
            raise MalformedResponseError(f"Completion {getattr(response, 'id', '?')} has no choices")

        choice = response.choices[0]
        message = choice.message
        if message is None:
            raise MalformedResponseError(f"Completion {response.id} has no message")

        # OpenRouter returns reasoning as a non-standard field on the message
        reasoning = getattr(message, "reasoning", None)

        return Completion(
            id=response.id or "",
            model=response.model or model,
            content=message.content,
            reasoning=str(reasoning) if reasoning is not None else None,
            tool_calls=self._map_tool_calls(message),
            finish_reason=choice.finish_reason,
            usage=self._create_token_usage(response),
            raw_response={
                "finish_reason": choice.finish_reason,
                "created": getattr(response, "created", None),
                "model": response.model,
            },
        )


def create_provider(settings: Settings) -> OpenRouterProvider:
    """Build the provider connection described by the settings."""
    if not settings.OPENROUTER_API_KEY:
        raise ProviderError(
            "OPENROUTER_API_KEY is not set; add it to the environment or a .env file"
        )
    return OpenRouterProvider(
        api_key=settings.OPENROUTER_API_KEY, base_url=settings.API_BASE_URL
    )
