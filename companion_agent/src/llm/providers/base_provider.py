# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Base provider interface for LLM interactions."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..base import Completion
from ...types.llm_types import TokenUsage, GenerationOptions

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for chat completion providers.

    Providers receive messages already translated to the OpenAI-compatible
    wire format and return a normalized ``Completion``.
    """

    def _create_token_usage(self, response: Any) -> TokenUsage:
        usage = getattr(response, "usage", None)
        if not usage:
            logger.warning("Missing usage information from API response. Setting to 0")
            return TokenUsage()
        return TokenUsage(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )

    @abstractmethod
    async def create_completion(
        self,
        messages: list[dict],
        model: str,
        tools: Optional[list[dict]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> Completion:
        """Create a single, non-streaming completion.

        Args:
            messages: The OpenAI-compatible message history
            model: The model identifier understood by the endpoint
            tools: Native function definitions, if tools are available
            options: Sampling options, passed through unmodified

        Returns:
            The normalized completion
        """
        pass
