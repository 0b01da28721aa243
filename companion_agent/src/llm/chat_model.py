# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The model adapter: turns a chat history and a tool list into one assistant
message, executing any tools the model asks for along the way.

Tool failures never escape ``act``. An unknown tool, unparseable arguments
or an exception raised by the tool are reported back to the model as the
tool's output, so the model can recover on the next round.
"""

import json
import logging

from typing import Any, Callable, Optional, Sequence
from pydantic import BaseModel

from .base import Completion, ToolCallRequest, ProviderNotSetError
from .metering import record_usage
from .providers.base_provider import BaseProvider
from ..types.llm_types import TokenUsage, GenerationOptions
from ..types.tool_types import Tool
from ..types.message_types import (
    ChatMessage,
    MessagePart,
    TextPart,
    ThinkingPart,
    ToolPart,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    EventMessage,
    InteractiveSystemMessage,
)

logger = logging.getLogger(__name__)

MALFORMED_TOOL_CALL = "Malformed tool call (no function name)"

ProgressCallback = Callable[[AssistantMessage], None]


def _joined_text(parts: Sequence[MessagePart]) -> str:
    return "".join(p.text for p in parts if isinstance(p, TextPart))


def to_wire_messages(messages: Sequence[ChatMessage], parse_tools: bool = True) -> list[dict]:
    """Translate chat messages to the OpenAI-compatible wire format.

    With ``parse_tools``, an assistant message carrying tool parts becomes an
    assistant message with ``tool_calls`` followed by one ``tool`` message per
    call. Tool parts that have not been resolved yet cannot be represented
    and are left out.
    """
    wire: list[dict] = []
    for message in messages:
        if isinstance(message, AssistantMessage):
            entry: dict[str, Any] = {"role": "assistant", "content": _joined_text(message.content)}
            calls = [p for p in message.content if isinstance(p, ToolPart)]
            if not parse_tools or not calls:
                wire.append(entry)
                continue

            resolved = [p for p in calls if p.resolved]
            if len(resolved) < len(calls):
                logger.warning(
                    f"Dropping {len(calls) - len(resolved)} unresolved tool call(s) from history"
                )
            if resolved:
                entry["tool_calls"] = [
                    {
                        "id": p.id,
                        "type": "function",
                        "function": {"name": p.tool, "arguments": p.tool_input},
                    }
                    for p in resolved
                ]
            wire.append(entry)
            wire.extend(
                {"role": "tool", "tool_call_id": p.id, "content": p.tool_output}
                for p in resolved
            )
        elif isinstance(message, InteractiveSystemMessage):
            wire.append({"role": "system", "content": _joined_text(message.render())})
        elif isinstance(message, SystemMessage):
            wire.append({"role": "system", "content": _joined_text(message.content)})
        elif isinstance(message, (UserMessage, EventMessage)):
            wire.append({"role": "user", "content": _joined_text(message.content)})
        else:
            raise TypeError(f"Invalid message type: {type(message).__name__}")
    return wire


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def _error_text(error: BaseException) -> str:
    return str(error) or type(error).__name__


class ChatModel:
    """A named model on a (possibly not yet connected) provider."""

    def __init__(self, provider: Optional[BaseProvider], model_name: str):
        self.provider = provider
        self.model_name = model_name

    def __repr__(self) -> str:
        return f"ChatModel({self.model_name!r})"

    def set_provider(self, provider: BaseProvider) -> None:
        self.provider = provider

    def set_model_name(self, model_name: str) -> None:
        self.model_name = model_name

    def _require_provider(self) -> BaseProvider:
        if self.provider is None:
            raise ProviderNotSetError(f"No provider set for model {self.model_name}")
        return self.provider

    async def _complete(
        self,
        wire: list[dict],
        tools: Optional[list[dict]],
        options: Optional[GenerationOptions],
    ) -> Completion:
        provider = self._require_provider()
        completion = await provider.create_completion(
            messages=wire, model=self.model_name, tools=tools, options=options
        )
        record_usage(self.model_name, completion.usage)
        logger.debug(f"Completion from {self.model_name}:\n{completion}")
        return completion

    @staticmethod
    def _append_response(result: AssistantMessage, completion: Completion) -> None:
        if completion.reasoning and completion.reasoning.strip():
            result.content.append(ThinkingPart(text=completion.reasoning))
        if completion.content and completion.content.strip():
            result.content.append(TextPart(text=completion.content))
        result.stats = (result.stats or TokenUsage()) + completion.usage

    def _log_input(self, messages: Sequence[ChatMessage], tools: Sequence[Tool], options) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        for m in messages:
            if isinstance(m, InteractiveSystemMessage):
                logger.debug(f"system (interactive): {_joined_text(m.render())}")
                continue
            for part in m.content:
                if isinstance(part, ToolPart):
                    logger.debug(f"{m.type} tool {part.tool}: {part.tool_input} -> {part.tool_output}")
                else:
                    logger.debug(f"{m.type} {part.type}: {part.text}")
        logger.debug(f"tools: {[t.name for t in tools]}, options: {options}")

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[GenerationOptions] = None,
    ) -> AssistantMessage:
        """Produce a single assistant message without tools."""
        self._require_provider()
        self._log_input(messages, [], options)
        completion = await self._complete(
            to_wire_messages(messages, parse_tools=False), None, options
        )
        result = AssistantMessage(content=[], stats=TokenUsage())
        self._append_response(result, completion)
        return result

    async def act(
        self,
        messages: Sequence[ChatMessage],
        tools: Sequence[Tool],
        options: Optional[GenerationOptions] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AssistantMessage:
        """Run the tool calling loop until the model stops requesting tools.

        Args:
            messages: The full history to send; event messages are sent as user turns
            tools: The tools the model may call
            options: Sampling options, passed through unmodified
            on_progress: Receives a snapshot of the accumulating message after
                every response and every tool call state change

        Returns:
            The single accumulated assistant message for this turn
        """
        self._require_provider()
        self._log_input(messages, tools, options)

        wire = to_wire_messages(messages)
        tool_defs = [t.to_native() for t in tools] or None
        tools_by_name: dict[str, Tool] = {}
        for t in tools:
            tools_by_name.setdefault(t.name, t)

        result = AssistantMessage(content=[], stats=TokenUsage())

        def report() -> None:
            if on_progress is not None:
                on_progress(result.model_copy(deep=True))

        while True:
            completion = await self._complete(wire, tool_defs, options)
            wire.append(completion.to_wire())
            self._append_response(result, completion)
            report()

            if not completion.requests_tools:
                return result

            # Tool calls from one response run strictly in order
            for call in completion.tool_calls:
                output = await self._run_tool_call(call, tools_by_name, result, report)
                wire.append({"role": "tool", "tool_call_id": call.id, "content": output})

    async def _run_tool_call(
        self,
        call: ToolCallRequest,
        tools_by_name: dict[str, Tool],
        result: AssistantMessage,
        report: Callable[[], None],
    ) -> str:
        logger.debug(f"Tool call {call.name}: {call.arguments}")

        if not call.name:
            logger.warning(f"Malformed tool call {call.id}: no function name")
            result.content.append(
                ToolPart(id=call.id, tool="unknown", tool_input=call.arguments, tool_output=MALFORMED_TOOL_CALL)
            )
            report()
            return MALFORMED_TOOL_CALL

        tool = tools_by_name.get(call.name)
        if tool is None:
            output = f"Tool {call.name} not found"
            logger.warning(output)
            result.content.append(
                ToolPart(id=call.id, tool=call.name, tool_input=call.arguments, tool_output=output)
            )
            report()
            return output

        part = ToolPart(id=call.id, tool=call.name, tool_input=call.arguments)
        result.content.append(part)
        report()

        try:
            raw_args = json.loads(call.arguments or "{}")
        except json.JSONDecodeError:
            raw_args = {}

        args, parse_error = tool.parse_args(raw_args)
        if parse_error is not None:
            output = f"Tool {call.name} error: {parse_error}"
        else:
            try:
                output = _stringify(await tool.invoke(args))
            except Exception as e:
                logger.warning(f"Tool {call.name} raised: {e}", exc_info=True)
                output = f"Tool {call.name} error: {_error_text(e)}"

        part.tool_output = output
        logger.debug(f"Tool {call.name} output: {output}")
        report()
        return output
