# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Tool descriptors exposed to the model.

A tool is a name, a description, a schema mapping each argument name to a
typed ``ToolArg`` slot, and a callable. Argument validation is done one slot
at a time with pydantic so failures can name the offending argument.
"""

import inspect

from typing import Annotated, Any, Awaitable, Callable, Optional, Union
from dataclasses import dataclass, field
from functools import cached_property
from pydantic import Field, TypeAdapter, ValidationError, create_model


@dataclass
class ToolArg:
    """A typed argument slot. An ``Ellipsis`` default marks it as required."""

    annotation: Any = str
    description: Optional[str] = None
    default: Any = ...
    constraints: dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> bool:
        return self.default is ...

    @property
    def field_type(self) -> Any:
        return Annotated[
            self.annotation, Field(description=self.description, **self.constraints)
        ]

    @cached_property
    def _adapter(self) -> TypeAdapter:
        return TypeAdapter(self.field_type)

    def parse(self, value: Any) -> Any:
        """Validate and coerce a single raw value, raising ``ValueError``."""
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise ValueError("; ".join(err["msg"] for err in e.errors())) from e


def arg(
    annotation: Any = str,
    description: Optional[str] = None,
    default: Any = ...,
    **constraints: Any,
) -> ToolArg:
    return ToolArg(
        annotation=annotation,
        description=description,
        default=default,
        constraints=constraints,
    )


ToolCallable = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass
class Tool:
    name: str
    description: str
    schema: dict[str, ToolArg]
    call: ToolCallable

    def parse_args(self, raw: Any) -> tuple[Optional[dict[str, Any]], Optional[str]]:
        """Validate raw decoded arguments against the schema.

        Returns the parsed arguments, or ``None`` and an error message naming
        the tool and the argument that failed.
        """
        if not isinstance(raw, dict):
            raw = {}
        parsed: dict[str, Any] = {}
        for name, slot in self.schema.items():
            try:
                if name not in raw and not slot.required:
                    parsed[name] = slot.default
                    continue
                if name not in raw:
                    raise ValueError("Field required")
                parsed[name] = slot.parse(raw[name])
            except ValueError as e:
                return None, f'Tool "{self.name}" argument "{name}" parse error: {e}'
        return parsed, None

    async def invoke(self, args: dict[str, Any]) -> Any:
        result = self.call(**args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def parameters_schema(self) -> dict:
        fields = {
            name: (slot.field_type, slot.default) for name, slot in self.schema.items()
        }
        model = create_model(f"{self.name}_arguments", **fields)
        return model.model_json_schema()

    def to_native(self) -> dict:
        """The OpenAI-compatible function definition for this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema(),
            },
        }


def tool(
    name: str,
    description: str,
    schema: Optional[dict[str, ToolArg]] = None,
    call: Optional[ToolCallable] = None,
) -> Tool:
    if call is None:
        raise ValueError(f"Tool {name} has no callable")
    return Tool(name=name, description=description, schema=schema or {}, call=call)
