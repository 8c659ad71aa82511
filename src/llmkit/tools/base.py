"""
Tool metadata, JSON schemas, and execution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from ..exceptions import ToolValidationError

JsonSchema = Dict[str, Any]


def _python_type_to_json(param_type: type) -> str:
    """Map a Python type to a JSON schema type string."""
    type_map = {
        str: "string",
        int: "integer",
        float: "number",
        bool: "boolean",
        list: "array",
        dict: "object",
    }
    return type_map.get(param_type, "string")


@dataclass
class ToolParameter:
    """
    Schema definition for a single tool parameter.

    Attributes:
        name: Parameter name (should match the function parameter name).
        param_type: Python type (str, int, float, bool, list, dict).
        description: Human-readable description shown to the model.
        required: Whether this parameter must be provided (default: True).
        enum: Optional list of allowed string values.

    Example:
        >>> param = ToolParameter(
        ...     name="units",
        ...     param_type=str,
        ...     description="Temperature units",
        ...     required=False,
        ...     enum=["celsius", "fahrenheit"]
        ... )
    """

    name: str
    param_type: type
    description: str
    required: bool = True
    enum: Optional[List[str]] = None

    def to_schema(self) -> JsonSchema:
        schema: JsonSchema = {
            "type": _python_type_to_json(self.param_type),
            "description": self.description,
        }
        if self.enum:
            schema["enum"] = self.enum
        return schema


class Tool:
    """
    A caller-defined function the model may ask to invoke.

    The parameter definition is either a list of :class:`ToolParameter` or a
    ready-made JSON schema object. Handlers are synchronous and return a
    string (other return values are converted with ``str``). Raising from a
    handler is how a tool reports failure.

    Attributes:
        name: Unique identifier for the tool.
        description: What the tool does (shown to the model).
        function: The underlying Python callable.

    Example:
        >>> weather = Tool(
        ...     name="get_weather",
        ...     description="Get current weather for a city",
        ...     parameters={
        ...         "type": "object",
        ...         "properties": {"city": {"type": "string"}},
        ...         "required": ["city"],
        ...     },
        ...     function=lambda city: f"Sunny in {city}",
        ... )
    """

    def __init__(
        self,
        name: str,
        description: str,
        parameters: Union[List[ToolParameter], JsonSchema, None],
        function: Callable[..., Any],
    ):
        self.name = name
        self.description = description
        self.parameters = parameters if parameters is not None else []
        self.function = function

        self._validate_tool_definition()

    def _validate_tool_definition(self) -> None:
        if not self.name or not self.name.strip():
            raise ToolValidationError(
                tool_name="<unnamed>",
                param_name="name",
                issue="Tool name cannot be empty",
                suggestion="Provide a descriptive name for the tool",
            )

        if not self.description or not self.description.strip():
            raise ToolValidationError(
                tool_name=self.name,
                param_name="description",
                issue="Tool description cannot be empty",
                suggestion="Provide a clear description explaining what the tool does",
            )

        if not callable(self.function):
            raise ToolValidationError(
                tool_name=self.name,
                param_name="function",
                issue="Tool handler is not callable",
            )

        if isinstance(self.parameters, dict):
            if self.parameters.get("type", "object") != "object":
                raise ToolValidationError(
                    tool_name=self.name,
                    param_name="parameters",
                    issue="Parameter schema must describe an object",
                    suggestion='Use {"type": "object", "properties": {...}}',
                )
            return

        param_names = [p.name for p in self.parameters]
        duplicates = sorted({n for n in param_names if param_names.count(n) > 1})
        if duplicates:
            raise ToolValidationError(
                tool_name=self.name,
                param_name=", ".join(duplicates),
                issue="Duplicate parameter name(s)",
                suggestion="Each parameter must have a unique name",
            )

    def input_schema(self) -> JsonSchema:
        """Return the JSON schema for the tool's arguments."""
        if isinstance(self.parameters, dict):
            schema = dict(self.parameters)
            schema.setdefault("type", "object")
            schema.setdefault("properties", {})
            return schema
        return {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }

    def schema(self) -> JsonSchema:
        """Return a name/description/parameters description of this tool."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.input_schema(),
        }

    def run(self, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Invoke the handler with the model-supplied arguments."""
        result = self.function(**(arguments or {}))
        return result if isinstance(result, str) else str(result)

    def __repr__(self) -> str:
        return f"Tool(name={self.name!r})"


__all__ = ["Tool", "ToolParameter", "JsonSchema"]
