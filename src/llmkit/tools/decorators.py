"""
Decorator that turns a plain function into a Tool.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from .base import Tool, ToolParameter

ParamMetadata = Dict[str, Any]


def _unwrap_type(type_hint: Any) -> Any:
    """Unwrap Optional[T] to T."""
    origin = get_origin(type_hint)
    if origin is Union:
        non_none_args = [a for a in get_args(type_hint) if a is not type(None)]
        if len(non_none_args) == 1:
            return _unwrap_type(non_none_args[0])
    if origin in (list, dict):
        return origin
    return type_hint


def _infer_parameters_from_callable(
    func: Callable[..., Any], param_metadata: Optional[Dict[str, ParamMetadata]] = None
) -> List[ToolParameter]:
    """
    Inspect a function signature to create ToolParameter objects.

    Args:
        func: The function to inspect.
        param_metadata: Optional overrides for parameter descriptions/enums.
    """
    type_hints = get_type_hints(func)
    sig = inspect.signature(func)
    param_metadata = param_metadata or {}
    parameters = []

    for name, param in sig.parameters.items():
        if name in ("self", "cls"):
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        meta = param_metadata.get(name, {})
        parameters.append(
            ToolParameter(
                name=name,
                param_type=_unwrap_type(type_hints.get(name, str)),
                description=meta.get("description", f"Parameter {name}"),
                required=param.default is inspect.Parameter.empty,
                enum=meta.get("enum"),
            )
        )

    return parameters


def tool(
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    param_metadata: Optional[Dict[str, ParamMetadata]] = None,
) -> Callable[[Callable[..., Any]], Tool]:
    """
    Decorator to convert a function into a Tool.

    The name defaults to the function name, the description to its docstring,
    and the argument schema is built from the signature and type hints.

    Example:
        >>> @tool(description="Add two integers")
        ... def add(a: int, b: int) -> str:
        ...     return str(a + b)
        >>> add.input_schema()["required"]
        ['a', 'b']
    """

    def decorator(func: Callable[..., Any]) -> Tool:
        tool_name = name or func.__name__
        return Tool(
            name=tool_name,
            description=description or inspect.getdoc(func) or f"Tool {tool_name}",
            parameters=_infer_parameters_from_callable(func, param_metadata),
            function=func,
        )

    return decorator


__all__ = ["tool", "ParamMetadata"]
