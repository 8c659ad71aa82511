"""
Tools package exports.
"""

from .base import JsonSchema, Tool, ToolParameter
from .decorators import ParamMetadata, tool

__all__ = ["Tool", "ToolParameter", "JsonSchema", "tool", "ParamMetadata"]
