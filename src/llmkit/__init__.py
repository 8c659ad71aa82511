"""Public exports for the llmkit package."""

from .agent import Agent, AgentConfig, AgentState
from .capabilities import SUPPORT, validate_options
from .client import prompt, upload_file
from .exceptions import (
    APIError,
    CancelledError,
    LLMKitError,
    MaxIterationsExceededError,
    ToolNotFoundError,
    ToolValidationError,
    ValidationError,
)
from .memory import FactMemory
from .options import GenerationOptions, PromptConfig
from .providers import parse_error
from .tools import Tool, ToolParameter, tool
from .types import (
    File,
    HistoryEntry,
    Image,
    Message,
    Provider,
    ProviderName,
    Request,
    Response,
    Role,
)
from .usage import AgentUsage, Usage

__version__ = "0.1.0"

__all__ = [
    "prompt",
    "upload_file",
    "Agent",
    "AgentConfig",
    "AgentState",
    "FactMemory",
    "Provider",
    "ProviderName",
    "Request",
    "Response",
    "Message",
    "Role",
    "File",
    "Image",
    "HistoryEntry",
    "Tool",
    "ToolParameter",
    "tool",
    "GenerationOptions",
    "PromptConfig",
    "SUPPORT",
    "validate_options",
    "parse_error",
    # Exceptions
    "LLMKitError",
    "ValidationError",
    "APIError",
    "ToolNotFoundError",
    "MaxIterationsExceededError",
    "CancelledError",
    "ToolValidationError",
    # Usage tracking
    "Usage",
    "AgentUsage",
]
