"""Wire adapters for the supported LLM vendors."""

from typing import Dict, Union

from ..exceptions import ValidationError
from ..types import ProviderName
from .anthropic import AnthropicAdapter
from .base import Transport, WireAdapter
from .errors import extract_retry_after, is_retryable, parse_error
from .google import GoogleAdapter
from .grok import GrokAdapter
from .openai import OpenAIAdapter

ADAPTERS: Dict[ProviderName, WireAdapter] = {
    ProviderName.ANTHROPIC: AnthropicAdapter(),
    ProviderName.OPENAI: OpenAIAdapter(),
    ProviderName.GOOGLE: GoogleAdapter(),
    ProviderName.GROK: GrokAdapter(),
}


def get_adapter(name: Union[ProviderName, str]) -> WireAdapter:
    """Resolve the adapter for a provider name, rejecting unknown vendors."""
    try:
        return ADAPTERS[ProviderName(name)]
    except ValueError:
        raise ValidationError("provider", f"unknown: {name}") from None


__all__ = [
    "ADAPTERS",
    "get_adapter",
    "WireAdapter",
    "Transport",
    "AnthropicAdapter",
    "OpenAIAdapter",
    "GoogleAdapter",
    "GrokAdapter",
    "parse_error",
    "is_retryable",
    "extract_retry_after",
]
