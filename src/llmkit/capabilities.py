"""
Which generation options each provider accepts.

The table is checked before dispatch so an unsupported option fails fast with
a :class:`ValidationError` instead of a vendor 400.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict

from .exceptions import ValidationError
from .options import GenerationOptions
from .types import ProviderName


@dataclass(frozen=True)
class OptionSupport:
    """Per-provider support flags, one per ``GenerationOptions`` field."""

    temperature: bool = False
    top_p: bool = False
    top_k: bool = False
    max_tokens: bool = False
    stop_sequences: bool = False
    seed: bool = False
    frequency_penalty: bool = False
    presence_penalty: bool = False
    thinking_budget: bool = False
    reasoning_effort: bool = False


SUPPORT: Dict[ProviderName, OptionSupport] = {
    ProviderName.ANTHROPIC: OptionSupport(
        temperature=True,
        top_p=True,
        top_k=True,
        max_tokens=True,
        stop_sequences=True,
        thinking_budget=True,
    ),
    ProviderName.OPENAI: OptionSupport(
        temperature=True,
        top_p=True,
        max_tokens=True,
        stop_sequences=True,
        seed=True,
        frequency_penalty=True,
        presence_penalty=True,
        reasoning_effort=True,
    ),
    ProviderName.GOOGLE: OptionSupport(
        temperature=True,
        top_p=True,
        top_k=True,
        max_tokens=True,
        stop_sequences=True,
        seed=True,
        thinking_budget=True,
        reasoning_effort=True,
    ),
    ProviderName.GROK: OptionSupport(
        temperature=True,
        top_p=True,
        top_k=True,
        max_tokens=True,
        stop_sequences=True,
        seed=True,
        frequency_penalty=True,
        presence_penalty=True,
    ),
}

# Value domains narrower than "any string", per provider.
REASONING_EFFORT_VALUES: Dict[ProviderName, frozenset] = {
    ProviderName.GOOGLE: frozenset({"low", "high"}),
}


def validate_options(provider: ProviderName, options: GenerationOptions) -> None:
    """
    Reject options the provider does not accept.

    Raises:
        ValidationError: naming the first unsupported field, or
            ``reasoning_effort`` when its value is outside the provider's
            allowed set.
    """
    support = SUPPORT.get(provider)
    if support is None:
        raise ValidationError("provider", f"unknown: {provider}")

    label = provider.value
    for flag in fields(support):
        if options.is_set(flag.name) and not getattr(support, flag.name):
            raise ValidationError(flag.name, f"not supported by {label}")

    allowed = REASONING_EFFORT_VALUES.get(provider)
    if allowed is not None and options.is_set("reasoning_effort"):
        if options.reasoning_effort not in allowed:
            choices = " and ".join(f"'{v}'" for v in sorted(allowed))
            raise ValidationError("reasoning_effort", f"{label} only supports {choices}")


__all__ = ["OptionSupport", "SUPPORT", "REASONING_EFFORT_VALUES", "validate_options"]
