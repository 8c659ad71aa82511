"""
Generation options and dispatcher configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Callable, List, Mapping, Optional

if TYPE_CHECKING:
    import requests

    from .types import Request, Response

BeforeRequestHook = Callable[["Request"], None]
AfterResponseHook = Callable[[Optional["Response"], Optional[BaseException]], None]


@dataclass(frozen=True)
class GenerationOptions:
    """
    Optional sampling and reasoning parameters for a model call.

    Every field defaults to ``None`` (or empty), meaning "not sent". Which
    fields a provider accepts is decided by ``capabilities.SUPPORT``.

    Attributes:
        temperature: Sampling temperature (0.0-2.0).
        top_p: Nucleus sampling threshold (0.0-1.0).
        top_k: Limit sampling to the K most likely tokens.
        max_tokens: Maximum tokens to generate.
        stop_sequences: Strings that halt generation.
        seed: Seed for deterministic generation.
        frequency_penalty: Penalize token repetition (-2.0 to 2.0).
        presence_penalty: Encourage topic diversity (-2.0 to 2.0).
        thinking_budget: Token budget for extended thinking.
        reasoning_effort: Reasoning intensity ("low", "medium", "high").
    """

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    max_tokens: Optional[int] = None
    stop_sequences: List[str] = field(default_factory=list)
    seed: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    thinking_budget: Optional[int] = None
    reasoning_effort: Optional[str] = None

    def is_set(self, name: str) -> bool:
        value = getattr(self, name)
        return value is not None and value != [] and value != ""

    def merged(self, overrides: Optional["GenerationOptions"]) -> "GenerationOptions":
        """Return a copy where every field set on ``overrides`` wins."""
        if overrides is None:
            return self
        changes = {f.name: getattr(overrides, f.name) for f in fields(overrides) if overrides.is_set(f.name)}
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationOptions":
        """
        Build defaults from ``LLMKIT_*`` environment variables.

        Values that do not parse are ignored. Nothing is read unless this is
        called explicitly.

        Example:
            >>> config = PromptConfig(defaults=GenerationOptions.from_env())
        """
        env = os.environ if environ is None else environ
        return cls(
            temperature=_parse(env, "LLMKIT_TEMPERATURE", float),
            top_p=_parse(env, "LLMKIT_TOP_P", float),
            top_k=_parse(env, "LLMKIT_TOP_K", int),
            max_tokens=_parse(env, "LLMKIT_MAX_TOKENS", int),
            seed=_parse(env, "LLMKIT_SEED", int),
            frequency_penalty=_parse(env, "LLMKIT_FREQUENCY_PENALTY", float),
            presence_penalty=_parse(env, "LLMKIT_PRESENCE_PENALTY", float),
            thinking_budget=_parse(env, "LLMKIT_THINKING_BUDGET", int),
            reasoning_effort=env.get("LLMKIT_REASONING_EFFORT") or None,
        )


def _parse(env: Mapping[str, str], key: str, kind: Callable[[str], object]):
    raw = env.get(key)
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError:
        return None


@dataclass
class PromptConfig:
    """
    Settings threaded through every dispatcher and agent call.

    Attributes:
        session: HTTP session used for all requests. Defaults to a fresh
            ``requests.Session``. Sharing one across threads follows the
            caller's own conventions; no locking is added.
        timeout: Optional per-request timeout in seconds, forwarded to
            ``requests``. None = no timeout.
        before_request: Hook called with the Request before validation. It
            may mutate the request or raise to abort.
        after_response: Hook called with ``(response, error)`` after the
            adapter returns. It observes only.
        defaults: Generation options applied under every per-call option.
    """

    session: Optional["requests.Session"] = None
    timeout: Optional[float] = None
    before_request: Optional[BeforeRequestHook] = None
    after_response: Optional[AfterResponseHook] = None
    defaults: GenerationOptions = field(default_factory=GenerationOptions)

    def get_session(self) -> "requests.Session":
        if self.session is None:
            import requests

            self.session = requests.Session()
        return self.session


__all__ = ["GenerationOptions", "PromptConfig", "BeforeRequestHook", "AfterResponseHook"]
