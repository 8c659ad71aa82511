"""
One-shot dispatcher: validate, pick the wire adapter, call it.

Example:
    >>> from llmkit import Provider, Request, prompt
    >>> response = prompt(
    ...     Provider(name="anthropic", api_key="sk-ant-..."),
    ...     Request(system="Be terse.", user="What is 2+2?"),
    ... )
    >>> print(response.text)
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .capabilities import validate_options
from .exceptions import ValidationError
from .options import GenerationOptions, PromptConfig
from .providers import get_adapter
from .providers.base import Transport
from .types import File, Provider, Request, Response

logger = logging.getLogger(__name__)


def validate_provider(provider: Provider) -> None:
    if not provider.api_key:
        raise ValidationError("api_key", "required")


def validate_request(request: Request) -> None:
    if not request.user and not request.messages:
        raise ValidationError("user", "required")


def _transport(config: PromptConfig, cancel: Optional[threading.Event]) -> Transport:
    return Transport(session=config.get_session(), timeout=config.timeout, cancel=cancel)


def prompt(
    provider: Provider,
    request: Request,
    options: Optional[GenerationOptions] = None,
    *,
    config: Optional[PromptConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> Response:
    """
    Send one request to a provider and return its text and token usage.

    Validation happens before any network traffic, so a bad request or an
    unsupported option never costs a call.

    Args:
        provider: Vendor, credentials and optional model / base URL.
        request: System prompt, user text or messages, attachments, schema.
        options: Per-call generation options; fields set here override
            ``config.defaults``.
        config: Session, timeout, hooks and default options.
        cancel: Event that aborts the call when set.

    Returns:
        The model's text and token usage.

    Raises:
        ValidationError: Missing API key, empty request, unknown provider or
            unsupported option.
        APIError: The vendor returned an error status.
        CancelledError: ``cancel`` was set.
    """
    config = config or PromptConfig()

    if config.before_request is not None:
        config.before_request(request)

    validate_provider(provider)
    validate_request(request)
    adapter = get_adapter(provider.name)
    effective = config.defaults.merged(options)
    validate_options(adapter.name, effective)

    logger.debug("prompt: provider=%s model=%s", adapter.name.value, provider.resolved_model())
    response: Optional[Response] = None
    error: Optional[BaseException] = None
    try:
        response = adapter.send(provider, request, effective, _transport(config, cancel))
    except Exception as exc:
        error = exc
        raise
    finally:
        if config.after_response is not None:
            config.after_response(response, error)
    return response


def upload_file(
    provider: Provider,
    path: str,
    *,
    config: Optional[PromptConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> File:
    """
    Upload a local file so later requests can reference it.

    Raises:
        ValidationError: Missing API key, empty path or unknown provider.
        APIError: The vendor rejected the upload.
        OSError: The file could not be read.
    """
    config = config or PromptConfig()
    validate_provider(provider)
    if not path:
        raise ValidationError("path", "required")
    adapter = get_adapter(provider.name)

    logger.debug("upload: provider=%s path=%s", adapter.name.value, path)
    return adapter.upload(provider, path, _transport(config, cancel))


__all__ = ["prompt", "upload_file", "validate_provider", "validate_request"]
