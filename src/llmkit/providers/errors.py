"""
Map vendor error bodies onto :class:`APIError`.

Each vendor wraps the human message and type string differently; the
retryability rules are the same for all of them.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from ..exceptions import APIError
from ..types import ProviderName

RETRYABLE_STATUS_FLOOR = 500
RATE_LIMIT_STATUS = 429

# (type, message) extracted from a decoded error body.
Envelope = Tuple[str, str]


def _error_object(body: Any) -> Dict[str, Any]:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return {}


def _type_and_message(body: Any) -> Envelope:
    """``{"error": {"type": ..., "message": ...}}`` (Anthropic, OpenAI, Grok)."""
    error = _error_object(body)
    return str(error.get("type") or ""), str(error.get("message") or "")


def _status_and_message(body: Any) -> Envelope:
    """``{"error": {"code": ..., "message": ..., "status": ...}}`` (Google)."""
    error = _error_object(body)
    return str(error.get("status") or ""), str(error.get("message") or "")


ENVELOPES: Dict[ProviderName, Callable[[Any], Envelope]] = {
    ProviderName.ANTHROPIC: _type_and_message,
    ProviderName.OPENAI: _type_and_message,
    ProviderName.GROK: _type_and_message,
    ProviderName.GOOGLE: _status_and_message,
}


def is_retryable(status_code: int) -> bool:
    return status_code == RATE_LIMIT_STATUS or status_code >= RETRYABLE_STATUS_FLOOR


def extract_retry_after(headers: Optional[Mapping[str, str]]) -> int:
    """Return whole seconds from a numeric ``Retry-After`` header, else 0."""
    if not headers:
        return 0
    value = None
    for key, raw in headers.items():
        if key.lower() == "retry-after":
            value = raw
            break
    if value is None:
        return 0
    try:
        return max(int(str(value).strip()), 0)
    except ValueError:
        return 0


def parse_error(
    provider: Union[ProviderName, str],
    status_code: int,
    body: Union[str, bytes],
    headers: Optional[Mapping[str, str]] = None,
) -> APIError:
    """
    Build an APIError from a failed HTTP response.

    Args:
        provider: Provider that produced the response.
        status_code: HTTP status (>= 400).
        body: Raw response body.
        headers: Response headers, used for ``Retry-After``.

    Returns:
        APIError whose ``message`` is never empty: when the body cannot be
        decoded or carries no message, the raw body text is used.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else (body or "")
    label = provider.value if isinstance(provider, ProviderName) else str(provider)

    error_type, message = "", ""
    envelope = ENVELOPES.get(provider)  # type: ignore[call-overload]
    if envelope is not None:
        try:
            error_type, message = envelope(json.loads(text))
        except ValueError:
            pass

    if not message:
        message = text or f"HTTP {status_code}"

    return APIError(
        provider=label,
        status_code=status_code,
        message=message,
        type=error_type,
        retryable=is_retryable(status_code),
        retry_after=extract_retry_after(headers),
    )


__all__ = ["parse_error", "extract_retry_after", "is_retryable", "ENVELOPES"]
