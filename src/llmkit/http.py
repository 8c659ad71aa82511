"""
Thin HTTP helpers shared by the wire adapters.

All calls are synchronous and run on the caller's thread. The caller's
``requests.Session`` is used as-is.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests

from .exceptions import CancelledError

logger = logging.getLogger(__name__)

MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".json": "application/json",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


@dataclass(frozen=True)
class HTTPResult:
    """Raw outcome of a POST: status, body text and response headers."""

    status_code: int
    text: str
    headers: Mapping[str, str]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def detect_mime_type(path: str) -> str:
    """Return a MIME type based on the file extension."""
    return MIME_TYPES.get(Path(path).suffix.lower(), "application/octet-stream")


def check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise CancelledError("operation cancelled")


def post_json(
    session: requests.Session,
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    *,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> HTTPResult:
    """
    POST a JSON body and return the raw result without interpreting status.

    Raises:
        CancelledError: If ``cancel`` is set before the request is sent or
            after the response arrives.
        requests.RequestException: On transport failure.
    """
    check_cancelled(cancel)
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})

    response = session.post(url, json=payload, headers=request_headers, timeout=timeout)
    logger.debug("POST %s -> %s", url, response.status_code)
    check_cancelled(cancel)
    return HTTPResult(
        status_code=response.status_code,
        text=response.text,
        headers=dict(response.headers or {}),
    )


def post_multipart(
    session: requests.Session,
    url: str,
    *,
    field_name: str,
    filename: str,
    data: bytes,
    fields: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> HTTPResult:
    """POST a multipart form with one file part and optional text fields."""
    check_cancelled(cancel)
    files = {field_name: (filename, data, detect_mime_type(filename))}
    response = session.post(
        url,
        data=fields or {},
        files=files,
        headers=headers or {},
        timeout=timeout,
    )
    logger.debug("POST (multipart) %s -> %s", url, response.status_code)
    check_cancelled(cancel)
    return HTTPResult(
        status_code=response.status_code,
        text=response.text,
        headers=dict(response.headers or {}),
    )


__all__ = [
    "HTTPResult",
    "MIME_TYPES",
    "detect_mime_type",
    "check_cancelled",
    "post_json",
    "post_multipart",
]
