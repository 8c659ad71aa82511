"""
Wire adapter abstraction: one implementation per vendor.

An adapter translates the abstract :class:`Request` (or agent history) into a
vendor's JSON body and headers, performs the POST, and parses the vendor's
success or error body back into llmkit types.
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from ..exceptions import APIError, ValidationError
from ..http import HTTPResult, post_json, post_multipart
from ..options import GenerationOptions
from ..types import File, HistoryEntry, Provider, ProviderName, Request, Response, Role, ToolTurn
from .errors import parse_error

if TYPE_CHECKING:
    import requests

    from ..tools import Tool


@dataclass(frozen=True)
class Transport:
    """Per-call HTTP context: the caller's session, timeout and cancel event."""

    session: "requests.Session"
    timeout: Optional[float] = None
    cancel: Optional[threading.Event] = None


def load_schema(schema: Any) -> Optional[Dict[str, Any]]:
    """
    Decode a structured-output schema given as a JSON string or a dict.

    Raises:
        ValidationError: If a string schema is not valid JSON.
    """
    if schema is None or schema == "":
        return None
    if isinstance(schema, dict):
        return dict(schema)
    try:
        decoded = json.loads(schema)
    except ValueError as exc:
        raise ValidationError("schema", f"invalid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise ValidationError("schema", "must be a JSON object")
    return decoded


def request_turns(request: Request) -> List[Tuple[Role, str, bool]]:
    """
    Flatten a request into ``(role, text, carries_attachments)`` turns.

    Multi-turn messages win over single-turn text. Files and images ride on
    the last user turn.
    """
    if not request.messages:
        return [(Role.USER, request.user, True)]

    turns = [(Role(m.role), m.content, False) for m in request.messages]
    for index in range(len(turns) - 1, -1, -1):
        role, text, _ = turns[index]
        if role == Role.USER:
            turns[index] = (role, text, True)
            break
    return turns


def group_history(history: Sequence[HistoryEntry]) -> List[List[HistoryEntry]]:
    """
    Group history so consecutive tool-result entries travel together.

    Vendors that carry tool results inside a user turn expect every result for
    one assistant turn in a single message.
    """
    groups: List[List[HistoryEntry]] = []
    for entry in history:
        if entry.role == Role.TOOL and groups and groups[-1][0].role == Role.TOOL:
            groups[-1].append(entry)
        else:
            groups.append([entry])
    return groups


def set_if(target: Dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` only when ``value`` is meaningful (not None or empty)."""
    if value is None or value == [] or value == "":
        return
    target[key] = value


class WireAdapter(ABC):
    """
    Interface every vendor adapter implements.

    Attributes:
        name: The provider this adapter speaks to.
    """

    name: ProviderName

    @abstractmethod
    def send(
        self,
        provider: Provider,
        request: Request,
        options: GenerationOptions,
        transport: Transport,
    ) -> Response:
        """Perform a one-shot call and return the model's text and usage."""

    @abstractmethod
    def send_with_tools(
        self,
        provider: Provider,
        history: Sequence[HistoryEntry],
        system: str,
        tools: Sequence["Tool"],
        options: GenerationOptions,
        transport: Transport,
    ) -> ToolTurn:
        """Perform one agent round trip, surfacing any requested tool calls."""

    @abstractmethod
    def upload(self, provider: Provider, path: str, transport: Transport) -> File:
        """Upload a local file and return the provider's reference to it."""

    # -- shared plumbing ---------------------------------------------------

    def headers(self, provider: Provider) -> Dict[str, str]:
        """Auth and version headers for this vendor."""
        return {"Authorization": f"Bearer {provider.api_key}"}

    def post(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        transport: Transport,
    ) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded success body."""
        result = post_json(
            transport.session,
            url,
            payload,
            headers,
            timeout=transport.timeout,
            cancel=transport.cancel,
        )
        return self._decode(result)

    def post_file(
        self,
        url: str,
        path: str,
        headers: Dict[str, str],
        transport: Transport,
        fields: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Multipart-upload a local file and return the decoded success body."""
        file_path = Path(path)
        result = post_multipart(
            transport.session,
            url,
            field_name="file",
            filename=file_path.name,
            data=file_path.read_bytes(),
            fields=fields,
            headers=headers,
            timeout=transport.timeout,
            cancel=transport.cancel,
        )
        return self._decode(result)

    def _decode(self, result: HTTPResult) -> Dict[str, Any]:
        if not result.ok:
            raise parse_error(self.name, result.status_code, result.text, result.headers)
        try:
            data = json.loads(result.text)
        except ValueError:
            raise APIError(
                provider=self.name.value,
                status_code=result.status_code,
                message=f"invalid JSON response: {result.text[:200]}",
            ) from None
        if not isinstance(data, dict):
            raise APIError(
                provider=self.name.value,
                status_code=result.status_code,
                message="unexpected response shape",
            )
        return data


__all__ = [
    "WireAdapter",
    "Transport",
    "load_schema",
    "request_turns",
    "group_history",
    "set_if",
]
