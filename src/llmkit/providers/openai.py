"""
OpenAI Chat Completions adapter.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from ..http import detect_mime_type
from ..options import GenerationOptions
from ..types import (
    File,
    FileContent,
    HistoryEntry,
    Image,
    Provider,
    ProviderName,
    Request,
    Response,
    Role,
    TextContent,
    ToolCallContent,
    ToolTurn,
)
from ..usage import Usage
from .base import Transport, WireAdapter, load_schema, request_turns, set_if

if TYPE_CHECKING:
    from ..tools import Tool

CHAT_PATH = "/v1/chat/completions"
FILES_PATH = "/v1/files"
UPLOAD_PURPOSE = "assistants"


class OpenAIAdapter(WireAdapter):
    """
    Adapter for OpenAI's Chat Completions API.

    The system prompt is the first message, structured output goes through
    ``response_format``, and tool results are messages with role ``tool``
    linked by ``tool_call_id``.
    """

    name = ProviderName.OPENAI
    chat_path = CHAT_PATH

    def send(
        self,
        provider: Provider,
        request: Request,
        options: GenerationOptions,
        transport: Transport,
    ) -> Response:
        messages: List[Dict[str, Any]] = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        for role, text, attach in request_turns(request):
            if attach and (request.files or request.images):
                messages.append({"role": role.value, "content": user_content(request, text)})
            else:
                messages.append({"role": role.value, "content": text})

        payload = self._payload(provider, options)
        payload["messages"] = messages
        schema = load_schema(request.schema)
        if schema is not None:
            payload["response_format"] = response_format(schema)

        data = self.post(provider.url(self.chat_path), payload, self.headers(provider), transport)
        text, _ = _parse_choice(data)
        return Response(text=text, usage=chat_usage(data))

    def send_with_tools(
        self,
        provider: Provider,
        history: Sequence[HistoryEntry],
        system: str,
        tools: Sequence["Tool"],
        options: GenerationOptions,
        transport: Transport,
    ) -> ToolTurn:
        messages: List[Dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        for entry in history:
            messages.extend(_messages(entry))

        payload = self._payload(provider, options)
        payload["messages"] = messages
        set_if(
            payload,
            "tools",
            [
                {
                    "type": "function",
                    "function": {
                        "name": t.name,
                        "description": t.description,
                        "parameters": t.input_schema(),
                    },
                }
                for t in tools
            ],
        )

        data = self.post(provider.url(self.chat_path), payload, self.headers(provider), transport)
        text, calls = _parse_choice(data)
        return ToolTurn(text=text, tool_calls=tuple(calls), usage=chat_usage(data))

    def upload(self, provider: Provider, path: str, transport: Transport) -> File:
        data = self.post_file(
            provider.url(FILES_PATH),
            path,
            self.headers(provider),
            transport,
            fields={"purpose": UPLOAD_PURPOSE},
        )
        return File(
            id=data.get("id", ""),
            mime_type=detect_mime_type(path),
            name=data.get("filename", ""),
        )

    def _payload(self, provider: Provider, options: GenerationOptions) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": provider.resolved_model()}
        set_if(payload, "temperature", options.temperature)
        set_if(payload, "top_p", options.top_p)
        set_if(payload, "max_tokens", options.max_tokens)
        set_if(payload, "stop", list(options.stop_sequences))
        set_if(payload, "seed", options.seed)
        set_if(payload, "frequency_penalty", options.frequency_penalty)
        set_if(payload, "presence_penalty", options.presence_penalty)
        set_if(payload, "reasoning_effort", options.reasoning_effort)
        return payload


def response_format(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": "response", "schema": schema, "strict": True},
    }


def image_part(image: Image) -> Dict[str, Any]:
    # Data URIs and remote URLs share the image_url field; OpenAI sniffs the prefix.
    return {"type": "image_url", "image_url": {"url": image.url, "detail": image.detail or "auto"}}


def file_part(file: File) -> Dict[str, Any]:
    return {"type": "file", "file": {"file_id": file.id}}


def user_content(request: Request, text: str) -> List[Dict[str, Any]]:
    """Content array for the turn that carries the request's attachments."""
    content = [file_part(f) for f in request.files]
    content.extend(image_part(img) for img in request.images)
    if text:
        content.append({"type": "text", "text": text})
    return content


def _messages(entry: HistoryEntry) -> List[Dict[str, Any]]:
    if entry.role == Role.TOOL:
        return [
            {"role": "tool", "tool_call_id": r.tool_call_id, "content": r.result}
            for r in entry.tool_results
        ]

    calls = entry.tool_calls
    if calls:
        return [
            {
                "role": "assistant",
                "content": entry.content or None,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": json.dumps(call.arguments)},
                    }
                    for call in calls
                ],
            }
        ]

    files = [p.file for p in entry.parts if isinstance(p, FileContent)]
    if files:
        content = [file_part(f) for f in files]
        content.extend({"type": "text", "text": p.text} for p in entry.parts if isinstance(p, TextContent))
        return [{"role": entry.role.value, "content": content}]
    return [{"role": entry.role.value, "content": entry.content}]


def _decode_arguments(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except ValueError:
        return {}
    return decoded if isinstance(decoded, dict) else {}


def _parse_choice(data: Dict[str, Any]):
    choices = data.get("choices") or []
    if not choices:
        return "", []
    message = choices[0].get("message") or {}
    calls = [
        ToolCallContent(
            id=tc.get("id", ""),
            name=(tc.get("function") or {}).get("name", ""),
            arguments=_decode_arguments((tc.get("function") or {}).get("arguments")),
        )
        for tc in message.get("tool_calls") or []
    ]
    return message.get("content") or "", calls


def chat_usage(data: Dict[str, Any]) -> Usage:
    usage = data.get("usage") or {}
    return Usage(input=usage.get("prompt_tokens", 0), output=usage.get("completion_tokens", 0))


__all__ = ["OpenAIAdapter", "response_format", "user_content", "image_part", "file_part", "chat_usage"]
