"""
Anthropic Messages API adapter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Sequence

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
    ToolResultContent,
    ToolTurn,
)
from ..usage import Usage
from .base import Transport, WireAdapter, group_history, load_schema, request_turns, set_if

if TYPE_CHECKING:
    from ..tools import Tool

CHAT_PATH = "/v1/messages"
FILES_PATH = "/v1/files"
API_VERSION = "2023-06-01"
STRUCTURED_OUTPUTS_BETA = "structured-outputs-2025-11-13"
FILES_API_BETA = "files-api-2025-04-14"
DEFAULT_MAX_TOKENS = 4096


class AnthropicAdapter(WireAdapter):
    """
    Adapter for Anthropic's Messages API.

    The system prompt is a top-level ``system`` field, images and files are
    content blocks, and tool results travel back as ``tool_result`` blocks
    inside a user message, linked by ``tool_use_id``.
    """

    name = ProviderName.ANTHROPIC

    def headers(self, provider: Provider) -> Dict[str, str]:
        return {"x-api-key": provider.api_key, "anthropic-version": API_VERSION}

    def send(
        self,
        provider: Provider,
        request: Request,
        options: GenerationOptions,
        transport: Transport,
    ) -> Response:
        messages = []
        for role, text, attach in request_turns(request):
            blocks = _attachment_blocks(request) if attach else []
            if text:
                blocks.append({"type": "text", "text": text})
            messages.append({"role": role.value, "content": blocks})

        payload = self._payload(provider, options)
        set_if(payload, "system", request.system)
        payload["messages"] = messages

        headers = self.headers(provider)
        betas = []
        if request.files:
            betas.append(FILES_API_BETA)
        schema = load_schema(request.schema)
        if schema is not None:
            payload["output_format"] = {"type": "json_schema", "schema": schema}
            betas.append(STRUCTURED_OUTPUTS_BETA)
        if betas:
            headers["anthropic-beta"] = ",".join(betas)

        data = self.post(provider.url(CHAT_PATH), payload, headers, transport)
        text, _ = _parse_content(data)
        return Response(text=text, usage=_usage(data))

    def send_with_tools(
        self,
        provider: Provider,
        history: Sequence[HistoryEntry],
        system: str,
        tools: Sequence["Tool"],
        options: GenerationOptions,
        transport: Transport,
    ) -> ToolTurn:
        payload = self._payload(provider, options)
        set_if(payload, "system", system)
        # An empty assistant reply has no blocks and the API rejects empty content.
        messages = [_message(group) for group in group_history(history)]
        payload["messages"] = [m for m in messages if m["content"]]
        set_if(
            payload,
            "tools",
            [
                {"name": t.name, "description": t.description, "input_schema": t.input_schema()}
                for t in tools
            ],
        )

        data = self.post(provider.url(CHAT_PATH), payload, self.headers(provider), transport)
        text, calls = _parse_content(data)
        return ToolTurn(text=text, tool_calls=tuple(calls), usage=_usage(data))

    def upload(self, provider: Provider, path: str, transport: Transport) -> File:
        headers = self.headers(provider)
        headers["anthropic-beta"] = FILES_API_BETA
        data = self.post_file(provider.url(FILES_PATH), path, headers, transport)
        return File(
            id=data.get("id", ""),
            mime_type=data.get("mime_type", ""),
            name=data.get("filename", ""),
        )

    def _payload(self, provider: Provider, options: GenerationOptions) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": provider.resolved_model(),
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
        }
        set_if(payload, "temperature", options.temperature)
        set_if(payload, "top_p", options.top_p)
        set_if(payload, "top_k", options.top_k)
        set_if(payload, "stop_sequences", list(options.stop_sequences))
        if options.thinking_budget is not None:
            payload["thinking"] = {"type": "enabled", "budget_tokens": options.thinking_budget}
        return payload


def _image_block(image: Image) -> Dict[str, Any]:
    if image.is_inline:
        source = {"type": "base64", "media_type": image.mime_type, "data": image.base64_data()}
    else:
        source = {"type": "url", "url": image.url}
    return {"type": "image", "source": source}


def _file_block(file: File) -> Dict[str, Any]:
    return {"type": "document", "source": {"type": "file", "file_id": file.id}}


def _attachment_blocks(request: Request) -> List[Dict[str, Any]]:
    blocks = [_file_block(f) for f in request.files]
    blocks.extend(_image_block(img) for img in request.images)
    return blocks


def _message(group: List[HistoryEntry]) -> Dict[str, Any]:
    """Flatten one history group into an Anthropic message."""
    role = Role.USER if group[0].role == Role.TOOL else group[0].role
    blocks: List[Dict[str, Any]] = []
    for entry in group:
        for part in entry.parts:
            if isinstance(part, TextContent):
                if part.text:
                    blocks.append({"type": "text", "text": part.text})
            elif isinstance(part, ToolCallContent):
                blocks.append(
                    {"type": "tool_use", "id": part.id, "name": part.name, "input": part.arguments}
                )
            elif isinstance(part, ToolResultContent):
                blocks.append(
                    {"type": "tool_result", "tool_use_id": part.tool_call_id, "content": part.result}
                )
            elif isinstance(part, FileContent):
                blocks.append(_file_block(part.file))
    return {"role": role.value, "content": blocks}


def _parse_content(data: Dict[str, Any]):
    texts: List[str] = []
    calls: List[ToolCallContent] = []
    for block in data.get("content") or []:
        kind = block.get("type")
        if kind == "text":
            texts.append(block.get("text", ""))
        elif kind == "tool_use":
            calls.append(
                ToolCallContent(
                    id=block.get("id", ""),
                    name=block.get("name", ""),
                    arguments=block.get("input") or {},
                )
            )
    return "".join(texts), calls


def _usage(data: Dict[str, Any]) -> Usage:
    usage = data.get("usage") or {}
    return Usage(input=usage.get("input_tokens", 0), output=usage.get("output_tokens", 0))


__all__ = ["AnthropicAdapter"]
