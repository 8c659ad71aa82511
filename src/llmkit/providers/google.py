"""
Google Gemini adapter (``generateContent`` on the v1beta API).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

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

GENERATE_PATH = "/v1beta/models/{model}:generateContent"
UPLOAD_PATH = "/upload/v1beta/files"
JSON_MIME_TYPE = "application/json"


def strip_additional_properties(schema: Any) -> Any:
    """
    Return a copy of ``schema`` with every ``additionalProperties`` key removed.

    Gemini's schema dialect rejects the keyword at any depth.
    """
    if isinstance(schema, dict):
        return {
            key: strip_additional_properties(value)
            for key, value in schema.items()
            if key != "additionalProperties"
        }
    if isinstance(schema, list):
        return [strip_additional_properties(item) for item in schema]
    return schema


def _role(role: Role) -> str:
    return "model" if role == Role.ASSISTANT else "user"


class GoogleAdapter(WireAdapter):
    """
    Adapter for the Gemini API.

    Assistant turns use the ``model`` role, the system prompt is
    ``systemInstruction``, and generation options live under
    ``generationConfig`` in camelCase.
    """

    name = ProviderName.GOOGLE

    def headers(self, provider: Provider) -> Dict[str, str]:
        return {"x-goog-api-key": provider.api_key}

    def send(
        self,
        provider: Provider,
        request: Request,
        options: GenerationOptions,
        transport: Transport,
    ) -> Response:
        contents = []
        for role, text, attach in request_turns(request):
            parts = _attachment_parts(request) if attach else []
            if text:
                parts.append({"text": text})
            contents.append({"role": _role(role), "parts": parts})

        payload: Dict[str, Any] = {"contents": contents}
        if request.system:
            payload["systemInstruction"] = {"parts": [{"text": request.system}]}

        config = _generation_config(options)
        schema = load_schema(request.schema)
        if schema is not None:
            config["responseMimeType"] = JSON_MIME_TYPE
            config["responseSchema"] = strip_additional_properties(schema)
        set_if(payload, "generationConfig", config or None)

        data = self.post(self._generate_url(provider), payload, self.headers(provider), transport)
        text, _ = _parse_candidate(data)
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
        contents = [_content(group) for group in group_history(history)]
        payload: Dict[str, Any] = {"contents": [c for c in contents if c["parts"]]}
        if tools:
            payload["tools"] = [
                {
                    "functionDeclarations": [
                        {
                            "name": t.name,
                            "description": t.description,
                            "parameters": strip_additional_properties(t.input_schema()),
                        }
                        for t in tools
                    ]
                }
            ]
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        set_if(payload, "generationConfig", _generation_config(options) or None)

        data = self.post(self._generate_url(provider), payload, self.headers(provider), transport)
        text, calls = _parse_candidate(data)
        return ToolTurn(text=text, tool_calls=tuple(calls), usage=_usage(data))

    def upload(self, provider: Provider, path: str, transport: Transport) -> File:
        headers = self.headers(provider)
        headers["X-Goog-Upload-Protocol"] = "multipart"
        metadata = json.dumps({"file": {"display_name": Path(path).name}})
        data = self.post_file(
            provider.url(UPLOAD_PATH),
            path,
            headers,
            transport,
            fields={"metadata": metadata},
        )
        info = data.get("file") or {}
        return File(
            id=info.get("name", ""),
            uri=info.get("uri", ""),
            mime_type=info.get("mimeType", ""),
            name=info.get("displayName", ""),
        )

    def _generate_url(self, provider: Provider) -> str:
        return provider.url(GENERATE_PATH.format(model=provider.resolved_model()))


def _generation_config(options: GenerationOptions) -> Dict[str, Any]:
    config: Dict[str, Any] = {}
    set_if(config, "temperature", options.temperature)
    set_if(config, "topP", options.top_p)
    set_if(config, "topK", options.top_k)
    set_if(config, "maxOutputTokens", options.max_tokens)
    set_if(config, "stopSequences", list(options.stop_sequences))
    set_if(config, "seed", options.seed)
    thinking: Dict[str, Any] = {}
    set_if(thinking, "thinkingBudget", options.thinking_budget)
    set_if(thinking, "thinkingLevel", options.reasoning_effort)
    set_if(config, "thinkingConfig", thinking or None)
    return config


def _image_part(image: Image) -> Dict[str, Any]:
    if image.is_inline:
        return {"inline_data": {"mime_type": image.mime_type, "data": image.base64_data()}}
    return {"file_data": {"file_uri": image.url, "mime_type": image.mime_type}}


def _file_part(file: File) -> Dict[str, Any]:
    return {"file_data": {"file_uri": file.uri, "mime_type": file.mime_type}}


def _attachment_parts(request: Request) -> List[Dict[str, Any]]:
    parts = [_file_part(f) for f in request.files]
    parts.extend(_image_part(img) for img in request.images)
    return parts


def _function_response(result: ToolResultContent) -> Dict[str, Any]:
    response: Dict[str, Any] = {"name": result.name, "response": {"result": result.result}}
    if result.tool_call_id and result.tool_call_id != result.name:
        response["id"] = result.tool_call_id
    return {"functionResponse": response}


def _content(group: List[HistoryEntry]) -> Dict[str, Any]:
    parts: List[Dict[str, Any]] = []
    for entry in group:
        for part in entry.parts:
            if isinstance(part, TextContent):
                if part.text:
                    parts.append({"text": part.text})
            elif isinstance(part, ToolCallContent):
                call: Dict[str, Any] = {"name": part.name, "args": part.arguments}
                if part.id and part.id != part.name:
                    call["id"] = part.id
                parts.append({"functionCall": call})
            elif isinstance(part, ToolResultContent):
                parts.append(_function_response(part))
            elif isinstance(part, FileContent):
                parts.append(_file_part(part.file))
    return {"role": _role(group[0].role), "parts": parts}


def _parse_candidate(data: Dict[str, Any]):
    candidates = data.get("candidates") or []
    if not candidates:
        return "", []
    texts: List[str] = []
    calls: List[ToolCallContent] = []
    for part in (candidates[0].get("content") or {}).get("parts") or []:
        # Thought summaries are not part of the answer.
        if part.get("thought"):
            continue
        if "text" in part:
            texts.append(part["text"])
        function_call: Optional[Dict[str, Any]] = part.get("functionCall")
        if function_call:
            name = function_call.get("name", "")
            calls.append(
                ToolCallContent(
                    id=function_call.get("id") or name,
                    name=name,
                    arguments=function_call.get("args") or {},
                )
            )
    return "".join(texts), calls


def _usage(data: Dict[str, Any]) -> Usage:
    meta = data.get("usageMetadata") or {}
    return Usage(
        input=meta.get("promptTokenCount", 0),
        output=meta.get("candidatesTokenCount", 0),
    )


__all__ = ["GoogleAdapter", "strip_additional_properties"]
