"""
xAI Grok adapter.

Plain chat and tool calling reuse the OpenAI-compatible chat completions
format. Requests that carry uploaded files go to xAI's Responses API, which
is the endpoint that accepts ``file`` content parts.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Dict, List

from ..exceptions import ValidationError
from ..options import GenerationOptions
from ..types import Image, Provider, ProviderName, Request, Response
from ..usage import Usage
from .base import Transport, load_schema, request_turns, set_if
from .openai import OpenAIAdapter, response_format

logger = logging.getLogger(__name__)

RESPONSES_PATH = "/v1/responses"
RESPONSES_OPTIONS = ("temperature", "top_p", "max_tokens")


class GrokAdapter(OpenAIAdapter):
    """
    Adapter for xAI's Grok models.

    The Responses API accepts a narrower option set than chat completions:
    only ``temperature``, ``top_p`` and ``max_tokens`` (sent as
    ``max_output_tokens``) are forwarded on that path. Any other option set
    on a request with files raises :class:`ValidationError`.
    """

    name = ProviderName.GROK

    def _payload(self, provider: Provider, options: GenerationOptions) -> Dict[str, Any]:
        payload = super()._payload(provider, options)
        set_if(payload, "top_k", options.top_k)
        return payload

    def send(
        self,
        provider: Provider,
        request: Request,
        options: GenerationOptions,
        transport: Transport,
    ) -> Response:
        if not request.files:
            return super().send(provider, request, options, transport)

        _check_responses_options(options)
        logger.debug("grok: %d file(s) attached, using responses endpoint", len(request.files))
        payload: Dict[str, Any] = {
            "model": provider.resolved_model(),
            "input": _input_items(request),
        }
        set_if(payload, "temperature", options.temperature)
        set_if(payload, "top_p", options.top_p)
        set_if(payload, "max_output_tokens", options.max_tokens)
        schema = load_schema(request.schema)
        if schema is not None:
            payload["response_format"] = response_format(schema)

        data = self.post(provider.url(RESPONSES_PATH), payload, self.headers(provider), transport)
        return Response(text=_output_text(data), usage=_responses_usage(data))


def _check_responses_options(options: GenerationOptions) -> None:
    for f in fields(options):
        if f.name not in RESPONSES_OPTIONS and options.is_set(f.name):
            raise ValidationError(f.name, "not supported by grok when files are attached")


def _input_image(image: Image) -> Dict[str, Any]:
    return {"type": "input_image", "image_url": image.url, "detail": image.detail or "auto"}


def _input_items(request: Request) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    if request.system:
        items.append({"role": "system", "content": request.system})
    for role, text, attach in request_turns(request):
        if not attach:
            items.append({"role": role.value, "content": text})
            continue
        parts: List[Dict[str, Any]] = [{"type": "file", "file_id": f.id} for f in request.files]
        parts.extend(_input_image(img) for img in request.images)
        if text:
            parts.append({"type": "text", "text": text})
        items.append({"role": role.value, "content": parts})
    return items


def _output_text(data: Dict[str, Any]) -> str:
    """Join the text of every message item in ``output``."""
    texts: List[str] = []
    for item in data.get("output") or []:
        if item.get("type", "message") != "message":
            continue
        for part in item.get("content") or []:
            if part.get("type") in ("output_text", "text"):
                texts.append(part.get("text", ""))
    return "".join(texts)


def _responses_usage(data: Dict[str, Any]) -> Usage:
    usage = data.get("usage") or {}
    return Usage(input=usage.get("input_tokens", 0), output=usage.get("output_tokens", 0))


__all__ = ["GrokAdapter"]
