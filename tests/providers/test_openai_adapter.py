"""
Wire-format tests for the OpenAI adapter. HTTP is a MagicMock session.
"""

import json

import pytest

from llmkit import GenerationOptions, Tool, ValidationError
from llmkit.providers.base import Transport
from llmkit.providers.openai import OpenAIAdapter
from llmkit.types import (
    File,
    HistoryEntry,
    Image,
    Provider,
    Request,
    Role,
    TextContent,
    ToolCallContent,
    ToolResultContent,
)
from llmkit.usage import Usage

PROVIDER = Provider(name="openai", api_key="sk-test")

TEXT_REPLY = {
    "choices": [{"message": {"role": "assistant", "content": "Hi!"}}],
    "usage": {"prompt_tokens": 9, "completion_tokens": 3},
}


def _sent(session):
    call = session.post.call_args
    return call.args[0], call.kwargs["json"], call.kwargs["headers"]


@pytest.fixture
def adapter():
    return OpenAIAdapter()


@pytest.fixture
def lookup_tool():
    return Tool(
        name="lookup",
        description="Look something up",
        parameters={"type": "object", "properties": {"q": {"type": "string"}}, "required": ["q"]},
        function=lambda q: q.upper(),
    )


class TestSend:
    def test_basic_request(self, adapter, make_session):
        session = make_session(TEXT_REPLY)
        response = adapter.send(
            PROVIDER,
            Request(system="sys", user="Hello"),
            GenerationOptions(
                temperature=0.5,
                max_tokens=64,
                stop_sequences=["\n\n"],
                seed=42,
                frequency_penalty=0.1,
                presence_penalty=0.2,
                reasoning_effort="low",
            ),
            Transport(session=session, timeout=12),
        )
        assert response.text == "Hi!"
        assert response.usage == Usage(input=9, output=3)

        url, payload, headers = _sent(session)
        assert url == "https://api.openai.com/v1/chat/completions"
        assert headers["Authorization"] == "Bearer sk-test"
        assert session.post.call_args.kwargs["timeout"] == 12
        assert payload["model"] == "gpt-4o-2024-08-06"
        assert payload["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "Hello"},
        ]
        assert payload["temperature"] == 0.5
        assert payload["max_tokens"] == 64
        assert payload["stop"] == ["\n\n"]
        assert payload["seed"] == 42
        assert payload["frequency_penalty"] == 0.1
        assert payload["presence_penalty"] == 0.2
        assert payload["reasoning_effort"] == "low"

    def test_unset_options_not_sent(self, adapter, make_session):
        session = make_session(TEXT_REPLY)
        adapter.send(PROVIDER, Request(user="Hello"), GenerationOptions(), Transport(session=session))
        _, payload, _ = _sent(session)
        assert set(payload) == {"model", "messages"}

    def test_images_and_files(self, adapter, make_session):
        session = make_session(TEXT_REPLY)
        request = Request(
            user="Describe",
            files=[File(id="file-9")],
            images=[Image(url="data:image/png;base64,AAA"), Image(url="https://x/y.png", detail="high")],
        )
        adapter.send(PROVIDER, request, GenerationOptions(), Transport(session=session))
        _, payload, _ = _sent(session)
        content = payload["messages"][0]["content"]
        assert content == [
            {"type": "file", "file": {"file_id": "file-9"}},
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAA", "detail": "auto"}},
            {"type": "image_url", "image_url": {"url": "https://x/y.png", "detail": "high"}},
            {"type": "text", "text": "Describe"},
        ]

    def test_schema_as_dict(self, adapter, make_session):
        session = make_session(TEXT_REPLY)
        schema = {"type": "object", "properties": {"name": {"type": "string"}}}
        adapter.send(PROVIDER, Request(user="x", schema=schema), GenerationOptions(), Transport(session=session))
        _, payload, _ = _sent(session)
        assert payload["response_format"] == {
            "type": "json_schema",
            "json_schema": {"name": "response", "schema": schema, "strict": True},
        }

    def test_invalid_schema_rejected_before_send(self, adapter, make_session):
        session = make_session(TEXT_REPLY)
        with pytest.raises(ValidationError) as exc_info:
            adapter.send(PROVIDER, Request(user="x", schema="{not json"), GenerationOptions(), Transport(session=session))
        assert exc_info.value.field == "schema"
        session.post.assert_not_called()

    def test_null_content(self, adapter, make_session):
        session = make_session({"choices": [{"message": {"content": None}}]})
        response = adapter.send(PROVIDER, Request(user="x"), GenerationOptions(), Transport(session=session))
        assert response.text == ""
        assert response.usage == Usage()


class TestSendWithTools:
    def test_tool_calls_parsed(self, adapter, make_session, lookup_tool):
        session = make_session(
            {
                "choices": [
                    {
                        "message": {
                            "content": None,
                            "tool_calls": [
                                {
                                    "id": "call_1",
                                    "type": "function",
                                    "function": {"name": "lookup", "arguments": '{"q": "cats"}'},
                                },
                                {
                                    "id": "call_2",
                                    "type": "function",
                                    "function": {"name": "lookup", "arguments": "not-json"},
                                },
                            ],
                        }
                    }
                ],
                "usage": {"prompt_tokens": 20, "completion_tokens": 8},
            }
        )
        turn = adapter.send_with_tools(
            PROVIDER,
            [HistoryEntry.text(Role.USER, "find cats")],
            "",
            [lookup_tool],
            GenerationOptions(),
            Transport(session=session),
        )
        assert turn.text == ""
        assert turn.tool_calls == (
            ToolCallContent(id="call_1", name="lookup", arguments={"q": "cats"}),
            ToolCallContent(id="call_2", name="lookup", arguments={}),
        )

        _, payload, _ = _sent(session)
        assert payload["tools"] == [
            {
                "type": "function",
                "function": {
                    "name": "lookup",
                    "description": "Look something up",
                    "parameters": lookup_tool.input_schema(),
                },
            }
        ]

    def test_history_encoding(self, adapter, make_session, lookup_tool):
        session = make_session(TEXT_REPLY)
        history = [
            HistoryEntry.text(Role.USER, "find cats"),
            HistoryEntry(
                role=Role.ASSISTANT,
                parts=(TextContent("Searching"), ToolCallContent(id="c1", name="lookup", arguments={"q": "cats"})),
            ),
            HistoryEntry(role=Role.TOOL, parts=(ToolResultContent("c1", "lookup", "CATS"),)),
        ]
        adapter.send_with_tools(
            PROVIDER, history, "be nice", [lookup_tool], GenerationOptions(), Transport(session=session)
        )
        _, payload, _ = _sent(session)
        messages = payload["messages"]

        assert messages[0] == {"role": "system", "content": "be nice"}
        assert messages[1] == {"role": "user", "content": "find cats"}
        assert messages[2]["role"] == "assistant"
        assert messages[2]["content"] == "Searching"
        assert messages[2]["tool_calls"][0]["function"]["name"] == "lookup"
        assert json.loads(messages[2]["tool_calls"][0]["function"]["arguments"]) == {"q": "cats"}
        assert messages[3] == {"role": "tool", "tool_call_id": "c1", "content": "CATS"}


class TestUpload:
    def test_upload_sends_purpose(self, adapter, make_session, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n1,2\n")
        session = make_session({"id": "file-abc", "filename": "data.csv"})

        uploaded = adapter.upload(PROVIDER, str(path), Transport(session=session))

        assert uploaded == File(id="file-abc", mime_type="text/csv", name="data.csv")
        call = session.post.call_args
        assert call.args[0] == "https://api.openai.com/v1/files"
        assert call.kwargs["data"] == {"purpose": "assistants"}
