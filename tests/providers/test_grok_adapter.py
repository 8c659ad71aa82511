"""
Wire-format tests for the Grok adapter. HTTP is a MagicMock session.
"""

import pytest

from llmkit import GenerationOptions, Tool, ValidationError
from llmkit.providers.base import Transport
from llmkit.providers.grok import RESPONSES_PATH, GrokAdapter
from llmkit.types import File, HistoryEntry, Image, Provider, Request, Role
from llmkit.usage import Usage

PROVIDER = Provider(name="grok", api_key="xai-test")


def _sent(session):
    call = session.post.call_args
    return call.args[0], call.kwargs["json"], call.kwargs["headers"]


@pytest.fixture
def adapter():
    return GrokAdapter()


class TestResponsesEndpoint:
    def test_files_use_responses_api(self, adapter, make_session):
        session = make_session(
            {
                "output": [{"type": "message", "content": [{"type": "output_text", "text": "PDF summary"}]}],
                "usage": {"input_tokens": 100, "output_tokens": 50},
            }
        )
        response = adapter.send(
            PROVIDER,
            Request(system="Summarize", user="What is in this file?", files=[File(id="file-123")]),
            GenerationOptions(temperature=0.2, max_tokens=200),
            Transport(session=session),
        )

        assert response.text == "PDF summary"
        assert response.usage == Usage(input=100, output=50)

        url, payload, headers = _sent(session)
        assert url == "https://api.x.ai" + RESPONSES_PATH
        assert headers["Authorization"] == "Bearer xai-test"
        assert payload["model"] == "grok-3-fast"
        assert payload["temperature"] == 0.2
        assert payload["max_output_tokens"] == 200
        assert "max_tokens" not in payload
        assert payload["input"] == [
            {"role": "system", "content": "Summarize"},
            {
                "role": "user",
                "content": [
                    {"type": "file", "file_id": "file-123"},
                    {"type": "text", "text": "What is in this file?"},
                ],
            },
        ]

    def test_schema_on_responses_path(self, adapter, make_session):
        session = make_session({"output": []})
        request = Request(user="x", files=[File(id="f")], schema='{"type": "object"}')
        response = adapter.send(PROVIDER, request, GenerationOptions(), Transport(session=session))
        _, payload, _ = _sent(session)
        assert payload["response_format"]["json_schema"]["schema"] == {"type": "object"}
        assert response.text == ""

    def test_images_use_input_image_parts(self, adapter, make_session):
        session = make_session({"output": []})
        request = Request(
            user="Compare",
            files=[File(id="f")],
            images=[Image(url="https://example.com/cat.png")],
        )
        adapter.send(PROVIDER, request, GenerationOptions(), Transport(session=session))
        _, payload, _ = _sent(session)
        assert payload["input"][0]["content"] == [
            {"type": "file", "file_id": "f"},
            {"type": "input_image", "image_url": "https://example.com/cat.png", "detail": "auto"},
            {"type": "text", "text": "Compare"},
        ]

    @pytest.mark.parametrize(
        "options, field",
        [
            (GenerationOptions(top_k=5), "top_k"),
            (GenerationOptions(seed=7), "seed"),
            (GenerationOptions(stop_sequences=["END"]), "stop_sequences"),
            (GenerationOptions(frequency_penalty=0.5), "frequency_penalty"),
            (GenerationOptions(presence_penalty=0.5), "presence_penalty"),
            (GenerationOptions(reasoning_effort="low"), "reasoning_effort"),
        ],
    )
    def test_options_not_forwarded_are_rejected(self, adapter, make_session, options, field):
        session = make_session({"output": []})
        with pytest.raises(ValidationError) as exc_info:
            adapter.send(PROVIDER, Request(user="x", files=[File(id="f")]), options, Transport(session=session))
        assert exc_info.value.field == field
        session.post.assert_not_called()


class TestChatCompletionsEndpoint:
    def test_text_only_uses_chat_completions(self, adapter, make_session):
        session = make_session(
            {
                "choices": [{"message": {"content": "Hello!"}}],
                "usage": {"prompt_tokens": 5, "completion_tokens": 2},
            }
        )
        response = adapter.send(
            PROVIDER,
            Request(user="Hi"),
            GenerationOptions(top_k=20, presence_penalty=0.3),
            Transport(session=session),
        )
        assert response.text == "Hello!"
        assert response.usage == Usage(input=5, output=2)

        url, payload, _ = _sent(session)
        assert url == "https://api.x.ai/v1/chat/completions"
        assert payload["messages"] == [{"role": "user", "content": "Hi"}]
        assert payload["presence_penalty"] == 0.3
        assert payload["top_k"] == 20

    def test_tools_use_chat_completions(self, adapter, make_session):
        session = make_session(
            {
                "choices": [
                    {
                        "message": {
                            "content": "",
                            "tool_calls": [
                                {"id": "c1", "type": "function", "function": {"name": "ping", "arguments": "{}"}}
                            ],
                        }
                    }
                ]
            }
        )
        ping = Tool(name="ping", description="Ping", parameters=[], function=lambda: "pong")
        turn = adapter.send_with_tools(
            PROVIDER,
            [HistoryEntry.text(Role.USER, "ping it")],
            "",
            [ping],
            GenerationOptions(),
            Transport(session=session),
        )
        url, payload, _ = _sent(session)
        assert url == "https://api.x.ai/v1/chat/completions"
        assert payload["tools"][0]["function"]["name"] == "ping"
        assert turn.tool_calls[0].name == "ping"
