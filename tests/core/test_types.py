"""
Tests for the core request/response and history types.
"""

import pytest

from llmkit.types import (
    DEFAULT_MODELS,
    File,
    HistoryEntry,
    Image,
    Message,
    Provider,
    ProviderName,
    Request,
    Role,
    TextContent,
    ToolCallContent,
    ToolResultContent,
)
from llmkit.usage import AgentUsage, Usage

# =============================================================================
# Provider
# =============================================================================


class TestProvider:
    def test_string_name_is_coerced(self):
        provider = Provider(name="openai", api_key="sk")
        assert provider.name is ProviderName.OPENAI
        assert provider.known
        assert provider.label == "openai"

    def test_unknown_name_is_kept(self):
        provider = Provider(name="mistral", api_key="sk")
        assert provider.name == "mistral"
        assert not provider.known
        assert provider.label == "mistral"

    @pytest.mark.parametrize("name", list(ProviderName))
    def test_default_model(self, name):
        assert Provider(name=name, api_key="k").resolved_model() == DEFAULT_MODELS[name]

    def test_explicit_model_wins(self):
        assert Provider(name="grok", api_key="k", model="grok-4").resolved_model() == "grok-4"

    def test_url_uses_default_base(self):
        provider = Provider(name="anthropic", api_key="k")
        assert provider.url("/v1/messages") == "https://api.anthropic.com/v1/messages"

    def test_url_uses_custom_base_without_double_slash(self):
        provider = Provider(name="openai", api_key="k", base_url="http://localhost:8080/")
        assert provider.url("/v1/chat/completions") == "http://localhost:8080/v1/chat/completions"


# =============================================================================
# Inputs
# =============================================================================


class TestImage:
    def test_data_uri_is_inline(self):
        image = Image(url="data:image/png;base64,QUJD")
        assert image.is_inline
        assert image.base64_data() == "QUJD"

    def test_remote_url_is_not_inline(self):
        image = Image(url="https://example.com/cat.png")
        assert not image.is_inline


class TestMessage:
    def test_role_string_is_coerced(self):
        assert Message(role="assistant", content="hi").role is Role.ASSISTANT

    def test_invalid_role_rejected(self):
        with pytest.raises(ValueError):
            Message(role="system", content="nope")


class TestRequest:
    def test_defaults_are_independent(self):
        a, b = Request(user="a"), Request(user="b")
        a.files.append(File(id="f1"))
        assert b.files == []


# =============================================================================
# History
# =============================================================================


class TestHistoryEntry:
    def test_text_helper(self):
        entry = HistoryEntry.text(Role.USER, "hello")
        assert entry.parts == (TextContent("hello"),)
        assert entry.content == "hello"
        assert entry.tool_calls == []

    def test_tool_parts_are_split_out(self):
        call = ToolCallContent(id="c1", name="add", arguments={"a": 1})
        entry = HistoryEntry(role=Role.ASSISTANT, parts=(TextContent("thinking"), call))
        assert entry.tool_calls == [call]
        assert entry.content == "thinking"

    def test_tool_results(self):
        result = ToolResultContent(tool_call_id="c1", name="add", result="3")
        entry = HistoryEntry(role=Role.TOOL, parts=(result,))
        assert entry.tool_results == [result]
        assert entry.content == ""


# =============================================================================
# Usage
# =============================================================================


class TestUsage:
    def test_addition(self):
        total = Usage(input=10, output=5) + Usage(input=3, output=2)
        assert total == Usage(input=13, output=7)
        assert total.total == 20

    def test_agent_usage_sums_rounds(self):
        usage = AgentUsage()
        usage.add(Usage(input=10, output=1))
        usage.add(Usage(input=20, output=2))
        assert usage.total == Usage(input=30, output=3)
        assert usage.to_dict() == {
            "input_tokens": 30,
            "output_tokens": 3,
            "total_tokens": 33,
            "round_trips": 2,
        }
