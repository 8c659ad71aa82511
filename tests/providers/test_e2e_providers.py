"""
End-to-End tests using real provider APIs.

These tests require real API keys and make actual API calls.
They are skipped by default and must be run explicitly:

    pytest tests/providers/test_e2e_providers.py -v --run-e2e -k anthropic

Required environment variables:
    - ANTHROPIC_API_KEY, OPENAI_API_KEY, GOOGLE_API_KEY (or GEMINI_API_KEY), XAI_API_KEY
"""

from __future__ import annotations

import os

import pytest

from llmkit import Agent, Provider, Request, prompt, tool

KEYS = {
    "anthropic": ("ANTHROPIC_API_KEY",),
    "openai": ("OPENAI_API_KEY",),
    "google": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    "grok": ("XAI_API_KEY",),
}


def _provider(name: str) -> Provider:
    for var in KEYS[name]:
        key = os.getenv(var)
        if key:
            return Provider(name=name, api_key=key)
    pytest.skip(f"{' or '.join(KEYS[name])} not set")


@pytest.fixture
def add_tool():
    @tool(description="Add two integers and return the sum")
    def add(a: int, b: int) -> str:
        return str(a + b)

    return add


@pytest.mark.e2e
@pytest.mark.parametrize("name", sorted(KEYS))
def test_simple_prompt(name):
    response = prompt(_provider(name), Request(system="Answer with one word.", user="Capital of France?"))
    assert "paris" in response.text.lower()
    assert response.usage.input > 0


@pytest.mark.e2e
@pytest.mark.parametrize("name", sorted(KEYS))
def test_agent_tool_round_trip(name, add_tool):
    agent = Agent(_provider(name), tools=[add_tool])
    response = agent.chat("Use the add tool to compute 17 + 25, then tell me the result.")
    assert "42" in response.text
    assert len(agent.usage.rounds) >= 2
