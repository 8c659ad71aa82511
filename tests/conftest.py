"""
Pytest configuration for llmkit tests.

This file configures pytest with custom markers and command-line options,
and provides a fake HTTP session so no test touches the network.
"""

import json
from unittest.mock import MagicMock

import pytest


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests with real API calls",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end (requires real API keys, use --run-e2e to run)"
    )
    config.addinivalue_line("markers", "openai: mark test as requiring OpenAI API key")
    config.addinivalue_line("markers", "anthropic: mark test as requiring Anthropic API key")
    config.addinivalue_line("markers", "google: mark test as requiring Google API key")
    config.addinivalue_line("markers", "grok: mark test as requiring xAI API key")


def pytest_collection_modifyitems(config, items):
    """Skip e2e tests unless --run-e2e is passed."""
    if config.getoption("--run-e2e"):
        return

    skip_e2e = pytest.mark.skip(reason="Need --run-e2e option to run end-to-end tests")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


def _mock_response(reply):
    """A reply is a JSON-able body (200) or a ``(status, body[, headers])`` tuple."""
    if isinstance(reply, tuple):
        status, body = reply[0], reply[1]
        headers = reply[2] if len(reply) > 2 else {}
    else:
        status, body, headers = 200, reply, {}
    response = MagicMock()
    response.status_code = status
    response.text = body if isinstance(body, str) else json.dumps(body)
    response.headers = headers
    return response


@pytest.fixture
def make_session():
    """
    Build a MagicMock ``requests.Session`` whose ``post`` returns queued replies.

    ``make_session(a, b)`` answers the first POST with ``a`` and the second
    with ``b``. ``make_session(a, repeat=True)`` answers every POST with ``a``.
    """

    def factory(*replies, repeat=False):
        session = MagicMock()
        if repeat:
            session.post.side_effect = lambda *args, **kwargs: _mock_response(replies[0])
        else:
            session.post.side_effect = [_mock_response(r) for r in replies]
        return session

    return factory
