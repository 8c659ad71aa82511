"""
Hello Prompt: one request, any provider.

Prerequisites:
    pip install llmkit
    export ANTHROPIC_API_KEY=...   (or OPENAI_API_KEY / GOOGLE_API_KEY / XAI_API_KEY)

Run:
    python examples/01_hello_prompt.py anthropic
"""

import os
import sys

from llmkit import APIError, GenerationOptions, PromptConfig, Provider, Request, prompt

ENV_KEYS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "google": "GOOGLE_API_KEY",
    "grok": "XAI_API_KEY",
}


def main() -> None:
    name = sys.argv[1] if len(sys.argv) > 1 else "anthropic"
    provider = Provider(name=name, api_key=os.getenv(ENV_KEYS.get(name, ""), ""))
    config = PromptConfig(timeout=60, defaults=GenerationOptions.from_env())

    try:
        response = prompt(
            provider,
            Request(system="You are terse.", user="Name three prime numbers."),
            GenerationOptions(max_tokens=100),
            config=config,
        )
    except APIError as exc:
        hint = f" (retry in {exc.retry_after}s)" if exc.retryable and exc.retry_after else ""
        print(f"Request failed: {exc}{hint}")
        return

    print(f"Response: {response.text}")
    print(f"Tokens: {response.usage.input} in / {response.usage.output} out")


if __name__ == "__main__":
    main()
