"""
Agent with tools and memory: the model calls Python functions and keeps facts
about the user in a JSON file between runs.

Prerequisites:
    pip install llmkit
    export OPENAI_API_KEY=...

Run:
    python examples/02_agent_with_memory.py
"""

import os

from llmkit import Agent, AgentConfig, Provider, tool


@tool(description="Look up the price of a product")
def get_price(product: str) -> str:
    prices = {"laptop": "$999", "phone": "$699", "headphones": "$149"}
    return prices.get(product.lower(), f"No price found for {product}")


@tool(description="Check if a product is in stock")
def check_stock(product: str) -> str:
    stock = {"laptop": "5 left", "phone": "Out of stock", "headphones": "20 left"}
    return stock.get(product.lower(), f"Unknown product: {product}")


def main() -> None:
    agent = Agent(
        Provider(name="openai", api_key=os.getenv("OPENAI_API_KEY", "")),
        config=AgentConfig(
            system_prompt="You are a shop assistant.",
            max_tool_iterations=5,
            include_context=True,
            expose_tools=True,
            persist_to_disk=True,
            memory_file="shop_memory.json",
        ),
        tools=[get_price, check_stock],
    )

    for question in ("I'm Sam and I prefer cheap gadgets.", "Is the phone in stock, and what does it cost?"):
        response = agent.chat(question)
        print(f"> {question}\n{response.text}\n")

    print(f"Remembered: {agent.memory.snapshot()}")
    print(f"Usage: {agent.usage.to_dict()}")


if __name__ == "__main__":
    main()
