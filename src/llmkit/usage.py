"""
Token usage tracking for LLM API calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Usage:
    """
    Token counts for a single API call.

    Every vendor names these fields differently (``input_tokens``,
    ``prompt_tokens``, ``promptTokenCount`` ...); adapters normalize them into
    this one shape.

    Attributes:
        input: Tokens consumed by the prompt.
        output: Tokens produced by the model.
    """

    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output

    def __add__(self, other: "Usage") -> "Usage":
        if not isinstance(other, Usage):
            return NotImplemented
        return Usage(input=self.input + other.input, output=self.output + other.output)


@dataclass
class AgentUsage:
    """
    Aggregates usage across every model round trip of an agent.

    Attributes:
        rounds: Usage of each individual round trip, in order.
    """

    rounds: List[Usage] = field(default_factory=list)

    def add(self, usage: Usage) -> None:
        self.rounds.append(usage)

    @property
    def total(self) -> Usage:
        return sum(self.rounds, Usage())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a dictionary for logging/display."""
        total = self.total
        return {
            "input_tokens": total.input,
            "output_tokens": total.output,
            "total_tokens": total.total,
            "round_trips": len(self.rounds),
        }


__all__ = ["Usage", "AgentUsage"]
