"""
Key-value fact memory for agents, optionally persisted to a JSON file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .tools import Tool, ToolParameter

logger = logging.getLogger(__name__)


class FactMemory:
    """
    Flat ``str -> str`` store of facts the agent keeps across conversations.

    When constructed with a ``path``, the existing JSON object at that path is
    loaded (a missing file means empty memory) and the whole map is rewritten
    after every mutation. Concurrent writers are not coordinated: the last
    write wins.

    Example:
        >>> memory = FactMemory("facts.json")
        >>> memory.remember("favorite_color", "green")
        >>> memory.recall("favorite_color")
        'green'
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._facts: Dict[str, str] = {}
        if self.path is not None:
            self._load()

    def remember(self, key: str, value: str) -> None:
        self._facts[key] = value
        self._save()

    def recall(self, key: str) -> Optional[str]:
        return self._facts.get(key)

    def forget(self, key: str) -> None:
        self._facts.pop(key, None)
        self._save()

    def clear(self) -> None:
        self._facts = {}
        self._save()

    def snapshot(self) -> Dict[str, str]:
        """Return a copy of every stored fact."""
        return dict(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    def __contains__(self, key: object) -> bool:
        return key in self._facts

    def context_block(self) -> str:
        """Render the facts as a ``<memory>`` block, or "" when empty."""
        if not self._facts:
            return ""
        lines = ["<memory>"]
        lines.extend(f"{key}: {value}" for key, value in self._facts.items())
        lines.append("</memory>")
        return "\n".join(lines)

    def with_context(self, system: str) -> str:
        """Prefix ``system`` with the memory block, joined by a blank line."""
        return "\n\n".join(part for part in (self.context_block(), system) if part)

    def tools(self) -> List[Tool]:
        """``remember_fact`` and ``recall_fact`` tools bound to this memory."""

        def remember_fact(key: str, value: str) -> str:
            self.remember(key, value)
            return f"I'll remember that {key}: {value}"

        def recall_fact(key: str) -> str:
            value = self.recall(key)
            if value is None:
                return f"I don't have any information stored about {key}"
            return value

        key_help = "What to remember (e.g., 'favorite_color', 'job_title', 'preference')"
        return [
            Tool(
                name="remember_fact",
                description="Store important information about the user for future conversations",
                parameters=[
                    ToolParameter(name="key", param_type=str, description=key_help),
                    ToolParameter(name="value", param_type=str, description="The information to remember"),
                ],
                function=remember_fact,
            ),
            Tool(
                name="recall_fact",
                description="Retrieve previously stored information about the user",
                parameters=[
                    ToolParameter(
                        name="key",
                        param_type=str,
                        description="What to recall (e.g., 'favorite_color', 'job_title', 'preference')",
                    ),
                ],
                function=recall_fact,
            ),
        ]

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"memory file {self.path} must contain a JSON object")
        self._facts = {str(k): str(v) for k, v in data.items()}
        logger.debug("loaded %d fact(s) from %s", len(self._facts), self.path)

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(json.dumps(self._facts), encoding="utf-8")


__all__ = ["FactMemory"]
