"""
Provider-agnostic agent loop: send history, run requested tools, repeat.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..capabilities import validate_options
from ..client import prompt, validate_provider
from ..exceptions import MaxIterationsExceededError, ToolNotFoundError, ValidationError
from ..http import check_cancelled
from ..memory import FactMemory
from ..options import GenerationOptions
from ..providers import get_adapter
from ..providers.base import Transport
from ..tools import Tool
from ..types import (
    HistoryEntry,
    Message,
    Provider,
    Request,
    Response,
    Role,
    TextContent,
    ToolCallContent,
    ToolResultContent,
)
from ..usage import AgentUsage, Usage
from .config import AgentConfig

logger = logging.getLogger(__name__)

NOT_EXECUTED = "error: tool call not executed"


class AgentState(str, Enum):
    """Where the agent is in its conversation loop."""

    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    FAILED = "failed"


class Agent:
    """
    Multi-turn conversation with a model that may call registered tools.

    Each :meth:`chat` call appends the user's text to the history and loops:
    the full history, system prompt and tool definitions go to the model; if
    the model asks for tools they are executed and their results appended;
    the loop ends when the model answers with plain text or the iteration
    ceiling is reached.

    A tool handler that raises does not end the turn: its result becomes
    ``"error: <message>"`` and the model sees it on the next round. A tool
    name the agent does not know is fatal.

    One Agent serves one conversation and is not safe to share between
    threads.

    Attributes:
        provider: Vendor, credentials and model used for every round trip.
        config: Agent configuration.
        memory: Fact memory (in-process unless ``persist_to_disk`` is set).
        usage: Token usage of every round trip since construction.
        state: Current loop state.

    Example:
        >>> agent = Agent(Provider(name="openai", api_key="sk-..."), tools=[get_weather])
        >>> response = agent.chat("What's the weather in Paris?")
        >>> print(response.text, response.usage.total)
    """

    def __init__(
        self,
        provider: Provider,
        config: Optional[AgentConfig] = None,
        tools: Optional[Sequence[Tool]] = None,
    ):
        self.provider = provider
        self.config = config or AgentConfig()
        self.usage = AgentUsage()
        self.state = AgentState.IDLE
        self._system = self.config.system_prompt
        self._history: List[HistoryEntry] = []
        self._tools: Dict[str, Tool] = {}

        memory_path = self.config.memory_file if self.config.persist_to_disk else None
        self.memory = FactMemory(memory_path)

        for t in tools or ():
            self.add_tool(t)
        if self.config.expose_tools:
            for t in self.memory.tools():
                self.add_tool(t)

    # -- configuration -----------------------------------------------------

    def add_tool(self, tool: Tool) -> None:
        """
        Register a tool the model may call.

        Raises:
            ValidationError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise ValidationError("tool", f"duplicate name: {tool.name}")
        self._tools[tool.name] = tool

    @property
    def tools(self) -> List[Tool]:
        return list(self._tools.values())

    def set_system(self, system_prompt: str) -> None:
        self._system = system_prompt

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        """Every turn so far, oldest first. Read-only view."""
        return tuple(self._history)

    def reset(self) -> None:
        """Clear the conversation history. Tools, memory and usage stay."""
        self._history = []
        self.state = AgentState.IDLE

    # -- memory ------------------------------------------------------------

    def remember(self, key: str, value: str) -> None:
        self.memory.remember(key, value)

    def recall(self, key: str) -> Optional[str]:
        return self.memory.recall(key)

    def forget(self, key: str) -> None:
        self.memory.forget(key)

    def clear_memory(self) -> None:
        self.memory.clear()

    # -- conversation ------------------------------------------------------

    def chat(self, text: str, *, cancel: Optional[threading.Event] = None) -> Response:
        """
        Send one user message and run the tool loop until a final answer.

        Args:
            text: The user's message.
            cancel: Event that aborts the turn when set. It is checked before
                every model call and between tool executions.

        Returns:
            The final assistant text with usage summed over every round trip
            of this turn.

        Raises:
            ValidationError: Missing API key, unknown provider or unsupported
                option.
            APIError: A round trip failed at the vendor.
            ToolNotFoundError: The model asked for an unregistered tool.
            MaxIterationsExceededError: The model kept calling tools past
                ``config.max_tool_iterations``.
            CancelledError: ``cancel`` was set.

        History up to the point of failure is kept for inspection.
        """
        self._close_pending_calls()
        self._history.append(HistoryEntry.text(Role.USER, text))
        try:
            if not self._tools:
                response = self._prompt_turn(Request(system=self._system_prompt()), cancel)
            else:
                response = self._tool_loop(cancel)
        except Exception:
            self.state = AgentState.FAILED
            raise
        self.state = AgentState.DONE
        return response

    def chat_with_schema(
        self,
        text: str,
        schema: Union[str, Dict[str, Any]],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Response:
        """
        Send one user message and ask for output matching a JSON schema.

        Tools are not offered on this turn. The reply text is the JSON
        document produced by the model.
        """
        self._close_pending_calls()
        self._history.append(HistoryEntry.text(Role.USER, text))
        try:
            response = self._prompt_turn(Request(system=self._system_prompt(), schema=schema), cancel)
        except Exception:
            self.state = AgentState.FAILED
            raise
        self.state = AgentState.DONE
        return response

    # -- internals ---------------------------------------------------------

    def _close_pending_calls(self) -> None:
        """
        Answer tool calls a failed turn left without results.

        Vendors reject a conversation where a tool call is not followed by its
        result, so each unanswered call gets an error result appended before
        the next user message. Earlier entries are not touched.
        """
        for index in range(len(self._history) - 1, -1, -1):
            entry = self._history[index]
            if entry.role == Role.ASSISTANT and entry.tool_calls:
                break
        else:
            return
        answered = [r.tool_call_id for e in self._history[index + 1 :] for r in e.tool_results]
        for call in entry.tool_calls:
            if call.id in answered:
                answered.remove(call.id)
                continue
            logger.debug("closing unanswered tool call %s (id=%s)", call.name, call.id)
            self._history.append(
                HistoryEntry(
                    role=Role.TOOL,
                    parts=(ToolResultContent(tool_call_id=call.id, name=call.name, result=NOT_EXECUTED),),
                )
            )

    def _system_prompt(self) -> str:
        if self.config.include_context:
            return self.memory.with_context(self._system)
        return self._system

    def _options(self) -> GenerationOptions:
        return self.config.prompt_config.defaults.merged(self.config.model_options)

    def _prompt_turn(self, request: Request, cancel: Optional[threading.Event]) -> Response:
        self.state = AgentState.AWAITING_MODEL
        request.messages = [
            Message(role=entry.role, content=entry.content)
            for entry in self._history
            if entry.role in (Role.USER, Role.ASSISTANT) and entry.content
        ]
        response = prompt(
            self.provider,
            request,
            self.config.model_options,
            config=self.config.prompt_config,
            cancel=cancel,
        )
        self.usage.add(response.usage)
        self._history.append(HistoryEntry.text(Role.ASSISTANT, response.text))
        return response

    def _tool_loop(self, cancel: Optional[threading.Event]) -> Response:
        validate_provider(self.provider)
        adapter = get_adapter(self.provider.name)
        options = self._options()
        validate_options(adapter.name, options)

        prompt_config = self.config.prompt_config
        transport = Transport(
            session=prompt_config.get_session(),
            timeout=prompt_config.timeout,
            cancel=cancel,
        )
        max_iterations = self.config.effective_max_iterations
        turn_usage = Usage()
        iteration = 0

        while True:
            if iteration >= max_iterations:
                raise MaxIterationsExceededError(max_iterations)
            iteration += 1
            check_cancelled(cancel)

            self.state = AgentState.AWAITING_MODEL
            logger.debug("agent iteration %d/%d (%s)", iteration, max_iterations, adapter.name.value)
            turn = adapter.send_with_tools(
                self.provider,
                self._history,
                self._system_prompt(),
                self.tools,
                options,
                transport,
            )
            self.usage.add(turn.usage)
            turn_usage = turn_usage + turn.usage

            if not turn.tool_calls:
                self._history.append(HistoryEntry.text(Role.ASSISTANT, turn.text))
                return Response(text=turn.text, usage=turn_usage)

            parts: List[Any] = [TextContent(turn.text)] if turn.text else []
            parts.extend(turn.tool_calls)
            self._history.append(HistoryEntry(role=Role.ASSISTANT, parts=tuple(parts)))

            self.state = AgentState.EXECUTING_TOOLS
            for call in turn.tool_calls:
                check_cancelled(cancel)
                result = self._execute(call)
                self._history.append(
                    HistoryEntry(
                        role=Role.TOOL,
                        parts=(ToolResultContent(tool_call_id=call.id, name=call.name, result=result),),
                    )
                )

    def _execute(self, call: ToolCallContent) -> str:
        tool = self._tools.get(call.name)
        if tool is None:
            raise ToolNotFoundError(call.name, self._tools)
        logger.debug("executing tool %s (id=%s)", call.name, call.id)
        try:
            return tool.run(call.arguments)
        except Exception as exc:
            logger.debug("tool %s failed: %s", call.name, exc)
            return f"error: {exc}"


__all__ = ["Agent", "AgentState"]
