"""
Configuration options for the agent.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..options import GenerationOptions, PromptConfig

DEFAULT_MAX_TOOL_ITERATIONS = 10


@dataclass
class AgentConfig:
    """
    Configuration options for customizing agent behavior.

    Attributes:
        model_options: Generation options sent with every model call, layered
            over ``prompt_config.defaults``. Default: none set.
        prompt_config: Session, timeout, hooks and default options shared
            with the one-shot dispatcher. Default: a fresh PromptConfig.
        system_prompt: System instructions for every round trip. Default: "".
        max_tool_iterations: Maximum model round trips per ``chat`` call.
            Values below 1 mean the default. Default: 10.
        include_context: Prefix the system prompt with a ``<memory>`` block of
            remembered facts. Default: False.
        expose_tools: Register the ``remember_fact`` and ``recall_fact`` tools
            so the model can manage memory itself. Default: False.
        persist_to_disk: Load memory from ``memory_file`` at construction and
            rewrite it after every change. Default: False.
        memory_file: JSON file used when ``persist_to_disk`` is set.
    """

    model_options: GenerationOptions = field(default_factory=GenerationOptions)
    prompt_config: PromptConfig = field(default_factory=PromptConfig)
    system_prompt: str = ""
    max_tool_iterations: int = DEFAULT_MAX_TOOL_ITERATIONS
    include_context: bool = False
    expose_tools: bool = False
    persist_to_disk: bool = False
    memory_file: Optional[str] = None

    @property
    def effective_max_iterations(self) -> int:
        if self.max_tool_iterations < 1:
            return DEFAULT_MAX_TOOL_ITERATIONS
        return self.max_tool_iterations
