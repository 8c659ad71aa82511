"""
Public exports for the agent package.
"""

from .config import AgentConfig
from .core import Agent, AgentState

__all__ = ["Agent", "AgentConfig", "AgentState"]
