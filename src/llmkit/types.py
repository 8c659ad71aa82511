"""
Core request, response and conversation types.

These primitives are provider-agnostic and are reused across the wire
adapters, the dispatcher, the agent loop, and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .usage import Usage


class ProviderName(str, Enum):
    """Supported LLM vendors."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"
    GROK = "grok"


class Role(str, Enum):
    """Conversation role."""

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


DEFAULT_MODELS: Dict[ProviderName, str] = {
    ProviderName.ANTHROPIC: "claude-sonnet-4-5",
    ProviderName.OPENAI: "gpt-4o-2024-08-06",
    ProviderName.GOOGLE: "gemini-2.5-flash",
    ProviderName.GROK: "grok-3-fast",
}

DEFAULT_BASE_URLS: Dict[ProviderName, str] = {
    ProviderName.ANTHROPIC: "https://api.anthropic.com",
    ProviderName.OPENAI: "https://api.openai.com",
    ProviderName.GOOGLE: "https://generativelanguage.googleapis.com",
    ProviderName.GROK: "https://api.x.ai",
}


@dataclass(frozen=True)
class Provider:
    """
    Identifies which vendor to call and with which credentials.

    ``name`` accepts a :class:`ProviderName` or its string value. Unknown names
    are kept as-is so the dispatcher can reject them with a validation error
    instead of failing at construction time.

    Example:
        >>> p = Provider(name="anthropic", api_key="sk-ant-...")
        >>> p.resolved_model()
        'claude-sonnet-4-5'
    """

    name: Union[ProviderName, str]
    api_key: str
    model: Optional[str] = None
    base_url: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "name", ProviderName(self.name))
        except ValueError:
            pass

    @property
    def known(self) -> bool:
        return isinstance(self.name, ProviderName)

    @property
    def label(self) -> str:
        """Plain string name, used in error messages and logs."""
        return self.name.value if isinstance(self.name, ProviderName) else str(self.name)

    def resolved_model(self) -> str:
        """Return the configured model or the vendor default."""
        if self.model:
            return self.model
        return DEFAULT_MODELS.get(self.name, "")  # type: ignore[call-overload]

    def url(self, path: str) -> str:
        """Join the configured (or default) base URL with an endpoint path."""
        base = self.base_url or DEFAULT_BASE_URLS.get(self.name, "")  # type: ignore[call-overload]
        return base.rstrip("/") + path


@dataclass(frozen=True)
class File:
    """Reference to a file uploaded to a provider. Owned by the caller."""

    id: str = ""
    uri: str = ""
    mime_type: str = ""
    name: str = ""


@dataclass(frozen=True)
class Image:
    """
    Image input given either as a remote URL or as a ``data:`` URI.

    The adapters look at the ``data:`` prefix to decide between an inline
    base64 payload and a URL reference.
    """

    url: str
    mime_type: str = "image/png"
    detail: str = ""

    @property
    def is_inline(self) -> bool:
        return self.url.startswith("data:")

    def base64_data(self) -> str:
        """Return the payload after the comma of a data URI (or the raw value)."""
        head, sep, tail = self.url.partition(",")
        return tail if sep else head


@dataclass
class Message:
    """A single prior turn of a multi-turn request."""

    role: Union[Role, str]
    content: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            self.role = Role(self.role)


@dataclass
class Request:
    """
    Input for a single model call.

    Either ``user`` (single-turn) or ``messages`` (multi-turn) must be set.
    When both are present ``messages`` wins. Files and images are attached to
    the single-turn user content, or to the last user turn of ``messages``.
    ``schema`` is a JSON schema (string or dict) for structured output.
    """

    system: str = ""
    user: str = ""
    messages: List[Message] = field(default_factory=list)
    schema: Union[str, Dict[str, Any], None] = None
    files: List[File] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)


@dataclass(frozen=True)
class Response:
    """Final model output with the tokens it consumed."""

    text: str
    usage: Usage = field(default_factory=Usage)


# ---------------------------------------------------------------------------
# Conversation history content variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ToolCallContent:
    """A model-issued request to invoke a tool."""

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultContent:
    """Result of a tool call, linked to the call by ``tool_call_id``."""

    tool_call_id: str
    name: str
    result: str


@dataclass(frozen=True)
class FileContent:
    file: File


Content = Union[TextContent, ToolCallContent, ToolResultContent, FileContent]


@dataclass(frozen=True)
class HistoryEntry:
    """One turn of agent history. Entries are never edited once appended."""

    role: Role
    parts: Tuple[Content, ...]

    @classmethod
    def text(cls, role: Role, text: str) -> "HistoryEntry":
        return cls(role=role, parts=(TextContent(text),))

    @property
    def tool_calls(self) -> List[ToolCallContent]:
        return [p for p in self.parts if isinstance(p, ToolCallContent)]

    @property
    def tool_results(self) -> List[ToolResultContent]:
        return [p for p in self.parts if isinstance(p, ToolResultContent)]

    @property
    def content(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextContent))


@dataclass(frozen=True)
class ToolTurn:
    """What a tool-aware adapter returns for one model round trip."""

    text: str
    tool_calls: Tuple[ToolCallContent, ...] = ()
    usage: Usage = field(default_factory=Usage)


__all__ = [
    "ProviderName",
    "Role",
    "Provider",
    "File",
    "Image",
    "Message",
    "Request",
    "Response",
    "TextContent",
    "ToolCallContent",
    "ToolResultContent",
    "FileContent",
    "Content",
    "HistoryEntry",
    "ToolTurn",
    "DEFAULT_MODELS",
    "DEFAULT_BASE_URLS",
]
