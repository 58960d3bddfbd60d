"""Data models for ccnotify."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Status(str, Enum):
    """Outcome of one conversation turn. Exactly one per analysis."""

    TASK_COMPLETE = "TaskComplete"
    REVIEW_COMPLETE = "ReviewComplete"
    QUESTION = "Question"
    PLAN_READY = "PlanReady"
    SESSION_LIMIT_REACHED = "SessionLimitReached"
    API_ERROR = "APIError"
    UNKNOWN = "Unknown"


# ── Content blocks ────────────────────────────────────────────────────────────

@dataclass
class TextBlock:
    text: str


@dataclass
class ToolUseBlock:
    name: str
    input: Any = field(default_factory=dict)
    id: str = ""


@dataclass
class ToolResultBlock:
    tool_use_id: str
    content: str
    is_error: bool = False


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock]


def _block_from_dict(data: Dict[str, Any]) -> Optional[ContentBlock]:
    """Decode one content block. Returns None for block types we ignore."""
    block_type = data.get("type")

    if block_type == "text":
        text = data.get("text")
        if not isinstance(text, str):
            raise ValueError("text block without text")
        return TextBlock(text=text)

    if block_type == "tool_use":
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("tool_use block without name")
        return ToolUseBlock(
            name=name,
            input=data.get("input", {}),
            id=str(data.get("id") or ""),
        )

    if block_type == "tool_result":
        content = data.get("content", "")
        if isinstance(content, list):
            # Rich results come as a list of {"type": "text", "text": ...} parts
            content = "\n".join(
                part.get("text", "") for part in content
                if isinstance(part, dict) and isinstance(part.get("text"), str)
            )
        elif not isinstance(content, str):
            content = str(content)
        return ToolResultBlock(
            tool_use_id=str(data.get("tool_use_id") or ""),
            content=content,
            is_error=bool(data.get("is_error", False)),
        )

    # thinking, image, etc.
    return None


# ── Messages ──────────────────────────────────────────────────────────────────

@dataclass
class Message:
    """One user or assistant event from a transcript."""

    role: Role
    timestamp: str
    content: List[ContentBlock] = field(default_factory=list)
    parent_uuid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        """Build a Message from one decoded JSONL record.

        Raises ValueError when the record is not a user/assistant event with
        a string timestamp and a content list.
        """
        if not isinstance(data, dict):
            raise ValueError("record is not an object")

        try:
            role = Role(data.get("type"))
        except ValueError:
            raise ValueError(f"unsupported record type: {data.get('type')!r}") from None

        timestamp = data.get("timestamp")
        if not isinstance(timestamp, str):
            raise ValueError("record without timestamp")

        message = data.get("message")
        if not isinstance(message, dict):
            raise ValueError("record without message")

        raw_content = message.get("content")
        if isinstance(raw_content, str):
            raw_content = [{"type": "text", "text": raw_content}]
        if not isinstance(raw_content, list):
            raise ValueError("message content is not a list")

        content: List[ContentBlock] = []
        for item in raw_content:
            if not isinstance(item, dict):
                raise ValueError("content block is not an object")
            block = _block_from_dict(item)
            if block is not None:
                content.append(block)

        return cls(
            role=role,
            timestamp=timestamp,
            content=content,
            parent_uuid=data.get("parentUuid"),
        )

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER

    @property
    def is_assistant(self) -> bool:
        return self.role is Role.ASSISTANT

    def texts(self) -> List[str]:
        return [b.text for b in self.content if isinstance(b, TextBlock)]

    def text(self) -> str:
        """All text blocks of this message joined by a space."""
        return " ".join(self.texts())

    def tool_uses(self) -> List[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


@dataclass
class ToolUse:
    """A tool invocation flattened out of an assistant message."""

    name: str
    timestamp: str
    input: Any = field(default_factory=dict)


@dataclass
class Analysis:
    status: Status
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {"status": self.status.value, "summary": self.summary}
