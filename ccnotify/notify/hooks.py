"""Hook input: the JSON Claude Code writes to a hook command's stdin."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..core.errors import InvalidInput, MissingField

logger = logging.getLogger(__name__)


class HookType(str, Enum):
    NOTIFICATION = "Notification"
    PRE_TOOL_USE = "PreToolUse"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    PERMISSION_REQUEST = "PermissionRequest"


# Hooks whose notification text comes from transcript analysis
ANALYZED_HOOKS = (HookType.STOP, HookType.SUBAGENT_STOP)


@dataclass
class HookInput:
    hook_type: HookType
    session_id: str
    transcript_path: Optional[str] = None
    # Remaining hook-specific fields (message, title, tool_name, reason, ...)
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        """String value of a hook-specific field, None when absent or empty."""
        value = self.data.get(key)
        if value is None or value == "":
            return None
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

    @property
    def is_analyzed(self) -> bool:
        return self.hook_type in ANALYZED_HOOKS


def parse_hook_input(raw: str) -> HookInput:
    """
    Parse hook JSON.

    Accepts the current format (``hook_event_name`` or ``hook_type``) and
    the legacy notification format ``{session_id, message, title}``.

    Raises:
        InvalidInput: empty input, bad JSON, or unknown hook type.
        MissingField: no session_id.
    """
    if not raw or not raw.strip():
        raise InvalidInput("Empty input received")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Invalid JSON input: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidInput("Hook input must be a JSON object")

    name = payload.get("hook_event_name") or payload.get("hook_type")
    if not name:
        if "message" not in payload:
            raise MissingField("hook_event_name")
        name = HookType.NOTIFICATION.value
        logger.debug("No hook type given, treating input as a legacy notification")

    try:
        hook_type = HookType(name)
    except ValueError:
        raise InvalidInput(f"Unknown hook type: {name}") from None

    session_id = payload.get("session_id")
    if not session_id or not isinstance(session_id, str):
        raise MissingField("session_id")

    transcript_path = payload.get("transcript_path") or None
    if transcript_path is not None and not isinstance(transcript_path, str):
        raise InvalidInput("transcript_path must be a string")

    data = {
        k: v for k, v in payload.items()
        if k not in ("hook_event_name", "hook_type", "session_id", "transcript_path")
    }
    return HookInput(
        hook_type=hook_type,
        session_id=session_id,
        transcript_path=transcript_path,
        data=data,
    )
