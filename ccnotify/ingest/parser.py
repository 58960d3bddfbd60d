"""
Transcript parser — read Claude Code JSONL transcripts and slice out the
current turn.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..core.errors import TranscriptError
from ..core.models import Message

logger = logging.getLogger(__name__)

# Skipped lines beyond this are only reported as a total
_MAX_SKIP_WARNINGS = 10

# Messages kept after the last user message for status analysis
RECENT_WINDOW = 15

# Fractional seconds followed by the UTC offset
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$)")


# ── Reading ───────────────────────────────────────────────────────────────────

def parse_transcript(path: Union[str, Path]) -> List[Message]:
    """
    Parse a transcript file into messages, in file order.

    Lines that are not valid JSON or not a user/assistant event are skipped.

    Raises:
        TranscriptError: the file cannot be opened or read.
    """
    path = Path(path).expanduser()
    messages: List[Message] = []
    skipped = 0

    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_no, raw_line in enumerate(f, 1):
                stripped = raw_line.strip()
                if not stripped:
                    continue
                try:
                    messages.append(Message.from_dict(json.loads(stripped)))
                except ValueError as e:
                    skipped += 1
                    if skipped <= _MAX_SKIP_WARNINGS:
                        logger.warning(f"Skipping invalid transcript line {line_no} in {path.name}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise TranscriptError(f"Failed to read transcript {path}: {e}") from e

    if skipped > _MAX_SKIP_WARNINGS:
        logger.warning(f"Skipped {skipped} invalid lines in transcript {path.name}")

    logger.debug(f"Parsed {len(messages)} messages from {path.name} ({skipped} skipped)")
    return messages


# ── Timestamps ────────────────────────────────────────────────────────────────

def _six_digit_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(ts: str) -> Optional[datetime]:
    """
    Parse an RFC3339 timestamp.

    Fractional seconds of any precision are accepted (cut to microseconds).
    Values without a UTC offset are not RFC3339 and return None.
    """
    if not ts or not isinstance(ts, str):
        return None
    value = ts.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    value = _FRACTION.sub(_six_digit_fraction, value, count=1)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def last_user_timestamp(messages: List[Message]) -> str:
    """Timestamp of the newest user message, or "" if there is none."""
    for msg in reversed(messages):
        if msg.is_user:
            return msg.timestamp
    return ""


def last_assistant_timestamp(messages: List[Message]) -> str:
    for msg in reversed(messages):
        if msg.is_assistant:
            return msg.timestamp
    return ""


# ── Filtering ─────────────────────────────────────────────────────────────────

def filter_after(messages: List[Message], timestamp: str) -> List[Message]:
    """
    Messages strictly newer than ``timestamp``.

    An empty or unparseable ``timestamp`` keeps everything. Messages whose
    own timestamp does not parse are dropped.
    """
    if not timestamp:
        return list(messages)

    since = parse_timestamp(timestamp)
    if since is None:
        return list(messages)

    kept = []
    for msg in messages:
        msg_time = parse_timestamp(msg.timestamp)
        if msg_time is not None and msg_time > since:
            kept.append(msg)
    return kept


def current_turn(messages: List[Message]) -> List[Message]:
    """Everything after the most recent user message."""
    return filter_after(messages, last_user_timestamp(messages))


def recent_window(messages: List[Message], limit: int = RECENT_WINDOW) -> List[Message]:
    if limit <= 0:
        return []
    return list(messages[-limit:])


def last_assistant_messages(messages: List[Message], limit: int) -> List[Message]:
    """Up to ``limit`` assistant messages, newest first."""
    found: List[Message] = []
    for msg in reversed(messages):
        if len(found) >= limit:
            break
        if msg.is_assistant:
            found.append(msg)
    return found


def message_texts(messages: List[Message]) -> List[str]:
    """One string per message (its text blocks joined by a space)."""
    return [msg.text() for msg in messages]


def recent_text(messages: List[Message], limit: int) -> str:
    """Joined text of the last ``limit`` messages."""
    return " ".join(message_texts(messages[-limit:] if limit > 0 else []))
