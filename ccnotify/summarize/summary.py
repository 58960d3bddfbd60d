"""
Summary generation — one short line describing how the turn ended.

Each status has its own generator. Every generator ends in a fixed
fallback phrase, so ``generate_summary`` never raises.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..core.errors import TranscriptError
from ..core.models import Message, Status
from ..ingest.parser import (
    current_turn,
    last_assistant_messages,
    last_assistant_timestamp,
    last_user_timestamp,
    parse_timestamp,
    parse_transcript,
    recent_window,
)
from ..ingest.tools import ASK_QUESTION_TOOL, EXIT_PLAN_TOOL, extract_tools
from .text import clean_markdown, extract_first_sentence, truncate_text

logger = logging.getLogger(__name__)

MAX_SUMMARY_LENGTH = 150
QUESTION_MAX_AGE_SECONDS = 60
QUESTION_SCAN_MESSAGES = 8
RECENT_ASSISTANT_MESSAGES = 5
MIN_QUESTION_LENGTH = 10

REVIEW_KEYWORDS = ("review", "analyzed", "analysis")

DEFAULT_MESSAGES: Dict[Status, str] = {
    Status.TASK_COMPLETE: "Task completed successfully",
    Status.REVIEW_COMPLETE: "Code review completed",
    Status.QUESTION: "Claude needs your input",
    Status.PLAN_READY: "Plan is ready",
    Status.SESSION_LIMIT_REACHED: "Session limit reached",
    Status.API_ERROR: "Please run /login",
    Status.UNKNOWN: "Claude Code notification",
}

SESSION_LIMIT_MESSAGE = "Session limit reached. Please start a new conversation."
API_ERROR_MESSAGE = "Please run /login"
QUESTION_FALLBACK = "Claude needs your input to continue"
PLAN_FALLBACK = "Plan is ready for review"
REVIEW_FALLBACK = "Code review completed"
TASK_FALLBACK = "Task completed successfully"


def default_message(status: Status) -> str:
    return DEFAULT_MESSAGES.get(status, DEFAULT_MESSAGES[Status.UNKNOWN])


def generate_summary(transcript_path: Union[str, Path], status: Status) -> str:
    """Summary for ``status`` built from the transcript. Never raises."""
    try:
        messages = parse_transcript(transcript_path)
    except TranscriptError as e:
        logger.warning(f"Using default summary: {e}")
        return default_message(status)

    if not messages:
        return default_message(status)

    return summarize_messages(messages, status)


def summarize_messages(messages: List[Message], status: Status) -> str:
    generator = _GENERATORS.get(status, summarize_task)
    summary = generator(messages)
    logger.debug(f"Summary for {status.value}: {summary!r}")
    return summary


# ── Question ──────────────────────────────────────────────────────────────────

def _seconds_between(earlier: str, later: str) -> Optional[int]:
    start = parse_timestamp(earlier)
    end = parse_timestamp(later)
    if start is None or end is None:
        return None
    return int((end - start).total_seconds())


def extract_ask_user_question(messages: List[Message]) -> Tuple[str, bool]:
    """
    Question text of the newest AskUserQuestion call.

    Returns (question, is_recent). ``is_recent`` is True when the call was
    made at most 60 seconds before the last assistant message.
    """
    question = ""
    asked_at = ""

    for msg in reversed(messages):
        if not msg.is_assistant:
            continue
        for block in msg.tool_uses():
            if block.name != ASK_QUESTION_TOOL or not isinstance(block.input, dict):
                continue
            questions = block.input.get("questions")
            if not isinstance(questions, list) or not questions:
                continue
            first = questions[0]
            if isinstance(first, dict) and isinstance(first.get("question"), str):
                question = first["question"]
                asked_at = msg.timestamp
                break
        if question:
            break

    if not question:
        return "", False

    age = _seconds_between(asked_at, last_assistant_timestamp(messages))
    return question, age is not None and 0 <= age <= QUESTION_MAX_AGE_SECONDS


def _current_assistant_messages(messages: List[Message], limit: int) -> List[Message]:
    """Assistant messages of the current turn, oldest first."""
    recent = [m for m in recent_window(current_turn(messages), limit) if m.is_assistant]
    if recent:
        return recent
    return list(reversed(last_assistant_messages(messages, limit)))


def summarize_question(messages: List[Message]) -> str:
    question, is_recent = extract_ask_user_question(messages)
    if question and is_recent:
        cleaned = clean_markdown(question)
        if cleaned:
            return truncate_text(cleaned, MAX_SUMMARY_LENGTH)

    texts = [
        text
        for msg in _current_assistant_messages(messages, QUESTION_SCAN_MESSAGES)
        for text in msg.texts()
    ]

    # Short texts with a question mark are usually the actual question
    asking = [t for t in texts if "?" in t]
    if asking:
        shortest = min(asking, key=len)
        if len(shortest) > MIN_QUESTION_LENGTH:
            return truncate_text(clean_markdown(shortest), MAX_SUMMARY_LENGTH)

    non_empty = [t for t in texts if t.strip()]
    if non_empty:
        sentence = extract_first_sentence(clean_markdown(non_empty[-1]))
        if len(sentence) > MIN_QUESTION_LENGTH:
            return truncate_text(sentence, MAX_SUMMARY_LENGTH)

    return QUESTION_FALLBACK


# ── Plan ──────────────────────────────────────────────────────────────────────

def extract_plan(messages: List[Message]) -> str:
    """Plan text of the newest ExitPlanMode call, "" if none."""
    for msg in reversed(messages):
        for block in msg.tool_uses():
            if block.name == EXIT_PLAN_TOOL and isinstance(block.input, dict):
                plan = block.input.get("plan")
                if isinstance(plan, str):
                    return plan
    return ""


def summarize_plan(messages: List[Message]) -> str:
    for line in extract_plan(messages).splitlines():
        cleaned = clean_markdown(line)
        if cleaned.strip():
            return truncate_text(cleaned, MAX_SUMMARY_LENGTH)
    return PLAN_FALLBACK


# ── Review ────────────────────────────────────────────────────────────────────

def summarize_review(messages: List[Message]) -> str:
    recent = last_assistant_messages(messages, RECENT_ASSISTANT_MESSAGES)
    texts = [m.text() for m in recent]

    for keyword in REVIEW_KEYWORDS:
        for text in texts:
            if keyword in text.lower():
                cleaned = clean_markdown(text)
                if cleaned:
                    return truncate_text(cleaned, MAX_SUMMARY_LENGTH)

    read_count = sum(1 for tool in extract_tools(recent) if tool.name == "Read")
    if read_count > 0:
        return f"Reviewed {read_count} {_plural(read_count, 'file')}"

    return REVIEW_FALLBACK


# ── Task ──────────────────────────────────────────────────────────────────────

def _plural(count: int, noun: str) -> str:
    return noun if count == 1 else f"{noun}s"


def format_duration(seconds: int) -> str:
    if seconds < 60:
        return f"Took {seconds}s"

    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"Took {minutes}m {secs}s" if secs else f"Took {minutes}m"

    hours, mins = divmod(minutes, 60)
    return f"Took {hours}h {mins}m" if mins else f"Took {hours}h"


def turn_duration(messages: List[Message]) -> str:
    """Time from the last user message to the last assistant message."""
    user_ts = last_user_timestamp(messages)
    assistant_ts = last_assistant_timestamp(messages)
    if not user_ts or not assistant_ts:
        return ""
    seconds = _seconds_between(user_ts, assistant_ts)
    if seconds is None or seconds < 0:
        return ""
    return format_duration(seconds)


def count_turn_tools(messages: List[Message]) -> Dict[str, int]:
    """Tool calls per name in assistant messages since the last user message."""
    since = parse_timestamp(last_user_timestamp(messages))
    counts: Counter = Counter()

    for msg in messages:
        if not msg.is_assistant:
            continue
        if since is not None:
            msg_time = parse_timestamp(msg.timestamp)
            if msg_time is not None and msg_time < since:
                continue
        counts.update(block.name for block in msg.tool_uses())

    return dict(counts)


def _join_period(text: str) -> str:
    """``text`` with a period appended unless it already ends in one (or "...")."""
    return text if text.endswith(".") else f"{text}."


def build_actions(tool_counts: Dict[str, int], duration: str) -> str:
    parts = []
    if tool_counts.get("Write"):
        count = tool_counts["Write"]
        parts.append(f"Created {count} {_plural(count, 'file')}")
    if tool_counts.get("Edit"):
        count = tool_counts["Edit"]
        parts.append(f"Edited {count} {_plural(count, 'file')}")
    if tool_counts.get("Bash"):
        count = tool_counts["Bash"]
        parts.append(f"Ran {count} {_plural(count, 'command')}")
    if duration:
        parts.append(duration)
    return ". ".join(parts)


def summarize_task(messages: List[Message]) -> str:
    recent = last_assistant_messages(messages, RECENT_ASSISTANT_MESSAGES)
    last_text = next((m.text() for m in recent if m.text().strip()), "")

    tool_counts = count_turn_tools(messages)
    actions = build_actions(tool_counts, turn_duration(messages))

    cleaned = clean_markdown(last_text) if last_text else ""
    if cleaned:
        if len(cleaned) >= MAX_SUMMARY_LENGTH:
            cleaned = extract_first_sentence(cleaned)
        if actions:
            return truncate_text(f"{_join_period(cleaned)} {actions}", MAX_SUMMARY_LENGTH)
        return truncate_text(cleaned, MAX_SUMMARY_LENGTH)

    if actions:
        return actions

    total = sum(tool_counts.values())
    if total > 0:
        return f"Completed task with {total} operations"

    return TASK_FALLBACK


_GENERATORS: Dict[Status, Callable[[List[Message]], str]] = {
    Status.QUESTION: summarize_question,
    Status.PLAN_READY: summarize_plan,
    Status.REVIEW_COMPLETE: summarize_review,
    Status.TASK_COMPLETE: summarize_task,
    Status.SESSION_LIMIT_REACHED: lambda _messages: SESSION_LIMIT_MESSAGE,
    Status.API_ERROR: lambda _messages: API_ERROR_MESSAGE,
    Status.UNKNOWN: summarize_task,
}
