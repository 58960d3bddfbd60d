"""
Status classifier — decide how the current turn ended.

Rules are evaluated top-down and the first match wins:

  global (last 3 assistant messages of the whole transcript)
    1. session limit text                      → SessionLimitReached
    2. "API Error: 401" and "/login" text      → APIError
  turn (messages after the last user message, last 15 of them)
    3. no messages or no tools                 → Unknown
    4. last tool is ExitPlanMode               → PlanReady
    5. last tool is AskUserQuestion            → Question
    6. ExitPlanMode followed by more tools     → TaskComplete
    7. read-like tools only and > 200 chars    → ReviewComplete
    8. last tool is an active tool             → TaskComplete
    9. any other tool usage                    → TaskComplete
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence, Tuple, Union

from ..core.models import Message, Status, ToolUse
from ..ingest.parser import (
    current_turn,
    last_assistant_messages,
    message_texts,
    parse_transcript,
    recent_text,
    recent_window,
)
from ..ingest.tools import (
    ACTIVE_TOOLS,
    ASK_QUESTION_TOOL,
    EXIT_PLAN_TOOL,
    READ_LIKE_TOOLS,
    count_tools_after,
    count_tools_by_names,
    extract_tools,
    find_tool_position,
    has_active_tool,
    last_tool,
)

logger = logging.getLogger(__name__)

INFRA_CHECK_MESSAGES = 3
REVIEW_TEXT_MESSAGES = 5
REVIEW_MIN_TEXT = 200

SESSION_LIMIT_PHRASES = ("session limit reached", "session limit has been reached")
API_ERROR_PHRASES = ("api error: 401", "api error 401")
LOGIN_PHRASES = ("please run /login", "run /login")


@dataclass
class TurnView:
    """The slice of the transcript the turn rules look at."""

    filtered: List[Message]
    window: List[Message]
    tools: List[ToolUse]

    @classmethod
    def from_messages(cls, messages: List[Message]) -> TurnView:
        filtered = current_turn(messages)
        window = recent_window(filtered)
        return cls(filtered=filtered, window=window, tools=extract_tools(window))


@dataclass(frozen=True)
class Rule:
    name: str
    status: Status
    predicate: Callable


# ── Global rules ──────────────────────────────────────────────────────────────

def _recent_assistant_texts(messages: List[Message]) -> List[str]:
    recent = last_assistant_messages(messages, INFRA_CHECK_MESSAGES)
    return [text.lower() for text in message_texts(recent)]


def _contains_any(texts: Sequence[str], phrases: Sequence[str]) -> bool:
    return any(phrase in text for text in texts for phrase in phrases)


def session_limit_reached(messages: List[Message]) -> bool:
    return _contains_any(_recent_assistant_texts(messages), SESSION_LIMIT_PHRASES)


def api_auth_error(messages: List[Message]) -> bool:
    # Both parts may come from different messages
    texts = _recent_assistant_texts(messages)
    return _contains_any(texts, API_ERROR_PHRASES) and _contains_any(texts, LOGIN_PHRASES)


GLOBAL_RULES: Tuple[Rule, ...] = (
    Rule("session_limit", Status.SESSION_LIMIT_REACHED, session_limit_reached),
    Rule("api_auth_error", Status.API_ERROR, api_auth_error),
)


# ── Turn rules ────────────────────────────────────────────────────────────────

def no_activity(view: TurnView) -> bool:
    return not view.filtered or not view.tools


def last_tool_is_exit_plan(view: TurnView) -> bool:
    return last_tool(view.tools) == EXIT_PLAN_TOOL


def last_tool_is_question(view: TurnView) -> bool:
    return last_tool(view.tools) == ASK_QUESTION_TOOL


def work_after_plan(view: TurnView) -> bool:
    position = find_tool_position(view.tools, EXIT_PLAN_TOOL)
    return position >= 0 and count_tools_after(view.tools, position) > 0


def looks_like_review(view: TurnView) -> bool:
    if count_tools_by_names(view.tools, READ_LIKE_TOOLS) < 1:
        return False
    if has_active_tool(view.tools):
        return False
    return len(recent_text(view.filtered, REVIEW_TEXT_MESSAGES)) > REVIEW_MIN_TEXT


def last_tool_is_active(view: TurnView) -> bool:
    return last_tool(view.tools) in ACTIVE_TOOLS


def any_tool_used(view: TurnView) -> bool:
    return bool(view.tools)


TURN_RULES: Tuple[Rule, ...] = (
    Rule("no_activity", Status.UNKNOWN, no_activity),
    Rule("plan_ready", Status.PLAN_READY, last_tool_is_exit_plan),
    Rule("question", Status.QUESTION, last_tool_is_question),
    Rule("work_after_plan", Status.TASK_COMPLETE, work_after_plan),
    Rule("review", Status.REVIEW_COMPLETE, looks_like_review),
    Rule("active_last", Status.TASK_COMPLETE, last_tool_is_active),
    Rule("any_tool", Status.TASK_COMPLETE, any_tool_used),
)


# ── Entry points ──────────────────────────────────────────────────────────────

def classify_messages(messages: List[Message]) -> Status:
    """Classify an already parsed transcript. Always returns a Status."""
    if not messages:
        return Status.UNKNOWN

    for rule in GLOBAL_RULES:
        if rule.predicate(messages):
            logger.debug(f"Rule '{rule.name}' matched → {rule.status.value}")
            return rule.status

    view = TurnView.from_messages(messages)
    logger.debug(
        f"Turn view: {len(view.filtered)} filtered, {len(view.window)} in window, "
        f"tools={[t.name for t in view.tools]}"
    )
    for rule in TURN_RULES:
        if rule.predicate(view):
            logger.debug(f"Rule '{rule.name}' matched → {rule.status.value}")
            return rule.status

    return Status.UNKNOWN


def classify(transcript_path: Union[str, Path]) -> Status:
    """
    Parse a transcript and classify its current turn.

    Raises:
        TranscriptError: the transcript cannot be read.
    """
    return classify_messages(parse_transcript(transcript_path))
