"""Tool extraction and classification."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional

from ..core.models import Message, ToolUse

# State-changing tools
ACTIVE_TOOLS = frozenset({
    "Write",
    "Edit",
    "Bash",
    "NotebookEdit",
    "SlashCommand",
    "KillShell",
})

QUESTION_TOOLS = frozenset({"AskUserQuestion"})

PLANNING_TOOLS = frozenset({"ExitPlanMode", "TodoWrite"})

# Read-only tools
PASSIVE_TOOLS = frozenset({
    "Read",
    "Grep",
    "Glob",
    "WebFetch",
    "WebSearch",
    "Search",
    "Fetch",
    "Task",
})

TOOL_CATEGORIES = {
    "active": ACTIVE_TOOLS,
    "question": QUESTION_TOOLS,
    "planning": PLANNING_TOOLS,
    "passive": PASSIVE_TOOLS,
}

EXIT_PLAN_TOOL = "ExitPlanMode"
ASK_QUESTION_TOOL = "AskUserQuestion"
READ_LIKE_TOOLS = ("Read", "Grep", "Glob")


def categorize(name: str) -> Optional[str]:
    """Category name for a tool, or None for tools we do not know."""
    for category, names in TOOL_CATEGORIES.items():
        if name in names:
            return category
    return None


def extract_tools(messages: List[Message]) -> List[ToolUse]:
    """All tool_use blocks of assistant messages, in document order."""
    tools: List[ToolUse] = []
    for msg in messages:
        if not msg.is_assistant:
            continue
        for block in msg.tool_uses():
            tools.append(ToolUse(name=block.name, timestamp=msg.timestamp, input=block.input))
    return tools


def last_tool(tools: List[ToolUse]) -> Optional[str]:
    return tools[-1].name if tools else None


def find_tool_position(tools: List[ToolUse], name: str) -> int:
    """Index of the first ``name`` tool, -1 if absent."""
    for i, tool in enumerate(tools):
        if tool.name == name:
            return i
    return -1


def count_tools_after(tools: List[ToolUse], position: int) -> int:
    if position < 0:
        return 0
    return max(len(tools) - position - 1, 0)


def count_tools_by_names(tools: List[ToolUse], names: Iterable[str]) -> int:
    names = set(names)
    return sum(1 for tool in tools if tool.name in names)


def has_active_tool(tools: List[ToolUse]) -> bool:
    return any(tool.name in ACTIVE_TOOLS for tool in tools)


def count_by_name(tools: List[ToolUse]) -> Dict[str, int]:
    return dict(Counter(tool.name for tool in tools))
