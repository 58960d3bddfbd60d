"""Tests for ccnotify.ingest.tools — tool extraction and categories."""

import pytest

from ccnotify.core.models import Message, Role, TextBlock, ToolUse, ToolUseBlock
from ccnotify.ingest.tools import (
    ACTIVE_TOOLS,
    PASSIVE_TOOLS,
    PLANNING_TOOLS,
    QUESTION_TOOLS,
    categorize,
    count_by_name,
    count_tools_after,
    count_tools_by_names,
    extract_tools,
    find_tool_position,
    has_active_tool,
    last_tool,
)


def _tools(*names):
    return [ToolUse(name=n, timestamp="t") for n in names]


class TestCategories:
    def test_membership(self):
        assert "Write" in ACTIVE_TOOLS
        assert "Edit" in ACTIVE_TOOLS
        assert "AskUserQuestion" in QUESTION_TOOLS
        assert "ExitPlanMode" in PLANNING_TOOLS
        assert "Read" in PASSIVE_TOOLS

    def test_disjoint(self):
        sets = [ACTIVE_TOOLS, QUESTION_TOOLS, PLANNING_TOOLS, PASSIVE_TOOLS]
        for i, a in enumerate(sets):
            for b in sets[i + 1:]:
                assert not a & b

    @pytest.mark.parametrize("name,expected", [
        ("Bash", "active"),
        ("KillShell", "active"),
        ("AskUserQuestion", "question"),
        ("TodoWrite", "planning"),
        ("Grep", "passive"),
        ("Task", "passive"),
        ("mcp__github__create_issue", None),
    ])
    def test_categorize(self, name, expected):
        assert categorize(name) == expected


class TestExtractTools:
    def test_empty(self):
        assert extract_tools([]) == []

    def test_document_order_and_assistant_only(self):
        messages = [
            Message(Role.USER, "t0", [ToolUseBlock(name="Ignored")]),
            Message(Role.ASSISTANT, "t1", [
                TextBlock("reading"),
                ToolUseBlock(name="Read", input={"file_path": "a.py"}),
                ToolUseBlock(name="Grep"),
            ]),
            Message(Role.ASSISTANT, "t2", [ToolUseBlock(name="Edit")]),
        ]
        tools = extract_tools(messages)
        assert [t.name for t in tools] == ["Read", "Grep", "Edit"]
        assert [t.timestamp for t in tools] == ["t1", "t1", "t2"]
        assert tools[0].input == {"file_path": "a.py"}


class TestQueries:
    def test_last_tool(self):
        assert last_tool([]) is None
        assert last_tool(_tools("Read", "Edit")) == "Edit"

    def test_find_tool_position(self):
        tools = _tools("Read", "ExitPlanMode", "Edit", "ExitPlanMode")
        assert find_tool_position(tools, "ExitPlanMode") == 1
        assert find_tool_position(tools, "Bash") == -1

    def test_count_tools_after(self):
        tools = _tools("Read", "ExitPlanMode", "Edit", "Bash")
        assert count_tools_after(tools, 1) == 2
        assert count_tools_after(tools, 3) == 0
        assert count_tools_after(tools, -1) == 0

    def test_count_tools_by_names(self):
        tools = _tools("Read", "Read", "Glob", "Edit")
        assert count_tools_by_names(tools, ["Read", "Grep", "Glob"]) == 3

    def test_has_active_tool(self):
        assert has_active_tool(_tools("Read", "Bash"))
        assert not has_active_tool(_tools("Read", "TodoWrite"))

    def test_count_by_name(self):
        assert count_by_name(_tools("Edit", "Bash", "Edit")) == {"Edit": 2, "Bash": 1}
