"""Tests for ccnotify.notify.templates — context building and rendering."""

import json
from pathlib import Path

from ccnotify.core.config import Config
from ccnotify.core.models import Analysis, Status
from ccnotify.notify.hooks import parse_hook_input
from ccnotify.notify.templates import (
    TemplateEngine,
    analyze_hook,
    build_context,
    render_notification,
    render_string,
)


def _hook(**fields):
    return parse_hook_input(json.dumps(fields))


def _write_jsonl(path: Path, records: list) -> Path:
    with open(path, "w") as f:
        for r in records:
            f.write(json.dumps(r) + "\n")
    return path


def _plan_transcript(tmp_path):
    return _write_jsonl(tmp_path / "s.jsonl", [
        {
            "type": "user",
            "timestamp": "2025-01-01T10:00:00Z",
            "message": {"content": [{"type": "text", "text": "Plan the work"}]},
        },
        {
            "type": "assistant",
            "timestamp": "2025-01-01T10:00:30Z",
            "message": {"content": [{
                "type": "tool_use",
                "id": "t1",
                "name": "ExitPlanMode",
                "input": {"plan": "# Migrate the database\n1. Backup"},
            }]},
        },
    ])


class TestRenderString:
    def test_substitutes(self):
        assert render_string("{{a}} and {{ b }}", {"a": "x", "b": "y"}) == "x and y"

    def test_unknown_left_as_written(self):
        assert render_string("Hi {{name}}", {}) == "Hi {{name}}"

    def test_empty_template(self):
        assert render_string("", {"a": "x"}) == ""


class TestTemplateEngine:
    def test_lookup_order(self):
        engine = TemplateEngine({
            "default": {"title": "D", "body": "d"},
            "Stop": {"title": "S", "body": "s"},
            "PlanReady": {"title": "P", "body": "p"},
        })
        assert engine.get_template("PlanReady", "Stop").title == "P"
        assert engine.get_template(None, "Stop").title == "S"
        assert engine.get_template("Question", "Notification").title == "D"

    def test_builtin_fallback(self):
        template = TemplateEngine().get_template("Stop")
        assert (template.title, template.body) == ("{{title}}", "{{message}}")

    def test_missing_body_renders_empty(self):
        engine = TemplateEngine({"Stop": {"title": "Only title"}})
        rendered = engine.render(engine.get_template("Stop"), {})
        assert rendered.to_dict() == {"title": "Only title", "body": ""}


class TestBuildContext:
    def test_notification(self):
        ctx = build_context(_hook(
            hook_event_name="Notification",
            session_id="s",
            message="Waiting",
            notification_type="idle_prompt",
        ))
        assert ctx["message"] == "[idle_prompt] Waiting"
        assert ctx["title"] == "Claude Code"
        assert ctx["hook_type"] == "Notification"

    def test_pre_tool_use(self):
        ctx = build_context(_hook(hook_event_name="PreToolUse", session_id="s", tool_name="Bash"))
        assert ctx["message"] == "Bash"
        assert ctx["tool_name"] == "Bash"

    def test_stop_fallback_and_custom_title(self):
        ctx = build_context(_hook(hook_event_name="Stop", session_id="s"), default_title="Agent")
        assert ctx["message"] == "Claude stopped generating"
        assert ctx["title"] == "Agent"

    def test_subagent_stop(self):
        hook = _hook(hook_event_name="SubagentStop", session_id="s", subagent_id="a1", reason="done")
        assert build_context(hook)["message"] == "Subagent a1 stopped: done"

    def test_permission_request(self):
        hook = _hook(hook_event_name="PermissionRequest", session_id="s", tool_name="Write")
        assert build_context(hook)["message"] == "Claude requests permission to use Write"

    def test_analysis_overrides_message(self):
        hook = _hook(hook_event_name="Stop", session_id="s", reason="end")
        ctx = build_context(hook, Analysis(status=Status.QUESTION, summary="Which one?"))
        assert ctx["status"] == "Question"
        assert ctx["summary"] == "Which one?"
        assert ctx["message"] == "Which one?"
        assert ctx["reason"] == "end"


class TestRenderNotification:
    def test_analyzed_stop(self, tmp_path):
        path = _plan_transcript(tmp_path)
        hook = _hook(hook_event_name="Stop", session_id="s1", transcript_path=str(path))
        result = render_notification(hook, Config())
        assert result == {
            "hook_type": "Stop",
            "session_id": "s1",
            "title": "Claude Code",
            "body": "Migrate the database",
            "status": "PlanReady",
            "summary": "Migrate the database",
        }

    def test_status_template(self, tmp_path):
        path = _plan_transcript(tmp_path)
        config = Config(templates={
            "Stop": {"title": "Stopped", "body": "{{message}}"},
            "PlanReady": {"title": "Plan ready", "body": "{{summary}} ({{session_id}})"},
        })
        hook = _hook(hook_event_name="Stop", session_id="s1", transcript_path=str(path))
        result = render_notification(hook, config)
        assert result["title"] == "Plan ready"
        assert result["body"] == "Migrate the database (s1)"

    def test_missing_transcript_not_analyzed(self, tmp_path):
        hook = _hook(hook_event_name="Stop", session_id="s", transcript_path=str(tmp_path / "gone.jsonl"))
        assert analyze_hook(hook) is None
        result = render_notification(hook)
        assert result["body"] == "Claude stopped generating"
        assert "status" not in result

    def test_empty_transcript_uses_default(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        hook = _hook(hook_event_name="Stop", session_id="s", transcript_path=str(path))
        analysis = analyze_hook(hook)
        assert analysis.status is Status.UNKNOWN
        assert analysis.summary == "Claude Code notification"

    def test_notification_not_analyzed(self, tmp_path):
        path = _plan_transcript(tmp_path)
        hook = _hook(hook_event_name="Notification", session_id="s", message="Hi", transcript_path=str(path))
        result = render_notification(hook, Config(templates={"Notification": {"title": "N: {{title}}", "body": "{{message}}"}}))
        assert result == {"hook_type": "Notification", "session_id": "s", "title": "N: Claude Code", "body": "Hi"}
