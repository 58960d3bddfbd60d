"""Notification rendering with ``{{variable}}`` templates."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..core.config import Config
from ..core.errors import TranscriptError
from ..core.models import Analysis
from ..ingest.parser import parse_transcript
from ..summarize.classifier import classify_messages
from ..summarize.summary import default_message, summarize_messages
from .hooks import HookInput, HookType

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(r"\{\{\s*(\w+)\s*\}\}")

BUILTIN_TEMPLATE = {"title": "{{title}}", "body": "{{message}}"}

STOP_FALLBACK = "Claude stopped generating"
SUBAGENT_STOP_FALLBACK = "Subagent stopped"


@dataclass
class MessageTemplate:
    title: str = ""
    body: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> MessageTemplate:
        return cls(title=data.get("title", ""), body=data.get("body", ""))


@dataclass
class RenderedMessage:
    title: str
    body: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "body": self.body}


def render_string(template: str, context: Mapping[str, str]) -> str:
    """Substitute ``{{name}}``. Unknown names are left as written."""
    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key in context:
            return context[key]
        return match.group(0)

    return _VARIABLE.sub(_replace, template or "")


class TemplateEngine:
    def __init__(self, templates: Optional[Mapping[str, Mapping[str, str]]] = None):
        self.templates = dict(templates or {})

    def get_template(self, *keys: Optional[str]) -> MessageTemplate:
        """First configured template among ``keys``, then "default"."""
        for key in (*keys, "default"):
            if key and key in self.templates:
                return MessageTemplate.from_dict(self.templates[key])
        return MessageTemplate.from_dict(BUILTIN_TEMPLATE)

    def render(self, template: MessageTemplate, context: Mapping[str, str]) -> RenderedMessage:
        return RenderedMessage(
            title=render_string(template.title, context),
            body=render_string(template.body, context),
        )


# ── Context ───────────────────────────────────────────────────────────────────

def _hook_message(hook: HookInput) -> str:
    if hook.hook_type is HookType.NOTIFICATION:
        message = hook.get("message") or ""
        notification_type = hook.get("notification_type")
        return f"[{notification_type}] {message}" if notification_type else message

    if hook.hook_type is HookType.PRE_TOOL_USE:
        return hook.get("context") or hook.get("tool_name") or ""

    if hook.hook_type is HookType.STOP:
        return hook.get("reason") or STOP_FALLBACK

    if hook.hook_type is HookType.SUBAGENT_STOP:
        subagent_id, reason = hook.get("subagent_id"), hook.get("reason")
        if subagent_id and reason:
            return f"Subagent {subagent_id} stopped: {reason}"
        if reason:
            return f"Subagent stopped: {reason}"
        if subagent_id:
            return f"Subagent {subagent_id} stopped"
        return SUBAGENT_STOP_FALLBACK

    # PermissionRequest
    if hook.get("description"):
        return hook.get("description")
    if hook.get("tool_name"):
        return f"Claude requests permission to use {hook.get('tool_name')}"
    return "Claude requests permission to execute a tool"


def build_context(
    hook: HookInput,
    analysis: Optional[Analysis] = None,
    default_title: str = "Claude Code",
) -> Dict[str, str]:
    ctx = {
        "hook_type": hook.hook_type.value,
        "session_id": hook.session_id,
        "title": hook.get("title") or default_title,
        "message": _hook_message(hook),
    }
    if hook.transcript_path:
        ctx["transcript_path"] = hook.transcript_path
    for key in ("tool_name", "context", "reason", "subagent_id"):
        value = hook.get(key)
        if value:
            ctx[key] = value

    if analysis is not None:
        ctx["status"] = analysis.status.value
        ctx["summary"] = analysis.summary
        ctx["message"] = analysis.summary
    return ctx


# ── Pipeline ──────────────────────────────────────────────────────────────────

def analyze_hook(hook: HookInput) -> Optional[Analysis]:
    """Run transcript analysis for Stop/SubagentStop hooks.

    Returns None when the hook is not analyzed or the transcript cannot be
    read.
    """
    if not hook.is_analyzed or not hook.transcript_path:
        return None

    try:
        messages = parse_transcript(hook.transcript_path)
    except TranscriptError as e:
        logger.warning(f"Transcript analysis skipped: {e}")
        return None

    status = classify_messages(messages)
    summary = summarize_messages(messages, status) if messages else default_message(status)
    return Analysis(status=status, summary=summary)


def render_notification(hook: HookInput, config: Optional[Config] = None) -> Dict[str, str]:
    """Title and body for a hook, plus status/summary when analyzed."""
    config = config or Config()
    analysis = analyze_hook(hook)
    context = build_context(hook, analysis, default_title=config.default_title)

    engine = TemplateEngine(config.templates)
    template = engine.get_template(
        analysis.status.value if analysis else None,
        hook.hook_type.value,
    )
    rendered = engine.render(template, context)
    logger.debug(f"Rendered {hook.hook_type.value}: {rendered.title!r} / {rendered.body!r}")

    result = {
        "hook_type": hook.hook_type.value,
        "session_id": hook.session_id,
        **rendered.to_dict(),
    }
    if analysis is not None:
        result.update(analysis.to_dict())
    return result
