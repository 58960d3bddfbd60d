"""
ccnotify API: importable functions behind every CLI command.

Every function returns JSON-serializable dicts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


def init() -> Dict[str, Any]:
    """Create the config directory and a commented default config."""
    from .core.config import DEFAULT_CONFIG_TEMPLATE, config_path

    cfg_path = config_path()
    results: Dict[str, Any] = {"created": [], "existing": []}

    config_dir = cfg_path.parent
    if config_dir.exists():
        results["existing"].append(str(config_dir))
    else:
        config_dir.mkdir(parents=True)
        results["created"].append(str(config_dir))

    if cfg_path.exists():
        results["existing"].append(str(cfg_path))
    else:
        cfg_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
        results["created"].append(str(cfg_path))

    return results


def set_config(key: str, value: str) -> Dict[str, str]:
    """Set a config key-value pair."""
    from .core.config import Config
    path = Config.set_config(key, value)
    return {"key": key, "value": value, "path": str(path), "status": "ok"}


# ── Status ────────────────────────────────────────────────────────────────────

def status() -> Dict[str, Any]:
    """Config diagnostics."""
    from .core.config import Config, config_path
    from .core.logs import get_level_name

    cfg_path = config_path()
    cfg = Config.load()
    return {
        "config_path": str(cfg_path),
        "config_exists": cfg_path.exists(),
        "debug": cfg.debug,
        "log_level": get_level_name(),
        "log_file": str(cfg.resolved_log_file) if cfg.resolved_log_file else None,
        "default_title": cfg.default_title,
        "templates": sorted(cfg.templates),
    }


# ── Analysis ──────────────────────────────────────────────────────────────────

def analyze(transcript_path: str) -> Dict[str, str]:
    """Classify the current turn and summarize it.

    Raises TranscriptError when the transcript cannot be read.
    """
    from .core.models import Analysis
    from .ingest.parser import parse_transcript
    from .summarize.classifier import classify_messages
    from .summarize.summary import default_message, summarize_messages

    messages = parse_transcript(transcript_path)
    status_ = classify_messages(messages)
    summary_ = summarize_messages(messages, status_) if messages else default_message(status_)
    result = Analysis(status=status_, summary=summary_).to_dict()
    result["transcript_path"] = str(Path(transcript_path).expanduser())
    result["messages"] = len(messages)
    return result


def summary(transcript_path: str, status_name: Optional[str] = None) -> Dict[str, str]:
    """Summary for a given status (classified from the transcript if omitted)."""
    from .core.errors import TranscriptError
    from .core.models import Status
    from .summarize.classifier import classify
    from .summarize.summary import generate_summary

    if status_name:
        try:
            status_ = Status(status_name)
        except ValueError:
            valid = ", ".join(s.value for s in Status)
            return {"error": f"Unknown status '{status_name}'. Valid: {valid}"}
    else:
        try:
            status_ = classify(transcript_path)
        except TranscriptError:
            status_ = Status.UNKNOWN

    return {"status": status_.value, "summary": generate_summary(transcript_path, status_)}


def hook(raw_input: str) -> Dict[str, str]:
    """Render the notification for one hook payload.

    Raises InvalidInput for unusable hook JSON.
    """
    from .core.config import Config
    from .notify.hooks import parse_hook_input
    from .notify.templates import render_notification

    hook_input = parse_hook_input(raw_input)
    return render_notification(hook_input, Config.load())
