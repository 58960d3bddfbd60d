"""Configuration for ccnotify."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError


_DEFAULT_CONFIG_PATH = "~/.ccnotify/config.yaml"

_TRUE_VALUES = ("1", "true", "yes", "on")


def config_path(path: Optional[str] = None) -> Path:
    return Path(
        path or os.getenv("CCNOTIFY_CONFIG", _DEFAULT_CONFIG_PATH)
    ).expanduser()


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass
class Config:
    # Logging
    debug: bool = False
    log_file: Optional[str] = None

    # Rendering
    default_title: str = "Claude Code"
    # Template key ("default", a hook type or a status) → {"title": ..., "body": ...}
    templates: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Optional[str] = None) -> Config:
        """Load config from YAML file, falling back to defaults."""
        cfg_path = config_path(path)

        data: dict = {}
        if cfg_path.exists():
            try:
                with open(cfg_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to load {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")

        cfg = cls()

        if "debug" in data:
            cfg.debug = _as_bool(data["debug"])
        if data.get("log_file"):
            cfg.log_file = str(data["log_file"])
        if data.get("default_title"):
            cfg.default_title = str(data["default_title"])
        if "templates" in data:
            cfg.templates = _load_templates(data["templates"], cfg_path)

        # Environment overrides
        if (env_debug := os.getenv("CCNOTIFY_DEBUG")) is not None:
            cfg.debug = _as_bool(env_debug)
        if env_log := os.getenv("CCNOTIFY_LOG_FILE"):
            cfg.log_file = env_log

        return cfg

    @property
    def resolved_log_file(self) -> Optional[Path]:
        if not self.log_file:
            return None
        return Path(self.log_file).expanduser()

    @staticmethod
    def set_config(key: str, value: Any, path: Optional[str] = None) -> Path:
        """Set one top-level key in the config file, keeping the others."""
        cfg_path = config_path(path)

        data: dict = {}
        if cfg_path.exists():
            try:
                data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to load {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")

        data[key] = value
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        cfg_path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        return cfg_path


def _load_templates(raw: Any, cfg_path: Path) -> Dict[str, Dict[str, str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'templates' in {cfg_path} must be a mapping")

    templates: Dict[str, Dict[str, str]] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"template '{key}' in {cfg_path} must be a mapping")
        templates[str(key)] = {
            k: str(entry[k]) for k in ("title", "body") if entry.get(k) is not None
        }
    return templates


DEFAULT_CONFIG_TEMPLATE = """\
# ccnotify configuration

# ── Logging ──────────────────────────────────────────────
# Verbose logging to stderr (or CCNOTIFY_DEBUG=1)
debug: false
# Also append log records to this file
# log_file: "~/.ccnotify/ccnotify.log"

# ── Rendering ────────────────────────────────────────────
default_title: "Claude Code"

# Templates are looked up by status, then hook type, then "default".
# Variables: {{hook_type}} {{session_id}} {{transcript_path}} {{title}}
#            {{message}} {{tool_name}} {{context}} {{reason}}
#            {{subagent_id}} {{status}} {{summary}}
templates:
  default:
    title: "{{title}}"
    body: "{{message}}"
  PreToolUse:
    title: "Tool: {{tool_name}}"
    body: "{{message}}"
  Question:
    title: "Claude has a question"
    body: "{{summary}}"
"""
