#!/usr/bin/env python3
"""
ccn — ccnotify CLI

Usage:
    ccn init                              Create ~/.ccnotify/config.yaml
    ccn status                            Show config diagnostics
    ccn config <key> <value>              Set a config value
    ccn analyze <transcript>              Classify and summarize the last turn
    ccn summary <transcript> [--status S] Summary for a given status
    ccn hook                              Render a notification from hook JSON on stdin
"""

from __future__ import annotations

import json
import logging
import sys

logger = logging.getLogger(__name__)


def _json_out(data):
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_init(args):
    from ccnotify.api import init
    result = init()
    for item in result["created"]:
        print(f"  created: {item}")
    for item in result["existing"]:
        print(f"  exists:  {item}")
    print("\nccnotify initialized.")
    print("Next: add `ccn hook` as a Stop hook command in Claude Code settings")


def cmd_status(args):
    from ccnotify.api import status
    result = status()
    mark = "" if result["config_exists"] else " (missing, using defaults)"
    print(f"  config:    {result['config_path']}{mark}")
    print(f"  debug:     {result['debug']} [{result['log_level']}]")
    print(f"  log_file:  {result['log_file'] or '-'}")
    print(f"  title:     {result['default_title']}")
    print(f"  templates: {', '.join(result['templates']) or '-'}")


def cmd_config(args):
    from ccnotify.api import set_config
    if len(args) < 2:
        _err("Usage: ccn config <key> <value>")
    _json_out(set_config(args[0], args[1]))


def cmd_analyze(args):
    from ccnotify.api import analyze
    from ccnotify.core.errors import TranscriptError
    if not args:
        _err("Usage: ccn analyze <transcript>")
    try:
        _json_out(analyze(args[0]))
    except TranscriptError as e:
        _err(str(e))


def cmd_summary(args):
    from ccnotify.api import summary
    positional = [a for a in args if not a.startswith("-")]
    status_name = _get_opt(args, "--status")
    if status_name in positional:
        positional.remove(status_name)
    if not positional:
        _err("Usage: ccn summary <transcript> [--status S]")

    result = summary(positional[0], status_name=status_name)
    if "error" in result:
        _err(result["error"])
    _json_out(result)


def cmd_hook(args):
    from ccnotify.api import hook
    from ccnotify.core.errors import InvalidInput
    try:
        _json_out(hook(sys.stdin.read()))
    except InvalidInput as e:
        _err(str(e))


COMMANDS = {
    "init": cmd_init,
    "status": cmd_status,
    "config": cmd_config,
    "analyze": cmd_analyze,
    "summary": cmd_summary,
    "hook": cmd_hook,
}


def _get_opt(args, flag):
    """Extract value after a flag from args list."""
    if flag in args:
        idx = args.index(flag)
        if idx + 1 < len(args):
            return args[idx + 1]
    return None


def _err(msg):
    print(msg, file=sys.stderr)
    sys.exit(1)


def _setup_logging():
    from ccnotify.core.config import Config
    from ccnotify.core.errors import ConfigError
    from ccnotify.core.logs import setup_logging
    try:
        setup_logging(Config.load())
    except ConfigError as e:
        setup_logging(Config())
        logger.warning(f"{e}; using default config")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help", "help"):
        print(__doc__.strip())
        sys.exit(0)

    cmd = argv[0]
    handler = COMMANDS.get(cmd)
    if not handler:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        print(f"Available: {', '.join(COMMANDS.keys())}", file=sys.stderr)
        sys.exit(1)

    from ccnotify.core.errors import NotifierError

    _setup_logging()
    try:
        handler(argv[1:])
    except NotifierError as e:
        _err(str(e))


if __name__ == "__main__":
    main()
