"""ccnotify — turn Claude Code hook events into short notifications.

The core reads a session transcript, decides how the current turn ended
(see ``ccnotify.summarize.classifier``) and writes a one-line summary for it
(see ``ccnotify.summarize.summary``).

Basic usage:
    from ccnotify.api import analyze

    result = analyze("~/.claude/projects/.../session.jsonl")
    print(result["status"], result["summary"])
"""

__version__ = "0.3.0"
