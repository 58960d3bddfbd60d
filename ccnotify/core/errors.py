"""Exception types for ccnotify."""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for all ccnotify errors."""


class TranscriptError(NotifierError):
    """The transcript file could not be opened or read."""


class ConfigError(NotifierError):
    """The config file exists but could not be loaded or written."""


class InvalidInput(NotifierError):
    """Hook input on stdin is empty or not a recognised hook payload."""


class MissingField(InvalidInput):
    """Hook input lacks a required field."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field
