"""Shared models, errors, config and logging setup."""
