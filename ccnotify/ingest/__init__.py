"""Transcript reading, temporal filtering and tool extraction."""
