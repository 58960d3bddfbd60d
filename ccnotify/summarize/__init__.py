"""Status classification and summary generation."""
