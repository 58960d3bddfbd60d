"""Hook input parsing and notification rendering."""
