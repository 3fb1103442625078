"""Text cursor and output formatting helpers."""
