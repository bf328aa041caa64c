"""Core directory client and validation helpers."""
