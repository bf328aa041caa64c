"""Google Workspace directory lookup client."""

__version__ = "0.1.0"
