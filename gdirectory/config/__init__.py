"""Configuration module for the directory lookup client."""
from .settings import DirectoryConfig, load_settings

__all__ = ["DirectoryConfig", "load_settings"]
