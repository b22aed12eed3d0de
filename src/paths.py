"""
Path utilities for Mindflow.

Paths resolve relative to the project root (the parent of src/), where the
optional config.json lives.
"""

from pathlib import Path


def get_app_dir() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the config file (node box size, layout spacing, etc.)."""
    return get_app_dir() / "config.json"
