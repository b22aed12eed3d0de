"""
Configuration management for Mindflow.

Handles editor configuration including:
- Node box size and layout spacing
- Root node label and the initial spawn area for new nodes
- Default layout direction and the UI port

Values come from config.json next to the project root. Environment variables
(MINDFLOW_*) take priority over the file.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from src.paths import get_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MINDFLOW_"


@dataclass(frozen=True)
class EditorConfig:
    root_label: str = "Mindmap Root"
    node_width: float = 172.0
    node_height: float = 36.0
    rank_sep: float = 50.0
    node_sep: float = 50.0
    spawn_area: float = 500.0
    default_direction: str = "TB"
    port: int = 8081


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def _coerce(name: str, raw, default):
    try:
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        return str(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value {raw!r} for config key '{name}', using default {default!r}")
        return default


def get_editor_config(config_path: Optional[Path] = None, environ: Optional[dict] = None) -> EditorConfig:
    """
    Build the editor configuration.

    Priority:
    1. Environment variable MINDFLOW_<KEY> (e.g. MINDFLOW_NODE_WIDTH)
    2. Stored in config.json
    3. EditorConfig defaults
    """
    environ = os.environ if environ is None else environ
    stored = load_config(config_path)
    defaults = EditorConfig()

    overrides = {}
    for f in fields(EditorConfig):
        default = getattr(defaults, f.name)
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        if env_key in environ:
            overrides[f.name] = _coerce(f.name, environ[env_key], default)
        elif f.name in stored:
            overrides[f.name] = _coerce(f.name, stored[f.name], default)

    direction = str(overrides.get("default_direction", defaults.default_direction)).upper()
    if direction not in ("TB", "LR"):
        logger.warning(f"Unknown layout direction {direction!r}, using TB")
        direction = "TB"
    overrides["default_direction"] = direction

    return replace(defaults, **overrides)
