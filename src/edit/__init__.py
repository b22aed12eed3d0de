"""
Keyboard and label editing for the mind map.

This package provides:
- KeyboardCommandDispatcher: key press -> state reducer, gated on selection
- begin_edit / commit_label / end_edit: inline label editing
- setup_edit_handlers: NiceGUI event handlers for app.py integration

Usage:
    from src.edit import KeyboardCommandDispatcher, begin_edit, commit_label, end_edit
    from src.edit.handlers import setup_edit_handlers
"""

from src.edit.constants import (
    KEY_ENTER,
    KEY_TAB,
    KEY_ARROW_UP,
    KEY_ARROW_DOWN,
    KEY_F2,
    KEY_ESCAPE,
    EDITOR_EXIT_KEYS,
)
from src.edit.inline import begin_edit, commit_label, end_edit, handle_editor_key
from src.edit.keyboard import KeyboardCommandDispatcher, add_child

__all__ = [
    'KeyboardCommandDispatcher',
    'add_child',
    'begin_edit',
    'commit_label',
    'end_edit',
    'handle_editor_key',
    'KEY_ENTER',
    'KEY_TAB',
    'KEY_ARROW_UP',
    'KEY_ARROW_DOWN',
    'KEY_F2',
    'KEY_ESCAPE',
    'EDITOR_EXIT_KEYS',
]
