"""
Inline label editing.

At most one node is in edit mode. Every keystroke in the label input is
committed straight to the graph (there is no draft buffer), so ending the
edit with Enter, Escape or blur only leaves edit mode; Escape does not roll
anything back.
"""

import logging
from dataclasses import replace
from typing import Optional

from src.editor_state import EditorState
from src.edit.constants import EDITOR_EXIT_KEYS

logger = logging.getLogger(__name__)


def begin_edit(state: EditorState, node_id: Optional[str]) -> EditorState:
    """Put `node_id` into edit mode, implicitly ending any other edit."""
    if not state.graph.has_node(node_id):
        return state
    if state.editing == node_id:
        return state
    if state.editing is not None:
        logger.debug(f"Edit of node {state.editing} replaced by node {node_id}")
    logger.debug(f"Editing label of node {node_id}")
    return replace(state, editing=node_id)


def commit_label(state: EditorState, node_id: str, text: str) -> EditorState:
    if not state.graph.has_node(node_id):
        return state
    return replace(state, graph=state.graph.update_label(node_id, text))


def end_edit(state: EditorState) -> EditorState:
    if state.editing is None:
        return state
    logger.debug(f"Finished editing node {state.editing}")
    return replace(state, editing=None)


def handle_editor_key(state: EditorState, key: str) -> EditorState:
    """Keys pressed inside the label input: Enter/Escape leave edit mode."""
    if key in EDITOR_EXIT_KEYS:
        return end_edit(state)
    return state
