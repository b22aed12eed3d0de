"""
Selection controller.

Tracks at most one selected node. ArrowUp/ArrowDown navigation walks the
node collection in storage (creation) order, not tree order; moving past the
first or last node leaves the selection unchanged.
"""

import logging
from dataclasses import replace
from typing import Optional

from src.editor_state import EditorState

logger = logging.getLogger(__name__)


def select(state: EditorState, node_id: Optional[str]) -> EditorState:
    if not state.graph.has_node(node_id):
        logger.debug(f"Ignoring selection of unknown node {node_id}")
        return state
    if state.selected == node_id:
        return state
    return replace(state, selected=node_id)


def clear_selection(state: EditorState) -> EditorState:
    if state.selected is None:
        return state
    return replace(state, selected=None)


def _step(state: EditorState, delta: int) -> EditorState:
    if state.selected is None:
        return state
    index = state.graph.index_of(state.selected)
    if index < 0:
        logger.warning(f"Selection {state.selected} no longer exists, clearing it")
        return clear_selection(state)
    target = index + delta
    if target < 0 or target >= len(state.graph.nodes):
        return state
    node_id = state.graph.nodes[target].id
    logger.debug(f"Selection moved {state.selected} -> {node_id}")
    return replace(state, selected=node_id)


def move_up(state: EditorState) -> EditorState:
    return _step(state, -1)


def move_down(state: EditorState) -> EditorState:
    return _step(state, +1)
