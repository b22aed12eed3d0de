"""
Editor state snapshot.

One immutable object holds everything the editor knows: the graph, the set of
collapsed node ids, the selected node and the node whose label is being edited.
Reducers in selection.py, visibility.py and edit/ take a snapshot and return
the next one; nothing is mutated in place.
"""

import logging
from dataclasses import dataclass, replace
from typing import FrozenSet, Optional

from src.graph_store import GraphStore
from src.layout import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorState:
    """Immutable snapshot of the editor."""
    graph: GraphStore
    collapsed: FrozenSet[str] = frozenset()
    selected: Optional[str] = None
    editing: Optional[str] = None
    direction: Direction = Direction.TB


def initial_state(root_label: str = "Mindmap Root") -> EditorState:
    """Seed a single root node and select it."""
    graph = GraphStore.with_root(label=root_label)
    return EditorState(graph=graph, selected=graph.nodes[0].id)


def prune_stale(state: EditorState) -> EditorState:
    """
    Drop references to nodes that no longer exist in the graph.
    Returns the same object when nothing was stale.
    """
    graph = state.graph
    collapsed = frozenset(nid for nid in state.collapsed if graph.has_node(nid))
    selected = state.selected if graph.has_node(state.selected) else None
    editing = state.editing if graph.has_node(state.editing) else None

    if collapsed == state.collapsed and selected == state.selected and editing == state.editing:
        return state

    if selected != state.selected:
        logger.debug(f"Cleared stale selection {state.selected}")
    if editing != state.editing:
        logger.debug(f"Cleared stale edit target {state.editing}")
    return replace(state, collapsed=collapsed, selected=selected, editing=editing)
