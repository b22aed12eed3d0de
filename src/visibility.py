"""
Visibility filter: which nodes and edges the renderer should draw.

Collapse is shallow. A collapsed node hides its direct children (targets of
its outgoing edges) and nothing else; a hidden child that is not itself
collapsed does not hide its own children. An edge is visible only when both
endpoints are visible.
"""

import logging
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, Tuple

from src.editor_state import EditorState
from src.graph_store import Edge, GraphStore, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleGraph:
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    @property
    def edge_pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple((e.source, e.target) for e in self.edges)


def hidden_node_ids(edges: Iterable[Edge], collapsed: FrozenSet[str]) -> FrozenSet[str]:
    return frozenset(e.target for e in edges if e.source in collapsed)


def filter_visible(graph: GraphStore, collapsed: FrozenSet[str]) -> VisibleGraph:
    hidden = hidden_node_ids(graph.edges, collapsed)
    nodes = tuple(n for n in graph.nodes if n.id not in hidden)
    visible_ids = {n.id for n in nodes}
    edges = tuple(e for e in graph.edges if e.source in visible_ids and e.target in visible_ids)
    return VisibleGraph(nodes=nodes, edges=edges)


def compute_visible(state: EditorState) -> VisibleGraph:
    return filter_visible(state.graph, state.collapsed)


def toggle_collapsed(state: EditorState, node_id: str) -> EditorState:
    """Flip a node's membership in the collapsed set. Unknown ids are a no-op."""
    if not state.graph.has_node(node_id):
        return state
    if node_id in state.collapsed:
        collapsed = state.collapsed - {node_id}
        logger.debug(f"Expanded node {node_id}")
    else:
        collapsed = state.collapsed | {node_id}
        logger.debug(f"Collapsed node {node_id}")
    return replace(state, collapsed=collapsed)
