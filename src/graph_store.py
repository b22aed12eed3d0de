"""
Graph store for Mindflow.

Owns the canonical node and edge collections. A GraphStore is immutable:
every operation returns a new store, so each user action yields a fresh
snapshot that the visibility filter and renderer can consume safely.

Node schema:
  Node(id="3", label="New Node 3", position=Position(x, y))

Edge schema:
  Edge(id="1-3", source="1", target="3")

Ids come from a monotonic counter and are never reused, even after removal.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_SPAWN_AREA = 500.0


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Node:
    id: str
    label: str
    position: Position = Position()


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str


def default_label(node_id: str) -> str:
    return f"New Node {node_id}"


@dataclass(frozen=True)
class GraphStore:
    """Immutable node/edge collections plus the id counter."""
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    next_id: int = 1

    @classmethod
    def with_root(cls, label: str = "Mindmap Root", position: Position = Position(100.0, 100.0)) -> "GraphStore":
        """Create a store seeded with a single root node (id "1")."""
        root = Node(id="1", label=label, position=position)
        return cls(nodes=(root,), edges=(), next_id=2)

    # --- Queries ---

    def has_node(self, node_id: Optional[str]) -> bool:
        return node_id is not None and any(n.id == node_id for n in self.nodes)

    def get_node(self, node_id: Optional[str]) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def index_of(self, node_id: Optional[str]) -> int:
        """Storage-order index of a node, or -1 if absent."""
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                return i
        return -1

    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    # --- Mutations (return new stores) ---

    def create_node(self, parent: Optional[str] = None, rng: Optional[random.Random] = None,
                    spawn_area: float = DEFAULT_SPAWN_AREA, label: Optional[str] = None) -> Tuple["GraphStore", Node]:
        """
        Append a node with a fresh id, default label and a random position
        inside the spawn area. If `parent` exists, also connect parent -> node.
        An unknown parent creates an unconnected node.
        """
        rng = rng or random.Random()
        node_id = str(self.next_id)
        node = Node(
            id=node_id,
            label=label if label is not None else default_label(node_id),
            position=Position(rng.random() * spawn_area, rng.random() * spawn_area),
        )
        store = replace(self, nodes=self.nodes + (node,), next_id=self.next_id + 1)
        if parent is not None:
            if self.has_node(parent):
                store, _ = store.connect(parent, node_id)
            else:
                logger.warning(f"Parent {parent} not found, created node {node_id} unconnected")
        logger.info(f"Created node {node_id}" + (f" under {parent}" if parent else ""))
        return store, node

    def remove_last_node(self) -> Tuple["GraphStore", Optional[str]]:
        """
        Remove the most recently created node together with every edge that
        references it. Refused (returns the same store and None) when only
        one node remains.
        """
        if len(self.nodes) <= 1:
            logger.debug("Refusing to remove the last remaining node")
            return self, None
        removed = self.nodes[-1]
        edges = tuple(e for e in self.edges if removed.id not in (e.source, e.target))
        pruned = len(self.edges) - len(edges)
        logger.info(f"Removed node {removed.id} (pruned {pruned} edge(s))")
        return replace(self, nodes=self.nodes[:-1], edges=edges), removed.id

    def connect(self, source: str, target: str) -> Tuple["GraphStore", Optional[Edge]]:
        """Add a directed edge. Duplicates are allowed; unknown endpoints are a no-op."""
        if not (self.has_node(source) and self.has_node(target)):
            logger.debug(f"Ignoring connection {source} -> {target}: unknown endpoint")
            return self, None
        base_id = f"{source}-{target}"
        existing = {e.id for e in self.edges}
        edge_id = base_id
        n = 1
        while edge_id in existing:
            n += 1
            edge_id = f"{base_id}#{n}"
        edge = Edge(id=edge_id, source=source, target=target)
        return replace(self, edges=self.edges + (edge,)), edge

    def update_label(self, node_id: str, label: str) -> "GraphStore":
        if not self.has_node(node_id):
            return self
        nodes = tuple(replace(n, label=label) if n.id == node_id else n for n in self.nodes)
        return replace(self, nodes=nodes)

    def set_position(self, node_id: str, position: Position) -> "GraphStore":
        node = self.get_node(node_id)
        if node is None or node.position == position:
            return self
        nodes = tuple(replace(n, position=position) if n.id == node_id else n for n in self.nodes)
        return replace(self, nodes=nodes)

    def set_positions(self, positions: Mapping[str, Position]) -> "GraphStore":
        """Bulk position update (used after layout). Unknown ids are ignored."""
        nodes = tuple(replace(n, position=positions[n.id]) if n.id in positions else n for n in self.nodes)
        return replace(self, nodes=nodes)
