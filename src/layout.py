"""
Hierarchical (layered) layout for the mind map.

Phases:
  1. Cycle removal (greedy-FAS ordering, backward edges reversed for layering)
  2. Rank assignment (longest path over a topological order)
  3. Virtual node insertion for edges spanning several ranks
  4. Crossing minimisation (barycenter sweeps, best ordering kept)
  5. Coordinate assignment (fixed node box, parents pull children into line)

Every step iterates in storage order and sorts stably, so the same nodes,
edges and direction always produce the same positions. The engine is pure:
it returns a LayoutResult and never touches the GraphStore.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

import networkx as nx

from src.graph_store import Edge, Node, Position

logger = logging.getLogger(__name__)

NODE_WIDTH = 172.0
NODE_HEIGHT = 36.0
RANK_SEP = 50.0
NODE_SEP = 50.0
MAX_SWEEPS = 24

VIRTUAL_PREFIX = "~v"


class Direction(str, Enum):
    TB = "TB"
    LR = "LR"

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unknown layout direction: {value!r} (expected 'TB' or 'LR')")

    @property
    def target_side(self) -> str:
        """Side where incoming edges attach (opposite of rank advance)."""
        return "top" if self is Direction.TB else "left"

    @property
    def source_side(self) -> str:
        """Side where outgoing edges leave (rank advance)."""
        return "bottom" if self is Direction.TB else "right"


@dataclass(frozen=True)
class LayoutResult:
    direction: Direction
    positions: Dict[str, Position]
    ranks: Dict[str, int]
    order: Tuple[Tuple[str, ...], ...]
    reversed_edges: frozenset

    @property
    def sides(self) -> Tuple[str, str]:
        """(target_side, source_side) shared by every node in this layout."""
        return self.direction.target_side, self.direction.source_side


# --- Cycle removal ---

def greedy_fas_ordering(graph: nx.DiGraph, index: Dict[str, int]) -> List[str]:
    """
    Order nodes so that few edges point backwards (Eades' greedy heuristic).
    Sinks go to the tail, sources to the head; ties resolve by storage index.
    """
    active = sorted(graph.nodes, key=index.__getitem__)
    out_deg = {n: graph.out_degree(n) for n in active}
    in_deg = {n: graph.in_degree(n) for n in active}
    head: List[str] = []
    tail: List[str] = []

    def drop(node: str) -> None:
        active.remove(node)
        for succ in graph.successors(node):
            in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            out_deg[pred] -= 1

    while active:
        sinks = [n for n in active if out_deg[n] == 0]
        while sinks:
            for sink in sinks:
                drop(sink)
                tail.append(sink)
            sinks = [n for n in active if out_deg[n] == 0]

        sources = [n for n in active if in_deg[n] == 0]
        while sources:
            for source in sources:
                drop(source)
                head.append(source)
            sources = [n for n in active if in_deg[n] == 0]

        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            drop(best)
            head.append(best)

    tail.reverse()
    return head + tail


def remove_cycles(graph: nx.DiGraph, index: Dict[str, int]) -> Tuple[nx.DiGraph, Set[Tuple[str, str]]]:
    """Return an acyclic copy of `graph` and the set of edges that were reversed."""
    ordering = greedy_fas_ordering(graph, index)
    position = {node: i for i, node in enumerate(ordering)}

    dag = nx.DiGraph()
    dag.add_nodes_from(sorted(graph.nodes, key=index.__getitem__))
    reversed_edges: Set[Tuple[str, str]] = set()
    for src, tgt in graph.edges():
        if position[src] > position[tgt]:
            reversed_edges.add((src, tgt))
            dag.add_edge(tgt, src)
        else:
            dag.add_edge(src, tgt)
    return dag, reversed_edges


# --- Ranking ---

def assign_ranks(dag: nx.DiGraph, index: Dict[str, int]) -> Dict[str, int]:
    """Longest-path ranking: every edge goes from a lower rank to a higher one."""
    ranks: Dict[str, int] = {}
    for node in nx.lexicographical_topological_sort(dag, key=index.__getitem__):
        preds = [ranks[p] for p in dag.predecessors(node)]
        ranks[node] = max(preds) + 1 if preds else 0
    return ranks


def insert_virtual_nodes(dag: nx.DiGraph, ranks: Dict[str, int],
                         index: Dict[str, int]) -> Tuple[nx.DiGraph, Dict[str, int], Dict[str, int]]:
    """Split edges spanning several ranks into chains through virtual nodes."""
    aug = nx.DiGraph()
    aug.add_nodes_from(dag.nodes)
    ranks = dict(ranks)
    index = dict(index)
    counter = 0

    edges = sorted(dag.edges(), key=lambda e: (index[e[0]], index[e[1]]))
    for src, tgt in edges:
        span = ranks[tgt] - ranks[src]
        if span <= 1:
            aug.add_edge(src, tgt)
            continue
        prev = src
        for step in range(1, span):
            virtual = f"{VIRTUAL_PREFIX}{counter}.{step}"
            ranks[virtual] = ranks[src] + step
            # virtual nodes sort right after their source in the initial ordering
            index[virtual] = index[src] + (counter + 1) / (len(edges) + 2) / 2
            aug.add_edge(prev, virtual)
            prev = virtual
        aug.add_edge(prev, tgt)
        counter += 1
    return aug, ranks, index


# --- Crossing minimisation ---

def count_crossings(order: Sequence[Sequence[str]], graph: nx.DiGraph) -> int:
    total = 0
    for layer_idx in range(len(order) - 1):
        tgt_pos = {nid: i for i, nid in enumerate(order[layer_idx + 1])}
        segments: List[Tuple[int, int]] = []
        for sp, src in enumerate(order[layer_idx]):
            for succ in graph.successors(src):
                if succ in tgt_pos:
                    segments.append((sp, tgt_pos[succ]))
        for i in range(len(segments)):
            for j in range(i + 1, len(segments)):
                (a0, a1), (b0, b1) = segments[i], segments[j]
                if (a0 - b0) * (a1 - b1) < 0:
                    total += 1
    return total


def _barycenter(neighbors: Sequence[str], positions: Dict[str, int]) -> Optional[float]:
    found = [positions[n] for n in neighbors if n in positions]
    if not found:
        return None
    return sum(found) / len(found)


def _sort_layer(layer: List[str], neighbor_positions: Dict[str, int], graph: nx.DiGraph, upward: bool) -> List[str]:
    current = {nid: i for i, nid in enumerate(layer)}

    def key(nid: str) -> Tuple[float, int]:
        neighbors = list(graph.successors(nid)) if upward else list(graph.predecessors(nid))
        bary = _barycenter(neighbors, neighbor_positions)
        return (bary if bary is not None else float(current[nid]), current[nid])

    return sorted(layer, key=key)


def minimise_crossings(aug: nx.DiGraph, ranks: Dict[str, int], index: Dict[str, int],
                       max_sweeps: int = MAX_SWEEPS) -> List[List[str]]:
    layer_count = max(ranks.values()) + 1 if ranks else 0
    order: List[List[str]] = [[] for _ in range(layer_count)]
    for nid in sorted(ranks, key=index.__getitem__):
        order[ranks[nid]].append(nid)

    best = [list(layer) for layer in order]
    best_count = count_crossings(best, aug)

    for _ in range(max_sweeps):
        if best_count == 0:
            break
        for layer_idx in range(1, layer_count):
            prev = {nid: i for i, nid in enumerate(order[layer_idx - 1])}
            order[layer_idx] = _sort_layer(order[layer_idx], prev, aug, upward=False)
        for layer_idx in range(layer_count - 2, -1, -1):
            nxt = {nid: i for i, nid in enumerate(order[layer_idx + 1])}
            order[layer_idx] = _sort_layer(order[layer_idx], nxt, aug, upward=True)

        crossings = count_crossings(order, aug)
        if crossings >= best_count:
            break
        best = [list(layer) for layer in order]
        best_count = crossings

    return best


# --- Coordinates ---

def assign_breadth(order: Sequence[Sequence[str]], aug: nx.DiGraph, slot: float) -> Dict[str, float]:
    """
    Place nodes along the in-rank axis. Each node aims for the mean of its
    parents' coordinates; nodes keep their order and stay at least `slot`
    apart, then the whole layer shifts back toward its targets.
    """
    coords: Dict[str, float] = {}
    for layer in order:
        desired: List[Optional[float]] = []
        for nid in layer:
            parents = [coords[p] for p in aug.predecessors(nid) if p in coords]
            desired.append(sum(parents) / len(parents) if parents else None)

        placed: List[float] = []
        for want in desired:
            if not placed:
                placed.append(want if want is not None else 0.0)
            else:
                floor = placed[-1] + slot
                placed.append(max(want, floor) if want is not None else floor)

        known = [(p, d) for p, d in zip(placed, desired) if d is not None]
        if known:
            shift = sum(d - p for p, d in known) / len(known)
            placed = [p + shift for p in placed]
        coords.update(zip(layer, placed))

    if coords:
        low = min(coords.values())
        coords = {nid: c - low for nid, c in coords.items()}
    return coords


class LayoutEngine:
    """Layered graph layout with a fixed node box."""

    def __init__(self, node_width: float = NODE_WIDTH, node_height: float = NODE_HEIGHT,
                 rank_sep: float = RANK_SEP, node_sep: float = NODE_SEP, max_sweeps: int = MAX_SWEEPS):
        self.node_width = node_width
        self.node_height = node_height
        self.rank_sep = rank_sep
        self.node_sep = node_sep
        self.max_sweeps = max_sweeps

    def layout(self, nodes: Sequence[Node], edges: Sequence[Edge], direction="TB") -> LayoutResult:
        """
        Compute top-left positions for `nodes`. Edges with an unknown endpoint
        and self-loops are ignored; duplicate edges count once.
        """
        direction = Direction.parse(direction)
        index = {node.id: i for i, node in enumerate(nodes)}

        graph = nx.DiGraph()
        graph.add_nodes_from(index)
        for edge in edges:
            if edge.source in index and edge.target in index and edge.source != edge.target:
                graph.add_edge(edge.source, edge.target)

        dag, reversed_edges = remove_cycles(graph, index)
        ranks = assign_ranks(dag, index)
        aug, aug_ranks, aug_index = insert_virtual_nodes(dag, ranks, index)
        order = minimise_crossings(aug, aug_ranks, aug_index, self.max_sweeps)

        if direction is Direction.TB:
            breadth, depth = self.node_width, self.node_height
        else:
            breadth, depth = self.node_height, self.node_width
        along = assign_breadth(order, aug, breadth + self.node_sep)

        positions: Dict[str, Position] = {}
        for node in nodes:
            rank_coord = round(ranks[node.id] * (depth + self.rank_sep), 6)
            breadth_coord = round(along[node.id], 6)
            if direction is Direction.TB:
                positions[node.id] = Position(breadth_coord, rank_coord)
            else:
                positions[node.id] = Position(rank_coord, breadth_coord)

        real_order = tuple(tuple(n for n in layer if n in index) for layer in order)
        logger.info(
            f"Layout {direction.value}: {len(nodes)} node(s), {len(real_order)} rank(s), "
            f"{len(reversed_edges)} reversed edge(s)"
        )
        return LayoutResult(
            direction=direction,
            positions=positions,
            ranks={nid: ranks[nid] for nid in index},
            order=real_order,
            reversed_edges=frozenset(reversed_edges),
        )
