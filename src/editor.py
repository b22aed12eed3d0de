"""
Editor - single source of truth for the mind map session.

The editor owns the current EditorState snapshot and is the only mutable
object in the core. Every input handler (key press, click, drag release,
label input, toolbar button) runs a reducer, swaps in the resulting snapshot
and notifies the renderer. Handlers run to completion one at a time, so a
snapshot is never observed half-updated.
"""

import logging
import random
from dataclasses import replace
from typing import Callable, Optional

from src.config import EditorConfig
from src.editor_state import EditorState, initial_state, prune_stale
from src.edit.inline import begin_edit, commit_label, end_edit, handle_editor_key
from src.edit.keyboard import KeyboardCommandDispatcher
from src.graph_store import Position
from src.layout import Direction, LayoutEngine, LayoutResult
from src.selection import select
from src.visibility import VisibleGraph, compute_visible, toggle_collapsed

logger = logging.getLogger(__name__)


class Editor:
    """Applies user input to the editor state and reports each new snapshot."""

    def __init__(self, config: Optional[EditorConfig] = None, rng: Optional[random.Random] = None,
                 state: Optional[EditorState] = None):
        self.config = config or EditorConfig()
        self._rng = rng or random.Random()
        self._state = state or initial_state(self.config.root_label)
        self._dispatcher = KeyboardCommandDispatcher(rng=self._rng, spawn_area=self.config.spawn_area)
        self._layout_engine = LayoutEngine(
            node_width=self.config.node_width,
            node_height=self.config.node_height,
            rank_sep=self.config.rank_sep,
            node_sep=self.config.node_sep,
        )
        self._on_state_change: Optional[Callable[[EditorState], None]] = None

    @property
    def state(self) -> EditorState:
        return self._state

    def set_on_state_change(self, callback: Callable[[EditorState], None]):
        self._on_state_change = callback

    def visible(self) -> VisibleGraph:
        return compute_visible(self._state)

    def _apply(self, new_state: EditorState) -> EditorState:
        new_state = prune_stale(new_state)
        if new_state is self._state or new_state == self._state:
            return self._state
        self._state = new_state
        self._notify_change()
        return self._state

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self._state)

    # --- Keyboard ---

    def press_key(self, key: str) -> EditorState:
        return self._apply(self._dispatcher.dispatch(self._state, key))

    # --- Pointer ---

    def click_node(self, node_id: str) -> EditorState:
        """Single click: select the node and flip its collapsed state."""
        if not self._state.graph.has_node(node_id):
            return self._state
        return self._apply(toggle_collapsed(select(self._state, node_id), node_id))

    def double_click_node(self, node_id: str) -> EditorState:
        return self._apply(begin_edit(self._state, node_id))

    def drag_end(self, node_id: str, x: float, y: float) -> EditorState:
        graph = self._state.graph.set_position(node_id, Position(float(x), float(y)))
        return self._apply(replace(self._state, graph=graph))

    def connect_nodes(self, source: str, target: str) -> EditorState:
        """User-drawn connection. Self-connections are ignored."""
        if source == target:
            return self._state
        graph, edge = self._state.graph.connect(source, target)
        if edge is not None:
            logger.info(f"Connected {source} -> {target} ({edge.id})")
        return self._apply(replace(self._state, graph=graph))

    # --- Label input ---

    def begin_edit(self, node_id: str) -> EditorState:
        return self._apply(begin_edit(self._state, node_id))

    def editor_input(self, node_id: str, text: str) -> EditorState:
        return self._apply(commit_label(self._state, node_id, text))

    def editor_key(self, key: str) -> EditorState:
        return self._apply(handle_editor_key(self._state, key))

    def editor_blur(self) -> EditorState:
        return self._apply(end_edit(self._state))

    # --- Toolbar commands ---

    def add_node(self, parent: Optional[str] = None) -> EditorState:
        graph, _ = self._state.graph.create_node(parent=parent, rng=self._rng, spawn_area=self.config.spawn_area)
        return self._apply(replace(self._state, graph=graph))

    def remove_last_node(self) -> EditorState:
        graph, removed = self._state.graph.remove_last_node()
        if removed is None:
            return self._state
        return self._apply(replace(self._state, graph=graph))

    def compute_layout(self, direction=None) -> LayoutResult:
        direction = Direction.parse(direction or self.config.default_direction)
        graph = self._state.graph
        return self._layout_engine.layout(graph.nodes, graph.edges, direction)

    def layout(self, direction=None) -> EditorState:
        """Lay out every node (hidden ones included) and write positions back."""
        result = self.compute_layout(direction)
        graph = self._state.graph.set_positions(result.positions)
        return self._apply(replace(self._state, graph=graph, direction=result.direction))
