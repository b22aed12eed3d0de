"""
Keyboard command dispatcher.

Maps a key press onto a state reducer. Commands only run while a node is
selected; with no selection every key is ignored. A key with no binding is
ignored as well.

| Key       | Action                                   |
|-----------|------------------------------------------|
| Enter     | create a child of the selected node      |
| Tab       | create a child of the selected node      |
| ArrowUp   | select the previous node (storage order) |
| ArrowDown | select the next node (storage order)     |
| F2        | edit the selected node's label           |

Enter and Tab both create a child. A sibling command would need its own
binding rather than a flag on the child command.
"""

import logging
import random
from dataclasses import replace
from typing import Callable, Dict, Optional

from src.editor_state import EditorState, prune_stale
from src.edit.constants import KEY_ARROW_DOWN, KEY_ARROW_UP, KEY_ENTER, KEY_F2, KEY_TAB
from src.edit.inline import begin_edit
from src.graph_store import DEFAULT_SPAWN_AREA
from src.selection import move_down, move_up

logger = logging.getLogger(__name__)

Command = Callable[[EditorState], EditorState]


def add_child(state: EditorState, rng: Optional[random.Random] = None,
              spawn_area: float = DEFAULT_SPAWN_AREA) -> EditorState:
    """Create a node under the selection. Selection stays on the parent."""
    graph, _ = state.graph.create_node(parent=state.selected, rng=rng, spawn_area=spawn_area)
    return replace(state, graph=graph)


class KeyboardCommandDispatcher:
    """Table-driven key handling gated on the current selection."""

    def __init__(self, rng: Optional[random.Random] = None, spawn_area: float = DEFAULT_SPAWN_AREA):
        self._rng = rng or random.Random()
        self._spawn_area = spawn_area
        self._bindings: Dict[str, Command] = {
            KEY_ENTER: self._add_child,
            KEY_TAB: self._add_child,
            KEY_ARROW_UP: move_up,
            KEY_ARROW_DOWN: move_down,
            KEY_F2: lambda s: begin_edit(s, s.selected),
        }

    @property
    def keys(self):
        return frozenset(self._bindings)

    def _add_child(self, state: EditorState) -> EditorState:
        return add_child(state, rng=self._rng, spawn_area=self._spawn_area)

    def dispatch(self, state: EditorState, key: str) -> EditorState:
        if state.selected is None:
            logger.debug(f"Ignoring key {key!r}: nothing selected")
            return state
        if not state.graph.has_node(state.selected):
            logger.warning(f"Ignoring key {key!r}: selected node {state.selected} no longer exists")
            return prune_stale(state)
        command = self._bindings.get(key)
        if command is None:
            return state
        return command(state)
