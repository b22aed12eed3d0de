"""
Tests for keyboard dispatch and inline label editing reducers.
"""

import random
from dataclasses import replace

import pytest

from src.edit import (
    KEY_ARROW_DOWN,
    KEY_ARROW_UP,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_F2,
    KEY_TAB,
    KeyboardCommandDispatcher,
    begin_edit,
    commit_label,
    end_edit,
    handle_editor_key,
)
from src.editor_state import initial_state
from src.selection import clear_selection, select


@pytest.fixture
def dispatcher():
    return KeyboardCommandDispatcher(rng=random.Random(11))


@pytest.fixture
def state():
    return initial_state()


class TestKeyboardCommandDispatcher:
    def test_binds_exactly_the_command_keys(self, dispatcher):
        assert dispatcher.keys == {KEY_ENTER, KEY_TAB, KEY_ARROW_UP, KEY_ARROW_DOWN, KEY_F2}

    def test_enter_creates_child_and_keeps_selection(self, dispatcher, state):
        new_state = dispatcher.dispatch(state, KEY_ENTER)

        assert new_state.graph.node_ids() == ("1", "2")
        assert [(e.source, e.target) for e in new_state.graph.edges] == [("1", "2")]
        assert new_state.selected == "1"

    def test_tab_behaves_like_enter(self, dispatcher, state):
        via_tab = dispatcher.dispatch(state, KEY_TAB)
        assert [(e.source, e.target) for e in via_tab.graph.edges] == [("1", "2")]
        assert via_tab.selected == "1"

    def test_arrows_navigate_storage_order(self, dispatcher, state):
        state = dispatcher.dispatch(state, KEY_ENTER)
        state = dispatcher.dispatch(state, KEY_ENTER)

        state = dispatcher.dispatch(state, KEY_ARROW_DOWN)
        assert state.selected == "2"
        state = dispatcher.dispatch(state, KEY_ARROW_DOWN)
        assert state.selected == "3"
        state = dispatcher.dispatch(state, KEY_ARROW_DOWN)
        assert state.selected == "3"
        state = dispatcher.dispatch(state, KEY_ARROW_UP)
        assert state.selected == "2"

    def test_f2_enters_edit_mode_on_selection(self, dispatcher, state):
        new_state = dispatcher.dispatch(state, KEY_F2)
        assert new_state.editing == "1"

    def test_all_keys_ignored_without_selection(self, dispatcher, state):
        unselected = clear_selection(state)
        for key in (KEY_ENTER, KEY_TAB, KEY_ARROW_UP, KEY_ARROW_DOWN, KEY_F2):
            assert dispatcher.dispatch(unselected, key) is unselected

    def test_unbound_key_is_ignored(self, dispatcher, state):
        assert dispatcher.dispatch(state, 'q') is state

    def test_stale_selection_is_cleared_not_used(self, dispatcher, state):
        state = select(dispatcher.dispatch(state, KEY_ENTER), "2")
        graph, _ = state.graph.remove_last_node()
        stale = replace(state, graph=graph)

        new_state = dispatcher.dispatch(stale, KEY_ENTER)

        assert new_state.selected is None
        assert new_state.graph.node_ids() == ("1",)


class TestInlineEdit:
    def test_begin_edit_switches_target(self, state, dispatcher):
        state = dispatcher.dispatch(state, KEY_ENTER)
        state = begin_edit(state, "1")
        state = begin_edit(state, "2")
        assert state.editing == "2"

    def test_begin_edit_unknown_node_is_noop(self, state):
        assert begin_edit(state, "77") is state

    def test_commit_label_applies_every_keystroke(self, state):
        state = begin_edit(state, "1")
        for text in ("H", "He", "Hel", "Hell", "Hello"):
            state = commit_label(state, "1", text)
            assert state.graph.get_node("1").label == text

    def test_escape_keeps_committed_text(self, state):
        state = commit_label(begin_edit(state, "1"), "1", "Typed")
        state = handle_editor_key(state, KEY_ESCAPE)
        assert state.editing is None
        assert state.graph.get_node("1").label == "Typed"

    def test_enter_ends_edit(self, state):
        state = handle_editor_key(begin_edit(state, "1"), KEY_ENTER)
        assert state.editing is None

    def test_other_keys_keep_editing(self, state):
        editing = begin_edit(state, "1")
        assert handle_editor_key(editing, 'a') is editing

    def test_end_edit_without_target_is_noop(self, state):
        assert end_edit(state) is state

    def test_edit_mode_independent_of_selection(self, state):
        state = begin_edit(clear_selection(state), "1")
        assert state.editing == "1"
        assert state.selected is None
