import random
from dataclasses import replace

import pytest

from src.editor_state import EditorState, initial_state
from src.visibility import compute_visible, hidden_node_ids, toggle_collapsed


def build_state(parent_of):
    """Build a state from a {child: parent} mapping, created in key order."""
    state = initial_state()
    graph = state.graph
    rng = random.Random(0)
    for child, parent in parent_of.items():
        graph, node = graph.create_node(parent=parent, rng=rng)
        assert node.id == child
    return replace(state, graph=graph)


@pytest.fixture
def chain():
    # 1 -> 2 -> 3
    return build_state({"2": "1", "3": "2"})


def test_nothing_collapsed_everything_visible(chain):
    visible = compute_visible(chain)
    assert visible.node_ids == ("1", "2", "3")
    assert visible.edge_pairs == (("1", "2"), ("2", "3"))


def test_collapsing_chain_root_hides_only_direct_child(chain):
    state = toggle_collapsed(chain, "1")
    visible = compute_visible(state)

    assert visible.node_ids == ("1", "3")
    assert visible.edge_pairs == ()


def test_toggle_twice_restores_visibility(chain):
    state = toggle_collapsed(toggle_collapsed(chain, "1"), "1")
    assert state.collapsed == frozenset()
    assert compute_visible(state).node_ids == ("1", "2", "3")


def test_toggle_unknown_node_is_noop(chain):
    assert toggle_collapsed(chain, "404") is chain


def test_hidden_iff_collapsed_parent_has_direct_edge():
    state = build_state({"2": "1", "3": "1", "4": "2", "5": "4"})
    state = toggle_collapsed(toggle_collapsed(state, "1"), "4")

    hidden = hidden_node_ids(state.graph.edges, state.collapsed)
    assert hidden == frozenset({"2", "3", "5"})

    visible = compute_visible(state)
    assert visible.node_ids == ("1", "4")
    for source, target in visible.edge_pairs:
        assert source in visible.node_ids and target in visible.node_ids


def test_collapse_does_not_touch_graph(chain):
    state = toggle_collapsed(chain, "2")
    assert state.graph is chain.graph
    assert isinstance(state, EditorState)
