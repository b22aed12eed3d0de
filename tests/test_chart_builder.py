"""
Tests for the render model, ECharts options and click payload helpers.
"""

import random
from dataclasses import replace

import pytest

from src.chart_builder import (
    REQUESTED_EVENT_KEYS,
    build_echart_options,
    build_render_model,
    normalize_click_payload,
    resolve_node_id_from_payload,
)
from src.edit.constants import EDITING_MARKER
from src.editor_state import initial_state
from src.layout import Direction
from src.style import STYLES, NodeStyle, style_for, style_kind


@pytest.fixture
def state():
    """Root with two children: 1 -> 2, 1 -> 3."""
    state = initial_state()
    graph = state.graph
    rng = random.Random(2)
    graph, _ = graph.create_node(parent="1", rng=rng)
    graph, _ = graph.create_node(parent="1", rng=rng)
    return replace(state, graph=graph)


def nodes_by_id(model):
    return {n['id']: n for n in model['nodes']}


class TestRenderModel:
    def test_flags_and_styles(self, state):
        state = replace(state, selected="2", collapsed=frozenset({"3"}))
        nodes = nodes_by_id(build_render_model(state))

        assert nodes["1"]['style_kind'] == "default"
        assert nodes["2"]['selected'] is True
        assert nodes["2"]['style_kind'] == "selected"
        assert nodes["3"]['collapsed'] is True
        assert nodes["3"]['style_kind'] == "collapsed"
        assert nodes["2"]['style'] == STYLES[NodeStyle.SELECTED].as_css()

    def test_hidden_nodes_and_edges_left_out(self, state):
        state = replace(state, collapsed=frozenset({"1"}))
        model = build_render_model(state)
        assert [n['id'] for n in model['nodes']] == ["1"]
        assert model['edges'] == []

    def test_edges_carry_ids(self, state):
        model = build_render_model(state)
        assert model['edges'] == [
            {'id': '1-2', 'source': '1', 'target': '2'},
            {'id': '1-3', 'source': '1', 'target': '3'},
        ]

    def test_editing_marker_on_label(self, state):
        state = replace(state, editing="2")
        node = nodes_by_id(build_render_model(state))["2"]
        assert node['editing'] is True
        assert node['label'] == "New Node 2"
        assert node['display_label'] == f"{EDITING_MARKER} New Node 2"

    @pytest.mark.parametrize("direction,sides", [
        (Direction.TB, ("top", "bottom")),
        (Direction.LR, ("left", "right")),
    ])
    def test_handle_sides_follow_direction(self, state, direction, sides):
        model = build_render_model(replace(state, direction=direction))
        for node in model['nodes']:
            assert (node['target_side'], node['source_side']) == sides


class TestStyle:
    def test_selected_beats_collapsed(self, state):
        state = replace(state, selected="1", collapsed=frozenset({"1"}))
        assert style_kind("1", state) is NodeStyle.SELECTED
        assert style_for("1", state).border == "3px solid #1890ff"

    def test_collapsed_beats_default(self, state):
        state = replace(state, selected=None, collapsed=frozenset({"2"}))
        assert style_for("2", state).background_color == "#e0e0e0"
        assert style_for("3", state).kind is NodeStyle.DEFAULT

    def test_default_palette(self):
        default = STYLES[NodeStyle.DEFAULT]
        assert default.as_css()['backgroundColor'] == '#f0f0f0'
        assert default.border == '1px solid #ddd'


class TestEchartOptions:
    def test_series_structure(self, state):
        options = build_echart_options(build_render_model(state))
        series = options['series'][0]
        assert series['type'] == 'graph'
        assert series['layout'] == 'none'
        assert [d['id'] for d in series['data']] == ["1", "2", "3"]
        assert all(link['symbol'] == ['none', 'arrow'] for link in series['links'])

    def test_positions_shifted_to_centre(self, state):
        model = build_render_model(state)
        options = build_echart_options(model, node_width=100, node_height=20)
        root = options['series'][0]['data'][0]
        assert root['x'] == model['nodes'][0]['x'] + 50
        assert root['y'] == model['nodes'][0]['y'] + 10
        assert root['symbolSize'] == [100, 20]

    def test_item_style_matches_node_style(self, state):
        state = replace(state, selected="3")
        data = build_echart_options(build_render_model(state))['series'][0]['data']
        item = {d['id']: d['itemStyle'] for d in data}["3"]
        assert item['borderColor'] == '#1890ff'
        assert item['borderWidth'] == 3


class TestClickPayload:
    def test_normalize_list_payload(self):
        payload = normalize_click_payload(['series', '2', 'graph', 'node', 'x'])
        assert payload == dict(zip(REQUESTED_EVENT_KEYS, ['series', '2', 'graph', 'node', 'x']))

    def test_normalize_other_payloads(self):
        assert normalize_click_payload({'name': '1'}) == {'name': '1'}
        assert normalize_click_payload('3') == {'name': '3'}
        assert normalize_click_payload(None) == {}

    def test_resolve_node_click(self, state):
        payload = {'componentType': 'series', 'dataType': 'node', 'name': '2'}
        assert resolve_node_id_from_payload(payload, state.graph) == "2"

    def test_resolve_rejects_edges_and_unknown_nodes(self, state):
        edge = {'componentType': 'series', 'dataType': 'edge', 'name': '1 > 2'}
        unknown = {'componentType': 'series', 'dataType': 'node', 'name': '42'}
        background = {'componentType': 'title', 'name': '1'}
        for payload in (edge, unknown, background):
            assert resolve_node_id_from_payload(payload, state.graph) is None
