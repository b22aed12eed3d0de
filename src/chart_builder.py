"""
Render model and ECharts options for the mind map.

build_render_model() is the output surface of the core: the visible nodes
(position, label or edit marker, style, selected/collapsed flags, handle
sides) and the visible edges, recomputed from a snapshot after every change.
build_echart_options() turns that model into a NiceGUI ui.echart option dict
with fixed positions (layout 'none'), rectangular nodes and arrowed edges.
"""

from typing import Any, Dict, List, Optional

from src.edit.constants import EDITING_MARKER
from src.editor_state import EditorState
from src.graph_store import GraphStore
from src.style import STYLES, NodeStyle, style_for
from src.visibility import compute_visible

# Event keys we request from ECharts click events
REQUESTED_EVENT_KEYS = ['componentType', 'name', 'seriesType', 'dataType', 'value']


def build_render_model(state: EditorState) -> Dict[str, List[Dict[str, Any]]]:
    """
    Build the renderer-facing view of a snapshot.

    Returns:
        {
          'nodes': [{id, label, display_label, x, y, style, selected,
                     collapsed, editing, target_side, source_side}, ...],
          'edges': [{id, source, target}, ...]
        }
    """
    visible = compute_visible(state)
    target_side, source_side = state.direction.target_side, state.direction.source_side

    nodes = []
    for node in visible.nodes:
        style = style_for(node.id, state)
        editing = node.id == state.editing
        nodes.append({
            'id': node.id,
            'label': node.label,
            'display_label': f"{EDITING_MARKER} {node.label}" if editing else node.label,
            'x': node.position.x,
            'y': node.position.y,
            'style': style.as_css(),
            'style_kind': style.kind.value,
            'selected': node.id == state.selected,
            'collapsed': node.id in state.collapsed,
            'editing': editing,
            'target_side': target_side,
            'source_side': source_side,
        })

    edges = [{'id': e.id, 'source': e.source, 'target': e.target} for e in visible.edges]
    return {'nodes': nodes, 'edges': edges}


def build_echart_options(model: Dict[str, List[Dict[str, Any]]],
                         node_width: float = 172.0,
                         node_height: float = 36.0) -> Dict[str, Any]:
    """
    Build ECharts options from a render model.

    Positions in the model are top-left corners; ECharts places symbols by
    their centre, so each node is shifted by half the box.
    """
    e_nodes = []
    for n in model.get('nodes', []):
        style = STYLES[NodeStyle(n['style_kind'])]
        e_nodes.append({
            'id': n['id'],
            'name': n['id'],
            'value': n['label'],
            'x': n['x'] + node_width / 2,
            'y': n['y'] + node_height / 2,
            'symbol': 'roundRect',
            'symbolSize': [node_width, node_height],
            'draggable': True,
            'itemStyle': {
                'color': style.background_color,
                'borderColor': style.border_color,
                'borderWidth': style.border_width,
                'shadowBlur': 4,
                'shadowColor': 'rgba(0,0,0,0.1)',
            },
            'label': {
                'show': True,
                'position': 'inside',
                'formatter': n['display_label'],
                'color': '#222',
                'fontSize': 13,
            },
            'tooltip': {'formatter': n['label']},
        })

    e_links = []
    for e in model.get('edges', []):
        e_links.append({
            'id': e['id'],
            'source': e['source'],
            'target': e['target'],
            'symbol': ['none', 'arrow'],
            'symbolSize': 8,
            'lineStyle': {'color': '#bbb', 'width': 2, 'curveness': 0, 'opacity': 1.0},
            'tooltip': {'show': False},
        })

    return {
        'tooltip': {},
        'animation': True,
        'animationDurationUpdate': 0,  # No animated repositioning on updates
        'series': [{
            'type': 'graph',
            'layout': 'none',
            'roam': True,
            'draggable': True,
            'data': e_nodes,
            'links': e_links,
        }]
    }


def normalize_click_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI chart click payloads into a dictionary for easier parsing."""
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            REQUESTED_EVENT_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(REQUESTED_EVENT_KEYS)))
        }
    if isinstance(raw_payload, str):
        return {'name': raw_payload}
    return {}


def resolve_node_id_from_payload(payload: Dict[str, Any], graph: GraphStore) -> Optional[str]:
    """Return a node_id from a normalized payload by validating it against the graph."""
    if not isinstance(payload, dict):
        return None
    if payload.get('componentType') != 'series':
        return None
    if payload.get('dataType') not in (None, 'node'):
        return None

    node_id = payload.get('name')
    if not node_id:
        return None
    node_id = str(node_id)
    return node_id if graph.has_node(node_id) else None
