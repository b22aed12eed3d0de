"""
Edit Handlers - NiceGUI event handlers for app.py

This module keeps the event plumbing (keyboard, chart clicks, drag release,
label input) out of app.py so the main application file stays focused on
layout. Every handler translates a raw UI event into one Editor call.
"""

import json
import logging
from typing import Any, Callable, Dict

from nicegui import ui

from src.chart_builder import normalize_click_payload, resolve_node_id_from_payload
from src.editor import Editor

logger = logging.getLogger(__name__)


def setup_edit_handlers(
    state: Dict[str, Any],
    editor: Editor,
    refresh_chart_ui: Callable,
):
    """
    Set up all mind map event handlers.

    Args:
        state: App state dictionary (holds 'chart', 'is_ctrl_pressed', 'connect_source')
        editor: Editor instance owning the mind map snapshot
        refresh_chart_ui: Function to redraw the chart from the current snapshot

    Returns:
        Dict with handler functions for binding to UI events
    """

    editor.set_on_state_change(lambda _snapshot: refresh_chart_ui())

    def node_id_from_event(event) -> Any:
        raw = event.args if hasattr(event, 'args') else event
        payload = normalize_click_payload(raw)
        try:
            return resolve_node_id_from_payload(payload, editor.state.graph)
        except Exception as e:
            logger.warning(f"Error parsing chart event payload {raw!r}: {e}")
            return None

    def handle_keyboard(e):
        """Forward key presses to the command dispatcher; track Ctrl for connect mode."""
        key = e.key.name if hasattr(e.key, 'name') else str(e.key)
        if key == 'Control':
            state['is_ctrl_pressed'] = bool(e.action.keydown)
            if not state['is_ctrl_pressed']:
                state['connect_source'] = None
            return
        if not e.action.keydown or e.action.repeat:
            return
        editor.press_key(key)

    def handle_chart_click(event):
        node_id = node_id_from_event(event)
        if not node_id:
            return

        if state.get('is_ctrl_pressed'):
            source = state.get('connect_source')
            if source is None:
                state['connect_source'] = node_id
                ui.notify(f'Connect from node {node_id}: Ctrl+click the target', position='bottom', timeout=1000, color='info')
            else:
                state['connect_source'] = None
                editor.connect_nodes(source, node_id)
            return

        editor.click_node(node_id)

    def handle_chart_dblclick(event):
        node_id = node_id_from_event(event)
        if node_id:
            editor.double_click_node(node_id)

    async def handle_mouse_up(event):
        """Write a dragged node's final position back into the graph."""
        node_id = node_id_from_event(event)
        chart = state.get('chart')
        if not node_id or chart is None:
            return
        try:
            layout = await ui.run_javascript(f'''
                const chart = getElement({chart.id}).chart;
                const graph = chart.getModel().getSeriesByIndex(0).getGraph();
                const node = graph.getNodeById({json.dumps(node_id)});
                return node ? node.getLayout() : null;
            ''')
        except Exception as e:
            logger.warning(f"Could not read position of dragged node {node_id}: {e}")
            return
        if not layout:
            return
        config = editor.config
        editor.drag_end(node_id, layout[0] - config.node_width / 2, layout[1] - config.node_height / 2)

    def handle_label_change(node_id: str, value: str):
        editor.editor_input(node_id, value or '')

    def handle_label_key(key: str):
        editor.editor_key(key)

    def handle_label_blur():
        editor.editor_blur()

    return {
        'handle_keyboard': handle_keyboard,
        'handle_chart_click': handle_chart_click,
        'handle_chart_dblclick': handle_chart_dblclick,
        'handle_mouse_up': handle_mouse_up,
        'handle_label_change': handle_label_change,
        'handle_label_key': handle_label_key,
        'handle_label_blur': handle_label_blur,
    }
