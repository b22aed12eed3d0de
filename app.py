"""
Main NiceGUI application for Mindflow.

Renders the visible part of the mind map with ui.echart, forwards keyboard
and pointer input to the Editor, and provides the toolbar commands
(remove last node, layout top-to-bottom / left-to-right, fit view).
"""

import logging
import random

from dotenv import load_dotenv
from nicegui import ui

load_dotenv()

from src.chart_builder import REQUESTED_EVENT_KEYS, build_echart_options, build_render_model
from src.config import get_editor_config
from src.edit.constants import KEY_ENTER, KEY_ESCAPE, TAB_GUARD_SCRIPT, TOOLBAR_BUTTON_PROPS
from src.edit.handlers import setup_edit_handlers
from src.editor import Editor

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("mindflow")

config = get_editor_config()


@ui.page('/')
def main_page():
    editor = Editor(config=config, rng=random.Random())
    logger.info(f"New session with root node {editor.state.graph.nodes[0].id}")
    state = {
        'chart': None,
        'is_ctrl_pressed': False,
        'connect_source': None,
        'rendered_editing': editor.state.editing,
    }

    def get_current_options():
        model = build_render_model(editor.state)
        return build_echart_options(model, node_width=config.node_width, node_height=config.node_height)

    def refresh_chart_ui():
        chart = state['chart']
        if chart is not None:
            options = get_current_options()
            chart.options['series'][0]['data'] = options['series'][0]['data']
            chart.options['series'][0]['links'] = options['series'][0]['links']
            chart.update()
        # Rebuild the label input only when the edit target changes, so typing keeps focus
        if state['rendered_editing'] != editor.state.editing:
            state['rendered_editing'] = editor.state.editing
            label_editor.refresh()

    handlers = setup_edit_handlers(state=state, editor=editor, refresh_chart_ui=refresh_chart_ui)

    def do_layout(direction: str):
        editor.layout(direction)
        ui.notify(f'Layout {direction} applied', position='bottom', timeout=800)

    def do_remove():
        before = len(editor.state.graph.nodes)
        editor.remove_last_node()
        if len(editor.state.graph.nodes) == before:
            ui.notify('The last remaining node cannot be removed', type='warning', position='bottom')

    def do_fit_view():
        chart = state['chart']
        if chart is not None:
            ui.run_javascript(f"getElement({chart.id}).chart.dispatchAction({{type: 'restore'}});")

    # Global keyboard handler (ignored while the label input has focus).
    # Tab is a command key here, so its focus move is cancelled client-side.
    ui.add_body_html(TAB_GUARD_SCRIPT)
    ui.keyboard(on_key=handlers['handle_keyboard'])

    # --- Layout Construction ---

    # 1. Full Screen Chart
    state['chart'] = ui.echart(get_current_options())
    state['chart'].style('width: 100vw; height: 100vh; position: absolute; top: 0; left: 0; z-index: 0;')
    state['chart'].on('componentClick', handlers['handle_chart_click'], REQUESTED_EVENT_KEYS)
    state['chart'].on('chart:dblclick', handlers['handle_chart_dblclick'], REQUESTED_EVENT_KEYS)
    state['chart'].on('chart:mouseup', handlers['handle_mouse_up'], REQUESTED_EVENT_KEYS)

    # 2. Floating Toolbar
    with ui.row().classes('fixed top-4 left-4 z-10 bg-white/90 p-3 rounded shadow-md items-center gap-2 border'):
        ui.icon('account_tree', size='md').classes('text-primary')
        ui.label('Mindflow').classes('text-lg font-bold leading-none')
        ui.separator().props('vertical')
        ui.button('Remove Node', on_click=do_remove).props(TOOLBAR_BUTTON_PROPS)
        ui.button('Layout Top-Bottom', on_click=lambda: do_layout('TB')).props(TOOLBAR_BUTTON_PROPS)
        ui.button('Layout Left-Right', on_click=lambda: do_layout('LR')).props(TOOLBAR_BUTTON_PROPS)
        ui.button('Fit View', on_click=do_fit_view).props(TOOLBAR_BUTTON_PROPS)

    # 3. Inline label editor (shown while a node is in edit mode)
    @ui.refreshable
    def label_editor():
        node_id = editor.state.editing
        node = editor.state.graph.get_node(node_id)
        if node is None:
            return
        with ui.card().classes('fixed bottom-6 left-1/2 -translate-x-1/2 z-20 shadow-xl'):
            ui.label(f'Editing node {node.id}').classes('text-xs text-gray-500')
            label_input = ui.input(
                value=node.label,
                on_change=lambda e, nid=node.id: handlers['handle_label_change'](nid, e.value),
            ).props('autofocus dense outlined').style('font-size: 1rem; min-width: 260px')
            label_input.on('blur', lambda: handlers['handle_label_blur']())
            label_input.on('keydown.enter', lambda: handlers['handle_label_key'](KEY_ENTER))
            label_input.on('keydown.esc', lambda: handlers['handle_label_key'](KEY_ESCAPE))

    label_editor()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Mindflow',
        port=config.port,
    )
