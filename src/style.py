"""
Node styling.

style_for() maps a node to exactly one of three styles. Selected wins over
collapsed, collapsed wins over default. Nothing is merged at render time.
"""

from dataclasses import dataclass
from enum import Enum

from src.editor_state import EditorState


class NodeStyle(str, Enum):
    DEFAULT = "default"
    SELECTED = "selected"
    COLLAPSED = "collapsed"


@dataclass(frozen=True)
class StyleDescriptor:
    kind: NodeStyle
    background_color: str
    border_color: str
    border_width: int
    padding: int = 15
    border_radius: int = 8
    shadow: str = "0 2px 4px rgba(0,0,0,0.1)"

    @property
    def border(self) -> str:
        return f"{self.border_width}px solid {self.border_color}"

    def as_css(self) -> dict:
        return {
            'backgroundColor': self.background_color,
            'border': self.border,
            'padding': self.padding,
            'borderRadius': self.border_radius,
            'boxShadow': self.shadow,
        }


STYLES = {
    NodeStyle.DEFAULT: StyleDescriptor(NodeStyle.DEFAULT, background_color='#f0f0f0', border_color='#ddd', border_width=1),
    NodeStyle.SELECTED: StyleDescriptor(NodeStyle.SELECTED, background_color='#e6f7ff', border_color='#1890ff', border_width=3),
    NodeStyle.COLLAPSED: StyleDescriptor(NodeStyle.COLLAPSED, background_color='#e0e0e0', border_color='#ddd', border_width=1),
}


def style_kind(node_id: str, state: EditorState) -> NodeStyle:
    if node_id == state.selected:
        return NodeStyle.SELECTED
    if node_id in state.collapsed:
        return NodeStyle.COLLAPSED
    return NodeStyle.DEFAULT


def style_for(node_id: str, state: EditorState) -> StyleDescriptor:
    return STYLES[style_kind(node_id, state)]
