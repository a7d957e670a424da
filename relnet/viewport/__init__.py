"""Viewport transform and pointer interaction."""

from .controller import CURSOR_GRAB, CURSOR_GRABBING, CURSOR_POINTER, EntitySelectedCallback, ViewportController
from .transform import (
    InteractionState,
    ViewportState,
    graph_to_screen,
    hit_test,
    is_visible,
    screen_to_graph,
    visible_nodes,
)

__all__ = [
    "CURSOR_GRAB",
    "CURSOR_GRABBING",
    "CURSOR_POINTER",
    "EntitySelectedCallback",
    "InteractionState",
    "ViewportController",
    "ViewportState",
    "graph_to_screen",
    "hit_test",
    "is_visible",
    "screen_to_graph",
    "visible_nodes",
]
