"""Viewport transform, visibility filtering and hit-testing."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..contracts import EntityCategory
from ..graph import Node


@dataclass(frozen=True)
class ViewportState:
    """Zoom/pan transform mapping graph space onto screen pixels."""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    is_dragging: bool = False
    drag_anchor: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class InteractionState:
    """Hover, selection, highlighted route and category filter."""

    hovered_node_id: Optional[str] = None
    selected_node_id: Optional[str] = None
    highlight_path: FrozenSet[str] = field(default_factory=frozenset)
    category_filter: Optional[EntityCategory] = None


def screen_to_graph(viewport: ViewportState, screen_x: float, screen_y: float) -> Tuple[float, float]:
    return (
        (screen_x - viewport.pan_x) / viewport.zoom,
        (screen_y - viewport.pan_y) / viewport.zoom,
    )


def graph_to_screen(viewport: ViewportState, graph_x: float, graph_y: float) -> Tuple[float, float]:
    return (
        graph_x * viewport.zoom + viewport.pan_x,
        graph_y * viewport.zoom + viewport.pan_y,
    )


def is_visible(node: Node, category_filter: Optional[EntityCategory]) -> bool:
    return category_filter is None or node.entity.category == category_filter


def visible_nodes(nodes: Iterable[Node], category_filter: Optional[EntityCategory]) -> List[Node]:
    """Return the nodes drawn (and hit-testable) under ``category_filter``."""

    return [node for node in nodes if is_visible(node, category_filter)]


def hit_test(
    nodes: Sequence[Node],
    graph_x: float,
    graph_y: float,
    category_filter: Optional[EntityCategory] = None,
) -> Optional[Node]:
    """Return the nearest visible node containing the graph-space point.

    A node contains the point when the distance to its centre is at most its
    radius. Ties go to the node drawn first. Linear in the node count.
    """

    best: Optional[Node] = None
    best_distance = math.inf
    for node in nodes:
        if not is_visible(node, category_filter):
            continue
        distance = math.hypot(node.x - graph_x, node.y - graph_y)
        if distance <= node.radius and distance < best_distance:
            best = node
            best_distance = distance
    return best
