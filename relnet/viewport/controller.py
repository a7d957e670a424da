"""Pointer, wheel and toolbar handling for the network canvas."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence

from ..config import AppConfig, load_config
from ..contracts import Entity, EntityCategory
from ..graph import Node
from .transform import InteractionState, ViewportState, hit_test, is_visible, screen_to_graph

LOGGER = logging.getLogger(__name__)

EntitySelectedCallback = Callable[[Entity], None]

CURSOR_POINTER = "pointer"
CURSOR_GRAB = "grab"
CURSOR_GRABBING = "grabbing"


class ViewportController:
    """Own viewport and interaction state and apply raw surface events to it.

    Every event method returns ``True`` when it changed any state, so callers
    know a new render pass is due.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        *,
        on_entity_selected: Optional[EntitySelectedCallback] = None,
        interaction: Optional[InteractionState] = None,
    ) -> None:
        self._config = (config or load_config()).viewport
        self._on_entity_selected = on_entity_selected
        self._viewport = ViewportState()
        self._interaction = interaction or InteractionState()

    @property
    def viewport(self) -> ViewportState:
        return self._viewport

    @property
    def interaction(self) -> InteractionState:
        return self._interaction

    @property
    def cursor(self) -> str:
        if self._viewport.is_dragging:
            return CURSOR_GRABBING
        if self._interaction.hovered_node_id is not None:
            return CURSOR_POINTER
        return CURSOR_GRAB

    def pointer_move(self, screen_x: float, screen_y: float, nodes: Sequence[Node]) -> bool:
        """Pan while dragging, otherwise refresh the hovered node."""

        if self._viewport.is_dragging and self._viewport.drag_anchor is not None:
            anchor_x, anchor_y = self._viewport.drag_anchor
            return self._set_viewport(replace(self._viewport, pan_x=screen_x - anchor_x, pan_y=screen_y - anchor_y))
        return self._update_hover(screen_x, screen_y, nodes)

    def pointer_down(self, screen_x: float, screen_y: float, nodes: Sequence[Node]) -> bool:
        """Select the node under the pointer, or start a pan drag on empty space."""

        changed = self._update_hover(screen_x, screen_y, nodes)
        hovered_id = self._interaction.hovered_node_id
        if hovered_id is not None:
            node = next((candidate for candidate in nodes if candidate.id == hovered_id), None)
            if node is not None and self._on_entity_selected is not None:
                LOGGER.debug("Node %s selected", hovered_id)
                self._on_entity_selected(node.entity)
            return changed
        anchor = (screen_x - self._viewport.pan_x, screen_y - self._viewport.pan_y)
        self._set_viewport(replace(self._viewport, is_dragging=True, drag_anchor=anchor))
        return True

    def pointer_up(self) -> bool:
        if not self._viewport.is_dragging:
            return False
        return self._set_viewport(replace(self._viewport, is_dragging=False, drag_anchor=None))

    def pointer_leave(self) -> bool:
        return self.pointer_up()

    def wheel(self, delta_y: float) -> bool:
        """Zoom out for positive ``delta_y`` (scroll down), in otherwise."""

        factor = self._config.wheel_zoom_out if delta_y > 0 else self._config.wheel_zoom_in
        return self._scale_zoom(factor)

    def zoom_in(self) -> bool:
        return self._scale_zoom(self._config.button_zoom_in)

    def zoom_out(self) -> bool:
        return self._scale_zoom(self._config.button_zoom_out)

    def reset_view(self) -> bool:
        return self._set_viewport(replace(self._viewport, zoom=1.0, pan_x=0.0, pan_y=0.0))

    def set_category_filter(self, category: Optional[EntityCategory], nodes: Iterable[Node] = ()) -> bool:
        """Restrict drawn and hit-testable nodes; clears a hover that becomes hidden."""

        interaction = replace(self._interaction, category_filter=category)
        hovered_id = interaction.hovered_node_id
        if hovered_id is not None:
            hovered = next((node for node in nodes if node.id == hovered_id), None)
            if hovered is None or not is_visible(hovered, category):
                interaction = replace(interaction, hovered_node_id=None)
        return self._set_interaction(interaction)

    def set_selected(self, node_id: Optional[str]) -> bool:
        return self._set_interaction(replace(self._interaction, selected_node_id=node_id))

    def set_highlight_path(self, node_ids: Optional[Iterable[str]]) -> bool:
        return self._set_interaction(replace(self._interaction, highlight_path=frozenset(node_ids or ())))

    def clear_hover(self) -> bool:
        return self._set_interaction(replace(self._interaction, hovered_node_id=None))

    def _update_hover(self, screen_x: float, screen_y: float, nodes: Sequence[Node]) -> bool:
        graph_x, graph_y = screen_to_graph(self._viewport, screen_x, screen_y)
        hovered = hit_test(nodes, graph_x, graph_y, self._interaction.category_filter)
        hovered_id = hovered.id if hovered is not None else None
        return self._set_interaction(replace(self._interaction, hovered_node_id=hovered_id))

    def _scale_zoom(self, factor: float) -> bool:
        zoom = self._config.clamp_zoom(self._viewport.zoom * factor)
        return self._set_viewport(replace(self._viewport, zoom=zoom))

    def _set_viewport(self, viewport: ViewportState) -> bool:
        if viewport == self._viewport:
            return False
        self._viewport = viewport
        return True

    def _set_interaction(self, interaction: InteractionState) -> bool:
        if interaction == self._interaction:
            return False
        self._interaction = interaction
        return True
