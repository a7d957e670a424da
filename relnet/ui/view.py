"""Interactive relationship network view wiring simulation, viewport and renderer."""
from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import AppConfig, load_config
from ..contracts import Entity, EntityCategory
from ..graph import Link, Node
from ..render import DrawCommand, TextMeasurer, render_frame
from ..simulation import FrameScheduler, SimulationLoop, SimulationState
from ..viewport import EntitySelectedCallback, InteractionState, ViewportController, ViewportState

LOGGER = logging.getLogger(__name__)

DrawSurface = Callable[[List[DrawCommand]], None]


class RelationshipNetworkView:
    """Host-facing component for the relationship network canvas.

    The host supplies a frame scheduler and a drawing surface callback and
    forwards raw pointer and wheel events in surface-relative coordinates.
    Every simulation tick and every interaction change results in exactly
    one render pass delivered to ``surface``.
    """

    def __init__(
        self,
        entities: Sequence[Entity],
        *,
        scheduler: FrameScheduler,
        surface: DrawSurface,
        width: Optional[float] = None,
        height: Optional[float] = None,
        on_entity_selected: Optional[EntitySelectedCallback] = None,
        selected_entity_id: Optional[str] = None,
        highlight_path: Optional[Iterable[str]] = None,
        category_filter: Optional[EntityCategory] = None,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
        measure_text: Optional[TextMeasurer] = None,
    ) -> None:
        self._config = config or load_config()
        self._rng = rng
        self._surface = surface
        self._measure_text = measure_text
        self._entities: Tuple[Entity, ...] = tuple(entities)
        resolved_width = width if width is not None else self._config.layout.canvas_width
        resolved_height = height if height is not None else self._config.layout.canvas_height
        state = SimulationState.create(self._entities, resolved_width, resolved_height, self._config, rng)
        self._loop = SimulationLoop(scheduler, state, on_tick=self._on_tick, config=self._config)
        self._controller = ViewportController(
            self._config,
            on_entity_selected=on_entity_selected,
            interaction=InteractionState(
                selected_node_id=selected_entity_id,
                highlight_path=frozenset(highlight_path or ()),
                category_filter=category_filter,
            ),
        )

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    @property
    def state(self) -> SimulationState:
        return self._loop.state

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._loop.state.nodes

    @property
    def links(self) -> Tuple[Link, ...]:
        return self._loop.state.links

    @property
    def viewport(self) -> ViewportState:
        return self._controller.viewport

    @property
    def interaction(self) -> InteractionState:
        return self._controller.interaction

    @property
    def cursor(self) -> str:
        return self._controller.cursor

    @property
    def running(self) -> bool:
        return self._loop.running

    def mount(self) -> None:
        self._loop.start()
        self.render()

    def unmount(self) -> None:
        self._loop.stop()

    def set_entities(self, entities: Sequence[Entity]) -> None:
        """Replace the entity list, rebuilding the graph and re-seeding the layout."""

        self._entities = tuple(entities)
        state = self._loop.state.replace_entities(self._entities, self._config, self._rng)
        LOGGER.info("Entity list replaced (version=%d, entities=%d)", state.version, len(self._entities))
        self._loop.replace_state(state)
        self._controller.clear_hover()
        self.render()

    def resize(self, width: float, height: float) -> None:
        self._loop.replace_state(self._loop.state.resize(width, height))
        self.render()

    def set_selected_entity(self, entity_id: Optional[str]) -> None:
        self._apply(self._controller.set_selected(entity_id))

    def set_highlight_path(self, entity_ids: Optional[Iterable[str]]) -> None:
        self._apply(self._controller.set_highlight_path(entity_ids))

    def set_category_filter(self, category: Optional[EntityCategory]) -> None:
        self._apply(self._controller.set_category_filter(category, self.nodes))

    def pointer_move(self, x: float, y: float) -> None:
        self._apply(self._controller.pointer_move(x, y, self.nodes))

    def pointer_down(self, x: float, y: float) -> None:
        self._apply(self._controller.pointer_down(x, y, self.nodes))

    def pointer_up(self) -> None:
        self._apply(self._controller.pointer_up())

    def pointer_leave(self) -> None:
        self._apply(self._controller.pointer_leave())

    def wheel(self, delta_y: float) -> None:
        self._apply(self._controller.wheel(delta_y))

    def zoom_in(self) -> None:
        self._apply(self._controller.zoom_in())

    def zoom_out(self) -> None:
        self._apply(self._controller.zoom_out())

    def reset_view(self) -> None:
        self._apply(self._controller.reset_view())

    def render(self) -> List[DrawCommand]:
        """Render the current state and hand the commands to the surface."""

        state = self._loop.state
        commands = render_frame(
            state.nodes,
            state.links,
            self._controller.viewport,
            self._controller.interaction,
            state.width,
            state.height,
            self._config,
            self._measure_text,
        )
        self._surface(commands)
        return commands

    def _apply(self, changed: bool) -> None:
        if changed:
            self.render()

    def _on_tick(self, state: SimulationState) -> None:
        self.render()
