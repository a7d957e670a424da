"""Pure force-directed integrator over immutable simulation snapshots."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..config import AppConfig, SimulationConfig, load_config
from ..contracts import Entity
from ..graph import Link, Node, build_graph
from ..layout import initialize_layout

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationState:
    """One snapshot of node positions and velocities for a graph version.

    ``version`` changes only when the entity list is replaced; ``tick_count``
    advances once per integration step.
    """

    nodes: Tuple[Node, ...]
    links: Tuple[Link, ...]
    width: float
    height: float
    version: int = 0
    tick_count: int = 0

    @classmethod
    def create(
        cls,
        entities: Sequence[Entity],
        width: float,
        height: float,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
        *,
        version: int = 0,
    ) -> "SimulationState":
        """Build the graph for ``entities`` and seed its clustered layout."""

        resolved_config = config or load_config()
        graph = build_graph(entities, resolved_config)
        nodes = initialize_layout(graph.nodes, width, height, resolved_config, rng)
        return cls(nodes=nodes, links=graph.links, width=width, height=height, version=version)

    def replace_entities(
        self,
        entities: Sequence[Entity],
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> "SimulationState":
        """Discard the current graph and start a new version from a fresh layout."""

        return SimulationState.create(
            entities,
            self.width,
            self.height,
            config,
            rng,
            version=self.version + 1,
        )

    def resize(self, width: float, height: float) -> "SimulationState":
        return replace(self, width=width, height=height)

    @property
    def node_index(self) -> Dict[str, int]:
        return {node.id: index for index, node in enumerate(self.nodes)}

    def node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def _repulsion(positions: np.ndarray, radii: np.ndarray, config: SimulationConfig) -> np.ndarray:
    """Accumulate pairwise overlap repulsion; quadratic in the node count."""

    deltas = positions[:, None, :] - positions[None, :, :]
    distances = np.sqrt(np.sum(deltas * deltas, axis=-1))
    distances = np.where(distances == 0.0, config.coincident_distance, distances)
    min_distances = radii[:, None] + radii[None, :] + config.repulsion_padding
    overlapping = distances < min_distances
    np.fill_diagonal(overlapping, False)
    magnitude = np.where(
        overlapping,
        (min_distances - distances) / distances * config.repulsion_strength,
        0.0,
    )
    return np.sum(deltas * (magnitude / distances)[..., None], axis=1)


def _link_forces(
    positions: np.ndarray,
    node_index: Dict[str, int],
    links: Sequence[Link],
    config: SimulationConfig,
) -> np.ndarray:
    """Spring forces pulling linked nodes towards their rest length."""

    forces = np.zeros_like(positions)
    skipped = 0
    for link in links:
        source = node_index.get(link.source)
        target = node_index.get(link.target)
        if source is None or target is None:
            skipped += 1
            continue
        delta = positions[target] - positions[source]
        distance = math.hypot(delta[0], delta[1]) or config.coincident_distance
        rest_length = config.link_rest_length + (1.0 - link.strength) * config.link_rest_slack
        force = (distance - rest_length) * config.link_stiffness * link.strength
        pull = delta / distance * force
        forces[source] += pull
        forces[target] -= pull
    if skipped:
        LOGGER.debug("Skipped %d links with endpoints outside the node set", skipped)
    return forces


def tick(state: SimulationState, dt: float = 1.0, config: Optional[AppConfig] = None) -> SimulationState:
    """Advance the simulation by one step.

    Velocities accumulate centering, repulsion and link forces, are damped,
    and then move the nodes. Positions are clamped so every node stays inside
    ``[radius, dimension - radius]`` on both axes.

    Args:
        state: Snapshot to advance; it is not modified.
        dt: Step size relative to one display frame.
        config: Application configuration; if omitted the default config is loaded.

    Returns:
        SimulationState: New snapshot with updated nodes and ``tick_count + 1``.
    """

    if not state.nodes:
        return replace(state, tick_count=state.tick_count + 1)

    sim = (config or load_config()).simulation
    positions = np.array([(node.x, node.y) for node in state.nodes], dtype=float)
    velocities = np.array([(node.vx, node.vy) for node in state.nodes], dtype=float)
    radii = np.array([node.radius for node in state.nodes], dtype=float)
    centre = np.array([state.width / 2.0, state.height / 2.0])

    velocities += (centre - positions) * sim.centering_strength * dt
    velocities += _repulsion(positions, radii, sim) * dt
    velocities += _link_forces(positions, state.node_index, state.links, sim) * dt
    velocities *= sim.damping**dt
    positions = positions + velocities * dt

    positions[:, 0] = np.maximum(radii, np.minimum(state.width - radii, positions[:, 0]))
    positions[:, 1] = np.maximum(radii, np.minimum(state.height - radii, positions[:, 1]))

    nodes = tuple(
        replace(
            node,
            x=float(positions[index, 0]),
            y=float(positions[index, 1]),
            vx=float(velocities[index, 0]),
            vy=float(velocities[index, 1]),
        )
        for index, node in enumerate(state.nodes)
    )
    return replace(state, nodes=nodes, tick_count=state.tick_count + 1)


def max_speed(state: SimulationState) -> float:
    """Return the largest node speed in the snapshot (0.0 when empty)."""

    return max((math.hypot(node.vx, node.vy) for node in state.nodes), default=0.0)


def is_settled(state: SimulationState, threshold: float) -> bool:
    """Return whether every node moves slower than ``threshold`` per tick."""

    return max_speed(state) < threshold
