"""Seed node positions in per-category clusters around the surface centre."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import AppConfig, load_config
from ..contracts import EntityCategory
from ..graph import Node

LOGGER = logging.getLogger(__name__)


def cluster_centres(
    categories: Sequence[EntityCategory],
    width: float,
    height: float,
    radius_ratio: float,
) -> Dict[EntityCategory, Tuple[float, float]]:
    """Spread one cluster centre per category evenly around a circle.

    Args:
        categories: Categories in the order their clusters should be placed.
        width: Drawing surface width.
        height: Drawing surface height.
        radius_ratio: Cluster-centre distance as a fraction of ``min(width, height)``.

    Returns:
        Dict[EntityCategory, Tuple[float, float]]: Centre coordinates keyed by category.
    """

    if not categories:
        return {}
    angle_step = 2 * math.pi / len(categories)
    cluster_radius = min(width, height) * radius_ratio
    centre_x = width / 2.0
    centre_y = height / 2.0
    return {
        category: (
            centre_x + math.cos(index * angle_step) * cluster_radius,
            centre_y + math.sin(index * angle_step) * cluster_radius,
        )
        for index, category in enumerate(categories)
    }


def initialize_layout(
    nodes: Sequence[Node],
    width: float,
    height: float,
    config: Optional[AppConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Node, ...]:
    """Return nodes placed in randomised clusters grouped by entity category.

    The seed only has to avoid total overlap; the force simulation performs
    the real layout work afterwards.

    Args:
        nodes: Unplaced nodes from the graph builder.
        width: Drawing surface width.
        height: Drawing surface height.
        config: Application configuration; if omitted the default config is loaded.
        rng: Random source for sub-radius jitter; a fresh one is used if omitted.

    Returns:
        Tuple[Node, ...]: Placed nodes in input order with zeroed velocities.
    """

    if not nodes:
        return ()
    layout = (config or load_config()).layout
    generator = rng or random.Random()

    groups: Dict[EntityCategory, List[int]] = {}
    for index, node in enumerate(nodes):
        groups.setdefault(node.entity.category, []).append(index)
    centres = cluster_centres(list(groups), width, height, layout.cluster_radius_ratio)

    placed: List[Optional[Node]] = [None] * len(nodes)
    for category, members in groups.items():
        centre_x, centre_y = centres[category]
        for position, node_index in enumerate(members):
            sub_angle = position / len(members) * 2 * math.pi
            sub_radius = layout.sub_radius_min + generator.random() * layout.sub_radius_spread
            placed[node_index] = replace(
                nodes[node_index],
                x=centre_x + math.cos(sub_angle) * sub_radius,
                y=centre_y + math.sin(sub_angle) * sub_radius,
                vx=0.0,
                vy=0.0,
            )

    LOGGER.debug("Seeded layout for %d nodes across %d clusters", len(nodes), len(groups))
    return tuple(node for node in placed if node is not None)
