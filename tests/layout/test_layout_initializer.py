"""Tests for the clustered initial layout."""

from __future__ import annotations

import math
import random

import pytest

from relnet.contracts import Entity, EntityCategory
from relnet.graph import build_graph
from relnet.layout import cluster_centres, initialize_layout


def _entities():
    categories = ["Bankers", "Bankers", "Lawyers", "Bankers", "Founders", "Lawyers"]
    return [
        Entity(id=f"e{index}", first_name="E", last_name=str(index), category=category, affinity_score=60)
        for index, category in enumerate(categories)
    ]


def test_cluster_centres_spread_evenly_around_surface_centre() -> None:
    centres = cluster_centres([EntityCategory.BANKERS, EntityCategory.LAWYERS], 800, 500, 0.3)

    assert centres[EntityCategory.BANKERS] == pytest.approx((550.0, 250.0))
    assert centres[EntityCategory.LAWYERS] == pytest.approx((250.0, 250.0))


def test_nodes_are_placed_within_sub_radius_band_of_their_cluster() -> None:
    graph = build_graph(_entities())

    placed = initialize_layout(graph.nodes, 800, 500, rng=random.Random(3))

    centres = cluster_centres(
        [EntityCategory.BANKERS, EntityCategory.LAWYERS, EntityCategory.FOUNDERS],
        800,
        500,
        0.3,
    )
    for node in placed:
        centre_x, centre_y = centres[node.entity.category]
        offset = math.hypot(node.x - centre_x, node.y - centre_y)
        assert 30.0 <= offset <= 80.0


def test_layout_preserves_order_and_resets_velocity() -> None:
    graph = build_graph(_entities())

    placed = initialize_layout(graph.nodes, 800, 500, rng=random.Random(1))

    assert [node.id for node in placed] == [node.id for node in graph.nodes]
    assert all((node.vx, node.vy) == (0.0, 0.0) for node in placed)
    assert [node.radius for node in placed] == [node.radius for node in graph.nodes]


def test_seeded_layout_is_reproducible() -> None:
    graph = build_graph(_entities())

    first = initialize_layout(graph.nodes, 800, 500, rng=random.Random(42))
    second = initialize_layout(graph.nodes, 800, 500, rng=random.Random(42))

    assert [(node.x, node.y) for node in first] == [(node.x, node.y) for node in second]


def test_empty_node_set_yields_empty_layout() -> None:
    assert initialize_layout((), 800, 500) == ()
