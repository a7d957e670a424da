"""Tests for deriving nodes and typed links from entity lists."""

from __future__ import annotations

from typing import Iterable, Optional

import pytest

from relnet.contracts import Entity, EntityCategory
from relnet.graph import GraphBuildError, LinkKind, build_graph, derive_links, link_counts


def _entity(
    entity_id: str,
    *,
    score: float = 50,
    employer: Optional[str] = None,
    transactions: Iterable[str] = (),
    category: str = "Executives",
) -> Entity:
    return Entity(
        id=entity_id,
        first_name=entity_id.title(),
        last_name="Tester",
        employer_id=employer,
        category=category,
        affinity_score=score,
        transaction_ids=list(transactions),
    )


def _pairs(links) -> set:
    return {link.pair for link in links}


def test_same_employer_entities_form_complete_triangle() -> None:
    entities = [_entity(name, employer="acme") for name in ("ann", "bob", "cat")]

    graph = build_graph(entities)

    assert graph.link_count == 3
    assert _pairs(graph.links) == {
        frozenset({"ann", "bob"}),
        frozenset({"ann", "cat"}),
        frozenset({"bob", "cat"}),
    }
    assert all(link.kind is LinkKind.SAME_EMPLOYER for link in graph.links)
    assert all(link.strength == 0.8 for link in graph.links)


def test_shared_transaction_with_shared_employer_keeps_first_rule() -> None:
    entities = [
        _entity("ann", employer="acme", transactions=["deal-1"]),
        _entity("bob", employer="acme", transactions=["deal-1"]),
    ]

    links = derive_links(entities)

    assert len(links) == 1
    assert links[0].kind is LinkKind.SAME_EMPLOYER
    assert links[0].strength == 0.8


def test_shared_transaction_links_use_transaction_strength() -> None:
    entities = [
        _entity("ann", transactions=["deal-1", "deal-2"]),
        _entity("bob", transactions=["deal-2"]),
        _entity("cat", transactions=["deal-3"]),
    ]

    links = derive_links(entities)

    assert len(links) == 1
    assert links[0].pair == frozenset({"ann", "bob"})
    assert links[0].kind is LinkKind.SHARED_TRANSACTION
    assert links[0].strength == 0.9


def test_high_affinity_rule_links_only_candidates_above_threshold() -> None:
    entities = [
        _entity("top", score=95),
        _entity("high", score=90),
        _entity("fair", score=76),
        _entity("low", score=50),
    ]

    links = derive_links(entities)

    top_partners = {next(iter(link.pair - {"top"})) for link in links if "top" in link.pair}
    assert top_partners == {"high", "fair"}
    assert not any("low" in link.pair for link in links)
    assert all(link.kind is LinkKind.HIGH_AFFINITY and link.strength == 0.5 for link in links)


def test_high_affinity_window_is_taken_before_skipping_linked_pairs() -> None:
    entities = [
        _entity("anchor", score=90, employer="acme"),
        _entity("colleague", score=85, employer="acme"),
        _entity("third", score=78),
        _entity("fourth", score=77),
    ]

    links = derive_links(entities)

    assert frozenset({"anchor", "third"}) in _pairs(links)
    assert not any("fourth" in link.pair for link in links)


def test_links_never_repeat_pairs_or_self_reference() -> None:
    entities = [
        _entity("ann", score=92, employer="acme", transactions=["d1", "d2"]),
        _entity("bob", score=88, employer="acme", transactions=["d1"]),
        _entity("cat", score=81, employer="globex", transactions=["d2", "d2"]),
        _entity("dan", score=79, employer="globex", transactions=["d1"]),
        _entity("eve", score=40, employer="", transactions=["d2"]),
    ]

    links = derive_links(entities)

    pairs = [link.pair for link in links]
    assert len(pairs) == len(set(pairs))
    assert all(link.source != link.target for link in links)


def test_link_derivation_is_deterministic() -> None:
    entities = [
        _entity("ann", score=92, employer="acme", transactions=["d1"]),
        _entity("bob", score=88, transactions=["d1"]),
        _entity("cat", score=81, employer="acme"),
    ]

    first = derive_links(entities)
    second = derive_links(entities)

    assert first == second


def test_nodes_preserve_input_order_and_scale_radius() -> None:
    entities = [_entity("low", score=0), _entity("mid", score=50), _entity("max", score=100)]

    graph = build_graph(entities)

    assert [node.id for node in graph.nodes] == ["low", "mid", "max"]
    assert [node.radius for node in graph.nodes] == [15.0, 22.5, 30.0]
    assert all((node.vx, node.vy) == (0.0, 0.0) for node in graph.nodes)


def test_empty_entity_list_builds_empty_graph() -> None:
    graph = build_graph([])

    assert graph.nodes == ()
    assert graph.links == ()


def test_duplicate_entity_ids_are_rejected() -> None:
    with pytest.raises(GraphBuildError):
        build_graph([_entity("ann"), _entity("ann")])


def test_unknown_category_falls_back_to_uncategorized() -> None:
    entity = _entity("ann", category="Consultants")

    assert entity.category is EntityCategory.UNCATEGORIZED


def test_link_counts_cover_every_kind() -> None:
    entities = [_entity("ann", employer="acme"), _entity("bob", employer="acme")]

    counts = link_counts(derive_links(entities))

    assert counts == {"same-employer": 1, "shared-transaction": 0, "high-affinity-pair": 0}
