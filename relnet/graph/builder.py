"""Derive network nodes and typed links from a flat entity list."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from ..config import AppConfig, LayoutConfig, load_config
from ..contracts import Entity

LOGGER = logging.getLogger(__name__)


class GraphBuildError(ValueError):
    """Raised when the entity list violates the builder's input constraints."""


class LinkKind(str, Enum):
    """Rule that produced a link."""

    SAME_EMPLOYER = "same-employer"
    SHARED_TRANSACTION = "shared-transaction"
    HIGH_AFFINITY = "high-affinity-pair"


@dataclass(frozen=True)
class Node:
    """Simulated circle representing one entity."""

    id: str
    entity: Entity
    radius: float
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0


@dataclass(frozen=True)
class Link:
    """Undirected, weighted relation between two nodes."""

    source: str
    target: str
    strength: float
    kind: LinkKind

    @property
    def pair(self) -> FrozenSet[str]:
        return frozenset((self.source, self.target))


@dataclass(frozen=True)
class BuiltGraph:
    """Nodes and links derived from one entity list snapshot."""

    nodes: Tuple[Node, ...]
    links: Tuple[Link, ...]

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def link_count(self) -> int:
        return len(self.links)


def node_radius(affinity_score: float, layout: LayoutConfig) -> float:
    """Map an affinity score in ``[0, 100]`` onto the configured radius band."""

    span = layout.node_radius_max - layout.node_radius_min
    return layout.node_radius_min + (affinity_score / 100.0) * span


class _LinkAccumulator:
    """Collect links while rejecting self links and repeated unordered pairs."""

    def __init__(self) -> None:
        self._links: List[Link] = []
        self._pairs: Set[FrozenSet[str]] = set()

    def add(self, source: str, target: str, strength: float, kind: LinkKind) -> bool:
        if source == target:
            return False
        pair = frozenset((source, target))
        if pair in self._pairs:
            return False
        self._pairs.add(pair)
        self._links.append(Link(source=source, target=target, strength=strength, kind=kind))
        return True

    def add_group_pairs(self, ids: Sequence[str], strength: float, kind: LinkKind) -> None:
        for index, source in enumerate(ids):
            for target in ids[index + 1 :]:
                self.add(source, target, strength, kind)

    @property
    def links(self) -> Tuple[Link, ...]:
        return tuple(self._links)


def _group_by_employer(entities: Sequence[Entity]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for entity in entities:
        if entity.employer_id:
            groups.setdefault(entity.employer_id, []).append(entity.id)
    return groups


def _group_by_transaction(entities: Sequence[Entity]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for entity in entities:
        for transaction_id in entity.transaction_ids:
            members = groups.setdefault(transaction_id, [])
            if entity.id not in members:
                members.append(entity.id)
    return groups


def _ensure_unique_ids(entities: Sequence[Entity]) -> None:
    seen: Set[str] = set()
    duplicates: List[str] = []
    for entity in entities:
        if entity.id in seen:
            duplicates.append(entity.id)
        seen.add(entity.id)
    if duplicates:
        LOGGER.error("Entity list contains duplicate ids: %s", ", ".join(sorted(set(duplicates))))
        raise GraphBuildError(f"Duplicate entity ids: {sorted(set(duplicates))}")


def derive_links(entities: Sequence[Entity], config: Optional[AppConfig] = None) -> Tuple[Link, ...]:
    """Derive links using the employer, transaction and affinity rules in order.

    Each rule skips pairs linked by an earlier rule, so the first derived kind
    and strength win for any unordered pair.

    Args:
        entities: Entities in display order; ids must be unique.
        config: Application configuration; if omitted the default config is loaded.

    Returns:
        Tuple[Link, ...]: Deterministic link set for the given input order.
    """

    graph_config = (config or load_config()).graph
    accumulator = _LinkAccumulator()

    for ids in _group_by_employer(entities).values():
        accumulator.add_group_pairs(ids, graph_config.employer_link_strength, LinkKind.SAME_EMPLOYER)

    for ids in _group_by_transaction(entities).values():
        accumulator.add_group_pairs(ids, graph_config.transaction_link_strength, LinkKind.SHARED_TRANSACTION)

    for entity in entities:
        if entity.affinity_score < graph_config.affinity_anchor_threshold:
            continue
        candidates = [
            other
            for other in entities
            if other.id != entity.id and other.affinity_score >= graph_config.affinity_candidate_threshold
        ]
        # The candidate window is fixed before already-linked pairs are skipped.
        for other in candidates[: graph_config.affinity_max_links]:
            accumulator.add(entity.id, other.id, graph_config.affinity_link_strength, LinkKind.HIGH_AFFINITY)

    return accumulator.links


def link_counts(links: Iterable[Link]) -> Dict[str, int]:
    """Return the number of links per kind, including kinds with no links."""

    counts = Counter(link.kind for link in links)
    return {kind.value: counts.get(kind, 0) for kind in LinkKind}


def build_graph(entities: Sequence[Entity], config: Optional[AppConfig] = None) -> BuiltGraph:
    """Build the node and link sets for an entity list.

    Args:
        entities: Entities in display order.
        config: Application configuration; if omitted the default config is loaded.

    Returns:
        BuiltGraph: One node per entity (input order, unplaced) and the derived links.

    Raises:
        GraphBuildError: If two entities share an id.
    """

    resolved_config = config or load_config()
    entity_list = list(entities)
    _ensure_unique_ids(entity_list)
    nodes = tuple(
        Node(id=entity.id, entity=entity, radius=node_radius(entity.affinity_score, resolved_config.layout))
        for entity in entity_list
    )
    links = derive_links(entity_list, resolved_config)
    LOGGER.info(
        "Built relationship graph with %d nodes and %d links (%s)",
        len(nodes),
        len(links),
        ", ".join(f"{kind}={count}" for kind, count in link_counts(links).items()),
    )
    return BuiltGraph(nodes=nodes, links=links)
