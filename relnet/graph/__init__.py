"""Graph derivation from entity lists."""

from .builder import (
    BuiltGraph,
    GraphBuildError,
    Link,
    LinkKind,
    Node,
    build_graph,
    derive_links,
    link_counts,
    node_radius,
)

__all__ = [
    "BuiltGraph",
    "GraphBuildError",
    "Link",
    "LinkKind",
    "Node",
    "build_graph",
    "derive_links",
    "link_counts",
    "node_radius",
]
