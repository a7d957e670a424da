"""Initial node placement."""

from .initializer import cluster_centres, initialize_layout

__all__ = ["cluster_centres", "initialize_layout"]
