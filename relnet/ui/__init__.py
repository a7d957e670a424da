"""Host-facing relationship network view."""

from .view import DrawSurface, RelationshipNetworkView

__all__ = ["DrawSurface", "RelationshipNetworkView"]
