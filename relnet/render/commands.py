"""Backend-agnostic drawing primitives emitted by the renderer."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Optional


@dataclass(frozen=True)
class DrawCommand:
    """Base class for draw commands; ``op`` names the primitive."""

    op: ClassVar[str] = "noop"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"op": self.op}
        payload.update(asdict(self))
        return payload


@dataclass(frozen=True)
class Clear(DrawCommand):
    op: ClassVar[str] = "clear"

    width: float
    height: float


@dataclass(frozen=True)
class PushTransform(DrawCommand):
    """Save state, translate by the pan offset, then scale by zoom."""

    op: ClassVar[str] = "push_transform"

    translate_x: float
    translate_y: float
    scale: float


@dataclass(frozen=True)
class PopTransform(DrawCommand):
    op: ClassVar[str] = "pop_transform"


@dataclass(frozen=True)
class Line(DrawCommand):
    op: ClassVar[str] = "line"

    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    line_width: float


@dataclass(frozen=True)
class Circle(DrawCommand):
    op: ClassVar[str] = "circle"

    x: float
    y: float
    radius: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = 0.0


@dataclass(frozen=True)
class Arc(DrawCommand):
    """Stroked arc; angles in radians, clockwise from the positive x axis."""

    op: ClassVar[str] = "arc"

    x: float
    y: float
    radius: float
    start_angle: float
    end_angle: float
    stroke: str
    line_width: float


@dataclass(frozen=True)
class Text(DrawCommand):
    op: ClassVar[str] = "text"

    x: float
    y: float
    text: str
    font: str
    fill: str
    align: str = "left"
    baseline: str = "alphabetic"


@dataclass(frozen=True)
class RoundedRect(DrawCommand):
    op: ClassVar[str] = "rounded_rect"

    x: float
    y: float
    width: float
    height: float
    corner_radius: float
    fill: str
