"""Draw command rendering for the relationship network."""

from .commands import Arc, Circle, Clear, DrawCommand, Line, PopTransform, PushTransform, RoundedRect, Text
from .palette import CATEGORY_COLORS, LINK_COLORS, CategoryColors, LegendEntry, category_palette, legend_entries
from .renderer import TextMeasurer, estimate_text_width, render_frame

__all__ = [
    "Arc",
    "CATEGORY_COLORS",
    "CategoryColors",
    "Circle",
    "Clear",
    "DrawCommand",
    "LINK_COLORS",
    "LegendEntry",
    "Line",
    "PopTransform",
    "PushTransform",
    "RoundedRect",
    "Text",
    "TextMeasurer",
    "category_palette",
    "estimate_text_width",
    "legend_entries",
    "render_frame",
]
