"""Turn simulation and interaction state into an ordered draw command list."""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence

from ..config import AppConfig, RenderConfig, load_config
from ..graph import Link, Node
from ..viewport import InteractionState, ViewportState, graph_to_screen, visible_nodes
from .commands import Arc, Circle, Clear, DrawCommand, Line, PopTransform, PushTransform, RoundedRect, Text
from .palette import (
    FOCUS_HALO_FILL,
    LINK_COLORS,
    PATH_HALO_FILL,
    TOOLTIP_BACKGROUND,
    TOOLTIP_MUTED,
    TOOLTIP_TITLE,
    category_palette,
    score_ring_color,
    tooltip_score_color,
)

TextMeasurer = Callable[[str, float, bool], float]

HALO_OFFSET = 4.0
RING_OFFSET = 2.0
RING_WIDTH = 2.0
BORDER_WIDTH = 2.0
EMPHASIS_WIDTH = 3.0
INITIALS_SCALE = 0.7
TOOLTIP_GAP = 10.0
TOOLTIP_MEASURE_SIZE = 12.0
# Baselines of the four tooltip lines, relative to the box top.
TOOLTIP_LINE_OFFSETS = (18.0, 35.0, 50.0, 68.0)


def estimate_text_width(text: str, font_size: float, bold: bool = False, *, glyph_width_ratio: float = 0.6) -> float:
    """Approximate rendered text width from an average glyph width."""

    width = len(text) * font_size * glyph_width_ratio
    return width * 1.05 if bold else width


def _font(size: float, family: str, bold: bool = False) -> str:
    prefix = "bold " if bold else ""
    return f"{prefix}{size:g}px {family}"


def _draw_links(
    links: Sequence[Link],
    positions: Dict[str, Node],
    highlight_path: frozenset,
    style: RenderConfig,
) -> List[DrawCommand]:
    commands: List[DrawCommand] = []
    for link in links:
        source = positions.get(link.source)
        target = positions.get(link.target)
        if source is None or target is None:
            continue
        if link.source in highlight_path and link.target in highlight_path:
            stroke, width = style.highlight_color, EMPHASIS_WIDTH
        else:
            stroke, width = LINK_COLORS[link.kind], link.strength * 2
        commands.append(Line(x1=source.x, y1=source.y, x2=target.x, y2=target.y, stroke=stroke, line_width=width))
    return commands


def _draw_node(node: Node, interaction: InteractionState, style: RenderConfig) -> List[DrawCommand]:
    colors = category_palette(node.entity.category)
    selected = node.id == interaction.selected_node_id
    hovered = node.id == interaction.hovered_node_id
    in_path = node.id in interaction.highlight_path
    emphasised = selected or hovered or in_path
    score = node.entity.affinity_score

    commands: List[DrawCommand] = []
    if emphasised:
        commands.append(
            Circle(x=node.x, y=node.y, radius=node.radius + HALO_OFFSET, fill=PATH_HALO_FILL if in_path else FOCUS_HALO_FILL)
        )
    commands.append(
        Circle(
            x=node.x,
            y=node.y,
            radius=node.radius,
            fill=colors.fill,
            stroke=style.highlight_color if emphasised else colors.border,
            line_width=EMPHASIS_WIDTH if selected or in_path else BORDER_WIDTH,
        )
    )
    commands.append(
        Arc(
            x=node.x,
            y=node.y,
            radius=node.radius + RING_OFFSET,
            start_angle=-math.pi / 2,
            end_angle=(score / 100.0) * 2 * math.pi - math.pi / 2,
            stroke=score_ring_color(score),
            line_width=RING_WIDTH,
        )
    )
    commands.append(
        Text(
            x=node.x,
            y=node.y,
            text=node.entity.initials,
            font=_font(node.radius * INITIALS_SCALE, style.font_family, bold=True),
            fill=colors.text,
            align="center",
            baseline="middle",
        )
    )
    return commands


def _draw_tooltip(
    node: Node,
    viewport: ViewportState,
    style: RenderConfig,
    measure_text: TextMeasurer,
) -> List[DrawCommand]:
    entity = node.entity
    screen_x, screen_y = graph_to_screen(viewport, node.x, node.y)
    lines = [
        (entity.display_name, 12.0, True, TOOLTIP_TITLE),
        (entity.title, 11.0, False, TOOLTIP_MUTED),
        (entity.company, 11.0, False, TOOLTIP_MUTED),
        (f"Score: {entity.affinity_score:g}", 11.0, True, tooltip_score_color(entity.affinity_score)),
    ]
    text_width = max(measure_text(text, TOOLTIP_MEASURE_SIZE, False) for text, _, _, _ in lines)
    box_x = screen_x + node.radius * viewport.zoom + TOOLTIP_GAP
    box_y = screen_y - style.tooltip_height / 2
    commands: List[DrawCommand] = [
        RoundedRect(
            x=box_x,
            y=box_y,
            width=text_width + 2 * style.tooltip_padding,
            height=style.tooltip_height,
            corner_radius=style.tooltip_corner_radius,
            fill=TOOLTIP_BACKGROUND,
        )
    ]
    for (text, size, bold, fill), offset in zip(lines, TOOLTIP_LINE_OFFSETS):
        commands.append(
            Text(
                x=box_x + style.tooltip_padding,
                y=box_y + offset,
                text=text,
                font=_font(size, style.font_family, bold=bold),
                fill=fill,
            )
        )
    return commands


def render_frame(
    nodes: Sequence[Node],
    links: Sequence[Link],
    viewport: ViewportState,
    interaction: InteractionState,
    width: float,
    height: float,
    config: Optional[AppConfig] = None,
    measure_text: Optional[TextMeasurer] = None,
) -> List[DrawCommand]:
    """Produce the draw commands for one frame.

    Links and nodes are drawn in graph space inside a pan/zoom transform; the
    hover tooltip is drawn afterwards in screen space. Nodes hidden by the
    category filter, and links touching them, are skipped.

    Args:
        nodes: Current simulated nodes.
        links: Links of the same graph version.
        viewport: Zoom and pan to apply.
        interaction: Hover, selection, highlight path and category filter.
        width: Drawing surface width.
        height: Drawing surface height.
        config: Application configuration; if omitted the default config is loaded.
        measure_text: Optional ``(text, font_size, bold) -> width`` measurer for the tooltip.

    Returns:
        List[DrawCommand]: Commands to replay in order; only ``Clear`` when nothing is visible.
    """

    commands: List[DrawCommand] = [Clear(width=width, height=height)]
    shown = visible_nodes(nodes, interaction.category_filter)
    if not shown:
        return commands

    style = (config or load_config()).render
    measurer = measure_text or (
        lambda text, size, bold: estimate_text_width(text, size, bold, glyph_width_ratio=style.glyph_width_ratio)
    )
    by_id = {node.id: node for node in shown}

    commands.append(PushTransform(translate_x=viewport.pan_x, translate_y=viewport.pan_y, scale=viewport.zoom))
    commands.extend(_draw_links(links, by_id, interaction.highlight_path, style))
    for node in shown:
        commands.extend(_draw_node(node, interaction, style))
    commands.append(PopTransform())

    hovered = by_id.get(interaction.hovered_node_id) if interaction.hovered_node_id else None
    if hovered is not None:
        commands.extend(_draw_tooltip(hovered, viewport, style, measurer))
    return commands
