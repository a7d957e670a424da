"""Colour tables for categories, link kinds and affinity bands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..contracts import EntityCategory
from ..graph import LinkKind


@dataclass(frozen=True)
class CategoryColors:
    fill: str
    border: str
    text: str


@dataclass(frozen=True)
class LegendEntry:
    """One row of a host-drawn legend."""

    group: str
    label: str
    fill: str
    stroke: str


CATEGORY_COLORS: Dict[EntityCategory, CategoryColors] = {
    EntityCategory.FOUNDERS: CategoryColors(fill="#F3E8FF", border="#A855F7", text="#7E22CE"),
    EntityCategory.EXECUTIVES: CategoryColors(fill="#DBEAFE", border="#3B82F6", text="#1D4ED8"),
    EntityCategory.ADVISORS: CategoryColors(fill="#CCFBF1", border="#14B8A6", text="#0F766E"),
    EntityCategory.BANKERS: CategoryColors(fill="#FEF3C7", border="#F59E0B", text="#B45309"),
    EntityCategory.LAWYERS: CategoryColors(fill="#F1F5F9", border="#64748B", text="#334155"),
    EntityCategory.INVESTORS: CategoryColors(fill="#DCFCE7", border="#22C55E", text="#15803D"),
    EntityCategory.ACCOUNTANTS: CategoryColors(fill="#FFEDD5", border="#F97316", text="#C2410C"),
    EntityCategory.BOARD: CategoryColors(fill="#E0E7FF", border="#6366F1", text="#4338CA"),
    EntityCategory.UNCATEGORIZED: CategoryColors(fill="#F8FAFC", border="#94A3B8", text="#475569"),
}

LINK_COLORS: Dict[LinkKind, str] = {
    LinkKind.SAME_EMPLOYER: "rgba(34, 197, 94, 0.3)",
    LinkKind.SHARED_TRANSACTION: "rgba(59, 130, 246, 0.3)",
    LinkKind.HIGH_AFFINITY: "rgba(148, 163, 184, 0.2)",
}

LINK_LABELS: Dict[LinkKind, str] = {
    LinkKind.SAME_EMPLOYER: "Same company",
    LinkKind.SHARED_TRANSACTION: "Shared deal",
    LinkKind.HIGH_AFFINITY: "Interaction",
}

PATH_HALO_FILL = "rgba(59, 130, 246, 0.3)"
FOCUS_HALO_FILL = "rgba(0, 0, 0, 0.1)"
TOOLTIP_BACKGROUND = "rgba(15, 23, 42, 0.95)"
TOOLTIP_TITLE = "#FFFFFF"
TOOLTIP_MUTED = "#94A3B8"

SCORE_STRONG = "#22C55E"
SCORE_GOOD = "#F59E0B"
SCORE_FAIR = "#F97316"
SCORE_WEAK = "#EF4444"


def category_palette(category: EntityCategory) -> CategoryColors:
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[EntityCategory.UNCATEGORIZED])


def score_ring_color(score: float) -> str:
    if score >= 80:
        return SCORE_STRONG
    if score >= 60:
        return SCORE_GOOD
    if score >= 40:
        return SCORE_FAIR
    return SCORE_WEAK


def tooltip_score_color(score: float) -> str:
    # The tooltip has no separate weak band.
    if score >= 80:
        return SCORE_STRONG
    if score >= 60:
        return SCORE_GOOD
    return SCORE_FAIR


def legend_entries() -> List[LegendEntry]:
    """Return legend rows for every category followed by every link kind."""

    entries = [
        LegendEntry(group="category", label=category.value, fill=colors.fill, stroke=colors.border)
        for category, colors in CATEGORY_COLORS.items()
    ]
    entries.extend(
        LegendEntry(group="link", label=LINK_LABELS[kind], fill=LINK_COLORS[kind], stroke=LINK_COLORS[kind])
        for kind in LinkKind
    )
    return entries
