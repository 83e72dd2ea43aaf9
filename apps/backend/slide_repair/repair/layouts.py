"""
Layout variant capacity table.

Every per-variant limit the engine uses (component caps, bullet caps, bullet
character caps, text-component caps, grid and visual-zone requirements,
eviction priority) lives in one row of LAYOUT_VARIANTS so the pre-repair and
post-repair checks always read the same numbers.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Tuple

from slide_repair.repair.constants import (
    CANONICAL_KINDS,
    CHART_FRAME,
    DIAGRAM_SVG,
    GRID_CAPABLE_KINDS,
    ICON_GRID,
    METRIC_CARDS,
    PROCESS_FLOW,
    TEXT_BULLETS,
)

FALLBACK_VARIANT = 'standard-vertical'
DIAGRAM_VARIANT = 'split-right-text'

GRID_EVICTION_PRIORITY = (METRIC_CARDS, ICON_GRID, CHART_FRAME, TEXT_BULLETS, PROCESS_FLOW, DIAGRAM_SVG)
DEFAULT_EVICTION_PRIORITY = (TEXT_BULLETS, CHART_FRAME, METRIC_CARDS, PROCESS_FLOW, ICON_GRID, DIAGRAM_SVG)


@dataclass(frozen=True)
class LayoutVariantSpec:
    """Capacity and requirement rules for one layout variant."""

    name: str
    max_components: int
    min_components: int = 1
    requires_grid: bool = False
    bullet_cap: int = 4
    bullet_char_cap: int = 70
    max_text_components: int = 1
    has_visual_zone: bool = False
    is_split: bool = False
    eviction_priority: Tuple[str, ...] = DEFAULT_EVICTION_PRIORITY

    def priority_rank(self, kind: str) -> int:
        """Lower rank survives eviction first; unknown kinds rank last."""
        try:
            return self.eviction_priority.index(kind)
        except ValueError:
            return len(self.eviction_priority) + 1


LAYOUT_VARIANTS = MappingProxyType({
    spec.name: spec for spec in (
        LayoutVariantSpec(
            name='standard-vertical',
            max_components=2,
            bullet_cap=4,
            bullet_char_cap=70,
            max_text_components=2,
        ),
        LayoutVariantSpec(
            name='hero-centered',
            max_components=1,
            bullet_cap=2,
            bullet_char_cap=50,
        ),
        LayoutVariantSpec(
            name='timeline-horizontal',
            max_components=1,
            bullet_cap=3,
            bullet_char_cap=55,
        ),
        LayoutVariantSpec(
            name='split-left-text',
            max_components=2,
            min_components=2,
            bullet_cap=2,
            bullet_char_cap=55,
            has_visual_zone=True,
            is_split=True,
        ),
        LayoutVariantSpec(
            name='split-right-text',
            max_components=2,
            min_components=2,
            bullet_cap=2,
            bullet_char_cap=55,
            has_visual_zone=True,
            is_split=True,
        ),
        LayoutVariantSpec(
            name='asymmetric-grid',
            max_components=3,
            bullet_cap=3,
            bullet_char_cap=60,
            max_text_components=2,
            has_visual_zone=True,
        ),
        LayoutVariantSpec(
            name='bento-grid',
            max_components=3,
            min_components=2,
            requires_grid=True,
            bullet_cap=2,
            bullet_char_cap=50,
            eviction_priority=GRID_EVICTION_PRIORITY,
        ),
        LayoutVariantSpec(
            name='dashboard-tiles',
            max_components=3,
            min_components=2,
            requires_grid=True,
            bullet_cap=2,
            bullet_char_cap=50,
            max_text_components=2,
            eviction_priority=GRID_EVICTION_PRIORITY,
        ),
        LayoutVariantSpec(
            name='metrics-rail',
            max_components=2,
            min_components=2,
            requires_grid=True,
            bullet_cap=2,
            bullet_char_cap=55,
            eviction_priority=GRID_EVICTION_PRIORITY,
        ),
    )
})

VARIANT_NAMES = tuple(LAYOUT_VARIANTS)


def is_known_variant(name: Optional[str]) -> bool:
    return isinstance(name, str) and name in LAYOUT_VARIANTS


def get_variant_spec(name: Optional[str]) -> LayoutVariantSpec:
    """Return the spec for a variant, falling back to the universal fallback."""
    if is_known_variant(name):
        return LAYOUT_VARIANTS[name]
    return LAYOUT_VARIANTS[FALLBACK_VARIANT]


def has_grid_component(kinds) -> bool:
    return any(kind in GRID_CAPABLE_KINDS for kind in kinds)


def is_compatible(variant: str, kinds) -> bool:
    """Check the output invariants tying a variant to a component multiset."""
    spec = get_variant_spec(variant)
    kinds = list(kinds)
    if spec.requires_grid and (not has_grid_component(kinds) or len(kinds) < spec.min_components):
        return False
    if DIAGRAM_SVG in kinds and not spec.has_visual_zone:
        return False
    return all(kind in CANONICAL_KINDS for kind in kinds)
