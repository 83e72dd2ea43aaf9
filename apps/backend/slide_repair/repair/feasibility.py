"""
Layout feasibility checks.

The requested layout variant is validated against the live component set
twice: once before content repair (so per-kind caps are computed for a
layout that can actually render) and once after (content repair can
downgrade the only grid-capable component). Rerouting only ever moves toward
standard-vertical, except for the diagram rule which moves to a split
variant with a dedicated visual zone.
"""

from typing import List

from slide_repair.repair.constants import DIAGRAM_SVG
from slide_repair.repair.layouts import (
    DIAGRAM_VARIANT,
    FALLBACK_VARIANT,
    has_grid_component,
    is_known_variant,
)
from slide_repair.repair.state import RepairState
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

SPLIT_MIN_COMPONENTS = 2


def _grid_violations(state: RepairState) -> List[str]:
    spec = state.spec
    if not spec.requires_grid:
        return []

    reasons = []
    if not has_grid_component(state.kinds):
        reasons.append(f"{spec.name} requires metric-cards or icon-grid")
    if len(state.components) < spec.min_components:
        reasons.append(f"{spec.name} requires at least {spec.min_components} components")
    return reasons


def cap_components(state: RepairState) -> bool:
    """
    Evict components beyond the variant's maximum.

    Components are ranked by the variant's eviction priority (ties broken by
    position); the best-ranked prefix survives in its original order.

    Returns:
        True when anything was evicted.
    """
    spec = state.spec
    components = state.components
    if len(components) <= spec.max_components:
        return False

    ranked = sorted(
        range(len(components)),
        key=lambda idx: (spec.priority_rank(components[idx].get('type')), idx),
    )
    survivors = sorted(ranked[:spec.max_components])
    evicted = [components[idx].get('type') for idx in ranked[spec.max_components:]]

    logger.warning(f"[AUTO-REPAIR] Layout {spec.name} allows {spec.max_components} components, evicting {evicted}")
    state.components = [components[idx] for idx in survivors]
    state.log.add(f"Auto-trimmed components to {spec.max_components} for layout {spec.name}")
    return True


def check_layout_before_repair(state: RepairState) -> RepairState:
    """Stage: settle the variant against the raw component set, then cap."""
    if not is_known_variant(state.variant):
        label = state.variant
        if isinstance(label, str) and label.strip():
            logger.warning(f"[AUTO-REPAIR] Unknown layout variant '{label[:40]}', using {FALLBACK_VARIANT}")
            state.reroute(FALLBACK_VARIANT, f"unknown layout variant '{label[:40]}'")
        else:
            state.variant = FALLBACK_VARIANT

    reasons = _grid_violations(state)
    spec = state.spec
    max_items = state.density.requested_max_items
    if spec.requires_grid and max_items is not None and max_items < 2:
        reasons.append(f"{spec.name} incompatible with maxItems < 2")

    for reason in reasons:
        logger.warning(f"[AUTO-REPAIR] {reason}, rerouting to {FALLBACK_VARIANT}")
        state.reroute(FALLBACK_VARIANT, reason)

    cap_components(state)
    return state


def check_layout_after_repair(state: RepairState) -> bool:
    """
    Re-verify the variant after content repair and consolidation.

    Returns:
        True when the variant changed, meaning per-kind caps must be
        re-applied under the new variant.
    """
    changed = False

    for reason in _grid_violations(state):
        logger.warning(f"[AUTO-REPAIR] {reason} after content repair, rerouting to {FALLBACK_VARIANT}")
        changed = state.reroute(FALLBACK_VARIANT, reason) or changed

    kinds = state.kinds
    if DIAGRAM_SVG in kinds and not state.spec.has_visual_zone:
        changed = state.reroute(DIAGRAM_VARIANT, "diagram-svg needs a dedicated visual zone") or changed

    spec = state.spec
    # A diagram keeps its visual zone even when it stands alone
    if spec.is_split and len(state.components) < SPLIT_MIN_COMPONENTS and DIAGRAM_SVG not in kinds:
        changed = state.reroute(FALLBACK_VARIANT, f"{spec.name} requires {SPLIT_MIN_COMPONENTS} components") or changed

    return changed
