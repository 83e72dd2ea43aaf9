"""
Repair pipeline entry points.

    raw slide
      -> repair_top_level_fields
      -> normalize_component_types
      -> check_layout_before_repair
      -> settle_layout (content repair -> consolidation -> capping -> post check,
                        repeated while the post check moves the variant)
      -> repaired slide + warnings

`repair` is total over dict input: malformed content is repaired, trimmed
or downgraded, never rejected.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from slide_repair.config import get_repair_config
from slide_repair.exceptions import ComponentValidationError, InvalidSlideError, SchemaValidationError
from slide_repair.models.slide import SlideNode
from slide_repair.repair.consolidator import consolidate_components
from slide_repair.repair.content_normalizer import repair_component_content, repair_top_level_fields
from slide_repair.repair.feasibility import cap_components, check_layout_after_repair, check_layout_before_repair
from slide_repair.repair.layouts import LAYOUT_VARIANTS
from slide_repair.repair.state import RepairState
from slide_repair.repair.type_normalizer import normalize_component_types
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

# Each reroute lands on a different variant
MAX_SETTLE_PASSES = len(LAYOUT_VARIANTS)


def settle_layout(state: RepairState) -> RepairState:
    """Stage: repair content under the current variant until the post check stops moving it."""
    for _ in range(MAX_SETTLE_PASSES):
        repair_component_content(state)
        consolidate_components(state)
        cap_components(state)
        if not check_layout_after_repair(state):
            break
    return state


STAGES: List[Callable[[RepairState], RepairState]] = [
    repair_top_level_fields,
    normalize_component_types,
    check_layout_before_repair,
    settle_layout,
]


def repair(slide: Dict[str, Any]) -> Dict[str, Any]:
    """
    Repair a slide in place and return it.

    Args:
        slide: Slide tree as produced by the content/layout generators

    Returns:
        The same dict, structurally valid, with `warnings` listing every
        repair action taken.

    Raises:
        InvalidSlideError: If the input is not a mapping at all
    """
    if not isinstance(slide, dict):
        raise InvalidSlideError(
            "Slide must be a JSON object",
            context={'received_type': type(slide).__name__},
        )

    start_time = time.time()
    state = RepairState.from_slide(slide)
    existing = len(state.log)

    for stage in STAGES:
        state = stage(state)
    state.commit()

    added = len(state.log) - existing
    if added and get_repair_config().log_actions:
        elapsed_ms = (time.time() - start_time) * 1000
        title = slide.get('title') if isinstance(slide.get('title'), str) else 'untitled'
        logger.info(
            f"[AUTO-REPAIR] Repaired slide '{title[:50]}' with {added} actions "
            f"(layout={state.variant}, components={len(state.components)}, {elapsed_ms:.1f}ms)"
        )
    return slide


def repair_slides(slides: List[Dict[str, Any]], max_workers: Optional[int] = None) -> List[Dict[str, Any]]:
    """Repair independent slides in parallel, preserving order."""
    if not slides:
        return []
    workers = max_workers or get_repair_config().max_workers
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(slides)))) as executor:
        return list(executor.map(repair, slides))


def repair_slide_model(slide: Dict[str, Any]) -> SlideNode:
    """
    Repair a slide and validate the result against the typed slide model.

    Raises:
        InvalidSlideError: If the input is not a mapping
        ComponentValidationError: If a repaired component fails its model
        SchemaValidationError: If the repaired slide fails the slide model
    """
    repaired = repair(slide)
    try:
        return SlideNode.model_validate(repaired)
    except PydanticValidationError as e:
        for error in e.errors():
            loc = error.get('loc', ())
            if len(loc) >= 3 and loc[0] == 'layoutPlan' and loc[1] == 'components' and isinstance(loc[2], int):
                components = repaired['layoutPlan']['components']
                component_type = components[loc[2]].get('type', 'unknown') if loc[2] < len(components) else 'unknown'
                raise ComponentValidationError(
                    component_type,
                    f"Component {loc[2] + 1} failed validation: {error.get('msg')}",
                    cause=e,
                    context={'loc': list(loc)},
                )
        raise SchemaValidationError(
            "Repaired slide failed schema validation",
            cause=e,
            context={'error_count': e.error_count()},
        )
