"""
Merge duplicate or excess text-bullets components into one.
"""

from typing import Any, Dict, List, Tuple

from slide_repair.repair.constants import DEFAULT_TEXT_TITLE, TEXT_BULLETS
from slide_repair.repair.content_normalizer import repair_text_bullets
from slide_repair.repair.state import RepairState
from slide_repair.setup_logging_optimized import get_logger
from slide_repair.utils.json_safe import stringify

logger = get_logger(__name__)


def _lines(component: Dict[str, Any]) -> List[str]:
    content = component.get('content')
    if isinstance(content, list):
        return [stringify(line).strip() for line in content if stringify(line).strip()]
    if isinstance(content, str) and content.strip():
        return [content.strip()]
    return []


def _identity(component: Dict[str, Any]) -> Tuple[str, Tuple[str, ...]]:
    title = component.get('title')
    title_key = title.strip().lower() if isinstance(title, str) else ''
    return title_key, tuple(line.lower() for line in _lines(component))


def consolidate_components(state: RepairState) -> RepairState:
    """Stage: fold text-bullets components into the first one when there are too many or duplicates."""
    components = state.components
    positions = [idx for idx, c in enumerate(components) if c.get('type') == TEXT_BULLETS]
    if len(positions) < 2:
        return state

    identities = [_identity(components[idx]) for idx in positions]
    has_duplicates = len(set(identities)) < len(identities)
    if len(positions) <= state.spec.max_text_components and not has_duplicates:
        return state

    merged_lines = []
    seen = set()
    for idx in positions:
        for line in _lines(components[idx]):
            key = line.lower()
            if key not in seen:
                seen.add(key)
                merged_lines.append(line)

    merged = components[positions[0]]
    title = merged.get('title')
    if not isinstance(title, str) or not title.strip():
        merged['title'] = DEFAULT_TEXT_TITLE
    merged['content'] = merged_lines
    # Same count and char caps as per-kind text repair
    repair_text_bullets(merged, state)

    superseded = set(positions[1:])
    state.components = [c for idx, c in enumerate(components) if idx not in superseded]

    logger.info(f"[AUTO-REPAIR] Merged {len(positions)} text-bullets components into one")
    state.log.add(f"Auto-merged {len(positions)} text-bullets components")
    return state
