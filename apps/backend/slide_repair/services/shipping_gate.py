"""
No-placeholder shipping gate.

Final export check: a slide that still carries placeholder text ("TBD",
"Coming Soon", "No Data Available", ...) or an empty chart must not ship.
"""

import re
from typing import Any, Dict, Iterator, List, Tuple

from slide_repair.models.validation import BlockedContent, ShippingGateResult
from slide_repair.repair.constants import (
    CHART_FRAME,
    ICON_GRID,
    METRIC_CARDS,
    PLACEHOLDER_VALUES,
    PROCESS_FLOW,
    TEXT_BULLETS,
)
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

PLACEHOLDER_PATTERNS = [
    re.compile(r'no data available', re.IGNORECASE),
    re.compile(r'data visualization', re.IGNORECASE),
    re.compile(r'coming soon', re.IGNORECASE),
    re.compile(r'lorem ipsum', re.IGNORECASE),
    re.compile(r'\btbd\b', re.IGNORECASE),
    re.compile(r'\bplaceholder\b', re.IGNORECASE),
    re.compile(r'\binsert\b.*\bhere\b', re.IGNORECASE),
]

# kind -> (list property, text fields of each item)
ITEM_TEXT_FIELDS = {
    METRIC_CARDS: ('metrics', ('value', 'label')),
    PROCESS_FLOW: ('steps', ('title', 'description')),
    ICON_GRID: ('items', ('label', 'description')),
    CHART_FRAME: ('data', ('label',)),
}


def find_placeholder(text: Any) -> str:
    """Return the placeholder found in text, or '' when it is clean."""
    if not isinstance(text, str):
        return ''
    stripped = text.strip()
    if stripped.lower() in PLACEHOLDER_VALUES:
        return stripped
    for pattern in PLACEHOLDER_PATTERNS:
        match = pattern.search(stripped)
        if match:
            return match.group(0)
    return ''


def _text_fields(component: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    yield 'title', component.get('title')

    kind = component.get('type')
    if kind == TEXT_BULLETS:
        content = component.get('content')
        for idx, line in enumerate(content if isinstance(content, list) else [content]):
            yield f"content[{idx}]", line
        return

    if kind in ITEM_TEXT_FIELDS:
        prop, fields = ITEM_TEXT_FIELDS[kind]
        items = component.get(prop)
        for idx, item in enumerate(items if isinstance(items, list) else []):
            if not isinstance(item, dict):
                continue
            for field in fields:
                yield f"{prop}[{idx}].{field}", item.get(field)


def check_shipping_gate(slide: Dict[str, Any]) -> ShippingGateResult:
    """
    Check that no placeholder content reaches export.

    Args:
        slide: Slide dict, typically already repaired

    Returns:
        ShippingGateResult listing every blocked field
    """
    blocked: List[BlockedContent] = []
    layout_plan = slide.get('layoutPlan') if isinstance(slide, dict) else None
    components = layout_plan.get('components') if isinstance(layout_plan, dict) else None

    for idx, component in enumerate(components if isinstance(components, list) else []):
        if not isinstance(component, dict):
            continue
        kind = str(component.get('type') or 'unknown')

        for field, value in _text_fields(component):
            found = find_placeholder(value)
            if found:
                blocked.append(BlockedContent(
                    component_index=idx,
                    component_type=kind,
                    field=field,
                    placeholder_found=found,
                ))

        if kind == CHART_FRAME:
            data = component.get('data')
            if not isinstance(data, list) or not data:
                blocked.append(BlockedContent(
                    component_index=idx,
                    component_type=kind,
                    field='data',
                    placeholder_found='empty chart data',
                ))

    if blocked:
        logger.warning(
            f"[SHIPPING GATE] Blocked slide: {', '.join(b.placeholder_found for b in blocked)}"
        )
    return ShippingGateResult(can_ship=not blocked, blocked_content=blocked)
