"""
Canonical type normalization for generator-produced components.

Maps arbitrary, fuzzy type labels onto the six canonical component kinds and
rescues two common generator failures: components without a type, and whole
layout plans serialized into a component's type field.
"""

from typing import Any, Dict, List, Optional, Tuple

from slide_repair.repair.constants import (
    CANONICAL_KINDS,
    COMPONENT_TYPE_SYNONYMS,
    CONTENT_SOURCE_PROPERTIES,
    EMBEDDED_LAYOUT_MARKER,
    TEXT_BULLETS,
)
from slide_repair.repair.state import RepairState
from slide_repair.setup_logging_optimized import get_logger
from slide_repair.utils.json_safe import stringify, try_parse_json_object

logger = get_logger(__name__)


def resolve_type(raw: Any) -> Tuple[str, bool]:
    """
    Resolve a type label to (canonical kind, matched).

    Resolution order: exact canonical match (case-insensitive), exact synonym,
    canonical name as substring (fixed priority), synonym key as substring.
    `matched` is False when nothing hit and the text-bullets default was used.
    """
    if not isinstance(raw, str):
        return TEXT_BULLETS, False
    lower = raw.strip().lower()
    if not lower:
        return TEXT_BULLETS, False

    if lower in CANONICAL_KINDS:
        return lower, True

    mapped = COMPONENT_TYPE_SYNONYMS.get(lower)
    if mapped:
        return mapped, True

    # Noisy or concatenated labels: first recognizable name wins
    for kind in CANONICAL_KINDS:
        if kind in lower:
            return kind, True
    for alias, kind in COMPONENT_TYPE_SYNONYMS.items():
        if alias in lower:
            return kind, True

    return TEXT_BULLETS, False


def normalize_type(raw: Any) -> str:
    """Resolve any type label to a canonical component kind. Never fails."""
    return resolve_type(raw)[0]


def recover_embedded_layout(raw_type: Any) -> Optional[Dict[str, Any]]:
    """
    Parse a layout plan that was serialized into a type field.

    Returns the recovered layoutPlan dict when the text between the first '{'
    and the last '}' parses and carries a components list; otherwise None.
    """
    if not isinstance(raw_type, str) or '{' not in raw_type:
        return None
    if EMBEDDED_LAYOUT_MARKER not in raw_type.lower():
        return None

    start = raw_type.find('{')
    end = raw_type.rfind('}')
    if end <= start:
        return None

    parsed = try_parse_json_object(raw_type[start:end + 1])
    if parsed is None:
        return None

    # Accept both {"layoutPlan": {...}} and a bare plan object
    plan = parsed.get('layoutPlan') if isinstance(parsed.get('layoutPlan'), dict) else parsed
    if isinstance(plan.get('components'), list):
        return plan
    return None


def synthesize_content(component: Dict[str, Any], position: int, placeholder: bool = True) -> List[str]:
    """Salvage display lines from the first non-empty alternative property.

    With nothing salvageable, returns a single "Content from component N"
    line, or an empty list when placeholder is False.
    """
    for prop in CONTENT_SOURCE_PROPERTIES:
        value = component.get(prop)
        if isinstance(value, list):
            lines = [stringify(x) for x in value if x is not None]
            lines = [line for line in lines if line.strip()]
            if lines:
                return lines
        elif isinstance(value, str) and value.strip():
            return [value]
        elif value is not None and not isinstance(value, (dict, bool)) and stringify(value).strip():
            return [stringify(value)]
    return [f"Content from component {position}"] if placeholder else []


def _has_content(component: Dict[str, Any]) -> bool:
    content = component.get('content')
    if isinstance(content, list):
        return any(not (isinstance(x, str) and not x.strip()) and x is not None for x in content)
    return isinstance(content, str) and bool(content.strip())


def _coerce_component(raw: Any, position: int, state: RepairState) -> Dict[str, Any]:
    """Turn a non-object component entry into a text-bullets component."""
    if isinstance(raw, str) and raw.strip():
        content = [raw.strip()]
    elif isinstance(raw, list):
        content = [stringify(x) for x in raw if x is not None and stringify(x).strip()]
    else:
        content = []
    if not content:
        content = [f"Content from component {position}"]
    state.log.add(f"Converted non-object component {position} to text-bullets")
    return {'type': TEXT_BULLETS, 'content': content}


def _read_components(state: RepairState) -> List[Any]:
    layout_plan = state.slide.get('layoutPlan')
    if not isinstance(layout_plan, dict):
        return []
    components = layout_plan.get('components')
    if isinstance(components, list):
        return components
    if isinstance(components, dict):
        return [components]
    return []


def normalize_component_types(state: RepairState) -> RepairState:
    """Stage: give every component a canonical kind."""
    components = _read_components(state)

    for component in components:
        raw_type = component.get('type') if isinstance(component, dict) else None
        plan = recover_embedded_layout(raw_type)
        if plan is not None:
            logger.warning("[AUTO-REPAIR] Recovered layout plan embedded in a component type field")
            layout_plan = state.slide.get('layoutPlan')
            state.slide['layoutPlan'] = {**(layout_plan if isinstance(layout_plan, dict) else {}), **plan}
            components = list(plan['components'])
            state.log.add("Recovered layout plan embedded in component type")
            break

    normalized = []
    for idx, component in enumerate(components):
        position = idx + 1
        if not isinstance(component, dict):
            normalized.append(_coerce_component(component, position, state))
            continue

        raw_type = component.get('type')
        if not isinstance(raw_type, str) or not raw_type.strip():
            logger.warning(f"[AUTO-REPAIR] Component {idx} has undefined/invalid type, defaulting to '{TEXT_BULLETS}'")
            component['type'] = TEXT_BULLETS
            if not _has_content(component):
                component['content'] = synthesize_content(component, position)
            state.log.add(f"Component {position} had no type; converted to {TEXT_BULLETS}")
            normalized.append(component)
            continue

        kind, matched = resolve_type(raw_type)
        if kind != raw_type:
            logger.info(f"[AUTO-REPAIR] Normalized component type '{raw_type[:60]}' -> '{kind}'")
            component['type'] = kind
            state.log.add(f"Normalized component type '{raw_type[:60]}' to '{kind}'")
            if kind == TEXT_BULLETS and not _has_content(component):
                if not matched:
                    logger.warning(f"[AUTO-REPAIR] Unknown component type '{raw_type[:60]}', salvaging content")
                salvaged = synthesize_content(component, position, placeholder=not matched)
                if salvaged:
                    component['content'] = salvaged
        normalized.append(component)

    state.components = normalized
    return state
