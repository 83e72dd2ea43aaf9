"""
Per-kind content repair.

Coerces heterogeneous item shapes into well-formed records, strips
placeholder and garbage text, applies the budget caps, and downgrades
components that have nothing real to show into text-bullets built from
whatever the slide already says.
"""

import math
import re
from typing import Any, Callable, Dict, List, Optional

from slide_repair.repair.budget import (
    bullet_char_cap,
    bullet_count_cap,
    cap_list,
    item_cap,
    truncate_text,
)
from slide_repair.repair.constants import (
    CHART_FRAME,
    CONTENT_LIMITS,
    DEFAULT_READABILITY_SCORE,
    DEFAULT_SELF_CRITIQUE,
    DEFAULT_TEXT_TITLE,
    FALLBACK_BULLET_LIMIT,
    FALLBACK_BULLETS,
    FALLBACK_MIN_CHARS,
    GARBAGE_BULLET_CHARS,
    ICON_GRID,
    ITEM_PROPERTIES,
    LAYOUT_ACTIONS,
    MAX_SPEAKER_NOTES,
    METRIC_CARDS,
    MIN_VALID_METRICS,
    PROCESS_FLOW,
    SAFE_ICONS,
    TEXT_BULLETS,
)
from slide_repair.repair.state import RepairState
from slide_repair.repair.warning_log import WarningLog
from slide_repair.setup_logging_optimized import get_logger
from slide_repair.utils.json_safe import deep_parse_json_strings, stringify, try_parse_json_object
from slide_repair.utils.text import ELLIPSIS_MARKERS, is_blank, is_garbage, is_number, is_placeholder

logger = get_logger(__name__)

_SLIDE_PREFIX = re.compile(r'^slide:\s*', re.IGNORECASE)
_SAFE_ICON_LOOKUP = {icon.lower(): icon for icon in SAFE_ICONS}


# === Generic item coercion ===

def coerce_item(item: Any, index: int, expected: str) -> Any:
    """
    Turn one list entry into a record.

    Args:
        item: Raw entry (object, JSON string, plain string, anything else)
        index: 0-based position in the list
        expected: 'metric', 'step' or 'item'

    Returns:
        Objects unchanged, JSON-object strings parsed, plain strings
        synthesized into a record for the expected shape, anything else
        wrapped as {label: "Item i", value: <text>}.
    """
    if isinstance(item, dict):
        return item

    if isinstance(item, str):
        parsed = try_parse_json_object(item)
        if parsed is not None:
            return parsed

        text = item.strip()
        if expected == 'metric':
            return {
                'value': text[:CONTENT_LIMITS['metric_value']] if len(text) > 20 else text,
                'label': f"Metric {index + 1}",
                'icon': None,
            }
        if expected == 'step':
            return {
                'number': index + 1,
                'title': text[:30] if len(text) > 30 else text,
                'description': text if len(text) > 30 else '',
                'icon': None,
            }
        return {
            'label': text[:40] if len(text) > 40 else text,
            'icon': None,
        }

    return {
        'label': f"Item {index + 1}",
        'value': stringify(item),
        'icon': None,
    }


def _safe_icon(icon: Any) -> Optional[str]:
    if not isinstance(icon, str):
        return None
    return _SAFE_ICON_LOOKUP.get(icon.strip().lower())


def _fill_icon(item: Dict[str, Any], index: int) -> None:
    """Keep a safe icon (canonical casing), otherwise assign one round-robin by position."""
    icon = _safe_icon(item.get('icon'))
    item['icon'] = icon if icon else SAFE_ICONS[index % len(SAFE_ICONS)]


def _read_item_list(component: Dict[str, Any], kind: str) -> List[Any]:
    """Read the first non-empty accepted property for a kind, JSON strings deep-parsed."""
    raw = None
    for prop in ITEM_PROPERTIES[kind]:
        value = component.get(prop)
        if value:
            raw = value
            break
    if raw is None:
        return []
    raw = deep_parse_json_strings(raw)
    if isinstance(raw, list):
        return raw
    return [raw]


def _drop_alternate_properties(component: Dict[str, Any], kind: str) -> None:
    for prop in ITEM_PROPERTIES[kind][1:]:
        component.pop(prop, None)


def _step_number(value: Any, index: int) -> int:
    if is_number(value) and math.isfinite(value) and value >= 1 and float(value).is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit() and int(value.strip()) >= 1:
        return int(value.strip())
    return index + 1


# === Fallback synthesis ===

def fallback_bullets(slide: Dict[str, Any]) -> List[str]:
    """Gather up to four bullets from what the slide already says.

    Sources in order: body content lines, the first two speaker-note lines,
    the layout-plan title, the slide title. The title is dropped when
    anything else survives.
    """
    bullets: List[str] = []
    seen = set()

    def add(text: Any) -> None:
        if not isinstance(text, str):
            return
        clean = _SLIDE_PREFIX.sub('', text.strip()).strip()
        if len(clean) < FALLBACK_MIN_CHARS:
            return
        key = clean.lower()
        if key not in seen:
            seen.add(key)
            bullets.append(clean)

    content = slide.get('content')
    if isinstance(content, list):
        for line in content:
            add(line)
    else:
        add(content)

    notes = slide.get('speakerNotesLines')
    if isinstance(notes, list):
        for line in notes[:2]:
            add(line)

    layout_plan = slide.get('layoutPlan')
    plan_title = layout_plan.get('title') if isinstance(layout_plan, dict) else None
    add(plan_title)
    add(slide.get('title'))

    title_text = ''
    for candidate in (plan_title, slide.get('title')):
        if isinstance(candidate, str) and candidate.strip():
            title_text = candidate.strip()
            break
    if title_text:
        non_title = [b for b in bullets if b.lower() != title_text.lower()]
        if non_title:
            return non_title[:FALLBACK_BULLET_LIMIT]
    return bullets[:FALLBACK_BULLET_LIMIT]


def downgrade_to_text_bullets(component: Dict[str, Any], source_kind: str, reason: str, state: RepairState) -> None:
    """Convert a component with nothing real to show into text-bullets."""
    logger.warning(f"[AUTO-REPAIR] Converting {source_kind} to {TEXT_BULLETS}: {reason}")
    bullets = fallback_bullets(state.slide) or list(FALLBACK_BULLETS[source_kind])

    component['type'] = TEXT_BULLETS
    title = component.get('title')
    if not isinstance(title, str) or not title.strip():
        component['title'] = DEFAULT_TEXT_TITLE
    component['content'] = bullets
    for prop in ITEM_PROPERTIES[source_kind]:
        component.pop(prop, None)

    state.log.add(f"Converted {source_kind} to {TEXT_BULLETS}: {reason}")
    repair_text_bullets(component, state)


# === Per-kind repair ===

def repair_metric_cards(component: Dict[str, Any], state: RepairState) -> None:
    log = state.log
    items = _read_item_list(component, METRIC_CARDS)
    if not items:
        downgrade_to_text_bullets(component, METRIC_CARDS, 'no metrics available', state)
        return

    items = [coerce_item(item, idx, 'metric') for idx, item in enumerate(items)]

    valid = []
    for idx, item in enumerate(items):
        _fill_icon(item, idx)

        label = item.get('label')
        if is_garbage(label):
            label = f"Metric {idx + 1}"
        value = item.get('value')

        value = '' if is_placeholder(value) else stringify(value).strip()
        label = '' if is_placeholder(label) else stringify(label).strip()

        item['value'] = truncate_text(value, CONTENT_LIMITS['metric_value'], log, 'metric value')
        item['label'] = truncate_text(label, CONTENT_LIMITS['metric_label'], log, 'metric label')

        if item['value'] and item['label']:
            valid.append(item)

    if len(valid) < len(items):
        log.add(f"Dropped {len(items) - len(valid)} placeholder or empty metrics")

    if len(valid) < MIN_VALID_METRICS:
        downgrade_to_text_bullets(component, METRIC_CARDS, 'insufficient valid metrics', state)
        return

    max_items = item_cap(METRIC_CARDS, state.density)
    if max_items < MIN_VALID_METRICS:
        downgrade_to_text_bullets(component, METRIC_CARDS, 'density budget allows fewer than 2 metrics', state)
        return

    component['metrics'] = cap_list(valid, max_items, log, 'metric cards')
    _drop_alternate_properties(component, METRIC_CARDS)


def repair_process_flow(component: Dict[str, Any], state: RepairState) -> None:
    log = state.log
    items = [coerce_item(item, idx, 'step') for idx, item in enumerate(_read_item_list(component, PROCESS_FLOW))]

    for idx, item in enumerate(items):
        _fill_icon(item, idx)
        item['number'] = _step_number(item.get('number'), idx)

        title = item.get('title')
        if is_garbage(title):
            title = f"Step {idx + 1}"
        if title is not None:
            item['title'] = truncate_text(stringify(title), CONTENT_LIMITS['step_title'], log, 'step title')

        description = item.get('description')
        if description is not None:
            item['description'] = truncate_text(
                stringify(description), CONTENT_LIMITS['step_description'], log, 'step description'
            )

    component['steps'] = cap_list(items, item_cap(PROCESS_FLOW, state.density), log, 'process steps')
    _drop_alternate_properties(component, PROCESS_FLOW)


def repair_icon_grid(component: Dict[str, Any], state: RepairState) -> None:
    log = state.log
    items = _read_item_list(component, ICON_GRID)
    if not items:
        downgrade_to_text_bullets(component, ICON_GRID, 'no icon items available', state)
        return

    items = [coerce_item(item, idx, 'item') for idx, item in enumerate(items)]

    for idx, item in enumerate(items):
        _fill_icon(item, idx)

        label = item.get('label')
        if is_garbage(label) or is_blank(label):
            label = f"Feature {idx + 1}"
        label = stringify(label).strip() or f"Feature {idx + 1}"
        item['label'] = truncate_text(label, CONTENT_LIMITS['icon_label'], log, 'icon label')

        description = item.get('description')
        if description is not None:
            item['description'] = truncate_text(
                stringify(description), CONTENT_LIMITS['icon_description'], log, 'icon description'
            )

    component['items'] = cap_list(items, item_cap(ICON_GRID, state.density), log, 'icon grid items')
    _drop_alternate_properties(component, ICON_GRID)


def repair_chart_frame(component: Dict[str, Any], state: RepairState) -> None:
    log = state.log
    raw = deep_parse_json_strings(component.get('data'))
    if not isinstance(raw, list):
        raw = []

    points = []
    for idx, entry in enumerate(raw):
        if isinstance(entry, str):
            entry = {'label': entry, 'value': (idx + 1) * 10}
        value = entry.get('value') if isinstance(entry, dict) else None
        if not is_number(value) or not math.isfinite(value):
            continue
        entry['label'] = truncate_text(stringify(entry.get('label') or ''), CONTENT_LIMITS['chart_label'], log, 'chart label')
        points.append(entry)

    if len(points) < len(raw):
        log.add(f"Dropped {len(raw) - len(points)} chart points without numeric values")

    if not points:
        downgrade_to_text_bullets(component, CHART_FRAME, 'no data available', state)
        return

    component['data'] = points


def repair_text_bullets(component: Dict[str, Any], state: RepairState) -> None:
    log = state.log
    spec = state.spec

    content = component.get('content')
    if not isinstance(content, list):
        content = [content] if isinstance(content, str) else []

    title = component.get('title')
    if title is not None:
        component['title'] = truncate_text(stringify(title), CONTENT_LIMITS['title'], log, 'text-bullets title')

    char_cap = bullet_char_cap(spec, len(content), state.density)
    seen = set()
    lines = []
    duplicates = 0
    for raw in content:
        text = stringify(raw).strip()
        if not text:
            continue
        if is_garbage(text) and not text.endswith(ELLIPSIS_MARKERS):
            text = text[:GARBAGE_BULLET_CHARS] + '...'
        text = truncate_text(text, char_cap, log, 'bullet text')
        key = text.lower()
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        lines.append(text)

    if duplicates:
        log.add(f"Removed {duplicates} duplicate bullet lines")

    component['content'] = cap_list(lines, bullet_count_cap(spec, state.density), log, 'bullet items')


KIND_REPAIRERS: Dict[str, Callable[[Dict[str, Any], RepairState], None]] = {
    METRIC_CARDS: repair_metric_cards,
    PROCESS_FLOW: repair_process_flow,
    ICON_GRID: repair_icon_grid,
    CHART_FRAME: repair_chart_frame,
    TEXT_BULLETS: repair_text_bullets,
}


def repair_component_content(state: RepairState) -> RepairState:
    """Stage: per-kind content repair for every live component."""
    for component in state.components:
        repairer = KIND_REPAIRERS.get(component.get('type'))
        if repairer is not None:
            repairer(component, state)
    return state


# === Top-level fields ===

def _normalize_layout_action(action: Any) -> str:
    if not isinstance(action, str):
        return 'keep'
    lowered = action.strip().lower()
    if 'simplif' in lowered:
        return 'simplify'
    if 'shrink' in lowered or 'reduce' in lowered:
        return 'shrink_text'
    if 'visual' in lowered or 'add' in lowered:
        return 'add_visuals'
    if lowered in LAYOUT_ACTIONS:
        return lowered
    if lowered:
        logger.info(f"[AUTO-REPAIR] layoutAction was prose: \"{action[:50]}\", defaulting to 'keep'")
    return 'keep'


def _normalize_density_status(status: Any) -> str:
    if not isinstance(status, str):
        return 'optimal'
    lowered = status.lower()
    if 'optim' in lowered:
        return 'optimal'
    if 'high' in lowered or 'dens' in lowered:
        return 'high'
    if 'over' in lowered:
        return 'overflow'
    return 'optimal'


def repair_self_critique(slide: Dict[str, Any], log: WarningLog) -> None:
    critique = slide.get('selfCritique')
    if critique is None:
        return
    if not isinstance(critique, dict):
        logger.warning("[AUTO-REPAIR] selfCritique was not an object, replacing with defaults")
        slide['selfCritique'] = dict(DEFAULT_SELF_CRITIQUE)
        log.add("Replaced malformed selfCritique with defaults")
        return

    critique['layoutAction'] = _normalize_layout_action(critique.get('layoutAction'))

    score = critique.get('readabilityScore')
    if not is_number(score) or not math.isfinite(score) or score < 0 or score > 10:
        critique['readabilityScore'] = DEFAULT_READABILITY_SCORE

    critique['textDensityStatus'] = _normalize_density_status(critique.get('textDensityStatus'))


def repair_speaker_notes(slide: Dict[str, Any], log: WarningLog) -> None:
    title = slide.get('title')
    fallback = f"Slide: {title.strip() if isinstance(title, str) and title.strip() else 'Content'}"

    notes = slide.get('speakerNotesLines')
    if not isinstance(notes, list):
        logger.warning("[AUTO-REPAIR] speakerNotesLines missing or invalid, generating default")
        slide['speakerNotesLines'] = [fallback]
        log.add("Generated default speaker notes")
        return

    cleaned = [line for line in notes if isinstance(line, str) and line.strip()]
    cleaned = cap_list(cleaned, MAX_SPEAKER_NOTES, log, 'speaker notes')
    if not cleaned:
        cleaned = [fallback]
        log.add("Generated default speaker notes")
    slide['speakerNotesLines'] = cleaned


def repair_router_config(slide: Dict[str, Any], log: WarningLog) -> None:
    """Drop density budget entries the engine cannot use so the output validates."""
    router_config = slide.get('routerConfig')
    if router_config is None:
        return
    if not isinstance(router_config, dict):
        slide['routerConfig'] = {}
        log.add("Replaced malformed routerConfig")
        return

    budget = router_config.get('densityBudget')
    if budget is None:
        return
    if not isinstance(budget, dict):
        router_config.pop('densityBudget')
        log.add("Removed malformed densityBudget")
        return
    for key in ('maxItems', 'maxChars', 'minVisuals'):
        if key in budget and budget[key] is not None and not (is_number(budget[key]) and math.isfinite(budget[key])):
            budget.pop(key)
            log.add(f"Removed non-numeric densityBudget.{key}")


def repair_top_level_fields(state: RepairState) -> RepairState:
    """Stage: selfCritique, speakerNotesLines and routerConfig shape."""
    repair_router_config(state.slide, state.log)
    repair_self_critique(state.slide, state.log)
    repair_speaker_notes(state.slide, state.log)
    return state
