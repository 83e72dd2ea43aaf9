"""
Deterministic quality scoring for repaired slides.

Starts every slide at 100 and deducts for overflowing text, missing icons,
render-mode mismatches, structural gaps and repetitive generator output.
Critical findings fail the slide regardless of score.
"""

import json
import re
from typing import Any, Dict, List, Optional

from slide_repair.models.validation import ValidationIssue, ValidationResult
from slide_repair.repair.constants import (
    CHART_FRAME,
    ICON_GRID,
    METRIC_CARDS,
    PROCESS_FLOW,
    TEXT_BULLETS,
)
from slide_repair.setup_logging_optimized import get_logger
from slide_repair.utils.json_safe import stringify
from slide_repair.utils.text import is_number

logger = get_logger(__name__)

DEFAULT_MAX_CHARS = 600
DATA_VIZ_MODE = 'data-viz'

# A 3+ letter word repeated four or more times in a row
WORD_LOOP_PATTERN = re.compile(r'\b([a-z]{3,})(?:[\s\W]+\1){3,}\b')


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _field_texts(items: List[Any], field: str) -> List[str]:
    return [stringify(item.get(field)) if isinstance(item, dict) else '' for item in items]


class SlideQualityValidator:
    """Scores one slide; stateless, safe to share across threads."""

    # kind -> (list property, text field) read for text volume and duplicate checks
    LIST_TEXT_FIELDS = {
        PROCESS_FLOW: ('steps', 'description'),
        METRIC_CARDS: ('metrics', 'label'),
        ICON_GRID: ('items', 'label'),
        CHART_FRAME: ('data', 'label'),
    }

    def __init__(self, default_max_chars: int = DEFAULT_MAX_CHARS):
        self.default_max_chars = default_max_chars

    def _component_texts(self, component: Dict[str, Any]) -> List[str]:
        kind = component.get('type')
        if kind == TEXT_BULLETS:
            return [stringify(line) for line in _as_list(component.get('content'))]
        if kind in self.LIST_TEXT_FIELDS:
            prop, field = self.LIST_TEXT_FIELDS[kind]
            return _field_texts(_as_list(component.get(prop)), field)
        return []

    def _density_value(self, slide: Dict[str, Any], key: str) -> Optional[float]:
        router_config = slide.get('routerConfig')
        budget = router_config.get('densityBudget') if isinstance(router_config, dict) else None
        value = budget.get(key) if isinstance(budget, dict) else None
        return value if is_number(value) and value > 0 else None

    def check_text_overflow(self, slide: Dict[str, Any], components: List[Dict[str, Any]]) -> Optional[ValidationIssue]:
        total = sum(len(' '.join(self._component_texts(c))) for c in components)
        max_chars = self._density_value(slide, 'maxChars') or self.default_max_chars
        if total <= max_chars:
            return None
        if total > max_chars * 2:
            return ValidationIssue(
                code='ERR_TEXT_OVERFLOW_CRITICAL',
                message=f"Text length {total} is double the budget {max_chars:g}.",
                suggested_fix='Summarize text drastically.',
            )
        return ValidationIssue(
            code='WARN_TEXT_OVERFLOW',
            message=f"Text length {total} exceeds budget {max_chars:g}.",
            suggested_fix='Consider summarizing.',
        )

    def count_icons(self, components: List[Dict[str, Any]]):
        """Return (icon count, whether any component strongly implies icons)."""
        icon_count = 0
        requires_icons = False
        for component in components:
            kind = component.get('type')
            if kind == METRIC_CARDS:
                requires_icons = True
                items = _as_list(component.get('metrics'))
            elif kind == ICON_GRID:
                requires_icons = True
                items = _as_list(component.get('items'))
            elif kind == PROCESS_FLOW:
                items = _as_list(component.get('steps'))
            else:
                continue
            icon_count += sum(1 for item in items if isinstance(item, dict) and item.get('icon'))
        return icon_count, requires_icons

    def check_structure(self, components: List[Dict[str, Any]]) -> List[ValidationIssue]:
        issues = []
        required = {
            PROCESS_FLOW: ('steps', 'Process flow missing steps array.'),
            METRIC_CARDS: ('metrics', 'Metric cards missing metrics array.'),
            TEXT_BULLETS: ('content', 'Text bullets missing content array.'),
        }
        for component in components:
            rule = required.get(component.get('type'))
            if rule and not isinstance(component.get(rule[0]), list):
                issues.append(ValidationIssue(code='ERR_MALFORMED_COMPONENT', message=rule[1]))
        return issues

    def validate(self, slide: Dict[str, Any]) -> ValidationResult:
        """
        Score a slide.

        Args:
            slide: Slide dict, typically already repaired

        Returns:
            ValidationResult with passed=False when any critical issue was found
        """
        layout_plan = slide.get('layoutPlan') if isinstance(slide, dict) else None
        components = [
            c for c in _as_list(layout_plan.get('components') if isinstance(layout_plan, dict) else None)
            if isinstance(c, dict)
        ]

        if not components:
            return ValidationResult(
                passed=False,
                score=0,
                errors=[ValidationIssue(
                    code='ERR_EMPTY_SLIDE',
                    message='No components generated.',
                    suggested_fix='Regenerate with lower temperature.',
                )],
            )

        errors: List[ValidationIssue] = []
        score = 100
        critical = False

        overflow = self.check_text_overflow(slide, components)
        if overflow:
            score -= 20
            critical = critical or overflow.code.startswith('ERR_')
            errors.append(overflow)

        icon_count, requires_icons = self.count_icons(components)
        min_visuals = self._density_value(slide, 'minVisuals') or 0
        if requires_icons and icon_count == 0:
            score -= 30
            critical = True
            errors.append(ValidationIssue(
                code='ERR_MISSING_VISUALS_CRITICAL',
                message='Visual component (cards/grid) has 0 icons.',
                suggested_fix='Inject standard icons into item objects.',
            ))
        elif icon_count < min_visuals:
            score -= 15
            errors.append(ValidationIssue(
                code='WARN_MISSING_VISUALS',
                message=f"Found {icon_count} icons, required {min_visuals:g}.",
                suggested_fix="Add 'icon' property to metrics, steps, or grid items.",
            ))

        router_config = slide.get('routerConfig') if isinstance(slide.get('routerConfig'), dict) else {}
        if router_config.get('renderMode') == DATA_VIZ_MODE or slide.get('type') == DATA_VIZ_MODE:
            has_chart = any(c.get('type') == CHART_FRAME for c in components)
            if not has_chart and not slide.get('chartSpec'):
                score -= 30
                critical = True
                errors.append(ValidationIssue(
                    code='ERR_MODE_MISMATCH',
                    message='Data-Viz mode requires a Chart component or Chart Spec.',
                    suggested_fix="Change component type to 'chart-frame' or add valid chartSpec.",
                ))

        if not slide.get('citations'):
            errors.append(ValidationIssue(
                code='WARN_NO_CITATIONS',
                message='Slide contains content but no citations found.',
                suggested_fix='Ensure factual claims map to source IDs.',
            ))

        structural = self.check_structure(components)
        if structural:
            critical = True
            errors.extend(structural)

        content_string = json.dumps(components, ensure_ascii=False, default=str).lower()
        loop = WORD_LOOP_PATTERN.search(content_string)
        if loop:
            score -= 50
            critical = True
            errors.append(ValidationIssue(
                code='ERR_REPETITION_DETECTED',
                message=f"Detected repetitive loop: \"{loop.group(0)[:20]}...\"",
                suggested_fix='Rewrite content to remove repeated words.',
            ))

        for component in components:
            items = self._component_texts(component)
            unique_items = {item.strip().lower() for item in items}
            if len(items) <= len(unique_items):
                continue
            score -= 20
            if len(unique_items) < len(items) / 2:
                critical = True
                errors.append(ValidationIssue(
                    code='ERR_REPETITION_DETECTED',
                    message='Component contains identical items.',
                    suggested_fix='Ensure list items are unique.',
                ))
            else:
                errors.append(ValidationIssue(
                    code='WARN_DUPLICATE_ITEMS',
                    message='Some list items are duplicates.',
                    suggested_fix='Deduplicate list items.',
                ))

        if critical:
            logger.info(f"[QA] Slide failed quality validation: {[e.code for e in errors]}")
        return ValidationResult(passed=not critical, score=score, errors=errors)


_default_validator = SlideQualityValidator()


def validate_slide(slide: Dict[str, Any]) -> ValidationResult:
    """Score a slide with the default validator."""
    return _default_validator.validate(slide)
