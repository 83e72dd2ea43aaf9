"""
Budget enforcement: character truncation and list-length caps.

Hard ceilings come from the static per-kind and per-variant tables; the
caller's density budget is a soft ceiling layered underneath. Whichever is
more restrictive wins.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, TypeVar

from slide_repair.repair.constants import (
    CONTENT_LIMITS,
    DENSE_BULLET_CHARS,
    DENSE_BULLET_COUNT,
    LIST_LIMITS,
    MIN_BULLET_CHARS,
    TEXT_BULLETS,
)
from slide_repair.repair.layouts import LayoutVariantSpec
from slide_repair.repair.warning_log import WarningLog
from slide_repair.utils.text import ELLIPSIS, is_number

T = TypeVar('T')


@dataclass(frozen=True)
class DensityLimits:
    """Validated view of routerConfig.densityBudget."""

    max_items: Optional[int] = None
    max_chars: Optional[int] = None
    # maxItems as supplied, kept even when it is too small to act as a cap
    requested_max_items: Optional[float] = None

    @property
    def per_item_chars(self) -> Optional[int]:
        if not self.max_chars:
            return None
        items = self.max_items or LIST_LIMITS[TEXT_BULLETS]
        return math.floor(self.max_chars / max(1, items))


def _finite_number(value: Any) -> Optional[float]:
    return value if is_number(value) and math.isfinite(value) else None


def _positive_int(value: Any) -> Optional[int]:
    if _finite_number(value) is None:
        return None
    as_int = int(value)
    return as_int if as_int > 0 else None


def read_density_limits(router_config: Any) -> DensityLimits:
    """Extract usable density limits; zero, negative or non-numeric entries count as absent.

    The raw numeric maxItems is kept separately for the grid-variant
    feasibility check, which applies to any number below 2.
    """
    if not isinstance(router_config, dict):
        return DensityLimits()
    budget = router_config.get('densityBudget')
    if not isinstance(budget, dict):
        return DensityLimits()
    return DensityLimits(
        max_items=_positive_int(budget.get('maxItems')),
        max_chars=_positive_int(budget.get('maxChars')),
        requested_max_items=_finite_number(budget.get('maxItems')),
    )


def truncate_text(text: Any, max_chars: int, log: Optional[WarningLog] = None, label: Optional[str] = None) -> Any:
    """Trim text to at most max_chars, ending in an ellipsis when shortened."""
    if not isinstance(text, str) or len(text) <= max_chars:
        return text
    trimmed = text[:max(0, max_chars - 1)].rstrip() + ELLIPSIS
    if log is not None and label:
        log.add(f"Auto-trimmed {label} to {max_chars} chars")
    return trimmed


def cap_list(items: List[T], max_items: int, log: Optional[WarningLog] = None, label: Optional[str] = None) -> List[T]:
    """Keep the first max_items entries in their original order."""
    if len(items) <= max_items:
        return items
    if log is not None and label:
        log.add(f"Auto-trimmed {label} to {max_items} items")
    return items[:max_items]


def item_cap(kind: str, density: DensityLimits) -> int:
    """List cap for a kind: the static limit, tightened by density maxItems."""
    hard_cap = LIST_LIMITS[kind]
    if density.max_items:
        return min(hard_cap, density.max_items)
    return hard_cap


def bullet_count_cap(spec: LayoutVariantSpec, density: DensityLimits) -> int:
    if density.max_items:
        return min(spec.bullet_cap, density.max_items)
    return spec.bullet_cap


def bullet_char_cap(spec: LayoutVariantSpec, line_count: int, density: DensityLimits) -> int:
    """
    Per-line character cap for text bullets.

    Args:
        spec: Layout variant the bullets render in
        line_count: Number of lines before de-duplication
        density: Caller-supplied soft limits

    Returns:
        The variant base cap, tightened for dense lists and by the density
        budget's per-item share, never below the absolute floor.
    """
    cap = spec.bullet_char_cap
    if line_count >= DENSE_BULLET_COUNT:
        cap = min(cap, DENSE_BULLET_CHARS)
    per_item = density.per_item_chars
    if per_item:
        cap = min(cap, per_item)
    return min(CONTENT_LIMITS['bullet'], max(MIN_BULLET_CHARS, cap))


