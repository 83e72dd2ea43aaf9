"""
Append-only, deduplicated, ordered log of repair actions.
"""

from typing import Iterable, List, Optional

from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)


class WarningLog:
    """Collects human-readable repair warnings for one repair call.

    The log is observability only; the engine never branches on its content.
    """

    def __init__(self, initial: Optional[Iterable[str]] = None):
        self._entries: List[str] = []
        self._seen = set()
        if initial:
            for entry in initial:
                if isinstance(entry, str) and entry.strip():
                    self._append(entry)

    def _append(self, message: str) -> bool:
        if message in self:
            return False
        self._seen.add(message)
        self._entries.append(message)
        return True

    def add(self, message: str) -> bool:
        """Record a warning; returns False when it was already present."""
        added = self._append(message)
        if added:
            logger.debug(f"[AUTO-REPAIR] {message}")
        return added

    def to_list(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, message: object) -> bool:
        return message in self._seen

    def __len__(self) -> int:
        return len(self._entries)
