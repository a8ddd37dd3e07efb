import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryEntry:
    content: str
    timestamp: int  # milliseconds since the epoch


class EditHistory:
    """
    Bounded linear undo/redo history of buffer snapshots.

    The index always points at the entry matching the current buffer.
    Pushing after an undo discards the redo tail; once the limit is reached
    the oldest entry is evicted.
    """

    def __init__(self, initial: str = '', limit: int = DEFAULT_HISTORY_LIMIT,
                 clock: Optional[Callable[[], int]] = None):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._clock = clock or _now_ms
        self._entries: List[HistoryEntry] = [HistoryEntry(initial, self._clock())]
        self._index: int = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def current(self) -> str:
        return self._entries[self._index].content

    def __len__(self):
        return len(self._entries)

    def push(self, content: str) -> bool:
        """Record a new snapshot. Returns False when it matches the current one."""
        if content == self.current:
            return False
        if self._index < len(self._entries) - 1:
            dropped = len(self._entries) - 1 - self._index
            self._entries = self._entries[: self._index + 1]
            logger.debug(f"History: discarded {dropped} redo entries")
        self._entries.append(HistoryEntry(content, self._clock()))
        if len(self._entries) > self.limit:
            self._entries = self._entries[-self.limit:]
        self._index = len(self._entries) - 1
        return True

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[str]:
        if not self.can_undo():
            return None
        self._index -= 1
        return self.current

    def redo(self) -> Optional[str]:
        if not self.can_redo():
            return None
        self._index += 1
        return self.current

    def reset(self, content: str):
        """Start over from a single snapshot (e.g. after loading a file)."""
        self._entries = [HistoryEntry(content, self._clock())]
        self._index = 0
        logger.debug("History: reset")
