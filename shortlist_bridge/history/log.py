"""
Bounded FIFO logs for observability: voice submissions and execution reports.

Backed by a capped deque, so appends are O(1) and the oldest entry falls
off once the cap is reached.
"""

import threading
from collections import deque
from typing import Deque, Generic, List, Optional, TypeVar

from shortlist_bridge.models.command import ExecutionReportEntry
from shortlist_bridge.models.voice import VoiceSubmission

T = TypeVar("T")

DEFAULT_CAPACITY = 50


class BoundedLog(Generic[T]):
    """Keeps the most recent `capacity` entries in insertion order."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._entries: Deque[T] = deque(maxlen=capacity)
        self._total = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    @property
    def total_appended(self) -> int:
        """Entries ever appended, including evicted ones."""
        return self._total

    def append(self, entry: T) -> None:
        with self._lock:
            self._entries.append(entry)
            self._total += 1

    def entries(self) -> List[T]:
        """All retained entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def recent(self, limit: int = 10) -> List[T]:
        """The last `limit` entries, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            return list(self._entries)[-limit:]

    def __len__(self) -> int:
        return len(self._entries)


class VoiceLog(BoundedLog[VoiceSubmission]):
    """Recent voice submissions and their translations."""

    def find(self, submission_id: str) -> Optional[VoiceSubmission]:
        return next((s for s in self.entries() if s.id == submission_id), None)


class ExecutionHistory(BoundedLog[ExecutionReportEntry]):
    """Recent execution reports from the polling client."""

    def for_action(self, action_id: str) -> List[ExecutionReportEntry]:
        return [e for e in self.entries() if e.action_id == action_id]
