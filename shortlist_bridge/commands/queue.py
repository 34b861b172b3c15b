"""
Command Queue — shortlist actions waiting for the browser extension.

Behavioral Contract:
- Insertion order is preserved; "pending" means executed == False.
- An action is queued exactly once (duplicate ids are rejected).
- A failed report leaves the action pending so the extension can retry it.
- Execution fields are overwritten on re-report, never duplicated.
- Retention is bounded: past `retention` entries the oldest is evicted.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime
from typing import List, Optional, Sequence

from shortlist_bridge.errors import NotFoundError, ValidationError
from shortlist_bridge.models.base import utcnow
from shortlist_bridge.models.command import Action

logger = logging.getLogger(__name__)


class CommandQueue:
    """In-memory, insertion-ordered queue of Actions."""

    def __init__(self, retention: int = 500):
        if retention < 1:
            raise ValueError("retention must be >= 1")
        self.retention = retention
        self._actions: "OrderedDict[str, Action]" = OrderedDict()
        self._lock = threading.Lock()

    def enqueue(self, actions: Sequence[Action]) -> int:
        """Append actions in order. The whole batch is rejected if any entry is invalid."""
        batch = list(actions)
        with self._lock:
            seen = set()
            for action in batch:
                if not isinstance(action, Action):
                    raise ValidationError(
                        f"Cannot enqueue {type(action).__name__}, expected Action"
                    )
                if action.id in self._actions or action.id in seen:
                    raise ValidationError(f"Action {action.id} is already queued")
                seen.add(action.id)

            for action in batch:
                self._actions[action.id] = action.model_copy()
                self._evict_over_retention()
        return len(batch)

    def list_pending(self) -> List[Action]:
        """Unexecuted actions, oldest first."""
        with self._lock:
            return [a.model_copy() for a in self._actions.values() if not a.executed]

    def mark_executed(
        self,
        action_id: str,
        succeeded: bool,
        message: str = "",
        at: Optional[datetime] = None,
    ) -> Action:
        """
        Record the outcome of an action. Reporting the same id again
        overwrites the previous outcome. A failed outcome keeps the action pending.

        Raises NotFoundError (and changes nothing) for an unknown id.
        """
        with self._lock:
            action = self._actions.get(action_id)
            if action is None:
                raise NotFoundError(f"Command not found: {action_id}")

            updated = action.model_copy(update={
                "executed": succeeded,
                "executed_at": at or utcnow(),
                "succeeded": succeeded,
                "outcome_message": message,
            })
            self._actions[action_id] = updated
            return updated.model_copy()

    def get(self, action_id: str) -> Optional[Action]:
        with self._lock:
            action = self._actions.get(action_id)
            return action.model_copy() if action else None

    def recent(self, limit: int = 10) -> List[Action]:
        """The last `limit` actions regardless of state, oldest first."""
        with self._lock:
            items = list(self._actions.values())
        return [a.model_copy() for a in items[-limit:]] if limit > 0 else []

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for a in self._actions.values() if not a.executed)

    def __len__(self) -> int:
        return len(self._actions)

    def _evict_over_retention(self) -> None:
        while len(self._actions) > self.retention:
            evicted_id, evicted = self._actions.popitem(last=False)
            if not evicted.executed:
                logger.warning("Evicted pending command %s (retention %d)", evicted_id, self.retention)
