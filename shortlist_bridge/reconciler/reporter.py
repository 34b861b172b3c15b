"""
Reconciliation Reporter — applies execution reports from the extension.

Each report marks the matching command executed (overwriting any earlier
outcome) and is appended to the bounded execution history. A report for
an unknown command changes nothing and raises NotFoundError.
"""

import logging
from datetime import datetime
from typing import Optional

from shortlist_bridge.commands.queue import CommandQueue
from shortlist_bridge.errors import ValidationError
from shortlist_bridge.history.log import ExecutionHistory
from shortlist_bridge.models.base import utcnow
from shortlist_bridge.models.command import Action, ExecutionReportEntry

logger = logging.getLogger(__name__)


class ReconciliationReporter:

    def __init__(self, queue: CommandQueue, history: ExecutionHistory):
        self.queue = queue
        self.history = history

    def report(
        self,
        action_id: str,
        succeeded: bool,
        message: str = "",
        executed_at: Optional[datetime] = None,
        source: str = "unknown",
        request_id: str = "-",
    ) -> Action:
        if not isinstance(action_id, str) or not action_id.strip():
            raise ValidationError("Missing commandId")

        reported_at = utcnow()
        updated = self.queue.mark_executed(
            action_id,
            succeeded=succeeded,
            message=message,
            at=executed_at or reported_at,
        )

        self.history.append(ExecutionReportEntry(
            action_id=action_id,
            succeeded=succeeded,
            message=message,
            reported_at=reported_at,
            executed_at=executed_at,
            source=source,
        ))

        logger.info(
            "[%s] Command %s reported %s by %s",
            request_id, action_id, "SUCCESS" if succeeded else "FAILED", source,
        )
        return updated
