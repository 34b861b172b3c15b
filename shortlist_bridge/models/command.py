"""Queued shortlist commands and their execution reports."""

from datetime import datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import ConfigDict, Field

from shortlist_bridge.models.base import WireModel, utcnow
from shortlist_bridge.models.voice import ActionOperation, ProposedAction


class Action(WireModel):
    """
    A queued instruction awaiting execution by the browser extension.
    Pending while `executed` is False; the execution fields are filled in
    by the ReconciliationReporter.
    """

    id: str
    kind: Literal["shortlist"] = "shortlist"
    operation: ActionOperation
    target_name: str
    confidence: float = Field(ge=0, le=1)
    origin_submission_id: str
    created_at: datetime

    executed: bool = False
    executed_at: Optional[datetime] = None
    succeeded: Optional[bool] = None
    outcome_message: Optional[str] = None

    @classmethod
    def from_proposal(
        cls,
        proposal: ProposedAction,
        submission_id: str,
        created_at: Optional[datetime] = None,
    ) -> "Action":
        return cls(
            id=f"cmd_{uuid4().hex[:12]}",
            kind=proposal.kind,
            operation=proposal.operation,
            target_name=proposal.target_name,
            confidence=proposal.confidence,
            origin_submission_id=submission_id,
            created_at=created_at or utcnow(),
        )


class ExecutionReportEntry(WireModel):
    """One execution report from the polling client. Append-only."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    succeeded: bool
    message: str = ""
    reported_at: datetime
    executed_at: Optional[datetime] = None     # Client's own clock, if it sent one
    source: str = "unknown"
