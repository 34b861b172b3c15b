"""
Bridge State — the components one running service shares across requests.

Created once per app (or per test), handed to the API layer, closed on
shutdown. Orchestrates the flows that touch more than one component:

  upload  -> EntityStore (-> voice context hook)
  voice   -> EntityStore snapshot -> IntentTranslator -> CommandQueue + VoiceLog
  report  -> ReconciliationReporter -> CommandQueue + ExecutionHistory
"""

import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from shortlist_bridge.commands.queue import CommandQueue
from shortlist_bridge.context.notifier import VoiceContextNotifier
from shortlist_bridge.entity_store.store import EntityStore
from shortlist_bridge.errors import ValidationError
from shortlist_bridge.history.log import ExecutionHistory, VoiceLog
from shortlist_bridge.models.base import utcnow
from shortlist_bridge.models.candidate import CandidateRecord
from shortlist_bridge.models.command import Action
from shortlist_bridge.models.config import BridgeConfig
from shortlist_bridge.models.voice import TranslationOutcome, VoiceSubmission
from shortlist_bridge.reconciler.reporter import ReconciliationReporter
from shortlist_bridge.translation.backend import OpenAIChatBackend
from shortlist_bridge.translation.translator import IntentTranslator

logger = logging.getLogger(__name__)


class BridgeState:

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        entity_store: Optional[EntityStore] = None,
        command_queue: Optional[CommandQueue] = None,
        voice_log: Optional[VoiceLog] = None,
        execution_history: Optional[ExecutionHistory] = None,
        translator: Optional[IntentTranslator] = None,
        notifier: Optional[VoiceContextNotifier] = None,
    ):
        self.config = config or BridgeConfig()
        self.entity_store = entity_store or EntityStore()
        self.command_queue = command_queue or CommandQueue(
            retention=self.config.command_retention
        )
        self.voice_log = voice_log or VoiceLog(self.config.voice_log_capacity)
        self.execution_history = execution_history or ExecutionHistory(
            self.config.execution_history_capacity
        )
        self.translator = translator or IntentTranslator(
            backend=OpenAIChatBackend.from_config(self.config),
            strict_targets=self.config.strict_targets,
        )
        self.notifier = notifier or VoiceContextNotifier.from_config(self.config)
        self.reporter = ReconciliationReporter(self.command_queue, self.execution_history)
        self.started_at = utcnow()
        self.last_activity = self.started_at

    def touch(self) -> None:
        self.last_activity = utcnow()

    # === UPLOAD ===

    def upload_candidates(
        self,
        candidates: Any,
        source: str = "unknown",
        updated_at: Optional[str] = None,
        request_id: str = "-",
    ) -> List[CandidateRecord]:
        records = self.entity_store.replace_all(candidates, updated_at=updated_at)
        names = [r.name for r in records]
        logger.info("[%s] Stored %d candidates from %s", request_id, len(records), source)
        logger.debug("[%s] Candidate names: %s", request_id, ", ".join(names))

        self.notifier.notify(names, request_id=request_id)
        return records

    # === VOICE ===

    def process_voice_command(
        self,
        text: Any,
        source: str = "unknown",
        request_id: str = "-",
    ) -> Tuple[VoiceSubmission, TranslationOutcome, List[Action]]:
        """
        Translate an utterance and queue the resulting actions.

        No lock is held while the translator runs; nothing is mutated
        until the translation is complete.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Missing voice text")

        received_at = utcnow()
        snapshot = self.entity_store.snapshot()
        outcome = self.translator.translate(text, snapshot, request_id=request_id)

        submission = VoiceSubmission(
            id=f"voice_{uuid4().hex[:12]}",
            text=text,
            received_at=received_at,
            source=source,
            translation=outcome.result,
            provenance=outcome.provenance,
        )
        created_at = utcnow()
        actions = [
            Action.from_proposal(p, submission.id, created_at=created_at)
            for p in outcome.result.actions
        ]

        self.command_queue.enqueue(actions)
        self.voice_log.append(submission)
        logger.info(
            "[%s] Voice command %s generated %d command(s) via %s",
            request_id, submission.id, len(actions), outcome.provenance.value,
        )
        return submission, outcome, actions

    # === REPORT ===

    def report_execution(
        self,
        command_id: Any,
        succeeded: bool,
        message: str = "",
        executed_at: Optional[datetime] = None,
        source: str = "unknown",
        request_id: str = "-",
    ) -> Action:
        return self.reporter.report(
            command_id,
            succeeded=succeeded,
            message=message,
            executed_at=executed_at,
            source=source,
            request_id=request_id,
        )

    # === DASHBOARD ===

    def dashboard(self) -> dict:
        window = self.config.dashboard_recent_window
        return {
            "candidates": {
                "count": len(self.entity_store),
                "names": self.entity_store.names(),
                "lastUpdated": self.entity_store.last_updated,
            },
            "voiceCommands": {
                "total": len(self.voice_log),
                "recent": [s.to_wire() for s in self.voice_log.recent(window)],
            },
            "pendingCommands": {
                "unExecuted": self.command_queue.pending_count(),
                "total": len(self.command_queue),
                "recent": [a.to_wire() for a in self.command_queue.recent(window)],
            },
            "executionHistory": {
                "total": len(self.execution_history),
                "recent": [e.to_wire() for e in self.execution_history.recent(window)],
            },
            "systemStatus": {
                "apiHealth": "online",
                "startedAt": self.started_at.isoformat(),
                "lastActivity": self.last_activity.isoformat(),
                "corsEnabled": True,
                "translationBackendAvailable": self.translator.backend_available,
                "strictTargets": self.translator.strict_targets,
            },
        }

    def close(self) -> None:
        backend = self.translator.backend
        if backend is not None and hasattr(backend, "close"):
            backend.close()
        self.notifier.close()
