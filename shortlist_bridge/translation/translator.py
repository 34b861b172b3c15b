"""
Intent Translator — free text + candidate snapshot -> TranslationOutcome.

Tiered:
  1. Language-model backend, when one is configured.
  2. Keyword fallback, when there is no backend or the backend fails.

A backend failure is never an error for the caller; it degrades to the
fallback and the outcome records why.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from shortlist_bridge.errors import TranslationBackendError
from shortlist_bridge.models.candidate import CandidateRecord
from shortlist_bridge.models.voice import (
    ActionOperation,
    ProposedAction,
    TranslationOutcome,
    TranslationProvenance,
    TranslationResult,
)
from shortlist_bridge.translation.backend import TranslationBackend

logger = logging.getLogger(__name__)

FALLBACK_TRIGGERS = ("shortlist", "add")
FALLBACK_CONFIDENCE = 0.7


def fallback_translate(text: str, candidate_names: Sequence[str]) -> TranslationResult:
    """
    Deterministic keyword matching.

    If the text mentions a trigger word, every candidate whose name appears
    in the text (case-insensitive substring) gets an `add` action. Only
    `add` is ever produced here; `remove` needs the backend.
    """
    lowered = text.lower()
    actions: List[ProposedAction] = []

    if any(trigger in lowered for trigger in FALLBACK_TRIGGERS):
        for name in candidate_names:
            if name and name.lower() in lowered:
                actions.append(ProposedAction(
                    operation=ActionOperation.ADD,
                    target_name=name,
                    confidence=FALLBACK_CONFIDENCE,
                ))

    return TranslationResult(
        interpretation=f'Fallback keyword processing: "{text}"',
        actions=actions,
    )


class IntentTranslator:
    """
    Turns a voice utterance into shortlist actions against a known
    candidate list.

    `strict_targets` drops backend actions naming a candidate that is not
    in the snapshot. Fallback actions always name snapshot entries.
    """

    def __init__(
        self,
        backend: Optional[TranslationBackend] = None,
        strict_targets: bool = False,
    ):
        self.backend = backend
        self.strict_targets = strict_targets

    @property
    def backend_available(self) -> bool:
        return self.backend is not None

    def translate(
        self,
        text: str,
        entities: Sequence[CandidateRecord],
        request_id: str = "-",
    ) -> TranslationOutcome:
        names = [e.name for e in entities]

        if self.backend is None:
            logger.info("[%s] No translation backend configured, using keyword fallback", request_id)
            return self._fallback(text, names, "backend not configured", request_id)

        try:
            result = self.backend.translate(text, names)
        except TranslationBackendError as exc:
            logger.warning("[%s] Translation backend failed: %s", request_id, exc)
            return self._fallback(text, names, str(exc), request_id)

        dropped: List[str] = []
        if self.strict_targets:
            result, dropped = self._drop_unknown_targets(result, names)
            if dropped:
                logger.warning(
                    "[%s] Dropped %d backend action(s) for unknown candidates: %s",
                    request_id, len(dropped), ", ".join(dropped),
                )

        logger.info("[%s] Backend produced %d action(s)", request_id, len(result.actions))
        return TranslationOutcome(
            provenance=TranslationProvenance.BACKEND,
            result=result,
            dropped_targets=dropped,
        )

    def _fallback(
        self, text: str, names: List[str], reason: str, request_id: str
    ) -> TranslationOutcome:
        result = fallback_translate(text, names)
        logger.info("[%s] Fallback produced %d action(s)", request_id, len(result.actions))
        return TranslationOutcome(
            provenance=TranslationProvenance.FALLBACK,
            result=result,
            fallback_reason=reason,
        )

    @staticmethod
    def _drop_unknown_targets(
        result: TranslationResult, names: List[str]
    ) -> Tuple[TranslationResult, List[str]]:
        known = set(names)
        kept = [a for a in result.actions if a.target_name in known]
        dropped = [a.target_name for a in result.actions if a.target_name not in known]
        if not dropped:
            return result, []
        return TranslationResult(interpretation=result.interpretation, actions=kept), dropped
