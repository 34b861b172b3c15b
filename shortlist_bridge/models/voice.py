"""Voice translation models — what the IntentTranslator produces."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from shortlist_bridge.models.base import WireModel


class ActionOperation(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class TranslationProvenance(str, Enum):
    BACKEND = "backend"     # Language-model backend answered with the documented shape
    FALLBACK = "fallback"   # Deterministic keyword matching


class ProposedAction(WireModel):
    """A shortlist instruction as translated, before it is queued."""

    kind: Literal["shortlist"] = "shortlist"
    operation: ActionOperation
    target_name: str = Field(min_length=1)
    confidence: float = Field(ge=0, le=1)


class TranslationResult(WireModel):
    """Interpretation plus zero or more actions. Empty actions = no actionable intent."""

    model_config = ConfigDict(frozen=True)

    interpretation: str
    actions: List[ProposedAction] = []


class TranslationOutcome(WireModel):
    """A TranslationResult tagged with where it came from."""

    model_config = ConfigDict(frozen=True)

    provenance: TranslationProvenance
    result: TranslationResult
    fallback_reason: Optional[str] = None       # Why the backend was not used
    dropped_targets: List[str] = []             # Names rejected by strict target checking

    @property
    def from_backend(self) -> bool:
        return self.provenance == TranslationProvenance.BACKEND


class VoiceSubmission(WireModel):
    """One raw voice request and what it translated to. Immutable once logged."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    received_at: datetime
    source: str
    translation: TranslationResult
    provenance: TranslationProvenance
