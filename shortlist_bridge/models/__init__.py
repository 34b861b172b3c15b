"""Shortlist bridge data models."""

from shortlist_bridge.models.base import WireModel, utcnow
from shortlist_bridge.models.candidate import CandidateRecord
from shortlist_bridge.models.command import Action, ExecutionReportEntry
from shortlist_bridge.models.config import BridgeConfig
from shortlist_bridge.models.voice import (
    ActionOperation,
    ProposedAction,
    TranslationOutcome,
    TranslationProvenance,
    TranslationResult,
    VoiceSubmission,
)

__all__ = [
    "Action",
    "ActionOperation",
    "BridgeConfig",
    "CandidateRecord",
    "ExecutionReportEntry",
    "ProposedAction",
    "TranslationOutcome",
    "TranslationProvenance",
    "TranslationResult",
    "VoiceSubmission",
    "WireModel",
    "utcnow",
]
