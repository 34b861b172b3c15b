"""
Entity Store — the candidate list most recently scraped by the extension.

Updated by: candidate uploads (full replacement, never merged)
Queried by: the voice pipeline (translation snapshot) and the dashboard
"""

import logging
import threading
from collections.abc import Sequence
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from shortlist_bridge.errors import ValidationError
from shortlist_bridge.models.base import utcnow
from shortlist_bridge.models.candidate import CandidateRecord

logger = logging.getLogger(__name__)


class EntityStore:
    """
    In-memory candidate registry. Each upload replaces the whole list;
    there is no partial update.
    """

    def __init__(self):
        self._records: List[CandidateRecord] = []
        self._last_updated: Optional[str] = None
        self._lock = threading.Lock()

    def replace_all(
        self, records: Any, updated_at: Optional[str] = None
    ) -> List[CandidateRecord]:
        """
        Replace the stored candidates with `records`.

        Everything is validated before the swap, so a rejected upload
        leaves the previous snapshot untouched.
        """
        validated = self._validate(records)
        with self._lock:
            self._records = validated
            self._last_updated = updated_at or utcnow().isoformat()
        return list(validated)

    def snapshot(self) -> List[CandidateRecord]:
        """Current candidates, in upload order."""
        with self._lock:
            return list(self._records)

    def names(self) -> List[str]:
        with self._lock:
            return [r.name for r in self._records]

    @property
    def last_updated(self) -> Optional[str]:
        with self._lock:
            return self._last_updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _validate(self, records: Any) -> List[CandidateRecord]:
        if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
            raise ValidationError(
                "Invalid candidates data - expected array of candidates, "
                f"received {type(records).__name__}"
            )
        if not records:
            raise ValidationError("Invalid candidates data - candidate list is empty")

        validated: List[CandidateRecord] = []
        seen = set()
        for index, raw in enumerate(records):
            if isinstance(raw, CandidateRecord):
                record = raw
            elif isinstance(raw, dict):
                try:
                    record = CandidateRecord.model_validate(raw)
                except PydanticValidationError as exc:
                    first = exc.errors()[0]
                    field = ".".join(str(p) for p in first.get("loc", ())) or "record"
                    raise ValidationError(
                        f"Invalid candidate at index {index}: {field} {first.get('msg', 'is invalid')}"
                    ) from exc
            else:
                raise ValidationError(
                    f"Invalid candidate at index {index}: expected object, "
                    f"received {type(raw).__name__}"
                )

            if record.name in seen:
                raise ValidationError(f"Duplicate candidate name: {record.name}")
            seen.add(record.name)
            validated.append(record)

        return validated
