"""Candidate Record — one scraped row from the recruiter's search page."""

from typing import Optional

from pydantic import ConfigDict, Field

from shortlist_bridge.models.base import WireModel


class CandidateRecord(WireModel):
    """
    A named job candidate. `name` is the addressable key for shortlist
    actions; anything else the extension scraped is carried through as-is.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    job_title: Optional[str] = None
    location: Optional[str] = None

    def to_wire(self) -> dict:
        # Only the fields the extension sent.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
