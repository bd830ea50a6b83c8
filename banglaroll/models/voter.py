"""
Voter data models.

Represents individual voter records recovered from electoral roll text.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Optional, Any


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a Z suffix."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


@dataclass
class VoterRecord:
    """
    One voter recovered from a document.

    Only built by the field extractor once both name and voter_id
    are non-empty after cleaning.
    """

    # Identifiers
    serial_number: str = ""  # position within source document, not unique
    voter_id: str = ""  # natural key for search

    # Personal information
    name: str = ""
    father_name: str = ""
    mother_name: str = ""
    profession: str = ""
    date_of_birth: Optional[date] = None
    address: str = ""

    # Traceability
    source_file: str = ""
    created_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self):
        """Clean whitespace after initialization."""
        self.serial_number = (self.serial_number or "").strip()
        self.voter_id = (self.voter_id or "").strip()
        self.name = (self.name or "").strip()
        self.father_name = (self.father_name or "").strip()
        self.mother_name = (self.mother_name or "").strip()
        self.profession = (self.profession or "").strip()
        self.address = (self.address or "").strip()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["date_of_birth"] = self.date_of_birth.isoformat() if self.date_of_birth else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VoterRecord":
        """Create VoterRecord from dictionary, ignoring unknown keys."""
        values = {
            k: v for k, v in data.items()
            if k in cls.__dataclass_fields__
        }
        dob = values.get("date_of_birth")
        if isinstance(dob, str):
            values["date_of_birth"] = date.fromisoformat(dob) if dob else None
        return cls(**values)

    def voter_id_ends_with(self, digits: str) -> bool:
        if not self.voter_id or not digits:
            return False
        return self.voter_id.endswith(digits)


@dataclass(frozen=True)
class RawEntry:
    """
    Contiguous text span believed to describe one voter.

    Produced by the segmenter; never persisted.
    """
    text: str
    index: int = 0  # 0-based position within its document
    source_file: str = ""

    @property
    def preview(self) -> str:
        return self.text[:120]
