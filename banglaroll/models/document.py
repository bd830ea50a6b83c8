"""
Document models.

Represents the assembled text of one document and the outcome of
extracting a single entry from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import RecordRejected
from .voter import VoterRecord


@dataclass
class DocumentText:
    """
    Ordered page texts of a document and their assembled form.

    Page boundaries are kept as line breaks in ``text``.
    """
    source_file: str = ""
    pages: List[str] = field(default_factory=list)
    text: str = ""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass
class ExtractionResult:
    """
    Result of extracting one RawEntry.

    Exactly one of ``record`` or ``rejection`` is set.
    """
    record: Optional[VoterRecord] = None
    rejection: Optional[RecordRejected] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def accepted(cls, record: VoterRecord) -> "ExtractionResult":
        """Create successful result."""
        return cls(record=record)

    @classmethod
    def rejected(cls, rejection: RecordRejected) -> "ExtractionResult":
        """Create rejection result."""
        return cls(rejection=rejection)
