"""
Data models for the electoral roll recovery pipeline.

These models represent the core data structures and are designed
to be easily serializable to JSON.
"""

from .voter import VoterRecord, RawEntry
from .document import DocumentText, ExtractionResult
from .processing_stats import (
    FileStats,
    BatchStats,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUS_EMPTY_TEXT,
    STATUS_NO_RECORDS,
    STATUS_FAILED,
    STATUS_CANCELLED,
)

__all__ = [
    # Voter models
    "VoterRecord",
    "RawEntry",

    # Document models
    "DocumentText",
    "ExtractionResult",

    # Processing stats
    "FileStats",
    "BatchStats",
    "STATUS_PENDING",
    "STATUS_COMPLETED",
    "STATUS_EMPTY_TEXT",
    "STATUS_NO_RECORDS",
    "STATUS_FAILED",
    "STATUS_CANCELLED",
]
