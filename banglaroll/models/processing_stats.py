"""
Processing statistics models.

Per-file and per-batch counts, status and timing, suitable for a
CLI report or a UI banner.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

# File status values
STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_EMPTY_TEXT = "empty_text"  # document opened, no text (likely image-only)
STATUS_NO_RECORDS = "no_records"  # text found, nothing extracted (rule gap)
STATUS_FAILED = "failed"
STATUS_CANCELLED = "cancelled"


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


@dataclass
class FileStats:
    """Statistics for one source document."""
    source_file: str = ""
    status: str = STATUS_PENDING

    pages: int = 0
    chars: int = 0
    segments: int = 0
    extracted: int = 0
    rejected: int = 0
    rejection_reasons: Counter = field(default_factory=Counter)

    error: str = ""
    error_type: str = ""
    duration_sec: float = 0.0

    @property
    def has_error(self) -> bool:
        return self.status in (STATUS_FAILED, STATUS_EMPTY_TEXT, STATUS_NO_RECORDS)

    def fail(self, error: Exception, status: str = STATUS_FAILED) -> None:
        """Record a per-file failure."""
        self.status = status
        self.error = str(error)
        self.error_type = type(error).__name__

    def add_rejection(self, reason: str) -> None:
        self.rejected += 1
        self.rejection_reasons[reason] += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_file": self.source_file,
            "status": self.status,
            "pages": self.pages,
            "chars": self.chars,
            "segments": self.segments,
            "extracted": self.extracted,
            "rejected": self.rejected,
            "rejection_reasons": dict(self.rejection_reasons),
            "error": self.error or None,
            "error_type": self.error_type or None,
            "duration_sec": round(self.duration_sec, 4),
        }


@dataclass
class BatchStats:
    """
    Aggregate statistics for a folder run.

    Totals are derived from the per-file entries.
    """
    folder: str = ""
    started_at: str = ""
    completed_at: str = ""
    cancelled: bool = False
    total_time_sec: float = 0.0
    files: Dict[str, FileStats] = field(default_factory=dict)

    def start(self) -> None:
        self.started_at = _now_iso()

    def complete(self) -> None:
        self.completed_at = _now_iso()

    def add(self, stats: FileStats) -> None:
        self.files[stats.source_file] = stats

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_extracted(self) -> int:
        return sum(s.extracted for s in self.files.values())

    @property
    def total_rejected(self) -> int:
        return sum(s.rejected for s in self.files.values())

    def count_status(self, status: str) -> int:
        return sum(1 for s in self.files.values() if s.status == status)

    @property
    def failed_files(self) -> list[str]:
        return sorted(name for name, s in self.files.items() if s.has_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "folder": self.folder,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "cancelled": self.cancelled,
            "counts": {
                "files": self.total_files,
                "completed": self.count_status(STATUS_COMPLETED),
                "empty_text": self.count_status(STATUS_EMPTY_TEXT),
                "no_records": self.count_status(STATUS_NO_RECORDS),
                "failed": self.count_status(STATUS_FAILED),
                "cancelled": self.count_status(STATUS_CANCELLED),
                "extracted": self.total_extracted,
                "rejected": self.total_rejected,
            },
            "total_time_sec": round(self.total_time_sec, 4),
            "files": {name: s.to_dict() for name, s in sorted(self.files.items())},
        }

    def summary_str(self) -> str:
        """Generate a human-readable summary string."""
        lines = [
            f"Batch Summary for: {self.folder}",
            f"  Files: {self.total_files} "
            f"(completed {self.count_status(STATUS_COMPLETED)}, "
            f"empty {self.count_status(STATUS_EMPTY_TEXT)}, "
            f"no records {self.count_status(STATUS_NO_RECORDS)}, "
            f"failed {self.count_status(STATUS_FAILED)})",
            f"  Voters: {self.total_extracted} extracted, {self.total_rejected} rejected",
            f"  Total time: {self.total_time_sec:.2f}s",
        ]

        if self.cancelled:
            lines.append(f"  Cancelled: {self.count_status(STATUS_CANCELLED)} file(s) not processed")

        for name in self.failed_files:
            stats = self.files[name]
            lines.append(f"  ! {name}: {stats.status} {stats.error}".rstrip())

        return "\n".join(lines)
