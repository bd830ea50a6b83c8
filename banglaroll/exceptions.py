"""
Custom exceptions for the electoral roll recovery pipeline.

All application-specific exceptions inherit from VoterRollError.
"""

from __future__ import annotations

from typing import Optional, Any, Sequence


class VoterRollError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (for debugging)
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(VoterRollError):
    """
    Invalid or missing configuration.

    Examples:
        - Rule table file missing or not valid JSON
        - Character-table key longer than one codepoint
        - Label-fix pattern that does not compile
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, recoverable=False)


class DocumentError(VoterRollError):
    """
    Source document unreadable or unsupported.

    Examples:
        - Zero-byte or corrupted PDF
        - Password-protected PDF
        - File over the size, page or time ceiling
    """

    def __init__(
        self,
        message: str,
        pdf_path: Optional[str] = None,
        page_number: Optional[int] = None
    ):
        details = {}
        if pdf_path:
            details["pdf_path"] = pdf_path
        if page_number is not None:
            details["page_number"] = page_number
        super().__init__(message, details=details, recoverable=False)


class EmptyTextError(VoterRollError):
    """Document opened fine but yielded no text (likely scanned-only pages)."""

    def __init__(self, message: str = "No text extracted", pdf_path: Optional[str] = None, pages: int = 0):
        details = {"pages": pages}
        if pdf_path:
            details["pdf_path"] = pdf_path
        super().__init__(message, details=details, recoverable=False)


class RecordRejected(VoterRollError):
    """
    A segmented entry lacked a required field.

    Returned inside an ExtractionResult rather than raised; it only
    contributes to the file's rejected count.
    """

    def __init__(
        self,
        missing_fields: Sequence[str],
        serial_number: str = "",
        preview: str = ""
    ):
        self.missing_fields = tuple(missing_fields)
        details: dict[str, Any] = {"missing_fields": list(self.missing_fields)}
        if serial_number:
            details["serial_number"] = serial_number
        if preview:
            details["preview"] = preview[:200]
        super().__init__(
            f"Entry rejected, missing {', '.join(self.missing_fields)}",
            details=details,
            recoverable=True,
        )

    @property
    def reason(self) -> str:
        """Short reason key used in batch statistics (e.g. "missing:name")."""
        return "missing:" + "+".join(self.missing_fields)


class DataPersistenceError(VoterRollError):
    """
    Failed to save or load data.

    Examples:
        - File write permission denied
        - Invalid JSON format
        - Disk full
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None  # "save" or "load"
    ):
        details = {}
        if file_path:
            details["file_path"] = file_path
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details, recoverable=False)


class ProcessingAbortedError(VoterRollError):
    """
    Processing was aborted (e.g., by user interrupt).
    """

    def __init__(
        self,
        message: str = "Processing aborted by user",
        items_processed: int = 0,
        items_total: int = 0
    ):
        details = {
            "items_processed": items_processed,
            "items_total": items_total
        }
        super().__init__(message, details=details, recoverable=True)
