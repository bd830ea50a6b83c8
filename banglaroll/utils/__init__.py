"""
Utility functions for the electoral roll recovery pipeline.
"""

from .file_utils import (
    iter_documents,
    list_documents,
    save_upload,
    ensure_dir,
    get_relative_path,
)

from .timing import (
    timed_operation,
    format_duration,
    Timer,
)

from .bengali import (
    to_latin_digits,
    resolve_two_digit_year,
    parse_bengali_date,
)

__all__ = [
    # File utilities
    "iter_documents",
    "list_documents",
    "save_upload",
    "ensure_dir",
    "get_relative_path",

    # Timing utilities
    "timed_operation",
    "format_duration",
    "Timer",

    # Bengali numerals and dates
    "to_latin_digits",
    "resolve_two_digit_year",
    "parse_bengali_date",
]
