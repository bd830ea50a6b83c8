"""
Field Extractor.

Pulls the voter fields out of one segmented entry. Every field has an
ordered list of label patterns (correct spelling first, then the
corrupted spellings the repair pass may have missed); the first pattern
that matches wins. A record is only built when both the name and the
voter id survive cleaning.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Pattern, Sequence, Tuple

from ..exceptions import RecordRejected
from ..logger import get_logger
from ..models import ExtractionResult, RawEntry, VoterRecord
from ..rules import RuleTables, load_rule_tables
from ..utils.bengali import parse_bengali_date, to_latin_digits

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "voter_id")

_MULTI_SPACE_RE = re.compile(r" {2,}")

# Labels that can directly follow a name
_AFTER_NAME = r"(?:ভোটার|মোভাটার|Ïভাটার|Voter|পিতা|িপতা)"


@dataclass(frozen=True)
class FieldPattern:
    """
    One way of locating a field.

    Attributes:
        regex: Compiled pattern, searched anywhere in the entry
        group: Capture group holding the value
        normalizer: Applied to the cleaned value, with the rule tables
    """
    regex: Pattern[str]
    group: int = 1
    normalizer: Optional[Callable[[str, RuleTables], str]] = None

    def search(self, text: str) -> Optional[str]:
        match = self.regex.search(text)
        if not match:
            return None
        return match.group(self.group)


def _p(pattern: str, normalizer=None, flags: int = 0) -> FieldPattern:
    return FieldPattern(re.compile(pattern, flags), 1, normalizer)


FIELD_PATTERNS: Dict[str, Tuple[FieldPattern, ...]] = {
    "serial_number": (
        _p(r"^(\d{3,4})\.\s*(?:নাম|Name)\s*:", to_latin_digits),
    ),
    "name": (
        _p(rf"(?:নাম|Name)\s*:(?!\s*{_AFTER_NAME})\s*(.+?)(?=\s*(?:{_AFTER_NAME}|$))"),
    ),
    "voter_id": (
        _p(r"ভোটার\s*নং\s*:\s*(\d+)", to_latin_digits),
        _p(r"মোভাটার\s*নং\s*:\s*(\d+)", to_latin_digits),
        _p(r"Ïভাটার\s*নং\s*:\s*(\d+)", to_latin_digits),
        _p(r"ভোটার\s*নম্বর\s*:\s*(\d+)", to_latin_digits),
        _p(r"ভোটার\s*:\s*(\d+)", to_latin_digits),
        _p(r"Voter\s*No\.?\s*:\s*(\d+)", to_latin_digits, re.IGNORECASE),
        # No usable label: first standalone 10-17 digit run
        _p(r"(?<!\d)(\d{10,17})(?!\d)", to_latin_digits),
    ),
    "father_name": (
        _p(r"(?:পিতা|িপতা)\s*:\s*(.+?)(?=\s*(?:মাতা|মােতা|পেশা|ভোটার|ঠিকানা|$))"),
    ),
    "mother_name": (
        _p(r"(?:মাতা|মােতা)\s*:\s*(.+?)(?=\s*(?:পেশা|মোপশা|Ïপশা|জন্ম|ভোটার|ঠিকানা|$))"),
    ),
    "profession": (
        _p(r"(?:পেশা|মোপশা|Ïপশা)\s*:\s*(.+?),?(?=\s*(?:জন্ম|জম|তািরখ|ঠিকানা|$))"),
    ),
    "date_of_birth": (
        _p(r"(?:জন্ম\s*তারিখ|জম\s*তািরখ|জম\s*তারিখ|জন্ম\s*তািরখ)\s*:\s*(\d{1,2}/\d{1,2}/\d{2,4})"),
    ),
    "address": (
        _p(r"(?:ঠিকানা|িঠকানা|ঠকানা)\s*:\s*(.+?)(?=\s*\d{3,4}\.\s*নাম:|$)", flags=re.DOTALL),
    ),
}


def clean_field(value: Optional[str], markers: Sequence[str] = ()) -> str:
    """
    Normalize an extracted value.

    Strips residual corruption markers, turns line breaks into spaces,
    collapses doubled spaces and trims.
    """
    if not value:
        return ""

    for marker in markers:
        value = value.replace(marker, "")

    value = value.replace("\r", " ").replace("\n", " ")
    value = _MULTI_SPACE_RE.sub(" ", value)
    return value.strip()


class FieldExtractor:
    """
    Turn RawEntry chunks into VoterRecords.

    Never raises for a bad entry: missing required fields come back as
    a rejected ExtractionResult.
    """

    def __init__(
        self,
        tables: Optional[RuleTables] = None,
        patterns: Optional[Dict[str, Tuple[FieldPattern, ...]]] = None,
    ):
        self.tables = tables or load_rule_tables()
        self.patterns = patterns or FIELD_PATTERNS

    def apply_entry_fixes(self, text: str) -> str:
        for corrupted, correct in self.tables.entry_fixes:
            if corrupted in text:
                text = text.replace(corrupted, correct)
        return text

    def extract_field(self, field_name: str, text: str) -> str:
        """Cleaned value of the first matching pattern for a field, or ""."""
        for pattern in self.patterns.get(field_name, ()):
            raw = pattern.search(text)
            if raw is None:
                continue

            value = clean_field(raw, self.tables.field_fixes)
            if value and pattern.normalizer:
                value = pattern.normalizer(value, self.tables)
            return value

        return ""

    def extract(self, entry: RawEntry) -> ExtractionResult:
        """
        Extract one voter record.

        Args:
            entry: Segmented entry text

        Returns:
            Accepted result with a VoterRecord, or a rejection naming
            the missing required fields
        """
        text = self.apply_entry_fixes(entry.text)

        values = {name: self.extract_field(name, text) for name in self.patterns}

        missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
        if missing:
            rejection = RecordRejected(
                missing_fields=missing,
                serial_number=values.get("serial_number", ""),
                preview=entry.preview,
            )
            logger.debug(f"Rejected entry {entry.index} in {entry.source_file or '<text>'}: {rejection}")
            return ExtractionResult.rejected(rejection)

        record = VoterRecord(
            serial_number=values.get("serial_number", ""),
            voter_id=values["voter_id"],
            name=values["name"],
            father_name=values.get("father_name", ""),
            mother_name=values.get("mother_name", ""),
            profession=values.get("profession", ""),
            date_of_birth=parse_bengali_date(values.get("date_of_birth", ""), self.tables),
            address=values.get("address", ""),
            source_file=entry.source_file,
        )
        return ExtractionResult.accepted(record)

    def extract_all(self, entries) -> Tuple[list, list]:
        """Extract many entries; returns (records, rejections) in order."""
        records: list[VoterRecord] = []
        rejections: list[RecordRejected] = []
        for entry in entries:
            result = self.extract(entry)
            if result.ok:
                records.append(result.record)
            else:
                rejections.append(result.rejection)
        return records, rejections
