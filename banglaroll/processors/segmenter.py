"""
Record Segmenter.

Splits repaired document text into one chunk per voter, using the
serial-number-plus-name-label boundary:

    0001. নাম: ...   0002. নাম: ...
"""

from __future__ import annotations

import re
from typing import Iterator, List

from ..logger import get_logger
from ..models import RawEntry

NAME_LABEL = r"(?:নাম|Name)\s*:"

# Split before "<3-4 digits>." + name label. A boundary never starts inside
# a digit run, except when a bare address number runs straight into the
# next serial; then the last four digits of the run are the serial.
BOUNDARY_RE = re.compile(
    rf"(?:(?<!\d)(?=\d{{3,4}}\.\s*{NAME_LABEL})|(?<=\d)(?=\d{{4}}\.\s*{NAME_LABEL}))"
)
NAME_LABEL_RE = re.compile(NAME_LABEL)

logger = get_logger(__name__)


class RecordSegmenter:
    """
    Split clean text into RawEntry chunks.

    Order-preserving and pure. Text before the first boundary (page
    headers, roll metadata) and any chunk without a name label is dropped.
    """

    def iter_segments(self, clean_text: str, source_file: str = "") -> Iterator[RawEntry]:
        """Yield entries lazily in document order."""
        if not clean_text:
            return

        index = 0
        for chunk in BOUNDARY_RE.split(clean_text):
            chunk = chunk.strip()
            if not chunk or not NAME_LABEL_RE.search(chunk):
                continue
            yield RawEntry(text=chunk, index=index, source_file=source_file)
            index += 1

    def segment(self, clean_text: str, source_file: str = "") -> List[RawEntry]:
        """
        Split clean text into raw entries.

        Args:
            clean_text: Output of the repair engine
            source_file: Originating document, carried onto each entry

        Returns:
            Entries in document order (possibly empty)
        """
        entries = list(self.iter_segments(clean_text, source_file))
        logger.debug(f"Segmented {len(entries)} entries from {source_file or '<text>'}")
        return entries
