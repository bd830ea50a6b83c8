"""
Repository pattern for voter persistence.

Defines the abstract interface the CLI and web UI talk to. Search and
pagination are implemented here on top of ``all()`` so every backend
shares the same query semantics.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from ..models import VoterRecord
from ..utils.bengali import to_latin_digits

# Digit queries of this length match the end of the voter id
SUFFIX_QUERY_LENGTHS = (4, 5)


def serial_sort_key(record: VoterRecord):
    """Numeric serial order; non-numeric serials sort last."""
    serial = record.serial_number
    if serial.isdigit():
        return (0, int(serial), serial)
    return (1, 0, serial)


@dataclass
class PagedResult:
    """One page of voters plus the size of the full result set."""
    items: List[VoterRecord] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class VoterRepository(ABC):
    """
    Abstract repository for voter storage.

    Implementations can store to JSON files, SQLite, PostgreSQL, etc.
    """

    @abstractmethod
    def append(self, records: Iterable[VoterRecord]) -> int:
        """
        Add records after the existing ones.

        Returns:
            Number of records added
        """
        pass

    @abstractmethod
    def all(self) -> List[VoterRecord]:
        """All stored records in insertion order."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def replace_all(self, records: Iterable[VoterRecord]) -> int:
        """Overwrite the store with exactly these records."""
        pass

    def find(self, predicate: Callable[[VoterRecord], bool]) -> List[VoterRecord]:
        return [record for record in self.all() if predicate(record)]

    def count(self) -> int:
        return len(self.all())

    @staticmethod
    def matcher(search_text: str) -> Callable[[VoterRecord], bool]:
        """
        Build the predicate for a search query.

        - 4-5 digits: voter id ends with the digits
        - any other digit string: voter id contains the digits
        - text: case-insensitive substring of name, father or mother name

        Bengali digits in the query are read as their Latin equivalents.
        """
        query = to_latin_digits(search_text.strip())
        needle = query.lower()

        if query.isdigit():
            if len(query) in SUFFIX_QUERY_LENGTHS:
                return lambda record: record.voter_id_ends_with(query)
            return lambda record: bool(record.voter_id) and query in record.voter_id

        def by_name(record: VoterRecord) -> bool:
            return any(
                needle in value.lower()
                for value in (record.name, record.father_name, record.mother_name)
                if value
            )

        return by_name

    def search(self, search_text: str) -> List[VoterRecord]:
        """
        Search stored voters.

        An empty query returns everything. Results are in serial order.
        """
        if not search_text or not search_text.strip():
            results = self.all()
        else:
            results = self.find(self.matcher(search_text))
        return sorted(results, key=serial_sort_key)

    def page(self, page: int = 1, page_size: int = 10, search_text: str = "") -> PagedResult:
        """
        One page of (optionally filtered) voters.

        Page numbers start at 1; values below 1 are clamped.
        """
        page = max(1, page)
        page_size = max(1, page_size)

        results = self.search(search_text)
        start = (page - 1) * page_size
        return PagedResult(
            items=results[start:start + page_size],
            total_count=len(results),
            page=page,
            page_size=page_size,
        )
