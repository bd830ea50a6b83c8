"""
Bengali numeral and date helpers.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..rules import RuleTables, load_rule_tables

# Tried in order
DATE_TEMPLATES = (
    "%d/%m/%Y",
    "%d/%m/%y",
)

# Two-digit years below this pivot belong to the 2000s
CENTURY_PIVOT = 30


def to_latin_digits(text: str, tables: Optional[RuleTables] = None) -> str:
    """Replace Bengali digits with their Latin equivalents."""
    if not text:
        return text
    tables = tables or load_rule_tables()
    return text.translate(tables.numeral_translation)


def resolve_two_digit_year(yy: int) -> int:
    """00-29 -> 2000s, 30-99 -> 1900s."""
    return 2000 + yy if yy < CENTURY_PIVOT else 1900 + yy


def parse_bengali_date(value: str, tables: Optional[RuleTables] = None) -> Optional[date]:
    """
    Parse a D/M/Y token written in Bengali, Latin or mixed digits.

    Years below 100 go through the century pivot whichever template
    matched, so "85" and "0085" both mean 1985. Returns None when no
    template matches or the date does not exist; an unparseable date is
    never an error.
    """
    if not value:
        return None

    token = to_latin_digits(value.strip(), tables)

    for template in DATE_TEMPLATES:
        try:
            parsed = datetime.strptime(token, template)
        except ValueError:
            continue

        year = int(token.rsplit("/", 1)[1])
        if year < 100:
            year = resolve_two_digit_year(year)
        try:
            return date(year, parsed.month, parsed.day)
        except ValueError:
            return None

    return None
