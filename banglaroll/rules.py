"""
Corruption rule tables.

The tables are versioned data (``data/corruption_rules.json``), loaded once
per process and shared read-only by every pipeline stage and worker thread.
Phrase, label and entry rules keep their declared order: a later rule may
rely on an earlier one having already normalized part of its input.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Pattern, Tuple

from .exceptions import ConfigurationError
from .logger import get_logger

DEFAULT_RULES_PATH = Path(__file__).resolve().parent / "data" / "corruption_rules.json"

logger = get_logger(__name__)


@dataclass(frozen=True)
class RuleTables:
    """Immutable, process-wide substitution tables."""
    version: str
    char_table: Mapping[str, str]
    phrase_table: Tuple[Tuple[str, str], ...]
    label_fixes: Tuple[Tuple[Pattern[str], str], ...]
    entry_fixes: Tuple[Tuple[str, str], ...]
    field_fixes: Tuple[str, ...]
    numerals: Mapping[str, str]

    @property
    def char_translation(self) -> dict[int, str]:
        """Translation table for str.translate (pass 1)."""
        return str.maketrans(dict(self.char_table))

    @property
    def numeral_translation(self) -> dict[int, str]:
        return str.maketrans(dict(self.numerals))

    def summary(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "char_rules": len(self.char_table),
            "phrase_rules": len(self.phrase_table),
            "label_rules": len(self.label_fixes),
            "entry_rules": len(self.entry_fixes),
            "field_markers": len(self.field_fixes),
        }


def _pairs(data: dict[str, Any], key: str) -> Tuple[Tuple[str, str], ...]:
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise ConfigurationError(f"'{key}' must be a list of pairs", config_key=key)

    pairs = []
    for index, item in enumerate(raw):
        if (
            not isinstance(item, (list, tuple))
            or len(item) != 2
            or not all(isinstance(part, str) for part in item)
        ):
            raise ConfigurationError(
                f"'{key}[{index}]' must be a [corrupted, correct] pair of strings",
                config_key=key,
            )
        if not item[0]:
            raise ConfigurationError(f"'{key}[{index}]' has an empty search string", config_key=key)
        pairs.append((item[0], item[1]))
    return tuple(pairs)


def _char_table(data: dict[str, Any]) -> Mapping[str, str]:
    raw = data.get("char_table", {})
    if not isinstance(raw, dict):
        raise ConfigurationError("'char_table' must be an object", config_key="char_table")

    for key, value in raw.items():
        if len(key) != 1:
            raise ConfigurationError(
                f"char_table key {key!r} must be a single codepoint",
                config_key="char_table",
            )
        if not isinstance(value, str):
            raise ConfigurationError(
                f"char_table value for {key!r} must be a string",
                config_key="char_table",
            )
    return MappingProxyType(dict(raw))


def _numerals(data: dict[str, Any]) -> Mapping[str, str]:
    raw = data.get("numerals", {})
    if not isinstance(raw, dict) or not all(
        len(k) == 1 and isinstance(v, str) and len(v) == 1 for k, v in raw.items()
    ):
        raise ConfigurationError("'numerals' must map single digits to single digits", config_key="numerals")
    return MappingProxyType(dict(raw))


def _compile_label_fixes(pairs: Tuple[Tuple[str, str], ...]) -> Tuple[Tuple[Pattern[str], str], ...]:
    compiled = []
    for pattern, replacement in pairs:
        try:
            compiled.append((re.compile(pattern), replacement))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid label_fixes pattern {pattern!r}: {e}",
                config_key="label_fixes",
            ) from e
    return tuple(compiled)


def parse_rule_tables(data: dict[str, Any]) -> RuleTables:
    """Build validated RuleTables from decoded JSON data."""
    if not isinstance(data, dict):
        raise ConfigurationError("Rule table document must be a JSON object")

    field_fixes = data.get("field_fixes", [])
    if not isinstance(field_fixes, list) or not all(isinstance(m, str) and m for m in field_fixes):
        raise ConfigurationError("'field_fixes' must be a list of non-empty strings", config_key="field_fixes")

    return RuleTables(
        version=str(data.get("version", "unversioned")),
        char_table=_char_table(data),
        phrase_table=_pairs(data, "phrase_table"),
        label_fixes=_compile_label_fixes(_pairs(data, "label_fixes")),
        entry_fixes=_pairs(data, "entry_fixes"),
        field_fixes=tuple(field_fixes),
        numerals=_numerals(data),
    )


@lru_cache(maxsize=None)
def _load_cached(path: Path) -> RuleTables:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Rule table not found: {path}", config_key="RULES_PATH") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Rule table is not valid JSON: {e}", config_key="RULES_PATH") from e

    tables = parse_rule_tables(data)
    logger.debug(f"Loaded corruption rules {tables.summary()} from {path}")
    return tables


def load_rule_tables(path: Optional[Path] = None) -> RuleTables:
    """
    Load rule tables, once per distinct path.

    Args:
        path: JSON rule file (default: RULES_PATH or the bundled table)

    Returns:
        Shared immutable RuleTables
    """
    if path is None:
        from .config import get_config
        path = get_config().rules.path or DEFAULT_RULES_PATH
    return _load_cached(Path(path).resolve())
