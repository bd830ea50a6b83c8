"""
Corruption Repair Engine.

Turns text extracted through the broken Bengali font mapping back into
clean Unicode. The stages are strictly ordered; each one assumes the
previous fixes have already happened:

1. character table (context-free codepoint substitution)
2. phrase table (declared order)
3. whitespace collapse
4. label-fix regexes (run on normalized spacing)
5. combining-mark normalization
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from ..rules import RuleTables, load_rule_tables

# Bengali code points
CONSONANTS = "\u0995-\u09b9\u09ce\u09dc\u09dd\u09df"
NUKTA = "\u09bc"
HASANTA = "\u09cd"

# Vowel signs drawn to the left of their consonant; the broken font emits
# them in visual order, i.e. before the consonant they belong to.
PRE_BASE_SIGNS = "\u09bf\u09c7\u09c8"  # ি ে ৈ

# Marks that can never begin a word: া ী ু ূ ৃ ৄ ৗ ো ৌ ং ঃ ঁ ় ্
POST_BASE_MARKS = "\u09be\u09c0-\u09c4\u09d7\u09cb\u09cc\u0981-\u0983\u09bc\u09cd"

_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_MARK_RE = re.compile(rf" +([{POST_BASE_MARKS}])")
_SPACE_AFTER_HASANTA_RE = re.compile(rf"{HASANTA} +(?=[{CONSONANTS}])")

# Consonant cluster a displaced pre-base sign belongs behind,
# optionally across one spurious space
_CLUSTER_RE = re.compile(
    rf" ?([{CONSONANTS}]{NUKTA}?(?:{HASANTA}[{CONSONANTS}]{NUKTA}?)*)"
)
_ATTACH_RE = re.compile(rf"[{CONSONANTS}{NUKTA}]")

# A consonant cluster carrying a pre-base sign in logical order
_ATTACHED_SIGN_RE = re.compile(
    rf"([{CONSONANTS}]{NUKTA}?(?:{HASANTA}[{CONSONANTS}]{NUKTA}?)*)([{PRE_BASE_SIGNS}])"
)

# Two-part vowel signs
_COMPOSITIONS = (
    ("\u09c7\u09be", "\u09cb"),  # ে + া -> ো
    ("\u09c7\u09d7", "\u09cc"),  # ে + ৗ -> ৌ
)


def reorder_pre_base_signs(text: str) -> str:
    """
    Move orphaned pre-base vowel signs behind their consonant cluster.

    A sign is orphaned when it does not follow a consonant (or nukta),
    e.g. at the start of a word ("িপতা" -> "পিতা") or right after another
    vowel sign ("তািলকা" -> "তালিকা"). A run of orphaned signs belongs to
    the clusters that follow it, one each ("িিবব" -> "বিবি"). Correctly
    ordered text is left alone.
    """
    if not any(sign in text for sign in PRE_BASE_SIGNS):
        return text

    out: list[str] = []
    prev = ""
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch in PRE_BASE_SIGNS and not (prev and _ATTACH_RE.match(prev)):
            end = i
            while end < n and text[end] in PRE_BASE_SIGNS:
                end += 1
            signs = text[i:end]
            i = end

            while signs:
                match = _CLUSTER_RE.match(text, i)
                if not match:
                    break
                out.append(match.group(1))
                out.append(signs[0])
                signs = signs[1:]
                i = match.end()

            # No cluster left to carry them
            if signs:
                out.append(signs)
            prev = ch
            continue

        out.append(ch)
        prev = ch
        i += 1

    return "".join(out)


def visual_order(text: str) -> str:
    """
    Spell logically ordered text the way the broken font emits it.

    Inverse of ``reorder_pre_base_signs``: "ছিব" -> "িছব".
    """
    return _ATTACHED_SIGN_RE.sub(r"\2\1", text)


def compose_vowel_signs(text: str) -> str:
    for parts, composed in _COMPOSITIONS:
        text = text.replace(parts, composed)
    return text


class CorruptionRepairEngine:
    """
    Apply the layered corruption rules to raw document text.

    ``repair`` never fails: a rule that does not match is a no-op.
    Instances are stateless apart from the shared read-only tables,
    so one engine can serve every worker thread.
    """

    def __init__(self, tables: Optional[RuleTables] = None):
        self.tables = tables or load_rule_tables()
        self._char_translation = self.tables.char_translation
        self._phrase_pairs = self._expand_phrase_table(self.tables.phrase_table)

    @staticmethod
    def _expand_phrase_table(pairs):
        """
        Add the visual-order spelling of every phrase key right after it.

        Sign reordering runs after the phrase pass, so a key that only
        appears once its vowel signs are reordered must already match in
        the order the font emits it.
        """
        expanded = []
        for corrupted, correct in pairs:
            expanded.append((corrupted, correct))
            variant = visual_order(corrupted)
            if variant != corrupted:
                expanded.append((variant, correct))
        return tuple(expanded)

    def apply_char_table(self, text: str) -> str:
        """Pass 1: context-free single-codepoint substitution."""
        return text.translate(self._char_translation)

    def apply_phrase_table(self, text: str) -> str:
        """Pass 2: every occurrence of each phrase, in declared order."""
        for corrupted, correct in self._phrase_pairs:
            if corrupted in text:
                text = text.replace(corrupted, correct)
        return text

    @staticmethod
    def collapse_whitespace(text: str) -> str:
        """Collapse whitespace runs (line breaks included) to one space."""
        return _WHITESPACE_RE.sub(" ", text).strip()

    def apply_label_fixes(self, text: str) -> str:
        for pattern, replacement in self.tables.label_fixes:
            text = pattern.sub(replacement, text)
        return text

    @staticmethod
    def normalize_marks(text: str) -> str:
        """
        Re-attach detached combining marks and restore logical order.

        - " া" style: a space before a mark that cannot start a word
        - "্ ক" style: a space after a hasanta inside a conjunct
        - "িপ" style: a pre-base sign emitted before its consonant
        - "ে" + "া" written as two code points
        """
        text = _SPACE_BEFORE_MARK_RE.sub(r"\1", text)
        text = _SPACE_AFTER_HASANTA_RE.sub(HASANTA, text)
        text = reorder_pre_base_signs(text)
        return compose_vowel_signs(text)

    def repair(self, raw_text: str) -> str:
        """
        Repair raw extracted text.

        Args:
            raw_text: Text as produced by the PDF text layer

        Returns:
            Clean text on a single line
        """
        if not raw_text:
            return ""

        text = self.apply_char_table(raw_text)
        text = self.apply_phrase_table(text)
        text = self.collapse_whitespace(text)
        text = self.apply_label_fixes(text)
        return self.normalize_marks(text)


@lru_cache(maxsize=1)
def _default_engine() -> CorruptionRepairEngine:
    return CorruptionRepairEngine()


def repair(raw_text: str) -> str:
    """Repair text with the process-wide rule tables."""
    return _default_engine().repair(raw_text)
