"""
Text normalization and location-string parsing.

Directory "location" fields are free text typed by people, e.g.
"California - Work From Home", "Remote - United Kingdom" or just "UK".
Two steps turn them into something the gazetteer can match:

  1. normalize_location_name(): case-fold, strip diacritics and punctuation,
     collapse whitespace. Also used as the geocode cache key.
  2. LocationParser.parse(): strip remote/office qualifiers, then split on
     commas and hyphens into ordered candidate tokens.

The qualifier list is data (QualifierRule tuples); add a rule to
DEFAULT_QUALIFIERS instead of touching the parsing code.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Sequence

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_DELIMITER_RE = re.compile(r"[,\-]+")


def normalize_location_name(value: object) -> str:
    """
    Normalize a string for matching and caching.
    Rules:
      1. Lowercase
      2. Decompose accented characters and drop the combining marks
      3. Keep only [a-z0-9 ]
      4. Collapse whitespace and trim
    Never raises; anything that is not a non-empty string yields "".
    """
    if not isinstance(value, str) or not value:
        return ""

    decomposed = unicodedata.normalize("NFKD", value.lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    spaced = _WHITESPACE_RE.sub(" ", without_marks)
    cleaned = _NON_ALNUM_RE.sub("", spaced)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


# ── Qualifier rules ────────────────────────────────────────────────────

@dataclass(frozen=True)
class QualifierRule:
    name: str
    pattern: re.Pattern


def _rule(name: str, pattern: str) -> QualifierRule:
    return QualifierRule(name, re.compile(pattern, re.IGNORECASE))


# Applied in order; each match is replaced with a single space.
DEFAULT_QUALIFIERS: tuple[QualifierRule, ...] = (
    _rule("work_from_home", r"\s*-?\s*\bwork\s*from\s*home\b\s*"),
    _rule("wfh", r"\s*-?\s*\bwfh\b\s*"),
    _rule("home_office", r"\s*-?\s*\bhome\s*office\b\s*"),
    _rule("office", r"\s*-?\s*\boffice\b\s*"),
    _rule("remote_prefix", r"^\s*remote\b\s*-?\s*"),
    _rule("remote_suffix", r"\s*-?\s*\bremote\s*$"),
)


@dataclass(frozen=True)
class ParsedLocation:
    original: str
    tokens: tuple[str, ...]


class LocationParser:
    """Strip status qualifiers and split a raw location into candidate tokens."""

    def __init__(self, rules: Optional[Sequence[QualifierRule]] = None):
        self.rules: tuple[QualifierRule, ...] = tuple(
            DEFAULT_QUALIFIERS if rules is None else rules
        )

    def strip_qualifiers(self, raw: str) -> str:
        """
        Remove every qualifier phrase. Falls back to the trimmed input when
        stripping would leave nothing (e.g. a bare "Remote").
        """
        original = raw.strip()
        text = original
        for rule in self.rules:
            text = rule.pattern.sub(" ", text)
        text = _WHITESPACE_RE.sub(" ", text).strip()
        return text or original

    def parse(self, raw: object) -> Optional[ParsedLocation]:
        if not isinstance(raw, str) or not raw.strip():
            return None

        cleaned = self.strip_qualifiers(raw)
        tokens = tuple(
            part.strip() for part in _DELIMITER_RE.split(cleaned) if part.strip()
        )
        if not tokens:
            # Delimiters only, e.g. "--"; keep the cleaned text as the lone token
            tokens = (cleaned,)
        return ParsedLocation(original=raw, tokens=tokens)


_default_parser = LocationParser()


def parse_location(raw: object) -> Optional[ParsedLocation]:
    """Parse with the default qualifier rules."""
    return _default_parser.parse(raw)
