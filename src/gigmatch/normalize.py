"""Identifier, day and time normalization shared by every scorer."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

from .errors import InvalidInputError

MINUTES_PER_DAY = 24 * 60

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_DAY_ALIASES: dict[str, str] = {
    "mon": "monday",
    "tue": "tuesday",
    "tues": "tuesday",
    "wed": "wednesday",
    "thu": "thursday",
    "thur": "thursday",
    "thurs": "thursday",
    "fri": "friday",
    "sat": "saturday",
    "sun": "sunday",
    "lundi": "monday",
    "mardi": "tuesday",
    "mercredi": "wednesday",
    "jeudi": "thursday",
    "vendredi": "friday",
    "samedi": "saturday",
    "dimanche": "sunday",
}

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_YEARS_PATTERN = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


def normalize_identifier(value: Any) -> str:
    """Return a comparison key: casefolded, alphanumeric characters only.

    ``"Asia-Pacific"`` and ``"asia pacific"`` both become ``"asiapacific"``.
    Objects carrying a ``name`` (populated reference documents) are reduced
    to that name first.
    """
    if value is None:
        return ""
    if isinstance(value, dict):
        value = value.get("name") or ""
    text = unicodedata.normalize("NFKD", str(value)).casefold()
    return "".join(ch for ch in text if ch.isalnum())


def identifiers_related(left: str, right: str) -> bool:
    """True when two normalized identifiers are equal or one contains the other."""
    if not left or not right:
        return False
    return left == right or left in right or right in left


def canonical_day(value: Any) -> str:
    key = normalize_identifier(value)
    if key in WEEKDAYS:
        return key
    return _DAY_ALIASES.get(key, key)


def parse_time(value: str) -> int:
    """Convert ``HH:MM`` into minutes from midnight; ``24:00`` is accepted."""
    if not isinstance(value, str):
        raise InvalidInputError(f"Time must be a 'HH:MM' string, got {value!r}")
    match = _TIME_PATTERN.match(value)
    if match is None:
        raise InvalidInputError(f"Malformed time {value!r}; expected 'HH:MM'")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60 or hours > 24 or (hours == 24 and minutes):
        raise InvalidInputError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def parse_years(value: Any) -> float | None:
    """Read a year count from a number or free text such as ``"5 years"``."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"Experience must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        years = float(value)
    else:
        match = _YEARS_PATTERN.match(str(value))
        if match is None:
            raise InvalidInputError(f"Cannot read a year count from {value!r}")
        years = float(match.group(1).replace(",", "."))
    if not math.isfinite(years) or years < 0:
        raise InvalidInputError(f"Experience must be a finite non-negative number: {value!r}")
    return years


__all__ = [
    "MINUTES_PER_DAY",
    "WEEKDAYS",
    "normalize_identifier",
    "identifiers_related",
    "canonical_day",
    "parse_time",
    "parse_years",
]
