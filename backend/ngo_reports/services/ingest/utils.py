from __future__ import annotations

import math
import re


CANONICAL_MONTH = re.compile(r"^[0-9]{4}-[0-9]{2}$")
_SLASH_DATE = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})$")
_NAMED_MONTH = re.compile(r"^([a-z]+)\s+([0-9]{4})$", re.IGNORECASE)
_PLAIN_INT = re.compile(r"^[+-]?[0-9]+$")

MONTH_NAMES = {
    "jan": "01", "january": "01",
    "feb": "02", "february": "02",
    "mar": "03", "march": "03",
    "apr": "04", "april": "04",
    "may": "05",
    "jun": "06", "june": "06",
    "jul": "07", "july": "07",
    "aug": "08", "august": "08",
    "sep": "09", "sept": "09", "september": "09",
    "oct": "10", "october": "10",
    "nov": "11", "november": "11",
    "dec": "12", "december": "12",
}

# Stands in for unparseable numeric text; never equal to anything, fails validation.
NOT_A_NUMBER = math.nan


def parse_month(value: str | None) -> str | None:
    """
    Best-effort conversion of a month token to ``YYYY-MM``.

    Accepts ``2025-10``, ``10/5/2025`` (M/D/YYYY, day ignored) and
    ``Oct 2025`` / ``October 2025`` / ``sept 2025``. Anything else comes back
    trimmed but otherwise untouched so the row validator rejects it.
    """
    if not value:
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    if CANONICAL_MONTH.match(trimmed):
        return trimmed

    slash = _SLASH_DATE.match(trimmed)
    if slash:
        month, _day, year = slash.groups()
        return f"{year}-{month.zfill(2)}"

    named = _NAMED_MONTH.match(trimmed)
    if named:
        number = MONTH_NAMES.get(named.group(1).lower())
        if number:
            return f"{named.group(2)}-{number}"

    return trimmed


def parse_int(value) -> int | float:
    """Base-10 integer from CSV text, or ``NOT_A_NUMBER`` when it is not one."""
    if value is None:
        return NOT_A_NUMBER
    text = str(value).strip()
    if not _PLAIN_INT.match(text):
        return NOT_A_NUMBER
    return int(text, 10)


def strip_or_none(value):
    if value is None:
        return None
    return str(value).strip()
