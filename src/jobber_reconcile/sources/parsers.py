"""Field parsers for Jobber CSV cells.

Every parser is total: blank, whitespace-only, ``-`` and ``None`` cells map to
``None`` (or ``0.0`` / ``[]``) instead of raising.
"""

import re
from datetime import date, datetime
from typing import Optional

_MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
MONTH_DAY_YEAR = re.compile(r"^(\w{3})\s+(\d{1,2}),\s+(\d{4})$")
SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Tried in order once the three export formats above have failed
FALLBACK_DATE_FORMATS = (
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%a %b %d %Y",
)

_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PREFIX = re.compile(r"^[+-]?\d+")
_DIGITS = re.compile(r"[0-9]+")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() in ("", "-")


def _iso(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(value: Optional[str]) -> Optional[str]:
    """Parse a Jobber date cell into ``YYYY-MM-DD``; None when unparseable."""
    if _is_blank(value):
        return None
    value = value.strip()

    m = ISO_DATE.match(value)
    if m:
        return _iso(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = MONTH_DAY_YEAR.match(value)
    if m:
        month = _MONTHS.get(m.group(1).capitalize())
        if month:
            parsed = _iso(int(m.group(3)), month, int(m.group(2)))
            if parsed:
                return parsed

    m = SLASH_DATE.match(value)
    if m:
        parsed = _iso(int(m.group(3)), int(m.group(1)), int(m.group(2)))
        if parsed:
            return parsed

    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def parse_currency(value: Optional[str]) -> float:
    """Parse a money cell, ignoring ``$``, ``,`` and ``%``. Never None."""
    if _is_blank(value):
        return 0.0
    cleaned = re.sub(r"[$,%]", "", value).strip()
    m = _NUMBER_PREFIX.match(cleaned)
    return float(m.group(0)) if m else 0.0


def parse_integer(value: Optional[str]) -> Optional[int]:
    """Parse an identifier cell. None (not 0) when blank or unparseable."""
    if _is_blank(value):
        return None
    m = _INTEGER_PREFIX.match(value.replace(",", "").strip())
    return int(m.group(0)) if m else None


def parse_id_list(value: Optional[str]) -> list[str]:
    """
    Split a comma-separated id cell into numeric tokens.
    Order and duplicates are preserved; blank, ``-`` and non-numeric tokens are dropped.
    """
    if _is_blank(value):
        return []
    return [token for token in (t.strip() for t in value.split(",")) if _DIGITS.fullmatch(token)]


def clean_string(value: Optional[str]) -> Optional[str]:
    """Trim a text cell; None for blank or ``-``."""
    if _is_blank(value):
        return None
    return value.strip()
