"""
normalize.py - Field normalization module.

Core normalizers:
    clean_field(value)          -> trimmed text
    parse_ascii_int(raw)        -> int from ASCII digits only
    strip_whitespace(value)     -> text with every whitespace char removed
    minor_to_major(raw)         -> Decimal major units, or None
    format_amount(amount)       -> fixed 2-decimal text
    normalize_due_date(raw)     -> ISO YYYY-MM-DD, display only

Design principles:
    - SAME normalization in decoder, validator and encoder
    - Pure transformations, no I/O
    - Unparseable amounts become None so the validator can report them
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from dateutil import parser as dateparser

from logging_config import get_logger

logger = get_logger(__name__)

# UPN amounts are integer cents.
MINOR_UNITS_PER_MAJOR = 100

_WHITESPACE = re.compile(r"\s+")
_ASCII_INT = re.compile(r"[ \t\r]*[+-]?[0-9]+[ \t\r]*")
_CENTS = Decimal("0.01")


def clean_field(value: str | None) -> str:
    """Trim surrounding whitespace. None becomes ''."""
    if value is None:
        return ""
    return value.strip()


def strip_whitespace(value: str | None) -> str:
    """Remove all whitespace, e.g. 'SI56 0201 7001' -> 'SI5602017001'."""
    if value is None:
        return ""
    compact = _WHITESPACE.sub("", value)
    if compact != value:
        logger.debug("strip_whitespace | raw=%r | normalized=%r", value, compact)
    return compact


def parse_ascii_int(raw: str) -> int:
    """Parse an optionally signed run of ASCII digits.

    Stricter than int(): underscores ('1_93') and non-ASCII digits are
    rejected with ValueError.
    """
    if _ASCII_INT.fullmatch(raw) is None:
        raise ValueError(f"not an ASCII integer: {raw!r}")
    return int(raw)


def minor_to_major(raw: str | None) -> Decimal | None:
    """Convert an integer minor-unit amount line into major units.

    '00000010050' -> Decimal('100.5'). Anything that is not an integer
    returns None; the validator turns that into an amount message.
    """
    if raw is None:
        return None

    try:
        minor = parse_ascii_int(raw)
    except ValueError:
        logger.warning("minor_to_major | parse_failed | raw=%r | fallback=None", raw)
        return None

    major = Decimal(minor) / MINOR_UNITS_PER_MAJOR
    logger.debug("minor_to_major | raw=%r | normalized=%s", raw, major)
    return major


def format_amount(amount: Decimal | float | int) -> str:
    """Fixed 2-decimal text, no thousands separators, always '.' as point."""
    value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    return f"{value.quantize(_CENTS, rounding=ROUND_HALF_UP):f}"


def normalize_due_date(raw: str | None) -> str:
    """Normalize a UPN due date (DD.MM.YYYY) to ISO YYYY-MM-DD.

    Only used for display. The encoder never reads the due date.
    """
    if raw is None:
        return ""

    raw = raw.strip()
    if not raw or not any(char.isdigit() for char in raw):
        return ""

    try:
        parsed = dateparser.parse(raw, dayfirst=True)
    except (ValueError, OverflowError) as exc:
        logger.warning(
            "normalize_due_date | parse_error=%s | raw=%r | fallback=''",
            type(exc).__name__,
            raw,
        )
        return ""

    normalized = parsed.strftime("%Y-%m-%d")
    logger.debug("normalize_due_date | raw=%r | normalized=%r", raw, normalized)
    return normalized
