"""
decode.py - UPN QR payload decoder.

Turns raw UPN QR text into a `SourceRecord`. This is the only module that
knows the UPN line layout; everything downstream works on the record.

Payload rules:
- The whole payload is trimmed once, then split on '\\n'. Lines are not
  trimmed before the checksum is computed.
- At least 20 lines are required.
- Line 19 must equal 19 + the summed lengths of lines 0-18.

The line-to-field mapping is the `LINE_SCHEMA` table below. Reserved lines
are listed with no field so the full layout is visible in one place.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from logging_config import get_logger
from models import DecodeError, DecodeErrorKind, SourceRecord
from normalize import clean_field, minor_to_major, parse_ascii_int

logger = get_logger(__name__)

# -- Layout constants --

UPN_LINE_COUNT = 20
CHECKSUM_LINE = 19
CHECKSUM_OFFSET = 19


def _raw(line: str) -> str:
    return line


def _checksum(line: str) -> int:
    return parse_ascii_int(line)


# (line index, dotted field path or None for reserved lines, parser)
LINE_SCHEMA: list[tuple[int, Optional[str], Optional[Callable[[str], Any]]]] = [
    (0, "format_tag", _raw),
    (1, None, None),  # payer IBAN
    (2, None, None),  # deposit flag
    (3, None, None),  # withdrawal flag
    (4, None, None),  # payer reference
    (5, "payer.name", clean_field),
    (6, "payer.address", clean_field),
    (7, "payer.city", clean_field),
    (8, "payment.amount", minor_to_major),
    (9, None, None),  # payment date
    (10, None, None),  # urgent flag
    (11, "payment.purpose_code", clean_field),
    (12, "payment.description", clean_field),
    (13, "payment.due_date", clean_field),
    (14, "payment.iban", clean_field),
    (15, "payment.reference", clean_field),
    (16, "recipient.name", clean_field),
    (17, "recipient.address", clean_field),
    (18, "recipient.city", clean_field),
    (19, "checksum", _checksum),
]


def split_payload(text: str) -> list[str]:
    """Trim the whole payload and split it into lines."""
    return text.strip().split("\n")


def compute_checksum(lines: list[str]) -> int:
    """Expected checksum for a payload: 19 + sum of lengths of lines 0-18."""
    return CHECKSUM_OFFSET + sum(len(line) for line in lines[:CHECKSUM_LINE])


def verify_checksum(lines: list[str]) -> int:
    """Return the checksum on line 19, or raise DecodeError if it is wrong."""
    expected = compute_checksum(lines)
    raw = lines[CHECKSUM_LINE]

    try:
        actual: int | None = parse_ascii_int(raw)
    except ValueError:
        actual = None

    if actual != expected:
        logger.warning(
            "decode_checksum_mismatch | expected=%s | actual=%s | raw=%r",
            expected,
            actual,
            raw,
        )
        raise DecodeError(
            DecodeErrorKind.CHECKSUM_MISMATCH,
            f"checksum mismatch: expected {expected}, found {raw.strip() or '<empty>'}",
            line_count=len(lines),
            expected=expected,
            actual=actual,
        )
    return actual


def decode(text: str) -> SourceRecord:
    """Decode a UPN QR payload into a SourceRecord.

    Raises:
        DecodeError: fewer than 20 lines, or a missing/wrong checksum.
    """
    if text is None:
        raise DecodeError(
            DecodeErrorKind.INSUFFICIENT_LINES,
            "malformed payload: insufficient lines",
            line_count=0,
        )

    lines = split_payload(text)
    if len(lines) < UPN_LINE_COUNT:
        logger.warning(
            "decode_insufficient_lines | line_count=%s | required=%s",
            len(lines),
            UPN_LINE_COUNT,
        )
        raise DecodeError(
            DecodeErrorKind.INSUFFICIENT_LINES,
            "malformed payload: insufficient lines",
            line_count=len(lines),
        )
    if len(lines) > UPN_LINE_COUNT:
        logger.debug("decode_extra_lines | ignored=%s", len(lines) - UPN_LINE_COUNT)

    verify_checksum(lines)

    data: dict[str, Any] = {}
    for index, path, parser in LINE_SCHEMA:
        if path is None:
            continue
        value = parser(lines[index])
        target = data
        *parents, leaf = path.split(".")
        for parent in parents:
            target = target.setdefault(parent, {})
        target[leaf] = value

    record = SourceRecord.model_validate(data)
    logger.debug(
        "decode_complete | format=%r | recipient=%r | amount=%s",
        record.format_tag,
        record.recipient.name,
        record.payment.amount,
    )
    return record
