"""
upn_fixtures.py - Sample UPN payloads shared by the test scripts.

`upn_lines()` returns the 19 content lines of a valid slip; `build_payload()`
appends a correct checksum (or a given one) and joins them.
"""

from __future__ import annotations

from decode import compute_checksum

SAMPLE_LINES: list[str] = [
    "UPNQR",  # 0 format tag
    "",  # 1 payer IBAN (reserved)
    "",  # 2 deposit flag (reserved)
    "",  # 3 withdrawal flag (reserved)
    "",  # 4 payer reference (reserved)
    "JANEZ NOVAK",  # 5
    "DUNAJSKA CESTA 1",  # 6
    "1000 LJUBLJANA",  # 7
    "00000010050",  # 8 amount in cents
    "",  # 9 payment date (reserved)
    "",  # 10 urgent flag (reserved)
    "GDSV",  # 11 purpose code
    "Invoice 123",  # 12 description
    "15.03.2026",  # 13 due date
    "SI56 0201 7001 4356 205",  # 14 IBAN
    "SI12 1234567890",  # 15 reference
    "Elektro Ljubljana d.d.",  # 16 recipient name
    "Slovenska cesta 58",  # 17
    "1000 Ljubljana",  # 18
]


def upn_lines(overrides: dict[int, str] | None = None) -> list[str]:
    """The 19 content lines of the sample slip, with optional replacements."""
    lines = list(SAMPLE_LINES)
    for index, value in (overrides or {}).items():
        lines[index] = value
    return lines


def build_payload(lines: list[str], checksum: int | str | None = None) -> str:
    """Join content lines plus a checksum line (correct one by default)."""
    if checksum is None:
        checksum = compute_checksum(lines)
    return "\n".join([*lines, str(checksum)])


def sample_payload(overrides: dict[int, str] | None = None) -> str:
    """A complete, correctly checksummed payload."""
    return build_payload(upn_lines(overrides))
