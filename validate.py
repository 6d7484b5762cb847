"""
validate.py - EPC field rules applied to a decoded UPN record.

Every rule runs on every call; a failing rule adds exactly one message.
The caller gets the full list at once so the user can fix everything in
one go. Message order is the order of `RULES`.
"""

from __future__ import annotations

import re
from typing import Callable

from logging_config import get_logger
from models import (
    _VALIDATION_TOKEN,
    IBAN_PATTERN,
    MAX_AMOUNT,
    MAX_RECIPIENT_LENGTH,
    MAX_REFERENCE_LENGTH,
    MAX_TEXT_LENGTH,
    PURPOSE_CODE_PATTERN,
    SourceRecord,
    ValidatedRecord,
    ValidationError,
)
from normalize import strip_whitespace

logger = get_logger(__name__)

_IBAN_RE = re.compile(IBAN_PATTERN)
_PURPOSE_CODE_RE = re.compile(PURPOSE_CODE_PATTERN)


def _recipient_name_ok(record: SourceRecord) -> bool:
    name = record.recipient.name
    return bool(name) and len(name) <= MAX_RECIPIENT_LENGTH


def _iban_ok(record: SourceRecord) -> bool:
    # Structure only. No mod-97 or country-length check.
    return _IBAN_RE.fullmatch(strip_whitespace(record.payment.iban)) is not None


def _amount_ok(record: SourceRecord) -> bool:
    amount = record.payment.amount
    if amount is None or not amount.is_finite():
        return False
    return 0 < amount <= MAX_AMOUNT


def _purpose_code_ok(record: SourceRecord) -> bool:
    code = record.payment.purpose_code
    return not code or _PURPOSE_CODE_RE.fullmatch(code) is not None


def _reference_ok(record: SourceRecord) -> bool:
    reference = record.payment.reference
    return bool(reference) and len(reference) <= MAX_REFERENCE_LENGTH


def _description_ok(record: SourceRecord) -> bool:
    description = record.payment.description
    return not description or len(description) <= MAX_TEXT_LENGTH


RULES: list[tuple[str, Callable[[SourceRecord], bool], str]] = [
    (
        "recipient_name",
        _recipient_name_ok,
        "Beneficiary name must be present and not exceed 70 characters",
    ),
    ("iban", _iban_ok, "Invalid IBAN format"),
    (
        "amount",
        _amount_ok,
        "Amount must be a positive number not exceeding 999,999,999.99",
    ),
    ("purpose_code", _purpose_code_ok, "Purpose code must be 4 uppercase letters"),
    (
        "reference",
        _reference_ok,
        "Reference must be present and not exceed 35 characters",
    ),
    ("description", _description_ok, "Description must not exceed 140 characters"),
]


def validate(record: SourceRecord) -> list[str]:
    """Return every rule violation for `record`, in rule order. Empty = valid."""
    errors: list[str] = []
    for name, check, message in RULES:
        if not check(record):
            logger.debug("validate_rule_failed | rule=%s", name)
            errors.append(message)
    return errors


def require_valid(record: SourceRecord) -> ValidatedRecord:
    """Validate `record` and return the proof the encoder needs.

    Raises:
        ValidationError: carrying every violation message.
    """
    errors = validate(record)
    if errors:
        logger.info("validate_failed | violations=%s", len(errors))
        raise ValidationError(errors)
    return ValidatedRecord(record, _VALIDATION_TOKEN)
