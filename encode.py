"""
encode.py - EPC QR payload encoder.

Maps a validated UPN record onto the twelve EPC fields and serializes them.
Only `ValidatedRecord` is accepted, so there is no path that encodes data
the validator has not seen.
"""

from __future__ import annotations

from logging_config import get_logger
from models import (
    MAX_RECIPIENT_LENGTH,
    MAX_REFERENCE_LENGTH,
    MAX_TEXT_LENGTH,
    PURPOSE_CODE_LENGTH,
    TargetRecord,
    ValidatedRecord,
)
from normalize import format_amount, strip_whitespace

logger = get_logger(__name__)

# -- EPC constants --

SERVICE_TAG = "BCD"
VERSION = "002"
CHARACTER_SET = "1"  # UTF-8
IDENTIFICATION = "SCT"
CURRENCY = "EUR"
FIELD_SEPARATOR = "\n"


def build_target(validated: ValidatedRecord) -> TargetRecord:
    """Project a validated record onto the EPC fields."""
    if not isinstance(validated, ValidatedRecord):
        raise TypeError(
            f"encode requires a ValidatedRecord, got {type(validated).__name__}; "
            "call validate.require_valid() first"
        )

    record = validated.record
    payment = record.payment

    # Clamps are no-ops for validated input.
    return TargetRecord(
        service_tag=SERVICE_TAG,
        version=VERSION,
        encoding=CHARACTER_SET,
        identification=IDENTIFICATION,
        bic="",
        recipient=record.recipient.name.upper()[:MAX_RECIPIENT_LENGTH],
        iban=strip_whitespace(payment.iban),
        amount=f"{CURRENCY}{format_amount(payment.amount)}",
        purpose_code=(payment.purpose_code or "")[:PURPOSE_CODE_LENGTH],
        reference=payment.reference[:MAX_REFERENCE_LENGTH],
        text=(payment.description or "")[:MAX_TEXT_LENGTH],
        info="",
    )


def serialize(target: TargetRecord) -> str:
    """Join the EPC fields in order, one per line."""
    return FIELD_SEPARATOR.join(target.fields_in_order())


def encode(validated: ValidatedRecord) -> str:
    """Encode a validated record as EPC QR text."""
    target = build_target(validated)
    payload = serialize(target)
    logger.debug(
        "encode_complete | recipient=%r | amount=%s | bytes=%s",
        target.recipient,
        target.amount,
        len(payload.encode("utf-8")),
    )
    return payload
