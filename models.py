"""
models.py - Data Models for the UPN -> EPC converter

This file defines ALL data structures used across the converter.
Every module in the pipeline communicates exclusively through these models:

    decode.py   ->  SourceRecord
    validate.py ->  list[str] / ValidatedRecord
    encode.py   ->  TargetRecord -> str
    convert.py  ->  ConversionResult (exception-free wrapper)
    explain.py  ->  str / dict (uses TargetRecord and ConversionResult)

Design principles:
1. Each layer's output is the next layer's input
2. Records are frozen once built - no stage edits another stage's output
3. A TargetRecord can only exist in a valid state: its field constraints
   repeat the EPC limits, so construction fails on anything out of range
4. The encoder only accepts a ValidatedRecord, which only the validator
   can create

Schema relationships:
    Payer, Payment, Recipient --used by--> SourceRecord
    SourceRecord  --wrapped by--> ValidatedRecord
    TargetRecord  --used by--> ConversionResult.target
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# EPC field limits, shared with validate.py and encode.py.
MAX_RECIPIENT_LENGTH = 70
MAX_REFERENCE_LENGTH = 35
MAX_TEXT_LENGTH = 140
PURPOSE_CODE_LENGTH = 4
MAX_AMOUNT = Decimal("999999999.99")

IBAN_PATTERN = r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{1,30}$"
PURPOSE_CODE_PATTERN = r"^[A-Z]{4}$"
EPC_AMOUNT_PATTERN = r"^EUR[0-9]{1,9}\.[0-9]{2}$"


class Payer(BaseModel):
    """Who pays. Decoded from lines 5-7, never used by the encoder."""

    name: str = ""
    address: str = ""
    city: str = ""

    model_config = ConfigDict(frozen=True)


class Payment(BaseModel):
    """Payment details from lines 8 and 11-15 of a UPN payload."""

    amount: Optional[Decimal] = Field(
        default=None,
        description=(
            "Amount in major currency units (euros). The UPN payload carries "
            "integer cents; the decoder divides by 100. None when the amount "
            "line is not an integer, which the validator then reports."
        ),
    )
    purpose_code: str = Field(
        default="",
        description="ISO 20022 purpose code, e.g. 'GDSV' or 'OTHR'. May be empty.",
    )
    description: str = Field(
        default="",
        description="Free-text payment description shown to the payer.",
    )
    due_date: str = Field(
        default="",
        description="Due date exactly as printed in the payload (DD.MM.YYYY).",
    )
    iban: str = Field(
        default="",
        description="Recipient IBAN as printed, possibly with grouping spaces.",
    )
    reference: str = Field(
        default="",
        description="Payment reference, e.g. 'SI00 123456'.",
    )

    model_config = ConfigDict(frozen=True)


class Recipient(BaseModel):
    """Who gets paid. Decoded from lines 16-18."""

    name: str = ""
    address: str = ""
    city: str = ""

    model_config = ConfigDict(frozen=True)


class SourceRecord(BaseModel):
    """A decoded UPN QR payload.

    Built once per decode call and never modified afterwards. The checksum
    has already been verified by the time a SourceRecord exists; it is kept
    for diagnostics only.
    """

    format_tag: str = Field(
        default="",
        description="Line 0 of the payload (normally 'UPNQR'). Not validated.",
    )
    payer: Payer = Field(default_factory=Payer)
    payment: Payment = Field(default_factory=Payment)
    recipient: Recipient = Field(default_factory=Recipient)
    checksum: int = Field(
        default=0,
        description="Line 19: 19 plus the summed lengths of lines 0-18.",
    )

    model_config = ConfigDict(frozen=True)


class TargetRecord(BaseModel):
    """The twelve fields of an EPC SEPA credit-transfer QR payload.

    Field order is serialization order. Constraints mirror the EPC limits
    so that a TargetRecord which constructs successfully is always
    encodable.
    """

    service_tag: Literal["BCD"] = "BCD"
    version: Literal["002"] = "002"
    encoding: Literal["1"] = "1"
    identification: Literal["SCT"] = "SCT"
    bic: Literal[""] = ""
    recipient: str = Field(
        ...,
        min_length=1,
        max_length=MAX_RECIPIENT_LENGTH,
        description="Beneficiary name, upper-cased.",
    )
    iban: str = Field(
        ...,
        pattern=IBAN_PATTERN,
        description="Beneficiary IBAN with all whitespace removed.",
    )
    amount: str = Field(
        ...,
        pattern=EPC_AMOUNT_PATTERN,
        description="Currency prefix plus fixed 2-decimal amount, e.g. 'EUR100.50'.",
    )
    purpose_code: str = Field(
        default="",
        max_length=PURPOSE_CODE_LENGTH,
        pattern=r"^([A-Z]{4})?$",
    )
    reference: str = Field(..., min_length=1, max_length=MAX_REFERENCE_LENGTH)
    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    info: Literal[""] = ""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "service_tag": "BCD",
                    "version": "002",
                    "encoding": "1",
                    "identification": "SCT",
                    "bic": "",
                    "recipient": "ELEKTRO LJUBLJANA D.D.",
                    "iban": "SI56020170014356205",
                    "amount": "EUR100.50",
                    "purpose_code": "GDSV",
                    "reference": "SI12 1234567890",
                    "text": "Invoice 123",
                    "info": "",
                }
            ]
        },
    )

    def fields_in_order(self) -> list[str]:
        """Field values in EPC serialization order."""
        return [getattr(self, name) for name in type(self).model_fields]


# Only validate.require_valid() holds a reference it passes on.
_VALIDATION_TOKEN = object()


class ValidatedRecord:
    """Proof that a SourceRecord passed every validation rule.

    The encoder refuses anything else, so encoding unchecked data is a
    TypeError rather than silently wrong output.
    """

    __slots__ = ("_record",)

    def __init__(self, record: SourceRecord, _token: object = None) -> None:
        if _token is not _VALIDATION_TOKEN:
            raise TypeError(
                "ValidatedRecord can only be created by validate.require_valid()"
            )
        object.__setattr__(self, "_record", record)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ValidatedRecord is immutable")

    @property
    def record(self) -> SourceRecord:
        return self._record

    def __repr__(self) -> str:
        return f"ValidatedRecord({self._record!r})"


class DecodeErrorKind(str, Enum):
    """Why a UPN payload could not be decoded."""

    INSUFFICIENT_LINES = "insufficient_lines"
    CHECKSUM_MISMATCH = "checksum_mismatch"


class DecodeError(ValueError):
    """A UPN payload is structurally broken. Always fatal for the attempt."""

    def __init__(
        self,
        kind: DecodeErrorKind,
        message: str,
        *,
        line_count: int | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.line_count = line_count
        self.expected = expected
        self.actual = actual


class ValidationError(ValueError):
    """One or more EPC field rules failed. Carries every message, in rule order."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__(f"Validation errors: {', '.join(self.messages)}")


class ConversionResult(BaseModel):
    """Exception-free outcome of one conversion attempt.

    Exactly one of `payload` or `errors` is meaningful: ok=True carries the
    EPC payload and its TargetRecord, ok=False carries the error kind and
    every message the caller should show.
    """

    ok: bool
    payload: Optional[str] = None
    target: Optional[TargetRecord] = None
    errors: list[str] = Field(default_factory=list)
    error_kind: Optional[Literal["decode", "validation"]] = None
    decode_error_kind: Optional[DecodeErrorKind] = None

    model_config = ConfigDict(frozen=True)
