"""
explain.py - Human-readable and JSON-ready conversion output.

This module converts conversion outcomes into:
- terminal-friendly text blocks (labelled EPC fields, error lists)
- machine-friendly dictionaries for JSON output
"""

from __future__ import annotations

from logging_config import get_logger
from models import ConversionResult, DecodeError, SourceRecord, TargetRecord
from normalize import format_amount, normalize_due_date

logger = get_logger(__name__)

FIELD_LABELS: dict[str, str] = {
    "service_tag": "Service Tag",
    "version": "Version",
    "encoding": "Character set",
    "identification": "Identification",
    "bic": "BIC",
    "recipient": "Name",
    "iban": "IBAN",
    "amount": "Amount",
    "purpose_code": "Purpose",
    "reference": "Reference",
    "text": "Text",
    "info": "Information",
}

OUTPUT_WIDTH = 56
SEPARATOR = "=" * OUTPUT_WIDTH
LABEL_WIDTH = max(len(label) for label in FIELD_LABELS.values()) + 1


def _block(header: str, body: list[str]) -> str:
    lines = ["", SEPARATOR, f"  {header}", SEPARATOR, ""]
    lines.extend(body)
    lines.extend(["", SEPARATOR, ""])
    return "\n".join(lines)


def format_target(target: TargetRecord) -> str:
    """Format the EPC fields as a labelled text block, in payload order."""
    body = []
    for name in type(target).model_fields:
        label = f"{FIELD_LABELS[name]}:"
        body.append(f"  {label:<{LABEL_WIDTH}} {getattr(target, name)}")
    return _block("EPC QR Payment", body)


def format_source(record: SourceRecord) -> str:
    """Summarize a decoded UPN record (payer, recipient, payment)."""
    payment = record.payment
    amount = (
        f"{format_amount(payment.amount)} EUR" if payment.amount is not None else "(invalid)"
    )
    due = normalize_due_date(payment.due_date) or payment.due_date or "-"
    body = [
        f"  Payer:      {record.payer.name}",
        f"              {record.payer.address}, {record.payer.city}",
        f"  Recipient:  {record.recipient.name}",
        f"              {record.recipient.address}, {record.recipient.city}",
        "",
        f"  Amount:     {amount}",
        f"  Due date:   {due}",
        f"  IBAN:       {payment.iban}",
        f"  Reference:  {payment.reference}",
        f"  Purpose:    {payment.purpose_code or '-'}",
        f"  Text:       {payment.description or '-'}",
    ]
    return _block(f"UPN QR Payment ({record.format_tag})", body)


def format_errors(messages: list[str]) -> str:
    """List every validation message so all corrections are visible at once."""
    if not messages:
        return _block("No validation errors", [])
    body = [f"    • {message}" for message in messages]
    return _block(f"Cannot convert - {len(messages)} validation error(s)", body)


def format_decode_error(error: DecodeError) -> str:
    """Describe a decode failure including checksum diagnostics."""
    body = [f"  Error:       {error}", f"  Kind:        {error.kind.value}"]
    if error.line_count is not None:
        body.append(f"  Lines:       {error.line_count}")
    if error.expected is not None:
        actual = error.actual if error.actual is not None else "(not a number)"
        body.append(f"  Checksum:    expected {error.expected}, found {actual}")
    return _block("Cannot read UPN QR code", body)


def format_result_json(result: ConversionResult) -> dict:
    """Format a ConversionResult as a JSON-compatible dictionary."""
    if result.ok:
        fields = result.target.model_dump() if result.target is not None else {}
        return {
            "status": "ok",
            "payload": result.payload,
            "fields": fields,
            "labels": {name: FIELD_LABELS[name] for name in fields},
            "decode_error_kind": None,
            "errors": [],
        }

    logger.debug(
        "explain_json_error | error_kind=%s | count=%s",
        result.error_kind,
        len(result.errors),
    )
    return {
        "status": f"{result.error_kind}_error",
        "payload": None,
        "fields": None,
        "labels": None,
        "decode_error_kind": (
            result.decode_error_kind.value if result.decode_error_kind else None
        ),
        "errors": list(result.errors),
    }
