"""
test_validate.py - EPC Validation Rule Tests

Checks for:
- each of the six rules in isolation
- validate-all behaviour and message order
- require_valid / ValidatedRecord construction

Usage: python test_validate.py
"""

from __future__ import annotations

import os
import sys
from decimal import Decimal
from typing import Any

# Ensure local imports resolve from project root.
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models import (
    Payment,
    Recipient,
    SourceRecord,
    ValidatedRecord,
    ValidationError,
)
from validate import RULES, require_valid, validate

NAME_MSG = "Beneficiary name must be present and not exceed 70 characters"
IBAN_MSG = "Invalid IBAN format"
AMOUNT_MSG = "Amount must be a positive number not exceeding 999,999,999.99"
PURPOSE_MSG = "Purpose code must be 4 uppercase letters"
REFERENCE_MSG = "Reference must be present and not exceed 35 characters"
DESCRIPTION_MSG = "Description must not exceed 140 characters"


def _configure_output_symbols() -> tuple[str, str, str]:
    try:
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    except Exception:
        pass

    try:
        "✓✗═".encode(sys.stdout.encoding or "utf-8")
        return "✓", "✗", "═"
    except Exception:
        return "[OK]", "[FAIL]", "="


PASS, FAIL, LINE = _configure_output_symbols()


def make_record(
    name: str = "Elektro Ljubljana d.d.",
    iban: str = "SI56 0201 7001 4356 205",
    amount: Any = Decimal("100.50"),
    purpose_code: str = "GDSV",
    reference: str = "SI12 1234567890",
    description: str = "Invoice 123",
) -> SourceRecord:
    return SourceRecord(
        format_tag="UPNQR",
        payment=Payment(
            amount=amount,
            purpose_code=purpose_code,
            description=description,
            iban=iban,
            reference=reference,
        ),
        recipient=Recipient(name=name),
        checksum=0,
    )


def main() -> int:
    passed = 0
    failed = 0

    def check(name: str, condition: bool) -> None:
        nonlocal passed, failed
        if condition:
            print(f"    {PASS} {name}")
            passed += 1
        else:
            print(f"    {FAIL} {name}")
            failed += 1

    print(LINE * 56)
    print("  Validator Tests")
    print(LINE * 56)

    check("Valid record -> no messages", validate(make_record()) == [])

    # Category 1: one rule at a time
    rule_cases: list[tuple[dict[str, Any], list[str], str]] = [
        ({"name": ""}, [NAME_MSG], "empty recipient name"),
        ({"name": "A" * 70}, [], "70-char name accepted"),
        ({"name": "A" * 71}, [NAME_MSG], "71-char name rejected"),
        ({"name": "A" * 80}, [NAME_MSG], "80-char name rejected"),
        ({"iban": "SI56020170014356205"}, [], "compact IBAN"),
        ({"iban": " SI56 0201\t7001 4356 205 "}, [], "IBAN with mixed whitespace"),
        ({"iban": "si56 0201 7001 4356 205"}, [IBAN_MSG], "lower-case IBAN"),
        ({"iban": ""}, [IBAN_MSG], "empty IBAN"),
        ({"iban": "SI5"}, [IBAN_MSG], "too short IBAN"),
        ({"iban": "S156 0201"}, [IBAN_MSG], "digit in country code"),
        ({"iban": "SIAB0201"}, [IBAN_MSG], "letters in check digits"),
        ({"iban": "SI12" + "A" * 30}, [], "30-char BBAN accepted"),
        ({"iban": "SI12" + "A" * 31}, [IBAN_MSG], "31-char BBAN rejected"),
        ({"iban": "SI56-0201-7001"}, [IBAN_MSG], "punctuation in IBAN"),
        ({"amount": Decimal("0")}, [AMOUNT_MSG], "zero amount"),
        ({"amount": Decimal("-5")}, [AMOUNT_MSG], "negative amount"),
        ({"amount": None}, [AMOUNT_MSG], "non-numeric amount (None)"),
        ({"amount": Decimal("0.01")}, [], "one cent"),
        ({"amount": Decimal("999999999.99")}, [], "maximum amount"),
        ({"amount": Decimal("1000000000.00")}, [AMOUNT_MSG], "above maximum"),
        ({"purpose_code": ""}, [], "no purpose code"),
        ({"purpose_code": "OTHR"}, [], "OTHR"),
        ({"purpose_code": "gdsv"}, [PURPOSE_MSG], "lower-case purpose"),
        ({"purpose_code": "GDS"}, [PURPOSE_MSG], "3-letter purpose"),
        ({"purpose_code": "GDSVX"}, [PURPOSE_MSG], "5-letter purpose"),
        ({"purpose_code": "GD5V"}, [PURPOSE_MSG], "digit in purpose"),
        ({"reference": ""}, [REFERENCE_MSG], "empty reference"),
        ({"reference": "R" * 35}, [], "35-char reference"),
        ({"reference": "R" * 36}, [REFERENCE_MSG], "36-char reference"),
        ({"description": ""}, [], "no description"),
        ({"description": "D" * 140}, [], "140-char description"),
        ({"description": "D" * 141}, [DESCRIPTION_MSG], "141-char description"),
    ]
    print(f"\n  Single rules ({len(rule_cases)} cases):")
    for overrides, expected, desc in rule_cases:
        check(desc, validate(make_record(**overrides)) == expected)

    # Category 2: validate-all
    print("\n  Validate-all:")
    messages = validate(make_record(name="N" * 80, amount=Decimal("0"), reference=""))
    check("Rules 1, 3 and 5 -> exactly three messages", len(messages) == 3)
    check("Messages in rule order", messages == [NAME_MSG, AMOUNT_MSG, REFERENCE_MSG])

    everything_wrong = make_record(
        name="",
        iban="nope",
        amount=None,
        purpose_code="x",
        reference="",
        description="D" * 200,
    )
    messages = validate(everything_wrong)
    check(
        "All six rules fail -> six messages in order",
        messages == [NAME_MSG, IBAN_MSG, AMOUNT_MSG, PURPOSE_MSG, REFERENCE_MSG, DESCRIPTION_MSG],
    )
    check("Order is stable across calls", validate(everything_wrong) == messages)
    check("Rule table lists six rules", [name for name, _, _ in RULES] == [
        "recipient_name", "iban", "amount", "purpose_code", "reference", "description",
    ])

    # Category 3: require_valid
    print("\n  require_valid:")
    validated = require_valid(make_record())
    check("Valid record -> ValidatedRecord", isinstance(validated, ValidatedRecord))
    check("ValidatedRecord wraps the same record", validated.record == make_record())

    raised: ValidationError | None = None
    try:
        require_valid(make_record(iban="si56 0201", reference=""))
    except ValidationError as exc:
        raised = exc
    check("Invalid record -> ValidationError", raised is not None)
    check(
        "ValidationError carries every message",
        raised is not None and raised.messages == [IBAN_MSG, REFERENCE_MSG],
    )
    check("ValidationError is a ValueError", isinstance(raised, ValueError))

    direct_blocked = False
    try:
        ValidatedRecord(make_record())
    except TypeError:
        direct_blocked = True
    check("ValidatedRecord cannot be built directly", direct_blocked)

    forged_blocked = False
    try:
        ValidatedRecord(make_record(), object())
    except TypeError:
        forged_blocked = True
    check("ValidatedRecord rejects a forged token", forged_blocked)

    immutable = False
    try:
        validated.other = 1  # type: ignore[attr-defined]
    except AttributeError:
        immutable = True
    check("ValidatedRecord is immutable", immutable)

    print(f"\n{LINE * 56}")
    print(f"  Results: {passed}/{passed + failed} passed")
    if failed == 0:
        print(f"  Validator: COMPLETE {PASS}")
    else:
        print(f"  Validator: {failed} FAILED")
    print(f"{LINE * 56}")
    return failed


def test_validator_suite() -> None:
    assert main() == 0


if __name__ == "__main__":
    raise SystemExit(1 if main() else 0)
