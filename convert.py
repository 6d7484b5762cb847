"""
convert.py - UPN -> EPC conversion pipeline.

This module is orchestration-only:
1. decode
2. validate
3. encode

`convert` raises the typed errors; `convert_result` never raises for bad
input and is what a display front end should call.
"""

from __future__ import annotations

import time

from decode import decode
from encode import build_target, serialize
from logging_config import get_logger
from models import ConversionResult, DecodeError, TargetRecord, ValidationError
from validate import require_valid

logger = get_logger("upn2epc")


def convert_to_target(text: str) -> TargetRecord:
    """Decode, validate and map a UPN payload to its EPC fields.

    Raises:
        DecodeError: the payload is malformed or its checksum is wrong.
        ValidationError: one or more EPC rules failed; carries all messages.
    """
    pipeline_start = time.time()

    # Stage 1: decode.
    stage_start = time.time()
    logger.info("pipeline_stage | stage=1/3 | name=decode | status=start")
    record = decode(text)
    decode_time = time.time() - stage_start
    logger.info(
        "pipeline_stage | stage=1/3 | name=decode | status=complete | format=%r | duration_s=%.4f",
        record.format_tag,
        decode_time,
    )

    # Stage 2: validate.
    stage_start = time.time()
    logger.info("pipeline_stage | stage=2/3 | name=validate | status=start")
    validated = require_valid(record)
    validate_time = time.time() - stage_start
    logger.info(
        "pipeline_stage | stage=2/3 | name=validate | status=complete | duration_s=%.4f",
        validate_time,
    )

    # Stage 3: encode.
    stage_start = time.time()
    logger.info("pipeline_stage | stage=3/3 | name=encode | status=start")
    target = build_target(validated)
    encode_time = time.time() - stage_start

    logger.info(
        "pipeline_complete | total_duration_s=%.4f | decode_s=%.4f | validate_s=%.4f | encode_s=%.4f",
        time.time() - pipeline_start,
        decode_time,
        validate_time,
        encode_time,
    )
    return target


def convert(text: str) -> str:
    """Convert UPN QR text into EPC QR text.

    Raises:
        DecodeError: the payload is malformed or its checksum is wrong.
        ValidationError: one or more EPC rules failed; carries all messages.
    """
    return serialize(convert_to_target(text))


def convert_result(text: str) -> ConversionResult:
    """Like `convert`, but every failure comes back as a ConversionResult."""
    try:
        target = convert_to_target(text)
    except DecodeError as exc:
        return ConversionResult(
            ok=False,
            errors=[str(exc)],
            error_kind="decode",
            decode_error_kind=exc.kind,
        )
    except ValidationError as exc:
        return ConversionResult(
            ok=False,
            errors=exc.messages,
            error_kind="validation",
        )

    return ConversionResult(ok=True, payload=serialize(target), target=target)
