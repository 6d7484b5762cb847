"""
main.py - CLI front end for the UPN -> EPC converter.

Reads a UPN QR payload (text already scanned from the slip) from a file or
stdin and prints the EPC QR payload, a labelled field view, or JSON.
Rendering the QR image is left to whatever displays the output.

Environment (.env is honoured):
    LOG_LEVEL   default log level (DEBUG, INFO, WARNING, ERROR)
    LOG_JSON    '1'/'true' for JSON log lines
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from convert import convert_result, convert_to_target
from decode import decode
from encode import serialize
from explain import (
    format_decode_error,
    format_errors,
    format_result_json,
    format_source,
    format_target,
)
from logging_config import get_logger, level_from_name, setup_logging
from models import DecodeError, ValidationError

logger = get_logger("upn2epc")

try:
    load_dotenv()
except UnicodeDecodeError:
    # Fallback for legacy Windows-encoded .env files.
    load_dotenv(encoding="cp1252")

TRUTHY = {"1", "true", "yes", "on"}


def read_payload(path: str | None) -> str:
    """Read the UPN payload from `path`, or stdin when path is None or '-'."""
    if path is None or path == "-":
        return sys.stdin.read()

    path = path.strip()
    if not path:
        raise ValueError("input path cannot be empty")
    if not os.path.exists(path):
        raise FileNotFoundError(f"Payload file not found: {path}")

    try:
        with open(path, encoding="utf-8-sig") as handle:
            return handle.read()
    except UnicodeDecodeError:
        # UPN slips from older Slovenian billing systems are often cp1250.
        logger.warning(
            "payload_encoding_warning | path=%s | reason='utf-8 decode failed' | fallback=cp1250",
            path,
        )
        with open(path, encoding="cp1250") as handle:
            return handle.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upn2epc",
        description=(
            "Convert a Slovenian UPN QR payload into an EPC (SEPA) QR payload.\n"
            "Prints the EPC text, ready to be rendered as a QR code."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s --input upn.txt\n"
            "  zbarimg --raw slip.png | %(prog)s --show\n"
            "  %(prog)s -i upn.txt --json\n"
        ),
    )
    parser.add_argument(
        "--input",
        "-i",
        type=str,
        default=None,
        help="Path to a file holding the UPN QR text (default: stdin)",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--show",
        action="store_true",
        help="Print the decoded UPN record and labelled EPC fields instead of the raw payload",
    )
    output.add_argument(
        "--json",
        action="store_true",
        help="Print the conversion result as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG-level) logging",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs as JSON lines",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env_level = level_from_name(os.getenv("LOG_LEVEL"), logging.INFO)
    env_json = os.getenv("LOG_JSON", "").strip().lower() in TRUTHY
    setup_logging(
        level=logging.DEBUG if args.verbose else env_level,
        json_format=args.log_json or env_json,
    )

    try:
        text = read_payload(args.input)

        if args.json:
            result = convert_result(text)
            print(json.dumps(format_result_json(result), indent=2, ensure_ascii=False))
            if not result.ok:
                raise SystemExit(1)
            return

        target = convert_to_target(text)
        if args.show:
            print(format_source(decode(text)))
            print(format_target(target))
        else:
            # Payload is written byte-exact; its last field may be empty.
            sys.stdout.write(serialize(target))
    except DecodeError as exc:
        logger.error("cli_error | type=DecodeError | kind=%s | error=%s", exc.kind.value, exc)
        print(format_decode_error(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    except ValidationError as exc:
        logger.error("cli_error | type=ValidationError | violations=%s", len(exc.messages))
        print(format_errors(exc.messages), file=sys.stderr)
        raise SystemExit(1) from exc
    except (FileNotFoundError, ValueError) as exc:
        logger.error("cli_error | type=%s | error=%s", type(exc).__name__, exc)
        print(f"\nError: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        raise SystemExit(130)


if __name__ == "__main__":
    main()
