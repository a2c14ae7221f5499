"""
linescan package init.
Exports the scanner, its construction helpers, patterns and errors.
"""

import argparse
import datetime
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from .buffer import FixedText, LineBuffer
from .exceptions import (
    DelimiterNotFound,
    EndOfInput,
    LinescanError,
    MatchError,
    ParseError,
    ScanError,
)
from .parsers import ParserRegistry, TextParser, default_registry, parse_value
from .patterns import Char, Literal, Pattern, Predicate, Regex, Span, as_pattern
from .scanner import Scanner, scan_file, scan_file_from_path, scan_stdin, scan_str

__version__ = "0.1.0"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured log output."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.datetime.now().isoformat(),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        extra = getattr(record, "linescan_extra", {})
        if extra:
            log_entry.update(extra)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
            context = getattr(record.exc_info[1], "context", None)
            if context:
                log_entry["context"] = context

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "WARNING") -> None:
    """
    Setup basic logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    use_json = os.environ.get("LINESCAN_LOG_JSON", "false").lower() == "true"
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    if use_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    else:
        logging.basicConfig(level=getattr(logging, level.upper()))


_CLI_TYPES = {"str": str, "int": int, "float": float, "bool": bool}


def main(argv: Optional[list] = None) -> int:
    """CLI entry point: split each input line on a delimiter and print typed values."""
    parser = argparse.ArgumentParser(
        description="linescan - split lines into typed tokens"
    )
    parser.add_argument("path", nargs="?", help="File to scan (default: stdin)")
    parser.add_argument(
        "-d", "--delimiter", default=",", help="Token delimiter (default ',')"
    )
    parser.add_argument(
        "-t",
        "--type",
        choices=sorted(_CLI_TYPES),
        default="str",
        help="Type to parse each token as (default str)",
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level (default WARNING)"
    )
    args = parser.parse_args(argv)
    if not args.delimiter:
        parser.error("--delimiter must not be empty")

    setup_logging(args.log_level)
    target = _CLI_TYPES[args.type]

    if args.path:
        scanner = scan_file_from_path(args.path)
    else:
        scanner = scan_stdin()

    with scanner:
        while scanner.has_next():
            try:
                value = scanner.scan_token_until_or_end(args.delimiter, target)
            except ParseError as e:
                print(f"{args.type}: cannot parse {e.payload!r}", file=sys.stderr)
                logging.getLogger(__name__).debug(f"Parse failed: {e}")
                return 1
            print(value)
    return 0


__all__ = [
    "Scanner",
    "LineBuffer",
    "FixedText",
    "scan_str",
    "scan_stdin",
    "scan_file",
    "scan_file_from_path",
    "Pattern",
    "Literal",
    "Char",
    "Predicate",
    "Span",
    "Regex",
    "as_pattern",
    "ParserRegistry",
    "TextParser",
    "default_registry",
    "parse_value",
    "LinescanError",
    "ScanError",
    "EndOfInput",
    "MatchError",
    "DelimiterNotFound",
    "ParseError",
    "setup_logging",
    "main",
]
