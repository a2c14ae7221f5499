"""
Centralized logging utilities for linescan.

Provides standardized logging functions for the few events the scanner
reports, so message formats stay consistent across modules. Each record
carries a ``linescan_extra`` dict (event, source, line number) that
:class:`linescan.JSONFormatter` merges into its output.
"""

import logging
from typing import Any, Dict


def _extra(event: str, source: str, line_number: int, **fields: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "event": event,
        "source": source,
        "line_number": line_number,
    }
    data.update(fields)
    return {"linescan_extra": data}


def log_line_refill(
    logger: logging.Logger, source: str, line_number: int, length: int
) -> None:
    """Log a physical line being buffered."""
    logger.debug(
        f"[REFILL] {source} line {line_number}: {length} chars",
        extra=_extra("refill", source, line_number, length=length),
    )


def log_end_of_input(logger: logging.Logger, source: str, line_number: int) -> None:
    """Log the source running dry."""
    logger.debug(
        f"[EOF] {source} exhausted after {line_number} lines",
        extra=_extra("end_of_input", source, line_number),
    )


def log_read_failure(
    logger: logging.Logger, source: str, line_number: int, error: Exception
) -> None:
    """Log a read or decode failure that ends the current read."""
    logger.warning(
        f"Read failed in {source} after line {line_number}, "
        f"treating as end of input: {error}",
        extra=_extra("read_failure", source, line_number, error=str(error)),
    )


def log_open_failure(logger: logging.Logger, path: str, error: Exception) -> None:
    """Log a source that could not be opened."""
    logger.critical(
        f"Cannot open scan source {path!r}: {error}",
        extra=_extra("open_failure", path, 0, error=str(error)),
    )


__all__ = [
    "log_line_refill",
    "log_end_of_input",
    "log_read_failure",
    "log_open_failure",
]
