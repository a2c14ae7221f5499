"""
Utilities package for linescan.

Contains common utility functions used across the linescan codebase.
"""

from .logging_utils import (
    log_end_of_input,
    log_line_refill,
    log_open_failure,
    log_read_failure,
)

__all__ = [
    "log_line_refill",
    "log_end_of_input",
    "log_read_failure",
    "log_open_failure",
]
