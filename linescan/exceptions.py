"""Exceptions for linescan.

Every error carries a ``context`` dict describing where scanning stood when it
failed. Scanner operations fill in:

- ``line``: 1-based number of the physical line being scanned
- ``column``: cursor position (for parse failures, where the token started)
- ``pattern``: repr of the matcher that failed to match
- ``type``: name of the type a token was being parsed as
"""

from typing import Any, Dict, Optional


class LinescanError(Exception):
    """Base error for linescan; ``context`` locates the failure in the input."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        # Long values, usually line remainders, are truncated to 50 chars.
        base_msg = super().__str__()
        if self.context:
            context_items = []
            for key, value in self.context.items():
                if isinstance(value, str) and len(value) > 50:
                    value = value[:47] + "..."
                context_items.append(f"{key}={value!r}")
            context_str = ", ".join(context_items)
            return f"{base_msg} (Context: {context_str})"
        return base_msg

    def __repr__(self) -> str:
        base_repr = super().__repr__()
        if self.context:
            return f"{base_repr} (context={self.context!r})"
        return base_repr

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def get_context(self, key: str, default: Any = None) -> Any:
        return self.context.get(key, default)


class ScanError(LinescanError):
    """A recoverable scan failure.

    ``payload`` carries the text relevant to the failure: the unconsumed
    remainder of the line for match failures, the offending text for parse
    failures and the empty string at end of input.
    """

    def __init__(
        self,
        message: str,
        payload: str = "",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message, context, original_exception)
        self.payload = payload


class EndOfInput(ScanError):
    """No further line was available when one was required."""

    def __init__(
        self,
        message: str = "End of input",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "", context)


class MatchError(ScanError):
    """A required pattern did not match at the required position."""

    pass


class DelimiterNotFound(MatchError):
    """A scan-until delimiter has no occurrence in the remaining line."""

    pass


class ParseError(ScanError, ValueError):
    """Extracted text could not be converted to the requested type."""

    pass


__all__ = [
    "LinescanError",
    "ScanError",
    "EndOfInput",
    "MatchError",
    "DelimiterNotFound",
    "ParseError",
]
