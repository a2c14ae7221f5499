"""
Scanner: typed, pattern-driven reading of line-buffered text.

Every operation works on the *remainder* of the current line, the text from
the cursor to the end of the line. Tokens never span lines. Operations that
fail leave the cursor where it was, except where noted.

Example::

    >>> s = scan_str("Hello: 42!")
    >>> s.scan_token_until(":")
    'Hello'
    >>> s.next_char()
    ' '
    >>> s.scan_token_until("!", int)
    42
"""

import io
import logging
import os
import sys
from typing import IO, Any, Iterator, Optional, Tuple, Type, TypeVar, Union

from .buffer import Cursor, FixedText, LineBuffer, copy_text
from .exceptions import DelimiterNotFound, EndOfInput, MatchError, ParseError
from .parsers import ParserRegistry, default_registry
from .patterns import Pattern, PatternLike, as_pattern
from .utils.logging_utils import log_open_failure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Scanner:
    """Reads tokens from a source one line at a time."""

    def __init__(
        self,
        source: IO[Any],
        parsers: Optional[ParserRegistry] = None,
        encoding: str = "utf-8",
        owns_source: bool = True,
        name: Optional[str] = None,
    ) -> None:
        self._buffer = LineBuffer(
            source, encoding=encoding, owns_source=owns_source, name=name
        )
        self._parsers = parsers if parsers is not None else default_registry

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def parsers(self) -> ParserRegistry:
        return self._parsers

    @property
    def line_number(self) -> int:
        """1-based number of the line most recently read."""
        return self._buffer.line_number

    @property
    def column(self) -> int:
        """0-based cursor position within the buffered line."""
        return self._buffer.cursor

    def _context(self, cursor: Cursor, **extra: Any) -> dict:
        context = {"line": self._buffer.line_number, "column": cursor.pos}
        context.update(extra)
        return context

    # ------------------------------------------------------------
    # Single-position reads
    # ------------------------------------------------------------

    def has_next(self) -> bool:
        """True if at least one more character can be read."""
        return self._buffer.has_next()

    def peek(self) -> str:
        """Return the remainder of the current line without consuming it."""
        return self._buffer.with_current_line(lambda cursor: cursor.remainder)

    def expect(self, pattern: PatternLike) -> int:
        """
        Consume ``pattern`` at the start of the remainder.

        Returns:
            The number of characters consumed.

        Raises:
            MatchError: the pattern does not match at the cursor; ``payload``
                is the unconsumed remainder.
            EndOfInput: no input left.
        """
        matcher = as_pattern(pattern)

        def op(cursor: Cursor) -> int:
            rest = cursor.remainder
            length = matcher.match_at_start(rest)
            if length is None:
                raise MatchError(
                    f"Expected {matcher!r}",
                    payload=rest,
                    context=self._context(cursor, pattern=repr(matcher)),
                )
            cursor.advance(length)
            return length

        return self._buffer.with_current_line(op)

    def next_char(self) -> str:
        """
        Consume and return one character.

        Reaching the end of a line is not an error; the next call continues
        with the following non-empty line.

        Raises:
            EndOfInput: no input left. The buffered line, if any, is discarded.
        """

        def op(cursor: Cursor) -> str:
            char = cursor.remainder[0]
            cursor.advance(1)
            return char

        try:
            return self._buffer.with_current_line(op)
        except EndOfInput:
            self._buffer.discard_line()
            raise

    # ------------------------------------------------------------
    # Fixed-length copies
    # ------------------------------------------------------------

    def scan_fixed(self, result: FixedText) -> int:
        """
        Copy up to ``result.capacity`` characters of the remainder into ``result``.

        Only the leading characters of ``result`` are overwritten.

        Returns:
            The number of characters copied.
        """

        def op(cursor: Cursor) -> int:
            rest = cursor.remainder
            end = min(result.capacity, len(rest))
            copy_text(rest, result, end)
            cursor.advance(end)
            return end

        return self._buffer.with_current_line(op)

    def scan_fixed_until(self, result: FixedText, delimiter: PatternLike) -> int:
        """
        Copy the text before ``delimiter`` into ``result`` and skip the delimiter.

        At most ``result.capacity`` characters are copied; text before the
        delimiter that does not fit is skipped along with it.

        Returns:
            The number of characters copied.

        Raises:
            DelimiterNotFound: ``delimiter`` does not occur in the remainder.
            ValueError: ``delimiter`` matched zero characters.
        """
        return self._scan_fixed_until(result, delimiter, or_end=False)

    def scan_fixed_until_or_end(self, result: FixedText, delimiter: PatternLike) -> int:
        """Like :meth:`scan_fixed_until`, but a missing delimiter ends the token at end of line."""
        return self._scan_fixed_until(result, delimiter, or_end=True)

    def _scan_fixed_until(
        self, result: FixedText, delimiter: PatternLike, or_end: bool
    ) -> int:
        matcher = as_pattern(delimiter)

        def op(cursor: Cursor) -> int:
            rest = cursor.remainder
            index, length = self._find_delimiter(cursor, matcher, or_end)
            end = min(result.capacity, index)
            copy_text(rest, result, end)
            cursor.advance(index + length)
            return end

        return self._buffer.with_current_line(op)

    # ------------------------------------------------------------
    # Typed tokens
    # ------------------------------------------------------------

    def scan_token(self, type_: Type[T] = str) -> T:  # type: ignore[assignment]
        """
        Parse the whole remainder of the line as ``type_``.

        The line is consumed whether or not parsing succeeds.

        Raises:
            ParseError: the remainder cannot be converted; ``payload`` is the text.
            EndOfInput: no input left.
        """

        def op(cursor: Cursor) -> T:
            start = cursor.pos
            rest = cursor.remainder
            cursor.consume_all()
            return self._parse(rest, type_, start)

        return self._buffer.with_current_line(op)

    def scan_token_until(self, delimiter: PatternLike, type_: Type[T] = str) -> T:  # type: ignore[assignment]
        """
        Parse the text before ``delimiter`` as ``type_`` and skip the delimiter.

        The cursor moves past the delimiter even if parsing fails.

        Raises:
            DelimiterNotFound: ``delimiter`` does not occur in the remainder;
                the cursor is unchanged.
            ParseError: the text before the delimiter cannot be converted.
            ValueError: ``delimiter`` matched zero characters.
        """
        return self._scan_token_until(delimiter, type_, or_end=False)

    def scan_token_until_or_end(
        self, delimiter: PatternLike, type_: Type[T] = str  # type: ignore[assignment]
    ) -> T:
        """Like :meth:`scan_token_until`, but a missing delimiter ends the token at end of line."""
        return self._scan_token_until(delimiter, type_, or_end=True)

    def _scan_token_until(
        self, delimiter: PatternLike, type_: Type[T], or_end: bool
    ) -> T:
        matcher = as_pattern(delimiter)

        def op(cursor: Cursor) -> T:
            start = cursor.pos
            rest = cursor.remainder
            index, length = self._find_delimiter(cursor, matcher, or_end)
            cursor.advance(index + length)
            return self._parse(rest[:index], type_, start)

        return self._buffer.with_current_line(op)

    def _find_delimiter(
        self, cursor: Cursor, matcher: Pattern, or_end: bool
    ) -> Tuple[int, int]:
        """Locate ``matcher`` in the remainder as ``(index, length)``.

        With ``or_end`` a missing delimiter is reported at end of line with
        length 0; otherwise it raises DelimiterNotFound. A delimiter that
        matches zero characters is rejected, since skipping it would never
        move the cursor.
        """
        rest = cursor.remainder
        found = matcher.find(rest)
        if found is None:
            if not or_end:
                raise DelimiterNotFound(
                    f"Delimiter {matcher!r} not found",
                    payload=rest,
                    context=self._context(cursor, pattern=repr(matcher)),
                )
            return len(rest), 0
        if found[1] == 0:
            raise ValueError(f"Delimiter {matcher!r} matched an empty string")
        return found

    def _parse(self, text: str, type_: Type[T], column: int) -> T:
        try:
            return self._parsers.parse(text, type_)
        except ParseError as e:
            e.add_context("line", self._buffer.line_number)
            e.add_context("column", column)
            raise

    # ------------------------------------------------------------
    # Iteration and lifetime
    # ------------------------------------------------------------

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        try:
            return self.next_char()
        except EndOfInput:
            raise StopIteration from None

    def close(self) -> None:
        """Release the underlying source."""
        self._buffer.close()

    @property
    def closed(self) -> bool:
        return self._buffer.closed

    def __enter__(self) -> "Scanner":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Scanner(name={self._buffer.name!r}, line={self.line_number}, "
            f"column={self.column})"
        )


# ------------------------------------------------------------
# Construction entry points
# ------------------------------------------------------------


def scan_str(text: str, parsers: Optional[ParserRegistry] = None) -> Scanner:
    """Scan an in-memory string."""
    return Scanner(
        io.StringIO(text, newline="\n"), parsers=parsers, name="<string>"
    )


def scan_stdin(parsers: Optional[ParserRegistry] = None) -> Scanner:
    """Scan the process's standard input. Closing the scanner leaves stdin open."""
    source = getattr(sys.stdin, "buffer", sys.stdin)
    return Scanner(source, parsers=parsers, owns_source=False, name="<stdin>")


def scan_file(
    handle: IO[Any],
    parsers: Optional[ParserRegistry] = None,
    encoding: str = "utf-8",
    owns_source: bool = False,
) -> Scanner:
    """Scan an already open file handle, text or binary."""
    return Scanner(handle, parsers=parsers, encoding=encoding, owns_source=owns_source)


def scan_file_from_path(
    path: Union[str, "os.PathLike[str]"],
    parsers: Optional[ParserRegistry] = None,
    encoding: str = "utf-8",
) -> Scanner:
    """
    Open ``path`` and scan it.

    Failing to open the file is a setup problem, not a scan error: the
    ``OSError`` is logged and propagates to the caller unchanged.
    """
    try:
        handle = open(path, "rb")
    except OSError as e:
        log_open_failure(logger, os.fspath(path), e)
        raise
    return Scanner(
        handle, parsers=parsers, encoding=encoding, owns_source=True, name=os.fspath(path)
    )


__all__ = [
    "Scanner",
    "scan_str",
    "scan_stdin",
    "scan_file",
    "scan_file_from_path",
]
