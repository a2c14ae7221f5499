"""
Line buffering for the scanner.

LineBuffer owns the source, holds at most one line of text at a time and
tracks the read cursor within that line. It knows nothing about patterns or
types; Scanner layers those on top of :meth:`LineBuffer.with_current_line`.

State rules kept by this module:

- a buffered line never contains its ``"\\n"`` terminator (``"\\r"`` is kept);
- a buffered line always has at least one unread character;
- the cursor is an index into a ``str`` and so always sits on a character
  boundary, binary sources being decoded one line at a time.
"""

import logging
from typing import IO, Any, Callable, List, Optional, TypeVar, Union

from .exceptions import EndOfInput
from .utils.logging_utils import log_end_of_input, log_line_refill, log_read_failure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FixedText:
    """Fixed-capacity mutable text used as a scan destination.

    The capacity is counted in characters and never changes. Scanning into a
    FixedText overwrites only its leading characters; anything after them is
    left as it was.
    """

    def __init__(self, capacity: int, fill: str = " ") -> None:
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative: {capacity}")
        if len(fill) != 1:
            raise ValueError(f"Fill must be a single character: {fill!r}")
        self._chars: List[str] = [fill] * capacity

    @classmethod
    def from_text(cls, text: str) -> "FixedText":
        buf = cls(len(text))
        buf._chars[:] = list(text)
        return buf

    @property
    def capacity(self) -> int:
        return len(self._chars)

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def clear(self, fill: str = " ") -> None:
        if len(fill) != 1:
            raise ValueError(f"Fill must be a single character: {fill!r}")
        self._chars[:] = [fill] * len(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"FixedText({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FixedText):
            return self._chars == other._chars
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


def copy_text(source: Union[str, FixedText], dest: FixedText, count: int) -> None:
    """Copy the first ``count`` characters of ``source`` into the head of ``dest``.

    Raises:
        ValueError: ``count`` is out of range for either side, or ``source``
            and ``dest`` are the same buffer.
    """
    if source is dest:
        raise ValueError("Source and destination must not alias")
    if count < 0:
        raise ValueError(f"Negative copy length: {count}")
    if count > dest.capacity:
        raise ValueError(
            f"Copy of {count} chars exceeds destination capacity {dest.capacity}"
        )
    if count > len(source):
        raise ValueError(f"Copy of {count} chars exceeds source length {len(source)}")
    text = source.text if isinstance(source, FixedText) else source
    dest._chars[:count] = text[:count]


class Cursor:
    """Read-only view of the current line with a movable position.

    Handed to the callback of :meth:`LineBuffer.with_current_line`; only valid
    for the duration of that call.
    """

    __slots__ = ("_line", "pos")

    def __init__(self, line: str, pos: int) -> None:
        self._line = line
        self.pos = pos

    @property
    def line(self) -> str:
        return self._line

    @property
    def remainder(self) -> str:
        return self._line[self.pos :]

    def advance(self, n: int) -> None:
        if n < 0 or self.pos + n > len(self._line):
            raise ValueError(
                f"Cannot advance cursor by {n} from {self.pos} in line of {len(self._line)}"
            )
        self.pos += n

    def consume_all(self) -> None:
        self.pos = len(self._line)


class LineBuffer:
    """Buffers one line at a time from a readable source."""

    def __init__(
        self,
        source: IO[Any],
        encoding: str = "utf-8",
        owns_source: bool = True,
        name: Optional[str] = None,
    ) -> None:
        """
        Args:
            source: Object with a ``readline()`` method returning ``str`` or
                ``bytes``; an empty result means end of input.
            encoding: Used to decode lines read from a binary source.
            owns_source: Close ``source`` when the buffer is closed.
            name: Label for log messages and error context.
        """
        self._source = source
        self._encoding = encoding
        self._owns_source = owns_source
        self.name = str(name or getattr(source, "name", None) or "<source>")
        self._line: Optional[str] = None
        self._pos: int = 0
        self._line_number: int = 0
        self._closed = False

    @property
    def current_line(self) -> Optional[str]:
        return self._line

    @property
    def cursor(self) -> int:
        return self._pos

    @property
    def line_number(self) -> int:
        """Number of physical lines read so far."""
        return self._line_number

    @property
    def closed(self) -> bool:
        return self._closed

    def _read_line(self) -> None:
        self._pos = 0
        try:
            raw = self._source.readline()
        except OSError as e:
            log_read_failure(logger, self.name, self._line_number, e)
            self._line = None
            return

        if not raw:
            self._line = None
            log_end_of_input(logger, self.name, self._line_number)
            return

        self._line_number += 1
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = raw.decode(self._encoding)
            except UnicodeDecodeError as e:
                # the undecodable line is consumed and counted
                log_read_failure(logger, self.name, self._line_number, e)
                self._line = None
                return
        if raw.endswith("\n"):
            raw = raw[:-1]
        self._line = raw
        log_line_refill(logger, self.name, self._line_number, len(raw))

    def ensure_ready(self) -> None:
        """Buffer a line with unread text, skipping empty lines, or reach end of input.

        A line that cannot be read or decoded ends input for this call only;
        it is consumed, and the next call resumes with the line after it.
        """
        if self._closed:
            raise ValueError(f"Scan source {self.name} is closed")
        while self._line is None or self._pos >= len(self._line):
            self._read_line()
            if self._line is None:
                break

    def has_next(self) -> bool:
        self.ensure_ready()
        return self._line is not None

    def with_current_line(self, func: Callable[[Cursor], T]) -> T:
        """
        Run ``func`` against the current line.

        The cursor position ``func`` leaves behind is kept even if it raises.
        A line left with nothing unread is dropped straight away so the
        buffered line always has unread text.

        Raises:
            EndOfInput: no line is available.
        """
        self.ensure_ready()
        if self._line is None:
            raise EndOfInput(context={"line": self._line_number})
        cursor = Cursor(self._line, self._pos)
        try:
            return func(cursor)
        finally:
            self._pos = cursor.pos
            if self._pos >= len(self._line):
                self.discard_line()

    def remainder(self) -> str:
        """Unread text of the buffered line, without refilling."""
        if self._line is None:
            return ""
        return self._line[self._pos :]

    def discard_line(self) -> None:
        self._line = None
        self._pos = 0

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.discard_line()
        if self._owns_source:
            self._source.close()

    def __enter__(self) -> "LineBuffer":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


__all__ = ["FixedText", "copy_text", "Cursor", "LineBuffer"]
