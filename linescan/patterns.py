"""
Pattern matchers used to locate tokens within a line.

Every matcher answers one question: where is the leftmost match in a piece of
text, and how long is it. Scanner operations decide whether the position is
acceptable (``expect`` insists on index 0, the scan-until family accepts any).
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple, Union

Match = Tuple[int, int]


class Pattern(ABC):
    """Abstract matcher returning ``(start, length)`` of the leftmost match."""

    @abstractmethod
    def find(self, text: str) -> Optional[Match]:
        """Return the leftmost match in ``text`` or None."""

    def match_at_start(self, text: str) -> Optional[int]:
        """Return the match length if the leftmost match starts at index 0."""
        found = self.find(text)
        if found is None or found[0] != 0:
            return None
        return found[1]


class Literal(Pattern):
    """Exact substring match."""

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Literal pattern requires str, got {type(text).__name__}")
        self.text = text

    def find(self, text: str) -> Optional[Match]:
        index = text.find(self.text)
        if index < 0:
            return None
        return index, len(self.text)

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


class Char(Literal):
    """Single character match."""

    def __init__(self, char: str) -> None:
        if not isinstance(char, str) or len(char) != 1:
            raise ValueError(f"Char pattern requires exactly one character: {char!r}")
        super().__init__(char)

    def __repr__(self) -> str:
        return f"Char({self.text!r})"


class Predicate(Pattern):
    """Matches the first single character accepted by ``func``."""

    def __init__(self, func: Callable[[str], bool]) -> None:
        self.func = func

    def find(self, text: str) -> Optional[Match]:
        for index, char in enumerate(text):
            if self.func(char):
                return index, 1
        return None

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"Predicate({name})"


class Span(Pattern):
    """Extension point for arbitrary matchers over a text slice.

    ``func(text, start)`` returns the number of characters it matches at
    ``start``; zero means no match there. Positions are tried left to right.
    """

    def __init__(self, func: Callable[[str, int], int]) -> None:
        self.func = func

    def find(self, text: str) -> Optional[Match]:
        for start in range(len(text)):
            length = self.func(text, start)
            if length > 0:
                if start + length > len(text):
                    raise ValueError(
                        f"Span matcher returned length {length} past end of text at {start}"
                    )
                return start, length
        return None

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"Span({name})"


class Regex(Pattern):
    """Regular expression match using :func:`re.search` semantics."""

    def __init__(self, pattern: Union[str, re.Pattern[str]], flags: int = 0) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, flags)
        elif flags:
            raise ValueError("Cannot pass flags with a precompiled pattern")
        self.regex = pattern

    def find(self, text: str) -> Optional[Match]:
        m = self.regex.search(text)
        if m is None:
            return None
        return m.start(), m.end() - m.start()

    def __repr__(self) -> str:
        return f"Regex({self.regex.pattern!r})"


PatternLike = Union[Pattern, str, re.Pattern[str], Callable[[str], bool]]


def as_pattern(obj: Any) -> Pattern:
    """Coerce a pattern-like object into a :class:`Pattern`.

    One-character strings become :class:`Char`, other strings
    :class:`Literal`, compiled regular expressions :class:`Regex` and plain
    callables :class:`Predicate`.
    """
    if isinstance(obj, Pattern):
        return obj
    if isinstance(obj, str):
        if len(obj) == 1:
            return Char(obj)
        return Literal(obj)
    if isinstance(obj, re.Pattern):
        return Regex(obj)
    if callable(obj):
        return Predicate(obj)
    raise TypeError(f"Cannot use {type(obj).__name__} as a pattern")


__all__ = [
    "Pattern",
    "Literal",
    "Char",
    "Predicate",
    "Span",
    "Regex",
    "PatternLike",
    "as_pattern",
]
