"""Textual parse-to-value support for typed scanning.

A parser is any callable taking the extracted text and returning a value. It
signals bad input by raising ``ValueError``, ``TypeError`` or
``ArithmeticError``; :meth:`ParserRegistry.parse` turns those into
:class:`~linescan.exceptions.ParseError` carrying the offending text.
"""

import logging
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Dict, Optional, Protocol, Type, TypeVar

from .exceptions import ParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class TextParser(Protocol[T_co]):
    """Builds a value from the full text of a token."""

    def __call__(self, text: str) -> T_co: ...


def _reject_padding(text: str) -> None:
    # Whole text must be the value; no surrounding whitespace or digit separators.
    if text != text.strip() or "_" in text:
        raise ValueError(f"Unexpected characters in numeric text: {text!r}")


def parse_int(text: str) -> int:
    _reject_padding(text)
    return int(text)


def parse_float(text: str) -> float:
    _reject_padding(text)
    return float(text)


def parse_complex(text: str) -> complex:
    _reject_padding(text)
    return complex(text)


def parse_decimal(text: str) -> Decimal:
    _reject_padding(text)
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal: {text!r}") from e


def parse_fraction(text: str) -> Fraction:
    _reject_padding(text)
    return Fraction(text)


def parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"Invalid bool literal: {text!r}")


def parse_str(text: str) -> str:
    return text


class ParserRegistry:
    """Maps target types to the parser used to build them from text."""

    def __init__(self, parsers: Optional[Dict[type, TextParser[Any]]] = None) -> None:
        self._parsers: Dict[type, TextParser[Any]] = {}
        if parsers:
            self._parsers.update(parsers)

    @classmethod
    def with_defaults(cls) -> "ParserRegistry":
        return cls(
            {
                str: parse_str,
                int: parse_int,
                float: parse_float,
                bool: parse_bool,
                complex: parse_complex,
                Decimal: parse_decimal,
                Fraction: parse_fraction,
            }
        )

    def register(self, type_: type, parser: TextParser[Any]) -> None:
        """Register ``parser`` for ``type_``, replacing any existing entry."""
        if not callable(parser):
            raise TypeError(f"Parser for {type_.__name__} is not callable")
        self._parsers[type_] = parser
        logger.debug(f"Registered parser for {type_.__name__}")

    def unregister(self, type_: type) -> None:
        self._parsers.pop(type_, None)

    def get(self, type_: type) -> TextParser[Any]:
        """Return the parser for ``type_``; unregistered types are called directly."""
        return self._parsers.get(type_, type_)

    def __contains__(self, type_: object) -> bool:
        return type_ in self._parsers

    def parse(self, text: str, type_: Type[T]) -> T:
        """
        Convert ``text`` into a value of ``type_``.

        Raises:
            ParseError: the text cannot be converted; ``payload`` is ``text``.
        """
        parser = self.get(type_)
        try:
            return parser(text)  # type: ignore[no-any-return]
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ParseError(
                f"Cannot parse {text!r} as {getattr(type_, '__name__', type_)}",
                payload=text,
                context={"type": getattr(type_, "__name__", repr(type_))},
                original_exception=e,
            ) from e


default_registry = ParserRegistry.with_defaults()


def parse_value(text: str, type_: Type[T]) -> T:
    """Parse ``text`` as ``type_`` using the default registry."""
    return default_registry.parse(text, type_)


__all__ = [
    "TextParser",
    "ParserRegistry",
    "default_registry",
    "parse_value",
    "parse_int",
    "parse_float",
    "parse_bool",
    "parse_complex",
    "parse_decimal",
    "parse_fraction",
    "parse_str",
]
