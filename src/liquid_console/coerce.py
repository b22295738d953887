"""String -> typed value conversions used to bind command arguments."""

from __future__ import annotations

import collections.abc
import logging
import types
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin

from .lexer import split_elements
from .types import (
    ParseFailure, Parser, Severity, UnsupportedTypeError,
    Vector2, Vector3, Vector4,
)
from .utils import type_name

logger = logging.getLogger(__name__)

Resolver = Callable[[str], str]

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence)

# ---------- Scalar parsers ----------

def parse_str(text: str) -> str:
    return text

def parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ParseFailure(text) from None

def parse_int(text: str) -> int:
    # Goes through a float parse, so "2.7" truncates to 2.
    try:
        return int(parse_float(text))
    except (ValueError, OverflowError):
        raise ParseFailure(text) from None

def parse_bool(text: str) -> bool:
    lowered = text.lower()

    if lowered in ("0", "false"):
        return False

    if lowered in ("1", "true"):
        return True

    raise ParseFailure(text)

def parse_severity(text: str) -> Severity:
    try:
        return Severity[text.upper()]
    except KeyError:
        pass

    try:
        return Severity(parse_int(text))
    except ValueError:
        raise ParseFailure(text) from None

def _optional_inner(type_: Any) -> Optional[Any]:
    if get_origin(type_) not in (Union, types.UnionType):
        return None

    args = [a for a in get_args(type_) if a is not type(None)]
    if len(args) != 1 or len(args) == len(get_args(type_)):
        return None

    return args[0]

def _sequence_inner(type_: Any) -> Optional[Any]:
    if get_origin(type_) not in _SEQUENCE_ORIGINS:
        return None

    args = get_args(type_)
    if len(args) != 1:
        return None

    return args[0]

# ---------- Registry ----------

class CoercionRegistry:
    """
    Maps a parameter type to a parser.

    Scalars are registered directly. `Optional[T]`, `List[T]` and registered
    vector types are derived on lookup from the scalar entries, so a host type
    registered later gets array support for free.
    """

    def __init__(self, resolve: Optional[Resolver] = None):
        self._parsers: Dict[Any, Parser] = {}
        self._vectors: Dict[type, Tuple[int, int]] = {}
        # Turns one array element into its final text (sub-evaluations run here).
        self.resolve: Resolver = resolve or parse_str

        self.register_type(str, parse_str)
        self.register_type(int, parse_int)
        self.register_type(float, parse_float)
        self.register_type(bool, parse_bool)
        self.register_type(Severity, parse_severity)

        self.register_vector(Vector2, 2)
        self.register_vector(Vector3, 3)
        self.register_vector(Vector4, 4, minimum=3)

    def register_type(self, type_: Any, parser: Parser) -> None:
        """Add or replace the parser for `type_`."""
        self._parsers[type_] = parser
        logger.debug("registered parser for %s", type_name(type_))

    def register_vector(self, type_: type, size: int, minimum: Optional[int] = None) -> None:
        """
        Register a fixed-size numeric aggregate built as `type_(*floats)`.

        Inputs shorter than `size` but at least `minimum` long are zero-filled.
        """
        if minimum is None:
            minimum = size

        if not 1 <= minimum <= size:
            raise ValueError(f"minimum must be between 1 and {size}; got {minimum}")

        self._vectors[type_] = (size, minimum)
        self._parsers.pop(type_, None)
        logger.debug("registered vector %s (size=%d, minimum=%d)", type_name(type_), size, minimum)

    def lookup(self, type_: Any) -> Optional[Parser]:
        parser = self._parsers.get(type_)
        if parser is not None:
            return parser

        if type_ in self._vectors:
            size, minimum = self._vectors[type_]
            return self._vector_parser(type_, size, minimum)

        inner = _optional_inner(type_)
        if inner is not None:
            # A present argument parses like the inner type; absence is handled by accepts_absent.
            return self.lookup(inner)

        element = _sequence_inner(type_)
        if element is not None:
            item_parser = self.lookup(element)
            return self._array_parser(item_parser) if item_parser is not None else None

        return None

    def supports(self, type_: Any) -> bool:
        return self.lookup(type_) is not None

    def accepts_absent(self, type_: Any) -> bool:
        """True for nullable types, whose missing arguments bind as None."""
        return _optional_inner(type_) is not None

    def coerce(self, type_: Any, text: str) -> Any:
        """Convert `text`; raises UnsupportedTypeError or ParseFailure."""
        parser = self.lookup(type_)
        if parser is None:
            raise UnsupportedTypeError(type_name(type_))

        return parser(text)

    # ---------- Derived parsers ----------

    def _array_parser(self, item_parser: Parser) -> Parser:
        def parse(text: str) -> List[Any]:
            items = []

            for element in split_elements(text):
                items.append(item_parser(self.resolve(element)))

            return items

        return parse

    def _vector_parser(self, type_: type, size: int, minimum: int) -> Parser:
        floats = self._array_parser(self._parsers[float])

        def parse(text: str) -> Any:
            values = floats(text)

            if len(values) > size or len(values) < minimum:
                raise ParseFailure(text)

            values.extend([0.0] * (size - len(values)))
            return type_(*values)

        return parse
