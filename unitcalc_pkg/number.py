"""Numbers with units, and the literal scanner that produces them.

A NumberValue holds either a 64-bit integer or a double, a unit, an optional
printf-style display format and, when it stands for a variable, the variable
name plus VARIABLE/UNSET/CONSTANT flags.

Literal grammar (whitespace allowed before the number only)::

    [-]digits[.digits] [unit] [:unit] [:%format]
    0xHEX
    name[:unit][=literal]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import replace
from enum import Flag
from enum import auto
from typing import TYPE_CHECKING
from typing import Optional
from typing import Union

from . import config
from .dimensional_analysis.units import NO_UNIT
from .dimensional_analysis.units import Unit
from .dimensional_analysis.units import UnitDefinition
from .dimensional_analysis.units import find_unit
from .types import ErrorKind
from .types import MessageList
from .utils.cursor import DIGITS
from .utils.cursor import LETTERS
from .utils.cursor import TextCursor
from .utils.formatting import format_float
from .utils.formatting import format_int

if TYPE_CHECKING:
    from .variables import VariableStore

logger = logging.getLogger(__name__)

_INT_MASK = (1 << config.INT_BITS) - 1
_INT_SIGN = 1 << (config.INT_BITS - 1)


def wrap_int(value: int) -> int:
    """Wrap ``value`` into the signed 64-bit range (two's complement)."""
    value &= _INT_MASK
    return value - (1 << config.INT_BITS) if value & _INT_SIGN else value


class NumberFlag(Flag):
    NONE = 0
    VARIABLE = auto()
    UNSET = auto()  # Variable name seen, value still unknown
    CONSTANT = auto()


@dataclass
class NumberValue:
    """A numeric payload with unit, display format and variable metadata."""

    value: Union[int, float] = 0
    unit: Unit = NO_UNIT
    fmt: str = ""
    literal: str = ""
    name: str = ""
    flags: NumberFlag = NumberFlag.NONE

    def __post_init__(self) -> None:
        if isinstance(self.value, bool):
            self.value = int(self.value)
        if isinstance(self.value, int):
            self.value = wrap_int(self.value)
        else:
            self.value = float(self.value)

    @classmethod
    def unset_variable(cls, name: str) -> NumberValue:
        return cls(0.0, name=name, flags=NumberFlag.VARIABLE | NumberFlag.UNSET)

    @property
    def is_integer(self) -> bool:
        return isinstance(self.value, int)

    @property
    def is_float(self) -> bool:
        return isinstance(self.value, float)

    @property
    def is_variable(self) -> bool:
        return bool(self.flags & NumberFlag.VARIABLE)

    @property
    def is_unset(self) -> bool:
        return bool(self.flags & NumberFlag.UNSET)

    @property
    def is_constant(self) -> bool:
        return bool(self.flags & NumberFlag.CONSTANT)

    def copy(self, **changes) -> NumberValue:
        return replace(self, **changes)

    def as_string(self) -> str:
        if self.is_integer:
            text = format_int(self.value, self.fmt or config.INTEGER_FORMAT)
        else:
            text = format_float(self.value, self.fmt, config.FLOAT_FORMAT)
        return text + self.unit.display

    def __str__(self) -> str:
        return self.as_string()


def _attach_unit(cursor: TextCursor, number: NumberValue, definition: UnitDefinition) -> None:
    number.unit = definition.unit
    cursor.consume(len(definition.spelling))


def parse_unit(cursor: TextCursor, number: NumberValue, messages: MessageList) -> bool:
    """Attach the longest unit spelled at the cursor to ``number``."""
    definition = find_unit(cursor)
    if definition is None:
        word = cursor.leading_alpha() or cursor.peek()
        messages.error(ErrorKind.UNKNOWN_UNIT, f"Unknown unit '{word}'")
        return False
    _attach_unit(cursor, number, definition)
    return True


def _parse_format(cursor: TextCursor, number: NumberValue) -> None:
    number.fmt = cursor.take_token()


def _parse_suffix(cursor: TextCursor, number: NumberValue, messages: MessageList) -> bool:
    """Read units and a display format following the digits."""
    while not cursor.empty():
        if cursor.peek() == ":":
            nxt = cursor.peek(1)
            if nxt == ":":
                # Conversion operator, left for the tree builder
                break
            cursor.consume(1)
            if nxt == "%":
                _parse_format(cursor, number)
                break
            if not parse_unit(cursor, number, messages):
                return False
            continue

        definition = find_unit(cursor)
        if definition is None:
            break
        # A unit directly after the digits has to end the word, so 2max3
        # and 2mass leave "max"/"mass" to the tree builder
        follower = cursor.peek(len(definition.spelling))
        if follower != "" and follower in LETTERS:
            break
        _attach_unit(cursor, number, definition)
    return True


def _scan_digits(cursor: TextCursor) -> str:
    text = ""
    if cursor.peek() == "-" and cursor.peek(1) in DIGITS and cursor.peek(1) != "":
        text = "-"
        cursor.consume(1)
    seen_point = False
    while not cursor.empty():
        ch = cursor.peek()
        if ch in DIGITS:
            text += ch
        elif ch == "." and not seen_point:
            if text in ("", "-"):
                text += "0"
            text += "."
            seen_point = True
        else:
            break
        cursor.consume(1)
    return text


def parse_literal(cursor: TextCursor, messages: MessageList) -> Optional[NumberValue]:
    """Consume a numeric literal with optional unit and format suffixes.

    Returns:
        The parsed number, or None after recording an error in ``messages``
    """
    cursor.trim_leading_whitespace()

    if cursor.is_hex_prefix():
        digits = cursor.leading_hex()
        cursor.consume(2 + len(digits))
        return NumberValue(int(digits, 16), fmt=config.HEX_FORMAT, literal="0x" + digits)

    if not cursor.is_number_prefix():
        messages.error(
            ErrorKind.MALFORMED_NUMBER, f"'{cursor.remaining}' is not a number"
        )
        return None

    text = _scan_digits(cursor)
    value: Union[int, float] = float(text) if "." in text else int(text)
    number = NumberValue(value, literal=text)
    if not _parse_suffix(cursor, number, messages):
        return None
    logger.debug("Parsed literal %r -> %s", text, number)
    return number


def parse_unit_target(cursor: TextCursor, messages: MessageList) -> Optional[NumberValue]:
    """Parse the right-hand side of ``::``, a unit with no value."""
    cursor.trim_leading_whitespace()
    if cursor.is_number_prefix():
        return parse_literal(cursor, messages)
    if cursor.peek() == ":":
        cursor.consume(1)
    number = NumberValue(0)
    if not parse_unit(cursor, number, messages):
        return None
    if cursor.startswith(":%"):
        cursor.consume(1)
        _parse_format(cursor, number)
    return number


def parse_variable(
    cursor: TextCursor, store: VariableStore, messages: MessageList
) -> tuple[bool, Optional[NumberValue]]:
    """Resolve a name at the cursor into a variable operand.

    Returns ``(ok, value)``. ``value`` is None with ``ok`` True when the text
    was an inline assignment (``y=3.2``), which produces no operand.
    """
    cursor.trim_leading_whitespace()
    name = cursor.leading_alpha()
    if not name:
        messages.error(
            ErrorKind.UNKNOWN_FUNCTION,
            f"Could not find function or variable at '{cursor.remaining}'",
        )
        return False, None
    cursor.consume(len(name))

    number = store.lookup(name)
    if number is None:
        number = NumberValue.unset_variable(name)

    if cursor.peek() == ":" and cursor.peek(1) != ":":
        cursor.consume(1)
        if not parse_unit(cursor, number, messages):
            return False, None

    nxt = cursor.peek(1)
    if cursor.peek() == "=" and nxt != "" and (nxt in DIGITS or nxt == "-"):
        cursor.consume(1)
        rhs = parse_literal(cursor, messages)
        if rhs is None:
            return False, None
        assigned = number.copy(
            value=rhs.value,
            unit=number.unit if rhs.unit.is_default() else rhs.unit,
            fmt=rhs.fmt,
            literal="",
            flags=NumberFlag.VARIABLE,
        )
        if not store.upsert(assigned, messages):
            return False, None
        logger.debug("Assigned %s = %s", name, assigned)
        return True, None

    return True, number
