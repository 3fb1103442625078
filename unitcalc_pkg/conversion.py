"""Unit conversion engine.

Conversions are driven by the formula strings in
dimensional_analysis.units.CONVERSION_RULES. A formula is evaluated by a
fresh, independent pass of the calculator: the value being converted (unit
stripped, promoted to float) is seeded as the first operand and the formula
text supplies the rest, so ``"*9/5+32."`` applied to 25 yields 77.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Optional

from . import config
from .dimensional_analysis.units import Unit
from .dimensional_analysis.units import expected_type
from .dimensional_analysis.units import find_conversion
from .dimensional_analysis.units import unit_for_key
from .number import NumberValue
from .types import ErrorKind
from .types import MessageList
from .utils.cursor import TextCursor

if TYPE_CHECKING:
    from .variables import VariableStore

logger = logging.getLogger(__name__)

DEG = unit_for_key("deg")
RAD = unit_for_key("rad")


def evaluate_formula(
    seed: NumberValue,
    formula: str,
    store: VariableStore,
    messages: MessageList,
    depth: int = 0,
) -> Optional[NumberValue]:
    """Evaluate ``formula`` with ``seed`` as its leading operand.

    The pass has its own node list and stack; only the variable store is
    shared with the caller.
    """
    # Imported here, the evaluator's operators call back into this module
    from .evaluator import Evaluator
    from .expression_tree import build_expression

    if depth >= config.MAX_CONVERSION_DEPTH:
        messages.error(
            ErrorKind.CONVERSION_NOT_SUPPORTED,
            f"Conversion formulas nested deeper than {config.MAX_CONVERSION_DEPTH}",
        )
        return None

    scratch = MessageList()
    nodes = build_expression(TextCursor(formula), store, scratch, seed=seed)
    if nodes is None:
        messages.extend(scratch)
        return None

    stack: list[NumberValue] = []
    ok = Evaluator(store, scratch, depth + 1).run_all(nodes, stack)
    if not ok or not stack:
        messages.extend(scratch)
        if ok:
            messages.error(
                ErrorKind.CONVERSION_NOT_SUPPORTED, f"Formula '{formula}' produced no result"
            )
        return None

    logger.debug("Formula %r on %s -> %s", formula, seed, stack[-1])
    return stack[-1]


def _apply_rule(
    value: NumberValue,
    source: Unit,
    target: Unit,
    store: VariableStore,
    messages: MessageList,
    depth: int,
) -> Optional[NumberValue]:
    rule = find_conversion(source, target)
    if rule is None:
        messages.error(
            ErrorKind.CONVERSION_NOT_SUPPORTED,
            f"Conversion from {value.as_string()} to {target.display or target.key} is not supported",
        )
        return None
    seed = NumberValue(float(value.value))
    return evaluate_formula(seed, rule.formula, store, messages, depth)


def convert(
    value: NumberValue,
    target: NumberValue,
    store: VariableStore,
    messages: MessageList,
    depth: int = 0,
) -> Optional[NumberValue]:
    """Convert ``value`` into the unit carried by ``target``.

    Returns:
        A NumberValue in the target unit, in the representation that unit
        expects, or None (error recorded)
    """
    dest = target.unit
    if dest.is_default():
        messages.error(ErrorKind.CONVERSION_NOT_SUPPORTED, "Conversion target has no unit")
        return None

    fmt = target.fmt or value.fmt
    represent = expected_type(dest)
    if value.unit.same_as(dest):
        return NumberValue(represent(value.value), unit=dest, fmt=fmt)

    result = _apply_rule(value, value.unit, dest, store, messages, depth)
    if result is None:
        return None
    return NumberValue(represent(result.value), unit=dest, fmt=fmt)


def to_radians(
    value: NumberValue,
    store: VariableStore,
    messages: MessageList,
    depth: int = 0,
) -> Optional[NumberValue]:
    """Angle argument in radians for sin/cos/tan.

    Values tagged ``rad`` pass through, as does everything when the default
    angle is radians. Anything else is read as degrees.
    """
    if value.unit.is_rad() or config.default_angle_is_rad():
        return NumberValue(expected_type(RAD)(value.value), unit=RAD)
    result = _apply_rule(value, DEG, RAD, store, messages, depth)
    if result is None:
        return None
    return NumberValue(expected_type(RAD)(result.value), unit=RAD)


def from_radians(
    angle: NumberValue,
    store: VariableStore,
    messages: MessageList,
    depth: int = 0,
) -> Optional[NumberValue]:
    """Express a radian result of asin/acos/atan in the default angle unit."""
    if config.default_angle_is_rad():
        return NumberValue(expected_type(RAD)(angle.value), unit=RAD, fmt=angle.fmt)
    result = _apply_rule(angle, RAD, DEG, store, messages, depth)
    if result is None:
        return None
    return NumberValue(expected_type(DEG)(result.value), unit=DEG, fmt=angle.fmt)
