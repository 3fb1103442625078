"""Operator registry: spellings, arity classes and numeric implementations.

Every implementation has the signature ``impl(stack, ctx) -> bool``. It pops
its operands from the end of ``stack``, pushes its result and returns True,
or records an error in ``ctx.messages`` and returns False. Operand count and
variable confirmation are handled by the evaluator before the call.

Float kernels go through numpy under ``np.errstate(all="ignore")`` so domain
errors produce nan/inf instead of raising. Integer kernels use Python ints
wrapped to 64 bits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from enum import auto
from typing import Callable
from typing import Optional

import numpy as np

from .conversion import convert
from .conversion import from_radians
from .conversion import to_radians
from .dimensional_analysis.units import NO_UNIT
from .dimensional_analysis.units import Unit
from .number import NumberFlag
from .number import NumberValue
from .types import ErrorKind
from .types import MessageList
from .utils.cursor import TextCursor
from .variables import VariableStore

logger = logging.getLogger(__name__)


class Arity(Enum):
    BINARY = auto()
    UNARY = auto()
    CONVERT = auto()
    ASSIGN = auto()
    GROUP_OPEN = auto()
    GROUP_CLOSE = auto()
    SEPARATOR = auto()


@dataclass
class EvalContext:
    """Collaborators handed to every operator implementation."""

    store: VariableStore
    messages: MessageList
    depth: int = 0


OperatorImpl = Callable[[list, EvalContext], bool]


@dataclass(frozen=True)
class OperatorDescriptor:
    spelling: str
    name: str
    arity: Arity
    impl: Optional[OperatorImpl] = None
    description: str = ""
    confirm_operands: bool = True
    reserved: bool = False  # Recognised token with no execution path yet

    @property
    def implemented(self) -> bool:
        return self.impl is not None

    @property
    def operand_count(self) -> int:
        if self.arity in (Arity.BINARY, Arity.CONVERT, Arity.ASSIGN):
            return 2
        if self.arity in (Arity.UNARY, Arity.SEPARATOR):
            return 1
        return 0


# Helpers


def _float_op(ufunc, *args: float) -> float:
    with np.errstate(all="ignore"):
        return float(ufunc(*(np.float64(a) for a in args)))


def _pop_pair(stack: list) -> tuple[NumberValue, NumberValue]:
    right = stack.pop()
    left = stack.pop()
    return left, right


def _additive_unit(left: NumberValue, right: NumberValue) -> Unit:
    return left.unit if left.unit.same_as(right.unit) else NO_UNIT


def _scaling_unit(left: NumberValue, right: NumberValue) -> Unit:
    return left.unit if not left.unit.is_default() else right.unit


def _binary_result(left: NumberValue, right: NumberValue, value, unit: Unit) -> NumberValue:
    return NumberValue(value, unit=unit, fmt=left.fmt or right.fmt)


def _unary_result(operand: NumberValue, value) -> NumberValue:
    return NumberValue(value, unit=operand.unit, fmt=operand.fmt)


def _division_by_zero(stack: list, operands: tuple, ctx: EvalContext, name: str) -> bool:
    stack.extend(operands)
    ctx.messages.error(ErrorKind.DIVISION_BY_ZERO, f"'{name}' by zero")
    return False


def _c_remainder(a: int, b: int) -> int:
    # Sign follows the dividend, as in C
    r = abs(a) % abs(b)
    return -r if a < 0 else r


# Binary operators


def _arithmetic(int_fn, ufunc, unit_rule) -> OperatorImpl:
    def impl(stack: list, ctx: EvalContext) -> bool:
        left, right = _pop_pair(stack)
        if left.is_float or right.is_float:
            value = _float_op(ufunc, left.value, right.value)
        else:
            value = int_fn(left.value, right.value)
        stack.append(_binary_result(left, right, value, unit_rule(left, right)))
        return True

    return impl


def _div(stack: list, ctx: EvalContext) -> bool:
    left, right = _pop_pair(stack)
    if right.value == 0:
        return _division_by_zero(stack, (left, right), ctx, "/")
    if left.is_float or right.is_float:
        value = _float_op(np.true_divide, left.value, right.value)
    elif left.value % right.value == 0:
        value = left.value // right.value
    else:
        value = _float_op(np.true_divide, left.value, right.value)
    stack.append(_binary_result(left, right, value, _scaling_unit(left, right)))
    return True


def _mod(stack: list, ctx: EvalContext) -> bool:
    left, right = _pop_pair(stack)
    if right.value == 0:
        return _division_by_zero(stack, (left, right), ctx, "%")
    if left.is_float or right.is_float:
        value = _float_op(np.fmod, left.value, right.value)
    else:
        value = _c_remainder(left.value, right.value)
    stack.append(_binary_result(left, right, value, _additive_unit(left, right)))
    return True


def _pow(stack: list, ctx: EvalContext) -> bool:
    left, right = _pop_pair(stack)
    if left.is_float or right.is_float or right.value < 0:
        value = _float_op(np.power, left.value, right.value)
    else:
        # Residue mod 2**64; NumberValue wraps it back to a signed value
        value = pow(left.value, right.value, 1 << 64)
    stack.append(_binary_result(left, right, value, _scaling_unit(left, right)))
    return True


def _root(stack: list, ctx: EvalContext) -> bool:
    left, right = _pop_pair(stack)
    if right.value == 0:
        return _division_by_zero(stack, (left, right), ctx, "\\")
    value = _float_op(np.power, left.value, 1.0 / float(right.value))
    stack.append(_binary_result(left, right, value, _scaling_unit(left, right)))
    return True


# Unary operators


def _unary(ufunc, int_fn=None) -> OperatorImpl:
    """Float kernel from numpy; integers stay integers when ``int_fn`` is given."""

    def impl(stack: list, ctx: EvalContext) -> bool:
        operand = stack.pop()
        if operand.is_integer and int_fn is not None:
            value = int_fn(operand.value)
        else:
            value = _float_op(ufunc, operand.value)
        stack.append(_unary_result(operand, value))
        return True

    return impl


def _complement(stack: list, ctx: EvalContext) -> bool:
    operand = stack.pop()
    if operand.is_integer and "x" in operand.fmt.lower():
        value = ~operand.value
    else:
        value = -operand.value
    stack.append(_unary_result(operand, value))
    return True


def _inv(stack: list, ctx: EvalContext) -> bool:
    operand = stack.pop()
    if operand.value == 0:
        return _division_by_zero(stack, (operand,), ctx, "inv")
    stack.append(_unary_result(operand, _float_op(np.reciprocal, operand.value)))
    return True


def _exp2(stack: list, ctx: EvalContext) -> bool:
    operand = stack.pop()
    if operand.is_integer and operand.value >= 0:
        value = pow(2, operand.value, 1 << 64)
    else:
        value = _float_op(np.exp2, operand.value)
    stack.append(_unary_result(operand, value))
    return True


def _exp10(x):
    return np.power(10.0, x)


def _frac(stack: list, ctx: EvalContext) -> bool:
    operand = stack.pop()
    if operand.is_integer:
        value = 0
    else:
        value = _float_op(lambda x: np.modf(x)[0], operand.value)
    stack.append(_unary_result(operand, value))
    return True


def _trig(ufunc) -> OperatorImpl:
    def impl(stack: list, ctx: EvalContext) -> bool:
        operand = stack.pop()
        radians = to_radians(operand, ctx.store, ctx.messages, ctx.depth)
        if radians is None:
            stack.append(operand)
            return False
        stack.append(NumberValue(_float_op(ufunc, radians.value), fmt=operand.fmt))
        return True

    return impl


def _inverse_trig(ufunc) -> OperatorImpl:
    def impl(stack: list, ctx: EvalContext) -> bool:
        operand = stack.pop()
        angle = NumberValue(_float_op(ufunc, operand.value), fmt=operand.fmt)
        result = from_radians(angle, ctx.store, ctx.messages, ctx.depth)
        if result is None:
            stack.append(operand)
            return False
        stack.append(result)
        return True

    return impl


def _clear_top(stack: list, ctx: EvalContext) -> bool:
    stack.pop()
    return True


def _swap(stack: list, ctx: EvalContext) -> bool:
    if len(stack) < 2:
        ctx.messages.error(ErrorKind.MISSING_OPERAND, "'swap' needs two values")
        return False
    stack[-1], stack[-2] = stack[-2], stack[-1]
    return True


# Conversion and assignment


def _convert(stack: list, ctx: EvalContext) -> bool:
    target = stack.pop()
    converted = convert(stack[-1], target, ctx.store, ctx.messages, ctx.depth)
    if converted is None:
        stack.append(target)
        return False
    stack[-1] = converted
    return True


def _is_target(value: NumberValue) -> bool:
    return value.is_variable and bool(value.name) and not value.is_constant


def _assign_with(combine: Optional[OperatorImpl], spelling: str) -> OperatorImpl:
    """Store the value beneath into the variable on top (``3 =y``).

    The written-out form ``y = 3`` leaves the variable beneath the value; it
    is accepted when the top is not a variable.
    """

    def impl(stack: list, ctx: EvalContext) -> bool:
        if _is_target(stack[-1]):
            slot = len(stack) - 1
        elif not stack[-1].is_variable and _is_target(stack[-2]):
            slot = len(stack) - 2
        else:
            constants = [v.name for v in stack[-2:] if v.is_constant]
            what = f"constant '{constants[-1]}'" if constants else "a non-variable"
            ctx.messages.error(
                ErrorKind.ASSIGNMENT_TARGET_INVALID,
                f"Assignment ({spelling}) into {what} cannot be executed",
            )
            return False

        target = stack.pop(slot)
        source = ctx.store.confirm(stack[-1], ctx.messages)
        if source is None:
            stack.insert(slot, target)
            return False
        stack[-1] = source

        result = source
        if combine is not None:
            current = ctx.store.confirm(target, ctx.messages)
            scratch = [current, source]
            if current is None or not combine(scratch, ctx):
                stack.insert(slot, target)
                return False
            result = scratch[-1]
            stack[-1] = result

        assigned = target.copy(
            value=result.value,
            unit=result.unit,
            fmt=result.fmt,
            literal="",
            flags=NumberFlag.VARIABLE,
        )
        if not ctx.store.upsert(assigned, ctx.messages):
            stack.insert(slot, target)
            return False
        return True

    return impl


def _int_max(a: int, b: int) -> int:
    return a if a > b else b


def _int_min(a: int, b: int) -> int:
    return a if a < b else b


_add = _arithmetic(lambda a, b: a + b, np.add, _additive_unit)
_sub = _arithmetic(lambda a, b: a - b, np.subtract, _additive_unit)
_mul = _arithmetic(lambda a, b: a * b, np.multiply, _scaling_unit)

_B, _U, _C, _A = Arity.BINARY, Arity.UNARY, Arity.CONVERT, Arity.ASSIGN
_GO, _GC, _SEP = Arity.GROUP_OPEN, Arity.GROUP_CLOSE, Arity.SEPARATOR

# fmt: off
OPERATORS: tuple[OperatorDescriptor, ...] = (
    OperatorDescriptor("+", "add", _B, _add, "addition"),
    OperatorDescriptor("-", "sub", _B, _sub, "subtraction"),
    OperatorDescriptor("*", "mul", _B, _mul, "multiplication"),
    OperatorDescriptor("/", "div", _B, _div, "division, exact integer quotients stay integer"),
    OperatorDescriptor("^", "pow", _B, _pow, "x to the power y"),
    OperatorDescriptor("\\", "root", _B, _root, "y-th root of x"),
    OperatorDescriptor("%", "mod", _B, _mod, "remainder"),
    OperatorDescriptor("max", "max", _B, _arithmetic(_int_max, np.fmax, _additive_unit), "larger of two"),
    OperatorDescriptor("min", "min", _B, _arithmetic(_int_min, np.fmin, _additive_unit), "smaller of two"),
    OperatorDescriptor("::", "convert", _C, _convert, "convert to unit"),

    OperatorDescriptor(";", "clear", _U, _clear_top, "drop the top of the stack", confirm_operands=False),
    OperatorDescriptor("swap", "swap", _U, _swap, "swap the top two values", confirm_operands=False),
    OperatorDescriptor("sqrt", "sqrt", _U, _unary(np.sqrt), "square root"),
    OperatorDescriptor("sqr", "sqrt", _U, _unary(np.sqrt), "square root"),
    OperatorDescriptor("abs", "abs", _U, _unary(np.fabs, abs), "absolute value"),
    OperatorDescriptor("neg", "neg", _U, _unary(np.negative, lambda x: -x), "negate"),
    OperatorDescriptor("~", "complement", _U, _complement, "negate, bitwise complement for hex"),
    OperatorDescriptor("inv", "inv", _U, _inv, "1/x"),
    OperatorDescriptor("exp10", "exp10", _U, _unary(_exp10), "10^x"),
    OperatorDescriptor("exp2", "exp2", _U, _exp2, "2^x"),
    OperatorDescriptor("exp", "exp", _U, _unary(np.exp), "e^x"),
    OperatorDescriptor("e10x", "exp10", _U, _unary(_exp10), "10^x"),
    OperatorDescriptor("e2x", "exp2", _U, _exp2, "2^x"),
    OperatorDescriptor("log10", "log10", _U, _unary(np.log10), "base 10 logarithm"),
    OperatorDescriptor("log2", "log2", _U, _unary(np.log2), "base 2 logarithm"),
    OperatorDescriptor("logn", "ln", _U, _unary(np.log), "natural logarithm"),
    OperatorDescriptor("log", "log10", _U, _unary(np.log10), "base 10 logarithm"),
    OperatorDescriptor("ln", "ln", _U, _unary(np.log), "natural logarithm"),
    OperatorDescriptor("sin", "sin", _U, _trig(np.sin), "sine"),
    OperatorDescriptor("cos", "cos", _U, _trig(np.cos), "cosine"),
    OperatorDescriptor("tan", "tan", _U, _trig(np.tan), "tangent"),
    OperatorDescriptor("asin", "asin", _U, _inverse_trig(np.arcsin), "arcsine"),
    OperatorDescriptor("acos", "acos", _U, _inverse_trig(np.arccos), "arccosine"),
    OperatorDescriptor("atan", "atan", _U, _inverse_trig(np.arctan), "arctangent"),
    OperatorDescriptor("sinh", "sinh", _U, _unary(np.sinh), "hyperbolic sine"),
    OperatorDescriptor("cosh", "cosh", _U, _unary(np.cosh), "hyperbolic cosine"),
    OperatorDescriptor("tanh", "tanh", _U, _unary(np.tanh), "hyperbolic tangent"),
    OperatorDescriptor("asinh", "asinh", _U, _unary(np.arcsinh), "inverse hyperbolic sine"),
    OperatorDescriptor("acosh", "acosh", _U, _unary(np.arccosh), "inverse hyperbolic cosine"),
    OperatorDescriptor("atanh", "atanh", _U, _unary(np.arctanh), "inverse hyperbolic tangent"),
    OperatorDescriptor("ceil", "ceil", _U, _unary(np.ceil, lambda x: x), "round up"),
    OperatorDescriptor("floor", "floor", _U, _unary(np.floor, lambda x: x), "round down"),
    OperatorDescriptor("frac", "frac", _U, _frac, "fractional part"),

    OperatorDescriptor("=", "assign", _A, _assign_with(None, "="), "store into variable"),
    OperatorDescriptor("+=", "assign_add", _A, _assign_with(_add, "+="), "add into variable"),
    OperatorDescriptor("*=", "assign_mul", _A, _assign_with(_mul, "*="), "multiply into variable"),

    OperatorDescriptor("(", "open_paren", _GO, None, "group"),
    OperatorDescriptor(")", "close_paren", _GC, None, "end group"),
    OperatorDescriptor("[", "open_key", _GO, None, "group"),
    OperatorDescriptor("]", "close_key", _GC, None, "end group"),
    OperatorDescriptor(",", "separator", _SEP, None, "separator", reserved=True),
    OperatorDescriptor("<[", "vector", _GO, None, "vector literal", reserved=True),
    OperatorDescriptor("<[[", "matrix", _GO, None, "matrix literal", reserved=True),
    OperatorDescriptor("|", "bound_abs", _GO, None, "absolute value bars", reserved=True),
    OperatorDescriptor("<@", "save_memory", _GO, None, "named memory", reserved=True),
    OperatorDescriptor(">", "close_save", _GC, None, "end named memory"),
)
# fmt: on


def find_longest_match(cursor: TextCursor) -> Optional[tuple[int, OperatorDescriptor]]:
    """Longest operator spelling at the cursor; ties go to the first entry."""
    best: Optional[OperatorDescriptor] = None
    for descriptor in OPERATORS:
        if cursor.startswith(descriptor.spelling):
            if best is None or len(descriptor.spelling) > len(best.spelling):
                best = descriptor
    if best is None:
        return None
    return len(best.spelling), best


def get_operator(name: str) -> Optional[OperatorDescriptor]:
    for descriptor in OPERATORS:
        if descriptor.name == name:
            return descriptor
    return None
