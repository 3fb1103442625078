"""Public API returning plain result dicts.

Every function returns ``{"ok": True, ...}`` on success or
``{"ok": False, "error": str, "error_code": str}`` on failure, so results can
be printed or dumped to JSON without touching the engine types.
"""

from __future__ import annotations

from typing import Any
from typing import Optional

from .dimensional_analysis.units import units_by_category
from .engine import Calculator
from .number import NumberValue
from .operators import OPERATORS
from .types import Severity
from .variables import VariableStore


def _value_payload(value: NumberValue) -> dict[str, Any]:
    return {
        "result": value.as_string(),
        "value": value.value,
        "type": "integer" if value.is_integer else "float",
        "unit": value.unit.key,
        "unit_category": value.unit.category.value,
    }


def _session_result(calc: Calculator, value: Optional[NumberValue]) -> dict[str, Any]:
    warnings = [m.text for m in calc.messages if m.severity is Severity.WARNING]
    error = calc.messages.last_error()
    stack = [v.as_string() for v in calc.stack]
    if error is not None:
        return {
            "ok": False,
            "error": error.text,
            "error_code": error.kind.value if error.kind else "Error",
            "stack": stack,
            "warnings": warnings,
        }
    res = {"ok": True, "stack": stack, "warnings": warnings}
    if value is None:
        # Inline assignments leave nothing on the stack
        res.update({"result": "", "value": None, "type": None, "unit": "", "unit_category": None})
    else:
        res.update(_value_payload(value))
    return res


def evaluate(
    expression: str,
    calculator: Optional[Calculator] = None,
    store: Optional[VariableStore] = None,
) -> dict[str, Any]:
    """Evaluate one expression.

    Args:
        expression: Calculator-language text, e.g. ``"25C::F"``
        calculator: Session to run in; a fresh one is created when omitted
        store: Variable store for a fresh session

    Returns:
        Result dict with ``result`` (display string), ``value``, ``type`` and
        ``unit`` on success
    """
    calc = calculator if calculator is not None else Calculator(store=store)
    value = calc.execute(expression)
    return _session_result(calc, value)


def convert_units(quantity: str, unit: str, store: Optional[VariableStore] = None) -> dict[str, Any]:
    """Convert ``quantity`` (e.g. ``"1in"``) to ``unit`` (e.g. ``"cm"``)."""
    return evaluate(f"{quantity}::{unit}", store=store)


def list_units() -> list[dict[str, str]]:
    rows = []
    for category, definitions in units_by_category().items():
        for definition in definitions:
            rows.append(
                {
                    "key": definition.key,
                    "display": definition.display,
                    "category": category.value,
                    "description": definition.description,
                }
            )
    return rows


def list_operators() -> list[dict[str, Any]]:
    return [
        {
            "spelling": op.spelling,
            "name": op.name,
            "arity": op.arity.name.lower(),
            "implemented": op.implemented,
            "reserved": op.reserved,
            "description": op.description,
        }
        for op in OPERATORS
    ]
