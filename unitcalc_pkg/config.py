"""Centralized configuration for unitcalc.

This module defines:
- Display formats used when a number has no explicit format
- The default angle unit used by the trigonometric operators
- Input and recursion limits
- Built-in constants seeded into every variable store

Configuration can be overridden via:
- CLI flags (see cli/app.py)
- Environment variables (prefixed with UNITCALC_)
"""

import os

import sympy as sp

VERSION = "0.4.0"

# Display formats (printf style)
FLOAT_FORMAT = os.getenv("UNITCALC_FLOAT_FORMAT", "%.9f")
INTEGER_FORMAT = os.getenv("UNITCALC_INTEGER_FORMAT", "%d")
HEX_FORMAT = "0x%X"

# Angle unit assumed by sin/cos/tan and produced by asin/acos/atan
ANGLE_UNITS = ("deg", "rad")
DEFAULT_ANGLE = os.getenv("UNITCALC_DEFAULT_ANGLE", "deg").strip().lower()
if DEFAULT_ANGLE not in ANGLE_UNITS:
    DEFAULT_ANGLE = "deg"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("UNITCALC_MAX_INPUT_LENGTH", "4096"))  # characters
MAX_CONVERSION_DEPTH = int(
    os.getenv("UNITCALC_MAX_CONVERSION_DEPTH", "8")
)  # nested formula evaluations

# Interactive behaviour
SHOW_UNDEFINED_VAR_MSG = (
    os.getenv("UNITCALC_SHOW_UNDEFINED_VAR_MSG", "true").lower() == "true"
)
PROMPT = ">>> "

# Integer payloads wrap like a signed 64-bit register
INT_BITS = 64

# Built-in constants: (name, value, unit key, description)
CONSTANTS = (
    ("pi", float(sp.pi.evalf(17)), "rad", "ratio of circumference to diameter"),
    ("e", float(sp.E.evalf(17)), "", "base of the natural logarithm"),
)


def set_default_angle(unit: str) -> str:
    """Set the angle unit used by the trigonometric operators.

    Raises:
        ValueError: if ``unit`` is not ``deg`` or ``rad``
    """
    global DEFAULT_ANGLE
    unit = unit.strip().lower()
    if unit not in ANGLE_UNITS:
        raise ValueError(f"Unknown angle unit '{unit}', expected one of {ANGLE_UNITS}")
    DEFAULT_ANGLE = unit
    return DEFAULT_ANGLE


def default_angle_is_rad() -> bool:
    return DEFAULT_ANGLE == "rad"
