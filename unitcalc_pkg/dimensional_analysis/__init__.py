"""Dimensional Analysis Module.

Unit table and conversion rules for the calculator.

Components:
    - units: unit categories, spellings, display strings and conversion formulas
"""

from .units import CONVERSION_RULES
from .units import NO_UNIT
from .units import UNIT_TABLE
from .units import ConversionRule
from .units import Unit
from .units import UnitCategory
from .units import UnitDefinition
from .units import expected_type
from .units import find_conversion
from .units import find_unit
from .units import unit_for_key
from .units import units_by_category

__all__ = [
    # Classes
    "Unit",
    "UnitCategory",
    "UnitDefinition",
    "ConversionRule",
    # Tables
    "UNIT_TABLE",
    "CONVERSION_RULES",
    "NO_UNIT",
    # Functions
    "find_unit",
    "unit_for_key",
    "expected_type",
    "find_conversion",
    "units_by_category",
]
