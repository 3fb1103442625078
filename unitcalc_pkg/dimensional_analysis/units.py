"""Unit table and conversion rules.

Provides:
- UnitCategory enum for the physical quantity a unit measures
- Unit, the (category, key, display) triple carried by every number
- UNIT_TABLE, the ordered list of accepted unit spellings
- CONVERSION_RULES, directional formulas between units of one category
- find_unit / find_conversion lookups

Several spellings can share one key (``D`` and ``deg`` both mean degrees).
Lookup is case sensitive and prefers the longest spelling that prefixes the
text; ties go to the entry listed first.

Conversion formulas are expression fragments. The value being converted is
seeded as the first operand and the fragment is evaluated by the calculator
itself, so ``"*9/5+32."`` turns 25C into 77F.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.cursor import TextCursor


class UnitCategory(Enum):
    """Physical quantity measured by a unit."""

    NUMBER = "number"  # No unit
    ANGLE = "angle"
    TEMPERATURE = "temperature"
    LENGTH = "length"
    FREQUENCY = "frequency"
    WAVELENGTH = "wavelength"
    SPEED = "speed"
    MASS = "mass"
    FORCE = "force"
    ENERGY = "energy"
    PRESSURE = "pressure"
    VOLTAGE = "voltage"
    CURRENT = "current"
    RESISTANCE = "resistance"
    CAPACITANCE = "capacitance"
    INDUCTANCE = "inductance"
    TIME = "time"


@dataclass(frozen=True)
class Unit:
    """Unit attached to a number. The default instance means "no unit"."""

    category: UnitCategory = UnitCategory.NUMBER
    key: str = ""
    display: str = ""

    def is_default(self) -> bool:
        return self.category is UnitCategory.NUMBER

    def is_rad(self) -> bool:
        return self.category is UnitCategory.ANGLE and self.key == "rad"

    def same_as(self, other: Unit) -> bool:
        return self.category is other.category and self.key == other.key

    def __str__(self) -> str:
        return self.display


NO_UNIT = Unit()


@dataclass(frozen=True)
class UnitDefinition:
    key: str
    spelling: str
    category: UnitCategory
    display: str
    description: str
    expect: type = float  # Conversions always produce this representation

    @property
    def unit(self) -> Unit:
        return Unit(self.category, self.key, self.display)


@dataclass(frozen=True)
class ConversionRule:
    category: UnitCategory
    from_key: str
    to_key: str
    formula: str


def _defs(category: UnitCategory, *rows: tuple) -> tuple[UnitDefinition, ...]:
    return tuple(UnitDefinition(key, spelling, category, display, desc) for key, spelling, display, desc in rows)


# fmt: off
UNIT_TABLE: tuple[UnitDefinition, ...] = (
    *_defs(UnitCategory.ANGLE,
        ("deg", "D", "deg", "degrees"),
        ("rad", "R", "rad", "radians"),
        ("deg", "deg", "deg", "degrees"),
        ("rad", "rad", "rad", "radians"),
    ),
    *_defs(UnitCategory.TEMPERATURE,
        ("C", "C", "C", "Celsius"),
        ("F", "F", "F", "Fahrenheit"),
        ("K", "K", "K", "Kelvin"),
        ("C", "degC", "C", "Celsius"),
        ("F", "degF", "F", "Fahrenheit"),
        ("K", "degK", "K", "Kelvin"),
    ),
    *_defs(UnitCategory.LENGTH,
        ("mm", "mm", "mm", "millimeters"),
        ("cm", "cm", "cm", "centimeters"),
        ("m", "m", "m", "meters"),
        ("km", "km", "km", "kilometers"),
        ("in", '"', "in", "inches"),
        ("in", "in", "in", "inches"),
        ("ft", "ft", "ft", "feet"),
        ("yds", "yds", "yds", "yards"),
        ("mi", "mi", "mi", "miles"),
        ("au", "au", "au", "astronomical units"),
        ("pars", "pars", "pars", "parsecs"),
    ),
    *_defs(UnitCategory.FREQUENCY,
        ("Hz", "hz", "Hz", "hertz"),
        ("Hz", "Hz", "Hz", "hertz"),
        ("kHz", "kHz", "kHz", "kilohertz"),
        ("kHz", "khz", "kHz", "kilohertz"),
        ("MHz", "MHz", "MHz", "megahertz"),
        ("MHz", "mhz", "MHz", "megahertz"),
        ("GHz", "GHz", "GHz", "gigahertz"),
        ("GHz", "ghz", "GHz", "gigahertz"),
    ),
    *_defs(UnitCategory.WAVELENGTH,
        ("Ang", "Ang", "A", "angstroms"),
        ("Ang", "ang", "A", "angstroms"),
        ("waves", "w", "waves", "waves"),
        ("waves", "wave", "waves", "waves"),
        ("waves", "waves", "waves", "waves"),
        ("ftw", "ftw", "ft-wave", "foot-wavelength"),
    ),
    *_defs(UnitCategory.SPEED,
        ("mph", "mph", "mph", "miles per hour"),
        ("kph", "kph", "kph", "kilometers per hour"),
    ),
    *_defs(UnitCategory.MASS,
        ("g", "g", "g", "grams"),
        ("mg", "mg", "mg", "milligrams"),
        ("kg", "kg", "kg", "kilograms"),
    ),
    *_defs(UnitCategory.FORCE,
        ("N", "N", "N", "newtons"),
        ("ftlbs", "ftlbs", "ftlbs", "foot-pounds"),
        ("ftlbs", "ftlb", "ftlbs", "foot-pounds"),
    ),
    *_defs(UnitCategory.ENERGY,
        ("J", "J", "J", "joules"),
    ),
    *_defs(UnitCategory.PRESSURE,
        ("atm", "atm", "atm", "atmospheres"),
        ("psi", "psi", "psi", "pounds per square inch"),
        ("kPa", "kpa", "kPa", "kilopascals"),
        ("kPa", "kPa", "kPa", "kilopascals"),
    ),
    *_defs(UnitCategory.VOLTAGE,
        ("kV", "kV", "kV", "kilovolts"),
        ("V", "V", "V", "volts"),
        ("mV", "mV", "mV", "millivolts"),
        ("uV", "uV", "uV", "microvolts"),
    ),
    *_defs(UnitCategory.CURRENT,
        ("A", "A", "A", "amps"),
        ("mA", "mA", "mA", "milliamps"),
        ("uA", "uA", "uA", "microamps"),
    ),
    *_defs(UnitCategory.RESISTANCE,
        ("Ohm", "Ohm", "Ohm", "ohms"),
        ("Ohm", "ohm", "Ohm", "ohms"),
        ("kOhm", "kOhm", "kOhm", "kilo-ohms"),
        ("kOhm", "kohm", "kOhm", "kilo-ohms"),
        ("MOhm", "MOhm", "MOhm", "mega-ohms"),
        ("MOhm", "mohm", "MOhm", "mega-ohms"),
    ),
    *_defs(UnitCategory.CAPACITANCE,
        ("capF", "cF", "F", "farads"),
        ("capF", "capF", "F", "farads"),
        ("mF", "mF", "mF", "millifarads"),
        ("uF", "uF", "uF", "microfarads"),
        ("nF", "nF", "nF", "nanofarads"),
        ("pF", "pF", "pF", "picofarads"),
    ),
    *_defs(UnitCategory.INDUCTANCE,
        ("indH", "iH", "H", "henrys"),
        ("indmH", "mH", "mH", "millihenrys"),
    ),
    *_defs(UnitCategory.TIME,
        ("ns", "ns", "ns", "nanoseconds"),
        ("us", "us", "us", "microseconds"),
        ("ms", "ms", "ms", "milliseconds"),
        ("sec", "S", "sec", "seconds"),
        ("min", "M", "min", "minutes"),
        ("hrs", "H", "hrs", "hours"),
        ("sec", "sec", "sec", "seconds"),
        ("min", "min", "min", "minutes"),
        ("hrs", "hr", "hrs", "hours"),
        ("hrs", "hrs", "hrs", "hours"),
        ("am", "am", "am", "AM"),
        ("pm", "pm", "pm", "PM"),
        ("days", "dy", "days", "days"),
        ("days", "days", "days", "days"),
        ("mon", "mon", "mon", "months"),
        ("yrs", "yrs", "yrs", "years"),
        ("Jd", "JD", "Jd", "Julian days"),
        ("Jd", "Jd", "Jd", "Julian days"),
        ("J2000", "J2k", "J2000", "J2000 epoch days"),
        ("J2000", "J2000", "J2000", "J2000 epoch days"),
    ),
)
# fmt: on


def _rules(category: UnitCategory, *rows: tuple[str, str, str]) -> tuple[ConversionRule, ...]:
    return tuple(ConversionRule(category, src, dst, formula) for src, dst, formula in rows)


# Length factors in millimeters; the full matrix is generated from these
_LENGTH_MM = (
    ("mm", "1."),
    ("cm", "10."),
    ("m", "1000."),
    ("km", "1000000."),
    ("in", "25.4"),
    ("ft", "304.8"),
    ("yds", "914.4"),
    ("mi", "1609344."),
)


def _length_rules() -> tuple[ConversionRule, ...]:
    rows = []
    for src, src_mm in _LENGTH_MM:
        for dst, dst_mm in _LENGTH_MM:
            if src == dst:
                continue
            if src == "mm":
                formula = f"/{dst_mm}"
            elif dst == "mm":
                formula = f"*{src_mm}"
            else:
                formula = f"*{src_mm}/{dst_mm}"
            rows.append((src, dst, formula))
    return _rules(UnitCategory.LENGTH, *rows)


# fmt: off
CONVERSION_RULES: tuple[ConversionRule, ...] = (
    *_rules(UnitCategory.ANGLE,
        ("deg", "rad", "*pi/180"),
        ("rad", "deg", "*180/pi"),
    ),
    *_rules(UnitCategory.TEMPERATURE,
        ("C", "F", "*9/5+32."),
        ("F", "C", "- 32.*5/9"),
        ("C", "K", "+273.15"),
        ("K", "C", "- 273.15"),
        ("F", "K", "- 32.*5/9+273.15"),
        ("K", "F", "- 273.15*9/5+32."),
    ),
    # Short paths for the common pairs, listed before the generated matrix
    *_rules(UnitCategory.LENGTH,
        ("in", "cm", "*2.54"),
        ("cm", "in", "/2.54"),
        ("m", "cm", "*100."),
        ("cm", "m", "/100."),
        ("km", "cm", "*100000."),
        ("cm", "km", "/100000."),
        ("m", "in", "*100./2.54"),
        ("in", "ft", "/12."),
        ("ft", "in", "*12."),
        ("ft", "yds", "/3."),
        ("yds", "ft", "*3."),
        ("mi", "ft", "*5280."),
        ("ft", "mi", "/5280."),
        ("mi", "km", "*1.609344"),
        ("km", "mi", "/1.609344"),
    ),
    *_length_rules(),
    *_rules(UnitCategory.SPEED,
        ("mph", "kph", "*1.609344"),
        ("kph", "mph", "/1.609344"),
    ),
    *_rules(UnitCategory.FREQUENCY,
        ("Hz", "kHz", "/1000."),
        ("Hz", "MHz", "/1000000."),
        ("Hz", "GHz", "/1000000000."),
        ("kHz", "Hz", "*1000."),
        ("kHz", "MHz", "/1000."),
        ("kHz", "GHz", "/1000000."),
        ("MHz", "Hz", "*1000000."),
        ("MHz", "kHz", "*1000."),
        ("MHz", "GHz", "/1000."),
        ("GHz", "Hz", "*1000000000."),
        ("GHz", "kHz", "*1000000."),
        ("GHz", "MHz", "*1000."),
    ),
    *_rules(UnitCategory.MASS,
        ("g", "mg", "*1000."),
        ("g", "kg", "/1000."),
        ("mg", "g", "/1000."),
        ("mg", "kg", "/1000000."),
        ("kg", "g", "*1000."),
        ("kg", "mg", "*1000000."),
    ),
    *_rules(UnitCategory.PRESSURE,
        ("atm", "kPa", "*101.325"),
        ("kPa", "atm", "/101.325"),
        ("psi", "kPa", "*6.894757293"),
        ("kPa", "psi", "/6.894757293"),
        ("atm", "psi", "*101.325/6.894757293"),
        ("psi", "atm", "*6.894757293/101.325"),
    ),
    *_rules(UnitCategory.VOLTAGE,
        ("kV", "V", "*1000."),
        ("V", "kV", "/1000."),
        ("V", "mV", "*1000."),
        ("mV", "V", "/1000."),
        ("mV", "uV", "*1000."),
        ("uV", "mV", "/1000."),
    ),
    *_rules(UnitCategory.CURRENT,
        ("A", "mA", "*1000."),
        ("mA", "A", "/1000."),
        ("mA", "uA", "*1000."),
        ("uA", "mA", "/1000."),
        ("A", "uA", "*1000000."),
        ("uA", "A", "/1000000."),
    ),
    *_rules(UnitCategory.RESISTANCE,
        ("Ohm", "kOhm", "/1000."),
        ("kOhm", "Ohm", "*1000."),
        ("kOhm", "MOhm", "/1000."),
        ("MOhm", "kOhm", "*1000."),
        ("Ohm", "MOhm", "/1000000."),
        ("MOhm", "Ohm", "*1000000."),
    ),
    *_rules(UnitCategory.TIME,
        ("ms", "sec", "/1000."),
        ("sec", "ms", "*1000."),
        ("sec", "min", "/60."),
        ("min", "sec", "*60."),
        ("min", "hrs", "/60."),
        ("hrs", "min", "*60."),
        ("sec", "hrs", "/3600."),
        ("hrs", "sec", "*3600."),
        ("hrs", "days", "/24."),
        ("days", "hrs", "*24."),
    ),
)
# fmt: on


def find_unit(cursor: TextCursor) -> Optional[UnitDefinition]:
    """Find the longest unit spelling at the cursor without consuming it."""
    found: Optional[UnitDefinition] = None
    for definition in UNIT_TABLE:
        if cursor.startswith(definition.spelling):
            if found is None or len(definition.spelling) > len(found.spelling):
                found = definition
    return found


def unit_for_key(key: str) -> Optional[Unit]:
    """Look up a unit by its key (``"deg"``, ``"C"``); spellings also match."""
    if not key:
        return NO_UNIT
    for definition in UNIT_TABLE:
        if definition.key == key:
            return definition.unit
    for definition in UNIT_TABLE:
        if definition.spelling == key:
            return definition.unit
    return None


def expected_type(unit: Unit) -> type:
    """Representation a conversion into ``unit`` produces (float unless the table says otherwise)."""
    for definition in UNIT_TABLE:
        if definition.category is unit.category and definition.key == unit.key:
            return definition.expect
    return float


def find_conversion(source: Unit, target: Unit) -> Optional[ConversionRule]:
    """Return the rule converting ``source`` to ``target``, if one exists.

    A source carrying a unit of another category never converts. A unitless
    source only converts through a rule written for an empty key, and none
    are defined.
    """
    if not source.is_default() and source.category is not target.category:
        return None
    for rule in CONVERSION_RULES:
        if (
            rule.category is target.category
            and rule.from_key == source.key
            and rule.to_key == target.key
        ):
            return rule
    return None


def units_by_category() -> dict[UnitCategory, list[UnitDefinition]]:
    """Group the table by category, keeping one entry per key."""
    grouped: dict[UnitCategory, list[UnitDefinition]] = {}
    seen: set[str] = set()
    for definition in UNIT_TABLE:
        if definition.key in seen:
            continue
        seen.add(definition.key)
        grouped.setdefault(definition.category, []).append(definition)
    return grouped
