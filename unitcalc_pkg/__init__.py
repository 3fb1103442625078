"""unitcalc package: unit-aware calculator language with variables and conversions."""

__version__ = "0.4.0"

from . import api, cli, config, engine, logging_config, types
from .api import convert_units
from .api import evaluate
from .api import list_operators
from .api import list_units
from .engine import Calculator
from .variables import VariableStore

__all__ = [
    "api",
    "cli",
    "config",
    "engine",
    "logging_config",
    "types",
    "Calculator",
    "VariableStore",
    "evaluate",
    "convert_units",
    "list_units",
    "list_operators",
]
