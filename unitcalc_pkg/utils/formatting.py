import json
import logging
import math
from typing import Any

from .. import config

logger = logging.getLogger(__name__)


def clean_decimal(num_str: str) -> str:
    """Remove trailing zeros, and the decimal point if nothing follows it."""
    if "." not in num_str:
        return num_str
    # Keep any exponent suffix intact
    mantissa, sep, exponent = num_str.partition("e")
    mantissa = mantissa.rstrip("0").rstrip(".")
    if mantissa in ("-0", ""):
        mantissa = "0"
    return mantissa + sep + exponent


def format_special_values(value: float) -> str | None:
    """Spell out nan and the infinities, or return None for ordinary floats."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return None


def format_float(value: float, fmt: str, default_fmt: str) -> str:
    """Format a float with ``fmt``, or with ``default_fmt`` and trailing zeros removed."""
    special = format_special_values(value)
    if special is not None:
        return special
    if fmt:
        try:
            return fmt % value
        except (TypeError, ValueError, OverflowError):
            # Integer-only formats such as 0x%X
            logger.debug("Format %r does not accept floats, using %r", fmt, default_fmt)
    return clean_decimal(default_fmt % value)


def format_int(value: int, fmt: str) -> str:
    if value < 0 and fmt[-1:] in ("x", "X", "o"):
        # Hex and octal formats show the two's complement register
        value &= (1 << config.INT_BITS) - 1
    try:
        return fmt % value
    except (TypeError, ValueError, OverflowError):
        logger.warning("Invalid integer format %r, falling back to %%d", fmt)
        return "%d" % value


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print an evaluation result dict in the requested format."""
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    for warning in res.get("warnings", []):
        print("Warning:", warning)
    if res.get("result"):
        print(res["result"])
