import logging

from ..api import list_operators
from ..api import list_units
from ..engine import Calculator
from .context import ReplContext

logger = logging.getLogger(__name__)

# Registry of non-math commands, matched case-insensitively on the whole line
COMMAND_REGISTRY = {
    "list",
    "listvars",
    "liststack",
    "showstack",
    "clearstack",
    "clearvars",
    "functions",
    "units",
    "tree",
    "history",
    "debug",
}


def _print_variables(calc: Calculator) -> None:
    print("Listing variables:")
    print(calc.format_variables(include_constants=True))


def _print_stack(calc: Calculator) -> None:
    print("Listing stack:")
    print(calc.format_stack())


def _handle_functions() -> None:
    print("Functions")
    for row in list_operators():
        status = "  (reserved)" if row["reserved"] else ""
        print(f"  {row['spelling']:<8} {row['arity']:<12} {row['description']}{status}")


def _handle_units() -> None:
    category = None
    for row in list_units():
        if row["category"] != category:
            category = row["category"]
            print(f"{category}:")
        print(f"  {row['display']:<6} {row['description']}")


def _handle_debug(text: str, ctx: ReplContext) -> None:
    parts = text.split()
    mode = parts[1].lower() if len(parts) > 1 else ""
    if mode in ("on", "true"):
        ctx.debug_mode = True
        logging.getLogger("unitcalc_pkg").setLevel(logging.DEBUG)
        print("Debug mode enabled.")
    elif mode in ("off", "false"):
        ctx.debug_mode = False
        logging.getLogger("unitcalc_pkg").setLevel(logging.WARNING)
        print("Debug mode disabled.")
    else:
        print("Usage: debug <on|off>")


def handle_command(text: str, ctx: ReplContext, calc: Calculator) -> bool:
    """
    Attempt to handle the input text as a command.
    Returns True if handled, False otherwise.
    """
    raw_lower = text.lower().strip()
    keyword = raw_lower.split()[0] if raw_lower else ""
    if keyword not in COMMAND_REGISTRY:
        return False

    if raw_lower == "list":
        _print_variables(calc)
        _print_stack(calc)
    elif raw_lower == "listvars":
        _print_variables(calc)
    elif raw_lower in ("liststack", "showstack"):
        _print_stack(calc)
    elif raw_lower == "clearstack":
        print("Clearing stack")
        calc.clear_stack()
    elif raw_lower == "clearvars":
        calc.store.clear_user_variables()
        print("Variables cleared from current session.")
    elif raw_lower == "functions":
        _handle_functions()
    elif raw_lower == "units":
        _handle_units()
    elif raw_lower == "tree":
        print(calc.format_tree() or "(no expression parsed yet)")
    elif raw_lower == "history":
        for i, line in enumerate(calc.history, 1):
            print(f"{i:>4}  {line}")
    elif keyword == "debug":
        _handle_debug(text, ctx)
    else:
        # Registered keyword with unexpected arguments, e.g. "units foo"
        return False

    logger.debug("Handled command %r", raw_lower)
    return True
