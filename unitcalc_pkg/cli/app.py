from __future__ import annotations

import argparse
import logging

from .. import config
from ..api import evaluate
from ..config import VERSION
from ..utils.formatting import print_result_pretty
from .context import ReplContext

logger = logging.getLogger(__name__)


def repl_loop(output_format: str = "human") -> None:
    """Start the interactive REPL."""
    from .repl_core import REPL

    repl = REPL(ReplContext(output_format=output_format))
    repl.start()


def print_help_text() -> None:
    """Print help text for REPL commands."""
    help_text = f"""unitcalc v{VERSION}

Type an expression as on the command line, e.g. 25C::F or y=3.2 2pi*y

COMMANDS
  help, ?     Show commands
  q, quit     Exit
  list        List variables and stack
  listVars    List stored variables
  showStack   List the stack
  clearStack  Clear the stack
  clearVars   Forget user variables
  functions   List all functions
  units       List all units
  tree        Show the parse tree of the last expression
  history     Show entered lines
  debug on|off  Toggle debug logging

SYNTAX
  12.5cm            number with unit
  3:%.2f            number with display format
  0x5A              hexadecimal integer
  25C::F            convert to unit
  y=3.2             store a variable
  2*y=y             store the result into y
  30 sin, sin(30)   functions follow their argument or take a group
"""
    print(help_text)


def main_entry(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="unitcalc",
        description="Unit-aware calculator with variables and conversions",
    )
    parser.add_argument(
        "expression",
        nargs="*",
        help="Expression to evaluate (words are joined with spaces)",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        dest="eval_expr",
        help="Evaluate one expression and exit",
    )
    parser.add_argument(
        "--angle",
        choices=list(config.ANGLE_UNITS),
        help=f"Angle unit for trigonometric functions (default: {config.DEFAULT_ANGLE})",
    )
    parser.add_argument(
        "--format",
        choices=["json", "human"],
        default="human",
        help="Output format (default: human)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path (default: console only)",
    )
    args = parser.parse_args(argv)

    from ..logging_config import setup_logging

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.angle:
        config.set_default_angle(args.angle)

    expr = args.eval_expr if args.eval_expr is not None else " ".join(args.expression)
    expr = expr.strip()
    if expr.startswith(config.PROMPT.strip()):
        expr = expr[len(config.PROMPT.strip()) :].strip()

    if not expr:
        if args.eval_expr is not None:
            print("Error: Empty input. Please enter an expression.")
            return 1
        repl_loop(output_format=args.format)
        return 0

    logger.debug("Evaluating %r", expr)
    res = evaluate(expr)
    print_result_pretty(res, args.format)
    return 0 if res.get("ok") else 1
