#!/usr/bin/env python3
"""
unitcalc: unit-aware calculator

This file serves as a thin wrapper that delegates all functionality
to the unitcalc_pkg package.

Usage:
    python unitcalc.py                      # Interactive REPL
    python unitcalc.py 25C::F               # Evaluate expression
    python unitcalc.py -e "1in::cm"         # Evaluate expression
    python unitcalc.py --help               # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for unitcalc.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from unitcalc_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import unitcalc_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
