from ..utils.formatting import print_result_pretty
from .app import main_entry
from .app import repl_loop

__all__ = ["main_entry", "repl_loop", "print_result_pretty"]
