import logging
from typing import Optional

from .. import config
from ..api import evaluate
from ..engine import Calculator
from ..utils.formatting import print_result_pretty
from .context import ReplContext

logger = logging.getLogger(__name__)


def _input_prompt(name: str) -> str:
    return input(f"{name}? ")


class REPL:
    """
    Line-oriented REPL around one Calculator session.
    The stack and the variables persist from one line to the next.
    """

    def __init__(self, context: Optional[ReplContext] = None, calculator: Optional[Calculator] = None):
        self.ctx = context if context else ReplContext()
        self.calc = calculator if calculator else Calculator(prompt=_input_prompt)
        self.running = True
        self._quit_hint_shown = False
        self._setup_readline()

    def _setup_readline(self):
        try:
            import readline  # noqa: F401
        except ImportError:
            pass

    def start(self):
        """Main loop entry point."""
        print(f"unitcalc v{config.VERSION} - type 'help' for commands, 'q' to exit.")
        while self.running:
            self.loop_once()

    def loop_once(self):
        """Single iteration of the read-eval-print loop."""
        try:
            prompt = config.PROMPT if not self.ctx.debug_mode else "DEBUG" + config.PROMPT
            try:
                raw = input(prompt)
            except EOFError:
                self.running = False
                return

            self.process_input(raw)
        except KeyboardInterrupt:
            self.handle_interrupt()
        except Exception as e:
            logger.exception("Unexpected error in REPL loop")
            print(f"Error: {e}")

    def handle_interrupt(self):
        print("\n[Press Ctrl+C again or type 'q' to exit]")

    def process_input(self, text: str):
        """Dispatch input to specific handlers."""
        text = text.strip()
        if not text:
            if not self._quit_hint_shown:
                print("Did you want to quit? - type 'q' to quit.")
                self._quit_hint_shown = True
            return
        if text.startswith("#"):
            return

        raw_lower = text.lower()
        if raw_lower in ("q", "quit", "exit"):
            self.running = False
            return
        if raw_lower == "help" or text.startswith("?"):
            from .app import print_help_text

            print_help_text()
            return

        from .repl_commands import handle_command

        if handle_command(text, self.ctx, self.calc):
            self.calc.history.append(text)
            return

        res = evaluate(text, calculator=self.calc)
        print_result_pretty(res, self.ctx.output_format)
        if self.ctx.show_stack and self.ctx.output_format == "human" and len(self.calc.stack) > 1:
            print(self.calc.format_stack())
