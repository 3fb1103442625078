from dataclasses import dataclass


@dataclass
class ReplContext:
    """Holds the state of the interactive REPL session."""

    output_format: str = "human"
    show_stack: bool = True
    debug_mode: bool = False
