"""Calculator session: parse, run and keep state between expressions."""

from __future__ import annotations

import logging
from typing import Optional

from . import config
from .evaluator import Evaluator
from .expression_tree import ExpressionNode
from .expression_tree import build_expression
from .number import NumberValue
from .types import ErrorKind
from .types import EvaluationError
from .types import MessageList
from .types import ParseError
from .utils.cursor import TextCursor
from .variables import PromptFn
from .variables import VariableStore

logger = logging.getLogger(__name__)


class Calculator:
    """One interactive session.

    The value stack and the variable store persist across :meth:`execute`
    calls. ``messages`` holds the diagnostics of the most recent call only.
    """

    def __init__(self, store: Optional[VariableStore] = None, prompt: Optional[PromptFn] = None):
        self.store = store if store is not None else VariableStore(prompt=prompt)
        if prompt is not None:
            self.store.prompt = prompt
        self.stack: list[NumberValue] = []
        self.messages = MessageList()
        self.history: list[str] = []
        self.nodes: list[ExpressionNode] = []

    def parse(self, text: str) -> bool:
        """Build the node list for ``text``; False on a parse error."""
        self.nodes = []
        if len(text) > config.MAX_INPUT_LENGTH:
            self.messages.error(
                ErrorKind.INPUT_TOO_LONG,
                f"Input longer than {config.MAX_INPUT_LENGTH} characters",
            )
            return False
        nodes = build_expression(TextCursor(text), self.store, self.messages)
        if nodes is None:
            return False
        self.nodes = nodes
        return True

    def run(self) -> Optional[NumberValue]:
        """Evaluate the parsed nodes on the session stack.

        Returns:
            The top of the stack, or None if evaluation failed or left it empty
        """
        ok = Evaluator(self.store, self.messages).run_all(self.nodes, self.stack)
        if not ok:
            logger.info("Evaluation failed: %s", self.messages.as_string())
            return None
        return self.stack[-1] if self.stack else None

    def execute(self, text: str) -> Optional[NumberValue]:
        """Parse and run one line. The line is kept in history either way."""
        self.messages = MessageList()
        self.history.append(text)
        if not self.parse(text):
            logger.info("Parsing failed: %s", self.messages.as_string())
            return None
        return self.run()

    def evaluate(self, text: str, strict: bool = False) -> Optional[NumberValue]:
        """Like :meth:`execute`; with ``strict`` failures raise instead.

        Raises:
            ParseError: text could not be parsed (strict only)
            EvaluationError: evaluation failed (strict only)
        """
        result = self.execute(text)
        if not strict or not self.messages.has_errors():
            return result
        error = self.messages.last_error()
        if not self.nodes:
            raise ParseError(error.text, error.kind)
        raise EvaluationError(error.text, error.kind)

    def clear_stack(self) -> None:
        self.stack.clear()

    def format_stack(self) -> str:
        if not self.stack:
            return "(stack is empty)"
        depth = len(self.stack)
        return "\n".join(
            f"{depth - i - 1:>3}: {value.as_string()}" for i, value in enumerate(self.stack)
        )

    def format_variables(self, include_constants: bool = True) -> str:
        entries = self.store.entries() if include_constants else self.store.user_variables()
        if not entries:
            return "(no variables)"
        lines = []
        for entry in entries:
            tag = " (constant)" if entry.constant else ""
            lines.append(f"{entry.name} = {entry.number.as_string()}{tag}")
        return "\n".join(lines)

    def format_tree(self) -> str:
        return "\n".join(node.describe() for node in self.nodes)
