"""Stack evaluator for expression trees.

Running a node pushes its leading operands, runs its children in order,
pushes its trailing operands and finally applies its operator to the shared
stack. Any failure stops the run; values already on the stack and variables
already assigned stay as they are.
"""

from __future__ import annotations

import logging

from .expression_tree import ExpressionNode
from .number import NumberValue
from .operators import Arity
from .operators import EvalContext
from .operators import OperatorDescriptor
from .types import ErrorKind
from .types import MessageList
from .variables import VariableStore

logger = logging.getLogger(__name__)

# Stack positions brought up to date before an operator runs
_CONFIRM_POSITIONS = {
    Arity.BINARY: (-1, -2),
    Arity.CONVERT: (-1, -2),
    Arity.UNARY: (-1,),
    Arity.SEPARATOR: (-1,),
}


class Evaluator:
    def __init__(self, store: VariableStore, messages: MessageList, depth: int = 0):
        self.ctx = EvalContext(store, messages, depth)

    @property
    def messages(self) -> MessageList:
        return self.ctx.messages

    def run_all(self, nodes: list[ExpressionNode], stack: list[NumberValue]) -> bool:
        for node in nodes:
            if not self.run(node, stack):
                logger.debug("Evaluation stopped, stack=%s", [v.as_string() for v in stack])
                return False
        return True

    def run(self, node: ExpressionNode, stack: list[NumberValue]) -> bool:
        stack.extend(node.prior)
        for child in node.children:
            if not self.run(child, stack):
                return False
        stack.extend(node.params)
        if node.operator is None:
            return True
        return self.apply(node.operator, stack)

    def apply(self, descriptor: OperatorDescriptor, stack: list[NumberValue]) -> bool:
        if not descriptor.implemented:
            self.messages.error(
                ErrorKind.UNKNOWN_FUNCTION, f"'{descriptor.spelling}' is not implemented yet"
            )
            return False

        needed = descriptor.operand_count
        if len(stack) < needed:
            self.messages.error(
                ErrorKind.MISSING_OPERAND,
                f"'{descriptor.spelling}' needs {needed} value(s), stack has {len(stack)}",
            )
            return False

        if descriptor.confirm_operands:
            for pos in _CONFIRM_POSITIONS.get(descriptor.arity, ()):
                resolved = self.ctx.store.confirm(stack[pos], self.messages)
                if resolved is None:
                    return False
                stack[pos] = resolved

        ok = descriptor.impl(stack, self.ctx)
        logger.debug("%s -> %s", descriptor.name, stack[-1].as_string() if stack else "<empty>")
        return ok
