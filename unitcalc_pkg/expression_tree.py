"""Expression tree builder.

Turns the operator stream of an expression into a list of top-level
ExpressionNodes. Each node keeps the operands seen before its operator
(``prior``), nested nodes for parenthesised groups and function calls
(``children``) and the operands after the operator (``params``).

Binding is greedy and strictly left to right: ``2*(3+4)*5`` is built as
``((2*(3+4))*5)``. There is no precedence between operators.

A node starts in the state its predecessor finished in. That is what makes
``-4.2`` after a finished term read as a subtraction and not as a negative
literal, both at the top level and between the children of a group.

Key Classes:
    - NodeState: parser state of a node
    - ExpressionNode: one node of the tree
    - TreeBuilder: the recursive-descent state machine
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from enum import auto
from typing import Optional

from .number import NumberValue
from .number import parse_literal
from .number import parse_unit_target
from .number import parse_variable
from .operators import Arity
from .operators import OperatorDescriptor
from .operators import find_longest_match
from .operators import get_operator
from .types import ErrorKind
from .types import MessageList
from .types import ParseError
from .utils.cursor import TextCursor
from .variables import VariableStore

logger = logging.getLogger(__name__)


class NodeState(Enum):
    """Parser state of an expression node."""

    ERRORED = auto()
    INIT = auto()
    PARSED = auto()  # Operator and trailing operand complete
    NUMBER = auto()  # Holding leading operands, no operator yet
    FUNCTION = auto()  # Complete, operates on the stack
    BINARY = auto()  # Waiting for the right-hand operand
    UNARY = auto()  # Unary operator waiting for its (...) argument
    CONVERT = auto()  # Waiting for the target unit of ::
    PAREN = auto()  # Group opened
    CLOSE_PAREN = auto()  # Group closed


@dataclass
class ExpressionNode:
    state: NodeState = NodeState.INIT
    operator: Optional[OperatorDescriptor] = None
    prior: list[NumberValue] = field(default_factory=list)
    params: list[NumberValue] = field(default_factory=list)
    children: list[ExpressionNode] = field(default_factory=list)

    def push_prior(self, value: NumberValue) -> None:
        """Seed a leading operand, as if a number had just been read."""
        self.prior.append(value)
        self.state = NodeState.NUMBER

    def is_empty(self) -> bool:
        return not (self.operator or self.prior or self.params or self.children)

    def describe(self, indent: int = 0) -> str:
        """Multi-line dump of the node, used by the REPL ``tree`` command."""
        pad = "  " * indent
        op = self.operator.spelling if self.operator else "-"
        prior = ", ".join(v.as_string() for v in self.prior)
        params = ", ".join(v.as_string() for v in self.params)
        lines = [f"{pad}{self.state.name} op={op} prior=[{prior}] params=[{params}]"]
        for child in self.children:
            lines.append(child.describe(indent + 1))
        return "\n".join(lines)


class TreeBuilder:
    """Recursive-descent builder producing ExpressionNodes from text."""

    def __init__(self, store: VariableStore, messages: MessageList):
        self.store = store
        self.messages = messages

    def build(
        self, cursor: TextCursor, seed: Optional[NumberValue] = None
    ) -> Optional[list[ExpressionNode]]:
        """Build the top-level node list, or return None on a parse error.

        Args:
            cursor: Expression text
            seed: Optional first operand, used by conversion formulas
        """
        nodes: list[ExpressionNode] = []
        node = ExpressionNode()
        if seed is not None:
            node.push_prior(seed)
        try:
            while True:
                self.parse_node(node, cursor)
                if not node.is_empty():
                    nodes.append(node)
                cursor.trim_leading_whitespace()
                if cursor.empty():
                    break
                node = ExpressionNode(state=node.state)
        except ParseError as exc:
            logger.debug("Parse failed at %r: %s", cursor.remaining, exc)
            return None
        return nodes

    def parse_node(self, node: ExpressionNode, cursor: TextCursor) -> bool:
        """Parse into ``node`` until it is complete or the text runs out.

        Returns:
            True when the node reported itself done
        """
        done = False
        while not done and not cursor.empty():
            cursor.trim_leading_whitespace()
            if cursor.empty():
                break
            if node.state is NodeState.CONVERT:
                target = parse_unit_target(cursor, self.messages)
                if target is None:
                    raise ParseError("bad conversion target", ErrorKind.UNKNOWN_UNIT)
                done = self._add_number(node, target)
            elif cursor.is_number_prefix() and node.state in (
                NodeState.INIT,
                NodeState.BINARY,
            ):
                done = self._add_number(node, self._literal(cursor))
            else:
                done = self._parse_operator(node, cursor)
        return done

    def _literal(self, cursor: TextCursor) -> NumberValue:
        number = parse_literal(cursor, self.messages)
        if number is None:
            raise ParseError("bad literal", ErrorKind.MALFORMED_NUMBER)
        return number

    def _parse_operator(self, node: ExpressionNode, cursor: TextCursor) -> bool:
        match = find_longest_match(cursor)
        if match is None:
            if cursor.is_number_prefix():
                return self._add_number(node, self._literal(cursor))
            ok, number = parse_variable(cursor, self.store, self.messages)
            if not ok:
                raise ParseError("unknown function or variable", ErrorKind.UNKNOWN_FUNCTION)
            if number is None:
                # Inline assignment, nothing to push
                return False
            return self._add_number(node, number)

        length, descriptor = match
        if node.operator is None or node.state is NodeState.UNARY:
            cursor.consume(length)
            cursor.trim_leading_whitespace()
            return self._add_operator(node, descriptor, cursor)

        # Operator already bound: the following operation nests below it
        child = ExpressionNode()
        self.parse_node(child, cursor)
        node.children.append(child)
        node.state = NodeState.FUNCTION
        return True

    def _add_number(self, node: ExpressionNode, number: NumberValue) -> bool:
        if node.state in (NodeState.BINARY, NodeState.CONVERT):
            node.params.append(number)
            node.state = NodeState.PARSED
            return True

        if (
            node.state is NodeState.NUMBER
            and node.operator is None
            and node.prior
            and not node.params
        ):
            # Two operands in a row: implicit multiplication
            node.operator = get_operator("mul")
            node.params.append(number)
            node.state = NodeState.PARSED
            return True

        node.prior.append(number)
        node.state = NodeState.NUMBER
        return False

    def _add_operator(
        self, node: ExpressionNode, descriptor: OperatorDescriptor, cursor: TextCursor
    ) -> bool:
        arity = descriptor.arity
        if arity in (Arity.BINARY, Arity.ASSIGN):
            node.operator = descriptor
            node.state = NodeState.BINARY
            return False

        if arity is Arity.UNARY:
            node.operator = descriptor
            ahead = find_longest_match(cursor) if not cursor.empty() else None
            if ahead is not None and ahead[1].arity is Arity.GROUP_OPEN:
                # f(...): evaluate the group first, then apply f
                node.state = NodeState.UNARY
                return False
            node.state = NodeState.FUNCTION
            return True

        if arity is Arity.CONVERT:
            node.operator = descriptor
            node.state = NodeState.CONVERT
            return False

        if arity is Arity.GROUP_OPEN:
            if descriptor.reserved and node.operator is None:
                node.operator = descriptor
            node.state = NodeState.PAREN
            self._parse_group(node, descriptor, cursor)
            return True

        if arity is Arity.GROUP_CLOSE:
            node.state = NodeState.CLOSE_PAREN
            return True

        # Separator
        node.operator = descriptor
        node.state = NodeState.FUNCTION
        return True

    def _parse_group(
        self, node: ExpressionNode, opener: OperatorDescriptor, cursor: TextCursor
    ) -> None:
        state = NodeState.INIT
        while True:
            cursor.trim_leading_whitespace()
            if cursor.empty():
                break
            child = ExpressionNode(state=state)
            self.parse_node(child, cursor)
            node.children.append(child)
            if child.state is NodeState.CLOSE_PAREN:
                return
            state = child.state

        self.messages.warning(
            f"No closing bracket for '{opener.spelling}'", ErrorKind.UNBALANCED_GROUP
        )
        if node.children:
            node.children[-1].state = NodeState.ERRORED


def build_expression(
    cursor: TextCursor,
    store: VariableStore,
    messages: MessageList,
    seed: Optional[NumberValue] = None,
) -> Optional[list[ExpressionNode]]:
    """Convenience wrapper around TreeBuilder.build."""
    return TreeBuilder(store, messages).build(cursor, seed=seed)
