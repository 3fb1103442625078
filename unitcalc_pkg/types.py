"""Message and error types shared by the parser and the evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator
from typing import Optional


class ErrorKind(Enum):
    """Categories of parse and evaluation failures."""

    MALFORMED_NUMBER = "MalformedNumber"
    UNKNOWN_UNIT = "UnknownUnit"
    UNKNOWN_FUNCTION = "UnknownFunction"
    MISSING_OPERAND = "MissingOperand"
    UNRESOLVED_VARIABLE = "UnresolvedVariable"
    CONVERSION_NOT_SUPPORTED = "ConversionNotSupported"
    DIVISION_BY_ZERO = "DivisionByZero"
    ASSIGNMENT_TARGET_INVALID = "AssignmentTargetInvalid"
    UNBALANCED_GROUP = "UnbalancedGroup"
    INPUT_TOO_LONG = "InputTooLong"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    severity: Severity
    text: str
    kind: Optional[ErrorKind] = None

    def __str__(self) -> str:
        if self.kind is not None:
            return f"{self.severity.value}: [{self.kind.value}] {self.text}"
        return f"{self.severity.value}: {self.text}"


class MessageList:
    """Ordered list of diagnostics collected while parsing and evaluating."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def add(self, message: Message) -> None:
        self._messages.append(message)

    def info(self, text: str) -> None:
        self.add(Message(Severity.INFO, text))

    def warning(self, text: str, kind: Optional[ErrorKind] = None) -> None:
        self.add(Message(Severity.WARNING, text, kind))

    def error(self, kind: ErrorKind, text: str) -> None:
        self.add(Message(Severity.ERROR, text, kind))

    def errors(self) -> list[Message]:
        return [m for m in self._messages if m.severity is Severity.ERROR]

    def has_errors(self) -> bool:
        return any(m.severity is Severity.ERROR for m in self._messages)

    def has_kind(self, kind: ErrorKind) -> bool:
        return any(m.kind is kind for m in self._messages)

    def last_error(self) -> Optional[Message]:
        errors = self.errors()
        return errors[-1] if errors else None

    def extend(self, other: MessageList) -> None:
        self._messages.extend(other)

    def clear(self) -> None:
        self._messages.clear()

    def as_string(self) -> str:
        return "; ".join(str(m) for m in self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)


class CalculatorError(Exception):
    """Base exception for calculator failures."""

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.kind = kind


class ParseError(CalculatorError):
    """Raised when an expression cannot be turned into an expression tree."""


class EvaluationError(CalculatorError):
    """Raised when a parsed expression fails while running."""
