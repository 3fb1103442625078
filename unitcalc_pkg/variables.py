"""Variable table shared by the parser and the evaluator.

A VariableStore is created per calculator session and passed explicitly to
everything that reads or writes variables. It is seeded with the built-in
constants from config.CONSTANTS, which can never be reassigned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable
from typing import Iterator
from typing import Optional

from . import config
from .dimensional_analysis.units import unit_for_key
from .number import NumberFlag
from .number import NumberValue
from .number import parse_literal
from .types import ErrorKind
from .types import MessageList
from .utils.cursor import TextCursor

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]

MAX_PROMPT_ATTEMPTS = 3


@dataclass
class VariableEntry:
    name: str
    number: NumberValue
    description: str = ""

    @property
    def constant(self) -> bool:
        return self.number.is_constant


class VariableStore:
    """Ordered name -> value table. Entries are never removed."""

    def __init__(self, prompt: Optional[PromptFn] = None, constants=config.CONSTANTS):
        self.prompt = prompt
        self._entries: dict[str, VariableEntry] = {}
        for name, value, unit_key, description in constants:
            unit = unit_for_key(unit_key)
            number = NumberValue(
                value,
                unit=unit,
                name=name,
                flags=NumberFlag.VARIABLE | NumberFlag.CONSTANT,
            )
            self._entries[name] = VariableEntry(name, number, description)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VariableEntry]:
        return iter(self._entries.values())

    def entries(self) -> list[VariableEntry]:
        return list(self._entries.values())

    def user_variables(self) -> list[VariableEntry]:
        return [e for e in self._entries.values() if not e.constant]

    def clear_user_variables(self) -> None:
        self._entries = {n: e for n, e in self._entries.items() if e.constant}

    def lookup(self, name: str) -> Optional[NumberValue]:
        """Return a copy of the stored value for ``name``, or None."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        return entry.number.copy()

    def upsert(self, value: NumberValue, messages: Optional[MessageList] = None) -> bool:
        """Store ``value`` under its name. Constants are refused."""
        name = value.name
        if not name:
            if messages is not None:
                messages.error(
                    ErrorKind.ASSIGNMENT_TARGET_INVALID, "Assignment target has no name"
                )
            return False

        entry = self._entries.get(name)
        if entry is not None and entry.constant:
            logger.warning("Attempt to update constant '%s'", name)
            if messages is not None:
                messages.error(
                    ErrorKind.ASSIGNMENT_TARGET_INVALID,
                    f"Cannot assign to constant '{name}'",
                )
            return False

        stored = value.copy(literal="", flags=NumberFlag.VARIABLE)
        if entry is None:
            self._entries[name] = VariableEntry(name, stored)
        else:
            entry.number = stored
        logger.debug("Variable %s = %s", name, stored)
        return True

    def confirm(self, value: NumberValue, messages: MessageList) -> Optional[NumberValue]:
        """Bring a variable operand up to date before it is used.

        Plain numbers and constants come back unchanged. A variable found in
        the table takes the stored value. An unknown variable is asked for
        through the prompt; empty input means integer zero for this
        evaluation only.

        Returns:
            The resolved value, or None when the variable cannot be resolved
        """
        if not value.is_variable or value.is_constant:
            return value

        entry = self._entries.get(value.name)
        if entry is not None:
            stored = entry.number
            unit = stored.unit if value.unit.is_default() else value.unit
            return value.copy(
                value=stored.value,
                unit=unit,
                fmt=stored.fmt,
                flags=NumberFlag.VARIABLE,
            )

        return self._ask(value, messages)

    def _ask(self, value: NumberValue, messages: MessageList) -> Optional[NumberValue]:
        name = value.name
        if self.prompt is None:
            messages.error(
                ErrorKind.UNRESOLVED_VARIABLE, f"Variable '{name}' has no value"
            )
            return None

        if config.SHOW_UNDEFINED_VAR_MSG:
            messages.info(f"Variable '{name}' is undefined, asking for a value")

        for _attempt in range(MAX_PROMPT_ATTEMPTS):
            try:
                answer = self.prompt(name)
            except EOFError:
                answer = ""
            answer = (answer or "").strip()

            if not answer:
                # Zero for this evaluation, nothing stored
                return value.copy(value=0, flags=NumberFlag.VARIABLE)

            scratch = MessageList()
            cursor = TextCursor(answer)
            parsed = parse_literal(cursor, scratch)
            cursor.trim_leading_whitespace()
            if parsed is None or not cursor.empty():
                messages.warning(f"Could not read '{answer}' as a value for '{name}'")
                continue

            unit = value.unit if parsed.unit.is_default() else parsed.unit
            resolved = value.copy(
                value=parsed.value, unit=unit, fmt=parsed.fmt, flags=NumberFlag.VARIABLE
            )
            self.upsert(resolved, messages)
            return resolved

        messages.error(
            ErrorKind.UNRESOLVED_VARIABLE, f"No usable value entered for '{name}'"
        )
        return None
