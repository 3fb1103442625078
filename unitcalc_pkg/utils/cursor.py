"""Text cursor used by the literal scanner and the expression tree builder.

The cursor never copies or shifts the underlying string; consuming text only
moves an offset forward. Reads past the end return empty strings.
"""

from __future__ import annotations

import string

DIGITS = frozenset(string.digits)
HEX_DIGITS = frozenset(string.hexdigits)
LETTERS = frozenset(string.ascii_letters)
WHITESPACE = frozenset(string.whitespace)


class TextCursor:
    """A read position inside an expression string."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str, offset: int = 0):
        self._text = text
        self._pos = max(0, min(offset, len(text)))

    @property
    def text(self) -> str:
        return self._text

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def remaining(self) -> str:
        return self._text[self._pos :]

    def __len__(self) -> int:
        return len(self._text) - self._pos

    def __repr__(self) -> str:
        return f"TextCursor({self.remaining!r})"

    def empty(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self, offset: int = 0) -> str:
        """Character ``offset`` places ahead, or ``""`` past the end."""
        idx = self._pos + offset
        if 0 <= idx < len(self._text):
            return self._text[idx]
        return ""

    def startswith(self, prefix: str) -> bool:
        return self._text.startswith(prefix, self._pos)

    def consume(self, count: int = 1) -> None:
        self._pos = min(len(self._text), self._pos + max(0, count))

    def take(self, count: int) -> str:
        taken = self._text[self._pos : self._pos + count]
        self.consume(len(taken))
        return taken

    def take_token(self) -> str:
        """Consume the run of non-whitespace characters at the cursor."""
        end = self._pos
        while end < len(self._text) and self._text[end] not in WHITESPACE:
            end += 1
        return self.take(end - self._pos)

    def trim_leading_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos] in WHITESPACE:
            self._pos += 1

    # Predicates on the next characters

    def is_digit_prefix(self) -> bool:
        return self.peek() in DIGITS and self.peek() != ""

    def is_alpha_prefix(self) -> bool:
        return self.peek() in LETTERS and self.peek() != ""

    def is_hex_prefix(self) -> bool:
        return (
            self.peek() == "0"
            and self.peek(1) in ("x", "X")
            and self.peek(2) in HEX_DIGITS
            and self.peek(2) != ""
        )

    def is_number_prefix(self) -> bool:
        """A digit, or ``-``/``.`` directly followed by a digit."""
        if self.is_digit_prefix():
            return True
        nxt = self.peek(1)
        return self.peek() in ("-", ".") and nxt != "" and nxt in DIGITS

    def leading_alpha(self) -> str:
        """The run of ASCII letters at the cursor, without consuming it."""
        end = self._pos
        while end < len(self._text) and self._text[end] in LETTERS:
            end += 1
        return self._text[self._pos : end]

    def leading_hex(self) -> str:
        """The hex digits after a ``0x`` prefix, without consuming anything."""
        if not self.is_hex_prefix():
            return ""
        end = self._pos + 2
        while end < len(self._text) and self._text[end] in HEX_DIGITS:
            end += 1
        return self._text[self._pos + 2 : end]
