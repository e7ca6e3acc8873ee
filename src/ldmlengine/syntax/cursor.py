"""Immutable cursor infrastructure for key and pattern parsing.

Implements the immutable cursor pattern for zero-`None` parsing.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)

Keys and coverage patterns are single-line texts, so positions are plain
character offsets; no line/column bookkeeping is needed.
"""

from dataclasses import dataclass

__all__ = ["Cursor", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("ldml/dates", 0)
        >>> cursor.current
        'l'
        >>> cursor.advance(4).current
        '/'
        >>> Cursor("ab", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected end of input at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (original unchanged)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def expect(self, char: str) -> "Cursor | None":
        """Consume character if it matches expected, return None otherwise.

        Example:
            >>> Cursor("[@", 0).expect("[").pos
            1
            >>> Cursor("[@", 0).expect("@") is None
            True
        """
        if not self.is_eof and self.current == char:
            return self.advance()
        return None

    def startswith(self, text: str) -> bool:
        """Check whether the remaining input starts with ``text``."""
        return self.source.startswith(text, self.pos)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result pairing a parsed value with the cursor after it.

    Example:
        >>> result = ParseResult("ldml", Cursor("ldml/dates", 4))
        >>> result.value
        'ldml'
        >>> result.cursor.current
        '/'
    """

    value: T
    cursor: Cursor
