"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Locale errors (unknown identifiers, parent cycles)
        2000-2999: Resolution errors (alias chains)
        3000-3999: Syntax errors (keys and coverage patterns)
        4000-4999: Data errors (malformed loader input)
    """

    # Locale errors (1000-1999)
    UNKNOWN_LOCALE = 1001
    INVALID_LOCALE_ID = 1002
    PARENT_CYCLE = 1003
    ANCESTOR_DEPTH_EXCEEDED = 1004

    # Resolution errors (2000-2999)
    ALIAS_HOPS_EXCEEDED = 2001

    # Syntax errors (3000-3999)
    MALFORMED_KEY = 3001
    PATTERN_SYNTAX = 3002

    # Data errors (4000-4999)
    INVALID_ALIAS = 4001
    INVALID_RULE = 4002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        locale: Locale identifier involved in the error, if any
        key: Key (xpath text form) involved in the error, if any
        chain: Walk that led to the error (locales or locale/key hops)
        position: Character offset in the parsed text (syntax errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    locale: str | None = None
    key: str | None = None
    chain: tuple[str, ...] | None = None
    position: int | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[ALIAS_HOPS_EXCEEDED]: Alias chain exceeded 16 hops
              = locale: de
              = key: //ldml/dates/calendars/calendar[@type="islamic"]
              = chain: de|a -> de|b -> de|a
              = help: Check the alias table for a redirect cycle

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
