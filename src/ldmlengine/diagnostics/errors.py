"""ldmlengine exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Every error is local to the query (or load step) that raised it: no
exception here leaves shared state modified.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class LdmlError(Exception):
    """Base exception for all ldmlengine errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LdmlError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class UnknownLocaleError(LdmlError, LookupError):
    """Query references a locale identifier absent from the locale tree.

    Never silently defaulted to root.
    """

    @property
    def locale(self) -> str | None:
        """The unknown locale identifier."""
        return self.diagnostic.locale if self.diagnostic else None


class InvalidLocaleError(LdmlError, ValueError):
    """Locale identifier text is not well formed."""


class LocaleCycleError(LdmlError):
    """Parent links do not reach the root locale.

    Raised at tree construction for cycles among explicit parents, and while
    walking when a chain exceeds the configured maximum depth.
    """


class AliasCycleError(LdmlError):
    """Alias redirect chain exceeded the configured hop bound.

    Fatal to the single query that raised it.
    """

    @property
    def chain(self) -> tuple[str, ...]:
        """Visited ``locale|key`` hops, in order."""
        if self.diagnostic is None or self.diagnostic.chain is None:
            return ()
        return self.diagnostic.chain


class MalformedKeyError(LdmlError, ValueError):
    """Structurally invalid key passed to parsing, resolution or classification."""


class PatternSyntaxError(LdmlError, ValueError):
    """Coverage key pattern text cannot be parsed."""


class InvalidAliasError(LdmlError, ValueError):
    """Alias entry rejected while building the alias table."""


class InvalidRuleError(LdmlError, ValueError):
    """Coverage rule rejected while building the rule set."""
