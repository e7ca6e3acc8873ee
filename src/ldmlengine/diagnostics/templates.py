"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Every factory returns a Diagnostic carrying the structured context
    (locale, key, chain) so callers can inspect failures without parsing
    message text.
    """

    @staticmethod
    def unknown_locale(locale: str) -> Diagnostic:
        """Locale identifier not present in the locale tree."""
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_LOCALE,
            message=f"Locale '{locale}' is not in the locale tree",
            hint="Load the locale's table or declare it before querying it",
            locale=locale,
        )

    @staticmethod
    def invalid_locale_id(locale: str, reason: str) -> Diagnostic:
        """Locale identifier that cannot be parsed."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_LOCALE_ID,
            message=f"Invalid locale identifier '{locale}': {reason}",
            hint="Use language[_Script][_REGION][_VARIANT] (e.g. 'zh_Hant_HK')",
            locale=locale,
        )

    @staticmethod
    def parent_cycle(cycle: Sequence[str]) -> Diagnostic:
        """Explicit parent links form a cycle."""
        return Diagnostic(
            code=DiagnosticCode.PARENT_CYCLE,
            message=f"Parent locales form a cycle: {' -> '.join(cycle)}",
            hint="Every explicit parent chain must end at the root locale",
            locale=cycle[0] if cycle else None,
            chain=tuple(cycle),
        )

    @staticmethod
    def ancestor_depth_exceeded(locale: str, max_depth: int, chain: Sequence[str]) -> Diagnostic:
        """Parent walk did not reach root within the configured bound."""
        return Diagnostic(
            code=DiagnosticCode.ANCESTOR_DEPTH_EXCEEDED,
            message=f"Ancestor chain of '{locale}' exceeded {max_depth} steps",
            hint="Check the parent table for a cycle or raise max_ancestor_depth",
            locale=locale,
            chain=tuple(chain),
        )

    @staticmethod
    def alias_hops_exceeded(
        locale: str, key: str, max_hops: int, chain: Sequence[str]
    ) -> Diagnostic:
        """Alias redirects exceeded the configured bound."""
        return Diagnostic(
            code=DiagnosticCode.ALIAS_HOPS_EXCEEDED,
            message=f"Alias chain exceeded {max_hops} hops",
            hint="Check the alias table for a redirect cycle",
            locale=locale,
            key=key,
            chain=tuple(chain),
        )

    @staticmethod
    def malformed_key(text: str, reason: str, position: int | None = None) -> Diagnostic:
        """Key text or components that do not form a valid key."""
        return Diagnostic(
            code=DiagnosticCode.MALFORMED_KEY,
            message=f"Malformed key {text!r}: {reason}",
            hint='Keys look like //ldml/dates/calendars/calendar[@type="gregorian"]',
            key=text,
            position=position,
        )

    @staticmethod
    def pattern_syntax(text: str, reason: str, position: int | None = None) -> Diagnostic:
        """Coverage pattern that cannot be parsed."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_SYNTAX,
            message=f"Invalid key pattern {text!r}: {reason}",
            hint="Segments are element names or '*', '...' spans segments, "
            "attributes use [@name=\"value\"], [@name=*] or [@name=?]",
            position=position,
        )

    @staticmethod
    def invalid_alias(locale: str | None, key: str, reason: str) -> Diagnostic:
        """Alias entry rejected at load time."""
        where = f" in '{locale}'" if locale else ""
        return Diagnostic(
            code=DiagnosticCode.INVALID_ALIAS,
            message=f"Invalid alias {key}{where}: {reason}",
            locale=locale,
            key=key,
        )

    @staticmethod
    def invalid_rule(match: str, reason: str) -> Diagnostic:
        """Coverage rule rejected at load time."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_RULE,
            message=f"Invalid coverage rule {match!r}: {reason}",
        )
