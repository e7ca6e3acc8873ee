"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        max_chain_length: Maximum chain entries shown before eliding the middle

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.unknown_locale("xx_YY")))
        UNKNOWN_LOCALE: Locale 'xx_YY' is not in the locale tree
    """

    output_format: OutputFormat = OutputFormat.RUST
    max_chain_length: int = 12

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic."""
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        lines = [f"{diagnostic.severity}[{diagnostic.code.name}]: {diagnostic.message}"]
        if diagnostic.position is not None:
            lines.append(f"  --> offset {diagnostic.position}")
        if diagnostic.locale is not None:
            lines.append(f"  = locale: {diagnostic.locale}")
        if diagnostic.key is not None:
            lines.append(f"  = key: {diagnostic.key}")
        if diagnostic.chain:
            lines.append(f"  = chain: {self._format_chain(diagnostic.chain)}")
        if diagnostic.hint:
            lines.append(f"  = help: {diagnostic.hint}")
        return "\n".join(lines)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        return f"{diagnostic.code.name}: {diagnostic.message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        data = {
            "code": diagnostic.code.name,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
            "hint": diagnostic.hint,
            "locale": diagnostic.locale,
            "key": diagnostic.key,
            "chain": list(diagnostic.chain) if diagnostic.chain else None,
            "position": diagnostic.position,
        }
        return json.dumps(data, ensure_ascii=False)

    def _format_chain(self, chain: tuple[str, ...]) -> str:
        if len(chain) <= self.max_chain_length:
            return " -> ".join(chain)
        half = self.max_chain_length // 2
        return " -> ".join((*chain[:half], "...", *chain[-half:]))
