"""Diagnostic system for ldmlengine errors.

Provides structured error diagnostics with codes, hints and the locale/key
context of the failing query.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    AliasCycleError,
    InvalidAliasError,
    InvalidLocaleError,
    InvalidRuleError,
    LdmlError,
    LocaleCycleError,
    MalformedKeyError,
    PatternSyntaxError,
    UnknownLocaleError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "AliasCycleError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "InvalidAliasError",
    "InvalidLocaleError",
    "InvalidRuleError",
    "LdmlError",
    "LocaleCycleError",
    "MalformedKeyError",
    "OutputFormat",
    "PatternSyntaxError",
    "UnknownLocaleError",
]
