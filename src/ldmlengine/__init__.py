"""ldmlengine - locale inheritance resolution and coverage classification.

Resolves path-keyed values in a hierarchical locale dataset: each locale is a
sparse table that inherits unset entries from its parent locale, with
aliases that reroute a lookup to another key or locale. A companion
classifier assigns each key the coverage level at which a locale is
required to provide it.

Public API:
    EngineContext - Locale tree, alias table and lazy stores, built once
    ResolutionEngine - resolve / inherited_value over an EngineContext
    CoverageClassifier - classify(locale, key) -> CoverageLevel
    CoverageRule / CoverageRuleSet - Pattern rules in priority order
    Key / KeyPattern - Structured paths and the patterns that match them

Exceptions:
    LdmlError - Base exception class
    UnknownLocaleError - Locale not in the locale tree
    LocaleCycleError - Parent links do not reach root
    AliasCycleError - Alias chain exceeded the hop bound
    MalformedKeyError - Invalid key
    PatternSyntaxError - Invalid coverage pattern

Submodules:
    ldmlengine.syntax - Keys, key ordering and key patterns
    ldmlengine.inheritance - Locale tree and alias table
    ldmlengine.runtime - Stores, registry, context and resolver
    ldmlengine.coverage - Coverage contexts, rules and classifier
    ldmlengine.diagnostics - Error types and diagnostic formatting
"""

from .coverage import CoverageClassifier, CoverageContext, CoverageRule, CoverageRuleSet
from .diagnostics import (
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
from .enums import ContextSet, CoverageLevel, DraftStatus
from .inheritance import AliasEntry, AliasTable, LocaleTree
from .runtime import (
    EngineConfig,
    EngineContext,
    LocaleDataSource,
    MappingDataSource,
    ResolutionEngine,
    ResolutionResult,
)
from .syntax import Key, KeyPattern

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("ldmlengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AliasCycleError",
    "AliasEntry",
    "AliasTable",
    "ContextSet",
    "CoverageClassifier",
    "CoverageContext",
    "CoverageLevel",
    "CoverageRule",
    "CoverageRuleSet",
    "DraftStatus",
    "EngineConfig",
    "EngineContext",
    "InvalidAliasError",
    "InvalidLocaleError",
    "InvalidRuleError",
    "Key",
    "KeyPattern",
    "LdmlError",
    "LocaleCycleError",
    "LocaleDataSource",
    "LocaleTree",
    "MalformedKeyError",
    "MappingDataSource",
    "PatternSyntaxError",
    "ResolutionEngine",
    "ResolutionResult",
    "UnknownLocaleError",
    "__version__",
]
