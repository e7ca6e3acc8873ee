"""Shared constants for ldmlengine.

This module provides centralized configuration constants used across the
inheritance, runtime and coverage packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Locale identifiers: the universal root and the document root element
- Hop limits: bounds for alias chains and ancestor walks
- Cache limits: memory bounds for classification caching

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Locale identifiers
    "ROOT_LOCALE",
    "DOCUMENT_ROOT",
    # Hop limits
    "MAX_ALIAS_HOPS",
    "MAX_ANCESTOR_DEPTH",
    # Cache limits
    "DEFAULT_CLASSIFICATION_CACHE_SIZE",
    "MAX_LOCALE_CACHE_SIZE",
]

# ============================================================================
# LOCALE IDENTIFIERS
# ============================================================================

# The universal root locale. Every ancestor chain ends here.
ROOT_LOCALE: str = "root"

# First element of every key in a locale document (//ldml/...).
# Relative coverage patterns are anchored after this segment.
DOCUMENT_ROOT: str = "ldml"

# ============================================================================
# HOP LIMITS
# ============================================================================
#
# Both walks in the resolution engine are iterative loops with an explicit
# counter. The tables are acyclic by construction, so reaching either bound
# means the loaded data is corrupt; the query fails instead of spinning.
#
# Real data needs very few hops: alias chains in locale data rarely exceed
# 3 redirects (e.g. islamic-civil -> islamic -> generic), and the deepest
# ancestor chains are 5 levels (en_Latn_US_POSIX style identifiers plus
# curated parents such as es_AR -> es_419 -> es -> root).
#
# ============================================================================

# Maximum alias redirects followed by a single resolution.
MAX_ALIAS_HOPS: int = 16

# Maximum parent links walked from any locale before root must be reached.
MAX_ANCESTOR_DEPTH: int = 32

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Default maximum (locale, key) entries kept by a classification session.
# None keeps every result for the session's lifetime. An LRU smaller than one
# sweep evicts each entry before a repeated sweep reads it again. Set a bound
# when memory matters more than reuse.
DEFAULT_CLASSIFICATION_CACHE_SIZE: int | None = None

# Maximum cached Babel Locale objects.
MAX_LOCALE_CACHE_SIZE: int = 128
