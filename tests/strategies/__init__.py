"""Hypothesis strategies for ldmlengine property-based testing.

Strategies are organized by domain:

- locales: Locale identifiers, spellings and locale trees
- keys: Key segments, keys and attribute values

Usage:
    from tests.strategies import keys, locale_ids
    from tests.strategies.locales import locale_trees

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - locale_ids, locale_spellings, locale_trees
    - keys, attribute_values
"""

from .keys import attribute_values, element_names, key_segments, keys
from .locales import language_codes, locale_ids, locale_spellings, locale_trees

__all__ = [
    "attribute_values",
    "element_names",
    "key_segments",
    "keys",
    "language_codes",
    "locale_ids",
    "locale_spellings",
    "locale_trees",
]
