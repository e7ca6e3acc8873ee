"""Key and key-pattern syntax.

Provides the structured Key type, its xpath text parser and ordering, and
the KeyPattern language used by coverage rules. Independent of locale data,
so it can be used by tooling that only manipulates paths.

Python 3.13+.
"""

from .cursor import Cursor, ParseResult
from .key import Key, KeyOrdering, KeySegment, StarredKey
from .pattern import AttributeMatcher, KeyPattern, MatcherKind, PatternMatch, SegmentMatcher

__all__ = [
    "AttributeMatcher",
    "Cursor",
    "Key",
    "KeyOrdering",
    "KeyPattern",
    "KeySegment",
    "MatcherKind",
    "ParseResult",
    "PatternMatch",
    "SegmentMatcher",
    "StarredKey",
]
