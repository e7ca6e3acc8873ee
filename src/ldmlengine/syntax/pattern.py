"""Key patterns used by coverage rules.

A KeyPattern matches the structural shape of a Key. Segments are element
names or ``*``; ``...`` spans zero or more whole segments. Attribute clauses:

    [@type="gregorian"]          literal value
    [@type="(narrow|wide)"]      any of the listed literal values
    [@type=*]  or  [@type]       any value
    [@type=?]                    any value, captured
    [@count='${Target-Plurals}'] captured, checked against a context set
    [@alt=*]?                    trailing "?": the attribute may be absent

A key segment must not carry attributes the pattern segment does not
mention. Patterns starting with ``/`` are anchored at the first key
segment; all others are anchored after the document root (``ldml``).

Matching is stateless: ``match`` returns a fresh immutable PatternMatch,
so one pattern can be shared freely between threads.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import StrEnum

from ldmlengine.constants import DOCUMENT_ROOT
from ldmlengine.diagnostics import ErrorTemplate, PatternSyntaxError
from ldmlengine.enums import ContextSet

from .key import Key, KeySegment
from .parser import SPAN_ELEMENT, RawAttribute, RawSegment, ValueKind, parse_path

__all__ = ["AttributeMatcher", "KeyPattern", "MatcherKind", "PatternMatch", "SegmentMatcher"]


class MatcherKind(StrEnum):
    """How an attribute matcher treats the attribute value."""

    LITERAL = "literal"
    ANY = "any"
    CAPTURE = "capture"


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Immutable result of a successful match.

    Attributes:
        captures: Captured attribute values in pattern order; an optional
            captured attribute that is absent from the key contributes ``""``
        subject: Value bound to the pattern's context-set variable if it has
            one, else the first capture, else None
    """

    captures: tuple[str, ...]
    subject: str | None


@dataclass(frozen=True, slots=True)
class AttributeMatcher:
    """Constraint on one attribute of a key segment."""

    name: str
    kind: MatcherKind
    values: frozenset[str] = frozenset()
    variable: ContextSet | None = None
    optional: bool = False

    @property
    def captures(self) -> bool:
        """True if this matcher contributes a capture."""
        return self.kind is MatcherKind.CAPTURE

    def accepts(self, value: str | None) -> bool:
        """Check a key's attribute value (None when absent)."""
        if value is None:
            return self.optional
        if self.kind is MatcherKind.LITERAL:
            return value in self.values
        return True

    def __str__(self) -> str:
        if self.variable is not None:
            text = f"[@{self.name}='${{{self.variable.value}}}']"
        elif self.kind is MatcherKind.CAPTURE:
            text = f"[@{self.name}=?]"
        elif self.kind is MatcherKind.ANY:
            text = f"[@{self.name}=*]"
        elif len(self.values) == 1:
            text = f'[@{self.name}="{next(iter(self.values))}"]'
        else:
            text = f'[@{self.name}="({"|".join(sorted(self.values))})"]'
        return text + ("?" if self.optional else "")


@dataclass(frozen=True, slots=True)
class SegmentMatcher:
    """Constraint on one key segment, or a ``...`` span."""

    element: str | None
    attributes: tuple[AttributeMatcher, ...] = ()
    spans: bool = False

    def match(self, segment: KeySegment) -> tuple[str, ...] | None:
        """Captures contributed by this segment, or None on mismatch."""
        if self.element is not None and segment.element != self.element:
            return None
        known = {matcher.name for matcher in self.attributes}
        for name, _ in segment.attributes:
            if name not in known:
                return None
        captures: list[str] = []
        for matcher in self.attributes:
            value = segment.attribute(matcher.name)
            if not matcher.accepts(value):
                return None
            if matcher.captures:
                captures.append(value or "")
        return tuple(captures)

    def __str__(self) -> str:
        if self.spans:
            return SPAN_ELEMENT
        element = self.element if self.element is not None else "*"
        return element + "".join(str(matcher) for matcher in self.attributes)


@dataclass(frozen=True, slots=True)
class KeyPattern:
    """Compiled, immutable key pattern.

    Example:
        >>> pattern = KeyPattern.parse("dates/.../dayPeriod[@type=?]")
        >>> key = Key.parse('//ldml/dates/calendars/dayPeriod[@type="am"]')
        >>> pattern.match(key)
        PatternMatch(captures=('am',), subject='am')
    """

    text: str
    absolute: bool
    segments: tuple[SegmentMatcher, ...]
    variable: ContextSet | None = None
    variable_index: int | None = None

    @classmethod
    def parse(cls, text: str) -> KeyPattern:
        """Compile pattern text.

        Raises:
            PatternSyntaxError: If the text is not a valid pattern.
        """
        if not isinstance(text, str):
            raise PatternSyntaxError(ErrorTemplate.pattern_syntax(repr(text), "not a string"))
        return _compile(text)

    @property
    def capture_count(self) -> int:
        """Number of captures every successful match carries."""
        return sum(
            1 for segment in self.segments for matcher in segment.attributes if matcher.captures
        )

    def match(self, key: Key) -> PatternMatch | None:
        """Match a key, returning its captures or None."""
        segments = key.segments
        if not self.absolute:
            if segments[0].element != DOCUMENT_ROOT:
                return None
            segments = segments[1:]
        captures = self._match_segments(segments)
        if captures is None:
            return None
        if self.variable_index is not None:
            subject: str | None = captures[self.variable_index]
        else:
            subject = captures[0] if captures else None
        return PatternMatch(captures, subject)

    def matches(self, key: Key) -> bool:
        """Boolean form of ``match``."""
        return self.match(key) is not None

    def _match_segments(self, segments: tuple[KeySegment, ...]) -> tuple[str, ...] | None:
        # Single-star backtracking: on mismatch, let the most recent span
        # absorb one more key segment and retry from just after it.
        pattern = self.segments
        p = k = 0
        span_p = -1
        span_k = 0
        span_captures = 0
        captures: list[str] = []
        while k < len(segments):
            if p < len(pattern):
                matcher = pattern[p]
                if matcher.spans:
                    span_p, span_k, span_captures = p, k, len(captures)
                    p += 1
                    continue
                got = matcher.match(segments[k])
                if got is not None:
                    captures.extend(got)
                    p += 1
                    k += 1
                    continue
            if span_p < 0:
                return None
            span_k += 1
            k = span_k
            p = span_p + 1
            del captures[span_captures:]
        while p < len(pattern) and pattern[p].spans:
            p += 1
        return tuple(captures) if p == len(pattern) else None

    def __str__(self) -> str:
        return self.text


def _pattern_error(text: str, reason: str, position: int | None = None) -> PatternSyntaxError:
    return PatternSyntaxError(ErrorTemplate.pattern_syntax(text, reason, position))


@functools.lru_cache(maxsize=1024)
def _compile(text: str) -> KeyPattern:
    raw = parse_path(
        text,
        patterns=True,
        error=lambda reason, position: _pattern_error(text, reason, position),
    )
    segments: list[SegmentMatcher] = []
    variable: ContextSet | None = None
    variable_index: int | None = None
    capture_index = 0
    for raw_segment in raw.segments:
        matcher = _compile_segment(text, raw_segment)
        for attr in matcher.attributes:
            if attr.variable is not None:
                if variable is not None:
                    raise _pattern_error(
                        text, "at most one context-set variable is allowed", raw_segment.position
                    )
                variable = attr.variable
                variable_index = capture_index
            if attr.captures:
                capture_index += 1
        segments.append(matcher)
    return KeyPattern(
        text=text,
        absolute=raw.absolute,
        segments=tuple(segments),
        variable=variable,
        variable_index=variable_index,
    )


def _compile_segment(text: str, raw: RawSegment) -> SegmentMatcher:
    if raw.element == SPAN_ELEMENT:
        return SegmentMatcher(element=None, spans=True)
    seen: set[str] = set()
    matchers: list[AttributeMatcher] = []
    for raw_attr in raw.attributes:
        if raw_attr.name in seen:
            raise _pattern_error(text, f"duplicate attribute '{raw_attr.name}'", raw_attr.position)
        seen.add(raw_attr.name)
        matchers.append(_compile_attribute(text, raw_attr))
    element = None if raw.element == "*" else raw.element
    return SegmentMatcher(element=element, attributes=tuple(matchers))


def _compile_attribute(text: str, raw: RawAttribute) -> AttributeMatcher:
    if raw.kind is ValueKind.ANY:
        return AttributeMatcher(raw.name, MatcherKind.ANY, optional=raw.optional)
    if raw.kind is ValueKind.CAPTURE:
        return AttributeMatcher(raw.name, MatcherKind.CAPTURE, optional=raw.optional)

    value = raw.value or ""
    if value.startswith("${") and value.endswith("}"):
        try:
            variable = ContextSet.parse(value)
        except ValueError:
            raise _pattern_error(
                text, f"unknown context-set variable {value!r}", raw.position
            ) from None
        return AttributeMatcher(
            raw.name, MatcherKind.CAPTURE, variable=variable, optional=raw.optional
        )

    if len(value) > 2 and value.startswith("(") and value.endswith(")"):
        alternatives = value[1:-1].split("|")
        if any(not alt for alt in alternatives):
            raise _pattern_error(text, f"empty alternative in {value!r}", raw.position)
        return AttributeMatcher(
            raw.name, MatcherKind.LITERAL, frozenset(alternatives), optional=raw.optional
        )

    return AttributeMatcher(raw.name, MatcherKind.LITERAL, frozenset({value}), optional=raw.optional)
