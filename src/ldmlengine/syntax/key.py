"""Structured keys identifying one datum within a locale table.

A Key is an immutable sequence of segments, each an element name plus
attribute name/value pairs. Attributes are held in canonical (name-sorted)
order, so attribute order in the source text never affects equality,
hashing or ordering.

Ordering is structural: segment by segment, element name first, then the
segment's attributes, then the next (child) segment. A proper prefix sorts
before its extensions. ``KeyOrdering`` substitutes a document-order ranking
of element names for the lexical comparison.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from ldmlengine.diagnostics import ErrorTemplate, MalformedKeyError

from .parser import ValueKind, is_valid_name, parse_path, quote_value

__all__ = ["Key", "KeyOrdering", "KeySegment", "StarredKey"]


def _malformed(text: str, reason: str, position: int | None = None) -> MalformedKeyError:
    return MalformedKeyError(ErrorTemplate.malformed_key(text, reason, position))


@dataclass(frozen=True, slots=True, order=True)
class KeySegment:
    """One element of a key path.

    Attributes:
        element: Element name
        attributes: ``(name, value)`` pairs sorted by name
    """

    element: str
    attributes: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        """Validate names and put attributes in canonical order.

        Raises:
            MalformedKeyError: On invalid names or duplicate attributes.
        """
        if not isinstance(self.element, str) or not is_valid_name(self.element):
            raise _malformed(repr(self.element), "invalid element name")
        for pair in self.attributes:
            if not isinstance(pair, tuple) or len(pair) != 2:
                raise _malformed(self.element, f"attribute {pair!r} is not a (name, value) pair")
            name, value = pair
            if not isinstance(name, str) or not is_valid_name(name):
                raise _malformed(self.element, f"invalid attribute name {name!r}")
            if not isinstance(value, str):
                raise _malformed(self.element, f"attribute '{name}' value must be a string")
        ordered = tuple(sorted(self.attributes))
        for previous, current in zip(ordered, ordered[1:], strict=False):
            if previous[0] == current[0]:
                raise _malformed(self.element, f"duplicate attribute '{current[0]}'")
        object.__setattr__(self, "attributes", ordered)

    @classmethod
    def of(cls, element: str, attributes: Mapping[str, str] | None = None) -> KeySegment:
        """Build a segment from an attribute mapping."""
        return cls(element, tuple((attributes or {}).items()))

    def attribute(self, name: str) -> str | None:
        """Value of the named attribute, or None if absent."""
        for attr_name, value in self.attributes:
            if attr_name == name:
                return value
        return None

    @property
    def attribute_names(self) -> frozenset[str]:
        """Names of the attributes present on this segment."""
        return frozenset(name for name, _ in self.attributes)

    def __str__(self) -> str:
        attrs = "".join(f"[@{name}={quote_value(value)}]" for name, value in self.attributes)
        return f"{self.element}{attrs}"


@dataclass(frozen=True, slots=True)
class StarredKey:
    """Attribute-free shape of a key plus the attribute values removed from it.

    Keys that differ only in attribute values share a shape, which makes the
    shape useful for grouping and reporting.

    Example:
        >>> Key.parse('//ldml/a[@type="x"]/b[@alt="y"]').starred()
        StarredKey(shape='//ldml/a[@type="*"]/b[@alt="*"]', values=('x', 'y'))
    """

    shape: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True, order=True)
class Key:
    """Immutable, hashable, totally ordered structured path.

    Example:
        >>> key = Key.parse('//ldml/dates/calendars/calendar[@type="gregorian"]')
        >>> key.last.attribute("type")
        'gregorian'
        >>> str(key.parent)
        '//ldml/dates/calendars'
        >>> Key.parse("//ldml/a") < Key.parse("//ldml/a/b")
        True
    """

    segments: tuple[KeySegment, ...]

    def __post_init__(self) -> None:
        """Reject empty keys and non-segment members.

        Raises:
            MalformedKeyError: If the key has no segments.
        """
        segments = tuple(self.segments)
        if not segments:
            raise _malformed("", "key has no segments")
        for segment in segments:
            if not isinstance(segment, KeySegment):
                raise _malformed(repr(segment), "not a key segment")
        object.__setattr__(self, "segments", segments)

    @classmethod
    def parse(cls, text: str) -> Key:
        """Parse the xpath text form.

        Raises:
            MalformedKeyError: If the text is not a valid key.
        """
        if not isinstance(text, str):
            raise _malformed(repr(text), "key text must be a string")
        return _parse_key(text)

    @classmethod
    def coerce(cls, value: Key | str) -> Key:
        """Accept a Key or its text form.

        Raises:
            MalformedKeyError: For unparsable text or any other type.
        """
        if isinstance(value, Key):
            return value
        if isinstance(value, str):
            return _parse_key(value)
        raise _malformed(repr(value), f"expected Key or str, got {type(value).__name__}")

    @classmethod
    def from_elements(cls, *parts: str | KeySegment) -> Key:
        """Build a key from element names and/or ready segments.

        Example:
            >>> str(Key.from_elements("ldml", "numbers"))
            '//ldml/numbers'
        """
        return cls(tuple(p if isinstance(p, KeySegment) else KeySegment(p) for p in parts))

    def child(self, element: str, attributes: Mapping[str, str] | None = None) -> Key:
        """Key extended by one segment."""
        return Key((*self.segments, KeySegment.of(element, attributes)))

    @property
    def parent(self) -> Key | None:
        """Key with the last segment removed, or None for single-segment keys."""
        if len(self.segments) == 1:
            return None
        return Key(self.segments[:-1])

    @property
    def last(self) -> KeySegment:
        """Final (leaf) segment."""
        return self.segments[-1]

    @property
    def elements(self) -> tuple[str, ...]:
        """Element names in path order."""
        return tuple(segment.element for segment in self.segments)

    def startswith(self, prefix: Key) -> bool:
        """Check whether ``prefix`` is a (not necessarily proper) prefix."""
        n = len(prefix.segments)
        return n <= len(self.segments) and self.segments[:n] == prefix.segments

    def starred(self) -> StarredKey:
        """Replace every attribute value with ``*`` and collect the values."""
        values: list[str] = []
        parts: list[str] = []
        for segment in self.segments:
            attrs = []
            for name, value in segment.attributes:
                values.append(value)
                attrs.append(f'[@{name}="*"]')
            parts.append(segment.element + "".join(attrs))
        return StarredKey("//" + "/".join(parts), tuple(values))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[KeySegment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return "//" + "/".join(str(segment) for segment in self.segments)


@functools.lru_cache(maxsize=4096)
def _parse_key(text: str) -> Key:
    raw = parse_path(
        text,
        patterns=False,
        error=lambda reason, position: _malformed(text, reason, position),
    )
    segments: list[KeySegment] = []
    for raw_segment in raw.segments:
        # The key grammar only produces quoted literals.
        attributes = [
            (raw_attr.name, raw_attr.value or "")
            for raw_attr in raw_segment.attributes
            if raw_attr.kind is ValueKind.LITERAL
        ]
        segments.append(KeySegment(raw_segment.element, tuple(attributes)))
    return Key(tuple(segments))


class KeyOrdering:
    """Document-order comparison of keys.

    Elements listed in ``element_order`` sort by their position in that
    list; unlisted elements sort after all listed ones, lexically among
    themselves. Attributes and prefix rules follow the structural order.

    Example:
        >>> ordering = KeyOrdering(["ldml", "identity", "localeDisplayNames", "dates"])
        >>> keys = [Key.parse("//ldml/dates"), Key.parse("//ldml/identity")]
        >>> [str(k) for k in ordering.sorted(keys)]
        ['//ldml/identity', '//ldml/dates']
    """

    __slots__ = ("_ranks",)

    def __init__(self, element_order: Sequence[str]) -> None:
        self._ranks: dict[str, int] = {}
        for element in element_order:
            self._ranks.setdefault(element, len(self._ranks))

    def rank(self, element: str) -> int:
        """Rank of an element name; unlisted names share the last rank."""
        return self._ranks.get(element, len(self._ranks))

    def sort_key(self, key: Key) -> tuple[tuple[int, str, tuple[tuple[str, str], ...]], ...]:
        """Tuple usable as ``sorted(..., key=ordering.sort_key)``."""
        return tuple(
            (self.rank(segment.element), segment.element, segment.attributes)
            for segment in key.segments
        )

    def sorted(self, keys: Iterable[Key]) -> list[Key]:
        """Return keys in document order."""
        return sorted(keys, key=self.sort_key)

    def compare(self, left: Key, right: Key) -> int:
        """Three-way comparison: negative, zero or positive."""
        a, b = self.sort_key(left), self.sort_key(right)
        return (a > b) - (a < b)
