"""Path text parser shared by keys and coverage patterns.

Both keys (``//ldml/dates/calendars/calendar[@type="gregorian"]``) and
coverage patterns (``dates/.../calendar[@type=*]/dayPeriod[@type=?]``) are
``/``-separated element segments, each followed by bracketed attribute
clauses. This module turns such text into raw segments; ``key`` and
``pattern`` give the raw segments their meaning.

Grammar (pattern-only forms marked with *)::

    path       := ["/" | "//"] segment ("/" segment)*
    segment    := name attribute*  |  "*" attribute* (*)  |  "..." (*)
    attribute  := "[" "@" name "=" value "]" ["?"(*)]  |  "[" "@" name "]" (*)
    value      := '"' chars '"'  |  "'" chars "'"  |  "*" (*)  |  "?" (*)
    name       := [A-Za-z_] [A-Za-z0-9_.:-]*

Inside quoted values a backslash escapes the next character.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ldmlengine.diagnostics import LdmlError

from .cursor import Cursor, ParseResult

__all__ = [
    "ANY_ELEMENT",
    "SPAN_ELEMENT",
    "RawAttribute",
    "RawPath",
    "RawSegment",
    "ValueKind",
    "is_valid_name",
    "parse_path",
    "quote_value",
]

ANY_ELEMENT: str = "*"
SPAN_ELEMENT: str = "..."

_NAME_START: frozenset[str] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_"
)
_NAME_CHARS: frozenset[str] = _NAME_START | frozenset("0123456789.:-")

type ErrorFactory = Callable[[str, int], LdmlError]
"""Builds the exception for a failure reason at a character position."""


class ValueKind(StrEnum):
    """How an attribute clause constrains the attribute value."""

    LITERAL = "literal"
    ANY = "any"
    CAPTURE = "capture"


@dataclass(frozen=True, slots=True)
class RawAttribute:
    """One ``[@name=value]`` clause as written."""

    name: str
    kind: ValueKind
    value: str | None
    optional: bool
    position: int


@dataclass(frozen=True, slots=True)
class RawSegment:
    """One path segment as written."""

    element: str
    attributes: tuple[RawAttribute, ...]
    position: int


@dataclass(frozen=True, slots=True)
class RawPath:
    """Parsed path text.

    Attributes:
        absolute: True if the text started with ``/`` or ``//``
        segments: Segments in document order
    """

    absolute: bool
    segments: tuple[RawSegment, ...]


def is_valid_name(name: str) -> bool:
    """Check element/attribute name syntax."""
    if not name or name[0] not in _NAME_START:
        return False
    return all(ch in _NAME_CHARS for ch in name)


def quote_value(value: str) -> str:
    """Quote an attribute value for the xpath text form.

    Example:
        >>> quote_value('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def parse_path(text: str, *, patterns: bool, error: ErrorFactory) -> RawPath:
    """Parse path text into raw segments.

    Args:
        text: Key or pattern text
        patterns: Accept the wildcard, span, capture and optional forms
        error: Builds the exception raised on the first syntax error

    Raises:
        LdmlError: Whatever ``error`` builds, on the first syntax error.
    """
    return _PathParser(patterns, error).parse(text)


class _PathParser:
    """Recursive-descent parser over an immutable Cursor."""

    __slots__ = ("_error", "_patterns")

    def __init__(self, patterns: bool, error: ErrorFactory) -> None:
        self._patterns = patterns
        self._error = error

    def parse(self, text: str) -> RawPath:
        cursor = Cursor(text, 0)
        if cursor.is_eof:
            raise self._error("empty path", 0)

        absolute = False
        if cursor.startswith("//"):
            absolute = True
            cursor = cursor.advance(2)
        elif cursor.startswith("/"):
            absolute = True
            cursor = cursor.advance()

        segments: list[RawSegment] = []
        while True:
            result = self._parse_segment(cursor)
            segments.append(result.value)
            cursor = result.cursor
            if cursor.is_eof:
                break
            if cursor.current != "/":
                raise self._error(f"expected '/' but found {cursor.current!r}", cursor.pos)
            cursor = cursor.advance()
            if cursor.is_eof:
                raise self._error("trailing '/'", cursor.pos)

        return RawPath(absolute=absolute, segments=tuple(segments))

    def _parse_segment(self, cursor: Cursor) -> ParseResult[RawSegment]:
        start = cursor.pos
        if cursor.is_eof or cursor.current == "/":
            raise self._error("empty segment", start)

        if cursor.startswith(SPAN_ELEMENT):
            if not self._patterns:
                raise self._error("'...' is only allowed in patterns", start)
            cursor = cursor.advance(len(SPAN_ELEMENT))
            if not cursor.is_eof and cursor.current != "/":
                raise self._error("'...' must be a whole segment", cursor.pos)
            return ParseResult(RawSegment(SPAN_ELEMENT, (), start), cursor)

        if cursor.current == ANY_ELEMENT:
            if not self._patterns:
                raise self._error("'*' is only allowed in patterns", start)
            element = ANY_ELEMENT
            cursor = cursor.advance()
        else:
            name_result = self._parse_name(cursor, "element")
            element = name_result.value
            cursor = name_result.cursor

        attributes: list[RawAttribute] = []
        while not cursor.is_eof and cursor.current == "[":
            attr_result = self._parse_attribute(cursor)
            attributes.append(attr_result.value)
            cursor = attr_result.cursor

        return ParseResult(RawSegment(element, tuple(attributes), start), cursor)

    def _parse_name(self, cursor: Cursor, what: str) -> ParseResult[str]:
        start = cursor.pos
        if cursor.is_eof or cursor.current not in _NAME_START:
            found = "end of input" if cursor.is_eof else repr(cursor.current)
            raise self._error(f"expected {what} name but found {found}", start)
        while not cursor.is_eof and cursor.current in _NAME_CHARS:
            cursor = cursor.advance()
        return ParseResult(Cursor(cursor.source, start).slice_to(cursor.pos), cursor)

    def _parse_attribute(self, cursor: Cursor) -> ParseResult[RawAttribute]:
        start = cursor.pos
        cursor = cursor.advance()  # "["
        after_at = cursor.expect("@")
        if after_at is None:
            raise self._error("expected '@' after '['", cursor.pos)
        name_result = self._parse_name(after_at, "attribute")
        name = name_result.value
        cursor = name_result.cursor

        after_close = cursor.expect("]")
        if after_close is not None:
            # [@name] means "present with any value"
            if not self._patterns:
                raise self._error(f"attribute '{name}' has no value", cursor.pos)
            return self._finish_attribute(
                after_close, RawAttribute(name, ValueKind.ANY, None, False, start)
            )

        after_eq = cursor.expect("=")
        if after_eq is None:
            raise self._error(f"expected '=' after attribute '{name}'", cursor.pos)
        cursor = after_eq

        kind, value, cursor = self._parse_value(cursor)

        after_close = cursor.expect("]")
        if after_close is None:
            raise self._error(f"expected ']' to close attribute '{name}'", cursor.pos)
        return self._finish_attribute(after_close, RawAttribute(name, kind, value, False, start))

    def _finish_attribute(
        self, cursor: Cursor, attribute: RawAttribute
    ) -> ParseResult[RawAttribute]:
        if self._patterns and not cursor.is_eof and cursor.current == "?":
            attribute = RawAttribute(
                attribute.name, attribute.kind, attribute.value, True, attribute.position
            )
            cursor = cursor.advance()
        return ParseResult(attribute, cursor)

    def _parse_value(self, cursor: Cursor) -> tuple[ValueKind, str | None, Cursor]:
        if cursor.is_eof:
            raise self._error("expected attribute value", cursor.pos)
        ch = cursor.current
        if ch in ('"', "'"):
            result = self._parse_quoted(cursor)
            return ValueKind.LITERAL, result.value, result.cursor
        if ch in ("*", "?"):
            if not self._patterns:
                raise self._error(f"{ch!r} is only allowed in patterns", cursor.pos)
            kind = ValueKind.ANY if ch == "*" else ValueKind.CAPTURE
            return kind, None, cursor.advance()
        raise self._error(f"expected quoted value but found {ch!r}", cursor.pos)

    def _parse_quoted(self, cursor: Cursor) -> ParseResult[str]:
        start = cursor.pos
        quote = cursor.current
        cursor = cursor.advance()
        chars: list[str] = []
        while True:
            if cursor.is_eof:
                raise self._error("unterminated quoted value", start)
            ch = cursor.current
            if ch == quote:
                return ParseResult("".join(chars), cursor.advance())
            if ch == "\\":
                cursor = cursor.advance()
                if cursor.is_eof:
                    raise self._error("dangling escape in quoted value", cursor.pos)
                ch = cursor.current
            chars.append(ch)
            cursor = cursor.advance()
