"""Enumerations for ldmlengine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion where the
members are names, and IntEnum where the members carry a numeric rank
that defines their order.

Python 3.13+.
"""

from enum import IntEnum, StrEnum

__all__ = [
    "ContextSet",
    "CoverageLevel",
    "DraftStatus",
    "ParentKind",
    "StepKind",
]


class DraftStatus(StrEnum):
    """Approval status of a single store entry.

    Members are declared from least to most trusted; ``rank`` exposes that
    order so a minimal status can be used as a filter.
    """

    UNCONFIRMED = "unconfirmed"
    PROVISIONAL = "provisional"
    CONTRIBUTED = "contributed"
    APPROVED = "approved"

    @property
    def rank(self) -> int:
        """Position in the trust order (0 = least trusted)."""
        return _DRAFT_ORDER.index(self)

    def meets(self, minimum: "DraftStatus") -> bool:
        """Return True if this status is at least as trusted as ``minimum``."""
        return self.rank >= minimum.rank


_DRAFT_ORDER: tuple[DraftStatus, ...] = tuple(DraftStatus)


class ParentKind(StrEnum):
    """How a locale's parent link was established."""

    IMPLICIT = "implicit"
    """Derived by truncating the identifier: de_AT -> de"""

    EXPLICIT = "explicit"
    """Curated override: es_AR -> es_419"""


class StepKind(StrEnum):
    """Kind of step recorded in a resolution trace."""

    LOOKUP = "lookup"
    """Store of the current locale checked for the current key"""

    ALIAS = "alias"
    """Alias redirect followed to a new (locale, key)"""

    ASCEND = "ascend"
    """Moved to the parent of the current locale"""


class CoverageLevel(IntEnum):
    """Required-presence tier of a key, from least to most demanding.

    Values are the numeric levels used in coverage data files, so
    ``CoverageLevel(60)`` and ``CoverageLevel.parse("moderate")`` both work.
    A key whose level is at or below a locale's target level is required
    for that locale.
    """

    CORE = 10
    POSIX = 20
    MINIMAL = 30
    BASIC = 40
    MODERATE = 60
    MODERN = 80
    COMPREHENSIVE = 100
    OPTIONAL = 101

    @classmethod
    def parse(cls, value: "str | int | CoverageLevel") -> "CoverageLevel":
        """Parse a level from its name (any case) or numeric value.

        Raises:
            ValueError: If the value names no level.
        """
        if isinstance(value, CoverageLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        text = value.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            msg = f"Unknown coverage level: {value!r}"
            raise ValueError(msg) from None


class ContextSet(StrEnum):
    """Per-language context set a coverage rule capture is checked against.

    Values use the variable spelling of coverage data (``${Target-Plurals}``).
    """

    TARGET_LANGUAGE = "Target-Language"
    TARGET_SCRIPTS = "Target-Scripts"
    TARGET_TERRITORIES = "Target-Territories"
    TARGET_TIMEZONES = "Target-TimeZones"
    TARGET_CURRENCIES = "Target-Currencies"
    TARGET_PLURALS = "Target-Plurals"
    CALENDAR_LIST = "Calendar-List"

    @classmethod
    def parse(cls, name: str) -> "ContextSet":
        """Parse ``Target_Plurals``, ``Target-Plurals`` or ``${Target-Plurals}``.

        Raises:
            ValueError: If the name is not a known context set.
        """
        text = name.strip()
        if text.startswith("${") and text.endswith("}"):
            text = text[2:-1]
        wanted = text.replace("_", "-").lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        msg = f"Unknown coverage context set: {name!r}"
        raise ValueError(msg)
