"""Per-language context sets for coverage rules.

A coverage rule may require a captured attribute value to be relevant to
the locale: a territory the language is spoken in, a currency of one of
those territories, one of the language's plural categories, and so on.
CoverageContext holds those sets for one language.

Contexts can be supplied by the caller or derived from Babel's bundled CLDR
supplemental data (``pip install ldmlengine[babel]``).

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from ldmlengine.core.babel_compat import (
    get_global_data,
    get_unknown_locale_error,
    is_babel_available,
    require_babel,
)
from ldmlengine.enums import ContextSet
from ldmlengine.locale_utils import get_babel_locale

__all__ = ["ContextProvider", "CoverageContext", "default_context"]

logger = logging.getLogger(__name__)

# Official status values in Babel's territory_languages table that make a
# territory a target of the language.
_OFFICIAL_STATUSES: frozenset[str] = frozenset(
    {"official", "de_facto_official", "official_regional"}
)

# Territories where a non-official language has at least this share of
# speakers are targets as well.
_MIN_POPULATION_PERCENT: float = 50.0

# Explicit numeric plural forms (count="0", count="1") are relevant to
# every language.
_EXPLICIT_PLURALS: frozenset[str] = frozenset({"0", "1"})

_DEFAULT_CALENDARS: frozenset[str] = frozenset({"gregorian"})


@dataclass(frozen=True, slots=True)
class CoverageContext:
    """Context sets of one language.

    Attributes:
        language: Language subtag the sets belong to
        scripts: Scripts the language is written in
        territories: Territories where the language is a target
        timezones: Time zone ids of those territories
        currencies: Current tender currencies of those territories
        plurals: Plural categories of the language (plus "0" and "1")
        calendars: Calendar types relevant to the language
    """

    language: str
    scripts: frozenset[str] = frozenset()
    territories: frozenset[str] = frozenset()
    timezones: frozenset[str] = frozenset()
    currencies: frozenset[str] = frozenset()
    plurals: frozenset[str] = frozenset()
    calendars: frozenset[str] = _DEFAULT_CALENDARS

    @classmethod
    def create(
        cls,
        language: str,
        *,
        scripts: Iterable[str] = (),
        territories: Iterable[str] = (),
        timezones: Iterable[str] = (),
        currencies: Iterable[str] = (),
        plurals: Iterable[str] = (),
        calendars: Iterable[str] = _DEFAULT_CALENDARS,
    ) -> CoverageContext:
        """Build a context from any iterables.

        Example:
            >>> ctx = CoverageContext.create("de", territories=["DE", "AT"])
            >>> ctx.contains(ContextSet.TARGET_TERRITORIES, "AT")
            True
        """
        return cls(
            language=language,
            scripts=frozenset(scripts),
            territories=frozenset(territories),
            timezones=frozenset(timezones),
            currencies=frozenset(currencies),
            plurals=frozenset(plurals),
            calendars=frozenset(calendars),
        )

    @classmethod
    def unknown(cls, language: str) -> CoverageContext:
        """Context of a language nothing is known about."""
        return cls.create(
            language,
            scripts=["Zzzz"],
            territories=["ZZ"],
            plurals=["0", "1", "other"],
        )

    @classmethod
    def from_babel(cls, language: str) -> CoverageContext:
        """Derive the context of ``language`` from Babel's CLDR data.

        Languages Babel has no data for get ``unknown(language)``.

        Raises:
            BabelImportError: If Babel is not installed
        """
        require_babel("CoverageContext.from_babel")
        unknown_locale_error = get_unknown_locale_error()

        try:
            locale = get_babel_locale(language)
        except (unknown_locale_error, ValueError):
            logger.debug("Babel has no data for %s; using unknown context", language)
            return cls.unknown(language)

        likely: Mapping[str, str] = get_global_data("likely_subtags")
        territory_languages: Mapping[str, Mapping[str, Mapping[str, object]]] = get_global_data(
            "territory_languages"
        )
        territory_zones: Mapping[str, Iterable[str]] = get_global_data("territory_zones")
        territory_currencies: Mapping[str, Iterable[tuple[object, ...]]] = get_global_data(
            "territory_currencies"
        )

        scripts: set[str] = set()
        territories: set[str] = set()
        maximized = likely.get(language)
        if maximized:
            parts = maximized.split("_")
            for part in parts[1:]:
                if len(part) == 4 and part.isalpha():
                    scripts.add(part.title())
                elif len(part) == 2 and part.isalpha():
                    territories.add(part.upper())

        for territory, languages in territory_languages.items():
            for lang_code, info in languages.items():
                subtags = lang_code.split("_")
                if subtags[0] != language:
                    continue
                if len(subtags) > 1 and len(subtags[1]) == 4:
                    scripts.add(subtags[1].title())
                status = info.get("official_status")
                percent = info.get("population_percent") or 0.0
                if status in _OFFICIAL_STATUSES or (
                    isinstance(percent, (int, float)) and percent >= _MIN_POPULATION_PERCENT
                ):
                    territories.add(territory)

        timezones: set[str] = set()
        currencies: set[str] = set()
        for territory in territories:
            timezones.update(territory_zones.get(territory, ()))
            # (code, start, end, tender): end None means still in use
            for currency in territory_currencies.get(territory, ()):
                if currency[2] is None and currency[3]:
                    currencies.add(str(currency[0]))

        plurals = set(locale.plural_form.tags) | {"other"} | _EXPLICIT_PLURALS

        context = cls.create(
            language,
            scripts=scripts or {"Zzzz"},
            territories=territories or {"ZZ"},
            timezones=timezones,
            currencies=currencies,
            plurals=plurals,
        )
        logger.info(
            "Derived coverage context for %s: %d scripts, %d territories, %d plural categories",
            language,
            len(context.scripts),
            len(context.territories),
            len(context.plurals),
        )
        return context

    def members(self, context_set: ContextSet) -> frozenset[str]:
        """Members of one context set."""
        match context_set:
            case ContextSet.TARGET_LANGUAGE:
                return frozenset({self.language})
            case ContextSet.TARGET_SCRIPTS:
                return self.scripts
            case ContextSet.TARGET_TERRITORIES:
                return self.territories
            case ContextSet.TARGET_TIMEZONES:
                return self.timezones
            case ContextSet.TARGET_CURRENCIES:
                return self.currencies
            case ContextSet.TARGET_PLURALS:
                return self.plurals
            case ContextSet.CALENDAR_LIST:
                return self.calendars

    def contains(self, context_set: ContextSet, value: str | None) -> bool:
        """Membership test used by rule predicates.

        For plural categories an absent or empty value counts as a member,
        since the ``count`` attribute is optional on plural-bearing keys.
        """
        if not value:
            return context_set is ContextSet.TARGET_PLURALS
        return value in self.members(context_set)


type ContextProvider = Mapping[str, CoverageContext] | Callable[[str], CoverageContext]
"""Where a classifier gets contexts: a table by language or a factory."""


def default_context(language: str) -> CoverageContext:
    """Babel-derived context when Babel is installed, else the unknown context."""
    if is_babel_available():
        return CoverageContext.from_babel(language)
    return CoverageContext.unknown(language)
