"""Locale identifier parsing and canonical form.

Centralizes locale normalization used throughout the codebase so that tree
lookups, store registry keys and classification cache keys all agree on a
single spelling of each locale.

Canonical form: ``language[_Script][_REGION][_VARIANT...]`` with the
language lower case, the script title case, the region and variants upper
case. ``-`` and ``_`` are both accepted as separators. The universal root
locale is spelled ``root``.

Python 3.13+.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ldmlengine.constants import MAX_LOCALE_CACHE_SIZE, ROOT_LOCALE
from ldmlengine.core.babel_compat import require_babel
from ldmlengine.diagnostics import ErrorTemplate, InvalidLocaleError

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "LocaleId",
    "canonicalize_locale",
    "get_babel_locale",
    "is_root_locale",
    "normalize_locale",
]

_LANGUAGE = re.compile(r"[A-Za-z]{2,3}|[A-Za-z]{5,8}")
_SCRIPT = re.compile(r"[A-Za-z]{4}")
_REGION = re.compile(r"[A-Za-z]{2}|[0-9]{3}")
_VARIANT = re.compile(r"[A-Za-z0-9]{1,8}")


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 separators to the underscore form.

    Example:
        >>> normalize_locale("zh-Hant-HK")
        'zh_Hant_HK'
    """
    return locale_code.replace("-", "_")


def is_root_locale(locale_code: str) -> bool:
    """Return True if ``locale_code`` spells the universal root locale."""
    return locale_code.strip().lower() == ROOT_LOCALE


@dataclass(frozen=True, slots=True)
class LocaleId:
    """Parsed locale identifier.

    The root locale is represented with ``language == "root"`` and no
    other subtags.

    Attributes:
        language: Lower case language subtag (or ``root``)
        script: Title case script subtag, if any
        region: Upper case region subtag, if any
        variants: Upper case variant subtags, in order
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    @classmethod
    def parse(cls, locale_code: str) -> LocaleId:
        """Parse a locale identifier into its subtags.

        Raises:
            InvalidLocaleError: If the text is not a well-formed identifier.

        Example:
            >>> LocaleId.parse("zh-hant-hk")
            LocaleId(language='zh', script='Hant', region='HK', variants=())
        """
        if not isinstance(locale_code, str):
            raise InvalidLocaleError(
                ErrorTemplate.invalid_locale_id(repr(locale_code), "not a string")
            )
        return _parse_locale(locale_code)

    @property
    def is_root(self) -> bool:
        """True for the universal root locale."""
        return self.language == ROOT_LOCALE

    def truncate(self) -> LocaleId | None:
        """Return the identifier with its last subtag removed.

        Drops the last variant, then the region, then the script. A bare
        language (and root itself) truncates to None.

        Example:
            >>> str(LocaleId.parse("zh_Hant_HK").truncate())
            'zh_Hant'
        """
        if self.variants:
            return LocaleId(self.language, self.script, self.region, self.variants[:-1])
        if self.region is not None:
            return LocaleId(self.language, self.script)
        if self.script is not None:
            return LocaleId(self.language)
        return None

    def truncations(self) -> tuple[str, ...]:
        """All successive truncations, nearest first, excluding root."""
        result: list[str] = []
        current = self.truncate()
        while current is not None:
            result.append(str(current))
            current = current.truncate()
        return tuple(result)

    def __str__(self) -> str:
        parts = [self.language]
        if self.script is not None:
            parts.append(self.script)
        if self.region is not None:
            parts.append(self.region)
        parts.extend(self.variants)
        return "_".join(parts)


@functools.lru_cache(maxsize=1024)
def _parse_locale(locale_code: str) -> LocaleId:
    text = normalize_locale(locale_code.strip())
    if not text:
        raise InvalidLocaleError(ErrorTemplate.invalid_locale_id(locale_code, "empty identifier"))
    if text.lower() == ROOT_LOCALE:
        return LocaleId(ROOT_LOCALE)

    subtags = text.split("_")
    if any(not subtag for subtag in subtags):
        raise InvalidLocaleError(ErrorTemplate.invalid_locale_id(locale_code, "empty subtag"))

    language = subtags[0]
    if not _LANGUAGE.fullmatch(language):
        raise InvalidLocaleError(
            ErrorTemplate.invalid_locale_id(locale_code, f"invalid language subtag '{language}'")
        )

    index = 1
    script: str | None = None
    region: str | None = None
    if index < len(subtags) and _SCRIPT.fullmatch(subtags[index]):
        script = subtags[index].title()
        index += 1
    if index < len(subtags) and _REGION.fullmatch(subtags[index]):
        region = subtags[index].upper()
        index += 1

    variants: list[str] = []
    for subtag in subtags[index:]:
        if not _VARIANT.fullmatch(subtag):
            raise InvalidLocaleError(
                ErrorTemplate.invalid_locale_id(locale_code, f"invalid subtag '{subtag}'")
            )
        variants.append(subtag.upper())

    return LocaleId(language.lower(), script, region, tuple(variants))


def canonicalize_locale(locale_code: str) -> str:
    """Return the canonical spelling of a locale identifier.

    Raises:
        InvalidLocaleError: If the text is not a well-formed identifier.

    Example:
        >>> canonicalize_locale("en-us-posix")
        'en_US_POSIX'
        >>> canonicalize_locale("ROOT")
        'root'
    """
    return str(LocaleId.parse(locale_code))


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Raises:
        BabelImportError: If Babel is not installed
        babel.core.UnknownLocaleError: If Babel has no data for the locale
        ValueError: If locale format is invalid
    """
    require_babel("get_babel_locale")
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))
