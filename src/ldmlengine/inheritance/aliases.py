"""Alias table: exact (locale, key) redirects.

An alias entry reroutes a lookup of one key to a different key, a different
locale, or both. Only exact (locale, key) pairs redirect; pattern-based
aliases in source data are expanded into exact entries by the loader.

The table is immutable after construction and safe for concurrent reads.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from ldmlengine.diagnostics import ErrorTemplate, InvalidAliasError, InvalidLocaleError
from ldmlengine.locale_utils import canonicalize_locale
from ldmlengine.syntax import Key

from .graph import detect_cycles

__all__ = ["AliasEntry", "AliasTable"]

type AliasNode = tuple[str, Key]


@dataclass(frozen=True, slots=True)
class AliasEntry:
    """Redirect registered for one source key.

    Attributes:
        source: Key the alias is registered on
        target_key: Key to look up instead; None keeps the source key
        target_locale: Locale to look in instead; None keeps the current one
    """

    source: Key
    target_key: Key | None = None
    target_locale: str | None = None

    def __post_init__(self) -> None:
        """Coerce key text and require at least one target component.

        Raises:
            MalformedKeyError: If a key is malformed
            InvalidAliasError: If neither target component is given
        """
        object.__setattr__(self, "source", Key.coerce(self.source))
        if self.target_key is not None:
            object.__setattr__(self, "target_key", Key.coerce(self.target_key))
        if self.target_key is None and self.target_locale is None:
            raise InvalidAliasError(
                ErrorTemplate.invalid_alias(
                    None, str(self.source), "alias needs a target key or a target locale"
                )
            )

    @classmethod
    def create(
        cls,
        source: Key | str,
        *,
        key: Key | str | None = None,
        locale: str | None = None,
    ) -> AliasEntry:
        """Build an entry from keys or key text.

        Example:
            >>> entry = AliasEntry.create(
            ...     "//ldml/dates/calendars/calendar[@type=\\"islamic-civil\\"]/months",
            ...     key='//ldml/dates/calendars/calendar[@type="islamic"]/months',
            ... )
            >>> entry.target_locale is None
            True
        """
        return cls(
            Key.coerce(source),
            Key.coerce(key) if key is not None else None,
            locale,
        )

    def redirect(self, locale: str, key: Key) -> AliasNode:
        """Target of this entry when hit at ``(locale, key)``."""
        return (
            self.target_locale if self.target_locale is not None else locale,
            self.target_key if self.target_key is not None else key,
        )


class AliasTable:
    """Immutable map of ``locale -> source key -> AliasEntry``.

    Locales are stored in canonical form; lookups accept any spelling of a
    locale identifier.
    """

    __slots__ = ("_count", "_table")

    def __init__(self, entries: Mapping[str, Iterable[AliasEntry]] | None = None) -> None:
        """Build and validate the table.

        Raises:
            InvalidLocaleError: If a locale identifier is malformed
            InvalidAliasError: On duplicate sources or self-redirects
        """
        table: dict[str, dict[Key, AliasEntry]] = {}
        count = 0
        for locale, locale_entries in (entries or {}).items():
            locale_id = canonicalize_locale(locale)
            by_source = table.setdefault(locale_id, {})
            for entry in locale_entries:
                if entry.target_locale is not None:
                    entry = AliasEntry(
                        entry.source, entry.target_key, canonicalize_locale(entry.target_locale)
                    )
                if entry.source in by_source:
                    raise InvalidAliasError(
                        ErrorTemplate.invalid_alias(
                            locale_id, str(entry.source), "duplicate alias for this key"
                        )
                    )
                if entry.redirect(locale_id, entry.source) == (locale_id, entry.source):
                    raise InvalidAliasError(
                        ErrorTemplate.invalid_alias(
                            locale_id, str(entry.source), "alias redirects to itself"
                        )
                    )
                by_source[entry.source] = entry
                count += 1
        self._table = {locale: dict(sources) for locale, sources in table.items() if sources}
        self._count = count

    def resolve_alias(self, locale: str, key: Key | str) -> AliasNode | None:
        """Immediate redirect target for an exact ``(locale, key)``, or None.

        Missing target components are filled from the query.

        Raises:
            InvalidLocaleError: If the locale identifier is malformed
        """
        locale = canonicalize_locale(locale)
        by_source = self._table.get(locale)
        if by_source is None:
            return None
        source = Key.coerce(key)
        entry = by_source.get(source)
        if entry is None:
            return None
        return entry.redirect(locale, source)

    def entries_for(self, locale: str) -> tuple[AliasEntry, ...]:
        """All entries registered in ``locale``, in key order."""
        by_source = self._table.get(canonicalize_locale(locale), {})
        return tuple(by_source[key] for key in sorted(by_source))

    def locales(self) -> frozenset[str]:
        """Locales that register at least one alias."""
        return frozenset(self._table)

    def target_locales(self) -> frozenset[str]:
        """Locales named as explicit alias targets."""
        return frozenset(
            entry.target_locale
            for sources in self._table.values()
            for entry in sources.values()
            if entry.target_locale is not None
        )

    def find_cycles(self) -> list[list[AliasNode]]:
        """Pure alias cycles, each as a list of ``(locale, key)`` hops.

        Only cycles made of redirects alone are found here; cycles that also
        need inheritance steps are caught by the resolver's hop bound.
        """
        edges: dict[AliasNode, list[AliasNode]] = {}
        for locale, sources in self._table.items():
            for source, entry in sources.items():
                edges[(locale, source)] = [entry.redirect(locale, source)]
        return detect_cycles(edges)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        locale, key = item
        if not isinstance(locale, str) or not isinstance(key, Key):
            return False
        try:
            locale = canonicalize_locale(locale)
        except InvalidLocaleError:
            return False
        return key in self._table.get(locale, {})

    def __iter__(self) -> Iterator[tuple[str, AliasEntry]]:
        for locale, sources in self._table.items():
            for entry in sources.values():
                yield locale, entry

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"AliasTable(locales={len(self._table)}, entries={self._count})"


