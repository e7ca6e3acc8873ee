"""Loader boundary: where locale data enters the engine.

Parsing locale files is the loader's job; the engine only sees the
structures described by the LocaleDataSource protocol. Raw tables are pulled
lazily, the first time a store is requested for their locale.

Components:
    LocaleDataSource - Protocol for anything that supplies locale data
    MappingDataSource - In-memory implementation over plain mappings

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from ldmlengine.inheritance import AliasEntry
from ldmlengine.locale_utils import canonicalize_locale

from .store import RawTable

__all__ = ["LocaleDataSource", "MappingDataSource"]


@runtime_checkable
class LocaleDataSource(Protocol):
    """Protocol for supplying locale data to an EngineContext.

    This is a Protocol (structural typing) rather than ABC so that file
    loaders, database readers and test fixtures can implement it without
    inheriting from ldmlengine classes.

    Example:
        >>> class DirectorySource:
        ...     def locales(self): return ["root", "de", "de_AT"]
        ...     def explicit_parents(self): return {}
        ...     def aliases(self): return {}
        ...     def load_table(self, locale): return read_xml_table(locale)
        >>> context = EngineContext.from_source(DirectorySource())
    """

    def locales(self) -> Iterable[str]:
        """All locale identifiers the source knows about."""
        ...

    def explicit_parents(self) -> Mapping[str, str]:
        """Curated child -> parent overrides."""
        ...

    def aliases(self) -> Mapping[str, Iterable[AliasEntry]]:
        """Alias entries per locale, already expanded to exact keys."""
        ...

    def load_table(self, locale: str) -> RawTable | None:
        """Raw table of one locale (canonical identifier), or None if it has none."""
        ...


class MappingDataSource:
    """LocaleDataSource over in-memory mappings.

    Table keys may use any accepted locale spelling. Load calls are counted
    per locale, which lets callers observe lazy loading.

    Example:
        >>> source = MappingDataSource(
        ...     {"root": {"//ldml/a": "x"}, "de": {}},
        ...     explicit_parents={},
        ... )
        >>> sorted(source.locales())
        ['de', 'root']
    """

    __slots__ = ("_aliases", "_extra", "_load_counts", "_lock", "_parents", "_tables")

    def __init__(
        self,
        tables: Mapping[str, RawTable],
        *,
        explicit_parents: Mapping[str, str] | None = None,
        aliases: Mapping[str, Iterable[AliasEntry]] | None = None,
        extra_locales: Iterable[str] = (),
    ) -> None:
        self._tables = {canonicalize_locale(locale): table for locale, table in tables.items()}
        self._parents = dict(explicit_parents or {})
        self._aliases = {locale: tuple(entries) for locale, entries in (aliases or {}).items()}
        self._extra = tuple(canonicalize_locale(locale) for locale in extra_locales)
        self._load_counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def locales(self) -> Iterable[str]:
        return (*self._tables, *self._extra)

    def explicit_parents(self) -> Mapping[str, str]:
        return self._parents

    def aliases(self) -> Mapping[str, Iterable[AliasEntry]]:
        return self._aliases

    def load_table(self, locale: str) -> RawTable | None:
        with self._lock:
            self._load_counts[locale] += 1
        return self._tables.get(locale)

    def load_count(self, locale: str) -> int:
        """Times ``load_table`` was called for ``locale``."""
        with self._lock:
            return self._load_counts[locale]
