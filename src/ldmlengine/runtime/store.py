"""Per-locale store: the values one locale sets explicitly.

A store maps keys to entries (value plus draft status). It never holds a
tombstone: raw ``None`` and empty values mean "explicitly unset" and are
dropped while the store is built, so a missing key and a tombstoned key behave
the same (the lookup falls through to aliases and the parent locale).

Stores are immutable once built.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ldmlengine.diagnostics import MalformedKeyError
from ldmlengine.enums import DraftStatus
from ldmlengine.syntax import Key

__all__ = ["LocaleStore", "RawTable", "RawValue", "StoreEntry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreEntry:
    """One explicitly set value.

    Attributes:
        value: The stored text
        draft_status: Approval status of the value
    """

    value: str
    draft_status: DraftStatus = DraftStatus.APPROVED


type RawValue = str | StoreEntry | tuple[str, DraftStatus | str] | None
"""Loader-side value: text, ready entry, ``(text, status)`` pair or tombstone."""

type RawTable = Mapping[Key | str, RawValue]
"""Loader-side table of one locale."""


def _to_entry(locale: str, key: Key, raw: RawValue) -> StoreEntry | None:
    if raw is None:
        return None
    if isinstance(raw, StoreEntry):
        entry = raw
    elif isinstance(raw, str):
        entry = StoreEntry(raw)
    elif isinstance(raw, tuple) and len(raw) == 2 and isinstance(raw[0], str):
        entry = StoreEntry(raw[0], DraftStatus(raw[1]))
    else:
        msg = f"Unsupported value for {key} in '{locale}': {type(raw).__name__}"
        raise TypeError(msg)
    # An empty value is a tombstone too.
    return entry if entry.value else None


class LocaleStore:
    """Immutable ``Key -> StoreEntry`` table of one locale.

    Example:
        >>> store = LocaleStore.build("de", {"//ldml/a": "x", "//ldml/b": None})
        >>> store.get("//ldml/a")
        StoreEntry(value='x', draft_status=<DraftStatus.APPROVED: 'approved'>)
        >>> "//ldml/b" in store
        False
    """

    __slots__ = ("_entries", "_locale")

    def __init__(self, locale: str, entries: Mapping[Key, StoreEntry]) -> None:
        self._locale = locale
        self._entries: Mapping[Key, StoreEntry] = MappingProxyType(dict(entries))

    @classmethod
    def build(
        cls,
        locale: str,
        raw: RawTable | None,
        *,
        minimal_draft_status: DraftStatus = DraftStatus.UNCONFIRMED,
    ) -> LocaleStore:
        """Build a store from a loader table.

        Tombstones are dropped, as are entries less trusted than
        ``minimal_draft_status``.

        Raises:
            MalformedKeyError: If a key is malformed
            TypeError: If a value has an unsupported type
            ValueError: If a draft status is unknown
        """
        entries: dict[Key, StoreEntry] = {}
        tombstones = 0
        filtered = 0
        for raw_key, raw_value in (raw or {}).items():
            key = Key.coerce(raw_key)
            entry = _to_entry(locale, key, raw_value)
            if entry is None:
                tombstones += 1
                continue
            if not entry.draft_status.meets(minimal_draft_status):
                filtered += 1
                continue
            entries[key] = entry

        logger.debug(
            "Built store for %s: %d entries, %d tombstones dropped, %d below %s",
            locale,
            len(entries),
            tombstones,
            filtered,
            minimal_draft_status,
        )
        return cls(locale, entries)

    @classmethod
    def empty(cls, locale: str) -> LocaleStore:
        """Store of a locale that sets nothing."""
        return cls(locale, {})

    @property
    def locale(self) -> str:
        """Locale this store belongs to."""
        return self._locale

    def get(self, key: Key | str) -> StoreEntry | None:
        """Entry explicitly set for ``key``, or None."""
        return self._entries.get(Key.coerce(key))

    def keys(self) -> tuple[Key, ...]:
        """Keys set in this store, in structural order."""
        return tuple(sorted(self._entries))

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            try:
                key = Key.coerce(key)
            except MalformedKeyError:
                return False
        return key in self._entries

    def __iter__(self) -> Iterator[Key]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LocaleStore(locale={self._locale!r}, entries={len(self._entries)})"
