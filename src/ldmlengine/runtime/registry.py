"""Lazy, construct-once registry of per-locale stores.

Stores are built on first request for their locale and cached for the
registry's lifetime. Concurrent first requests for the same locale build
the store exactly once, and no caller ever sees a partially built store.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable

from ldmlengine.enums import DraftStatus
from ldmlengine.inheritance import LocaleTree

from .rwlock import RWLock
from .store import LocaleStore, RawTable

__all__ = ["StoreRegistry"]

logger = logging.getLogger(__name__)

type TableLoader = Callable[[str], RawTable | None]


class StoreRegistry:
    """Per-locale stores, built lazily under double-checked locking.

    Thread Safety:
        A read lock serves the common already-built case concurrently; the
        write lock is taken only to build a missing store. The store is
        published into the registry after it is completely built.

    Example:
        >>> registry = StoreRegistry(tree, source.load_table)
        >>> registry.get("de_AT").locale
        'de_AT'
    """

    __slots__ = ("_builds", "_loader", "_lock", "_minimal_draft_status", "_stores", "_tree")

    def __init__(
        self,
        tree: LocaleTree,
        loader: TableLoader,
        *,
        minimal_draft_status: DraftStatus = DraftStatus.UNCONFIRMED,
    ) -> None:
        """Create an empty registry.

        Args:
            tree: Locale tree; only its locales can have stores
            loader: Returns the raw table of a canonical locale, or None
            minimal_draft_status: Draft filter applied when building stores
        """
        self._tree = tree
        self._loader = loader
        self._minimal_draft_status = minimal_draft_status
        self._stores: dict[str, LocaleStore] = {}
        self._builds: Counter[str] = Counter()
        self._lock = RWLock()

    def get(self, locale: str) -> LocaleStore:
        """Store of a locale, building it on first request.

        A locale in the tree whose loader has no table gets an empty store.

        Raises:
            UnknownLocaleError: If the locale is not in the tree
            InvalidLocaleError: If the identifier is malformed
        """
        canonical = self._tree.require(locale)

        # Fast path: shared lock, concurrent hits.
        with self._lock.read():
            store = self._stores.get(canonical)
            if store is not None:
                return store

        # Slow path: another thread may have built it between the two locks.
        with self._lock.write():
            store = self._stores.get(canonical)
            if store is not None:
                return store
            logger.debug("Loading table for %s", canonical)
            store = LocaleStore.build(
                canonical,
                self._loader(canonical),
                minimal_draft_status=self._minimal_draft_status,
            )
            self._builds[canonical] += 1
            self._stores[canonical] = store
            return store

    def is_loaded(self, locale: str) -> bool:
        """True if the locale's store has been built."""
        canonical = self._tree.require(locale)
        with self._lock.read():
            return canonical in self._stores

    def loaded_locales(self) -> tuple[str, ...]:
        """Locales whose stores have been built, sorted."""
        with self._lock.read():
            return tuple(sorted(self._stores))

    def build_count(self, locale: str) -> int:
        """Times the store of ``locale`` was built (0 or 1)."""
        canonical = self._tree.require(locale)
        with self._lock.read():
            return self._builds[canonical]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._stores)
