"""Engine context: the explicitly constructed, immutable engine state.

An EngineContext bundles the locale tree, the alias table, the lazy store
registry and the configuration. It is built once from a LocaleDataSource
and then passed to every ResolutionEngine that needs it; there is no
process-wide singleton, so independent datasets can live side by side.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ldmlengine.diagnostics import ErrorTemplate, InvalidAliasError
from ldmlengine.inheritance import AliasEntry, AliasTable, LocaleTree
from ldmlengine.syntax import Key

from .config import EngineConfig
from .loading import LocaleDataSource, MappingDataSource
from .registry import StoreRegistry
from .store import LocaleStore, RawTable

__all__ = ["EngineContext"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineContext:
    """Everything a resolution needs, shared read-only.

    Attributes:
        tree: Parent relation over all locales
        aliases: Exact (locale, key) redirects
        stores: Lazily built per-locale stores
        config: Bounds and filters in effect

    Example:
        >>> context = EngineContext.build(
        ...     {"root": {"//ldml/a": "r"}, "es": {}, "es_419": {}, "es_AR": {}},
        ...     explicit_parents={"es_AR": "es_419"},
        ... )
        >>> context.tree.parent_of("es_AR")
        'es_419'
    """

    tree: LocaleTree
    aliases: AliasTable
    stores: StoreRegistry
    config: EngineConfig

    @classmethod
    def from_source(
        cls,
        source: LocaleDataSource,
        *,
        config: EngineConfig | None = None,
    ) -> EngineContext:
        """Build the tree and alias table now; stores are loaded on demand.

        Raises:
            InvalidLocaleError: If an identifier is malformed
            UnknownLocaleError: If an explicit parent is not a known locale
            LocaleCycleError: If parent links cycle or exceed the depth bound
            InvalidAliasError: If an alias is malformed or names a locale
                outside the tree
        """
        config = config or EngineConfig()
        tree = LocaleTree(
            source.locales(),
            source.explicit_parents(),
            max_depth=config.max_ancestor_depth,
        )
        aliases = AliasTable(source.aliases())
        _check_alias_locales(tree, aliases)

        for cycle in aliases.find_cycles():
            # Not rejected: the resolver's hop bound fails each affected query.
            logger.warning(
                "Alias cycle: %s", " -> ".join(f"{locale}|{key}" for locale, key in cycle)
            )

        stores = StoreRegistry(
            tree,
            source.load_table,
            minimal_draft_status=config.minimal_draft_status,
        )
        logger.info(
            "Engine context ready: %d locales, %d aliases in %d locales",
            len(tree),
            len(aliases),
            len(aliases.locales()),
        )
        return cls(tree=tree, aliases=aliases, stores=stores, config=config)

    @classmethod
    def build(
        cls,
        tables: Mapping[str, RawTable],
        *,
        explicit_parents: Mapping[str, str] | None = None,
        aliases: Mapping[str, Iterable[AliasEntry]] | None = None,
        extra_locales: Iterable[str] = (),
        config: EngineConfig | None = None,
    ) -> EngineContext:
        """Build a context from in-memory tables.

        Convenience wrapper over ``from_source(MappingDataSource(...))``.
        """
        source = MappingDataSource(
            tables,
            explicit_parents=explicit_parents,
            aliases=aliases,
            extra_locales=extra_locales,
        )
        return cls.from_source(source, config=config)

    def store(self, locale: str) -> LocaleStore:
        """Store of a locale (built on first request)."""
        return self.stores.get(locale)

    def alias_cycles(self) -> list[list[tuple[str, Key]]]:
        """Pure alias cycles present in the alias table."""
        return self.aliases.find_cycles()


def _check_alias_locales(tree: LocaleTree, aliases: AliasTable) -> None:
    for locale, entry in aliases:
        if locale not in tree:
            raise InvalidAliasError(
                ErrorTemplate.invalid_alias(
                    locale, str(entry.source), "locale is not in the locale tree"
                )
            )
        if entry.target_locale is not None and entry.target_locale not in tree:
            raise InvalidAliasError(
                ErrorTemplate.invalid_alias(
                    locale,
                    str(entry.source),
                    f"target locale '{entry.target_locale}' is not in the locale tree",
                )
            )
