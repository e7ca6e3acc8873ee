"""Locale tree: the parent relation over all known locales.

Each locale has exactly one parent, except the universal root which has
none. Curated explicit parents (es_AR -> es_419, zh_HK -> zh_Hant_HK) win;
otherwise the parent is found by truncating the identifier (drop the last
variant, then the region, then the script; a bare language maps to root).
Truncations that are not themselves in the tree are skipped, so every chain
stays inside the tree.

The tree is validated and all ancestor chains are computed at construction.
Afterwards it is immutable and safe for concurrent reads without locking.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from ldmlengine.constants import MAX_ANCESTOR_DEPTH, ROOT_LOCALE
from ldmlengine.diagnostics import (
    ErrorTemplate,
    InvalidLocaleError,
    LocaleCycleError,
    UnknownLocaleError,
)
from ldmlengine.enums import ParentKind
from ldmlengine.locale_utils import LocaleId

from .graph import detect_cycles

__all__ = ["LocaleNode", "LocaleTree"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleNode:
    """One locale and its parent link.

    Attributes:
        locale: Canonical locale identifier
        parent: Parent locale, None only for the root
        kind: How the parent was established, None only for the root
    """

    locale: str
    parent: str | None
    kind: ParentKind | None

    @property
    def explicit(self) -> bool:
        """True if the parent comes from a curated override."""
        return self.kind is ParentKind.EXPLICIT

    @property
    def is_root(self) -> bool:
        """True for the root node."""
        return self.parent is None


class LocaleTree:
    """Immutable parent relation over a set of locales.

    Example:
        >>> tree = LocaleTree(
        ...     ["es", "es_419", "es_AR"],
        ...     explicit_parents={"es_AR": "es_419"},
        ... )
        >>> tree.ancestor_chain("es_AR")
        ('es_AR', 'es_419', 'es', 'root')
    """

    __slots__ = ("_chains", "_children", "_max_depth", "_nodes", "_root")

    def __init__(
        self,
        locales: Iterable[str],
        explicit_parents: Mapping[str, str] | None = None,
        *,
        root: str = ROOT_LOCALE,
        max_depth: int = MAX_ANCESTOR_DEPTH,
    ) -> None:
        """Build and validate the tree.

        Args:
            locales: Locale identifiers (any accepted spelling); root is
                always included
            explicit_parents: Curated child -> parent overrides. Entries for
                children outside ``locales`` are ignored.
            root: Identifier of the universal root
            max_depth: Maximum parent links from any locale to root

        Raises:
            InvalidLocaleError: If an identifier is malformed
            UnknownLocaleError: If an explicit parent is not a known locale
            LocaleCycleError: If parent links form a cycle or a chain is
                deeper than ``max_depth``
            ValueError: If ``max_depth`` is not positive
        """
        if max_depth <= 0:
            msg = f"max_depth must be positive, got {max_depth}"
            raise ValueError(msg)
        self._root = root
        self._max_depth = max_depth

        known: dict[str, None] = {root: None}
        for locale in locales:
            known.setdefault(self.canonicalize(locale), None)

        overrides: dict[str, str] = {}
        for child, parent in (explicit_parents or {}).items():
            child_id = self.canonicalize(child)
            if child_id not in known:
                logger.debug("Ignoring explicit parent for unloaded locale %s", child_id)
                continue
            if child_id == root:
                raise LocaleCycleError(ErrorTemplate.parent_cycle([root, self.canonicalize(parent)]))
            parent_id = self.canonicalize(parent)
            if parent_id not in known:
                raise UnknownLocaleError(ErrorTemplate.unknown_locale(parent_id))
            overrides[child_id] = parent_id

        nodes: dict[str, LocaleNode] = {root: LocaleNode(root, None, None)}
        for locale in known:
            if locale == root:
                continue
            if locale in overrides:
                nodes[locale] = LocaleNode(locale, overrides[locale], ParentKind.EXPLICIT)
            else:
                nodes[locale] = LocaleNode(
                    locale, self._implicit_parent(locale, known), ParentKind.IMPLICIT
                )

        edges = {
            locale: [node.parent] for locale, node in nodes.items() if node.parent is not None
        }
        cycles = detect_cycles(edges)
        if cycles:
            raise LocaleCycleError(ErrorTemplate.parent_cycle(cycles[0]))

        self._nodes = nodes
        self._chains = {locale: self._walk(locale) for locale in nodes}

        children: dict[str, list[str]] = {locale: [] for locale in nodes}
        for locale, node in nodes.items():
            if node.parent is not None:
                children[node.parent].append(locale)
        self._children = {locale: tuple(sorted(kids)) for locale, kids in children.items()}

        logger.debug(
            "Built locale tree: %d locales, %d explicit parents", len(nodes), len(overrides)
        )

    def _implicit_parent(self, locale: str, known: Mapping[str, None]) -> str:
        for candidate in LocaleId.parse(locale).truncations():
            if candidate in known:
                return candidate
        return self._root

    def _walk(self, locale: str) -> tuple[str, ...]:
        chain = [locale]
        parent = self._nodes[locale].parent
        while parent is not None:
            if len(chain) > self._max_depth:
                raise LocaleCycleError(
                    ErrorTemplate.ancestor_depth_exceeded(locale, self._max_depth, chain)
                )
            chain.append(parent)
            parent = self._nodes[parent].parent
        return tuple(chain)

    @property
    def root(self) -> str:
        """Identifier of the universal root."""
        return self._root

    @property
    def max_depth(self) -> int:
        """Maximum parent links from any locale to root."""
        return self._max_depth

    def canonicalize(self, locale: str) -> str:
        """Canonical spelling of ``locale`` (membership is not checked).

        Raises:
            InvalidLocaleError: If the identifier is malformed.
        """
        if isinstance(locale, str) and locale.strip().lower() == self._root.lower():
            return self._root
        return str(LocaleId.parse(locale))

    def require(self, locale: str) -> str:
        """Canonical spelling of a locale that must be in the tree.

        Raises:
            InvalidLocaleError: If the identifier is malformed
            UnknownLocaleError: If the locale is not in the tree
        """
        canonical = self.canonicalize(locale)
        if canonical not in self._nodes:
            raise UnknownLocaleError(ErrorTemplate.unknown_locale(canonical))
        return canonical

    def node(self, locale: str) -> LocaleNode:
        """Node of a known locale."""
        return self._nodes[self.require(locale)]

    def parent_of(self, locale: str) -> str | None:
        """Parent of a known locale; None for the root.

        Example:
            >>> LocaleTree(["zh", "zh_Hant", "zh_Hant_HK"]).parent_of("zh-Hant-HK")
            'zh_Hant'
        """
        return self._nodes[self.require(locale)].parent

    def ancestor_chain(self, locale: str) -> tuple[str, ...]:
        """The locale itself followed by each ancestor, ending with root."""
        return self._chains[self.require(locale)]

    def children_of(self, locale: str) -> tuple[str, ...]:
        """Locales whose parent is ``locale``, sorted."""
        return self._children[self.require(locale)]

    def is_explicit(self, locale: str) -> bool:
        """True if the locale's parent is a curated override."""
        return self.node(locale).explicit

    def __contains__(self, locale: object) -> bool:
        if not isinstance(locale, str):
            return False
        try:
            return self.canonicalize(locale) in self._nodes
        except InvalidLocaleError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"LocaleTree(locales={len(self._nodes)}, root={self._root!r})"
