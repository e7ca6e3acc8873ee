"""Coverage classifier: required-presence level of a key for a locale.

A classifier is one classification session. It owns a result cache keyed
by ``(locale, key)`` and a per-language memo of context sets, both kept for
the classifier's lifetime. Rules and contexts are immutable, so concurrent
``classify`` calls share nothing but the two internally locked caches.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterable, Mapping

from ldmlengine.enums import CoverageLevel
from ldmlengine.locale_utils import LocaleId
from ldmlengine.runtime.config import EngineConfig
from ldmlengine.syntax import Key

from .cache import ClassificationCache
from .context import ContextProvider, CoverageContext, default_context
from .rules import CoverageRule, CoverageRuleSet

__all__ = ["CoverageClassifier"]

logger = logging.getLogger(__name__)


class CoverageClassifier:
    """Assigns coverage levels to keys, per locale.

    Example:
        >>> rules = CoverageRuleSet([CoverageRule.create("identity/language", "core")])
        >>> classifier = CoverageClassifier(rules, {"de": CoverageContext.unknown("de")})
        >>> classifier.classify("de_AT", "//ldml/identity/language")
        <CoverageLevel.CORE: 10>
        >>> classifier.classify("de_AT", "//ldml/identity/script")
        <CoverageLevel.OPTIONAL: 101>
    """

    __slots__ = ("_cache", "_context_lock", "_contexts", "_provider", "_rules")

    def __init__(
        self,
        rules: CoverageRuleSet | Iterable[CoverageRule],
        contexts: ContextProvider | None = None,
        *,
        cache_size: int | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        """Start a classification session.

        Args:
            rules: Rule set, or rules to put in priority order
            contexts: Context sets by language, or a factory; None derives
                them from Babel when installed
            cache_size: Maximum cached results; overrides ``config`` when given
            config: Supplies the default cache size
        """
        self._rules = rules if isinstance(rules, CoverageRuleSet) else CoverageRuleSet(rules)
        self._provider: ContextProvider = contexts if contexts is not None else default_context
        if cache_size is None:
            cache_size = (config or EngineConfig()).classification_cache_size
        self._cache = ClassificationCache(cache_size)
        self._contexts: dict[str, CoverageContext] = {}
        self._context_lock = threading.Lock()

    @property
    def rules(self) -> CoverageRuleSet:
        """Rules this session classifies with."""
        return self._rules

    def context_for(self, locale: str) -> CoverageContext:
        """Context sets of the locale's language, computed once per language.

        Raises:
            InvalidLocaleError: If the identifier is malformed.
        """
        language = LocaleId.parse(locale).language
        with self._context_lock:
            context = self._contexts.get(language)
            if context is None:
                context = self._lookup_context(language)
                self._contexts[language] = context
            return context

    def _lookup_context(self, language: str) -> CoverageContext:
        provider = self._provider
        if isinstance(provider, Mapping):
            context = provider.get(language)
            if context is None:
                logger.debug("No coverage context for %s; using unknown context", language)
                return CoverageContext.unknown(language)
            return context
        return provider(language)

    def classify(self, locale: str, key: Key | str) -> CoverageLevel:
        """Coverage level of ``key`` for ``locale``; OPTIONAL if no rule fires.

        Raises:
            MalformedKeyError: If the key is malformed
            InvalidLocaleError: If the locale identifier is malformed
        """
        parsed = Key.coerce(key)
        canonical = str(LocaleId.parse(locale))
        level = self._cache.get(canonical, parsed)
        if level is not None:
            return level
        level = self._rules.level_of(parsed, self.context_for(canonical))
        self._cache.put(canonical, parsed, level)
        return level

    def matching_rule(self, locale: str, key: Key | str) -> CoverageRule | None:
        """Rule that decides the level of ``key`` (uncached), or None."""
        return self._rules.first_match(Key.coerce(key), self.context_for(locale))

    def is_required(
        self, locale: str, key: Key | str, target_level: CoverageLevel | str | int
    ) -> bool:
        """True if ``key`` is required for a locale targeting ``target_level``."""
        return self.classify(locale, key) <= CoverageLevel.parse(target_level)

    def level_counts(self, locale: str, keys: Iterable[Key | str]) -> Counter[CoverageLevel]:
        """Number of keys at each level."""
        return Counter(self.classify(locale, key) for key in keys)

    def clear_cache(self) -> None:
        """Drop cached results (contexts are kept)."""
        self._cache.clear()

    @property
    def cache_stats(self) -> dict[str, int | float | None]:
        """Result cache metrics (size, maxsize, hits, misses, hit_rate)."""
        return self._cache.get_stats()
