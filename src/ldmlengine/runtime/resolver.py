"""Resolution engine: effective value of a key in a locale.

Resolution of ``(locale, key)`` is an explicit loop over a current position:

    1. LOOKUP  the current locale's store has the current key -> found
    2. ALIAS   an alias is registered for exactly (locale, key) -> jump to
               its target and go to 1 (counts one hop)
    3. ASCEND  move to the parent of the current locale and go to 1;
               past root -> absent

The alias step is always tried before ascending, for whichever locale the
walk is currently in. After an alias crosses into another locale, further
ascent follows that locale's chain.

Both walks are bounded: ascent by the tree's depth bound (checked when the
tree is built) and redirects by ``EngineConfig.max_alias_hops``. Exceeding
the hop bound raises AliasCycleError for that query only.

Thread Safety:
    The engine holds no mutable state. Each call owns its own hop counter,
    so any number of threads may resolve through one engine.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ldmlengine.core import HopCounter
from ldmlengine.diagnostics import AliasCycleError, ErrorTemplate
from ldmlengine.enums import DraftStatus, StepKind
from ldmlengine.syntax import Key

from .context import EngineContext

__all__ = ["ResolutionEngine", "ResolutionResult", "ResolutionStep"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of a resolution.

    Either every field is set (found) or every field is None (absent).

    Attributes:
        value: The effective value
        source_locale: Locale whose store supplied the value
        source_key: Key under which the value is physically stored
        draft_status: Draft status of the supplying entry
    """

    value: str | None = None
    source_locale: str | None = None
    source_key: Key | None = None
    draft_status: DraftStatus | None = None

    @property
    def found(self) -> bool:
        """True if a value was found."""
        return self.value is not None


_ABSENT = ResolutionResult()


@dataclass(frozen=True, slots=True)
class ResolutionStep:
    """One step of a resolution walk, for tracing."""

    kind: StepKind
    locale: str
    key: Key

    def __str__(self) -> str:
        return f"{self.kind}: {self.locale}|{self.key}"


class ResolutionEngine:
    """Resolves keys against an EngineContext.

    Keys may be passed as Key objects or xpath text. Locale identifiers may
    use any accepted spelling.

    Example:
        >>> engine = ResolutionEngine(context)
        >>> result = engine.resolve("es_AR", "//ldml/numbers/symbols/decimal")
        >>> result.source_locale
        'es_419'
    """

    __slots__ = ("_context",)

    def __init__(self, context: EngineContext) -> None:
        self._context = context

    @property
    def context(self) -> EngineContext:
        """The context this engine resolves against."""
        return self._context

    def resolve(self, locale: str, key: Key | str) -> ResolutionResult:
        """Effective value of ``key`` in ``locale``.

        Raises:
            MalformedKeyError: If the key is malformed (before any lookup)
            UnknownLocaleError: If the locale is not in the tree
            AliasCycleError: If the walk follows more than the allowed
                number of alias redirects
        """
        return self._walk(locale, key, skip_first_lookup=False, steps=None)

    def inherited_value(self, locale: str, key: Key | str) -> ResolutionResult:
        """Value ``locale`` would get for ``key`` if it did not set the key itself.

        Only the store check at the queried locale is skipped; an alias
        registered there still applies. When the locale does not set the key,
        the result equals ``resolve(locale, key)``.

        Raises:
            Same as ``resolve``.
        """
        return self._walk(locale, key, skip_first_lookup=True, steps=None)

    bailey_value = inherited_value

    def value(self, locale: str, key: Key | str) -> str | None:
        """Effective value only."""
        return self.resolve(locale, key).value

    def source_locale(self, locale: str, key: Key | str) -> str | None:
        """Locale that supplies the effective value, or None if absent."""
        return self.resolve(locale, key).source_locale

    def source_key(self, locale: str, key: Key | str) -> Key | None:
        """Key where the effective value physically lives, or None if absent."""
        return self.resolve(locale, key).source_key

    def is_here(self, locale: str, key: Key | str) -> bool:
        """True if ``locale`` itself sets ``key`` (no aliasing, no inheritance)."""
        parsed = Key.coerce(key)
        return parsed in self._context.stores.get(locale)

    def resolve_many(
        self, locale: str, keys: Iterable[Key | str]
    ) -> dict[Key, ResolutionResult]:
        """Resolve several keys in one locale."""
        results: dict[Key, ResolutionResult] = {}
        for key in keys:
            parsed = Key.coerce(key)
            results[parsed] = self.resolve(locale, parsed)
        return results

    def trace(self, locale: str, key: Key | str) -> tuple[ResolutionStep, ...]:
        """Steps ``resolve`` takes, in order; the last LOOKUP is the hit if found."""
        steps: list[ResolutionStep] = []
        self._walk(locale, key, skip_first_lookup=False, steps=steps)
        return tuple(steps)

    def _walk(
        self,
        locale: str,
        key: Key | str,
        *,
        skip_first_lookup: bool,
        steps: list[ResolutionStep] | None,
    ) -> ResolutionResult:
        current_key = Key.coerce(key)
        tree = self._context.tree
        current = tree.require(locale)
        stores = self._context.stores
        aliases = self._context.aliases
        max_hops = self._context.config.max_alias_hops

        start_locale, start_key = current, current_key
        counter = HopCounter(
            max_hops=max_hops,
            on_exceeded=lambda trail: AliasCycleError(
                ErrorTemplate.alias_hops_exceeded(start_locale, str(start_key), max_hops, trail)
            ),
        )
        counter.start(f"{current}|{current_key}")

        skip = skip_first_lookup
        while True:
            if not skip:
                if steps is not None:
                    steps.append(ResolutionStep(StepKind.LOOKUP, current, current_key))
                entry = stores.get(current).get(current_key)
                if entry is not None:
                    logger.debug(
                        "Resolved %s|%s from %s|%s", start_locale, start_key, current, current_key
                    )
                    return ResolutionResult(
                        entry.value, current, current_key, entry.draft_status
                    )
            skip = False

            redirect = aliases.resolve_alias(current, current_key)
            if redirect is not None:
                current, current_key = redirect
                try:
                    counter.step(f"{current}|{current_key}")
                except AliasCycleError as error:
                    logger.warning(
                        "Alias chain of %s|%s exceeded %d hops: %s",
                        start_locale,
                        start_key,
                        max_hops,
                        " -> ".join(error.chain),
                    )
                    raise
                if steps is not None:
                    steps.append(ResolutionStep(StepKind.ALIAS, current, current_key))
                continue

            parent = tree.parent_of(current)
            if parent is None:
                logger.debug("No value for %s|%s", start_locale, start_key)
                return _ABSENT
            current = parent
            if steps is not None:
                steps.append(ResolutionStep(StepKind.ASCEND, current, current_key))
