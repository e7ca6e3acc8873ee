"""Coverage rules and the ordered rule set.

A coverage rule says "keys matching this pattern are required at this
level", optionally only when a captured attribute value belongs to one of
the locale's context sets, and optionally only for some languages, scripts
or territories. The first matching rule in priority order decides a key's
level; keys no rule matches are OPTIONAL.

Rules can be written directly or loaded from ``coverageLevel``-style
entries (``match``, ``value``, ``inLanguage``, ``inScript``,
``inTerritory``) where ``%name`` refers to a named pattern fragment.

Rules and rule sets are immutable and hold no match state.

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from ldmlengine.diagnostics import ErrorTemplate, InvalidRuleError
from ldmlengine.enums import ContextSet, CoverageLevel
from ldmlengine.syntax import Key, KeyPattern, PatternMatch

from .context import CoverageContext

__all__ = ["CoverageRule", "CoverageRuleSet", "substitute_variables"]

_VARIABLE_REF = re.compile(r"%([A-Za-z][A-Za-z0-9_]*)")


def _split_codes(value: Iterable[str] | str | None) -> frozenset[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return frozenset(value.split())
    return frozenset(value)


@dataclass(frozen=True, slots=True)
class CoverageRule:
    """One pattern rule.

    Attributes:
        pattern: Compiled key pattern
        level: Level assigned to matching keys
        predicate: Context set the pattern's subject capture must belong to
        in_language: Languages the rule is limited to (full-match regex)
        in_script: Scripts the rule is limited to
        in_territory: Territories the rule is limited to
    """

    pattern: KeyPattern
    level: CoverageLevel
    predicate: ContextSet | None = None
    in_language: re.Pattern[str] | None = None
    in_script: frozenset[str] | None = None
    in_territory: frozenset[str] | None = None

    @classmethod
    def create(
        cls,
        match: str | KeyPattern,
        level: CoverageLevel | str | int,
        *,
        predicate: ContextSet | str | None = None,
        in_language: str | None = None,
        in_script: Iterable[str] | str | None = None,
        in_territory: Iterable[str] | str | None = None,
    ) -> CoverageRule:
        """Build a rule, inferring the predicate from a ``${...}`` variable.

        Raises:
            PatternSyntaxError: If the pattern text is invalid
            InvalidRuleError: If the level or predicate is invalid, or a
                predicate is given for a pattern without captures

        Example:
            >>> rule = CoverageRule.create(
            ...     "numbers/currencies/currency[@type='${Target-Currencies}']/symbol",
            ...     "basic",
            ... )
            >>> rule.predicate
            <ContextSet.TARGET_CURRENCIES: 'Target-Currencies'>
        """
        pattern = match if isinstance(match, KeyPattern) else KeyPattern.parse(match)
        text = pattern.text

        try:
            parsed_level = CoverageLevel.parse(level)
        except ValueError as e:
            raise InvalidRuleError(ErrorTemplate.invalid_rule(text, str(e))) from e

        parsed_predicate: ContextSet | None
        if predicate is None:
            parsed_predicate = pattern.variable
        else:
            try:
                parsed_predicate = (
                    predicate if isinstance(predicate, ContextSet) else ContextSet.parse(predicate)
                )
            except ValueError as e:
                raise InvalidRuleError(ErrorTemplate.invalid_rule(text, str(e))) from e
            if pattern.variable is not None and pattern.variable is not parsed_predicate:
                raise InvalidRuleError(
                    ErrorTemplate.invalid_rule(
                        text,
                        f"predicate {parsed_predicate} conflicts with pattern variable "
                        f"{pattern.variable}",
                    )
                )
        if parsed_predicate is not None and pattern.capture_count == 0:
            raise InvalidRuleError(
                ErrorTemplate.invalid_rule(text, "a predicate needs a captured attribute")
            )

        try:
            language_re = re.compile(in_language) if in_language else None
        except re.error as e:
            raise InvalidRuleError(
                ErrorTemplate.invalid_rule(text, f"invalid inLanguage regex: {e}")
            ) from e

        return cls(
            pattern=pattern,
            level=parsed_level,
            predicate=parsed_predicate,
            in_language=language_re,
            in_script=_split_codes(in_script),
            in_territory=_split_codes(in_territory),
        )

    def applies_to(self, context: CoverageContext) -> bool:
        """Check the language/script/territory filters.

        With several filters set, matching any one of them is enough.
        """
        if self.in_language is None and self.in_script is None and self.in_territory is None:
            return True
        if self.in_language is not None and self.in_language.fullmatch(context.language):
            return True
        if self.in_script is not None and not self.in_script.isdisjoint(context.scripts):
            return True
        return self.in_territory is not None and not self.in_territory.isdisjoint(
            context.territories
        )

    def match(self, key: Key, context: CoverageContext) -> PatternMatch | None:
        """Match result if this rule fires for ``key`` in ``context``."""
        if not self.applies_to(context):
            return None
        result = self.pattern.match(key)
        if result is None:
            return None
        if self.predicate is not None and not context.contains(self.predicate, result.subject):
            return None
        return result

    def __str__(self) -> str:
        return f"{self.level.name.lower()}: {self.pattern}"


def substitute_variables(text: str, variables: Mapping[str, str]) -> str:
    """Replace ``%name`` references with their definitions.

    Definitions may refer to other variables; expansion repeats until no
    reference is left.

    Raises:
        InvalidRuleError: For an undefined or self-referencing variable.

    Example:
        >>> substitute_variables("dates/%cal/months", {"cal": "calendar[@type=*]"})
        'dates/calendar[@type=*]/months'
    """
    result = text
    for _ in range(len(variables) + 1):
        names = _VARIABLE_REF.findall(result)
        if not names:
            return result
        for name in names:
            if name not in variables:
                raise InvalidRuleError(
                    ErrorTemplate.invalid_rule(text, f"undefined variable %{name}")
                )
        result = _VARIABLE_REF.sub(lambda m: variables[m.group(1)], result)
    raise InvalidRuleError(ErrorTemplate.invalid_rule(text, "variables refer to each other"))


class CoverageRuleSet:
    """Ordered, immutable collection of coverage rules.

    Priority order is ascending ``(level, pattern text)`` unless
    ``sort=False``, in which case the given order is kept.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[CoverageRule], *, sort: bool = True) -> None:
        ordered = list(rules)
        if sort:
            ordered.sort(key=lambda rule: (rule.level, rule.pattern.text))
        self._rules: tuple[CoverageRule, ...] = tuple(ordered)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Mapping[str, Any]],
        *,
        variables: Mapping[str, str] | None = None,
        sort: bool = True,
    ) -> CoverageRuleSet:
        """Build a rule set from ``coverageLevel``-style mappings.

        Each entry needs ``match`` and ``value`` (or ``level``); it may carry
        ``inLanguage``, ``inScript`` and ``inTerritory``.

        Raises:
            InvalidRuleError: For a malformed entry
            PatternSyntaxError: For an invalid pattern
        """
        rules: list[CoverageRule] = []
        for entry in entries:
            match = entry.get("match")
            level = entry.get("value", entry.get("level"))
            if not isinstance(match, str) or level is None:
                raise InvalidRuleError(
                    ErrorTemplate.invalid_rule(str(match), "entry needs 'match' and 'value'")
                )
            rules.append(
                CoverageRule.create(
                    substitute_variables(match, variables or {}),
                    level,
                    in_language=entry.get("inLanguage"),
                    in_script=entry.get("inScript"),
                    in_territory=entry.get("inTerritory"),
                )
            )
        return cls(rules, sort=sort)

    @property
    def rules(self) -> tuple[CoverageRule, ...]:
        """Rules in priority order."""
        return self._rules

    def first_match(self, key: Key, context: CoverageContext) -> CoverageRule | None:
        """First rule in priority order that fires for ``key``."""
        for rule in self._rules:
            if rule.match(key, context) is not None:
                return rule
        return None

    def level_of(self, key: Key, context: CoverageContext) -> CoverageLevel:
        """Level of ``key``; OPTIONAL if no rule fires."""
        rule = self.first_match(key, context)
        return rule.level if rule is not None else CoverageLevel.OPTIONAL

    def __iter__(self) -> Iterator[CoverageRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"CoverageRuleSet(rules={len(self._rules)})"
