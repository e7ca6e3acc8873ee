"""Tests for coverage rules, variable substitution and rule sets."""

import pytest

from ldmlengine.coverage import CoverageContext, CoverageRule, CoverageRuleSet, substitute_variables
from ldmlengine.diagnostics import InvalidRuleError, PatternSyntaxError
from ldmlengine.enums import ContextSet, CoverageLevel
from ldmlengine.syntax import Key, KeyPattern

DAY_PERIOD_RULE = "dates/calendars/calendar[@type=*]/.../dayPeriod[@type=?]"
DAY_PERIOD_KEY = (
    '//ldml/dates/calendars/calendar[@type="gregorian"]/dayPeriods'
    '/dayPeriodContext[@type="format"]/dayPeriodWidth[@type="wide"]/dayPeriod[@type="{}"]'
)
CURRENCY_RULE = "numbers/currencies/currency[@type='${Target-Currencies}']/symbol"
CURRENCY_KEY = '//ldml/numbers/currencies/currency[@type="{}"]/symbol'

ENGLISH = CoverageContext.create(
    "en",
    scripts=["Latn"],
    territories=["US", "GB"],
    currencies=["USD", "GBP"],
    plurals=["one", "other", "0", "1"],
)
GERMAN = CoverageContext.create(
    "de",
    scripts=["Latn"],
    territories=["DE", "AT", "CH"],
    currencies=["EUR", "CHF"],
    plurals=["one", "other", "0", "1"],
)
JAPANESE = CoverageContext.create(
    "ja",
    scripts=["Jpan"],
    territories=["JP"],
    currencies=["JPY"],
    plurals=["other", "0", "1"],
)


def key(text: str) -> Key:
    return Key.parse(text)


class TestRuleCreate:
    """CoverageRule.create validation and predicate inference."""

    def test_level_parsing(self) -> None:
        assert CoverageRule.create("identity", "moderate").level is CoverageLevel.MODERATE
        assert CoverageRule.create("identity", 60).level is CoverageLevel.MODERATE
        assert CoverageRule.create("identity", "60").level is CoverageLevel.MODERATE
        assert CoverageRule.create("identity", CoverageLevel.CORE).level is CoverageLevel.CORE

    def test_predicate_inferred_from_variable(self) -> None:
        rule = CoverageRule.create(CURRENCY_RULE, "basic")
        assert rule.predicate is ContextSet.TARGET_CURRENCIES

    def test_predicate_spellings(self) -> None:
        rule = CoverageRule.create(DAY_PERIOD_RULE, "modern", predicate="Target_Plurals")
        assert rule.predicate is ContextSet.TARGET_PLURALS

    def test_compiled_pattern_accepted(self) -> None:
        pattern = KeyPattern.parse("identity")
        assert CoverageRule.create(pattern, "core").pattern is pattern

    def test_unknown_level(self) -> None:
        with pytest.raises(InvalidRuleError, match="Unknown coverage level"):
            CoverageRule.create("identity", "bogus")

    def test_unknown_predicate(self) -> None:
        with pytest.raises(InvalidRuleError, match="Unknown coverage context set"):
            CoverageRule.create(DAY_PERIOD_RULE, "modern", predicate="Target-Moons")

    def test_predicate_needs_capture(self) -> None:
        with pytest.raises(InvalidRuleError, match="captured attribute"):
            CoverageRule.create("identity/language", "core", predicate="Target-Language")

    def test_conflicting_predicate(self) -> None:
        with pytest.raises(InvalidRuleError, match="conflicts"):
            CoverageRule.create(CURRENCY_RULE, "basic", predicate="Target-Plurals")

    def test_bad_language_regex(self) -> None:
        with pytest.raises(InvalidRuleError, match="inLanguage"):
            CoverageRule.create("identity", "core", in_language="(de")

    def test_bad_pattern(self) -> None:
        with pytest.raises(PatternSyntaxError):
            CoverageRule.create("identity//language", "core")

    def test_str(self) -> None:
        assert str(CoverageRule.create("identity", "core")) == "core: identity"


class TestRulePredicates:
    """Captured values checked against context sets."""

    def test_day_period_plural_capture_fires(self) -> None:
        rule = CoverageRule.create(DAY_PERIOD_RULE, "modern", predicate="Target_Plurals")
        assert rule.match(key(DAY_PERIOD_KEY.format("one")), ENGLISH) is not None

    def test_day_period_non_plural_capture_does_not_fire(self) -> None:
        rule = CoverageRule.create(DAY_PERIOD_RULE, "modern", predicate="Target_Plurals")
        assert rule.match(key(DAY_PERIOD_KEY.format("am")), ENGLISH) is None

    def test_membership_is_per_locale(self) -> None:
        """'one' is a plural category of English but not of Japanese."""
        rule = CoverageRule.create(DAY_PERIOD_RULE, "modern", predicate="Target_Plurals")
        day_period = key(DAY_PERIOD_KEY.format("one"))
        assert rule.match(day_period, ENGLISH) is not None
        assert rule.match(day_period, JAPANESE) is None

    def test_currency_variable(self) -> None:
        rule = CoverageRule.create(CURRENCY_RULE, "basic")
        assert rule.match(key(CURRENCY_KEY.format("USD")), ENGLISH) is not None
        assert rule.match(key(CURRENCY_KEY.format("JPY")), ENGLISH) is None
        assert rule.match(key(CURRENCY_KEY.format("JPY")), JAPANESE) is not None

    def test_target_language(self) -> None:
        rule = CoverageRule.create(
            "localeDisplayNames/languages/language[@type='${Target-Language}']", "core"
        )
        language_key = key('//ldml/localeDisplayNames/languages/language[@type="en"]')
        assert rule.match(language_key, ENGLISH) is not None
        assert rule.match(language_key, GERMAN) is None

    def test_absent_plural_count_matches(self) -> None:
        rule = CoverageRule.create(
            "units/unitLength/unit[@type=*]/unitPattern[@count='${Target-Plurals}']?", "modern"
        )
        bare = key('//ldml/units/unitLength/unit[@type="mass-gram"]/unitPattern')
        assert rule.match(bare, JAPANESE) is not None

    def test_calendar_list(self) -> None:
        rule = CoverageRule.create("dates/calendars/calendar[@type='${Calendar-List}']", "basic")
        assert rule.match(key('//ldml/dates/calendars/calendar[@type="gregorian"]'), GERMAN)
        assert rule.match(key('//ldml/dates/calendars/calendar[@type="hebrew"]'), GERMAN) is None


class TestRuleFilters:
    """inLanguage / inScript / inTerritory."""

    def test_no_filters_apply_everywhere(self) -> None:
        assert CoverageRule.create("identity", "core").applies_to(JAPANESE)

    def test_in_language_full_match(self) -> None:
        rule = CoverageRule.create("identity", "core", in_language="de|en")
        assert rule.applies_to(GERMAN)
        assert rule.applies_to(ENGLISH)
        assert not rule.applies_to(JAPANESE)
        assert not CoverageRule.create("identity", "core", in_language="d").applies_to(GERMAN)

    def test_in_script(self) -> None:
        rule = CoverageRule.create("identity", "core", in_script="Jpan Hani")
        assert rule.applies_to(JAPANESE)
        assert not rule.applies_to(GERMAN)

    def test_in_territory(self) -> None:
        rule = CoverageRule.create("identity", "core", in_territory=["CH"])
        assert rule.applies_to(GERMAN)
        assert not rule.applies_to(ENGLISH)

    def test_filters_combine_with_or(self) -> None:
        rule = CoverageRule.create("identity", "core", in_language="ja", in_territory="GB")
        assert rule.applies_to(JAPANESE)
        assert rule.applies_to(ENGLISH)
        assert not rule.applies_to(GERMAN)

    def test_filtered_rule_does_not_match(self) -> None:
        rule = CoverageRule.create("identity", "core", in_language="ja")
        assert rule.match(key("//ldml/identity"), GERMAN) is None
        assert rule.match(key("//ldml/identity"), JAPANESE) is not None


class TestSubstituteVariables:
    """%name expansion."""

    def test_simple(self) -> None:
        assert (
            substitute_variables("dates/%cal/months", {"cal": "calendar[@type=*]"})
            == "dates/calendar[@type=*]/months"
        )

    def test_nested(self) -> None:
        variables = {"width": "(narrow|wide)", "ctx": "monthWidth[@type='%width']"}
        assert substitute_variables("%ctx", variables) == "monthWidth[@type='(narrow|wide)']"

    def test_no_references(self) -> None:
        assert substitute_variables("identity", {}) == "identity"

    def test_undefined(self) -> None:
        with pytest.raises(InvalidRuleError, match="undefined variable %missing"):
            substitute_variables("a/%missing", {})

    def test_mutual_reference(self) -> None:
        with pytest.raises(InvalidRuleError, match="refer to each other"):
            substitute_variables("%a", {"a": "%b", "b": "%a"})


class TestRuleSet:
    """Priority order and first-match semantics."""

    def test_sorted_by_level_then_text(self) -> None:
        rules = CoverageRuleSet(
            [
                CoverageRule.create("b", "modern"),
                CoverageRule.create("a", "modern"),
                CoverageRule.create("z", "core"),
            ]
        )
        assert [str(rule) for rule in rules] == ["core: z", "modern: a", "modern: b"]

    def test_unsorted_keeps_order(self) -> None:
        rules = CoverageRuleSet(
            [CoverageRule.create("b", "modern"), CoverageRule.create("a", "core")], sort=False
        )
        assert [rule.pattern.text for rule in rules.rules] == ["b", "a"]

    def test_first_match_wins(self) -> None:
        rules = CoverageRuleSet(
            [
                CoverageRule.create("numbers/...", "modern"),
                CoverageRule.create("numbers/symbols/decimal", "core"),
            ]
        )
        decimal = key("//ldml/numbers/symbols/decimal")
        assert rules.level_of(decimal, ENGLISH) is CoverageLevel.CORE
        assert rules.level_of(key("//ldml/numbers/symbols/group"), ENGLISH) is CoverageLevel.MODERN

    def test_default_is_optional(self) -> None:
        rules = CoverageRuleSet([CoverageRule.create("identity", "core")])
        assert rules.first_match(key("//ldml/numbers"), ENGLISH) is None
        assert rules.level_of(key("//ldml/numbers"), ENGLISH) is CoverageLevel.OPTIONAL

    def test_predicate_failure_falls_through(self) -> None:
        rules = CoverageRuleSet(
            [
                CoverageRule.create(CURRENCY_RULE, "basic"),
                CoverageRule.create("numbers/currencies/currency[@type=*]/symbol", "comprehensive"),
            ]
        )
        assert rules.level_of(key(CURRENCY_KEY.format("USD")), ENGLISH) is CoverageLevel.BASIC
        assert (
            rules.level_of(key(CURRENCY_KEY.format("XAF")), ENGLISH)
            is CoverageLevel.COMPREHENSIVE
        )

    def test_len_and_repr(self) -> None:
        rules = CoverageRuleSet([CoverageRule.create("identity", "core")])
        assert len(rules) == 1
        assert repr(rules) == "CoverageRuleSet(rules=1)"


class TestRuleSetFromEntries:
    """coverageLevel-style entries."""

    def test_entries_with_variables(self) -> None:
        rules = CoverageRuleSet.from_entries(
            [
                {"value": "modern", "match": "dates/calendars/calendar[@type='%cal']/months"},
                {"level": "core", "match": "identity", "inLanguage": "de"},
            ],
            variables={"cal": "(gregorian|generic)"},
        )
        assert len(rules) == 2
        months = key('//ldml/dates/calendars/calendar[@type="generic"]/months')
        assert rules.level_of(months, ENGLISH) is CoverageLevel.MODERN
        assert rules.level_of(key("//ldml/identity"), GERMAN) is CoverageLevel.CORE
        assert rules.level_of(key("//ldml/identity"), ENGLISH) is CoverageLevel.OPTIONAL

    def test_entry_filters(self) -> None:
        rules = CoverageRuleSet.from_entries(
            [{"value": "basic", "match": "identity", "inScript": "Jpan", "inTerritory": "CH"}]
        )
        rule = rules.rules[0]
        assert rule.in_script == frozenset({"Jpan"})
        assert rule.in_territory == frozenset({"CH"})

    @pytest.mark.parametrize("entry", [{"value": "core"}, {"match": "identity"}, {"match": 3}])
    def test_incomplete_entry(self, entry: dict[str, object]) -> None:
        with pytest.raises(InvalidRuleError, match="needs 'match' and 'value'"):
            CoverageRuleSet.from_entries([entry])
