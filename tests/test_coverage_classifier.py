"""Tests for CoverageClassifier sessions."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ldmlengine import EngineConfig
from ldmlengine.coverage import CoverageClassifier, CoverageContext, CoverageRule, CoverageRuleSet
from ldmlengine.diagnostics import InvalidLocaleError, MalformedKeyError
from ldmlengine.enums import CoverageLevel

DAY_PERIOD = (
    '//ldml/dates/calendars/calendar[@type="gregorian"]/dayPeriods'
    '/dayPeriodContext[@type="format"]/dayPeriodWidth[@type="wide"]/dayPeriod[@type="{}"]'
)
CURRENCY = '//ldml/numbers/currencies/currency[@type="{}"]/symbol'
LANGUAGE = "//ldml/identity/language"
DECIMAL = "//ldml/numbers/symbols/decimal"

RULES = CoverageRuleSet(
    [
        CoverageRule.create("identity/language", "core"),
        CoverageRule.create("numbers/symbols/decimal", "basic"),
        CoverageRule.create("numbers/currencies/currency[@type='${Target-Currencies}']/symbol", "moderate"),
        CoverageRule.create(
            "dates/calendars/calendar[@type=*]/.../dayPeriod[@type=?]",
            "modern",
            predicate="Target_Plurals",
        ),
        CoverageRule.create("numbers/...", "comprehensive"),
    ]
)

CONTEXTS = {
    "en": CoverageContext.create(
        "en", territories=["US"], currencies=["USD"], plurals=["one", "other", "0", "1"]
    ),
    "ja": CoverageContext.create(
        "ja", territories=["JP"], currencies=["JPY"], plurals=["other", "0", "1"]
    ),
}

SAMPLE_KEYS = [
    LANGUAGE,
    DECIMAL,
    CURRENCY.format("USD"),
    CURRENCY.format("JPY"),
    DAY_PERIOD.format("one"),
    DAY_PERIOD.format("am"),
    "//ldml/numbers/symbols/group",
    "//ldml/identity/version",
]


@pytest.fixture
def classifier() -> CoverageClassifier:
    return CoverageClassifier(RULES, CONTEXTS)


class TestClassify:
    """Level assignment."""

    def test_rule_levels(self, classifier: CoverageClassifier) -> None:
        assert classifier.classify("en", LANGUAGE) is CoverageLevel.CORE
        assert classifier.classify("en", DECIMAL) is CoverageLevel.BASIC
        assert classifier.classify("en", CURRENCY.format("USD")) is CoverageLevel.MODERATE

    def test_predicate_failure_falls_to_later_rule(self, classifier: CoverageClassifier) -> None:
        assert classifier.classify("en", CURRENCY.format("JPY")) is CoverageLevel.COMPREHENSIVE
        assert classifier.classify("ja", CURRENCY.format("JPY")) is CoverageLevel.MODERATE

    def test_day_period_plural_predicate(self, classifier: CoverageClassifier) -> None:
        assert classifier.classify("en", DAY_PERIOD.format("one")) is CoverageLevel.MODERN
        assert classifier.classify("en", DAY_PERIOD.format("am")) is CoverageLevel.OPTIONAL
        assert classifier.classify("ja", DAY_PERIOD.format("one")) is CoverageLevel.OPTIONAL

    def test_no_rule_is_optional(self, classifier: CoverageClassifier) -> None:
        assert classifier.classify("en", "//ldml/identity/version") is CoverageLevel.OPTIONAL

    def test_sublocale_uses_language_context(self, classifier: CoverageClassifier) -> None:
        assert classifier.classify("en_GB", CURRENCY.format("USD")) is CoverageLevel.MODERATE
        assert classifier.classify("en-Latn-US", CURRENCY.format("USD")) is CoverageLevel.MODERATE

    def test_unknown_language_uses_unknown_context(self, classifier: CoverageClassifier) -> None:
        assert classifier.context_for("fr") == CoverageContext.unknown("fr")
        assert classifier.classify("fr", DAY_PERIOD.format("one")) is CoverageLevel.OPTIONAL
        assert classifier.classify("fr", DAY_PERIOD.format("other")) is CoverageLevel.MODERN

    def test_key_objects_and_text_agree(self, classifier: CoverageClassifier) -> None:
        from ldmlengine.syntax import Key

        assert classifier.classify("en", Key.parse(DECIMAL)) is classifier.classify("en", DECIMAL)

    def test_plain_rule_iterable(self) -> None:
        classifier = CoverageClassifier(
            [CoverageRule.create("identity/language", "core")], {"en": CONTEXTS["en"]}
        )
        assert isinstance(classifier.rules, CoverageRuleSet)
        assert classifier.classify("en", LANGUAGE) is CoverageLevel.CORE

    def test_matching_rule(self, classifier: CoverageClassifier) -> None:
        rule = classifier.matching_rule("en", DECIMAL)
        assert rule is not None
        assert rule.level is CoverageLevel.BASIC
        assert classifier.matching_rule("en", "//ldml/identity/version") is None


class TestErrors:
    """Malformed input is rejected, not classified."""

    def test_malformed_key(self, classifier: CoverageClassifier) -> None:
        with pytest.raises(MalformedKeyError):
            classifier.classify("en", "//ldml//identity")

    def test_malformed_locale(self, classifier: CoverageClassifier) -> None:
        with pytest.raises(InvalidLocaleError):
            classifier.classify("e!n", LANGUAGE)


class TestRequiredAndCounts:
    """is_required and level_counts."""

    def test_is_required(self, classifier: CoverageClassifier) -> None:
        assert classifier.is_required("en", LANGUAGE, "basic")
        assert classifier.is_required("en", DECIMAL, CoverageLevel.BASIC)
        assert not classifier.is_required("en", DAY_PERIOD.format("one"), "moderate")
        assert classifier.is_required("en", DAY_PERIOD.format("one"), 80)

    def test_optional_never_required(self, classifier: CoverageClassifier) -> None:
        assert not classifier.is_required(
            "en", "//ldml/identity/version", CoverageLevel.COMPREHENSIVE
        )

    def test_level_counts(self, classifier: CoverageClassifier) -> None:
        counts = classifier.level_counts("en", SAMPLE_KEYS)
        assert sum(counts.values()) == len(SAMPLE_KEYS)
        assert counts[CoverageLevel.CORE] == 1
        assert counts[CoverageLevel.MODERATE] == 1
        assert counts[CoverageLevel.COMPREHENSIVE] == 2
        assert counts[CoverageLevel.OPTIONAL] == 2


class TestSessionCaching:
    """Result cache and per-language context memo."""

    def test_repeated_classification_hits_cache(self, classifier: CoverageClassifier) -> None:
        classifier.classify("en", DECIMAL)
        classifier.classify("en", DECIMAL)
        stats = classifier.cache_stats
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1

    def test_locale_spellings_share_cache_entry(self, classifier: CoverageClassifier) -> None:
        classifier.classify("en_US", DECIMAL)
        classifier.classify("en-us", DECIMAL)
        assert classifier.cache_stats["size"] == 1

    def test_clear_cache(self, classifier: CoverageClassifier) -> None:
        classifier.classify("en", DECIMAL)
        classifier.clear_cache()
        stats = classifier.cache_stats
        assert stats["size"] == 0
        assert stats["hits"] == 0

    def test_cache_size_from_config(self) -> None:
        classifier = CoverageClassifier(
            RULES, CONTEXTS, config=EngineConfig(classification_cache_size=7)
        )
        assert classifier.cache_stats["maxsize"] == 7

    def test_explicit_cache_size_wins(self) -> None:
        classifier = CoverageClassifier(
            RULES, CONTEXTS, cache_size=3, config=EngineConfig(classification_cache_size=7)
        )
        assert classifier.cache_stats["maxsize"] == 3

    def test_zero_cache_size_rejected(self) -> None:
        with pytest.raises(ValueError, match="maxsize must be positive"):
            CoverageClassifier(RULES, CONTEXTS, cache_size=0)

    def test_default_session_keeps_every_result(self, classifier: CoverageClassifier) -> None:
        assert classifier.cache_stats["maxsize"] is None
        sweep = [CURRENCY.format(f"X{index:02d}") for index in range(20)]
        for _ in range(3):
            classifier.level_counts("en", sweep)
        stats = classifier.cache_stats
        assert stats["misses"] == 20
        assert stats["hits"] == 40
        assert stats["size"] == 20

    def test_bound_smaller_than_sweep_never_hits(self) -> None:
        classifier = CoverageClassifier(RULES, CONTEXTS, cache_size=10)
        sweep = [CURRENCY.format(f"X{index:02d}") for index in range(20)]
        for _ in range(3):
            classifier.level_counts("en", sweep)
        stats = classifier.cache_stats
        assert stats["hits"] == 0
        assert stats["misses"] == 60

    def test_factory_called_once_per_language(self) -> None:
        calls: list[str] = []

        def factory(language: str) -> CoverageContext:
            calls.append(language)
            return CoverageContext.unknown(language)

        classifier = CoverageClassifier(RULES, factory)
        for locale in ("de", "de_AT", "de_CH", "fr", "de"):
            classifier.classify(locale, DECIMAL)
        assert calls == ["de", "fr"]
        assert classifier.context_for("de_LU") is classifier.context_for("de")


class TestDeterminism:
    """Same inputs, same level, regardless of order or threads."""

    @given(st.permutations(SAMPLE_KEYS))
    def test_order_independent(self, keys: list[str]) -> None:
        reference = CoverageClassifier(RULES, CONTEXTS)
        expected = {key: reference.classify("en", key) for key in SAMPLE_KEYS}
        session = CoverageClassifier(RULES, CONTEXTS)
        assert {key: session.classify("en", key) for key in keys} == expected

    def test_concurrent_sessions_agree(self) -> None:
        sequential = CoverageClassifier(RULES, CONTEXTS)
        expected = [
            sequential.classify(locale, key) for locale in ("en", "ja") for key in SAMPLE_KEYS
        ]
        shared = CoverageClassifier(RULES, CONTEXTS, cache_size=4)
        jobs = [(locale, key) for locale in ("en", "ja") for key in SAMPLE_KEYS] * 25
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda job: shared.classify(*job), jobs))
        assert results == expected * 25
