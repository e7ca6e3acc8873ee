"""Quickstart example for ldmlengine.

This example builds a small locale dataset in memory, resolves keys through
the locale tree and an alias, and classifies keys by coverage level.

Note: Real datasets come from a loader implementing LocaleDataSource; the
in-memory tables here keep the example self-contained.
"""

from ldmlengine import (
    AliasCycleError,
    AliasEntry,
    CoverageClassifier,
    CoverageContext,
    CoverageRule,
    CoverageRuleSet,
    EngineConfig,
    EngineContext,
    ResolutionEngine,
)

DECIMAL = "//ldml/numbers/symbols/decimal"
GROUP = "//ldml/numbers/symbols/group"
SPANISH = '//ldml/localeDisplayNames/languages/language[@type="es"]'

# Example 1: Inheritance through the locale tree
print("=" * 50)
print("Example 1: Inheritance")
print("=" * 50)

context = EngineContext.build(
    {
        "root": {DECIMAL: ".", GROUP: ",", SPANISH: "Spanish"},
        "es": {DECIMAL: ",", SPANISH: "español"},
        "es_419": {DECIMAL: "."},
        "es_AR": {GROUP: "."},
    },
    # es_AR does not truncate to its parent; the curated link wins.
    explicit_parents={"es_AR": "es_419"},
)
engine = ResolutionEngine(context)

print(context.tree.ancestor_chain("es_AR"))
# Output: ('es_AR', 'es_419', 'es', 'root')

result = engine.resolve("es_AR", DECIMAL)
print(result.value, result.source_locale)
# Output: . es_419

result = engine.resolve("es-ar", SPANISH)
print(result.value, result.source_locale)
# Output: español es

# Example 2: Inherited-only value
print("\n" + "=" * 50)
print("Example 2: Inherited Value")
print("=" * 50)

print(engine.value("es_AR", GROUP))
# Output: .
print(engine.inherited_value("es_AR", GROUP).value)
# Output: ,

# Example 3: Aliases
print("\n" + "=" * 50)
print("Example 3: Aliases")
print("=" * 50)

context = EngineContext.build(
    {
        "root": {DECIMAL: "."},
        "zh": {SPANISH: "西班牙文"},
        "zh_Hant": {SPANISH: "西班牙文"},
        "zh_Hant_HK": {SPANISH: "西班牙文 (HK)"},
        "zh_HK": {},
        "zh_MO": {},
    },
    explicit_parents={"zh_HK": "zh_Hant_HK"},
    aliases={"zh_MO": [AliasEntry.create(SPANISH, locale="zh_HK")]},
)
engine = ResolutionEngine(context)

for step in engine.trace("zh_MO", SPANISH):
    print(step)
# Output:
# lookup: zh_MO|//ldml/localeDisplayNames/languages/language[@type="es"]
# alias: zh_HK|//ldml/localeDisplayNames/languages/language[@type="es"]
# ...
print(engine.value("zh_MO", SPANISH))
# Output: 西班牙文 (HK)

# Example 4: Alias cycles fail the query, not the engine
print("\n" + "=" * 50)
print("Example 4: Alias Cycles")
print("=" * 50)

context = EngineContext.build(
    {"root": {}, "de": {}},
    aliases={
        "de": [
            AliasEntry.create("//ldml/a", key="//ldml/b"),
            AliasEntry.create("//ldml/b", key="//ldml/a"),
        ]
    },
    config=EngineConfig(max_alias_hops=4),
)
try:
    ResolutionEngine(context).resolve("de", "//ldml/a")
except AliasCycleError as error:
    print(error.diagnostic.format_error() if error.diagnostic else error)
# Output: error[ALIAS_HOPS_EXCEEDED]: Alias chain exceeded 4 hops
# ...

# Example 5: Coverage classification
print("\n" + "=" * 50)
print("Example 5: Coverage Levels")
print("=" * 50)

rules = CoverageRuleSet(
    [
        CoverageRule.create("numbers/symbols/decimal", "basic"),
        CoverageRule.create(
            "dates/calendars/calendar[@type=*]/.../dayPeriod[@type=?]",
            "modern",
            predicate="Target_Plurals",
        ),
    ]
)
classifier = CoverageClassifier(
    rules,
    {"en": CoverageContext.create("en", plurals=["one", "other", "0", "1"])},
)
day_period = (
    '//ldml/dates/calendars/calendar[@type="gregorian"]/dayPeriods'
    '/dayPeriodContext[@type="format"]/dayPeriodWidth[@type="wide"]/dayPeriod[@type="{}"]'
)
print(classifier.classify("en_US", DECIMAL).name)
# Output: BASIC
print(classifier.classify("en_US", day_period.format("one")).name)
# Output: MODERN
print(classifier.classify("en_US", day_period.format("am")).name)
# Output: OPTIONAL
print(classifier.is_required("en_US", DECIMAL, "moderate"))
# Output: True
