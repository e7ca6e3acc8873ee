"""Tests for diagnostics: templates, formatter output and exception context."""

import json

import pytest

from ldmlengine.diagnostics import (
    AliasCycleError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    InvalidLocaleError,
    LdmlError,
    MalformedKeyError,
    OutputFormat,
    UnknownLocaleError,
)


class TestTemplates:
    """Every factory carries its code and structured context."""

    def test_unknown_locale(self) -> None:
        diagnostic = ErrorTemplate.unknown_locale("xx_YY")
        assert diagnostic.code is DiagnosticCode.UNKNOWN_LOCALE
        assert diagnostic.message == "Locale 'xx_YY' is not in the locale tree"
        assert diagnostic.locale == "xx_YY"
        assert diagnostic.hint

    def test_parent_cycle(self) -> None:
        diagnostic = ErrorTemplate.parent_cycle(["a_B", "c_D", "a_B"])
        assert diagnostic.chain == ("a_B", "c_D", "a_B")
        assert diagnostic.locale == "a_B"
        assert "a_B -> c_D -> a_B" in diagnostic.message

    def test_alias_hops_exceeded(self) -> None:
        diagnostic = ErrorTemplate.alias_hops_exceeded("de", "//ldml/a", 4, ["de|//ldml/a"])
        assert diagnostic.code is DiagnosticCode.ALIAS_HOPS_EXCEEDED
        assert diagnostic.message == "Alias chain exceeded 4 hops"
        assert diagnostic.key == "//ldml/a"

    def test_malformed_key_position(self) -> None:
        diagnostic = ErrorTemplate.malformed_key("//ldml/", "trailing '/'", 7)
        assert diagnostic.position == 7
        assert diagnostic.key == "//ldml/"

    def test_invalid_alias_location(self) -> None:
        assert "in 'de'" in ErrorTemplate.invalid_alias("de", "//ldml/a", "bad").message
        assert "in '" not in ErrorTemplate.invalid_alias(None, "//ldml/a", "bad").message

    def test_invalid_rule(self) -> None:
        diagnostic = ErrorTemplate.invalid_rule("identity", "no level")
        assert diagnostic.message == "Invalid coverage rule 'identity': no level"

    @pytest.mark.parametrize(
        ("diagnostic", "code"),
        [
            (ErrorTemplate.invalid_locale_id("e!n", "bad"), DiagnosticCode.INVALID_LOCALE_ID),
            (
                ErrorTemplate.ancestor_depth_exceeded("de", 3, ["de", "root"]),
                DiagnosticCode.ANCESTOR_DEPTH_EXCEEDED,
            ),
            (ErrorTemplate.pattern_syntax("a//b", "empty"), DiagnosticCode.PATTERN_SYNTAX),
        ],
    )
    def test_codes(self, diagnostic: Diagnostic, code: DiagnosticCode) -> None:
        assert diagnostic.code is code
        assert str(diagnostic) == diagnostic.message


class TestFormatter:
    """Rust, simple and JSON output."""

    DIAGNOSTIC = Diagnostic(
        code=DiagnosticCode.ALIAS_HOPS_EXCEEDED,
        message="Alias chain exceeded 2 hops",
        hint="Check the alias table",
        locale="de",
        key="//ldml/a",
        chain=("de|//ldml/a", "de|//ldml/b", "de|//ldml/a"),
    )

    def test_rust(self) -> None:
        text = DiagnosticFormatter().format(self.DIAGNOSTIC)
        assert text.splitlines() == [
            "error[ALIAS_HOPS_EXCEEDED]: Alias chain exceeded 2 hops",
            "  = locale: de",
            "  = key: //ldml/a",
            "  = chain: de|//ldml/a -> de|//ldml/b -> de|//ldml/a",
            "  = help: Check the alias table",
        ]

    def test_rust_position(self) -> None:
        text = DiagnosticFormatter().format(ErrorTemplate.pattern_syntax("a//b", "empty", 2))
        assert "  --> offset 2" in text.splitlines()

    def test_simple(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(self.DIAGNOSTIC) == (
            "ALIAS_HOPS_EXCEEDED: Alias chain exceeded 2 hops"
        )

    def test_json(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        data = json.loads(formatter.format(self.DIAGNOSTIC))
        assert data == {
            "code": "ALIAS_HOPS_EXCEEDED",
            "message": "Alias chain exceeded 2 hops",
            "severity": "error",
            "hint": "Check the alias table",
            "locale": "de",
            "key": "//ldml/a",
            "chain": ["de|//ldml/a", "de|//ldml/b", "de|//ldml/a"],
            "position": None,
        }

    def test_json_keeps_non_ascii(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        assert "西班牙文" in formatter.format(ErrorTemplate.unknown_locale("西班牙文"))

    def test_long_chain_elided(self) -> None:
        chain = tuple(f"de|//ldml/k{i}" for i in range(10))
        diagnostic = ErrorTemplate.alias_hops_exceeded("de", "//ldml/k0", 8, chain)
        text = DiagnosticFormatter(max_chain_length=4).format(diagnostic)
        assert "  = chain: de|//ldml/k0 -> de|//ldml/k1 -> ... -> de|//ldml/k8 -> de|//ldml/k9" in (
            text.splitlines()
        )

    def test_format_all(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        text = formatter.format_all(
            [ErrorTemplate.unknown_locale("a"), ErrorTemplate.unknown_locale("b")]
        )
        assert text.split("\n\n") == [
            "UNKNOWN_LOCALE: Locale 'a' is not in the locale tree",
            "UNKNOWN_LOCALE: Locale 'b' is not in the locale tree",
        ]

    def test_format_error_method(self) -> None:
        assert self.DIAGNOSTIC.format_error() == DiagnosticFormatter().format(self.DIAGNOSTIC)


class TestErrors:
    """Exception hierarchy and structured access."""

    def test_message_from_diagnostic(self) -> None:
        error = UnknownLocaleError(ErrorTemplate.unknown_locale("xx"))
        assert str(error) == "Locale 'xx' is not in the locale tree"
        assert error.locale == "xx"
        assert isinstance(error, LookupError)
        assert isinstance(error, LdmlError)

    def test_plain_message(self) -> None:
        error = LdmlError("boom")
        assert str(error) == "boom"
        assert error.diagnostic is None

    def test_alias_cycle_chain(self) -> None:
        error = AliasCycleError(
            ErrorTemplate.alias_hops_exceeded("de", "//ldml/a", 1, ["de|a", "de|b", "de|a"])
        )
        assert error.chain == ("de|a", "de|b", "de|a")
        assert AliasCycleError("plain").chain == ()

    @pytest.mark.parametrize("error_type", [InvalidLocaleError, MalformedKeyError])
    def test_value_errors(self, error_type: type[LdmlError]) -> None:
        assert issubclass(error_type, ValueError)
