"""
Tests for the tokenizer, value converter and argument binding.
"""

import math

import pytest

from replkit.commands import (
    ArgSpec,
    ArgType,
    ArityMismatch,
    CommandRegistry,
    ConversionError,
    ConversionFailed,
    Token,
    TypedArg,
    UnterminatedQuote,
)
from replkit.interface.parser import (
    BOOL_LITERALS,
    bind_args,
    build_usage,
    convert,
    format_value,
    quote_token,
    split_words,
    tokenize,
)


class TestTokenize:
    """Quoting, escaping and spans."""

    def test_quoted_token_keeps_inner_whitespace(self):
        assert split_words('greet "Jane Doe" 30') == ["greet", "Jane Doe", "30"]

    def test_single_quotes(self):
        assert split_words("say 'hello   world'") == ["say", "hello   world"]

    def test_unterminated_quote_fails(self):
        with pytest.raises(UnterminatedQuote) as exc_info:
            tokenize('say "hello')
        assert exc_info.value.position == 4
        assert exc_info.value.quote == '"'

    def test_unterminated_quote_is_tolerated_when_lenient(self):
        assert split_words('say "hello wor', strict=False) == ["say", "hello wor"]

    @pytest.mark.parametrize("line", ["", "   ", "\t \n"])
    def test_blank_input_yields_no_tokens(self, line):
        assert tokenize(line) == []

    def test_escaped_quote_inside_quotes(self):
        assert split_words(r'say "she said \"hi\""') == ["say", 'she said "hi"']

    def test_escaped_backslash_inside_quotes(self):
        assert split_words(r'"a\\b"') == ["a\\b"]

    def test_other_backslashes_inside_quotes_are_literal(self):
        assert split_words(r'"C:\temp\new"') == [r"C:\temp\new"]

    def test_escaped_space_outside_quotes(self):
        assert split_words(r"open my\ file") == ["open", "my file"]

    def test_backslash_before_letter_outside_quotes_is_literal(self):
        assert split_words(r"cd C:\dir") == ["cd", r"C:\dir"]

    def test_adjacent_parts_join(self):
        assert split_words('ab"c d"e') == ["abc de"]

    def test_empty_quotes_yield_empty_token(self):
        assert split_words('set "" x') == ["set", "", "x"]

    def test_spans(self):
        tokens = tokenize('  greet "Jane Doe"  30')
        assert tokens == [
            Token("greet", 2, 7),
            Token("Jane Doe", 8, 18),
            Token("30", 20, 22),
        ]

    @pytest.mark.parametrize("text", ["plain", "two words", 'say "x"', "back\\slash", "", "it's"])
    def test_quote_token_reads_back(self, text):
        assert split_words(quote_token(text)) == [text]


class TestConvert:
    """Scalar conversion rules."""

    def test_text_is_identity(self):
        assert convert("  anything 12 ", ArgType.TEXT) == TypedArg(ArgType.TEXT, "  anything 12 ")

    @pytest.mark.parametrize("raw,expected", [("0", 0), ("42", 42), ("-7", -7), ("+3", 3), ("007", 7)])
    def test_integer_accepts_signed_decimal(self, raw, expected):
        assert convert(raw, ArgType.INTEGER).value == expected

    @pytest.mark.parametrize("raw", ["", "1.5", "0x10", "1_000", " 1", "abc", "--1", "١٢"])
    def test_integer_rejects_malformed(self, raw):
        with pytest.raises(ConversionFailed) as exc_info:
            convert(raw, ArgType.INTEGER)
        assert exc_info.value.raw == raw
        assert exc_info.value.expected is ArgType.INTEGER

    @pytest.mark.parametrize("raw,expected", [("1", 1.0), ("-2.5", -2.5), ("1e3", 1000.0), (".5", 0.5)])
    def test_float(self, raw, expected):
        assert convert(raw, ArgType.FLOAT).value == expected

    def test_float_infinity(self):
        assert math.isinf(convert("inf", ArgType.FLOAT).value)

    @pytest.mark.parametrize("raw", ["", "1_0", "one", " 2", "1,5"])
    def test_float_rejects_malformed(self, raw):
        with pytest.raises(ConversionFailed):
            convert(raw, ArgType.FLOAT)

    @pytest.mark.parametrize("raw", ["true", "TRUE", "Yes", "on"])
    def test_boolean_true(self, raw):
        assert convert(raw, ArgType.BOOLEAN).value is True

    @pytest.mark.parametrize("raw", ["false", "No", "OFF"])
    def test_boolean_false(self, raw):
        assert convert(raw, ArgType.BOOLEAN).value is False

    @pytest.mark.parametrize("raw", ["", "1", "maybe", "y"])
    def test_boolean_rejects_other_words(self, raw):
        with pytest.raises(ConversionFailed):
            convert(raw, ArgType.BOOLEAN)

    def test_boolean_literal_set(self):
        assert BOOL_LITERALS == ("false", "no", "off", "on", "true", "yes")

    def test_typed_arg_equality_ignores_raw(self):
        assert convert("007", ArgType.INTEGER) == TypedArg(ArgType.INTEGER, 7)

    @pytest.mark.parametrize("value,arg_type", [
        ("Jane Doe", ArgType.TEXT),
        (-12, ArgType.INTEGER),
        (0.1, ArgType.FLOAT),
        (-1e300, ArgType.FLOAT),
        (float("inf"), ArgType.FLOAT),
        (True, ArgType.BOOLEAN),
        (False, ArgType.BOOLEAN),
    ])
    def test_format_then_convert_gives_equal_value(self, value, arg_type):
        assert convert(format_value(value, arg_type), arg_type).value == value


class TestBindArgs:
    """Positional matching against signatures."""

    @pytest.fixture
    def reg(self):
        reg = CommandRegistry()
        reg.register("pair", [ArgSpec("a"), ArgSpec("b", ArgType.INTEGER)], "", print)
        reg.register("opt", [ArgSpec("a"), ArgSpec("b", ArgType.INTEGER, optional=True, default=5)], "", print)
        reg.register("many", [ArgSpec("xs", ArgType.INTEGER, variadic=True)], "", print)
        reg.register("some", [ArgSpec("xs", ArgType.INTEGER, variadic=True, optional=False),
                              ], "", print)
        reg.register("any", [ArgSpec("xs", ArgType.INTEGER, variadic=True, optional=True)], "", print)
        return reg

    def test_exact_signature(self, reg):
        typed, values = bind_args(reg.lookup("pair"), ["x", "2"])
        assert typed == [TypedArg(ArgType.TEXT, "x"), TypedArg(ArgType.INTEGER, 2)]
        assert values == ["x", 2]

    def test_missing_optional_uses_default(self, reg):
        typed, values = bind_args(reg.lookup("opt"), ["x"])
        assert typed == [TypedArg(ArgType.TEXT, "x")]
        assert values == ["x", 5]

    def test_too_few(self, reg):
        result = bind_args(reg.lookup("pair"), ["x"])
        assert isinstance(result, ArityMismatch)
        assert (result.expected_min, result.expected_max, result.got) == (2, 2, 1)

    def test_too_many(self, reg):
        result = bind_args(reg.lookup("opt"), ["x", "1", "2"])
        assert isinstance(result, ArityMismatch)
        assert result.got == 3

    def test_required_variadic_needs_one(self, reg):
        assert isinstance(bind_args(reg.lookup("some"), []), ArityMismatch)
        _, values = bind_args(reg.lookup("some"), ["1", "2", "3"])
        assert values == [1, 2, 3]

    def test_optional_variadic_accepts_none(self, reg):
        assert bind_args(reg.lookup("any"), []) == ([], [])

    def test_first_conversion_failure_wins(self, reg):
        result = bind_args(reg.lookup("many"), ["1", "x", "y"])
        assert isinstance(result, ConversionError)
        assert (result.index, result.raw, result.expected) == (1, "x", ArgType.INTEGER)

    def test_usage(self, reg):
        assert build_usage(reg.lookup("opt")) == "opt <a:text> [b:integer]"
        assert build_usage(reg.lookup("any")) == "any [xs:integer...]"
