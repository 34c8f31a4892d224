"""Tests for expression parsing and compilation."""

import unittest
import warnings
from pathlib import Path

import pytest
import regex

from regexsolve import compiler as compiler_module
from regexsolve.compiler import (
    GLOBAL_FLAG,
    ModifierSet,
    PatternSyntaxError,
    anchor_dollar_at_end,
    build_pattern_spec,
    compile_expression,
    compile_spec,
    parse_modifiers,
    split_expression,
)
from regexsolve.offsets import IdentityTranslator, OffsetTranslator
from regexsolve.types import PatternSpec


class TestBuildPatternSpec(unittest.TestCase):
    """Test suite for build_pattern_spec."""

    def test_global_flag_extracted(self) -> None:
        """1. Global: The 'g' flag is removed from the modifiers and recorded."""
        spec = build_pattern_spec("a", "/", "gi")
        assert spec.is_global
        assert spec.modifiers == "i"
        assert spec.expression == "/a/i"

    def test_no_global_flag(self) -> None:
        """2. Non-global: Modifiers are kept unchanged."""
        spec = build_pattern_spec("a", "#", "ms")
        assert not spec.is_global
        assert spec.modifiers == "ms"

    def test_every_global_flag_removed(self) -> None:
        """3. Repeated: Every occurrence of 'g' is removed."""
        spec = build_pattern_spec("a", "/", "gig")
        assert spec.is_global
        assert GLOBAL_FLAG not in spec.modifiers
        assert spec.modifiers == "i"


class TestSplitExpression(unittest.TestCase):
    """Test suite for split_expression."""

    def test_simple_delimiter(self) -> None:
        """1. Simple: Body and modifiers are separated."""
        assert split_expression("/a(b)c/i") == ("a(b)c", "i")

    def test_escaped_delimiter(self) -> None:
        """2. Escapes: A backslash-escaped delimiter does not close the body."""
        assert split_expression(r"/a\/b/") == (r"a\/b", "")

    def test_bracket_delimiters_nest(self) -> None:
        """3. Brackets: Bracket delimiters close with their partner and nest."""
        assert split_expression("{a{2}}x") == ("a{2}", "x")
        assert split_expression("(a(b)c)") == ("a(b)c", "")
        assert split_expression("<a>s") == ("a", "s")

    def test_leading_whitespace_skipped(self) -> None:
        """4. Whitespace: Leading whitespace is ignored."""
        assert split_expression("  #a#m") == ("a", "m")

    def test_empty_expression(self) -> None:
        """5. Empty: An empty expression is rejected."""
        with pytest.raises(PatternSyntaxError, match="Empty regular expression"):
            split_expression("   ")

    def test_illegal_delimiters(self) -> None:
        """6. Illegal: Alphanumeric and backslash delimiters are rejected."""
        for expression in ("abca", "1a1", "\\a\\"):
            with pytest.raises(PatternSyntaxError, match="Delimiter must not be alphanumeric"):
                split_expression(expression)

    def test_missing_ending_delimiter(self) -> None:
        """7. Unterminated: A missing closing delimiter is reported."""
        with pytest.raises(PatternSyntaxError, match="No ending delimiter '/' found"):
            split_expression("/abc")
        with pytest.raises(PatternSyntaxError, match="No ending matching delimiter '\\)' found"):
            split_expression("(abc")


class TestParseModifiers(unittest.TestCase):
    """Test suite for parse_modifiers."""

    def test_flag_modifiers(self) -> None:
        """1. Flags: i, m, s and x map onto engine flags."""
        modifiers = parse_modifiers("imsx")
        assert modifiers.flags == regex.IGNORECASE | regex.MULTILINE | regex.DOTALL | regex.VERBOSE
        assert not modifiers.unicode
        assert not modifiers.anchored

    def test_mode_modifiers(self) -> None:
        """2. Modes: u selects unicode mode, A anchors the match and D pins $ to the end."""
        assert parse_modifiers("u") == ModifierSet(unicode=True)
        assert parse_modifiers("A") == ModifierSet(anchored=True)
        assert parse_modifiers("D") == ModifierSet(dollar_end_only=True)

    def test_noop_modifiers_and_whitespace(self) -> None:
        """3. No-ops: S, X, J and whitespace are accepted and ignored."""
        assert parse_modifiers(" S\nXJ") == ModifierSet()

    def test_unsupported_modifier(self) -> None:
        """4. Unsupported: U is rejected with a clear message."""
        with pytest.raises(PatternSyntaxError, match="Modifier 'U' is not supported"):
            parse_modifiers("U")

    def test_unknown_modifier(self) -> None:
        """5. Unknown: Any other modifier is rejected."""
        with pytest.raises(PatternSyntaxError, match="Unknown modifier 'c'"):
            parse_modifiers("ic")


class TestAnchorDollarAtEnd(unittest.TestCase):
    """Test suite for anchor_dollar_at_end."""

    def test_dollar_assertion_rewritten(self) -> None:
        """1. Rewrite: A bare $ becomes an absolute end anchor."""
        assert anchor_dollar_at_end("a$") == r"a\Z"
        assert anchor_dollar_at_end("(a$|b$)") == r"(a\Z|b\Z)"

    def test_escaped_dollar_kept(self) -> None:
        """2. Escapes: An escaped dollar is a literal and stays."""
        assert anchor_dollar_at_end(r"a\$") == r"a\$"

    def test_class_members_kept(self) -> None:
        """3. Classes: A dollar inside a character class stays, including after ] and POSIX members."""
        assert anchor_dollar_at_end("[$]$") == r"[$]\Z"
        assert anchor_dollar_at_end("[]$]$") == r"[]$]\Z"
        assert anchor_dollar_at_end("[^]$]") == "[^]$]"
        assert anchor_dollar_at_end("[[:alpha:]$]$") == r"[[:alpha:]$]\Z"


class TestCompileExpression(unittest.TestCase):
    """Test suite for compile_expression and compile_spec."""

    def test_byte_mode_by_default(self) -> None:
        """1. Byte Mode: Without 'u' the pattern is compiled over bytes."""
        compiled = compile_expression("/abc/")
        assert not compiled.unicode
        assert compiled.encode_subject("xabc") == b"xabc"
        assert compiled.pattern.search(b"xabc").span() == (1, 4)
        assert isinstance(compiled.translator_for("xabc"), OffsetTranslator)

    def test_unicode_mode(self) -> None:
        """2. Unicode Mode: With 'u' the pattern is compiled over text."""
        compiled = compile_expression("/ö/u")
        assert compiled.unicode
        assert compiled.pattern.search("wörld").span() == (1, 2)
        assert isinstance(compiled.translator_for("wörld"), IdentityTranslator)

    def test_unicode_mode_rejects_lone_surrogates(self) -> None:
        """3. Bad Text: Unicode mode refuses subjects that are not valid UTF-8."""
        compiled = compile_expression("/a/u")
        with pytest.raises(UnicodeEncodeError):
            compiled.encode_subject("a\ud800")

    def test_byte_mode_output_decoding(self) -> None:
        """4. Decoding: Byte output is decoded back to text."""
        compiled = compile_expression("/a/")
        assert compiled.encode_template("é") == "é".encode()
        assert compiled.decode_output("é".encode()) == "é"

    def test_byte_mode_output_keeps_lone_surrogates(self) -> None:
        """5. Surrogates: Lone surrogates decode back unchanged; split characters become U+FFFD."""
        compiled = compile_expression("/a/")
        assert compiled.decode_output("a\ud800X".encode("utf-8", "surrogatepass")) == "a\ud800X"
        assert compiled.decode_output(b"\xc3") == "\ufffd"

    def test_dollar_end_only_modifier(self) -> None:
        """6. Dollar End: With 'D' a $ no longer matches before a trailing newline."""
        assert compile_expression("/a$/").pattern.search(b"a\n") is not None
        compiled = compile_expression("/a$/D")
        assert compiled.pattern.search(b"a\n") is None
        assert compiled.pattern.search(b"a") is not None

    def test_dollar_end_only_ignored_in_multiline(self) -> None:
        """7. Dollar End: 'D' has no effect together with 'm'."""
        assert compile_expression("/a$/Dm").pattern.search(b"a\nb") is not None

    def test_module_source_has_no_invalid_escapes(self) -> None:
        """8. Source: The compiler module compiles without escape-sequence warnings."""
        source = Path(compiler_module.__file__).read_text(encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, compiler_module.__file__, "exec")

    def test_case_insensitive(self) -> None:
        """9. Flags: Modifiers take effect on the compiled pattern."""
        compiled = compile_expression("/ABC/i")
        assert compiled.pattern.search(b"xabc") is not None

    def test_anchored_modifier(self) -> None:
        """10. Anchored: 'A' only matches at the search start."""
        compiled = compile_expression("/b/A")
        assert compiled.pattern.search(b"ab") is None
        assert compiled.pattern.search(b"ba") is not None

    def test_anchored_verbose_comment(self) -> None:
        """11. Anchored Verbose: A trailing comment does not swallow the anchor group."""
        compiled = compile_expression("/a # trailing comment/Ax")
        assert compiled.pattern.search(b"a") is not None

    def test_engine_rejects_invalid_body(self) -> None:
        """12. Syntax: An invalid pattern body raises the engine's error."""
        with pytest.raises(regex.error):
            compile_expression("/(/")

    def test_compile_spec_uses_expression(self) -> None:
        """13. PatternSpec: compile_spec compiles the assembled expression."""
        spec = PatternSpec(pattern="a(b)c", delimiter="/", modifiers="u")
        compiled = compile_spec(spec)
        assert compiled.unicode
        assert compiled.pattern.groups == 1
