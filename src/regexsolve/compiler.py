r"""
Reads delimited expressions and compiles them with the `regex` engine.

An expression has the PCRE shape `<delim><body><delim><modifiers>`, for example
`/a(b)c/i` or `{\d+}x`. The global flag `g` is not an engine modifier: it only
selects between the find-first and find-all primitives, so it is pulled out of
the modifier string before the expression is assembled.

Without the `u` modifier the engine runs in byte mode over the UTF-8 encoding
of the pattern and the subject, and every position it reports is a byte offset.
With `u` it runs over code points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

import regex

from regexsolve.offsets import IdentityTranslator, OffsetTranslator, SpanTranslator
from regexsolve.types import PatternSpec

__all__ = [
    "GLOBAL_FLAG",
    "CompiledPattern",
    "ModifierSet",
    "PatternSyntaxError",
    "anchor_dollar_at_end",
    "build_pattern_spec",
    "compile_expression",
    "compile_spec",
    "parse_modifiers",
    "split_expression",
]

logger = logging.getLogger(__name__)

GLOBAL_FLAG: Final[str] = "g"
UNICODE_MODIFIER: Final[str] = "u"
ANCHORED_MODIFIER: Final[str] = "A"
DOLLAR_END_ONLY_MODIFIER: Final[str] = "D"

_BRACKET_DELIMITERS: Final[dict[str, str]] = {"(": ")", "[": "]", "{": "}", "<": ">"}
_FLAG_MODIFIERS: Final[dict[str, int]] = {
    "i": regex.IGNORECASE,
    "m": regex.MULTILINE,
    "s": regex.DOTALL,
    "x": regex.VERBOSE,
}
# Accepted for compatibility, no effect on this engine.
_NOOP_MODIFIERS: Final[frozenset[str]] = frozenset("SXJ")
# No equivalent in this engine.
_UNSUPPORTED_MODIFIERS: Final[frozenset[str]] = frozenset("U")


class PatternSyntaxError(ValueError):
    """Raised when a delimited expression cannot be split or its modifiers read."""


def build_pattern_spec(pattern: str, delimiter: str, modifiers: str) -> PatternSpec:
    """
    Build a pattern descriptor, extracting the global flag from the modifiers.

    Args:
        pattern: The pattern body.
        delimiter: The delimiter framing the body. Not validated here.
        modifiers: The raw modifier string, possibly containing `g`.

    Returns:
        An immutable PatternSpec whose modifiers no longer contain `g`.

    """
    is_global = GLOBAL_FLAG in modifiers
    if is_global:
        modifiers = modifiers.replace(GLOBAL_FLAG, "")
    return PatternSpec(pattern=pattern, delimiter=delimiter, modifiers=modifiers, is_global=is_global)


def split_expression(expression: str) -> tuple[str, str]:
    """
    Split a delimited expression into its body and trailing modifier string.

    Bracket-style delimiters close with their partner and may nest. A backslash
    escapes the following character while searching for the closing delimiter.

    Raises:
        PatternSyntaxError: If the expression is empty, uses an illegal
            delimiter, or has no closing delimiter.

    """
    text = expression.lstrip()
    if not text:
        msg = "Empty regular expression"
        raise PatternSyntaxError(msg)

    delimiter = text[0]
    if (delimiter.isascii() and delimiter.isalnum()) or delimiter in "\\\0":
        msg = "Delimiter must not be alphanumeric, backslash, or NUL"
        raise PatternSyntaxError(msg)

    closer = _BRACKET_DELIMITERS.get(delimiter, delimiter)
    depth = 1
    index = 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == closer:
            depth -= 1
            if depth == 0:
                return text[1:index], text[index + 1 :]
        elif char == delimiter:
            depth += 1
        index += 1

    if closer != delimiter:
        msg = f"No ending matching delimiter '{closer}' found"
    else:
        msg = f"No ending delimiter '{delimiter}' found"
    raise PatternSyntaxError(msg)


@dataclass(frozen=True)
class ModifierSet:
    """Engine settings read from a modifier string."""

    flags: int = 0
    unicode: bool = False
    anchored: bool = False
    dollar_end_only: bool = False


def parse_modifiers(modifiers: str) -> ModifierSet:
    """
    Read a modifier string into engine settings.

    Raises:
        PatternSyntaxError: On an unknown or unsupported modifier.

    """
    flags = 0
    unicode = False
    anchored = False
    dollar_end_only = False
    for char in modifiers:
        if char.isspace() or char in _NOOP_MODIFIERS:
            continue
        if char in _FLAG_MODIFIERS:
            flags |= _FLAG_MODIFIERS[char]
        elif char == UNICODE_MODIFIER:
            unicode = True
        elif char == ANCHORED_MODIFIER:
            anchored = True
        elif char == DOLLAR_END_ONLY_MODIFIER:
            dollar_end_only = True
        elif char in _UNSUPPORTED_MODIFIERS:
            msg = f"Modifier '{char}' is not supported"
            raise PatternSyntaxError(msg)
        else:
            msg = f"Unknown modifier '{char}'"
            raise PatternSyntaxError(msg)
    return ModifierSet(flags=flags, unicode=unicode, anchored=anchored, dollar_end_only=dollar_end_only)


def anchor_dollar_at_end(body: str) -> str:
    r"""
    Rewrite every `$` assertion in a pattern body into `\Z`.

    Escaped characters and character class members are left alone, so only
    `$` used as an end assertion changes meaning: it no longer matches before
    a trailing newline.
    """
    out: list[str] = []
    index = 0
    in_class = False
    while index < len(body):
        char = body[index]
        if char == "\\":
            out.append(body[index : index + 2])
            index += 2
            continue
        if in_class:
            posix_end = body.find(":]", index + 2) if body.startswith("[:", index) else -1
            if posix_end != -1:
                # POSIX class such as [:alpha:]
                out.append(body[index : posix_end + 2])
                index = posix_end + 2
                continue
            in_class = char != "]"
        elif char == "[":
            # A `]` right after the opening bracket (or `[^`) is a literal member.
            end = index + 1
            if body.startswith("^", end):
                end += 1
            if body.startswith("]", end):
                end += 1
            out.append(body[index:end])
            index = end
            in_class = True
            continue
        elif char == "$":
            char = "\\Z"
        out.append(char)
        index += 1
    return "".join(out)


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled expression together with the unit system it matches in."""

    pattern: regex.Pattern
    unicode: bool

    def encode_subject(self, text: str) -> str | bytes:
        """
        Prepare a subject for matching.

        Raises:
            UnicodeEncodeError: In unicode mode, if the text is not valid UTF-8
                material (e.g. it contains lone surrogates).

        """
        if self.unicode:
            text.encode("utf-8")
            return text
        return text.encode("utf-8", "surrogatepass")

    def encode_template(self, template: str) -> str | bytes:
        """Prepare a substitution template in the same unit system as the subject."""
        if self.unicode:
            return template
        return template.encode("utf-8", "surrogatepass")

    def decode_output(self, value: str | bytes) -> str:
        """
        Turn engine output back into text.

        Lone surrogates carried through byte mode decode back unchanged. Output
        that splits a multi-byte character falls back to replacement characters.
        """
        if not isinstance(value, bytes):
            return value
        try:
            return value.decode("utf-8", "surrogatepass")
        except UnicodeDecodeError:
            return value.decode("utf-8", "replace")

    def translator_for(self, text: str) -> SpanTranslator:
        """Return the span translator matching this pattern's unit system."""
        if self.unicode:
            return IdentityTranslator()
        return OffsetTranslator.for_text(text)


@lru_cache(maxsize=256)
def compile_expression(expression: str) -> CompiledPattern:
    """
    Compile a delimited expression.

    Raises:
        PatternSyntaxError: If the delimiters or modifiers are malformed.
        regex.error: If the engine rejects the pattern body.

    """
    body, modifier_string = split_expression(expression)
    modifiers = parse_modifiers(modifier_string)
    flags = modifiers.flags
    if modifiers.dollar_end_only and not flags & regex.MULTILINE:
        body = anchor_dollar_at_end(body)
    if modifiers.anchored:
        # A verbose-mode comment must not swallow the closing parenthesis.
        body = "\\G(?:" + body + ("\n)" if flags & regex.VERBOSE else ")")

    source: str | bytes = body if modifiers.unicode else body.encode("utf-8", "surrogatepass")
    compiled = regex.compile(source, flags)
    logger.debug("Compiled expression %r (%s)", expression, modifiers)
    return CompiledPattern(pattern=compiled, unicode=modifiers.unicode)


def compile_spec(spec: PatternSpec) -> CompiledPattern:
    """Compile the expression described by a PatternSpec."""
    return compile_expression(spec.expression)
