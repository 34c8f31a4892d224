"""Tests for byte-to-character offset translation."""

import unittest

import pytest

from regexsolve.offsets import IdentityTranslator, OffsetTranslator
from regexsolve.types import CaptureSpan


class TestOffsetTranslator(unittest.TestCase):
    """Test suite for OffsetTranslator."""

    def test_ascii_is_identity(self) -> None:
        """1. ASCII: Byte and character positions coincide."""
        translator = OffsetTranslator.for_text("hello world")
        assert translator.to_char_span(6, 5) == CaptureSpan(6, 5)
        assert translator.char_count == 11

    def test_two_byte_characters(self) -> None:
        """2. Multi-byte: Offsets after multi-byte characters shrink."""
        translator = OffsetTranslator.for_text("héllo wörld")
        assert translator.to_char_span(7, 6) == CaptureSpan(6, 5)

    def test_four_byte_characters(self) -> None:
        """3. Astral: A four-byte character counts as one character."""
        translator = OffsetTranslator.for_text("😀a😀b")
        assert translator.to_char_span(4, 1) == CaptureSpan(1, 1)
        assert translator.to_char_span(5, 4) == CaptureSpan(2, 1)
        assert translator.to_char_span(9, 1) == CaptureSpan(3, 1)

    def test_offset_inside_character_rounds_down(self) -> None:
        """4. Mid-character: An offset inside a character maps to that character."""
        translator = OffsetTranslator.for_text("aéb")
        # "é" occupies bytes 1 and 2
        assert translator.char_index(2) == 1
        assert translator.to_char_span(2, 0) == CaptureSpan(1, 0)

    def test_partial_range_counts_touched_characters(self) -> None:
        """5. Partial Range: A byte range counts every character it touches."""
        translator = OffsetTranslator.for_text("aéb")
        assert translator.to_char_span(1, 1) == CaptureSpan(1, 1)
        assert translator.to_char_span(2, 2) == CaptureSpan(1, 2)

    def test_end_of_buffer(self) -> None:
        """6. End: The buffer size maps to the character count."""
        translator = OffsetTranslator.for_text("日本")
        assert translator.char_index(6) == 2
        assert translator.to_char_span(6, 0) == CaptureSpan(2, 0)

    def test_empty_buffer(self) -> None:
        """7. Empty: An empty subject has one position, zero."""
        translator = OffsetTranslator.for_text("")
        assert translator.char_count == 0
        assert translator.to_char_span(0, 0) == CaptureSpan(0, 0)

    def test_out_of_range_rejected(self) -> None:
        """8. Bounds: Offsets outside the buffer raise ValueError."""
        translator = OffsetTranslator.for_text("abc")
        with pytest.raises(ValueError, match="outside a buffer"):
            translator.char_index(4)
        with pytest.raises(ValueError, match="outside a buffer"):
            translator.char_index(-1)
        with pytest.raises(ValueError, match="non-negative"):
            translator.to_char_span(0, -1)

    def test_character_offset_never_exceeds_byte_offset(self) -> None:
        """9. Monotonic: Character positions never exceed byte positions."""
        text = "añb€c😀d"
        buffer = text.encode("utf-8")
        translator = OffsetTranslator(buffer)
        previous = -1
        for offset in range(len(buffer) + 1):
            index = translator.char_index(offset)
            assert index <= offset
            assert index >= previous
            previous = index

    def test_lone_surrogate_subject(self) -> None:
        """10. Surrogates: Lone surrogates are indexed as single characters."""
        translator = OffsetTranslator.for_text("a\ud800b")
        assert translator.char_count == 3
        assert translator.to_char_span(4, 1) == CaptureSpan(2, 1)


class TestIdentityTranslator(unittest.TestCase):
    """Test suite for IdentityTranslator."""

    def test_pass_through(self) -> None:
        """1. Pass-through: Spans are returned unchanged."""
        assert IdentityTranslator().to_char_span(3, 2) == CaptureSpan(3, 2)
