"""
Byte-to-character offset translation.

In byte mode the engine matches against the UTF-8 encoding of the subject and
reports every position in storage bytes. Clients index text by character, so
each reported span has to be translated before it leaves the engine layer.

Main components:
- OffsetTranslator: Translates byte spans over a UTF-8 buffer into character spans
- IdentityTranslator: Pass-through for unicode mode, where the engine already
  reports code point positions

Usage example:
    >>> translator = OffsetTranslator.for_text("héllo wörld")
    >>> translator.to_char_span(7, 6)  # "wörld" starts at byte 7 and spans 6 bytes
    CaptureSpan(char_offset=6, char_length=5)
"""

from bisect import bisect_right
from typing import Protocol

from regexsolve.types import CaptureSpan

__all__ = ["IdentityTranslator", "OffsetTranslator", "SpanTranslator"]


def _is_char_start(byte: int) -> bool:
    """Check if a byte begins a UTF-8 sequence (i.e. is not a continuation byte)."""
    return byte & 0xC0 != 0x80


class SpanTranslator(Protocol):
    """Anything that turns engine-unit spans into character spans."""

    def to_char_span(self, offset: int, length: int) -> CaptureSpan:
        """Translate an engine-unit span into a character span."""
        ...


class OffsetTranslator:
    """
    Translate byte offsets within a UTF-8 buffer into character offsets.

    The byte position of every character start is indexed once, so translating
    each span is a binary search rather than a rescan of the prefix. That keeps
    global matches over long subjects linear in the number of matches.

    A byte offset that lands inside a multi-byte character rounds down to that
    character, and a byte range counts every character it touches, including
    partially covered ones.
    """

    def __init__(self, buffer: bytes) -> None:
        """
        Index the character starts of a UTF-8 buffer.

        Args:
            buffer: The exact bytes the engine matched against.

        """
        self._size = len(buffer)
        self._char_starts = [index for index, byte in enumerate(buffer) if _is_char_start(byte)]

    @classmethod
    def for_text(cls, text: str) -> "OffsetTranslator":
        """Build a translator for the UTF-8 encoding of a string."""
        return cls(text.encode("utf-8", "surrogatepass"))

    @property
    def char_count(self) -> int:
        """Return the number of characters in the buffer."""
        return len(self._char_starts)

    def char_index(self, byte_offset: int) -> int:
        """
        Return the index of the character containing a byte offset.

        An offset equal to the buffer size maps to the character count.

        Raises:
            ValueError: If the offset lies outside the buffer.

        """
        if not 0 <= byte_offset <= self._size:
            msg = f"Byte offset {byte_offset} is outside a buffer of {self._size} bytes."
            raise ValueError(msg)
        if byte_offset == self._size:
            return self.char_count
        return max(bisect_right(self._char_starts, byte_offset) - 1, 0)

    def to_char_span(self, offset: int, length: int) -> CaptureSpan:
        """
        Translate a byte span into a character span.

        Args:
            offset: Byte offset of the span within the buffer.
            length: Byte length of the span.

        Returns:
            The span counted in characters.

        """
        if length < 0:
            msg = f"Byte length must be non-negative, got {length}."
            raise ValueError(msg)
        start = self.char_index(offset)
        if length == 0:
            return CaptureSpan(char_offset=start, char_length=0)
        last = self.char_index(offset + length - 1)
        return CaptureSpan(char_offset=start, char_length=last - start + 1)


class IdentityTranslator:
    """Pass spans through unchanged; used when the engine reports code points."""

    def to_char_span(self, offset: int, length: int) -> CaptureSpan:
        """Wrap an already character-based span."""
        return CaptureSpan(char_offset=offset, char_length=length)
