"""Builds character-indexed match structures from raw engine matches."""

from __future__ import annotations

import regex

from regexsolve.engine import Matched
from regexsolve.offsets import SpanTranslator
from regexsolve.types import CaptureSpan, MatchEntry

__all__ = ["build_match_entries", "build_match_entry", "match_span"]


def match_span(match: regex.Match, translator: SpanTranslator, group: int = 0) -> CaptureSpan | None:
    """
    Translate the span of one group of a match.

    Returns:
        The character span, or None if the group did not participate.

    """
    start, end = match.span(group)
    if start < 0:
        return None
    return translator.to_char_span(start, end - start)


def build_match_entry(match: regex.Match, translator: SpanTranslator) -> MatchEntry:
    """
    Build a MatchEntry for one match.

    Numbered groups are reported in declaration order. Groups that did not
    participate in the match are left out rather than padded.
    """
    span = match_span(match, translator)
    if span is None:
        msg = "Group 0 always participates in a match."
        raise ValueError(msg)

    groups: list[CaptureSpan] = []
    for index in range(1, len(match.groups()) + 1):
        group_span = match_span(match, translator, index)
        if group_span is not None:
            groups.append(group_span)
    return MatchEntry(span=span, groups=tuple(groups))


def build_match_entries(outcome: Matched) -> list[MatchEntry]:
    """Build one MatchEntry per match occurrence, left to right."""
    return [build_match_entry(match, outcome.translator) for match in outcome.matches]
