"""
Engine invocation with per-call error capture.

Every call into the engine goes through `capture_engine_errors()`, which records
any engine diagnostic raised inside its block on a fresh `ErrorCapture` and
never lets it escape. The capture lives exactly as long as one call, so an
error from one pattern can never be attributed to a later, unrelated call, and
concurrent requests never share capture state.

`invoke()` builds on that primitive and reports one of three outcomes:

    Matched      → at least one match, with the translator for its spans
    NoMatch      → the pattern ran cleanly and found nothing
    EngineFailed → the engine raised a diagnostic, converted to an EngineError
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

import regex

from regexsolve.compiler import PatternSyntaxError, compile_spec
from regexsolve.error_codes import EngineErrorCode
from regexsolve.offsets import SpanTranslator
from regexsolve.types import EngineError, PatternSpec

__all__ = [
    "ENGINE_EXCEPTIONS",
    "EngineFailed",
    "ErrorCapture",
    "Matched",
    "NoMatch",
    "Outcome",
    "capture_engine_errors",
    "error_from_exception",
    "invoke",
    "strip_diagnostic_prefix",
]

logger = logging.getLogger(__name__)

ENGINE_EXCEPTIONS: Final = (regex.error, PatternSyntaxError, TimeoutError, RecursionError, UnicodeError, MemoryError)

_DIAGNOSTIC_PREFIX: Final = regex.compile(r"^[a-z_]+\(\):\s*")

_CODE_MESSAGES: Final[dict[EngineErrorCode, str]] = {
    EngineErrorCode.BACKTRACK_LIMIT_ERROR: "Backtrack limit exhausted",
    EngineErrorCode.RECURSION_LIMIT_ERROR: "Recursion limit exhausted",
    EngineErrorCode.BAD_UTF8_ERROR: "Malformed UTF-8 characters, possibly incorrectly encoded",
}


def strip_diagnostic_prefix(message: str) -> str:
    """Remove a leading `function(): ` prefix from a diagnostic message."""
    return _DIAGNOSTIC_PREFIX.sub("", message, count=1)


def error_from_exception(exc: BaseException) -> EngineError:
    """
    Convert an engine exception into an EngineError value.

    Args:
        exc: An instance of one of ENGINE_EXCEPTIONS.

    Returns:
        The classified error. Exceptions without a known code yield an
        error whose code is None.

    """
    if isinstance(exc, (regex.error, PatternSyntaxError)):
        return EngineError(message=strip_diagnostic_prefix(str(exc)), code=EngineErrorCode.INTERNAL_ERROR)
    if isinstance(exc, TimeoutError):
        code = EngineErrorCode.BACKTRACK_LIMIT_ERROR
    elif isinstance(exc, RecursionError):
        code = EngineErrorCode.RECURSION_LIMIT_ERROR
    elif isinstance(exc, UnicodeError):
        code = EngineErrorCode.BAD_UTF8_ERROR
    else:
        return EngineError.unknown(strip_diagnostic_prefix(str(exc)) or type(exc).__name__)
    return EngineError(message=_CODE_MESSAGES[code], code=code)


@dataclass
class ErrorCapture:
    """Holds the diagnostic raised during a single engine call, if any."""

    error: EngineError | None = None

    @property
    def failed(self) -> bool:
        """Check if the captured call failed."""
        return self.error is not None


@contextmanager
def capture_engine_errors() -> Iterator[ErrorCapture]:
    """
    Capture engine diagnostics raised inside the block.

    Yields:
        A fresh ErrorCapture, populated if an engine exception was raised.
        Exceptions that are not engine diagnostics propagate unchanged.

    """
    capture = ErrorCapture()
    try:
        yield capture
    except ENGINE_EXCEPTIONS as exc:
        capture.error = error_from_exception(exc)
        logger.debug("Engine call failed with %s: %s", capture.error.name or "unknown code", capture.error.message)


@dataclass(frozen=True)
class Matched:
    """The engine found at least one match."""

    matches: tuple[regex.Match, ...]
    translator: SpanTranslator

    @property
    def count(self) -> int:
        """Return the number of matches."""
        return len(self.matches)


@dataclass(frozen=True)
class NoMatch:
    """The engine ran cleanly and found nothing."""


@dataclass(frozen=True)
class EngineFailed:
    """The engine raised a diagnostic."""

    error: EngineError


Outcome = Matched | NoMatch | EngineFailed


def invoke(spec: PatternSpec, text: str, *, timeout: float | None = None) -> Outcome:
    """
    Run a pattern against a text with the primitive its global flag selects.

    Global patterns use find-all and report every match in order; all others
    use find-first.

    Args:
        spec: The pattern to run.
        text: The subject text.
        timeout: Optional time budget in seconds for the matching step.

    Returns:
        Matched, NoMatch or EngineFailed.

    """
    matches: list[regex.Match] = []
    translator: SpanTranslator | None = None
    with capture_engine_errors() as capture:
        compiled = compile_spec(spec)
        subject = compiled.encode_subject(text)
        if spec.is_global:
            matches = list(compiled.pattern.finditer(subject, timeout=timeout))
        else:
            found = compiled.pattern.search(subject, timeout=timeout)
            matches = [found] if found is not None else []
        if matches:
            translator = compiled.translator_for(text)

    if capture.failed:
        return EngineFailed(error=capture.error or EngineError.unknown())
    if not matches or translator is None:
        return NoMatch()
    logger.debug("Pattern %r matched %d time(s).", spec.expression, len(matches))
    return Matched(matches=tuple(matches), translator=translator)
