"""
Engine error codes and their client-facing classification.

The matching engine reports failures with fine-grained diagnostic codes. Clients
only act on a coarse category, so every code maps onto one of three client ids:

    "error"    → the pattern could not be compiled or the engine failed internally
    "infinite" → the match ran away (backtracking, recursion or stack limits)
    "badutf8"  → the subject is not valid text for a unicode-mode match

Code names follow the PCRE constant names so that clients written against PCRE
tooling keep working unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

ClientErrorId = Literal["error", "infinite", "badutf8"]


class EngineErrorCode(str, Enum):
    """Diagnostic codes the engine layer can report."""

    NO_ERROR = "PREG_NO_ERROR"
    """No failure occurred."""

    INTERNAL_ERROR = "PREG_INTERNAL_ERROR"
    """Compilation failure or internal engine failure."""

    BACKTRACK_LIMIT_ERROR = "PREG_BACKTRACK_LIMIT_ERROR"
    """Matching exceeded its time budget."""

    RECURSION_LIMIT_ERROR = "PREG_RECURSION_LIMIT_ERROR"
    """Matching exceeded the interpreter recursion limit."""

    BAD_UTF8_ERROR = "PREG_BAD_UTF8_ERROR"
    """The subject contains code units that are not valid UTF-8."""

    BAD_UTF8_OFFSET_ERROR = "PREG_BAD_UTF8_OFFSET_ERROR"
    """A start offset did not fall on a character boundary."""

    JIT_STACKLIMIT_ERROR = "PREG_JIT_STACKLIMIT_ERROR"
    """The engine ran out of stack while matching."""

    @property
    def client_id(self) -> ClientErrorId | None:
        """Return the coarse client classification for this code."""
        return CLIENT_ERROR_IDS.get(self)


CLIENT_ERROR_IDS: dict[EngineErrorCode, ClientErrorId] = {
    EngineErrorCode.INTERNAL_ERROR: "error",
    EngineErrorCode.BACKTRACK_LIMIT_ERROR: "infinite",
    EngineErrorCode.RECURSION_LIMIT_ERROR: "infinite",
    EngineErrorCode.JIT_STACKLIMIT_ERROR: "infinite",
    EngineErrorCode.BAD_UTF8_ERROR: "badutf8",
    EngineErrorCode.BAD_UTF8_OFFSET_ERROR: "badutf8",
}
