"""Defines the per-request execution context."""

from dataclasses import dataclass, field

from regexsolve.config import SolverConfig
from regexsolve.types import EngineError, MatchEntry, PatternSpec, SolveMode, TestOutcome, ToolResult


@dataclass
class SolveContext:
    """A data class to hold the state of a single solve request while its pipeline runs."""

    spec: PatternSpec
    mode: SolveMode
    config: SolverConfig = field(default_factory=SolverConfig)
    matches: list[MatchEntry] | list[TestOutcome] = field(default_factory=list)
    tool_result: ToolResult | None = None
    error: EngineError | None = None
    elapsed: float = 0.0

    def record_error(self, error: EngineError | None) -> None:
        """Keep the most recently reported engine error."""
        if error is not None:
            self.error = error
