"""Scores many text samples against a single pattern."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from regexsolve.engine import EngineFailed, Matched, invoke
from regexsolve.results import match_span
from regexsolve.types import PatternSpec, TestOutcome, TextSample

__all__ = ["BatchResult", "BatchRunner"]

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """The per-sample outcomes of a batch run and its wall-clock duration."""

    outcomes: list[TestOutcome] = field(default_factory=list)
    elapsed: float = 0.0


class BatchRunner:
    """
    Runs one pattern against a sequence of independent samples.

    Samples are scored one after another in input order. A failing sample is
    recorded with its error and never stops the remaining samples.
    """

    def __init__(self, spec: PatternSpec, *, timeout: float | None = None, precision: int = 4) -> None:
        """
        Initialize the runner.

        Args:
            spec: The pattern every sample is scored against.
            timeout: Optional per-sample time budget in seconds.
            precision: Decimal places kept in the reported elapsed time.

        """
        self.spec = spec
        self.timeout = timeout
        self.precision = precision

    def score(self, sample: TextSample) -> TestOutcome:
        """Score a single sample, reporting only the span of the first overall match."""
        outcome = invoke(self.spec, sample.content, timeout=self.timeout)
        if isinstance(outcome, Matched):
            return TestOutcome(id=sample.id, span=match_span(outcome.matches[0], outcome.translator))
        if isinstance(outcome, EngineFailed):
            return TestOutcome(id=sample.id, error=outcome.error)
        return TestOutcome(id=sample.id)

    def run(self, samples: Iterable[TextSample]) -> BatchResult:
        """Score every sample in order and time the whole batch."""
        start_time = time.perf_counter()
        outcomes = [self.score(sample) for sample in samples]
        elapsed = round(time.perf_counter() - start_time, self.precision)

        failed = sum(1 for outcome in outcomes if outcome.error is not None)
        matched = sum(1 for outcome in outcomes if outcome.matched)
        logger.debug(
            "Batch for %r: %d sample(s), %d matched, %d failed in %.4fs.",
            self.spec.expression,
            len(outcomes),
            matched,
            failed,
            elapsed,
        )
        return BatchResult(outcomes=outcomes, elapsed=elapsed)
