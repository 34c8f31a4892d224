"""Processor for batch ("tests") mode."""

import logging

from regexsolve.batch import BatchRunner
from regexsolve.models import SolveContext
from regexsolve.types import BatchTests

from .base import Processor

__all__ = ["BatchProcessor"]

logger = logging.getLogger(__name__)


class BatchProcessor(Processor):
    """Score every sample of a batch request against the pattern."""

    def process(self, context: SolveContext) -> None:
        """Run the batch and store its outcomes and elapsed time."""
        if not isinstance(context.mode, BatchTests):
            return

        runner = BatchRunner(
            context.spec,
            timeout=context.config.match_timeout,
            precision=context.config.time_precision,
        )
        logger.debug("Scoring %d sample(s) against %r.", len(context.mode.samples), context.spec.expression)
        result = runner.run(context.mode.samples)
        context.matches = result.outcomes
        context.elapsed = result.elapsed
