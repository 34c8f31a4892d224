"""Processor for the primary match over a single text."""

import logging
import time

from regexsolve.engine import EngineFailed, Matched, invoke
from regexsolve.models import SolveContext
from regexsolve.results import build_match_entries
from regexsolve.types import SingleText

from .base import Processor

__all__ = ["MatchProcessor"]

logger = logging.getLogger(__name__)


class MatchProcessor(Processor):
    """Step 2 of single-text mode: run the pattern and build character-indexed matches."""

    def process(self, context: SolveContext) -> None:
        """Run the primary match, timing only the engine call."""
        if not isinstance(context.mode, SingleText):
            return

        start_time = time.perf_counter()
        outcome = invoke(context.spec, context.mode.text, timeout=context.config.match_timeout)
        end_time = time.perf_counter()
        context.elapsed = round(end_time - start_time, context.config.time_precision)

        if isinstance(outcome, Matched):
            context.matches = build_match_entries(outcome)
        elif isinstance(outcome, EngineFailed):
            context.record_error(outcome.error)
        logger.debug("Primary match for %r produced %d entr(ies).", context.spec.expression, len(context.matches))
