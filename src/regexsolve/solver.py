"""Orchestrates a solve request from decoded input to response envelope."""

import logging
import time
from collections.abc import Sequence
from typing import Any

from .compiler import build_pattern_spec
from .config import SolverConfig
from .models import SolveContext
from .processing import BatchProcessor, MatchProcessor, Processor, ToolProcessor
from .types import BatchTests, ResponseEnvelope, SolveMode, SolveRequest

__all__ = ["BatchTooLargeError", "build_pipeline", "solve", "solve_payload"]

logger = logging.getLogger(__name__)


class BatchTooLargeError(ValueError):
    """Raised when a batch request carries more samples than the configuration allows."""


def build_pipeline(mode: SolveMode) -> Sequence[Processor]:
    """
    Return the processor pipeline for a mode.

    Single-text mode runs the tool before the primary match, so an error from
    the primary match replaces one from the tool.
    """
    if isinstance(mode, BatchTests):
        return [BatchProcessor()]
    return [ToolProcessor(), MatchProcessor()]


def _check_batch_size(mode: SolveMode, config: SolverConfig) -> None:
    """Reject batches larger than the configured limit."""
    if isinstance(mode, BatchTests) and config.max_tests is not None and len(mode.samples) > config.max_tests:
        msg = f"Batch of {len(mode.samples)} tests exceeds the limit of {config.max_tests}."
        raise BatchTooLargeError(msg)


def solve(request: SolveRequest, config: SolverConfig | None = None) -> ResponseEnvelope:
    """
    Run a solve request through the pipeline for its mode.

    Args:
        request: The decoded request.
        config: Solver settings. Defaults apply when omitted.

    Returns:
        The response envelope, stamped with the current time and the request id.

    Raises:
        BatchTooLargeError: If a batch exceeds the configured limit.

    """
    config = config or SolverConfig()
    mode = request.resolve_mode()
    _check_batch_size(mode, config)

    context = SolveContext(
        spec=build_pattern_spec(request.pattern, request.delimiter, request.flags),
        mode=mode,
        config=config,
    )
    logger.debug("Solving %r in '%s' mode (global=%s).", context.spec.expression, mode.name, context.spec.is_global)

    for processor in build_pipeline(mode):
        logger.debug("Executing processor: %s", processor.__class__.__name__)
        processor.process(context)

    return ResponseEnvelope(
        request_id=request.id,
        timestamp=int(time.time()),
        elapsed=context.elapsed,
        mode=mode.name,
        matches=context.matches,
        tool=context.tool_result,
        error=context.error,
    )


def solve_payload(payload: dict[str, Any], config: SolverConfig | None = None) -> dict[str, Any]:
    """
    Validate a decoded JSON request and return the serialized response.

    Raises:
        pydantic.ValidationError: If the payload does not describe a valid request.
        BatchTooLargeError: If a batch exceeds the configured limit.

    """
    request = SolveRequest.model_validate(payload)
    return solve(request, config).to_dict()
