"""Processor for the optional post-processing tool."""

import logging

from regexsolve.models import SolveContext
from regexsolve.tools import run_tool
from regexsolve.types import SingleText

from .base import Processor

__all__ = ["ToolProcessor"]

logger = logging.getLogger(__name__)


class ToolProcessor(Processor):
    """Step 1 of single-text mode: run the requested tool over the subject text."""

    def process(self, context: SolveContext) -> None:
        """Run the tool, if one was requested, and record its result and error."""
        if not isinstance(context.mode, SingleText) or context.mode.tool is None:
            return

        tool = context.mode.tool
        result, error = run_tool(context.spec, tool, context.mode.text, timeout=context.config.match_timeout)
        context.tool_result = result
        context.record_error(error)
        logger.debug("Tool '%s' produced %d character(s).", tool.tool_id, len(result.output))
