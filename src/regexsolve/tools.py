"""
Post-processing tools run over the subject text.

- replace: Substitute every match in the subject with the template.
- list: Expand the template against each match and concatenate the expansions,
  dropping the unmatched text in between.

Templates use PCRE replacement syntax. `$n`, `${n}` and `\\n` (n up to 99)
refer to group n, with 0 for the whole match; references to groups the
pattern does not have expand to nothing. `\\\\` and `\\$` stand for a literal
backslash and dollar sign, and any other backslash is kept as written.
"""

from __future__ import annotations

import logging
from typing import Final

import regex

from regexsolve.compiler import CompiledPattern, compile_spec
from regexsolve.engine import capture_engine_errors
from regexsolve.types import EngineError, ListTool, PatternSpec, ReplaceTool, ToolResult, ToolSpec

__all__ = ["convert_template", "run_tool"]

logger = logging.getLogger(__name__)

# Escaped backslash or dollar | ${n} | $n or \n | any other backslash.
_TEMPLATE_TOKEN: Final = regex.compile(r"\\([\\$])|\$\{(\d{1,2})\}|[\\$](\d{1,2})|\\")
_ENGINE_BACKSLASH: Final[str] = "\\\\"


def convert_template(template: str, group_count: int) -> str:
    """
    Rewrite a PCRE replacement template into engine syntax.

    Args:
        template: The user's substitution template.
        group_count: Number of capture groups in the pattern.

    Returns:
        A template the engine can expand directly. Every backslash that is not
        part of a group reference comes out escaped, so the engine never sees
        an escape sequence of its own.

    """

    def _rewrite(token: regex.Match) -> str:
        escaped = token.group(1)
        if escaped is not None:
            return _ENGINE_BACKSLASH if escaped == "\\" else escaped
        number = token.group(2) or token.group(3)
        if number is None:
            return _ENGINE_BACKSLASH
        if int(number) > group_count:
            return ""
        return f"\\g<{int(number)}>"

    return _TEMPLATE_TOKEN.sub(_rewrite, template)


def _replace_all(compiled: CompiledPattern, subject: str | bytes, template: str | bytes, timeout: float | None) -> str:
    """Replace every match of the pattern in the subject."""
    return compiled.decode_output(compiled.pattern.sub(template, subject, timeout=timeout))


def _list_matches(compiled: CompiledPattern, subject: str | bytes, template: str | bytes, timeout: float | None) -> str:
    """Concatenate the template expanded against each match, in match order."""
    pieces = [match.expand(template) for match in compiled.pattern.finditer(subject, timeout=timeout)]
    return compiled.decode_output(subject[:0].join(pieces))


def run_tool(spec: PatternSpec, tool: ToolSpec, text: str, *, timeout: float | None = None) -> tuple[ToolResult, EngineError | None]:
    """
    Run a post-processing tool over a text.

    Both tools visit every match regardless of the global flag.

    Args:
        spec: The pattern to run.
        tool: The tool variant and its template.
        text: The subject text.
        timeout: Optional time budget in seconds for the engine call.

    Returns:
        A tuple of (tool result, engine error). On failure the output is empty
        and the error is set.

    """
    output = ""
    with capture_engine_errors() as capture:
        compiled = compile_spec(spec)
        subject = compiled.encode_subject(text)
        template = compiled.encode_template(convert_template(tool.template, compiled.pattern.groups))
        if isinstance(tool, ReplaceTool):
            output = _replace_all(compiled, subject, template, timeout)
        elif isinstance(tool, ListTool):
            output = _list_matches(compiled, subject, template, timeout)
        else:
            msg = f"Unsupported tool: {tool!r}"
            raise TypeError(msg)

    if capture.failed:
        logger.debug("Tool '%s' failed for %r.", tool.tool_id, spec.expression)
        return ToolResult(tool_id=tool.tool_id, output=""), capture.error
    return ToolResult(tool_id=tool.tool_id, output=output), None
