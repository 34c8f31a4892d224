"""Defines shared data structures and types for RegexSolve."""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field, field_validator

from regexsolve.error_codes import ClientErrorId, EngineErrorCode

Mode = Literal["text", "tests"]
ToolId = Literal["replace", "list"]


@dataclass(frozen=True)
class PatternSpec:
    """
    A ready-to-execute pattern descriptor.

    Attributes:
        pattern: The pattern body as typed by the user.
        delimiter: The character(s) framing the pattern body.
        modifiers: Modifier characters, never including the global flag.
        is_global: Whether every match should be reported, not just the first.

    """

    pattern: str
    delimiter: str
    modifiers: str = ""
    is_global: bool = False

    @property
    def expression(self) -> str:
        """Return the delimited expression handed to the engine front end."""
        return f"{self.delimiter}{self.pattern}{self.delimiter}{self.modifiers}"


@dataclass(frozen=True)
class TextSample:
    """One candidate string in batch mode."""

    id: Any
    content: str


@dataclass(frozen=True)
class CaptureSpan:
    """A span measured in characters (code points) from the start of the subject."""

    char_offset: int
    char_length: int

    def __post_init__(self) -> None:
        """Validate that the span is non-negative."""
        if self.char_offset < 0 or self.char_length < 0:
            msg = f"Span must be non-negative, got offset={self.char_offset} length={self.char_length}."
            raise ValueError(msg)

    def to_dict(self) -> dict[str, int]:
        """Serialize to the compact wire form."""
        return {"i": self.char_offset, "l": self.char_length}


@dataclass(frozen=True)
class MatchEntry:
    """One match occurrence plus its participating numbered groups, in declaration order."""

    span: CaptureSpan
    groups: tuple[CaptureSpan, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the compact wire form."""
        return {**self.span.to_dict(), "groups": [group.to_dict() for group in self.groups]}


@dataclass(frozen=True)
class EngineError:
    """
    A failure reported by the matching engine.

    Attributes:
        message: Human-readable diagnostic text.
        code: The engine diagnostic code, or None when the failure was not classified.

    """

    message: str
    code: EngineErrorCode | None = None

    @classmethod
    def unknown(cls, message: str = "Unknown engine failure") -> "EngineError":
        """Build an error record for a failure that carried no diagnostic code."""
        return cls(message=message, code=None)

    @property
    def name(self) -> str:
        """Return the engine's diagnostic code name, or an empty string if unknown."""
        return self.code.value if self.code is not None else ""

    @property
    def client_id(self) -> ClientErrorId | None:
        """Return the coarse, client-safe classification."""
        return self.code.client_id if self.code is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire form."""
        return {"message": self.message, "name": self.name, "id": self.client_id}


@dataclass(frozen=True)
class TestOutcome:
    """
    The result of scoring one sample in batch mode.

    Exactly one of three states holds: matched (span set), no match (neither set),
    or failed (error set).
    """

    __test__ = False

    id: Any
    span: CaptureSpan | None = None
    error: EngineError | None = None

    def __post_init__(self) -> None:
        """Validate that matched and failed states are mutually exclusive."""
        if self.span is not None and self.error is not None:
            msg = "A test outcome cannot carry both a span and an error."
            raise ValueError(msg)

    @property
    def matched(self) -> bool:
        """Check if the sample matched."""
        return self.span is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire form, omitting absent fields."""
        result: dict[str, Any] = {"id": self.id}
        if self.span is not None:
            result.update(self.span.to_dict())
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


@dataclass(frozen=True)
class ToolResult:
    """The output of a post-processing tool."""

    tool_id: ToolId
    output: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to the wire form."""
        return {"id": self.tool_id, "result": self.output}


@dataclass
class ResponseEnvelope:
    """The complete response for one solve request."""

    request_id: Any
    timestamp: int
    elapsed: float
    mode: Mode
    matches: list[MatchEntry] | list[TestOutcome] = field(default_factory=list)
    tool: ToolResult | None = None
    error: EngineError | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert the envelope to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "id": self.request_id,
            "timestamp": self.timestamp,
            "time": self.elapsed,
            "mode": self.mode,
            "matches": [entry.to_dict() for entry in self.matches],
        }
        if self.tool is not None:
            result["tool"] = self.tool.to_dict()
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


# Tool and mode variants, resolved once from the request.


@dataclass(frozen=True)
class ReplaceTool:
    """Replace every match in the subject with a template."""

    tool_id: ClassVar[ToolId] = "replace"

    template: str


@dataclass(frozen=True)
class ListTool:
    """Concatenate the template expanded against each match."""

    tool_id: ClassVar[ToolId] = "list"

    template: str


ToolSpec = ReplaceTool | ListTool


@dataclass(frozen=True)
class SingleText:
    """Match one subject text, optionally running a tool first."""

    name: ClassVar[Mode] = "text"

    text: str
    tool: ToolSpec | None = None


@dataclass(frozen=True)
class BatchTests:
    """Score every sample against the same pattern."""

    name: ClassVar[Mode] = "tests"

    samples: tuple[TextSample, ...] = ()


SolveMode = SingleText | BatchTests


# Request schema


class ToolRequest(BaseModel):
    """The optional tool block of a request."""

    id: ToolId
    input: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:  # noqa: ANN401
        """Match tool ids case-insensitively."""
        return value.lower() if isinstance(value, str) else value

    def to_tool(self) -> ToolSpec:
        """Resolve the tool block into its variant."""
        if self.id == "replace":
            return ReplaceTool(template=self.input)
        return ListTool(template=self.input)


class TestCaseRequest(BaseModel):
    """One entry of the `tests` list."""

    __test__ = False

    id: Any = None
    text: str = ""


class SolveRequest(BaseModel):
    """A decoded solve request."""

    id: Any = None
    pattern: str
    delimiter: str
    flags: str = ""
    text: str = ""
    tool: ToolRequest | None = None
    mode: str | None = None
    tests: list[TestCaseRequest] = Field(default_factory=list)

    @field_validator("flags", "text", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:  # noqa: ANN401
        """Treat explicit nulls as empty strings."""
        return "" if value is None else value

    @field_validator("tests", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:  # noqa: ANN401
        """Treat an explicit null test list as empty."""
        return [] if value is None else value

    def resolve_mode(self) -> SolveMode:
        """
        Resolve the request into its execution mode.

        Only an explicit "tests" selects batch mode; any other value, including
        an absent one, selects single-text mode.
        """
        if self.mode == "tests":
            return BatchTests(samples=tuple(TextSample(id=case.id, content=case.text) for case in self.tests))
        return SingleText(text=self.text, tool=self.tool.to_tool() if self.tool else None)
