"""Data models exchanged between planning, execution and synthesis."""

from typing import Any, Optional

from pydantic import BaseModel


class ToolCallRequest(BaseModel):
    """A tool call requested by the reasoning collaborator.

    ``arguments`` is kept as delivered: a JSON string, an already decoded dict, or None.
    """

    name: str
    arguments: Any = None
    call_id: Optional[str] = None


class ToolExecutionResult(BaseModel):
    """Represents the outcome of running one tool pipeline."""

    name: str
    result: Any = None
    call_id: Optional[str] = None


class SynthesisRecord(BaseModel):
    """A tool result relabeled for the synthesis request."""

    recipient_name: str
    call_id: Optional[str] = None
    data: Any = None

    @classmethod
    def from_result(cls, result: ToolExecutionResult) -> "SynthesisRecord":
        return cls(recipient_name=result.name, call_id=result.call_id, data=result.result)
