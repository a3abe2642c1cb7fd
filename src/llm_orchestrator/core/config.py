"""Configuration for the orchestration core."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SYNTHESIS_INSTRUCTION = (
    "Additional Instruction:\n"
    "Here is the data returned by tools you called:\n"
    "Please generate a useful, human-like reply summarizing and give the data what's most relevant data in json."
)


class OrchestratorConfig(BaseModel):
    """
    Configuration parameters shared by the planner, executor and synthesizer.

    Attributes:
        model: Model identifier forwarded to the reasoning collaborator.
        default_topic: Conversation topic used when the collaborator proposes none.
        fallback_reply: Reply returned when synthesis yields nothing usable.
        synthesis_instruction: Text appended to the system prompt for the synthesis call.
        tool_timeout: Optional timeout in seconds for a single tool handler. None disables it.
        strict_registry: Reject duplicate tool names instead of keeping the first registration.
    """

    model_config = ConfigDict(frozen=True)

    model: str = "gpt-4o"
    default_topic: str = "General"
    fallback_reply: str = "No reply generated."
    synthesis_instruction: str = DEFAULT_SYNTHESIS_INSTRUCTION
    tool_timeout: Optional[float] = Field(default=None, gt=0)
    strict_registry: bool = False
