"""Data contract of the external reasoning collaborator."""

from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..messages import BaseMessage
from ..tools.models import ToolCallRequest, SynthesisRecord


class TokenUsage(BaseModel):
    """
    Token counts reported by the collaborator.

    Attributes:
        input_tokens: The number of tokens in the prompt.
        output_tokens: The number of tokens generated.
        total_tokens: The total number of tokens used.
        cached_tokens: Prompt tokens served from the provider cache, if reported.
    """

    model_config = ConfigDict(extra="allow")

    input_tokens: Optional[int] = Field(default=None)
    output_tokens: Optional[int] = Field(default=None)
    total_tokens: Optional[int] = Field(default=None)
    cached_tokens: Optional[int] = Field(default=None)


class ReasoningInput(BaseModel):
    """
    Everything the collaborator needs for one request.

    Attributes:
        agent_context: System/agent instructions.
        conversation_history: Prior turns of the conversation.
        agent_memory: Snapshot of the agent memory.
        user_prompt: The new user text.
        image_url: Optional image reference attached to the user prompt.
        file_url: Optional file reference attached to the user prompt.
        functions: Tool schemas the collaborator may choose from.
        function_called: Tool calls issued in an earlier round, for multi-turn backends.
        function_output: Tool results to be summarized.
    """

    agent_context: str
    conversation_history: List[BaseMessage] = Field(default_factory=list)
    agent_memory: Dict[str, Any] = Field(default_factory=dict)
    user_prompt: str
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    functions: Optional[List[Dict[str, Any]]] = None
    function_called: Optional[List[ToolCallRequest]] = None
    function_output: Optional[List[SynthesisRecord]] = None


class ReasoningOutput(BaseModel):
    """
    A collaborator response.

    Attributes:
        ai_response: Reply text. May be empty when only tool calls were requested.
        new_memory: Memory update proposed by the model.
        conv_topic: Conversation topic proposed by the model.
        model: Model that produced the response.
        function_call: Tool calls requested by the model.
        usage: Token usage of the request.
    """

    ai_response: str = ""
    new_memory: Optional[Dict[str, Any]] = None
    conv_topic: Optional[str] = None
    model: Optional[str] = None
    function_call: List[ToolCallRequest] = Field(default_factory=list)
    usage: Optional[TokenUsage] = None

    @field_validator("ai_response", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("function_call", mode="before")
    @classmethod
    def _none_as_no_calls(cls, value: Any) -> Any:
        return [] if value is None else value


ReasoningClient = Callable[[ReasoningInput, str], Awaitable[Union[ReasoningOutput, Mapping[str, Any], None]]]
