"""Planning input and output models."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..messages import BaseMessage
from ..reasoning import TokenUsage
from ..tools.models import ToolCallRequest


class PlanningContext(BaseModel):
    """
    The conversation state a planning round starts from.

    Attributes:
        system_prompt: Instructions describing the agent.
        conversation_history: Prior turns of the conversation.
        agent_memory: Current memory snapshot shown to the model.
        user_message: The new user message.
        image_url: Optional image reference attached to the message.
        file_url: Optional file reference attached to the message.
    """

    system_prompt: str
    conversation_history: List[BaseMessage] = Field(default_factory=list)
    agent_memory: Dict[str, Any] = Field(default_factory=dict)
    user_message: str
    image_url: Optional[str] = None
    file_url: Optional[str] = None


class PlanResult(BaseModel):
    """
    The collaborator's decision for a planning round.

    ``kind`` is ``"direct_reply"`` when the model answered without tools, and
    ``"tool_calls"`` when it asked for tools. In the latter case ``needed_tools``
    lists the tool names in request order and ``args`` maps each name to its decoded
    arguments, carrying the call correlation id under ``call_id``.
    """

    kind: Literal["direct_reply", "tool_calls"]
    tools: List[ToolCallRequest] = Field(default_factory=list)
    needed_tools: List[str] = Field(default_factory=list)
    args: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    direct_reply: Optional[str] = None
    conv_topic: str = "General"
    new_memory: Dict[str, Any] = Field(default_factory=dict)
    model: Optional[str] = None
    usage: Optional[TokenUsage] = None

    @property
    def is_direct_reply(self) -> bool:
        return self.kind == "direct_reply"
