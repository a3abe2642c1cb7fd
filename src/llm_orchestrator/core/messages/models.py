"""Provider-agnostic message models for conversation history."""

from abc import ABC
from typing import List

from pydantic import BaseModel


class BaseMessage(ABC, BaseModel):
    """Base model for a conversation turn.

    Attributes:
        author: Role associated with the message.
        content: Text payload of the message.
    """

    author: str
    content: str


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    author: str = "system"


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    author: str = "user"


class AssistantMessage(BaseMessage):
    """Message authored by the assistant."""

    author: str = "assistant"


def history_from_transcript(turns: List[str]) -> List[BaseMessage]:
    """Convert ``"User: ...\\nAI: ..."`` transcript turns into messages.

    Turns without an ``AI:`` part only produce a user message.

    Args:
        turns: Transcript chunks, one per exchange.

    Returns:
        The equivalent list of user and assistant messages.
    """
    history: List[BaseMessage] = []
    for turn in turns:
        user_chunk, _, ai_chunk = turn.partition("\nAI:")
        user_text = user_chunk.strip()
        if user_text.startswith("User:"):
            user_text = user_text[len("User:") :].strip()
        history.append(UserMessage(content=user_text))
        ai_text = ai_chunk.strip()
        if ai_text:
            history.append(AssistantMessage(content=ai_text))
    return history
