"""Expose provider-agnostic message model types shared by planning and synthesis."""

from .models import BaseMessage, UserMessage, AssistantMessage, SystemMessage, history_from_transcript

__all__ = [
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "history_from_transcript",
]
