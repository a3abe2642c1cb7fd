"""Reasoning collaborator contract."""

from .models import ReasoningInput, ReasoningOutput, ReasoningClient, TokenUsage

__all__ = ["ReasoningInput", "ReasoningOutput", "ReasoningClient", "TokenUsage"]
