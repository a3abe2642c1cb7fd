"""Tool-related data models."""

from .models import ToolDefinition, ToolHandler, HookProcessor, Memory
from .tool_call import ToolCallRequest, ToolExecutionResult, SynthesisRecord

__all__ = [
    "ToolDefinition",
    "ToolHandler",
    "HookProcessor",
    "Memory",
    "ToolCallRequest",
    "ToolExecutionResult",
    "SynthesisRecord",
]
