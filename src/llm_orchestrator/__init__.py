"""LLM Tool Orchestrator - registry, hooks, planning, parallel execution and reply synthesis for LLM agents."""

from .core import (
    Orchestrator,
    OrchestratorConfig,
    TurnResult,
    ToolRegistry,
    ToolDefinition,
    PlanningContext,
    PlanResult,
    ToolExecutionResult,
    ReasoningInput,
    ReasoningOutput,
    UserMessage,
    AssistantMessage,
    SystemMessage,
)

__all__ = [
    "Orchestrator",
    "OrchestratorConfig",
    "TurnResult",
    "ToolRegistry",
    "ToolDefinition",
    "PlanningContext",
    "PlanResult",
    "ToolExecutionResult",
    "ReasoningInput",
    "ReasoningOutput",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
]
