"""Public exports for the orchestration core."""

from .config import OrchestratorConfig
from .exceptions import (
    OrchestratorError,
    ToolRegistrationError,
    ToolValidationError,
    ToolNotFoundError,
    NoToolsError,
    PlanningFormatError,
    ToolExecutionError,
)
from .logger import get_logger, setup_logging
from .messages import BaseMessage, UserMessage, AssistantMessage, SystemMessage, history_from_transcript
from .tools import (
    ToolDefinition,
    ToolCallRequest,
    ToolExecutionResult,
    SynthesisRecord,
    Memory,
    ToolRegistry,
    SchemaValidator,
    HookRunner,
    ParallelToolExecutor,
    MemoryMerger,
    merge_memory_changes,
)
from .reasoning import ReasoningInput, ReasoningOutput, ReasoningClient, TokenUsage
from .planning import Planner, PlanningContext, PlanResult
from .synthesis import Synthesizer
from .orchestrator import Orchestrator, TurnResult

__all__ = [
    "OrchestratorConfig",
    "OrchestratorError",
    "ToolRegistrationError",
    "ToolValidationError",
    "ToolNotFoundError",
    "NoToolsError",
    "PlanningFormatError",
    "ToolExecutionError",
    "get_logger",
    "setup_logging",
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "history_from_transcript",
    "ToolDefinition",
    "ToolCallRequest",
    "ToolExecutionResult",
    "SynthesisRecord",
    "Memory",
    "ToolRegistry",
    "SchemaValidator",
    "HookRunner",
    "ParallelToolExecutor",
    "MemoryMerger",
    "merge_memory_changes",
    "ReasoningInput",
    "ReasoningOutput",
    "ReasoningClient",
    "TokenUsage",
    "Planner",
    "PlanningContext",
    "PlanResult",
    "Synthesizer",
    "Orchestrator",
    "TurnResult",
]
