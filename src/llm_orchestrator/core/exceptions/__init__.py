"""Export the orchestration exception hierarchy used across registration, planning and execution."""

from .exceptions import (
    OrchestratorError,
    ToolRegistrationError,
    ToolValidationError,
    ToolNotFoundError,
    NoToolsError,
    PlanningFormatError,
    ToolExecutionError,
)

__all__ = [
    "OrchestratorError",
    "ToolRegistrationError",
    "ToolValidationError",
    "ToolNotFoundError",
    "NoToolsError",
    "PlanningFormatError",
    "ToolExecutionError",
]
