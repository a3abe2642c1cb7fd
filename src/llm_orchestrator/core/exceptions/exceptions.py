"""
Custom exception classes for the tool orchestration core.

The hierarchy separates configuration problems (empty batches, unknown tools,
bad registrations) from planning-format problems reported by the reasoning
collaborator and from failures while a tool is running.
"""


class OrchestratorError(Exception):
    """Base exception for all orchestration errors."""

    pass


class ToolRegistrationError(OrchestratorError):
    """Raised when a tool or hook processor cannot be registered."""

    pass


class ToolValidationError(OrchestratorError):
    """Raised when a tool definition or its call arguments are invalid."""

    pass


class ToolNotFoundError(OrchestratorError):
    """Raised when a requested tool is not found in the registry."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found")


class NoToolsError(OrchestratorError):
    """Raised when the executor is asked to run an empty batch."""

    def __init__(self, message: str = "No tools to execute"):
        super().__init__(message)


class PlanningFormatError(OrchestratorError):
    """Raised when the reasoning collaborator returns an unusable planning response."""

    pass


class ToolExecutionError(OrchestratorError):
    """Raised when a tool fails during execution, e.g. by timing out."""

    pass
