from .models import ToolDefinition, ToolCallRequest, ToolExecutionResult, SynthesisRecord, Memory
from .registry import ToolRegistry
from .schema import SchemaValidator
from .execution import HookRunner, ParallelToolExecutor, MemoryMerger, merge_memory_changes, CALL_ID_KEY

__all__ = [
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
    "CALL_ID_KEY",
]
