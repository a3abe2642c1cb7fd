"""Tool execution: hook chains and the parallel executor."""

from .hooks import HookRunner
from .executor import ParallelToolExecutor, MemoryMerger, merge_memory_changes, CALL_ID_KEY

__all__ = ["HookRunner", "ParallelToolExecutor", "MemoryMerger", "merge_memory_changes", "CALL_ID_KEY"]
