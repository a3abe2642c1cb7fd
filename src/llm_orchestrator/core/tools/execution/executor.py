"""Concurrent execution of the tools selected by the planner."""

from __future__ import annotations

import asyncio
import copy
import inspect
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models import Memory, ToolDefinition, ToolExecutionResult
from ..registry import ToolRegistry
from .hooks import HookRunner
from ...exceptions import NoToolsError, ToolExecutionError, ToolNotFoundError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

CALL_ID_KEY = "call_id"

MemoryMerger = Callable[[Memory, Mapping[str, Any], Sequence[Memory]], None]


def merge_memory_changes(target: Memory, snapshot: Mapping[str, Any], updates: Sequence[Memory]) -> None:
    """Apply each pipeline's changes to ``target`` in order.

    A change is a key bound to a different object than in ``snapshot``, a new key, or
    a removed key. Values are compared by identity, so objects shared with the caller
    are never replaced unless a pipeline rebound the key. Later updates win when two
    pipelines changed the same key.

    Args:
        target: The caller's memory, updated in place.
        snapshot: Top-level copy of the memory taken before the batch started.
        updates: The final memory of every pipeline, in tool order.
    """
    for update in updates:
        for key in snapshot:
            if key not in update:
                target.pop(key, None)
        for key, value in update.items():
            if key not in snapshot or snapshot[key] is not value:
                target[key] = value


class ParallelToolExecutor:
    """Runs the pre-hook, handler and post-hook pipeline of several tools concurrently.

    Every pipeline works on a private top-level copy of the caller's memory: key
    writes stay private, while the values themselves are shared by reference. Once all pipelines
    finished, their changes are merged back into the caller's memory in the order the
    tools were requested. If any pipeline fails, the first error propagates and memory
    is left untouched; pipelines already running are not cancelled.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        hook_runner: Optional[HookRunner] = None,
        tool_timeout: Optional[float] = None,
        memory_merger: Optional[MemoryMerger] = None,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: Registry used to resolve tool names and hooks.
            hook_runner: Hook runner to use. Defaults to one bound to ``registry``.
            tool_timeout: Timeout in seconds for a single handler. None means no timeout.
            memory_merger: Replaces :func:`merge_memory_changes` as the merge policy.
        """
        self._registry = registry
        self._hooks = hook_runner or HookRunner(registry)
        self._tool_timeout = tool_timeout
        self._merge = memory_merger or merge_memory_changes

    async def execute(
        self,
        tool_names: Sequence[str],
        args_by_name: Optional[Mapping[str, Mapping[str, Any]]],
        memory: Optional[Memory] = None,
    ) -> List[ToolExecutionResult]:
        """Execute the named tools concurrently and collect their results.

        Args:
            tool_names: Tools to run, as listed in the plan.
            args_by_name: Arguments per tool name, optionally carrying ``call_id``.
            memory: Caller's memory. Updated in place with the merged pipeline changes.

        Returns:
            One result per entry of ``tool_names``, in the same order.

        Raises:
            NoToolsError: If ``tool_names`` is empty.
            ToolNotFoundError: If a name is not registered. Raised before anything runs.
        """
        if not tool_names:
            msg = "No tools to execute"
            logger.error(msg)
            raise NoToolsError(msg)

        tools: List[ToolDefinition] = []
        for name in tool_names:
            tool = self._registry.get_tool(name)
            if tool is None:
                logger.error(f"Tool '{name}' not found in registry.")
                raise ToolNotFoundError(name)
            tools.append(tool)

        if memory is None:
            memory = {}
        args_by_name = args_by_name or {}
        snapshot = self._copy_memory(memory)

        logger.info(f"Executing {len(tools)} tool(s): {', '.join(tool_names)}")
        tasks = [
            asyncio.ensure_future(
                self._run_pipeline(tool, args_by_name.get(tool.name) or {}, self._copy_memory(memory))
            )
            for tool in tools
        ]
        for task in tasks:
            task.add_done_callback(self._retrieve_failure)

        outcomes: List[Tuple[ToolExecutionResult, Memory]] = await asyncio.gather(*tasks)

        self._merge(memory, snapshot, [pipeline_memory for _, pipeline_memory in outcomes])
        return [result for result, _ in outcomes]

    async def _run_pipeline(
        self, tool: ToolDefinition, arguments: Mapping[str, Any], memory: Memory
    ) -> Tuple[ToolExecutionResult, Memory]:
        """Pre-hooks, handler and post-hooks of a single tool, strictly in that order."""
        try:
            memory = await self._hooks.run_hooks(tool.pre_hooks, memory)
            handler_args = self._prepare_arguments(tool, arguments)
            logger.info(f"Executing tool '{tool.name}'...")
            result = await self._invoke_handler(tool, handler_args, memory)
            memory = await self._hooks.run_hooks(tool.post_hooks, memory)
        except Exception:
            logger.error(f"Tool '{tool.name}' failed.", exc_info=True)
            raise

        logger.info(f"Tool '{tool.name}' executed successfully.")
        execution_result = ToolExecutionResult(name=tool.name, result=result, call_id=arguments.get(CALL_ID_KEY))
        return execution_result, memory

    @staticmethod
    def _prepare_arguments(tool: ToolDefinition, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy the arguments and, if the tool has an args model, validate them.

        The ``call_id`` key is kept out of validation and handed through unchanged.

        Raises:
            ToolValidationError: If the arguments do not satisfy the tool's args model.
        """
        handler_args = dict(arguments)
        if tool.args_model is None:
            return handler_args

        call_id = handler_args.pop(CALL_ID_KEY, None)
        try:
            handler_args = tool.args_model.model_validate(handler_args).model_dump()
        except ValidationError as e:
            msg = f"Argument validation failed for tool '{tool.name}': {e}"
            logger.warning(msg)
            raise ToolValidationError(msg) from e

        if call_id is not None:
            handler_args[CALL_ID_KEY] = call_id
        return handler_args

    async def _invoke_handler(self, tool: ToolDefinition, arguments: Dict[str, Any], memory: Memory) -> Any:
        """Call the handler, awaiting coroutine handlers and running plain ones in a worker thread.

        Raises:
            ToolExecutionError: If the handler exceeds the configured timeout.
        """

        async def call() -> Any:
            if inspect.iscoroutinefunction(tool.handler):
                return await tool.handler(arguments, memory)
            result = await asyncio.to_thread(tool.handler, arguments, memory)
            if inspect.isawaitable(result):
                result = await result
            return result

        if self._tool_timeout is None:
            return await call()

        try:
            return await asyncio.wait_for(call(), timeout=self._tool_timeout)
        except asyncio.TimeoutError as exc:
            msg = f"Tool '{tool.name}' timed out after {self._tool_timeout} seconds."
            logger.error(msg)
            raise ToolExecutionError(msg) from exc

    @staticmethod
    def _copy_memory(memory: Memory) -> Memory:
        return copy.copy(memory)

    @staticmethod
    def _retrieve_failure(task: "asyncio.Future[Any]") -> None:
        # gather only re-raises the first failure; later ones are read here
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Pipeline finished with %s: %s", type(exc).__name__, exc)
