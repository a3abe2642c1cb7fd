import asyncio
import logging
import pytest
from typing import Any, Dict, List, Mapping, Sequence
from pydantic import BaseModel

from llm_orchestrator.core import Memory, ParallelToolExecutor, ToolDefinition, ToolExecutionResult, ToolRegistry
from llm_orchestrator.core.exceptions import NoToolsError, ToolExecutionError, ToolNotFoundError, ToolValidationError


@pytest.fixture
def executor(registry: ToolRegistry) -> ParallelToolExecutor:
    return ParallelToolExecutor(registry)


@pytest.mark.asyncio
async def test_empty_tool_list_fails(executor: ParallelToolExecutor) -> None:
    with pytest.raises(NoToolsError, match="No tools to execute"):
        await executor.execute([], {}, {})


@pytest.mark.asyncio
async def test_unknown_tool_fails_naming_it(executor: ParallelToolExecutor) -> None:
    with pytest.raises(ToolNotFoundError, match="ghost") as exc_info:
        await executor.execute(["ghost"], {}, {})

    assert exc_info.value.tool_name == "ghost"


@pytest.mark.asyncio
async def test_unknown_tool_fails_before_anything_runs(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    ran: List[str] = []

    async def handler(args: Dict[str, Any], memory: Memory) -> str:
        ran.append("known")
        return "ok"

    registry.register_tool(ToolDefinition(name="known", description="d", handler=handler))

    with pytest.raises(ToolNotFoundError):
        await executor.execute(["known", "ghost"], {}, {})
    assert ran == []


@pytest.mark.asyncio
async def test_stock_price_scenario(
    registry: ToolRegistry, executor: ParallelToolExecutor, stock_tool: ToolDefinition
) -> None:
    registry.register_tool(stock_tool)

    results = await executor.execute(
        ["get_stock_price"], {"get_stock_price": {"ticker": "AAPL", "currency": "USD"}}, {}
    )

    assert results == [
        ToolExecutionResult(
            name="get_stock_price",
            result={"price": "123.45", "ticker": "AAPL", "currency": "USD"},
            call_id=None,
        )
    ]


@pytest.mark.asyncio
async def test_call_id_is_propagated(
    registry: ToolRegistry, executor: ParallelToolExecutor, stock_tool: ToolDefinition
) -> None:
    registry.register_tool(stock_tool)

    (result,) = await executor.execute(
        ["get_stock_price"], {"get_stock_price": {"ticker": "AAPL", "currency": "USD", "call_id": "c1"}}, {}
    )

    assert result.call_id == "c1"


@pytest.mark.asyncio
async def test_handler_observes_pre_hooks_in_order(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    seen: List[Dict[str, Any]] = []

    async def h1(memory: Memory) -> Memory:
        memory["steps"] = memory.get("steps", []) + ["h1"]
        return memory

    async def h2(memory: Memory) -> Memory:
        memory["steps"] = memory["steps"] + ["h2"]
        return memory

    async def handler(args: Dict[str, Any], memory: Memory) -> str:
        seen.append(dict(memory))
        return "done"

    registry.register_hook_processor("h1", h1)
    registry.register_hook_processor("h2", h2)
    registry.register_tool(ToolDefinition(name="reader", description="d", handler=handler, pre_hooks=["h1", "h2"]))

    await executor.execute(["reader"], {}, {"user": "u1"})

    assert seen == [{"user": "u1", "steps": ["h1", "h2"]}]


@pytest.mark.asyncio
async def test_pipeline_order_pre_handler_post(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    order: List[str] = []

    async def pre(memory: Memory) -> Memory:
        order.append("pre")
        return memory

    async def post(memory: Memory) -> Memory:
        order.append("post")
        return memory

    async def handler(args: Dict[str, Any], memory: Memory) -> None:
        order.append("handler")

    registry.register_hook_processor("pre", pre)
    registry.register_hook_processor("post", post)
    registry.register_tool(
        ToolDefinition(name="t", description="d", handler=handler, pre_hooks=["pre"], post_hooks=["post", "nope"])
    )

    await executor.execute(["t"], {}, {})

    assert order == ["pre", "handler", "post"]


@pytest.mark.asyncio
async def test_tools_run_concurrently(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    started = asyncio.Event()
    release = asyncio.Event()

    async def first(args: Dict[str, Any], memory: Memory) -> str:
        started.set()
        await release.wait()
        return "first"

    async def second(args: Dict[str, Any], memory: Memory) -> str:
        await started.wait()
        release.set()
        return "second"

    registry.register_tool(ToolDefinition(name="first", description="d", handler=first))
    registry.register_tool(ToolDefinition(name="second", description="d", handler=second))

    results = await asyncio.wait_for(executor.execute(["first", "second"], {}, {}), timeout=2)

    assert [r.result for r in results] == ["first", "second"]


@pytest.mark.asyncio
async def test_memory_changes_merged_in_tool_order(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    async def writer_a(args: Dict[str, Any], memory: Memory) -> None:
        memory["shared"] = "a"
        memory["only_a"] = True

    async def writer_b(args: Dict[str, Any], memory: Memory) -> None:
        await asyncio.sleep(0)
        memory["shared"] = "b"

    async def reader(args: Dict[str, Any], memory: Memory) -> Dict[str, Any]:
        return dict(memory)

    registry.register_tool(ToolDefinition(name="a", description="d", handler=writer_a))
    registry.register_tool(ToolDefinition(name="b", description="d", handler=writer_b))
    registry.register_tool(ToolDefinition(name="reader", description="d", handler=reader))

    memory: Dict[str, Any] = {"shared": "initial", "keep": 1}
    results = await executor.execute(["a", "b", "reader"], {}, memory)

    # every pipeline works on its own copy
    assert results[2].result == {"shared": "initial", "keep": 1}
    assert memory == {"shared": "b", "keep": 1, "only_a": True}


@pytest.mark.asyncio
async def test_custom_memory_merger(registry: ToolRegistry) -> None:
    async def writer(args: Dict[str, Any], memory: Memory) -> None:
        memory["count"] = memory.get("count", 0) + 1

    def summing_merger(target: Memory, snapshot: Mapping[str, Any], updates: Sequence[Memory]) -> None:
        target["count"] = snapshot.get("count", 0) + sum(u["count"] - snapshot.get("count", 0) for u in updates)

    registry.register_tool(ToolDefinition(name="w1", description="d", handler=writer))
    registry.register_tool(ToolDefinition(name="w2", description="d", handler=writer))
    executor = ParallelToolExecutor(registry, memory_merger=summing_merger)

    memory: Dict[str, Any] = {"count": 0}
    await executor.execute(["w1", "w2"], {}, memory)

    assert memory == {"count": 2}


@pytest.mark.asyncio
async def test_failure_propagates_and_memory_untouched(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    async def ok(args: Dict[str, Any], memory: Memory) -> str:
        memory["ok"] = True
        return "ok"

    async def boom(args: Dict[str, Any], memory: Memory) -> None:
        raise RuntimeError("handler exploded")

    registry.register_tool(ToolDefinition(name="ok", description="d", handler=ok))
    registry.register_tool(ToolDefinition(name="boom", description="d", handler=boom))

    memory: Dict[str, Any] = {}
    with pytest.raises(RuntimeError, match="handler exploded"):
        await executor.execute(["ok", "boom"], {}, memory)

    assert memory == {}


class Session:
    def __init__(self) -> None:
        self.calls = 0


@pytest.mark.asyncio
async def test_memory_values_are_shared_by_reference(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    async def noop(args: Dict[str, Any], memory: Memory) -> None:
        return None

    async def count_call(args: Dict[str, Any], memory: Memory) -> None:
        memory["session"].calls += 1

    registry.register_tool(ToolDefinition(name="noop", description="d", handler=noop))
    registry.register_tool(ToolDefinition(name="count_call", description="d", handler=count_call))

    session = Session()
    memory: Dict[str, Any] = {"session": session}

    await executor.execute(["noop"], {}, memory)
    assert memory["session"] is session

    await executor.execute(["count_call"], {}, memory)
    assert memory["session"] is session
    assert session.calls == 1


@pytest.mark.asyncio
async def test_failure_does_not_cancel_slower_sibling(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    finished = asyncio.Event()

    async def boom(args: Dict[str, Any], memory: Memory) -> None:
        raise RuntimeError("handler exploded")

    async def slow(args: Dict[str, Any], memory: Memory) -> str:
        await asyncio.sleep(0.05)
        finished.set()
        return "slow"

    registry.register_tool(ToolDefinition(name="boom", description="d", handler=boom))
    registry.register_tool(ToolDefinition(name="slow", description="d", handler=slow))

    with pytest.raises(RuntimeError, match="handler exploded"):
        await executor.execute(["boom", "slow"], {}, {})
    assert not finished.is_set()

    await asyncio.wait_for(finished.wait(), timeout=1)
    assert finished.is_set()


@pytest.mark.asyncio
async def test_later_sibling_failure_is_retrieved(
    registry: ToolRegistry, executor: ParallelToolExecutor, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="llm_orchestrator")
    second_failed = asyncio.Event()

    async def first(args: Dict[str, Any], memory: Memory) -> None:
        raise RuntimeError("first failure")

    async def second(args: Dict[str, Any], memory: Memory) -> None:
        await asyncio.sleep(0.01)
        second_failed.set()
        raise ValueError("second failure")

    registry.register_tool(ToolDefinition(name="first", description="d", handler=first))
    registry.register_tool(ToolDefinition(name="second", description="d", handler=second))

    with pytest.raises(RuntimeError, match="first failure"):
        await executor.execute(["first", "second"], {}, {})

    await asyncio.wait_for(second_failed.wait(), timeout=1)
    # let the done callback of the second pipeline run
    for _ in range(5):
        await asyncio.sleep(0)

    retrieved = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
    assert any("RuntimeError: first failure" in m for m in retrieved)
    assert any("ValueError: second failure" in m for m in retrieved)


@pytest.mark.asyncio
async def test_sync_handler_runs_in_thread(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    def add(args: Dict[str, Any], memory: Memory) -> int:
        return args["a"] + args["b"]

    registry.register_tool(ToolDefinition(name="add", description="d", handler=add))

    (result,) = await executor.execute(["add"], {"add": {"a": 2, "b": 3}}, None)

    assert result.result == 5


class AddArgs(BaseModel):
    a: int
    b: int


@pytest.mark.asyncio
async def test_args_model_validates_and_keeps_call_id(registry: ToolRegistry, executor: ParallelToolExecutor) -> None:
    received: List[Dict[str, Any]] = []

    async def add(args: Dict[str, Any], memory: Memory) -> int:
        received.append(args)
        return args["a"] + args["b"]

    registry.register_tool(ToolDefinition(name="add", description="d", handler=add, args_model=AddArgs))

    (result,) = await executor.execute(["add"], {"add": {"a": "2", "b": 3, "call_id": "c9"}}, {})

    assert result.result == 5
    assert result.call_id == "c9"
    assert received == [{"a": 2, "b": 3, "call_id": "c9"}]

    with pytest.raises(ToolValidationError, match="Argument validation failed"):
        await executor.execute(["add"], {"add": {"a": "two", "b": 3}}, {})


@pytest.mark.asyncio
async def test_tool_timeout(registry: ToolRegistry) -> None:
    async def slow(args: Dict[str, Any], memory: Memory) -> None:
        await asyncio.sleep(5)

    registry.register_tool(ToolDefinition(name="slow", description="d", handler=slow))
    executor = ParallelToolExecutor(registry, tool_timeout=0.01)

    with pytest.raises(ToolExecutionError, match="timed out"):
        await executor.execute(["slow"], {}, {})
