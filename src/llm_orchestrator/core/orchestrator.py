"""Facade binding a registry and configuration into a full plan, execute, synthesize round."""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from .config import OrchestratorConfig
from .logger import get_logger
from .planning import Planner, PlanningContext, PlanResult
from .reasoning import ReasoningClient, ReasoningOutput, TokenUsage
from .synthesis import Synthesizer
from .tools import Memory, ParallelToolExecutor, ToolExecutionResult, ToolRegistry
from .tools.execution import HookRunner, MemoryMerger
from .tools.models import ToolCallRequest

logger = get_logger(__name__)


class TurnResult(BaseModel):
    """
    Outcome of a complete round.

    Attributes:
        reply: Final text shown to the user.
        plan: The planning decision.
        tool_results: Results of the executed tools; empty for direct replies.
        new_memory: Memory update proposed by the model in the final step.
        conv_topic: Conversation topic of the round.
        usage: Token usage of the final collaborator call.
    """

    reply: str
    plan: PlanResult
    tool_results: List[ToolExecutionResult] = Field(default_factory=list)
    new_memory: Dict[str, Any] = Field(default_factory=dict)
    conv_topic: str
    usage: Optional[TokenUsage] = None


class Orchestrator:
    """
    Entry point of the orchestration core.

    Holds one registry and one configuration and exposes the planner, executor and
    synthesizer operations bound to them.
    """

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        config: Optional[OrchestratorConfig] = None,
        memory_merger: Optional[MemoryMerger] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            registry: Registry of tools and hooks. A new one is created if omitted,
                honouring ``config.strict_registry``.
            config: Orchestrator configuration.
            memory_merger: Custom merge policy for memory changes made by parallel tools.
        """
        self.config = config or OrchestratorConfig()
        self.registry = registry if registry is not None else ToolRegistry(strict=self.config.strict_registry)
        self.hooks = HookRunner(self.registry)
        self.planner = Planner(self.registry, self.config)
        self.executor = ParallelToolExecutor(
            self.registry,
            hook_runner=self.hooks,
            tool_timeout=self.config.tool_timeout,
            memory_merger=memory_merger,
        )
        self.synthesizer = Synthesizer(self.config)

    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        return self.registry.get_tool_schemas()

    async def plan_tools(self, context: PlanningContext, reasoning_client: ReasoningClient) -> PlanResult:
        return await self.planner.plan_tools(context, reasoning_client)

    async def execute_parallel_tools(
        self,
        tool_names: Sequence[str],
        args_by_name: Optional[Mapping[str, Mapping[str, Any]]],
        memory: Optional[Memory] = None,
    ) -> List[ToolExecutionResult]:
        return await self.executor.execute(tool_names, args_by_name, memory)

    async def synthesize_final_reply(
        self,
        user_message: str,
        tool_results: Sequence[ToolExecutionResult],
        context: PlanningContext,
        reasoning_client: ReasoningClient,
        tool_calls: Optional[Sequence[ToolCallRequest]] = None,
    ) -> ReasoningOutput:
        return await self.synthesizer.synthesize_final_reply(
            user_message, tool_results, context, reasoning_client, tool_calls=tool_calls
        )

    async def run_turn(
        self,
        context: PlanningContext,
        reasoning_client: ReasoningClient,
        memory: Optional[Memory] = None,
    ) -> TurnResult:
        """Plan, run the selected tools and synthesize the reply.

        A direct reply from the planner ends the round without running any tool.

        Args:
            context: Conversation state and the new user message.
            reasoning_client: The collaborator.
            memory: Memory handed to the tools. Defaults to ``context.agent_memory``.

        Returns:
            The reply together with the intermediate plan and tool results.
        """
        plan = await self.plan_tools(context, reasoning_client)
        if plan.is_direct_reply:
            return TurnResult(
                reply=plan.direct_reply or "",
                plan=plan,
                new_memory=plan.new_memory,
                conv_topic=plan.conv_topic,
                usage=plan.usage,
            )

        if memory is None:
            memory = context.agent_memory
        results = await self.execute_parallel_tools(plan.needed_tools, plan.args, memory)

        final = await self.synthesize_final_reply(
            context.user_message, results, context, reasoning_client, tool_calls=plan.tools
        )
        return TurnResult(
            reply=final.ai_response,
            plan=plan,
            tool_results=results,
            new_memory=final.new_memory or {},
            conv_topic=final.conv_topic or plan.conv_topic,
            usage=final.usage,
        )
