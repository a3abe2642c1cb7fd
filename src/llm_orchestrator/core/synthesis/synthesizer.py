"""Feeds tool results back to the reasoning collaborator for a final reply."""

from typing import Optional, Sequence

from ..config import OrchestratorConfig
from ..logger import get_logger
from ..planning import PlanningContext
from ..planning.planner import normalize_reasoning_output
from ..reasoning import ReasoningClient, ReasoningInput, ReasoningOutput
from ..tools.models import SynthesisRecord, ToolCallRequest, ToolExecutionResult

logger = get_logger(__name__)


class Synthesizer:
    """Builds the synthesis request and returns the collaborator's final reply."""

    def __init__(self, config: Optional[OrchestratorConfig] = None) -> None:
        self._config = config or OrchestratorConfig()

    def build_agent_context(self, system_prompt: str) -> str:
        return f"system context: {system_prompt}\n{self._config.synthesis_instruction}"

    async def synthesize_final_reply(
        self,
        user_message: str,
        tool_results: Sequence[ToolExecutionResult],
        context: PlanningContext,
        reasoning_client: ReasoningClient,
        tool_calls: Optional[Sequence[ToolCallRequest]] = None,
    ) -> ReasoningOutput:
        """Ask the collaborator to summarize the tool results.

        Args:
            user_message: The original user prompt.
            tool_results: Results of the executed tools.
            context: Conversation state of the round (system prompt, history, memory).
            reasoning_client: The collaborator, called exactly once.
            tool_calls: The tool calls of the plan, for backends that replay them.

        Returns:
            The collaborator's output, or a fallback reply if it produced nothing usable.
        """
        records = [SynthesisRecord.from_result(r) for r in tool_results]
        request = ReasoningInput(
            agent_context=self.build_agent_context(context.system_prompt),
            conversation_history=context.conversation_history,
            agent_memory=context.agent_memory,
            user_prompt=user_message,
            function_called=list(tool_calls) if tool_calls else None,
            function_output=records,
        )

        logger.info(f"Synthesizing final reply from {len(records)} tool result(s).")
        response = normalize_reasoning_output(await reasoning_client(request, self._config.model))

        if response is None or response == ReasoningOutput():
            logger.warning("Reasoning collaborator returned no reply; using fallback.")
            return ReasoningOutput(ai_response=self._config.fallback_reply, model=self._config.model)

        if not response.ai_response.strip():
            logger.warning("Reasoning collaborator returned a blank reply; using fallback text.")
            return response.model_copy(update={"ai_response": self._config.fallback_reply})

        logger.debug("Final synthesized reply: %s", response.ai_response)
        return response
