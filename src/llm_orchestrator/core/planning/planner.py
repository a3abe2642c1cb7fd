"""Turns the reasoning collaborator's decision into concrete tool invocations."""

import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .models import PlanningContext, PlanResult
from ..config import OrchestratorConfig
from ..exceptions import PlanningFormatError
from ..logger import get_logger
from ..reasoning import ReasoningClient, ReasoningInput, ReasoningOutput
from ..tools.execution import CALL_ID_KEY
from ..tools.models import ToolCallRequest
from ..tools.registry import ToolRegistry

logger = get_logger(__name__)


def normalize_reasoning_output(response: Any) -> Optional[ReasoningOutput]:
    """Coerce a collaborator response into a ReasoningOutput.

    Args:
        response: A ReasoningOutput, a mapping with the same fields, or None.

    Returns:
        The normalized output, or None if the response was None.

    Raises:
        PlanningFormatError: If the response cannot be interpreted.
    """
    if response is None or isinstance(response, ReasoningOutput):
        return response
    if isinstance(response, Mapping):
        try:
            return ReasoningOutput.model_validate(dict(response))
        except ValidationError as e:
            msg = f"Invalid reasoning response: {e}"
            logger.error(msg)
            raise PlanningFormatError(msg) from e

    msg = f"Invalid reasoning response type: {type(response).__name__}"
    logger.error(msg)
    raise PlanningFormatError(msg)


class Planner:
    """Asks the reasoning collaborator whether to reply directly or to call tools."""

    def __init__(self, registry: ToolRegistry, config: Optional[OrchestratorConfig] = None) -> None:
        self._registry = registry
        self._config = config or OrchestratorConfig()

    async def plan_tools(self, context: PlanningContext, reasoning_client: ReasoningClient) -> PlanResult:
        """Run one planning round.

        Args:
            context: Conversation state and the new user message.
            reasoning_client: The collaborator, called exactly once.

        Returns:
            A direct-reply plan or a tool-calls plan.

        Raises:
            PlanningFormatError: If the response is neither a usable reply nor a
                parseable list of tool calls.
        """
        request = ReasoningInput(
            agent_context=context.system_prompt,
            conversation_history=context.conversation_history,
            agent_memory=context.agent_memory,
            user_prompt=context.user_message,
            image_url=context.image_url,
            file_url=context.file_url,
            functions=self._registry.get_tool_schemas(),
        )

        logger.info(f"Planning initiated with {len(request.functions or [])} tool schema(s).")
        logger.debug("Planning request: %s", request)
        response = normalize_reasoning_output(await reasoning_client(request, self._config.model))
        logger.debug("Planning response: %s", response)

        if response is None:
            msg = "Invalid planning response format: the reasoning collaborator returned nothing."
            logger.error(msg)
            raise PlanningFormatError(msg)

        if response.function_call:
            return self._tool_calls_plan(response)

        if response.ai_response:
            logger.info("No tools requested, replying directly.")
            return PlanResult(
                kind="direct_reply",
                direct_reply=response.ai_response,
                conv_topic=response.conv_topic or self._config.default_topic,
                new_memory=response.new_memory or {},
                model=response.model or self._config.model,
                usage=response.usage,
            )

        msg = "Invalid planning response format: neither a reply nor tool calls."
        logger.error(msg)
        raise PlanningFormatError(msg)

    def _tool_calls_plan(self, response: ReasoningOutput) -> PlanResult:
        args: Dict[str, Dict[str, Any]] = {}
        needed_tools: List[str] = []

        for call in response.function_call:
            parsed = self._parse_arguments(call)
            parsed[CALL_ID_KEY] = call.call_id
            args[call.name] = parsed
            needed_tools.append(call.name)

        logger.info(f"Planner selected tool(s): {', '.join(needed_tools)}")
        return PlanResult(
            kind="tool_calls",
            tools=list(response.function_call),
            needed_tools=needed_tools,
            args=args,
            direct_reply=response.ai_response,
            conv_topic=response.conv_topic or self._config.default_topic,
            new_memory=response.new_memory or {},
            model=response.model or self._config.model,
            usage=response.usage,
        )

    @staticmethod
    def _parse_arguments(call: ToolCallRequest) -> Dict[str, Any]:
        """Decode a tool call's argument payload into a fresh dict.

        Raises:
            PlanningFormatError: If the payload is not a JSON object.
        """
        raw_args = call.arguments
        if raw_args is None or raw_args == "":
            return {}

        if isinstance(raw_args, str):
            try:
                raw_args = json.loads(raw_args)
            except json.JSONDecodeError as e:
                msg = f"Failed to parse arguments for tool '{call.name}': {e}"
                logger.error(msg)
                raise PlanningFormatError(msg) from e
            if raw_args is None:
                return {}

        if not isinstance(raw_args, Mapping):
            msg = f"Arguments for tool '{call.name}' must decode to a JSON object."
            logger.error(msg)
            raise PlanningFormatError(msg)

        return dict(raw_args)
