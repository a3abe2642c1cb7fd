import pytest
from unittest.mock import AsyncMock

from llm_orchestrator.core import (
    OrchestratorConfig,
    PlanningContext,
    ReasoningInput,
    ReasoningOutput,
    SynthesisRecord,
    Synthesizer,
    TokenUsage,
    ToolCallRequest,
    ToolExecutionResult,
)

RESULTS = [
    ToolExecutionResult(
        name="get_stock_price", result={"price": "123.45", "ticker": "AAPL", "currency": "USD"}, call_id="c1"
    )
]


@pytest.mark.asyncio
async def test_request_relabels_results(planning_context: PlanningContext) -> None:
    client = AsyncMock(return_value=ReasoningOutput(ai_response="AAPL trades at 123.45 USD."))
    calls = [ToolCallRequest(name="get_stock_price", arguments="{}", call_id="c1")]

    await Synthesizer().synthesize_final_reply(
        planning_context.user_message, RESULTS, planning_context, client, tool_calls=calls
    )

    request, model = client.await_args.args
    assert isinstance(request, ReasoningInput)
    assert model == "gpt-4o"
    assert request.function_output == [
        SynthesisRecord(
            recipient_name="get_stock_price",
            call_id="c1",
            data={"price": "123.45", "ticker": "AAPL", "currency": "USD"},
        )
    ]
    assert request.function_called == calls
    assert request.user_prompt == "What's the price of AAPL in USD?"
    assert request.agent_context.startswith("system context: You are a financial assistant.")
    assert "summarizing" in request.agent_context
    assert request.functions is None


@pytest.mark.asyncio
async def test_returns_collaborator_output_verbatim(planning_context: PlanningContext) -> None:
    output = ReasoningOutput(
        ai_response="AAPL trades at 123.45 USD.",
        new_memory={"last_ticker": "AAPL"},
        usage=TokenUsage(input_tokens=10, output_tokens=5, total_tokens=15),
    )
    client = AsyncMock(return_value=output)

    reply = await Synthesizer().synthesize_final_reply("q", RESULTS, planning_context, client)

    assert reply == output


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, {}])
async def test_fallback_when_nothing_usable(planning_context: PlanningContext, response: object) -> None:
    client = AsyncMock(return_value=response)

    reply = await Synthesizer().synthesize_final_reply("q", RESULTS, planning_context, client)

    assert reply.ai_response == "No reply generated."


@pytest.mark.asyncio
async def test_blank_reply_keeps_usage(planning_context: PlanningContext) -> None:
    usage = TokenUsage(total_tokens=7)
    client = AsyncMock(return_value=ReasoningOutput(ai_response="  ", usage=usage))

    reply = await Synthesizer(OrchestratorConfig(fallback_reply="Nothing to say.")).synthesize_final_reply(
        "q", RESULTS, planning_context, client
    )

    assert reply.ai_response == "Nothing to say."
    assert reply.usage == usage
