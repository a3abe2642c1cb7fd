from typing import Any, Dict

import pytest

from llm_orchestrator.core import Memory, PlanningContext, ToolDefinition, ToolRegistry

STOCK_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "required": ["ticker", "currency"],
    "properties": {
        "ticker": {"type": "string", "description": "The stock ticker symbol"},
        "currency": {"type": "string", "description": "Currency for price (USD, EUR)"},
    },
    "additionalProperties": False,
}


async def get_stock_price(args: Dict[str, Any], memory: Memory) -> Dict[str, Any]:
    return {"price": "123.45", "ticker": args["ticker"], "currency": args["currency"]}


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


@pytest.fixture
def stock_tool() -> ToolDefinition:
    return ToolDefinition(
        name="get_stock_price",
        description="Retrieves the current stock price for a given stock ticker",
        parameters=STOCK_PARAMETERS,
        handler=get_stock_price,
    )


@pytest.fixture
def planning_context() -> PlanningContext:
    return PlanningContext(
        system_prompt="You are a financial assistant.",
        user_message="What's the price of AAPL in USD?",
    )
