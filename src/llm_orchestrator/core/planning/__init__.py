"""Planning: from a collaborator decision to tool invocations."""

from .models import PlanningContext, PlanResult
from .planner import Planner, normalize_reasoning_output

__all__ = ["PlanningContext", "PlanResult", "Planner", "normalize_reasoning_output"]
