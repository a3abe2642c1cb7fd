import copy
from typing import Any, Awaitable, Callable, Dict, Literal, MutableMapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Memory = MutableMapping[str, Any]
ToolHandler = Callable[[Dict[str, Any], Memory], Union[Any, Awaitable[Any]]]
HookProcessor = Callable[[Memory], Union[Optional[Memory], Awaitable[Optional[Memory]]]]


class ToolDefinition(BaseModel):
    """
    Represents a tool that the reasoning collaborator may ask to invoke.

    Attributes:
        type: Tool kind exported to the collaborator. Always ``"function"``.
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        parameters: A JSON-schema-like dict describing the accepted arguments.
        handler: Callable receiving ``(arguments, memory)`` and returning the tool result.
                 May be a coroutine function or a plain function.
        pre_hooks: Hook processor names run, in order, before the handler.
        post_hooks: Hook processor names run, in order, after the handler.
        args_model: Optional Pydantic model used to validate arguments before the handler runs.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: Literal["function"] = "function"
    name: str = Field(min_length=1)
    description: str
    parameters: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    handler: Callable[..., Any]
    pre_hooks: Tuple[str, ...] = ()
    post_hooks: Tuple[str, ...] = ()
    args_model: Optional[Type[BaseModel]] = None

    @field_validator("pre_hooks", "post_hooks", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    def schema_entry(self) -> Dict[str, Any]:
        """The part of the definition that is shown to the reasoning collaborator, as a fresh copy."""
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "parameters": copy.deepcopy(self.parameters),
        }
