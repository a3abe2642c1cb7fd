"""Tool registry and hook processor table."""

import inspect
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from ..models import ToolDefinition, HookProcessor
from ..schema import SchemaValidator
from ...exceptions import ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    A registry holding every tool the reasoning collaborator may call and the hook
    processors those tools reference by name.

    One registry is built at start-up and handed to the planner, executor and
    orchestrator. Tools are kept in registration order; that order is the order in
    which schemas are exported. Hook names on a tool are resolved when the tool runs,
    so hooks may be registered before or after the tools that use them.
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize the ToolRegistry.

        Args:
            strict: Reject a tool whose name is already registered. When False, the
                duplicate is appended and lookups keep returning the first registration.
        """
        self.strict = strict
        self._tools: List[ToolDefinition] = []
        self._hooks: Dict[str, HookProcessor] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return any(t.name == name for t in self._tools)

    @property
    def tools(self) -> Tuple[ToolDefinition, ...]:
        """All registered tool definitions in registration order."""
        return tuple(self._tools)

    @property
    def hook_processors(self) -> Mapping[str, HookProcessor]:
        """Read-only view of the hook processor table."""
        return MappingProxyType(self._hooks)

    def register_tool(self, definition: ToolDefinition) -> ToolDefinition:
        """Register a tool definition.

        Args:
            definition: The tool to add.

        Returns:
            The registered definition.

        Raises:
            ToolRegistrationError: If the value is not a ToolDefinition, or if the
                registry is strict and the name is taken.
        """
        if not isinstance(definition, ToolDefinition):
            msg = f"Expected a ToolDefinition, got {type(definition).__name__}."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        if definition.name in self:
            if self.strict:
                msg = f"Tool '{definition.name}' is already registered."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            logger.warning(
                "Tool '%s' is already registered; lookups will keep returning the first registration.",
                definition.name,
            )

        self._tools.append(definition)
        logger.info(f"Successfully registered tool: '{definition.name}'")
        return definition

    def tool(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
        args_model: Optional[Type[BaseModel]] = None,
        pre_hooks: Iterable[str] = (),
        post_hooks: Iterable[str] = (),
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """A decorator turning a ``(arguments, memory)`` handler into a registered tool.

        Args:
            name: Tool name. Defaults to the handler's ``__name__``.
            description: Tool description. Defaults to the handler's docstring.
            parameters: Explicit parameters schema. Mutually exclusive with ``args_model``.
            args_model: Pydantic model describing the arguments. Used for both the
                exported schema and argument validation before the handler runs.
            pre_hooks: Hook names run before the handler.
            post_hooks: Hook names run after the handler.

        Returns:
            A decorator that registers the handler and returns it unchanged.
        """

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.register_tool(
                self._generate_tool_definition(
                    handler,
                    name=name,
                    description=description,
                    parameters=parameters,
                    args_model=args_model,
                    pre_hooks=tuple(pre_hooks),
                    post_hooks=tuple(post_hooks),
                )
            )
            return handler

        return decorator

    def register_hook_processor(self, name: str, processor: HookProcessor) -> None:
        """Insert or overwrite the hook processor stored under ``name``.

        Args:
            name: Hook name referenced by tools.
            processor: Callable ``(memory) -> memory``; async or sync.

        Raises:
            ToolRegistrationError: If the name is empty or the processor is not callable.
        """
        if not name:
            msg = "Hook processor name must not be empty."
            logger.error(msg)
            raise ToolRegistrationError(msg)
        if not callable(processor):
            msg = f"Hook processor '{name}' is not callable."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        if name in self._hooks:
            logger.debug("Overwriting hook processor '%s'.", name)
        self._hooks[name] = processor
        logger.info(f"Successfully registered hook processor: '{name}'")

    def hook(self, name: Optional[str] = None) -> Callable[[HookProcessor], HookProcessor]:
        """A decorator registering a hook processor under ``name`` (default: the function name)."""

        def decorator(processor: HookProcessor) -> HookProcessor:
            self.register_hook_processor(name or getattr(processor, "__name__", ""), processor)
            return processor

        return decorator

    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Returns ``{type, name, description, parameters}`` for every tool in registration order."""
        return [t.schema_entry() for t in self._tools]

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Returns the first tool registered under ``name``, or None."""
        return next((t for t in self._tools if t.name == name), None)

    def get_hook_processor(self, name: str) -> Optional[HookProcessor]:
        return self._hooks.get(name)

    def _generate_tool_definition(
        self,
        handler: Callable[..., Any],
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
        args_model: Optional[Type[BaseModel]] = None,
        pre_hooks: Tuple[str, ...] = (),
        post_hooks: Tuple[str, ...] = (),
    ) -> ToolDefinition:
        """Generate a ToolDefinition from a handler function.

        Raises:
            ToolValidationError: If the handler has no description, or the schema is invalid.
            ToolRegistrationError: If both ``parameters`` and ``args_model`` are given.
        """
        tool_name = name or getattr(handler, "__name__", "")
        if parameters is not None and args_model is not None:
            msg = f"Tool '{tool_name}': pass either parameters or args_model, not both."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        if description is None:
            description = self._get_docstring_from_func(handler, tool_name)

        if args_model is not None:
            parameters = SchemaValidator.schema_from_model(args_model)

        fields: Dict[str, Any] = {
            "name": tool_name,
            "description": description,
            "handler": handler,
            "pre_hooks": pre_hooks,
            "post_hooks": post_hooks,
            "args_model": args_model,
        }
        if parameters is not None:
            fields["parameters"] = parameters

        try:
            return ToolDefinition(**fields)
        except ValidationError as e:
            msg = f"Invalid definition for tool '{tool_name}': {e}"
            logger.error(msg)
            raise ToolValidationError(msg) from e

    @staticmethod
    def _get_docstring_from_func(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. The model needs a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc
