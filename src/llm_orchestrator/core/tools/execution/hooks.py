"""Sequential application of named hook processors to a memory value."""

import inspect
from typing import Iterable, Optional

from ..models import Memory
from ..registry import ToolRegistry
from ...logger import get_logger

logger = get_logger(__name__)


class HookRunner:
    """Runs chains of hook processors looked up by name in a registry.

    Names are resolved at call time. A name without a registered processor is skipped.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    async def run_hooks(self, names: Optional[Iterable[str]], memory: Memory) -> Memory:
        """Apply the named processors to ``memory`` one after the other.

        Each processor receives the value returned by the previous one. A processor
        returning None is treated as having mutated the memory in place.

        Args:
            names: Hook names in execution order. None or empty is a no-op.
            memory: The memory value to transform.

        Returns:
            The memory value produced by the last processor.
        """
        for name in names or ():
            processor = self._registry.get_hook_processor(name)
            if processor is None:
                logger.debug("Hook '%s' is not registered, skipping.", name)
                continue

            logger.debug("Running hook '%s'.", name)
            updated = processor(memory)
            if inspect.isawaitable(updated):
                updated = await updated
            if updated is not None:
                memory = updated
        return memory
