from typing import Any, Dict, Mapping, Optional, Tuple, Type

import jsonref  # type: ignore
from pydantic import BaseModel

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = frozenset({"$defs", "definitions", "$schema", "$id", "title"})


class SchemaValidator:
    """
    Turns argument models into flat parameter schemas the collaborator can consume.
    """

    @classmethod
    def schema_from_model(cls, args_model: Type[BaseModel]) -> Dict[str, Any]:
        """Builds a flat, sanitized parameters schema from a Pydantic model.

        Args:
            args_model: The model describing a tool's arguments.

        Returns:
            The resolved and sanitized JSON schema.

        Raises:
            ToolValidationError: If the model contains recursive references.
        """
        raw_schema = args_model.model_json_schema()
        cls.assert_no_recursive_refs(raw_schema)

        # proxies=False ensures we get a plain dict back, not JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return cls.sanitize_schema(resolved)

    @classmethod
    def assert_no_recursive_refs(cls, schema: Dict[str, Any]) -> None:
        """
        Raises ToolValidationError if following local ``$ref``s leads back to a ref already visited.
        """
        defs = schema.get("$defs") or schema.get("definitions") or {}
        cycle = cls._find_ref_cycle(schema, defs, ())
        if cycle:
            msg = (
                f"Recursive structure detected: {' -> '.join(cycle)}. "
                "Recursive structures are not allowed in tool arguments."
            )
            logger.error(msg)
            raise ToolValidationError(msg)

    @classmethod
    def _find_ref_cycle(
        cls, node: Any, defs: Mapping[str, Any], trail: Tuple[str, ...]
    ) -> Optional[Tuple[str, ...]]:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if ref is not None:
                if ref in trail:
                    return trail + (ref,)
                # e.g. #/$defs/MyModel
                target = defs.get(ref.rsplit("/", 1)[-1]) if ref.startswith("#") else None
                return None if target is None else cls._find_ref_cycle(target, defs, trail + (ref,))
            children = list(node.values())
        elif isinstance(node, list):
            children = node
        else:
            return None

        for child in children:
            found = cls._find_ref_cycle(child, defs, trail)
            if found:
                return found
        return None

    @classmethod
    def sanitize_schema(cls, schema: Any) -> Any:
        """
        Drops metadata keys, collapses ``Optional`` unions and closes every object
        schema with ``additionalProperties: false``. Names under ``properties`` are
        field names and are kept even when they collide with a metadata key.
        """
        if isinstance(schema, list):
            return [cls.sanitize_schema(item) for item in schema]
        if not isinstance(schema, dict):
            return schema

        collapsed = cls._collapse_optional(schema)
        if collapsed is not None:
            return cls.sanitize_schema(collapsed)

        cleaned: Dict[str, Any] = {}
        for key, value in schema.items():
            if key in _METADATA_KEYS:
                continue
            if key == "properties" and isinstance(value, dict):
                cleaned[key] = {name: cls.sanitize_schema(sub) for name, sub in value.items()}
            else:
                cleaned[key] = cls.sanitize_schema(value)

        if cleaned.get("type") == "object":
            cleaned.setdefault("additionalProperties", False)
        return cleaned

    @staticmethod
    def _collapse_optional(schema: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """``anyOf: [X, null]`` becomes ``X``; the outer description and default win."""
        variants = schema.get("anyOf")
        if not isinstance(variants, list):
            return None

        non_null = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
        if len(non_null) != 1 or not isinstance(non_null[0], dict):
            return None

        collapsed = dict(non_null[0])
        for key in ("description", "default"):
            if key in schema:
                collapsed[key] = schema[key]
        return collapsed
