"""Turn pydantic parameter models into the plain JSON schemas providers accept."""

from typing import Any, Dict, Set, Type

import jsonref  # type: ignore
from pydantic import BaseModel

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """
    Helper class for validating and sanitizing JSON schemas for agent tools.
    """

    @classmethod
    def from_model(cls, model: Type[BaseModel]) -> Dict[str, Any]:
        """Build a self-contained parameter schema from a pydantic model.

        Recursive models are rejected, ``$ref`` pointers are inlined and
        pydantic metadata is stripped.

        Args:
            model: The pydantic model describing the tool parameters.

        Returns:
            A plain JSON schema dictionary.

        Raises:
            ToolValidationError: If the model contains a recursive reference.
        """
        raw_schema = model.model_json_schema()
        cls.assert_no_recursive_refs(raw_schema)
        # proxies=False gives back plain dicts instead of JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return cls.sanitize_schema(resolved)

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walks every ``$ref`` in the schema and fails on a cycle.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def walk(node: Any, trail: Set[str]) -> None:
            if isinstance(node, list):
                for item in node:
                    walk(item, trail)
                return
            if not isinstance(node, dict):
                return

            ref = node.get("$ref")
            if ref is None:
                for value in node.values():
                    walk(value, trail)
                return

            if ref in trail:
                msg = (
                    f"Recursive structure detected: {ref}. "
                    "Tool parameters must not reference themselves; flatten the model instead."
                )
                logger.error(msg)
                raise ToolValidationError(msg)

            # Local refs look like '#/$defs/Name'
            target = ref.rsplit("/", 1)[-1] if ref.startswith("#") else None
            if target in defs:
                walk(defs[target], trail | {ref})

        walk(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up the schema for better compatibility with LLM providers.

        Drops metadata keys, collapses ``Optional[X]`` (``anyOf`` with null) into ``X``
        and closes objects with ``additionalProperties: false``.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        cleaned = {k: v for k, v in schema.items() if k not in _METADATA_KEYS}

        any_of = cleaned.get("anyOf")
        if isinstance(any_of, list):
            non_null = [option for option in any_of if isinstance(option, dict) and option.get("type") != "null"]
            if len(non_null) == 1:
                merged = {k: v for k, v in cleaned.items() if k != "anyOf"}
                merged.update({k: v for k, v in non_null[0].items() if k not in merged})
                return SchemaValidator.sanitize_schema(merged)

        if cleaned.get("type") == "object":
            cleaned.setdefault("additionalProperties", False)

        for key, value in cleaned.items():
            if key == "properties" and isinstance(value, dict):
                # Keys here are parameter names, not schema keywords
                cleaned[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                cleaned[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                cleaned[key] = [SchemaValidator.sanitize_schema(item) for item in value]

        return cleaned
