"""
Adapt a tool's JSON schema to what the Gemini function-declaration validator accepts.

Gemini rejects ``additionalProperties`` anywhere in a schema and rejects ``required``
entries that name undeclared properties.
"""

from functools import singledispatch
from typing import Any, Dict, Set, cast


def sanitize(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a sanitized copy of ``schema``. The input is left untouched.

    Args:
        schema: The tool parameter schema to sanitize.

    Returns:
        A schema dictionary ready for the Gemini API.
    """
    return cast(Dict[str, Any], _clean(schema, set()))


@singledispatch
def _clean(node: Any, active: Set[int]) -> Any:
    return node


@_clean.register(dict)
def _(node: dict, active: Set[int]) -> dict:
    if id(node) in active:
        return node
    active.add(id(node))
    try:
        level = _prune_required(node)
        return {key: _clean(value, active) for key, value in level.items() if key != "additionalProperties"}
    finally:
        active.discard(id(node))


@_clean.register(list)
def _(node: list, active: Set[int]) -> list:
    if id(node) in active:
        return node
    active.add(id(node))
    try:
        return [_clean(item, active) for item in node]
    finally:
        active.discard(id(node))


def _prune_required(node: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only ``required`` names that exist in ``properties``, in their original order."""
    required = node.get("required")
    properties = node.get("properties")
    if not isinstance(required, list) or not isinstance(properties, dict):
        return node

    pruned = dict(node)
    kept = [name for name in required if name in properties]
    if kept:
        pruned["required"] = kept
    else:
        pruned.pop("required")
    return pruned
