"""
Structural predicates over a schema node.

All predicates read the node as it is now; nothing is cached, since a
builder operation may change the answer for the next one.
"""

from typing import Any, Dict

COMBINATOR_KEYWORDS = ("oneOf", "allOf", "anyOf", "not")


def is_object_schema(schema: Dict[str, Any]) -> bool:
    """True if the schema describes an object (explicitly or through ``properties``)."""
    if "type" in schema:
        return schema["type"] == "object"
    return "properties" in schema


def has_additional_properties(schema: Dict[str, Any]) -> bool:
    """True if the schema describes an object that can have additional properties."""
    return is_object_schema(schema) and schema.get("additionalProperties", True) is not False


def has_combinators(schema: Dict[str, Any]) -> bool:
    """True if the schema uses oneOf, allOf, anyOf or not."""
    return any(keyword in schema for keyword in COMBINATOR_KEYWORDS)


def is_simple_object_schema(schema: Dict[str, Any]) -> bool:
    """True for an object schema with additionalProperties false and no combinator."""
    return (
        is_object_schema(schema)
        and not has_additional_properties(schema)
        and not has_combinators(schema)
    )
