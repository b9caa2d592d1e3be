"""
JSON Schema keywords accepted as metadata by the builder factories.

Each factory only takes the annotation and constraint keywords that make
sense for its type; structural keywords (type, properties, items, ...) are
always set by the builder itself.
"""

from typing import Any, Dict, FrozenSet, Optional

from ..exceptions import SchemaBuilderError

COMMON_KEYWORDS: FrozenSet[str] = frozenset({
    "description",
    "default",
    "example",
    "examples",
    "deprecated",
    "readOnly",
    "writeOnly",
})

OBJECT_KEYWORDS = COMMON_KEYWORDS | {"title", "maxProperties", "minProperties"}

STRING_KEYWORDS = COMMON_KEYWORDS | {"maxLength", "minLength", "pattern", "format"}

NUMBER_KEYWORDS = COMMON_KEYWORDS | {
    "multipleOf",
    "maximum",
    "exclusiveMaximum",
    "minimum",
    "exclusiveMinimum",
}

ARRAY_KEYWORDS = COMMON_KEYWORDS | {"maxItems", "minItems", "uniqueItems"}

BOOLEAN_KEYWORDS = COMMON_KEYWORDS

ENUM_KEYWORDS = STRING_KEYWORDS


def check_metadata(
    metadata: Optional[Dict[str, Any]],
    allowed: FrozenSet[str],
    factory: str,
) -> Dict[str, Any]:
    """
    Return a shallow copy of ``metadata`` after checking its keywords.

    Raises:
        SchemaBuilderError: If a keyword is not allowed for this factory
    """
    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise SchemaBuilderError(
            f"'{factory}' expects a dict of schema keywords, got {type(metadata).__name__}"
        )
    unknown = sorted(key for key in metadata if key not in allowed)
    if unknown:
        raise SchemaBuilderError(
            f"'{factory}' does not accept {', '.join(unknown)} "
            f"(allowed: {', '.join(sorted(allowed))})"
        )
    return dict(metadata)
