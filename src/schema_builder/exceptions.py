"""
Core Exception Classes for schema_builder.

Contract violations raised by the transformation algebra live here, apart
from the validation errors in ``validation.errors``, so that the schema
helpers (walker, classifier, dereference) can raise them without importing
the builder or jsonschema.

Design Principle:
    exceptions.py (BASE - zero dependencies)
        ^
    schema/ (walker, classifier, loader, dereference)
        ^
    builder.py / validation/
"""

from typing import Optional


class SchemaBuilderError(Exception):
    """
    Raised when a builder operation is called on a schema of the wrong shape.

    Covers every precondition of the algebra: wrong structural kind,
    property name collision, absent property, unsupported factory keyword,
    schema rejected by the metaschema at compile time. The schema is never
    partially modified when this is raised.

    Example:
        >>> SchemaBuilder.string_schema().add_string("name")
        Traceback (most recent call last):
        ...
        SchemaBuilderError: Schema Builder Error: you can only add properties to an object schema
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Schema Builder Error: {message}")


class SchemaReferenceError(SchemaBuilderError):
    """
    Raised when a schema still containing ``$ref`` is used to build a SchemaBuilder.

    Attributes:
        pointer: JSON pointer of the node holding the reference ("" for the root)
        ref: The unresolved reference value
    """

    def __init__(self, pointer: str, ref: Optional[str] = None):
        self.pointer = pointer
        self.ref = ref
        super().__init__(
            f"$ref can't be used to initialize a SchemaBuilder (found {ref!r} at '#{pointer}'). "
            "Use 'SchemaBuilder.dereferenced_schema' instead."
        )


class DereferenceError(SchemaBuilderError):
    """Raised when a ``$ref`` cannot be resolved into an inline schema."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"can't resolve $ref {ref!r}: {reason}")
