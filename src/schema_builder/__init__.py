"""
schema_builder: build, transform and validate JSON Schemas.

Example:
    >>> from schema_builder import SchemaBuilder
    >>> address = SchemaBuilder.object_schema().add_string("street").add_string("city")
    >>> person = (
    ...     SchemaBuilder.object_schema({"title": "Person"})
    ...     .add_string("name")
    ...     .add_optional_object("address", address)
    ... )
    >>> person.validate({"name": "Ann"})
    {'name': 'Ann'}
"""

from .builder import SchemaBuilder
from .config import ValidationOptions, resolve_validation_options
from .exceptions import DereferenceError, SchemaBuilderError, SchemaReferenceError
from .schema.dereference import dereference
from .validation import SchemaValidator, ValidationError, ValidationErrorDetail

__version__ = "0.1.0"

__all__ = [
    "SchemaBuilder",
    "SchemaValidator",
    "ValidationOptions",
    "resolve_validation_options",
    "SchemaBuilderError",
    "SchemaReferenceError",
    "DereferenceError",
    "ValidationError",
    "ValidationErrorDetail",
    "dereference",
]
