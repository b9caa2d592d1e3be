"""
Validation of values against SchemaBuilder schemas.

Wraps a jsonschema Draft 7 validator that also normalizes values:
- Type coercion ("12" -> 12 for an integer property)
- Default values for missing properties
- Removal of properties forbidden by ``additionalProperties: false``
- Aggregated error reporting with value paths

Example:
    >>> from schema_builder.validation import SchemaValidator, ValidationError
    >>> validator = SchemaValidator({"type": "integer"})
    >>> validator.validate("12")
    12
"""

from .validators import SchemaValidator, list_schema
from .errors import ValidationError, ValidationErrorDetail, errors_text

__all__ = [
    "SchemaValidator",
    "list_schema",
    "ValidationError",
    "ValidationErrorDetail",
    "errors_text",
]
