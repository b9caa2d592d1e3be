"""
Compiled single-value and list validators for one schema.

A SchemaValidator compiles each of its two validators the first time it is
used and keeps it for the rest of its life. Compilation works on a copy of
the schema: mutating the schema afterwards does not change what an already
compiled validator accepts.

Example:
    >>> validator = SchemaValidator({
    ...     "type": "object",
    ...     "properties": {"a": {"type": "string"}},
    ...     "required": ["a"],
    ...     "additionalProperties": False,
    ... })
    >>> validator.validate({"a": "x", "b": 1})
    {'a': 'x'}
    >>> validator.validate_list([{"a": 1}])
    [{'a': '1'}]
"""

import copy
import threading
from typing import Any, Dict, List, Optional

from referencing import Registry, Resource
from referencing.jsonschema import DRAFT7

from ..config import ValidationOptions
from .engine import check_schema, coerce_root, collect_errors, compile_validator
from .errors import ValidationError

# Name under which the item schema is registered for list validation
LIST_ITEM_SCHEMA_ID = "schema"


def list_schema(item_ref: str = LIST_ITEM_SCHEMA_ID) -> Dict[str, Any]:
    """Wrapper schema accepting a non-empty array of ``item_ref`` items."""
    return {"type": "array", "items": {"$ref": item_ref}, "minItems": 1}


class SchemaValidator:
    """
    Validate values against a schema, one at a time or as a list.

    Attributes:
        schema: The schema being validated against
        options: Normalization options (coercion, defaults, removal)
    """

    def __init__(self, schema: Dict[str, Any], options: Optional[ValidationOptions] = None):
        self.schema = schema
        self.options = options or ValidationOptions()
        self._validator = None
        self._list_validator = None
        self._list_item_schema: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def validate(self, value: Any) -> Any:
        """
        Validate ``value``, normalizing it according to the options.

        Returns:
            The normalized value. Dicts and lists are normalized in place.

        Raises:
            ValidationError: With every violation found
            SchemaBuilderError: If the schema itself is invalid (first call only)
        """
        validator = self._get_validator()
        value = coerce_root(validator, validator.schema, value, self.options)
        errors = collect_errors(validator, value)
        if errors:
            raise ValidationError(errors=errors)
        return value

    def validate_list(self, values: List[Any]) -> List[Any]:
        """
        Validate a non-empty list of values.

        Returns:
            The normalized list

        Raises:
            ValidationError: If the list is empty or any element is invalid
        """
        validator = self._get_list_validator()
        if isinstance(values, list):
            values[:] = [
                coerce_root(validator, self._list_item_schema, value, self.options)
                for value in values
            ]
        errors = collect_errors(validator, values)
        if errors:
            raise ValidationError(errors=errors)
        return values

    @property
    def is_compiled(self) -> bool:
        """True once the single-value validator has been compiled."""
        return self._validator is not None

    def _get_validator(self):
        if self._validator is None:
            with self._lock:
                if self._validator is None:
                    self._validator = compile_validator(copy.deepcopy(self.schema), self.options)
        return self._validator

    def _get_list_validator(self):
        if self._list_validator is None:
            with self._lock:
                if self._list_validator is None:
                    item_schema = copy.deepcopy(self.schema)
                    check_schema(item_schema)
                    resource = Resource.from_contents(item_schema, default_specification=DRAFT7)
                    registry = Registry().with_resource(LIST_ITEM_SCHEMA_ID, resource)
                    self._list_item_schema = item_schema
                    self._list_validator = compile_validator(
                        list_schema(), self.options, registry=registry
                    )
        return self._list_validator
