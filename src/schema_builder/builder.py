"""
SchemaBuilder: build and transform JSON Schemas, then validate values with them.

A SchemaBuilder owns one JSON Schema document (a plain dict) and edits it in
place. Every edit checks the shape of the schema first and raises
SchemaBuilderError without touching anything if the edit does not apply.
Edits return the builder itself, so calls chain:

    >>> from schema_builder import SchemaBuilder
    >>> user = (
    ...     SchemaBuilder.object_schema({"title": "User"})
    ...     .add_string("id")
    ...     .add_string("name", {"minLength": 1})
    ...     .add_optional_integer("age", {"minimum": 0})
    ... )
    >>> user.validate({"id": "u1", "name": "Ann", "age": "42"})
    {'id': 'u1', 'name': 'Ann', 'age': 42}

Branch a schema with ``clone`` before editing it if the original must stay
as it is:

    >>> patch = user.clone().to_optionals().omit_properties(["id"])

Static shape: ``SchemaBuilder`` is generic in the Python type of the values
it validates, and the factories carry a precise type
(``string_schema() -> SchemaBuilder[str]``). Property-level edits return
``SchemaBuilder[Any]``: Python type hints can't express "T with property K
added/removed/made optional", so a type checker can't catch, for example,
reading a property that was never added. Nothing replaces this check at
runtime.
"""

import copy
import json
import logging
import threading
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar, Union

from .config import ValidationOptions, resolve_validation_options
from .exceptions import SchemaBuilderError, SchemaReferenceError
from .schema import classifier
from .schema.dereference import dereference
from .schema.keywords import (
    ARRAY_KEYWORDS,
    BOOLEAN_KEYWORDS,
    ENUM_KEYWORDS,
    NUMBER_KEYWORDS,
    OBJECT_KEYWORDS,
    STRING_KEYWORDS,
    check_metadata,
)
from .schema.walker import iter_schema_nodes, walk_schema
from .validation.validators import SchemaValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Metadata = Optional[Dict[str, Any]]

SIMPLE_OBJECT_REQUIRED = "can only be used with a simple object schema (no additionalProperties, oneOf, anyOf, allOf or not)"


class SchemaBuilder(Generic[T]):
    """
    A JSON Schema and the operations that transform it.

    Attributes:
        schema: The JSON Schema document (owned by this builder)
        options: Validation options used by validate/validate_list
    """

    def __init__(
        self,
        schema: Dict[str, Any],
        options: Optional[Union[ValidationOptions, Dict[str, Any]]] = None,
    ):
        """
        Wrap an existing schema document.

        The document must not contain ``$ref``; use
        ``SchemaBuilder.dereferenced_schema`` for documents that do.

        Args:
            schema: JSON Schema document. Owned by the builder from now on.
            options: Validation options (see ``config.resolve_validation_options``)

        Raises:
            SchemaReferenceError: If ``$ref`` appears anywhere in the schema
            SchemaBuilderError: If ``schema`` is not a dict
        """
        if not isinstance(schema, dict):
            raise SchemaBuilderError(
                f"a schema must be a dict, got {type(schema).__name__}"
            )
        for pointer, node in iter_schema_nodes(schema):
            if "$ref" in node:
                raise SchemaReferenceError(pointer, node["$ref"])

        self._schema = schema
        self.options = resolve_validation_options(options)
        self._validator: Optional[SchemaValidator] = None
        self._lock = threading.Lock()

    @property
    def schema(self) -> Dict[str, Any]:
        """The JSON Schema document."""
        return self._schema

    @classmethod
    async def dereferenced_schema(
        cls,
        schema: Union[Dict[str, Any], str],
        options: Optional[Union[ValidationOptions, Dict[str, Any]]] = None,
        base_uri: Optional[str] = None,
    ) -> "SchemaBuilder[Any]":
        """
        Build a SchemaBuilder from a schema whose references are inlined first.

        Args:
            schema: Schema document, or the path / fsspec URI of one
            options: Validation options
            base_uri: Location used to resolve relative references of an
                in-memory document

        Example:
            >>> builder = await SchemaBuilder.dereferenced_schema("schemas/user.json")
        """
        inlined = await dereference(schema, base_uri=base_uri)
        return cls(inlined, options=options)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def object_schema(cls, metadata: Metadata = None) -> "SchemaBuilder[Dict[str, Any]]":
        """Create an empty object schema that accepts no additional properties."""
        schema = check_metadata(metadata, OBJECT_KEYWORDS, "object_schema")
        schema["type"] = "object"
        schema["additionalProperties"] = False
        return cls(schema)

    empty_schema = object_schema

    @classmethod
    def string_schema(cls, metadata: Metadata = None) -> "SchemaBuilder[str]":
        """Create a simple string schema."""
        schema = check_metadata(metadata, STRING_KEYWORDS, "string_schema")
        schema["type"] = "string"
        return cls(schema)

    @classmethod
    def number_schema(cls, metadata: Metadata = None) -> "SchemaBuilder[float]":
        """Create a simple number schema."""
        schema = check_metadata(metadata, NUMBER_KEYWORDS, "number_schema")
        schema["type"] = "number"
        return cls(schema)

    @classmethod
    def integer_schema(cls, metadata: Metadata = None) -> "SchemaBuilder[int]":
        """Create a simple integer schema."""
        schema = check_metadata(metadata, NUMBER_KEYWORDS, "integer_schema")
        schema["type"] = "integer"
        return cls(schema)

    @classmethod
    def boolean_schema(cls, metadata: Metadata = None) -> "SchemaBuilder[bool]":
        """Create a simple boolean schema."""
        schema = check_metadata(metadata, BOOLEAN_KEYWORDS, "boolean_schema")
        schema["type"] = "boolean"
        return cls(schema)

    @classmethod
    def enum_schema(cls, values: Sequence[str], metadata: Metadata = None) -> "SchemaBuilder[str]":
        """Create a string schema restricted to ``values``."""
        if isinstance(values, str) or not isinstance(values, Sequence):
            raise SchemaBuilderError("'enum_schema' expects a list of values")
        schema = check_metadata(metadata, ENUM_KEYWORDS, "enum_schema")
        schema["type"] = "string"
        schema["enum"] = list(values)
        return cls(schema)

    @classmethod
    def array_schema(cls, items: "SchemaBuilder[U]", metadata: Metadata = None) -> "SchemaBuilder[List[U]]":
        """Create an array schema whose items match ``items``."""
        schema = check_metadata(metadata, ARRAY_KEYWORDS, "array_schema")
        schema["type"] = "array"
        schema["items"] = _node_of(items, "array_schema")
        return cls(schema)

    @classmethod
    def one_of(cls, first: "SchemaBuilder[Any]", second: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Schema matching exactly one of ``first`` and ``second`` (JSON Schema ``oneOf``)."""
        return cls({"oneOf": [_node_of(first, "one_of"), _node_of(second, "one_of")]})

    @classmethod
    def all_of(cls, first: "SchemaBuilder[Any]", second: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Schema matching both ``first`` and ``second`` (JSON Schema ``allOf``)."""
        return cls({"allOf": [_node_of(first, "all_of"), _node_of(second, "all_of")]})

    @classmethod
    def any_of(cls, first: "SchemaBuilder[Any]", second: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Schema matching ``first``, ``second`` or both (JSON Schema ``anyOf``)."""
        return cls({"anyOf": [_node_of(first, "any_of"), _node_of(second, "any_of")]})

    @classmethod
    def not_(cls, schema: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Schema matching anything ``schema`` does not match (JSON Schema ``not``)."""
        return cls({"not": _node_of(schema, "not_")})

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def is_object_schema(self) -> bool:
        """True if the schema represents an object."""
        return classifier.is_object_schema(self._schema)

    @property
    def has_additional_properties(self) -> bool:
        """True if the schema represents an object that can have additional properties."""
        return classifier.has_additional_properties(self._schema)

    @property
    def has_combinators(self) -> bool:
        """True if the schema contains oneOf, allOf, anyOf or not."""
        return classifier.has_combinators(self._schema)

    @property
    def is_simple_object_schema(self) -> bool:
        """True if additionalProperties is false and oneOf, allOf, anyOf and not are not used."""
        return classifier.is_simple_object_schema(self._schema)

    # ------------------------------------------------------------------
    # Required / optional
    # ------------------------------------------------------------------

    def set_optional_properties(self, names: Iterable[str]) -> "SchemaBuilder[Any]":
        """Make the given properties optional and every other property required."""
        self._require_simple_object("set_optional_properties")
        optional = set(names)
        self._set_required([name for name in self._properties() if name not in optional])
        return self

    def set_required_properties(self, names: Iterable[str]) -> "SchemaBuilder[Any]":
        """
        Make the given properties required.

        Raises:
            SchemaBuilderError: If a name is not a property of the schema
        """
        self._require_simple_object("set_required_properties")
        names = list(names)
        self._require_existing(names, "set_required_properties")
        required = self._required()
        for name in names:
            if name not in required:
                required.append(name)
        self._set_required(required)
        return self

    def to_optionals(self) -> "SchemaBuilder[Any]":
        """Make all properties optional."""
        self._schema.pop("required", None)
        return self

    def to_deep_optionals(self) -> "SchemaBuilder[Any]":
        """Make all properties and sub-properties optional, at every level."""
        walk_schema(self._schema, lambda node: node.pop("required", None))
        return self

    # ------------------------------------------------------------------
    # Adding properties
    # ------------------------------------------------------------------

    def add_property(self, name: str, schema: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """
        Add a required property using the given schema builder.

        Raises:
            SchemaBuilderError: If this is not an object schema or ``name`` exists
        """
        self._insert_property(name, schema)
        required = self._required()
        required.append(name)
        self._set_required(required)
        return self

    def add_optional_property(self, name: str, schema: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Add an optional property using the given schema builder."""
        self._insert_property(name, schema)
        return self

    def add_additional_properties(self, schema: "Optional[SchemaBuilder[Any]]" = None) -> "SchemaBuilder[Any]":
        """
        Accept additional properties, matching ``schema`` if given, anything otherwise.

        Many operations (rename, omit, merge, ...) require a schema without
        additional properties: add them as the last step of a definition.

        Raises:
            SchemaBuilderError: If additional properties are already enabled
        """
        if not self.is_object_schema:
            raise SchemaBuilderError("additionalProperties can only be added to an object schema")
        current = self._schema.get("additionalProperties")
        if current is True or isinstance(current, dict):
            raise SchemaBuilderError(
                f"additionalProperties is already set in {self._name} schema."
            )
        self._schema["additionalProperties"] = (
            _node_of(schema, "add_additional_properties") if schema is not None else True
        )
        return self

    def add_object(self, name: str, schema: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Add an object property."""
        return self.add_property(name, schema)

    def add_optional_object(self, name: str, schema: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """Add an optional object property."""
        return self.add_optional_property(name, schema)

    def add_string(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add a string property."""
        return self.add_property(name, SchemaBuilder.string_schema(metadata))

    def add_optional_string(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional string property."""
        return self.add_optional_property(name, SchemaBuilder.string_schema(metadata))

    def add_enum(self, name: str, values: Sequence[str], metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add a string property restricted to ``values``."""
        return self.add_property(name, SchemaBuilder.enum_schema(values, metadata))

    def add_optional_enum(self, name: str, values: Sequence[str], metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional string property restricted to ``values``."""
        return self.add_optional_property(name, SchemaBuilder.enum_schema(values, metadata))

    def add_number(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add a number property."""
        return self.add_property(name, SchemaBuilder.number_schema(metadata))

    def add_optional_number(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional number property."""
        return self.add_optional_property(name, SchemaBuilder.number_schema(metadata))

    def add_integer(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an integer property."""
        return self.add_property(name, SchemaBuilder.integer_schema(metadata))

    def add_optional_integer(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional integer property."""
        return self.add_optional_property(name, SchemaBuilder.integer_schema(metadata))

    def add_boolean(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add a boolean property."""
        return self.add_property(name, SchemaBuilder.boolean_schema(metadata))

    def add_optional_boolean(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional boolean property."""
        return self.add_optional_property(name, SchemaBuilder.boolean_schema(metadata))

    def add_array(self, name: str, items: "SchemaBuilder[Any]", metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an array property whose items match ``items``."""
        return self.add_property(name, SchemaBuilder.array_schema(items, metadata))

    def add_optional_array(self, name: str, items: "SchemaBuilder[Any]", metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional array property whose items match ``items``."""
        return self.add_optional_property(name, SchemaBuilder.array_schema(items, metadata))

    def add_string_array(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an array-of-strings property."""
        return self.add_property(name, SchemaBuilder.array_schema(SchemaBuilder.string_schema(), metadata))

    def add_optional_string_array(self, name: str, metadata: Metadata = None) -> "SchemaBuilder[Any]":
        """Add an optional array-of-strings property."""
        return self.add_optional_property(name, SchemaBuilder.array_schema(SchemaBuilder.string_schema(), metadata))

    # ------------------------------------------------------------------
    # Renaming, picking, omitting
    # ------------------------------------------------------------------

    def rename_property(self, name: str, new_name: str) -> "SchemaBuilder[Any]":
        """
        Rename the given property. The property schema is unchanged and the
        new property is required. Renaming an absent property does nothing.

        Raises:
            SchemaBuilderError: If ``new_name`` already exists
        """
        return self._rename("rename_property", name, new_name, required=True)

    def rename_optional_property(self, name: str, new_name: str) -> "SchemaBuilder[Any]":
        """Rename the given property. The new property is optional."""
        return self._rename("rename_optional_property", name, new_name, required=False)

    def pick_properties(self, names: Sequence[str]) -> "SchemaBuilder[Any]":
        """
        Keep only the given properties, in the given order.

        additionalProperties is left as it is.

        Raises:
            SchemaBuilderError: If a name is not a property of the schema
        """
        if not self.is_object_schema or self.has_combinators:
            raise SchemaBuilderError(
                "'pick_properties' can only be used with a simple object schema (no oneOf, anyOf, allOf or not)"
            )
        names = list(names)
        properties = self._properties()
        for name in names:
            if name not in properties:
                raise SchemaBuilderError(
                    f"picked property {name} is not available in {self._name} schema."
                )
        self._schema["properties"] = {name: properties[name] for name in names}
        if "required" in self._schema:
            self._set_required([name for name in self._required() if name in names])
        return self

    def pick_additional_properties(
        self,
        names: Sequence[str],
        additional: Optional[Sequence[str]] = None,
    ) -> "SchemaBuilder[Any]":
        """
        Keep only the given properties, and all, none or some additional properties.

        Args:
            names: Declared properties to keep
            additional: ``None`` drops additional properties
                (additionalProperties becomes false). ``[]`` keeps them as
                they were (or accepts any if additionalProperties was unset).
                A list of names turns each name into a required property
                typed like the additional properties.

        Raises:
            SchemaBuilderError: If the schema has no additional properties,
                uses combinators, or a name is unknown or collides
        """
        if not self.is_object_schema or not self.has_additional_properties or self.has_combinators:
            raise SchemaBuilderError(
                "'pick_additional_properties' can only be used with a simple object schema "
                "with additionalProperties (no oneOf, anyOf, allOf or not)"
            )
        names = list(names)
        if additional is not None:
            additional = list(additional)
            clashes = [name for name in additional if name in names]
            if clashes:
                raise SchemaBuilderError(
                    f"'{', '.join(clashes)}' can't be both a picked and an additional property"
                )
            if len(set(additional)) != len(additional):
                raise SchemaBuilderError("additional property names must be unique")
        prior = self._schema.get("additionalProperties")

        self.pick_properties(names)
        if additional is None:
            self._schema["additionalProperties"] = False
        elif not additional:
            self._schema["additionalProperties"] = prior if prior is not None else True
        else:
            for name in additional:
                item = copy.deepcopy(prior) if isinstance(prior, dict) else {}
                self.add_property(name, SchemaBuilder(item))
        return self

    def omit_properties(self, names: Iterable[str]) -> "SchemaBuilder[Any]":
        """Keep every property except the given ones."""
        self._require_simple_object("omit_properties")
        omitted = set(names)
        return self.pick_properties([name for name in self._properties() if name not in omitted])

    # ------------------------------------------------------------------
    # Transforming
    # ------------------------------------------------------------------

    def transform_properties(self, schema: "SchemaBuilder[Any]", names: Sequence[str]) -> "SchemaBuilder[Any]":
        """
        Let the given properties alternatively match ``schema``.

        Each property schema ``S`` becomes ``{"oneOf": [S, schema]}``.

        Raises:
            SchemaBuilderError: If a name is not a property of the schema
        """
        self._require_simple_object("transform_properties")
        names = list(names)
        self._require_existing(names, "transform_properties")
        alternative = _node_of(schema, "transform_properties")
        properties = self._properties()
        for name in names:
            properties[name] = {"oneOf": [properties[name], copy.deepcopy(alternative)]}
        return self

    def transform_properties_to_array(self, names: Optional[Sequence[str]] = None) -> "SchemaBuilder[Any]":
        """
        Let the given properties (all by default) alternatively be an array
        of their original type.

        Each property schema ``S`` becomes
        ``{"oneOf": [S, {"type": "array", "items": S}]}``.
        """
        self._require_simple_object("transform_properties_to_array")
        properties = self._properties()
        names = list(properties) if names is None else list(names)
        self._require_existing(names, "transform_properties_to_array")
        for name in names:
            original = properties[name]
            properties[name] = {
                "oneOf": [original, {"type": "array", "items": copy.deepcopy(original)}]
            }
        return self

    def merge_properties(self, other: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """
        Merge all properties of ``other`` into this schema.

        A property of both schemas becomes ``{"oneOf": [mine, theirs]}`` and
        is required. Only properties are copied.
        """
        self._require_simple_object("merge_properties")
        other_properties = copy.deepcopy(_properties_of(other))
        other_required = _required_of(other)
        properties = self._schema.setdefault("properties", {})
        required = self._required()
        for name, subschema in other_properties.items():
            if name not in properties:
                properties[name] = subschema
                if name in other_required:
                    required.append(name)
            else:
                properties[name] = {"oneOf": [properties[name], subschema]}
                if name not in required:
                    required.append(name)
        self._set_required(required)
        return self

    def overwrite_properties(self, other: "SchemaBuilder[Any]") -> "SchemaBuilder[Any]":
        """
        Copy all properties of ``other`` into this schema, replacing the ones
        that already exist. Required-ness follows ``other``.
        """
        self._require_simple_object("overwrite_properties")
        other_properties = copy.deepcopy(_properties_of(other))
        other_required = _required_of(other)
        properties = self._schema.setdefault("properties", {})
        required = self._required()
        for name, subschema in other_properties.items():
            properties[name] = subschema
            if name in other_required:
                if name not in required:
                    required.append(name)
            elif name in required:
                required.remove(name)
        self._set_required(required)
        return self

    # ------------------------------------------------------------------
    # Cloning, serialization, validation
    # ------------------------------------------------------------------

    def clone(self, metadata: Metadata = None) -> "SchemaBuilder[T]":
        """
        Deeply clone this schema. The clone can be modified safely.

        Args:
            metadata: Top-level keywords (title, description, ...) set on the clone
        """
        overlay = check_metadata(metadata, OBJECT_KEYWORDS, "clone")
        schema = copy.deepcopy(self._schema)
        schema.update(overlay)
        return type(self)(schema, options=self.options)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the schema as a JSON document."""
        return json.dumps(self._schema, indent=indent)

    def validate(self, value: Any) -> Any:
        """
        Validate ``value`` against the schema.

        The validator is compiled on the first call and reused afterwards,
        even if the schema is edited in between. Depending on the options,
        values are coerced, missing defaults filled in and forbidden
        additional properties removed.

        Returns:
            The normalized value

        Raises:
            ValidationError: If the value is invalid, with every violation
        """
        return self._get_validator().validate(value)

    def validate_list(self, values: List[Any]) -> List[Any]:
        """
        Validate a non-empty list of values against the schema.

        Raises:
            ValidationError: If the list is empty or any value is invalid
        """
        return self._get_validator().validate_list(values)

    def _get_validator(self) -> SchemaValidator:
        if self._validator is None:
            with self._lock:
                if self._validator is None:
                    self._validator = SchemaValidator(self._schema, self.options)
        return self._validator

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _name(self) -> str:
        return self._schema.get("title") or "this"

    def _require_simple_object(self, operation: str) -> None:
        if not self.is_simple_object_schema:
            raise SchemaBuilderError(f"'{operation}' {SIMPLE_OBJECT_REQUIRED}")

    def _require_existing(self, names: Iterable[str], operation: str) -> None:
        properties = self._schema.get("properties") or {}
        for name in names:
            if name not in properties:
                raise SchemaBuilderError(
                    f"'{operation}': property {name} is not available in {self._name} schema."
                )

    def _properties(self) -> Dict[str, Any]:
        return self._schema.get("properties") or {}

    def _required(self) -> List[str]:
        return list(self._schema.get("required") or [])

    def _set_required(self, names: List[str]) -> None:
        if names:
            self._schema["required"] = names
        else:
            self._schema.pop("required", None)

    def _insert_property(self, name: str, schema: "SchemaBuilder[Any]") -> None:
        if not self.is_object_schema:
            raise SchemaBuilderError("you can only add properties to an object schema")
        if name in (self._schema.get("properties") or {}):
            raise SchemaBuilderError(f"'{name}' already exists in {self._name} schema")
        node = _node_of(schema, "add_property")
        self._schema.setdefault("properties", {})[name] = node

    def _rename(self, operation: str, name: str, new_name: str, required: bool) -> "SchemaBuilder[Any]":
        self._require_simple_object(operation)
        properties = self._properties()
        if new_name in properties:
            raise SchemaBuilderError(f"'{new_name}' already exists in {self._name} schema")
        if name not in properties:
            return self
        self._schema["properties"] = {
            (new_name if key == name else key): value for key, value in properties.items()
        }
        names = [n for n in self._required() if n != name]
        if required:
            names.append(new_name)
        self._set_required(names)
        return self

    def __repr__(self) -> str:
        return f"SchemaBuilder({self._schema!r})"


def _node_of(builder: Any, operation: str) -> Dict[str, Any]:
    if not isinstance(builder, SchemaBuilder):
        raise SchemaBuilderError(
            f"'{operation}' expects a SchemaBuilder, got {type(builder).__name__}"
        )
    return builder.schema


def _properties_of(builder: Any) -> Dict[str, Any]:
    return _node_of(builder, "merge").get("properties") or {}


def _required_of(builder: Any) -> List[str]:
    return list(_node_of(builder, "merge").get("required") or [])
