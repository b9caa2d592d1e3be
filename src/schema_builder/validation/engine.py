"""
jsonschema Draft 7 validator extended with value normalization.

The stock validator only reports errors. The class built here also
normalizes the instance while it walks it, according to ValidationOptions:

- properties / required: fill missing properties from their ``default``
  and coerce present property values to their declared ``type``
- items: coerce array elements to the declared ``type`` of their item schema
- additionalProperties: when it is ``false``, delete undeclared properties
  before checking, instead of reporting them; when it is a schema, coerce
  the undeclared values to it
- patternProperties: coerce the values of matching properties

A value whose schema has no ``type`` but oneOf / anyOf / allOf branches is
coerced toward the first branch that makes the whole schema accept it.

Dicts and lists are modified in place; a scalar at the root has no parent
to write into, so ``coerce_root`` returns its coerced copy.
"""

import copy
import logging
import re
from typing import Any, Dict, Iterator, List, Optional

from jsonschema import Draft7Validator, FormatChecker, validators
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from ..config import ValidationOptions
from ..exceptions import SchemaBuilderError
from .coercion import coerce_value, declared_types
from .errors import ValidationErrorDetail

logger = logging.getLogger(__name__)

BASE_VALIDATOR = Draft7Validator

COMBINATOR_BRANCHES = ("oneOf", "anyOf", "allOf")


def build_validator_class(options: ValidationOptions):
    """
    Create a Draft 7 validator class applying ``options`` while validating.

    Returns:
        A jsonschema validator class (see ``jsonschema.validators.extend``)
    """
    original = BASE_VALIDATOR.VALIDATORS

    def properties(validator, properties, instance, schema):
        if validator.is_type(instance, "object"):
            _normalize_properties(validator, properties, instance, options)
        yield from original["properties"](validator, properties, instance, schema)

    def required(validator, required, instance, schema):
        if options.use_defaults and validator.is_type(instance, "object"):
            _apply_defaults(schema.get("properties"), instance)
        yield from original["required"](validator, required, instance, schema)

    def items(validator, items, instance, schema):
        if options.coerce_types and validator.is_type(instance, "array"):
            _coerce_items(validator, items, instance)
        yield from original["items"](validator, items, instance, schema)

    def pattern_properties(validator, patterns, instance, schema):
        if options.coerce_types and validator.is_type(instance, "object"):
            for pattern, subschema in patterns.items():
                for name in instance:
                    if re.search(pattern, name):
                        instance[name] = coerce_to_schema(validator, instance[name], subschema)
        yield from original["patternProperties"](validator, patterns, instance, schema)

    def additional_properties(validator, additional, instance, schema):
        if validator.is_type(instance, "object"):
            if options.remove_additional and additional is False:
                for name in _undeclared_properties(instance, schema):
                    del instance[name]
            elif options.coerce_types and isinstance(additional, dict):
                for name in _undeclared_properties(instance, schema):
                    instance[name] = coerce_to_schema(validator, instance[name], additional)
        yield from original["additionalProperties"](validator, additional, instance, schema)

    return validators.extend(
        BASE_VALIDATOR,
        validators={
            "properties": properties,
            "required": required,
            "items": items,
            "patternProperties": pattern_properties,
            "additionalProperties": additional_properties,
        },
    )


def check_schema(schema: Dict[str, Any]) -> None:
    """
    Raises:
        SchemaBuilderError: If ``schema`` does not match the Draft 7 metaschema
    """
    try:
        BASE_VALIDATOR.check_schema(schema)
    except SchemaError as e:
        raise SchemaBuilderError(f"invalid schema: {e.message}")


def compile_validator(
    schema: Dict[str, Any],
    options: ValidationOptions,
    registry: Optional[Any] = None,
):
    """
    Check ``schema`` against the Draft 7 metaschema and build a validator for it.

    Args:
        schema: Schema to compile
        options: Normalization options
        registry: Optional ``referencing.Registry`` used to resolve ``$ref``

    Returns:
        Validator instance

    Raises:
        SchemaBuilderError: If the schema is not a valid JSON Schema
    """
    check_schema(schema)

    cls = build_validator_class(options)
    kwargs: Dict[str, Any] = {"format_checker": FormatChecker()}
    if registry is not None:
        kwargs["registry"] = registry
    logger.debug(f"Compiled validator (options={options.to_dict()})")
    return cls(schema, **kwargs)


def coerce_root(validator, schema: Any, value: Any, options: ValidationOptions) -> Any:
    """Coerce a root value toward ``schema`` (see ``coerce_to_schema``)."""
    if not options.coerce_types:
        return value
    return coerce_to_schema(validator, value, schema)


def coerce_to_schema(validator, value: Any, schema: Any) -> Any:
    """
    Coerce a scalar ``value`` toward ``schema``.

    Uses the schema's own ``type`` when it has one. Otherwise, if the value
    is not already accepted, tries each oneOf / anyOf / allOf branch in turn
    and keeps the first coerced value the whole schema accepts. Dicts and
    lists are returned as they are: the validator normalizes their content
    while it descends into them.

    Returns:
        The coerced value, or ``value`` itself if no coercion applies
    """
    if not isinstance(schema, dict) or isinstance(value, (dict, list)):
        return value
    types = declared_types(schema)
    if types:
        return coerce_value(value, types, validator.is_type)

    branches = [
        branch
        for keyword in COMBINATOR_BRANCHES
        for branch in schema.get(keyword) or []
        if isinstance(branch, dict)
    ]
    if not branches or _accepts(validator, schema, value):
        return value
    for branch in branches:
        candidate = coerce_to_schema(validator, value, branch)
        if candidate is not value and _accepts(validator, schema, candidate):
            return candidate
    return value


def collect_errors(validator, instance: Any) -> List[ValidationErrorDetail]:
    """Run ``validator`` on ``instance`` and convert every error to a detail entry."""
    return [_to_detail(error) for error in validator.iter_errors(instance)]


def format_path(path) -> str:
    """Format an error path like "data.items[0].name"."""
    result = "data"
    for part in path:
        if isinstance(part, int):
            result += f"[{part}]"
        else:
            result += f".{part}"
    return result


def _to_detail(error: JsonSchemaValidationError) -> ValidationErrorDetail:
    return ValidationErrorDetail(
        path=format_path(error.absolute_path),
        keyword=str(error.validator),
        message=error.message,
        value=error.instance if not isinstance(error.instance, (dict, list)) else None,
    )


def _normalize_properties(validator, properties, instance, options: ValidationOptions) -> None:
    if options.use_defaults:
        _apply_defaults(properties, instance)
    if options.coerce_types:
        for name, subschema in properties.items():
            if name in instance:
                instance[name] = coerce_to_schema(validator, instance[name], subschema)


def _accepts(validator, schema, value) -> bool:
    return validator.evolve(schema=schema).is_valid(value)


def _apply_defaults(properties, instance) -> None:
    if not isinstance(properties, dict):
        return
    for name, subschema in properties.items():
        if name not in instance and isinstance(subschema, dict) and "default" in subschema:
            instance[name] = copy.deepcopy(subschema["default"])


def _coerce_items(validator, items, instance) -> None:
    if isinstance(items, dict):
        for idx, item in enumerate(instance):
            instance[idx] = coerce_to_schema(validator, item, items)
    elif isinstance(items, list):
        # tuple validation: one schema per position
        for idx, subschema in enumerate(items[:len(instance)]):
            instance[idx] = coerce_to_schema(validator, instance[idx], subschema)


def _undeclared_properties(instance, schema) -> Iterator[str]:
    declared = schema.get("properties", {})
    patterns = "|".join(schema.get("patternProperties", {}))
    for name in list(instance):
        if name in declared:
            continue
        if patterns and re.search(patterns, name):
            continue
        yield name
