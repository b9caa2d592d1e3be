"""
Validation options for SchemaBuilder.

Controls how compiled validators normalize the values they check:

- coerce_types: convert scalars to the declared type ("12" -> 12)
- remove_additional: drop properties forbidden by ``additionalProperties: false``
- use_defaults: fill missing properties from their ``default``

Options are resolved with this precedence (highest to lowest):
1. Explicit overrides (``SchemaBuilder(..., options=...)``)
2. Environment variables
3. Settings dict (e.g. a section of a YAML file)
4. Defaults (all enabled)

Environment Variables:
    SCHEMA_BUILDER_COERCE_TYPES: "true"/"false" (default: true)
    SCHEMA_BUILDER_REMOVE_ADDITIONAL: "true"/"false" (default: true)
    SCHEMA_BUILDER_USE_DEFAULTS: "true"/"false" (default: true)

Example:
    >>> from schema_builder.config import resolve_validation_options
    >>> options = resolve_validation_options({"coerce_types": False})
    >>> options.coerce_types
    False
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

ENV_MAPPING = {
    "SCHEMA_BUILDER_COERCE_TYPES": "coerce_types",
    "SCHEMA_BUILDER_REMOVE_ADDITIONAL": "remove_additional",
    "SCHEMA_BUILDER_USE_DEFAULTS": "use_defaults",
}

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ValidationOptions:
    """Normalization flags passed to the validation engine."""

    coerce_types: bool = True
    remove_additional: bool = True
    use_defaults: bool = True

    def to_dict(self) -> Dict[str, bool]:
        """Convert to dictionary representation."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUTHY:
        return True
    if text in FALSY:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")


def resolve_validation_options(
    overrides: Optional[Union[ValidationOptions, Dict[str, Any]]] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> ValidationOptions:
    """
    Resolve validation options with proper precedence hierarchy.

    Args:
        overrides: ValidationOptions instance or dict of explicit values.
            A ValidationOptions instance is returned unchanged.
        settings: Optional settings section (lowest priority after defaults)

    Returns:
        Resolved ValidationOptions

    Raises:
        ValueError: If a key is unknown or a value is not a boolean
    """
    if isinstance(overrides, ValidationOptions):
        return overrides

    known = {f.name for f in fields(ValidationOptions)}
    options = ValidationOptions()

    # Apply settings (lowest priority after defaults)
    if settings and isinstance(settings, dict):
        for key, value in settings.items():
            if key in known and value is not None:
                options = replace(options, **{key: _parse_bool(key, value)})

    # Apply environment variables (higher priority)
    for env_var, key in ENV_MAPPING.items():
        env_value = os.getenv(env_var)
        if env_value:
            options = replace(options, **{key: _parse_bool(env_var, env_value)})

    # Apply explicit overrides (highest priority)
    for key, value in (overrides or {}).items():
        if key not in known:
            raise ValueError(
                f"Unknown validation option '{key}'. Must be one of: {', '.join(sorted(known))}"
            )
        if value is not None:
            options = replace(options, **{key: _parse_bool(key, value)})

    logger.debug(f"Validation options resolved: {options.to_dict()}")
    return options
