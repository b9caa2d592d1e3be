"""
Scalar type coercion applied before a value is checked against ``type``.

Supports type coercion:
- int/float/bool -> string ("1", "1.5", "true")
- numeric string -> number / integer ("12" -> 12, "1.5" -> 1.5)
- "true"/"false", 1/0 -> boolean
- "", 0, False -> null
- None -> "", 0, False for string, number/integer and boolean

Values that already satisfy one of the declared types, and values that
can't be converted, are returned unchanged; the type check reports the
latter.
"""

import math
from typing import Any, Callable, List, Sequence, Union

_MISSING = object()


def declared_types(schema: Any) -> List[str]:
    """Return the ``type`` keyword of a schema as a list (empty if absent)."""
    if not isinstance(schema, dict) or "type" not in schema:
        return []
    types = schema["type"]
    if isinstance(types, str):
        return [types]
    if isinstance(types, (list, tuple)):
        return [t for t in types if isinstance(t, str)]
    return []


def coerce_value(
    value: Any,
    types: Union[str, Sequence[str]],
    is_type: Callable[[Any, str], bool],
) -> Any:
    """
    Coerce ``value`` to the first of ``types`` it can be converted to.

    Args:
        value: Value to coerce
        types: Declared JSON Schema type(s)
        is_type: Type checker of the validator (``validator.is_type``)

    Returns:
        The coerced value, or ``value`` itself if no coercion applies
    """
    if isinstance(types, str):
        types = [types]
    if not types or any(is_type(value, t) for t in types):
        return value

    for target in types:
        converter = _CONVERTERS.get(target)
        if converter is None:
            continue
        result = converter(value)
        if result is not _MISSING:
            return result
    return value


def _to_string(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return _MISSING


def _to_number(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _MISSING
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return _MISSING
        return number if math.isfinite(number) else _MISSING
    return _MISSING


def _to_integer(value: Any) -> Any:
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else _MISSING
    number = _to_number(value)
    if isinstance(number, float):
        return int(number) if number.is_integer() else _MISSING
    return number


def _to_boolean(value: Any) -> Any:
    if value is None:
        return False
    if isinstance(value, str):
        if value == "true":
            return True
        if value == "false":
            return False
        return _MISSING
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value == 1:
            return True
        if value == 0:
            return False
    return _MISSING


def _to_null(value: Any) -> Any:
    if value == "" or value is False:
        return None
    if isinstance(value, (int, float)) and value == 0:
        return None
    return _MISSING


_CONVERTERS = {
    "string": _to_string,
    "number": _to_number,
    "integer": _to_integer,
    "boolean": _to_boolean,
    "null": _to_null,
}
