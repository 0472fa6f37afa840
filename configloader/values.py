# configloader/values.py
"""
configloader.values
-------------------

Scalar value kinds and the coercion applied when a mock value is assigned
to a structure field.

Mock and override maps hold heterogeneous values. Each value is classified
into a ``ValueKind`` and compared with the kind the target field declares.
Only one implicit conversion exists: an integer assigned to a ``float``
field is widened. Everything else must match exactly; ``bool`` is never
treated as an integer even though Python makes it a subclass of ``int``.
"""

import json
import types
import logging
from enum import Enum
from typing import Any, Optional, Union, get_args, get_origin

from .exceptions import TypeMismatchError

log = logging.getLogger(__name__)


class ValueKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


# bool must come before int: isinstance(True, int) is True
_PYTHON_KINDS = (
    (bool, ValueKind.BOOLEAN),
    (int, ValueKind.INTEGER),
    (float, ValueKind.FLOAT),
    (str, ValueKind.STRING),
)


def kind_of(value: Any) -> Optional[ValueKind]:
    """Return the ValueKind of a runtime value, or None for non-scalars."""
    for py_type, kind in _PYTHON_KINDS:
        if isinstance(value, py_type):
            return kind
    return None


def _unwrap_optional(annotation: Any):
    """
    Strip ``None`` out of ``Optional[X]`` / ``X | None``.

    Returns a tuple ``(inner_annotation, is_optional)``. Unions of more than
    one non-None member are returned unchanged.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        is_optional = len(members) != len(get_args(annotation))
        if len(members) == 1:
            return members[0], is_optional
        return annotation, is_optional
    return annotation, False


def kind_for_annotation(annotation: Any) -> Optional[ValueKind]:
    """Return the ValueKind a field annotation declares, or None if it is not a scalar."""
    inner, _ = _unwrap_optional(annotation)
    for py_type, kind in _PYTHON_KINDS:
        if inner is py_type:
            return kind
    return None


def describe_annotation(annotation: Any) -> str:
    """Human-readable name of a field annotation, used in error messages."""
    kind = kind_for_annotation(annotation)
    if kind is not None:
        return kind.value
    return getattr(annotation, "__name__", None) or str(annotation)


def describe_value(value: Any) -> str:
    """Human-readable kind of a runtime value, used in error messages."""
    kind = kind_of(value)
    return kind.value if kind is not None else type(value).__name__


def parse_value(raw_value: Any) -> Any:
    """
    Attempts to parse a string value into a Python scalar (bool, int, float, None).

    Handles common string representations like 'true', 'false', 'null' and numbers.
    A double-quoted string is JSON-decoded so that '"42"' stays the string '42'.
    Falls back to the original string if no specific parsing rule applies.

    Args:
        raw_value: The value to parse. If not a string, it's returned directly.

    Returns:
        The parsed value or the original value.
    """
    if not isinstance(raw_value, str):
        return raw_value

    stripped_val = raw_value.strip()
    lower_val = stripped_val.lower()
    if lower_val == 'true':
        return True
    if lower_val == 'false':
        return False
    if lower_val == 'null':
        return None

    try:
        return int(stripped_val)
    except ValueError:
        try:
            return float(stripped_val)
        except ValueError:
            pass

    if len(stripped_val) > 1 and stripped_val.startswith('"') and stripped_val.endswith('"'):
        try:
            return json.loads(stripped_val)
        except json.JSONDecodeError:
            pass

    return raw_value


def coerce_value(value: Any, annotation: Any, path: str, parse_strings: bool = False) -> Any:
    """
    Coerce ``value`` to the kind declared by a field ``annotation``.

    Args:
        value: The mock or override value.
        annotation: The resolved type hint of the target field.
        path: Dotted path the value was registered under (for error messages).
        parse_strings: If True, a string destined for a non-string scalar field
                       is first run through ``parse_value``.

    Returns:
        The value to store in the field.

    Raises:
        TypeMismatchError: If the value's kind is incompatible with the field.
    """
    if annotation is None or annotation is Any:
        return value

    inner, is_optional = _unwrap_optional(annotation)
    if value is None and is_optional:
        return None

    expected = kind_for_annotation(inner)
    if expected is None:
        # Non-scalar field (e.g. a nested structure): accept a ready-made instance only
        target_type = get_origin(inner) or inner
        if isinstance(target_type, type) and isinstance(value, target_type):
            return value
        raise TypeMismatchError(path, describe_annotation(inner), describe_value(value))

    actual = kind_of(value)
    if parse_strings and actual is ValueKind.STRING and expected is not ValueKind.STRING:
        parsed = parse_value(value)
        log.debug(f"DEBUG [configloader.coerce_value]: Parsed string {value!r} for '{path}' -> {parsed!r}")
        if parsed is None and is_optional:
            return None
        value, actual = parsed, kind_of(parsed)

    if actual is expected:
        return value
    if actual is ValueKind.INTEGER and expected is ValueKind.FLOAT:
        return float(value)

    raise TypeMismatchError(path, expected.value, describe_value(value))
