"""Parsing of user answers into primitive field values."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .errors import CoercionError

if TYPE_CHECKING:
    from .schema import FieldKind, SchemaField

TRUE_TOKENS: frozenset[str] = frozenset({"true", "yes", "y", "1"})
FALSE_TOKENS: frozenset[str] = frozenset({"false", "no", "n", "0"})

Primitive = str | int | float | bool


def parse_bool(raw: str) -> bool | None:
    """Map a boolean-like token to a bool, or None when it is not one."""

    token = raw.strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    return None


def coerce_text(field: str, raw: str, kind: FieldKind) -> Primitive:
    """Parse a line of user input as `kind`.

    Text is returned verbatim (without the trailing newline).
    """

    from .schema import FieldKind

    if kind is FieldKind.TEXT:
        return raw
    token = raw.strip()
    if kind is FieldKind.BOOLEAN:
        parsed = parse_bool(token)
        if parsed is None:
            raise CoercionError(field, kind.value, raw)
        return parsed
    if kind is FieldKind.INTEGER:
        try:
            return int(token)
        except ValueError:
            raise CoercionError(field, kind.value, raw) from None
    try:
        number = float(token)
    except ValueError:
        raise CoercionError(field, kind.value, raw) from None
    if not math.isfinite(number):
        raise CoercionError(field, kind.value, raw)
    return number


def coerce_value(field: SchemaField, value: object) -> Primitive:
    """Validate an already-structured value (e.g. from JSON) against `field`.

    Strings go through the same parser as console input. Booleans are never
    accepted as numbers, decimals with a fractional part are never
    truncated into integers, and NaN or infinity is never a decimal.
    """

    from .schema import FieldKind

    kind = field.kind
    if isinstance(value, str):
        return coerce_text(field.name, value, kind)

    if kind is FieldKind.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
    elif kind is FieldKind.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif kind is FieldKind.DECIMAL:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                number = float(value)
            except OverflowError:
                raise CoercionError(field.name, kind.value, value) from None
            if math.isfinite(number):
                return number
    elif kind is FieldKind.TEXT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)

    raise CoercionError(field.name, kind.value, value)
