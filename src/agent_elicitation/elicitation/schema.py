"""Elicitation schemas: flat sets of primitive fields.

A schema is what a tool declares when it asks the user for input. Only four
field kinds exist (text, integer, decimal, boolean). Anything else is refused
when the schema is built, so tool authors find out at the call site and not
halfway through a conversation with a user.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ValidationError

from .coercion import Primitive, coerce_value
from .errors import CoercionError, ElicitationDataError, SchemaValidationError


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"

    @property
    def json_type(self) -> str:
        return _JSON_TYPES[self]


_JSON_TYPES: dict[FieldKind, str] = {
    FieldKind.TEXT: "string",
    FieldKind.INTEGER: "integer",
    FieldKind.DECIMAL: "number",
    FieldKind.BOOLEAN: "boolean",
}

_KIND_ALIASES: dict[str, FieldKind] = {
    "text": FieldKind.TEXT,
    "str": FieldKind.TEXT,
    "string": FieldKind.TEXT,
    "integer": FieldKind.INTEGER,
    "int": FieldKind.INTEGER,
    "decimal": FieldKind.DECIMAL,
    "float": FieldKind.DECIMAL,
    "number": FieldKind.DECIMAL,
    "boolean": FieldKind.BOOLEAN,
    "bool": FieldKind.BOOLEAN,
}

# bool must come before int: bool is a subclass of int.
_PY_TYPES: tuple[tuple[type, FieldKind], ...] = (
    (bool, FieldKind.BOOLEAN),
    (int, FieldKind.INTEGER),
    (float, FieldKind.DECIMAL),
    (str, FieldKind.TEXT),
)


def resolve_kind(spec: object, *, field_name: str = "?") -> FieldKind:
    """Resolve a kind name, a Python type or a FieldKind into a FieldKind."""

    if isinstance(spec, FieldKind):
        return spec
    if isinstance(spec, str):
        kind = _KIND_ALIASES.get(spec.strip().lower())
        if kind is not None:
            return kind
        raise SchemaValidationError(
            f"Field '{field_name}' has unsupported type '{spec}'; "
            "only text, integer, decimal and boolean are allowed"
        )
    if isinstance(spec, type):
        for py_type, kind in _PY_TYPES:
            if spec is py_type:
                return kind
    raise SchemaValidationError(
        f"Field '{field_name}' has unsupported type {spec!r}; "
        "only text, integer, decimal and boolean are allowed"
    )


@dataclass(frozen=True, slots=True)
class SchemaField:
    """One named primitive field.

    A field with a default is never required. `kind` may be passed as any
    spelling accepted by :func:`resolve_kind`; it is normalised on creation.
    """

    name: str
    kind: FieldKind
    description: str | None = None
    default: Primitive | None = None
    required: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise SchemaValidationError("Field names must be non-empty strings")
        object.__setattr__(self, "kind", resolve_kind(self.kind, field_name=self.name))
        if self.default is not None:
            try:
                default = coerce_value(self, self.default)
            except CoercionError as e:
                raise SchemaValidationError(
                    f"Default for field '{self.name}' is not a valid {self.kind.value}: "
                    f"{self.default!r}"
                ) from e
            object.__setattr__(self, "default", default)
            object.__setattr__(self, "required", False)

    def to_json_schema(self) -> dict[str, object]:
        out: dict[str, object] = {"type": self.kind.json_type}
        if self.description:
            out["description"] = self.description
        if self.default is not None:
            out["default"] = self.default
        return out


SchemaLike = Union["ElicitationSchema", Mapping[str, Any], type[BaseModel]]


@dataclass(frozen=True, slots=True)
class ElicitationSchema:
    fields: tuple[SchemaField, ...]
    model: type[BaseModel] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for f in self.fields:
            if not isinstance(f, SchemaField):
                raise SchemaValidationError(f"Not a schema field: {f!r}")
            if f.name in seen:
                raise SchemaValidationError(f"Duplicate field name: {f.name}")
            seen.add(f.name)

    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> SchemaField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    # -- constructors -------------------------------------------------------

    @classmethod
    def of(cls, schema: SchemaLike) -> ElicitationSchema:
        """Normalise anything a tool may pass as a schema."""

        if isinstance(schema, ElicitationSchema):
            return schema
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            return cls.from_model(schema)
        if isinstance(schema, Mapping):
            return cls.from_mapping(schema)
        raise SchemaValidationError(
            f"Cannot build an elicitation schema from {type(schema).__name__}"
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ElicitationSchema:
        """Build a schema from ``{name: kind}`` entries.

        Each value may be a kind (``"boolean"``, ``bool``, ``FieldKind.BOOLEAN``),
        a ``(kind, default)`` tuple, or a ready :class:`SchemaField`.
        """

        fields: list[SchemaField] = []
        for name, spec in mapping.items():
            if isinstance(spec, SchemaField):
                if spec.name != name:
                    raise SchemaValidationError(
                        f"Field declared as '{name}' is named '{spec.name}'"
                    )
                fields.append(spec)
            elif isinstance(spec, tuple):
                if len(spec) != 2:
                    raise SchemaValidationError(
                        f"Field '{name}' must be declared as (kind, default)"
                    )
                kind, default = spec
                fields.append(
                    SchemaField(name=name, kind=resolve_kind(kind, field_name=name), default=default)
                )
            else:
                fields.append(SchemaField(name=name, kind=resolve_kind(spec, field_name=name)))
        return cls(fields=tuple(fields))

    @classmethod
    def from_model(cls, model: type[BaseModel]) -> ElicitationSchema:
        """Derive a schema from a flat pydantic model.

        Annotations must be exactly ``str``, ``int``, ``float`` or ``bool``.
        Optionals, unions, nested models and collections are refused.
        """

        fields: list[SchemaField] = []
        for name, info in model.model_fields.items():
            annotation = info.annotation
            origin = typing.get_origin(annotation)
            if origin is not None or isinstance(annotation, types.UnionType):
                raise SchemaValidationError(
                    f"Field '{name}' of {model.__name__} has composite type {annotation!r}; "
                    "only str, int, float and bool are allowed"
                )
            kind = resolve_kind(annotation, field_name=name)
            default: Primitive | None = None
            required = info.is_required()
            if not required:
                default = info.get_default(call_default_factory=True)
            fields.append(
                SchemaField(
                    name=name,
                    kind=kind,
                    description=info.description,
                    default=default,
                    required=required,
                )
            )
        return cls(fields=tuple(fields), model=model)

    @classmethod
    def from_json_schema(cls, obj: Mapping[str, Any]) -> ElicitationSchema:
        if obj.get("type", "object") != "object":
            raise SchemaValidationError("Elicitation schema must have type 'object'")
        properties = obj.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise SchemaValidationError("'properties' must be an object")
        required_raw = obj.get("required") or []
        required = {r for r in required_raw if isinstance(r, str)}

        fields: list[SchemaField] = []
        for name, prop in properties.items():
            if not isinstance(prop, Mapping):
                raise SchemaValidationError(f"Property '{name}' must be an object")
            json_type = prop.get("type")
            if not isinstance(json_type, str):
                raise SchemaValidationError(
                    f"Property '{name}' has unsupported type {json_type!r}"
                )
            description = prop.get("description")
            fields.append(
                SchemaField(
                    name=name,
                    kind=resolve_kind(json_type, field_name=name),
                    description=description if isinstance(description, str) else None,
                    default=prop.get("default"),
                    required=name in required,
                )
            )
        return cls(fields=tuple(fields))

    # -- wire form ----------------------------------------------------------

    def to_json_schema(self) -> dict[str, object]:
        return {
            "type": "object",
            "properties": {f.name: f.to_json_schema() for f in self.fields},
            "required": [f.name for f in self.fields if f.required],
        }

    # -- data validation ----------------------------------------------------

    def validate_data(self, data: Mapping[str, object]) -> dict[str, Primitive]:
        """Check accepted data against the schema.

        Returns a new dict with every value coerced to its kind and defaults
        filled in. Optional fields without a default may be absent.
        """

        if not isinstance(data, Mapping):
            raise ElicitationDataError(
                f"Accepted data must be a mapping, got {type(data).__name__}"
            )
        errors: list[str] = []
        out: dict[str, Primitive] = {}

        unknown = sorted(set(data) - set(self.field_names))
        for name in unknown:
            errors.append(f"Unknown field '{name}'")

        for f in self.fields:
            if f.name in data and data[f.name] is not None:
                try:
                    out[f.name] = coerce_value(f, data[f.name])
                except CoercionError as e:
                    errors.append(str(e))
            elif f.default is not None:
                out[f.name] = f.default
            elif f.required:
                errors.append(f"Missing required field '{f.name}'")

        if errors:
            raise ElicitationDataError("Accepted data does not match schema", errors)
        return out

    def build(self, data: Mapping[str, object]) -> Any:
        """Validate `data` and return it as the model instance, if any, else a dict."""

        values = self.validate_data(data)
        if self.model is None:
            return values
        try:
            return self.model.model_validate(values)
        except ValidationError as e:
            raise ElicitationDataError(
                f"Accepted data does not match {self.model.__name__}",
                [err["msg"] for err in e.errors()],
            ) from e
