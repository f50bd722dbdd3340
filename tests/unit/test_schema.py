"""Unit tests for elicitation schemas."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from agent_elicitation.elicitation.errors import ElicitationDataError, SchemaValidationError
from agent_elicitation.elicitation.schema import ElicitationSchema, FieldKind, SchemaField


class ConfirmBooking(BaseModel):
    confirm: bool = Field(description="Confirm the booking?")
    notes: str = Field(default="", description="Special requests")


class Address(BaseModel):
    street: str


def test_from_mapping_accepts_every_primitive_spelling() -> None:
    schema = ElicitationSchema.from_mapping(
        {"a": "text", "b": int, "c": "number", "d": FieldKind.BOOLEAN}
    )

    assert [f.kind for f in schema] == [
        FieldKind.TEXT,
        FieldKind.INTEGER,
        FieldKind.DECIMAL,
        FieldKind.BOOLEAN,
    ]
    assert all(f.required for f in schema)


def test_default_makes_field_optional(booking_schema: ElicitationSchema) -> None:
    notes = booking_schema.get("notes")
    assert notes is not None
    assert notes.default == ""
    assert notes.required is False


@pytest.mark.parametrize("bad", ["list", "object", list, dict, "array", Address])
def test_from_mapping_rejects_non_primitive_types(bad: object) -> None:
    with pytest.raises(SchemaValidationError):
        ElicitationSchema.from_mapping({"x": bad})


def test_rejects_duplicate_and_empty_names() -> None:
    with pytest.raises(SchemaValidationError):
        ElicitationSchema(fields=(SchemaField("a", FieldKind.TEXT), SchemaField("a", FieldKind.TEXT)))
    with pytest.raises(SchemaValidationError):
        SchemaField(" ", FieldKind.TEXT)


def test_rejects_default_of_the_wrong_kind() -> None:
    with pytest.raises(SchemaValidationError):
        SchemaField("count", FieldKind.INTEGER, default="many")


def test_from_model_reads_descriptions_and_defaults() -> None:
    schema = ElicitationSchema.from_model(ConfirmBooking)

    confirm = schema.get("confirm")
    notes = schema.get("notes")
    assert confirm is not None and notes is not None
    assert confirm.kind is FieldKind.BOOLEAN
    assert confirm.required is True
    assert confirm.description == "Confirm the booking?"
    assert notes.default == ""
    assert schema.model is ConfirmBooking


def test_from_model_rejects_composite_fields() -> None:
    class Nested(BaseModel):
        address: Address

    class WithList(BaseModel):
        tags: list[str]

    class WithOptional(BaseModel):
        nickname: str | None = None

    for model in (Nested, WithList, WithOptional):
        with pytest.raises(SchemaValidationError):
            ElicitationSchema.from_model(model)


def test_json_schema_wire_form(booking_schema: ElicitationSchema) -> None:
    wire = booking_schema.to_json_schema()

    assert wire == {
        "type": "object",
        "properties": {
            "confirm": {"type": "boolean"},
            "notes": {"type": "string", "default": ""},
        },
        "required": ["confirm"],
    }
    assert ElicitationSchema.from_json_schema(wire) == booking_schema


def test_from_json_schema_rejects_nested_properties() -> None:
    with pytest.raises(SchemaValidationError):
        ElicitationSchema.from_json_schema(
            {"type": "object", "properties": {"tags": {"type": "array"}}}
        )


def test_validate_data_coerces_and_fills_defaults(booking_schema: ElicitationSchema) -> None:
    assert booking_schema.validate_data({"confirm": "yes"}) == {"confirm": True, "notes": ""}


def test_validate_data_reports_every_problem(booking_schema: ElicitationSchema) -> None:
    with pytest.raises(ElicitationDataError) as exc_info:
        booking_schema.validate_data({"notes": 3.5, "extra": 1})

    errors = exc_info.value.errors
    assert any("extra" in e for e in errors)
    assert any("confirm" in e for e in errors)


def test_build_returns_model_instance() -> None:
    schema = ElicitationSchema.from_model(ConfirmBooking)

    built = schema.build({"confirm": True})
    assert isinstance(built, ConfirmBooking)
    assert built.confirm is True
    assert built.notes == ""
