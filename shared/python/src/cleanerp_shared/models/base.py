"""
models/base.py — Common base classes and pre-persistence validation.

Every table model accepts both snake_case field names and camelCase aliases,
so the same classes validate API request bodies and database rows.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from cleanerp_shared.dates import prepare_object_for_db
from cleanerp_shared.mappers import to_camel_case, to_snake_case

M = TypeVar("M", bound="DbModel")

POSTCODE_PATTERN = r"^\d{4}$"
PHONE_PATTERN = r"^[0-9+()\s-]{8,20}$"
COORDINATES_PATTERN = r"^\s*-?\d+(\.\d+)?\s*,\s*-?\d+(\.\d+)?\s*$"


def error_location(loc: Any) -> tuple[Any, ...]:
    """
    Field-name form of a pydantic error location.

    Missing fields are reported under their camelCase alias, other failures
    under the field name; both come back as snake_case.
    """
    return tuple(to_snake_case(p) if isinstance(p, str) else p for p in loc or ())


class RecordValidationError(ValueError):
    """Raised when a payload fails model validation before persistence."""

    def __init__(self, model: str, errors: list[dict[str, Any]]) -> None:
        self.model = model
        self.errors = [{**e, "loc": error_location(e.get("loc"))} for e in errors]
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) for e in self.errors)
        super().__init__(f"{model} validation failed: {fields or 'invalid payload'}")


class DbModel(BaseModel):
    """Base for all CleanERP table models."""

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def from_db_row(cls: type[M], row: dict[str, Any]) -> M:
        return cls.model_validate(row)

    def to_insert_dict(self) -> dict[str, Any]:
        """Snake-case, JSON-ready dict with null fields omitted."""
        return prepare_object_for_db(self.model_dump()) or {}


class UpdateModel(DbModel):
    """Partial-update payloads: only the fields a caller sent are written."""

    def to_insert_dict(self) -> dict[str, Any]:
        return prepare_object_for_db(self.model_dump(exclude_unset=True)) or {}


def validate_model(data: Any, model: type[M]) -> M:
    """Validate data (dict with snake or camel keys, or an instance) as model."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RecordValidationError(
            model.__name__, exc.errors(include_url=False, include_context=False, include_input=False)
        ) from exc


def validate_for_db(data: Any, model: type[DbModel]) -> dict[str, Any]:
    """
    Validate data against model and return the payload ready for Supabase.

    Raises:
        RecordValidationError: with pydantic's per-field error list.
    """
    return validate_model(data, model).to_insert_dict()
