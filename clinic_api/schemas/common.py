"""Shared schema building blocks: camelCase models, the response envelope, date types."""

import re
from datetime import date, datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from clinic_api.core.calendar import as_utc

T = TypeVar("T")

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD"


def parse_iso_date(value: Any) -> date:
    """
    Parse a strict ``YYYY-MM-DD`` calendar date.

    Raises:
        ValueError: If the value is not in that format or is not a real date
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise ValueError(INVALID_DATE_MESSAGE)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(INVALID_DATE_MESSAGE) from None


IsoDate = Annotated[date, BeforeValidator(parse_iso_date)]
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    """One field-level validation message."""

    field: str
    message: str


class ApiResponse(CamelModel, Generic[T]):
    """Uniform response envelope."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    count: int | None = None
    errors: list[FieldError] | None = None
