"""
Request and response shapes for memos.

Request models carry the field rules (title length, description length,
pagination bounds). memos.memo.service runs every inbound payload through
parse_request(), which turns pydantic failures into memos ValidationError.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from memos.errors import ValidationError

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
SORT_FIELD_MAX_LENGTH = 50
MIN_LIMIT = 1
MAX_LIMIT = 100

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
DEFAULT_SORT_BY = "created_at"
DEFAULT_ORDER = "desc"

NUMERIC_TEXT = re.compile(r"[+-]?\d+(\.\d*)?")


class SortField(str, Enum):
    """Columns a memo listing may be ordered by."""

    CREATED_AT = "created_at"
    TITLE = "title"
    DATE_TO = "date_to"
    COMPLETED = "completed"
    UPDATED_AT = "updated_at"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortField":
        """Map a client-supplied name to a column; unrecognized names sort by created_at."""
        try:
            return cls(value)
        except ValueError:
            return cls.CREATED_AT


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        return cls.ASC if value == cls.ASC.value else cls.DESC


# =============================================================================
# Field rules
# =============================================================================


def _check_encodable(value: Optional[str]) -> Optional[str]:
    # Lone surrogates survive JSON decoding but cannot be stored
    if value is not None:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise PydanticCustomError("invalid_text", "Text must be valid UTF-8") from None
    return value


def _check_title(value: Optional[str]) -> Optional[str]:
    _check_encodable(value)
    if value is not None and not 1 <= len(value) <= TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "title_length", "Title must be between 1 and {max} characters", {"max": TITLE_MAX_LENGTH}
        )
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    _check_encodable(value)
    if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError(
            "description_length",
            "Description must not exceed {max} characters",
            {"max": DESCRIPTION_MAX_LENGTH},
        )
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps are taken to be UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _MemoFields(BaseModel):
    """Shared validators for the memo request bodies."""

    @field_validator("title", check_fields=False)
    @classmethod
    def validate_title(cls, value):
        return _check_title(value)

    @field_validator("description", check_fields=False)
    @classmethod
    def validate_description(cls, value):
        return _check_description(value)

    @field_validator("date_to", mode="before", check_fields=False)
    @classmethod
    def reject_numeric_date_to(cls, value):
        # Numbers would otherwise be read as Unix timestamps
        numeric_text = isinstance(value, str) and NUMERIC_TEXT.fullmatch(value.strip())
        if isinstance(value, (int, float)) or numeric_text:
            raise PydanticCustomError("datetime_type", "date_to must be an ISO 8601 datetime")
        return value

    @field_validator("date_to", check_fields=False)
    @classmethod
    def validate_date_to(cls, value):
        return _as_utc(value)


# =============================================================================
# Requests
# =============================================================================


class CreateMemoRequest(_MemoFields):
    title: str
    description: Optional[str] = None
    date_to: datetime


class UpdateMemoRequest(_MemoFields):
    title: str
    description: Optional[str] = None
    date_to: datetime
    completed: StrictBool


class PatchMemoRequest(_MemoFields):
    """
    Partial update. Only fields present in the payload are applied.

    An explicit null clears description; title, date_to and completed cannot
    be cleared.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    date_to: Optional[datetime] = None
    completed: Optional[StrictBool] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for name in ("title", "date_to", "completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise PydanticCustomError("null_field", "{field} cannot be null", {"field": name})
        return self


class PaginationParams(BaseModel):
    limit: Optional[int] = None
    offset: Optional[int] = None
    completed: Optional[bool] = None
    sort_by: Optional[str] = None
    order: Optional[str] = None

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, value):
        if value is not None and not MIN_LIMIT <= value <= MAX_LIMIT:
            raise PydanticCustomError(
                "limit_range",
                "Limit must be between {min} and {max}",
                {"min": MIN_LIMIT, "max": MAX_LIMIT},
            )
        return value

    @field_validator("offset")
    @classmethod
    def validate_offset(cls, value):
        if value is not None and value < 0:
            raise PydanticCustomError("offset_range", "Offset must be non-negative")
        return value

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value):
        if value is not None and len(value) > SORT_FIELD_MAX_LENGTH:
            raise PydanticCustomError(
                "sort_by_length",
                "Sort field must not exceed {max} characters",
                {"max": SORT_FIELD_MAX_LENGTH},
            )
        return value

    @field_validator("order")
    @classmethod
    def validate_order(cls, value):
        if value is not None and value not in (SortOrder.ASC.value, SortOrder.DESC.value):
            raise PydanticCustomError("order_value", "Order must be 'asc' or 'desc'")
        return value


# =============================================================================
# Responses
# =============================================================================


class MemoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    date_to: datetime
    completed: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("date_to", "created_at", "updated_at")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return _as_utc(value).astimezone(timezone.utc)

    @classmethod
    def from_row(cls, row: dict) -> "MemoResponse":
        return cls.model_validate(row)


class PaginatedResult(BaseModel):
    data: list[MemoResponse]
    total: int
    limit: int
    offset: int


# =============================================================================
# Parsing
# =============================================================================

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def format_validation_error(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into a single message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "Validation failed: " + "; ".join(parts)


def parse_request(model: type[RequestModel], data: Any) -> RequestModel:
    """
    Validate a payload (mapping or model instance) against a request model.

    Model instances are re-validated from the fields they were given, so the
    set of explicitly supplied fields survives for partial updates.

    Raises:
        ValidationError: payload is malformed or breaks a field rule
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    if data is None:
        data = {}
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_error(e)) from e
