"""Request models for the products API.

``QueryProductDto`` turns raw list-endpoint query parameters into typed
options. ``filters`` and ``sort`` arrive as JSON text and are decoded here, so
a malformed value fails validation with the field name in the error location.
"""

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from src.backend.core.pagination import PaginationOptions
from src.backend.runtime.context import get_config

# Entity fields a list can be ordered by; "id" maps to each backend's key.
SORTABLE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "email",
        "provider",
        "social_id",
        "first_name",
        "last_name",
        "created_at",
        "updated_at",
        "deleted_at",
    }
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class ReferenceDto(BaseModel):
    """``{id}`` reference to a related record."""

    id: int | str

    @field_validator("id")
    @classmethod
    def _not_empty(cls, value: int | str) -> int | str:
        if isinstance(value, str) and not value.strip():
            raise ValueError("id should not be empty")
        return value


class RoleDto(ReferenceDto):
    pass


class StatusDto(ReferenceDto):
    pass


class FileDto(BaseModel):
    id: str


class FilterProductDto(BaseModel):
    roles: list[RoleDto] | None = None


class SortProductDto(BaseModel):
    """One sort key.

    ``order`` is free text: the repositories sort ascending for a
    case-insensitive ``"asc"`` and descending for anything else.
    """

    model_config = ConfigDict(populate_by_name=True)

    order_by: str = Field(alias="orderBy")
    order: str

    @field_validator("order_by")
    @classmethod
    def _known_field(cls, value: str) -> str:
        name = _to_snake(value)
        if name not in SORTABLE_FIELDS:
            raise ValueError(
                f"unknown sort field '{value}', expected one of {sorted(SORTABLE_FIELDS)}"
            )
        return name


def _decode_json(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"must be valid JSON: {exc.msg}") from exc


class QueryProductDto(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    filters: FilterProductDto | None = None
    sort: list[SortProductDto] | None = None

    @field_validator("page", mode="before")
    @classmethod
    def _default_page(cls, value: Any) -> Any:
        return 1 if value in (None, "") else value

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, value: Any) -> Any:
        if value in (None, ""):
            return get_config().pagination.default_limit
        return value

    @field_validator("limit")
    @classmethod
    def _cap_limit(cls, value: int) -> int:
        return min(value, get_config().pagination.max_limit)

    @field_validator("filters", mode="before")
    @classmethod
    def _parse_filters(cls, value: Any) -> Any:
        return _decode_json(value)

    @field_validator("sort", mode="before")
    @classmethod
    def _parse_sort(cls, value: Any) -> Any:
        value = _decode_json(value)
        if isinstance(value, dict):
            return [value]
        return value

    @property
    def pagination(self) -> PaginationOptions:
        return PaginationOptions(page=self.page, limit=self.limit)


class CreateProductDto(BaseModel):
    """Create payload.

    Keys are accepted in snake_case or camelCase (``firstName``); unknown
    keys are rejected rather than silently dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    provider: str | None = None
    social_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    photo: FileDto | None = None
    role: RoleDto | None = None
    status: StatusDto | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None


class UpdateProductDto(CreateProductDto):
    """Partial update payload.

    Every field is optional. ``model_fields_set`` tells an omitted field apart
    from one explicitly sent as ``null``.
    """
