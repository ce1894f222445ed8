"""Entity: Product."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.backend.core.enums import AuthProvidersEnum

_TIMESTAMPS = {"created_at", "updated_at", "deleted_at"}


class FileRef(BaseModel):
    """Reference to a file owned by the files module."""

    id: str
    path: str | None = None


class RoleRef(BaseModel):
    id: int | str


class StatusRef(BaseModel):
    id: int | str


class Product(BaseModel):
    """Product entity, independent of how a backend stores it.

    ``id`` is assigned by storage: an integer primary key for the relational
    backend, an ObjectId hex string for the document backend. Related photo,
    role and status are carried as lightweight references, never hydrated.
    """

    id: int | str | None = Field(default=None, description="Storage-assigned identifier")
    email: str | None = Field(default=None, description="Unique email address")
    password: str | None = Field(default=None, description="bcrypt password hash")
    provider: str = Field(
        default=AuthProvidersEnum.email.value, description="Authentication provider"
    )
    social_id: str | None = Field(default=None, description="External social identifier")
    first_name: str | None = None
    last_name: str | None = None
    photo: FileRef | None = None
    role: RoleRef | None = None
    status: StatusRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return self.model_dump(exclude=_TIMESTAMPS) == other.model_dump(exclude=_TIMESTAMPS)


class ProductPatch(BaseModel):
    """Partial update for a product.

    Each field has three states: not set (absent from ``model_fields_set``,
    the current value is kept), explicitly ``None`` (the value is cleared) and
    a value (the value is replaced). Build it with only the keys that should
    change, e.g. ``ProductPatch(photo=None)`` clears the photo while
    ``ProductPatch()`` changes nothing.
    """

    email: str | None = None
    password: str | None = None
    provider: str | None = None
    social_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    photo: FileRef | None = None
    role: RoleRef | None = None
    status: StatusRef | None = None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields, keeping nested models intact."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def apply_to(self, product: Product) -> Product:
        """Merge this patch over ``product`` and return the merged copy."""
        changes = self.changes()
        # provider is never nullable on the entity
        if changes.get("provider", "") is None:
            changes.pop("provider")
        return product.model_copy(update=changes)
