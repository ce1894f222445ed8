"""Product database table model."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Relationship

from src.backend.entities._base import TimestampedTable
from src.backend.entities.core.file import FileTable


class ProductTable(TimestampedTable, table=True):
    """Database persistence model for products.

    Role and status are stored as bare ids from their enumerations; the photo
    is a foreign key into the file table.
    """

    __tablename__ = "product"

    id: int | None = Field(default=None, primary_key=True)
    email: str | None = Field(default=None, unique=True, index=True)
    password: str | None = None
    provider: str = Field(default="email")
    social_id: str | None = Field(default=None, index=True)
    first_name: str | None = Field(default=None, index=True)
    last_name: str | None = Field(default=None, index=True)
    photo_id: str | None = Field(default=None, foreign_key="file.id")
    role_id: int | None = Field(default=None, index=True)
    status_id: int | None = Field(default=None)
    deleted_at: datetime | None = Field(default=None)

    photo: Optional[FileTable] = Relationship()
