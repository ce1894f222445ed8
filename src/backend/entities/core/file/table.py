"""File database table model."""

from src.backend.entities._base import EntityTable


class FileTable(EntityTable, table=True):
    """Database persistence model for files."""

    __tablename__ = "file"

    path: str
