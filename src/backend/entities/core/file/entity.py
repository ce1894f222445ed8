"""File domain entity."""

from pydantic import BaseModel, Field


class File(BaseModel):
    """A stored file as seen by consumers: an id and where it lives."""

    id: str = Field(description="Identifier of the stored file")
    path: str = Field(description="Storage path or URL of the file")
