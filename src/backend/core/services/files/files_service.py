"""Lookup of files owned by the files module."""

from src.backend.entities.core.file import File, FileRepository


class FilesService:
    """Resolves file ids to stored files."""

    def __init__(self, files_repository: FileRepository) -> None:
        self._files_repository = files_repository

    def find_by_id(self, file_id: str) -> File | None:
        return self._files_repository.find_by_id(file_id)
