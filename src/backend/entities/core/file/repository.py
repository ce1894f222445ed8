"""Read-only access to files for both storage backends."""

from abc import ABC, abstractmethod

from bson import ObjectId
from pymongo.collection import Collection
from sqlmodel import Session

from .entity import File
from .table import FileTable


class FileRepository(ABC):
    """Lookup interface consumed by the files service."""

    @abstractmethod
    def find_by_id(self, file_id: str) -> File | None: ...


class FileRelationalRepository(FileRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_id(self, file_id: str) -> File | None:
        row = self._session.get(FileTable, str(file_id))
        if row is None:
            return None
        return File(id=row.id, path=row.path)


class FileDocumentRepository(FileRepository):
    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def find_by_id(self, file_id: str) -> File | None:
        if not ObjectId.is_valid(str(file_id)):
            return None
        document = self._collection.find_one({"_id": ObjectId(str(file_id))})
        if document is None:
            return None
        return File(id=str(document["_id"]), path=document["path"])
