"""Persistence backend selection.

The backend is chosen once, when the application starts, from
``database.backend``. Request handlers only ever see the ``Repositories``
yielded by the selected backend's ``scope()``.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger

from src.backend.core.services.database.db_session import DbSessionService
from src.backend.core.services.database.document_store import DocumentStoreService
from src.backend.entities.core.file import (
    FileDocumentRepository,
    FileRelationalRepository,
    FileRepository,
)
from src.backend.entities.service.product import (
    ProductDocumentRepository,
    ProductRelationalRepository,
    ProductRepository,
)
from src.backend.runtime.config.config_data import ConfigData

PRODUCTS_COLLECTION = "products"
FILES_COLLECTION = "files"


@dataclass(frozen=True)
class Repositories:
    products: ProductRepository
    files: FileRepository


class PersistenceBackend(ABC):
    name: str

    @abstractmethod
    def initialize(self) -> None:
        """Prepare storage (tables, indexes) for use."""

    @abstractmethod
    def scope(self) -> Iterator[Repositories]:
        """Yield repositories valid for one unit of work."""

    @abstractmethod
    def health_check(self) -> bool: ...

    @abstractmethod
    def close(self) -> None: ...


class RelationalPersistence(PersistenceBackend):
    name = "relational"

    def __init__(self, db_service: DbSessionService) -> None:
        self._db_service = db_service

    def initialize(self) -> None:
        self._db_service.create_all()

    @contextmanager
    def scope(self) -> Iterator[Repositories]:
        with self._db_service.session_scope() as session:
            yield Repositories(
                products=ProductRelationalRepository(session),
                files=FileRelationalRepository(session),
            )

    def health_check(self) -> bool:
        return self._db_service.health_check()

    def close(self) -> None:
        self._db_service.dispose()


class DocumentPersistence(PersistenceBackend):
    name = "document"

    def __init__(self, store: DocumentStoreService) -> None:
        self._store = store

    def initialize(self) -> None:
        ProductDocumentRepository(self._store.collection(PRODUCTS_COLLECTION)).ensure_indexes()

    @contextmanager
    def scope(self) -> Iterator[Repositories]:
        yield Repositories(
            products=ProductDocumentRepository(self._store.collection(PRODUCTS_COLLECTION)),
            files=FileDocumentRepository(self._store.collection(FILES_COLLECTION)),
        )

    def health_check(self) -> bool:
        return self._store.health_check()

    def close(self) -> None:
        self._store.close()


def create_persistence(config: ConfigData) -> PersistenceBackend:
    """Build the persistence backend named by the configuration."""
    logger.info("Using {} persistence backend", config.database.backend)
    if config.database.backend == "document":
        return DocumentPersistence(DocumentStoreService())
    return RelationalPersistence(DbSessionService())
