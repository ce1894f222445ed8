"""Core services exports."""

from .database.db_session import DbSessionService
from .database.document_store import DocumentStoreService
from .database.persistence import (
    DocumentPersistence,
    PersistenceBackend,
    RelationalPersistence,
    Repositories,
    create_persistence,
)
from .files.files_service import FilesService
from .products.products_service import ProductsService

__all__ = [
    "DbSessionService",
    "DocumentPersistence",
    "DocumentStoreService",
    "FilesService",
    "PersistenceBackend",
    "ProductsService",
    "RelationalPersistence",
    "Repositories",
    "create_persistence",
]
