"""MongoDB client holder for the document backend."""

from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from src.backend.runtime.context import get_config


class DocumentStoreService:
    """Owns the MongoClient (and its connection pool) for the process."""

    def __init__(self, client: MongoClient | None = None, database: str | None = None):
        cfg = get_config().document_store
        if client is None:
            logger.info("Connecting to document store database {}", cfg.database)
            client = MongoClient(
                cfg.url, serverSelectionTimeoutMS=cfg.server_selection_timeout_ms
            )
        self._client = client
        self._database: Database = client[database or cfg.database]

    def collection(self, name: str) -> Collection:
        return self._database[name]

    def health_check(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.bind(error_type=type(e).__name__, error_message=str(e)).error(
                "Document store health check failed"
            )
            return False

    def close(self) -> None:
        self._client.close()
