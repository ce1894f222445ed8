"""Storage initialization script.

Creates the relational tables or the document store indexes, depending on
the configured persistence backend.
"""

from loguru import logger

from src.backend.core.services import create_persistence
from src.backend.runtime.context import get_config


def init_db() -> None:
    """Prepare the configured backend's storage."""
    persistence = create_persistence(get_config())
    try:
        persistence.initialize()
        logger.info("Initialized {} storage", persistence.name)
    finally:
        persistence.close()


if __name__ == "__main__":
    init_db()
