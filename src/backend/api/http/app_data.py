from dataclasses import dataclass

from src.backend.core.services import PersistenceBackend


@dataclass
class ApplicationDependencies:
    persistence: PersistenceBackend
