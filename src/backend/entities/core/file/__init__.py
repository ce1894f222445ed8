"""Entity package: File.

Files are uploaded and owned by another module; products only look them up
by id to build photo references.
"""

from .entity import File
from .repository import FileDocumentRepository, FileRelationalRepository, FileRepository
from .table import FileTable

__all__ = [
    "File",
    "FileDocumentRepository",
    "FileRelationalRepository",
    "FileRepository",
    "FileTable",
]
