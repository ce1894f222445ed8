"""Entities organised by business concept.

Each entity package colocates the pieces that belong to it:
- entity.py: domain model
- table.py / document shape: persistence representation
- repository.py: data access for each storage backend
"""

from .core.file import File, FileRepository, FileTable
from .service.product import Product, ProductPatch, ProductRepository, ProductTable

__all__ = [
    "File",
    "FileRepository",
    "FileTable",
    "Product",
    "ProductPatch",
    "ProductRepository",
    "ProductTable",
]
