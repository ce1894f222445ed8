"""Entity package: Product."""

from .document_repository import ProductDocumentRepository
from .entity import FileRef, Product, ProductPatch, RoleRef, StatusRef
from .relational_repository import ProductRelationalRepository
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "FileRef",
    "Product",
    "ProductDocumentRepository",
    "ProductPatch",
    "ProductRelationalRepository",
    "ProductRepository",
    "ProductTable",
    "RoleRef",
    "StatusRef",
]
