"""MongoDB implementation of the product repository."""

from datetime import UTC, datetime

from loguru import logger
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from src.backend.core.errors import ConflictError
from src.backend.core.pagination import PaginationOptions

from .dto import FilterProductDto, SortProductDto
from .entity import Product, ProductPatch
from .mapper import ProductDocumentMapper, as_object_id
from .repository import ProductRepository, filter_role_ids, sort_keys


class ProductDocumentRepository(ProductRepository):
    """Data-access layer for products stored as MongoDB documents."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def ensure_indexes(self) -> None:
        """Create the indexes the repository relies on."""
        # Documents without an email omit the field, so a sparse index keeps
        # uniqueness to products that have one.
        self._collection.create_index("email", unique=True, sparse=True)
        self._collection.create_index([("social_id", ASCENDING), ("provider", ASCENDING)])
        self._collection.create_index("role._id")

    def create(self, product: Product) -> Product:
        document = ProductDocumentMapper.to_persistence(product)
        now = datetime.now(UTC)
        document.setdefault("created_at", now)
        document.setdefault("updated_at", now)
        try:
            result = self._collection.insert_one(document)
        except DuplicateKeyError as exc:
            raise ConflictError(f"Product violates a unique index: {exc.details}") from exc
        document["_id"] = result.inserted_id
        logger.bind(product_id=str(result.inserted_id)).debug("product.document.inserted")
        return ProductDocumentMapper.to_domain(document)

    def find_many_with_pagination(
        self,
        *,
        filter_options: FilterProductDto | None,
        sort_options: list[SortProductDto] | None,
        pagination_options: PaginationOptions,
    ) -> list[Product]:
        if pagination_options.beyond_storage_range:
            return []

        where: dict = {}
        role_ids = filter_role_ids(filter_options)
        if role_ids is not None:
            where["role._id"] = {"$in": [str(role_id) for role_id in role_ids]}

        cursor = self._collection.find(where)
        sort_spec = [
            ("_id" if field == "id" else field, ASCENDING if ascending else DESCENDING)
            for field, ascending in sort_keys(sort_options)
        ]
        if sort_spec:
            cursor = cursor.sort(sort_spec)
        cursor = cursor.skip(pagination_options.skip).limit(pagination_options.limit)
        return [ProductDocumentMapper.to_domain(document) for document in cursor]

    def find_by_id(self, product_id: int | str) -> Product | None:
        object_id = as_object_id(product_id)
        if object_id is None:
            return None
        document = self._collection.find_one({"_id": object_id})
        return ProductDocumentMapper.to_domain(document) if document else None

    def find_by_ids(self, product_ids: list[int | str]) -> list[Product]:
        object_ids = [oid for oid in map(as_object_id, product_ids) if oid is not None]
        if not object_ids:
            return []
        cursor = self._collection.find({"_id": {"$in": object_ids}})
        return [ProductDocumentMapper.to_domain(document) for document in cursor]

    def find_by_email(self, email: str | None) -> Product | None:
        if not email:
            return None
        document = self._collection.find_one({"email": email})
        return ProductDocumentMapper.to_domain(document) if document else None

    def find_by_social_id_and_provider(
        self, *, social_id: str | None, provider: str | None
    ) -> Product | None:
        if not social_id or not provider:
            return None
        document = self._collection.find_one({"social_id": social_id, "provider": provider})
        return ProductDocumentMapper.to_domain(document) if document else None

    def update(self, product_id: int | str, patch: ProductPatch) -> Product | None:
        object_id = as_object_id(product_id)
        if object_id is None:
            return None
        current = self._collection.find_one({"_id": object_id})
        if current is None:
            return None

        merged = patch.apply_to(ProductDocumentMapper.to_domain(current))
        document = ProductDocumentMapper.to_persistence(merged)
        document["_id"] = object_id
        document["updated_at"] = datetime.now(UTC)
        try:
            updated = self._collection.find_one_and_replace(
                {"_id": object_id}, document, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as exc:
            raise ConflictError(f"Product violates a unique index: {exc.details}") from exc
        return ProductDocumentMapper.to_domain(updated) if updated else None

    def remove(self, product_id: int | str) -> None:
        object_id = as_object_id(product_id)
        if object_id is None:
            return
        self._collection.delete_one({"_id": object_id})
