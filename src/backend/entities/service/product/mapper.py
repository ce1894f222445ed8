"""Translation between stored product records and the Product entity."""

from collections.abc import Mapping
from typing import Any

from bson import ObjectId

from .entity import FileRef, Product, RoleRef, StatusRef
from .table import ProductTable


def as_int(value: Any) -> int | None:
    """Return ``value`` as an integer key, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        return None


def as_object_id(value: Any) -> ObjectId | None:
    """Return ``value`` as an ObjectId, or None if it is not one."""
    if isinstance(value, ObjectId):
        return value
    if value is not None and ObjectId.is_valid(str(value)):
        return ObjectId(str(value))
    return None


class ProductDocumentMapper:
    """Maps MongoDB documents to products and back.

    Documents keep references as nested sub-documents with string ids:
    ``photo: {_id, path}``, ``role: {_id}``, ``status: {_id}``. Fields without
    a value are left out of the document entirely.
    """

    @staticmethod
    def to_domain(raw: Mapping[str, Any]) -> Product:
        photo = raw.get("photo")
        role = raw.get("role")
        status = raw.get("status")
        return Product(
            id=str(raw["_id"]),
            email=raw.get("email"),
            password=raw.get("password"),
            provider=raw.get("provider") or "email",
            social_id=raw.get("social_id"),
            first_name=raw.get("first_name"),
            last_name=raw.get("last_name"),
            photo=FileRef(id=str(photo["_id"]), path=photo.get("path")) if photo else None,
            role=RoleRef(id=role["_id"]) if role else None,
            status=StatusRef(id=status["_id"]) if status else None,
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
            deleted_at=raw.get("deleted_at"),
        )

    @staticmethod
    def to_persistence(product: Product) -> dict[str, Any]:
        document: dict[str, Any] = {}
        object_id = as_object_id(product.id)
        if object_id is not None:
            document["_id"] = object_id

        fields = {
            "email": product.email,
            "password": product.password,
            "provider": product.provider,
            "social_id": product.social_id,
            "first_name": product.first_name,
            "last_name": product.last_name,
            "photo": (
                {"_id": product.photo.id, "path": product.photo.path}
                if product.photo
                else None
            ),
            "role": {"_id": str(product.role.id)} if product.role else None,
            "status": {"_id": str(product.status.id)} if product.status else None,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "deleted_at": product.deleted_at,
        }
        document.update({key: value for key, value in fields.items() if value is not None})
        return document


class ProductRelationalMapper:
    """Maps ``ProductTable`` rows to products and back."""

    @staticmethod
    def to_domain(row: ProductTable) -> Product:
        return Product(
            id=row.id,
            email=row.email,
            password=row.password,
            provider=row.provider,
            social_id=row.social_id,
            first_name=row.first_name,
            last_name=row.last_name,
            photo=FileRef(id=row.photo.id, path=row.photo.path) if row.photo else None,
            role=RoleRef(id=row.role_id) if row.role_id is not None else None,
            status=StatusRef(id=row.status_id) if row.status_id is not None else None,
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=row.deleted_at,
        )

    @staticmethod
    def to_persistence(product: Product) -> ProductTable:
        row = ProductTable(
            email=product.email,
            password=product.password,
            provider=product.provider,
            social_id=product.social_id,
            first_name=product.first_name,
            last_name=product.last_name,
            photo_id=product.photo.id if product.photo else None,
            role_id=as_int(product.role.id) if product.role else None,
            status_id=as_int(product.status.id) if product.status else None,
            deleted_at=product.deleted_at,
        )
        if product.id is not None:
            row.id = as_int(product.id)
        if product.created_at is not None:
            row.created_at = product.created_at
        if product.updated_at is not None:
            row.updated_at = product.updated_at
        return row
