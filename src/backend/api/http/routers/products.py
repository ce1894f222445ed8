"""Products API router with CRUD operations."""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.backend.api.http.deps import (
    get_products_service,
    get_query_product,
    require_roles,
)
from src.backend.core.enums import RoleEnum
from src.backend.core.pagination import InfinityPaginationResponse, infinity_pagination
from src.backend.core.services import ProductsService
from src.backend.entities.service.product import FileRef, Product, RoleRef, StatusRef
from src.backend.entities.service.product.dto import (
    CreateProductDto,
    QueryProductDto,
    UpdateProductDto,
)


class ProductResponse(BaseModel):
    """Product as returned to administrators; the password hash is never exposed."""

    id: int | str
    email: str | None = None
    provider: str
    social_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    photo: FileRef | None = None
    role: RoleRef | None = None
    status: StatusRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


router = APIRouter(dependencies=[Depends(require_roles(RoleEnum.admin))])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: CreateProductDto,
    service: ProductsService = Depends(get_products_service),
) -> Product:
    """Create a new product."""
    return service.create(payload)


@router.get("", response_model=InfinityPaginationResponse[ProductResponse])
def list_products(
    query: QueryProductDto = Depends(get_query_product),
    service: ProductsService = Depends(get_products_service),
) -> InfinityPaginationResponse[Product]:
    """List products one page at a time."""
    pagination = query.pagination
    products = service.find_many_with_pagination(
        filter_options=query.filters,
        sort_options=query.sort,
        pagination_options=pagination,
    )
    return infinity_pagination(products, pagination)


@router.get("/{product_id}", response_model=ProductResponse | None)
def get_product(
    product_id: str,
    service: ProductsService = Depends(get_products_service),
) -> Product | None:
    """Get a product by ID; responds with null when it does not exist."""
    return service.find_by_id(product_id)


@router.patch("/{product_id}", response_model=ProductResponse | None)
def update_product(
    product_id: str,
    payload: UpdateProductDto,
    service: ProductsService = Depends(get_products_service),
) -> Product | None:
    """Apply a partial update to a product."""
    return service.update(product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    service: ProductsService = Depends(get_products_service),
) -> None:
    """Delete a product. Deleting a missing product is not an error."""
    service.remove(product_id)
