"""SQL implementation of the product repository."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.backend.core.errors import ConflictError
from src.backend.core.pagination import PaginationOptions
from src.backend.entities._base import utcnow

from .dto import FilterProductDto, SortProductDto
from .entity import Product, ProductPatch
from .mapper import ProductRelationalMapper, as_int
from .repository import ProductRepository, filter_role_ids, sort_keys
from .table import ProductTable

# Columns copied from a merged product onto the stored row on update.
_UPDATABLE_COLUMNS = (
    "email",
    "password",
    "provider",
    "social_id",
    "first_name",
    "last_name",
    "photo_id",
    "role_id",
    "status_id",
    "deleted_at",
)


class ProductRelationalRepository(ProductRepository):
    """Data-access layer for products stored in a SQL table.

    Each write commits on the session it was given; integrity errors are
    rolled back and reported as ``ConflictError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError(f"Product violates a unique constraint: {exc.orig}") from exc

    def create(self, product: Product) -> Product:
        row = ProductRelationalMapper.to_persistence(product)
        self._session.add(row)
        self._commit()
        self._session.refresh(row)
        logger.bind(product_id=row.id).debug("product.row.inserted")
        return ProductRelationalMapper.to_domain(row)

    def find_many_with_pagination(
        self,
        *,
        filter_options: FilterProductDto | None,
        sort_options: list[SortProductDto] | None,
        pagination_options: PaginationOptions,
    ) -> list[Product]:
        if pagination_options.beyond_storage_range:
            return []

        statement = select(ProductTable)

        role_ids = filter_role_ids(filter_options)
        if role_ids is not None:
            ids = [rid for rid in map(as_int, role_ids) if rid is not None]
            statement = statement.where(col(ProductTable.role_id).in_(ids))

        for field, ascending in sort_keys(sort_options):
            column = col(getattr(ProductTable, field))
            statement = statement.order_by(column.asc() if ascending else column.desc())

        statement = statement.offset(pagination_options.skip).limit(pagination_options.limit)
        rows = self._session.exec(statement).all()
        return [ProductRelationalMapper.to_domain(row) for row in rows]

    def _get_row(self, product_id: int | str) -> ProductTable | None:
        key = as_int(product_id)
        if key is None:
            return None
        return self._session.get(ProductTable, key)

    def find_by_id(self, product_id: int | str) -> Product | None:
        row = self._get_row(product_id)
        return ProductRelationalMapper.to_domain(row) if row else None

    def find_by_ids(self, product_ids: list[int | str]) -> list[Product]:
        keys = [key for key in map(as_int, product_ids) if key is not None]
        if not keys:
            return []
        statement = select(ProductTable).where(col(ProductTable.id).in_(keys))
        return [ProductRelationalMapper.to_domain(row) for row in self._session.exec(statement)]

    def find_by_email(self, email: str | None) -> Product | None:
        if not email:
            return None
        statement = select(ProductTable).where(ProductTable.email == email)
        row = self._session.exec(statement).first()
        return ProductRelationalMapper.to_domain(row) if row else None

    def find_by_social_id_and_provider(
        self, *, social_id: str | None, provider: str | None
    ) -> Product | None:
        if not social_id or not provider:
            return None
        statement = select(ProductTable).where(
            (ProductTable.social_id == social_id) & (ProductTable.provider == provider)
        )
        row = self._session.exec(statement).first()
        return ProductRelationalMapper.to_domain(row) if row else None

    def update(self, product_id: int | str, patch: ProductPatch) -> Product | None:
        row = self._get_row(product_id)
        if row is None:
            return None

        merged = patch.apply_to(ProductRelationalMapper.to_domain(row))
        values = ProductRelationalMapper.to_persistence(merged)
        for column in _UPDATABLE_COLUMNS:
            setattr(row, column, getattr(values, column))
        row.updated_at = utcnow()

        self._session.add(row)
        self._commit()
        self._session.refresh(row)
        return ProductRelationalMapper.to_domain(row)

    def remove(self, product_id: int | str) -> None:
        row = self._get_row(product_id)
        if row is None:
            return
        self._session.delete(row)
        self._session.commit()
