"""Storage-independent product repository interface."""

from abc import ABC, abstractmethod

from src.backend.core.pagination import PaginationOptions

from .dto import FilterProductDto, SortProductDto
from .entity import Product, ProductPatch


def sort_keys(sort_options: list[SortProductDto] | None) -> list[tuple[str, bool]]:
    """Reduce sort options to ``(field, ascending)`` pairs in the given order.

    A field repeated later in the list keeps its first position.
    """
    keys: dict[str, bool] = {}
    for option in sort_options or []:
        keys.setdefault(option.order_by, option.order.upper() == "ASC")
    return list(keys.items())


def filter_role_ids(filter_options: FilterProductDto | None) -> list[int | str] | None:
    """Role ids to filter by, or None when no role filter applies."""
    if filter_options is None or not filter_options.roles:
        return None
    return [role.id for role in filter_options.roles]


class ProductRepository(ABC):
    """Capabilities every product storage backend provides.

    Lookups return None for a missing record; they never raise for absence.
    """

    @abstractmethod
    def create(self, product: Product) -> Product:
        """Persist a new product and return it with its storage-assigned id.

        Raises:
            ConflictError: a storage uniqueness constraint was violated.
        """

    @abstractmethod
    def find_many_with_pagination(
        self,
        *,
        filter_options: FilterProductDto | None,
        sort_options: list[SortProductDto] | None,
        pagination_options: PaginationOptions,
    ) -> list[Product]: ...

    @abstractmethod
    def find_by_id(self, product_id: int | str) -> Product | None: ...

    @abstractmethod
    def find_by_ids(self, product_ids: list[int | str]) -> list[Product]: ...

    @abstractmethod
    def find_by_email(self, email: str | None) -> Product | None: ...

    @abstractmethod
    def find_by_social_id_and_provider(
        self, *, social_id: str | None, provider: str | None
    ) -> Product | None: ...

    @abstractmethod
    def update(self, product_id: int | str, patch: ProductPatch) -> Product | None:
        """Merge ``patch`` over the stored product; None if it does not exist.

        Raises:
            ConflictError: a storage uniqueness constraint was violated.
        """

    @abstractmethod
    def remove(self, product_id: int | str) -> None:
        """Physically delete the product. Missing ids are ignored."""
