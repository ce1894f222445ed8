"""Pagination options and the "infinity" pagination envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# Largest offset SQL engines and MongoDB accept (signed 64-bit).
MAX_STORAGE_OFFSET = 2**63 - 1


class PaginationOptions(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def beyond_storage_range(self) -> bool:
        """True when the window reaches past any offset storage can address.

        Such a page cannot hold records, so callers answer it with no data.
        """
        return self.skip + self.limit > MAX_STORAGE_OFFSET


class InfinityPaginationResponse(BaseModel, Generic[T]):
    """A page of results plus whether another page may follow.

    There is no total count; a full page is taken as a hint that more data
    exists.
    """

    data: list[T]
    has_next_page: bool


def infinity_pagination(
    data: list[T], options: PaginationOptions
) -> InfinityPaginationResponse[T]:
    return InfinityPaginationResponse(
        data=data, has_next_page=len(data) == options.limit
    )
