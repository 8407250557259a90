"""
Pagination helpers

Pages are 1-indexed. Page N covers items [(N-1)*size, N*size); a page past
the end is empty rather than an error.
"""
import math
from dataclasses import dataclass, field
from typing import Generic, List, Sequence, Tuple, TypeVar

from storefront.core.exceptions import InvalidPaginationError

T = TypeVar("T")


def _check(page: int, page_size: int) -> None:
    if page < 1:
        raise InvalidPaginationError("page must be >= 1", parameter="page", value=page)
    if page_size < 1:
        raise InvalidPaginationError("pageSize must be >= 1", parameter="pageSize", value=page_size)


def last_page(total: int, page_size: int) -> int:
    """ceil(total / page_size); 0 when there are no results."""
    if page_size < 1:
        raise InvalidPaginationError("pageSize must be >= 1", parameter="pageSize", value=page_size)
    return math.ceil(total / page_size)


def page_window(page: int, page_size: int) -> Tuple[int, int]:
    """(offset, limit) for store-level pagination."""
    _check(page, page_size)
    return (page - 1) * page_size, page_size


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    last_page: int = field(init=False)

    def __post_init__(self):
        self.last_page = last_page(self.total, self.page_size)

    @property
    def num_of_results_on_cur_page(self) -> int:
        return len(self.items)

    @classmethod
    def from_window(cls, items: Sequence[T], total: int, page: int, page_size: int) -> "Page[T]":
        """Build from rows already fetched with page_window()."""
        _check(page, page_size)
        return cls(items=list(items), total=total, page=page, page_size=page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice a fully materialized sequence into the requested page."""
    offset, limit = page_window(page, page_size)
    return Page(items=list(items[offset:offset + limit]), total=len(items), page=page, page_size=page_size)
