"""
Listing query translation

Turns the flat, string-valued listing parameters (page, pageSize, sortBy,
brand, priceRangeTo, gender, discount, occasion, category) into a
ProductFilters value and then into a SQLAlchemy select over products.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import Select, select, func, or_

from storefront.core.config import settings
from storefront.core.exceptions import InvalidFilterError
from storefront.models.category import ProductCategory
from storefront.models.product import Gender, Product
from storefront.services.membership import LIKE_ESCAPE, brand_like_patterns, occasion_like_patterns, split_tags

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "price": Product.price,
    "old_price": Product.old_price,
    "discount": Product.discount,
    "rating": Product.rating,
    "created_at": Product.created_at,
}
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_SORT = ("id", "asc")


def parse_sort(sort_by: Optional[str]) -> Tuple[str, str]:
    """
    Parse "column-direction" (e.g. "created_at-desc").

    Anything unrecognised falls back to ("id", "asc").
    """
    if not sort_by:
        return DEFAULT_SORT
    column, sep, direction = sort_by.strip().rpartition("-")
    if not sep or column not in SORTABLE_COLUMNS or direction.lower() not in SORT_DIRECTIONS:
        logger.debug(f"Ignoring unsupported sortBy value {sort_by!r}")
        return DEFAULT_SORT
    return column, direction.lower()


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_id_list(raw: Optional[str], parameter: str) -> List[int]:
    ids = []
    for part in _split_csv(raw):
        try:
            ids.append(int(part))
        except ValueError:
            raise InvalidFilterError(
                f"{parameter} must be a comma-separated list of integer IDs",
                parameter=parameter,
                value=raw,
            )
    return ids


def parse_number(raw: str, parameter: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidFilterError(f"{parameter} must be a number", parameter=parameter, value=raw)
    if not math.isfinite(value):
        raise InvalidFilterError(f"{parameter} must be a finite number", parameter=parameter, value=raw)
    return value


def parse_discount_range(raw: Optional[str]) -> Optional[Tuple[float, float]]:
    """Parse "lower-upper" into an inclusive range."""
    if not raw:
        return None
    lower, sep, upper = raw.strip().partition("-")
    if not sep or not lower.strip() or not upper.strip():
        raise InvalidFilterError("discount must look like 'lower-upper'", parameter="discount", value=raw)
    low = parse_number(lower, "discount")
    high = parse_number(upper, "discount")
    if low > high:
        raise InvalidFilterError("discount lower bound exceeds upper bound", parameter="discount", value=raw)
    return low, high


def parse_gender(raw: Optional[str]) -> Optional[Gender]:
    if not raw:
        return None
    try:
        return Gender(raw.strip().lower())
    except ValueError:
        raise InvalidFilterError(
            f"gender must be one of {', '.join(g.value for g in Gender)}",
            parameter="gender",
            value=raw,
        )


@dataclass
class ProductFilters:
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE
    sort_column: str = DEFAULT_SORT[0]
    sort_direction: str = DEFAULT_SORT[1]
    price_ceiling: Optional[float] = None
    gender: Optional[Gender] = None
    discount_range: Optional[Tuple[float, float]] = None
    brand_ids: List[int] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    category_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_query_params(
        cls,
        page: int = 1,
        page_size: Optional[int] = None,
        sort_by: Optional[str] = None,
        brand: Optional[str] = None,
        price_range_to: Optional[str] = None,
        gender: Optional[str] = None,
        discount: Optional[str] = None,
        occasion: Optional[str] = None,
        category: Optional[str] = None,
    ) -> "ProductFilters":
        """
        Build filters from raw query-string values.

        price_range_to=None (absent) applies settings.DEFAULT_PRICE_CEILING;
        an empty string disables the ceiling.
        """
        if price_range_to is None:
            price_ceiling = settings.DEFAULT_PRICE_CEILING
        elif price_range_to.strip() == "":
            price_ceiling = None
        else:
            price_ceiling = parse_number(price_range_to, "priceRangeTo")

        sort_column, sort_direction = parse_sort(sort_by)
        return cls(
            page=page,
            page_size=page_size or settings.DEFAULT_PAGE_SIZE,
            sort_column=sort_column,
            sort_direction=sort_direction,
            price_ceiling=price_ceiling,
            gender=parse_gender(gender),
            discount_range=parse_discount_range(discount),
            brand_ids=parse_id_list(brand, "brand"),
            occasions=split_tags(occasion),
            category_ids=parse_id_list(category, "category"),
        )


def build_product_query(filters: ProductFilters) -> Select:
    """Filtered, ordered select over all matching products (no pagination)."""
    query = select(Product)

    if filters.price_ceiling is not None:
        query = query.where(Product.price <= filters.price_ceiling)

    if filters.gender is not None:
        query = query.where(Product.gender == filters.gender)

    if filters.discount_range is not None:
        lower, upper = filters.discount_range
        query = query.where(Product.discount >= lower, Product.discount <= upper)

    if filters.brand_ids:
        query = query.where(or_(*[
            Product.brands.like(pattern, escape=LIKE_ESCAPE)
            for brand_id in filters.brand_ids
            for pattern in brand_like_patterns(brand_id)
        ]))

    if filters.occasions:
        query = query.where(or_(*[
            func.lower(Product.occasion).like(pattern, escape=LIKE_ESCAPE)
            for tag in filters.occasions
            for pattern in occasion_like_patterns(tag)
        ]))

    if filters.category_ids:
        in_categories = (
            select(ProductCategory.product_id)
            .where(ProductCategory.category_id.in_(filters.category_ids))
        )
        query = query.where(Product.id.in_(in_categories))

    column = SORTABLE_COLUMNS[filters.sort_column]
    order = column.desc() if filters.sort_direction == "desc" else column.asc()
    if filters.sort_column == "id":
        query = query.order_by(order)
    else:
        query = query.order_by(order, Product.id.asc())

    return query


def build_count_query(query: Select) -> Select:
    """count(*) over a product query, ignoring its ordering."""
    return select(func.count()).select_from(query.order_by(None).subquery())
