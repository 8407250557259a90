"""
Product Service

Catalog actions behind the product routes: listing with filters and
pagination, single-product lookup, create, update, delete, and the
category lookups used by the product forms.

Every multi-statement write runs in a single transaction; a failure rolls
the whole action back and propagates to the caller.
"""
import logging
from typing import Dict, Iterable, List, Union

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ProductNotFoundError, CatalogValidationError
from storefront.models.category import Category, ProductCategory
from storefront.models.feedback import Comment, Review
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.services.pager import Page, page_window
from storefront.services.query_translator import ProductFilters, build_product_query, build_count_query

logger = logging.getLogger(__name__)

# Columns copied verbatim from a write payload onto the product row
SCALAR_FIELDS = (
    "name",
    "description",
    "old_price",
    "discount",
    "rating",
    "colors",
    "gender",
    "image_url",
    "brands",
    "occasion",
)


def compute_price(old_price: float, discount: float) -> float:
    """Sale price: old_price - old_price * discount / 100."""
    return old_price - old_price * discount / 100


class ProductService:
    """
    Catalog product actions.

    Features:
    - Filtered, sorted listing with store-level pagination
    - Create/update with derived price and wholesale category replacement
    - Cascade delete of categories, reviews and comments
    """

    async def get_products(self, db: AsyncSession, filters: ProductFilters) -> Page[Product]:
        """
        List products matching the filters.

        Returns:
            Page with the products on the requested page, the total match
            count and the last page number
        """
        query = build_product_query(filters)
        offset, limit = page_window(filters.page, filters.page_size)

        total = await db.scalar(build_count_query(query)) or 0

        products: List[Product] = []
        if offset < total:
            result = await db.execute(query.offset(offset).limit(limit))
            products = list(result.scalars().all())

        logger.debug(
            f"Product listing: {total} matches, page {filters.page} "
            f"({len(products)} on page, size {filters.page_size})"
        )
        return Page.from_window(products, total=total, page=filters.page, page_size=filters.page_size)

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        """Get a single product by ID."""
        result = await db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def save_product(self, db: AsyncSession, payload: ProductCreate) -> Product:
        """Insert a product and its category links."""
        try:
            await self._check_categories(db, payload.categories)

            product = Product(**{name: getattr(payload, name) for name in SCALAR_FIELDS})
            product.price = compute_price(payload.old_price, payload.discount)
            db.add(product)
            await db.flush()  # assigns product.id

            self._add_category_links(db, product.id, payload.categories)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(product)
        logger.info(f"Created product {product.id} ({product.name!r}) in {len(payload.categories)} categories")
        return product

    async def update_product(self, db: AsyncSession, payload: ProductUpdate) -> Product:
        """Replace a product's scalar fields and all of its category links."""
        try:
            product = await self.get_product(db, payload.id)
            await self._check_categories(db, payload.categories)

            for name in SCALAR_FIELDS:
                setattr(product, name, getattr(payload, name))
            product.price = compute_price(payload.old_price, payload.discount)

            await db.execute(delete(ProductCategory).where(ProductCategory.product_id == product.id))
            self._add_category_links(db, product.id, payload.categories)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(product)
        logger.info(f"Updated product {product.id}; categories now {payload.categories}")
        return product

    async def delete_product(self, db: AsyncSession, product_id: int) -> None:
        """Delete a product after its category links, reviews and comments."""
        try:
            await self.get_product(db, product_id)

            await db.execute(delete(ProductCategory).where(ProductCategory.product_id == product_id))
            await db.execute(delete(Review).where(Review.product_id == product_id))
            await db.execute(delete(Comment).where(Comment.product_id == product_id))
            await db.execute(delete(Product).where(Product.id == product_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Deleted product {product_id} with its categories, reviews and comments")

    async def get_all_product_categories(
        self,
        db: AsyncSession,
        products: Iterable[Union[Product, int]],
    ) -> Dict[int, List[str]]:
        """
        Category names for each product.

        Accepts products or product IDs. Every requested product gets an
        entry, empty when it has no categories.
        """
        product_ids = [p if isinstance(p, int) else p.id for p in products]
        categories: Dict[int, List[str]] = {pid: [] for pid in product_ids}
        if not product_ids:
            return categories

        result = await db.execute(
            select(ProductCategory.product_id, Category.name)
            .join(Category, Category.id == ProductCategory.category_id)
            .where(ProductCategory.product_id.in_(product_ids))
            .order_by(ProductCategory.product_id, Category.name)
        )
        for product_id, name in result.all():
            categories[product_id].append(name)
        return categories

    async def get_product_categories(self, db: AsyncSession, product_id: int) -> List[Category]:
        """Categories (id and name) linked to one product."""
        result = await db.execute(
            select(Category)
            .join(ProductCategory, ProductCategory.category_id == Category.id)
            .where(ProductCategory.product_id == product_id)
            .order_by(Category.name)
        )
        return list(result.scalars().all())

    async def _check_categories(self, db: AsyncSession, category_ids: List[int]) -> None:
        if not category_ids:
            return
        result = await db.execute(select(Category.id).where(Category.id.in_(category_ids)))
        missing = set(category_ids) - set(result.scalars().all())
        if missing:
            raise CatalogValidationError(
                "Unknown category IDs",
                details={"category_ids": sorted(missing)},
            )

    def _add_category_links(self, db: AsyncSession, product_id: int, category_ids: List[int]) -> None:
        for category_id in category_ids:
            db.add(ProductCategory(product_id=product_id, category_id=category_id))


product_service = ProductService()
