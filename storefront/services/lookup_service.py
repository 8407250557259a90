"""
Brand and category lookups

Loaded fresh on every call; nothing is cached.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.brand import Brand
from storefront.models.category import Category

logger = logging.getLogger(__name__)


class LookupService:

    async def list_brands(self, db: AsyncSession) -> List[Brand]:
        result = await db.execute(select(Brand).order_by(Brand.name, Brand.id))
        return list(result.scalars().all())

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name, Category.id))
        return list(result.scalars().all())

    async def map_brand_ids_to_name(self, db: AsyncSession, brand_ids: Iterable[int]) -> Dict[int, Optional[str]]:
        """
        Resolve brand IDs to names, keeping the input order.

        Unknown IDs map to None.
        """
        ids = [int(brand_id) for brand_id in brand_ids]
        names: Dict[int, Optional[str]] = {brand_id: None for brand_id in ids}
        if not ids:
            return names

        result = await db.execute(select(Brand.id, Brand.name).where(Brand.id.in_(ids)))
        for brand_id, name in result.all():
            names[brand_id] = name

        unknown = [brand_id for brand_id, name in names.items() if name is None]
        if unknown:
            logger.warning(f"Brand IDs with no brand row: {unknown}")
        return names


lookup_service = LookupService()
