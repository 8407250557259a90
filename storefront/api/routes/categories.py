"""
Category lookup routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.schemas.catalog import CategoryResponse
from storefront.services.lookup_service import lookup_service

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories, ordered by name"""
    return await lookup_service.list_categories(db)
