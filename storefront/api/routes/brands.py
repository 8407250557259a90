"""
Brand lookup routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.core.exceptions import InvalidFilterError
from storefront.schemas.catalog import BrandResponse, BrandNamesResponse
from storefront.services.lookup_service import lookup_service
from storefront.services.membership import decode_id_set
from storefront.services.query_translator import parse_id_list

router = APIRouter()


@router.get("", response_model=list[BrandResponse])
async def list_brands(db: AsyncSession = Depends(get_db)):
    """All brands, ordered by name"""
    return await lookup_service.list_brands(db)


@router.get("/names", response_model=BrandNamesResponse)
async def brand_names(
    ids: Optional[str] = Query(None, description="Comma-separated IDs or a bracket-encoded set"),
    db: AsyncSession = Depends(get_db),
):
    """Resolve brand IDs to names; unknown IDs map to null"""
    if ids and ids.strip().startswith("["):
        try:
            brand_ids = decode_id_set(ids)
        except ValueError:
            raise InvalidFilterError("ids is not a valid bracket-encoded set", parameter="ids", value=ids)
    else:
        brand_ids = parse_id_list(ids, "ids")
    names = await lookup_service.map_brand_ids_to_name(db, brand_ids)
    return BrandNamesResponse(names=names)
