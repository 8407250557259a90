"""
Product routes

Listing takes the storefront query-string parameters as plain strings
(page, pageSize, sortBy, brand, priceRangeTo, gender, discount, occasion,
category). Mutations are audit logged.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.database import get_db
from storefront.core.audit_log import (
    log_catalog_action,
    ACTION_PRODUCT_CREATE,
    ACTION_PRODUCT_UPDATE,
    ACTION_PRODUCT_DELETE,
)
from storefront.core.exceptions import CatalogValidationError
from storefront.core.rate_limit import get_client_ip, limiter
from storefront.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductList
from storefront.schemas.catalog import CategoryResponse, ProductCategoriesRequest, ProductCategoriesResponse
from storefront.services.product_service import product_service
from storefront.services.query_translator import ProductFilters

router = APIRouter()


@router.get("", response_model=ProductList)
async def list_products(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    brand: Optional[str] = None,
    price_range_to: Optional[str] = Query(None, alias="priceRangeTo"),
    gender: Optional[str] = None,
    discount: Optional[str] = None,
    occasion: Optional[str] = None,
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List products with filtering, sorting, and pagination"""
    filters = ProductFilters.from_query_params(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        brand=brand,
        price_range_to=price_range_to,
        gender=gender,
        discount=discount,
        occasion=occasion,
        category=category,
    )
    result = await product_service.get_products(db, filters)

    return ProductList(
        products=[ProductResponse.model_validate(p) for p in result.items],
        count=result.total,
        last_page=result.last_page,
        num_of_results_on_cur_page=result.num_of_results_on_cur_page,
        page=result.page,
        page_size=result.page_size,
    )


@router.post("/categories", response_model=ProductCategoriesResponse)
async def all_product_categories(
    body: ProductCategoriesRequest,
    db: AsyncSession = Depends(get_db),
):
    """Category names for each of the given products"""
    categories = await product_service.get_all_product_categories(db, body.product_ids)
    return ProductCategoriesResponse(categories=categories)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get single product by ID"""
    return await product_service.get_product(db, product_id)


@router.get("/{product_id}/categories", response_model=list[CategoryResponse])
async def product_categories(product_id: int, db: AsyncSession = Depends(get_db)):
    """Categories linked to a product"""
    await product_service.get_product(db, product_id)
    return await product_service.get_product_categories(db, product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def create_product(
    request: Request,
    product_data: ProductCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create new product"""
    product = await product_service.save_product(db, product_data)

    log_catalog_action(
        action=ACTION_PRODUCT_CREATE,
        resource_type="product",
        resource_id=product.id,
        details={"name": product.name, "categories": product_data.categories},
        ip_address=get_client_ip(request),
    )

    return product


@router.put("/{product_id}", response_model=ProductResponse)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def update_product(
    request: Request,
    product_id: int,
    update_data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace a product's fields and categories"""
    if update_data.id != product_id:
        raise CatalogValidationError(
            "Payload id does not match the product in the URL",
            details={"path_id": product_id, "payload_id": update_data.id},
        )

    product = await product_service.update_product(db, update_data)

    log_catalog_action(
        action=ACTION_PRODUCT_UPDATE,
        resource_type="product",
        resource_id=product.id,
        details={"categories": update_data.categories},
        ip_address=get_client_ip(request),
    )

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def delete_product(
    request: Request,
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete product with its categories, reviews and comments"""
    await product_service.delete_product(db, product_id)

    log_catalog_action(
        action=ACTION_PRODUCT_DELETE,
        resource_type="product",
        resource_id=product_id,
        ip_address=get_client_ip(request),
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
