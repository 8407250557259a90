from storefront.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductList
from storefront.schemas.catalog import (
    BrandResponse,
    CategoryResponse,
    ProductCategoriesRequest,
    ProductCategoriesResponse,
    BrandNamesResponse,
)
