"""
Brand and category lookup schemas
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class BrandResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProductCategoriesRequest(BaseModel):
    product_ids: List[int] = Field(..., max_length=500)


class ProductCategoriesResponse(BaseModel):
    categories: Dict[int, List[str]]


class BrandNamesResponse(BaseModel):
    names: Dict[int, Optional[str]]
