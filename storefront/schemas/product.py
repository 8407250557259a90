"""
Product schemas

Write payloads mirror the product form: brands arrive bracket-encoded
("[3,7]") or as a list of IDs, occasion comma-joined or as a list of tags.
Both are normalized to their stored encoding. Any client-sent price is
ignored; the service derives it from old_price and discount.
"""
from datetime import datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field, computed_field, field_validator

from storefront.models.product import ENCODED_COLUMN_LENGTH, Gender
from storefront.services.membership import decode_id_set, encode_id_set, join_tags, split_tags


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    old_price: float = Field(..., gt=0)
    discount: float = Field(0, ge=0, le=100, description="Percentage off old_price")
    rating: float = Field(0, ge=0, le=5)
    colors: Optional[str] = None
    gender: Gender
    image_url: Optional[str] = None
    brands: str = Field(
        "[]", max_length=ENCODED_COLUMN_LENGTH, description="Bracket-encoded brand IDs, e.g. [3,7]"
    )
    occasion: str = Field(
        "", max_length=ENCODED_COLUMN_LENGTH, description="Comma-joined, lower-cased occasion tags"
    )
    categories: List[int] = []

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("brands", mode="before")
    @classmethod
    def normalize_brands(cls, v: Union[str, List[int], None]):
        if v is None:
            return "[]"
        if isinstance(v, str):
            return encode_id_set(decode_id_set(v))
        if isinstance(v, list) and all(isinstance(i, int) and not isinstance(i, bool) for i in v):
            return encode_id_set(v)
        raise ValueError("brands must be a bracket-encoded string or a list of integer IDs")

    @field_validator("occasion", mode="before")
    @classmethod
    def normalize_occasion(cls, v: Union[str, List[str], None]):
        if v is None:
            return ""
        if isinstance(v, str):
            return join_tags(split_tags(v))
        if isinstance(v, list):
            return join_tags(v)
        raise ValueError("occasion must be a comma-joined string or a list of tags")

    @field_validator("categories", mode="before")
    @classmethod
    def default_categories(cls, v):
        return v if v is not None else []

    @field_validator("categories")
    @classmethod
    def unique_categories(cls, v: List[int]):
        return list(dict.fromkeys(v))


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    id: int


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    old_price: float
    discount: float
    rating: float = 0.0
    colors: Optional[str] = None
    gender: Gender
    image_url: Optional[str] = None
    brands: str = "[]"
    occasion: str = ""
    created_at: Optional[datetime] = None

    @field_validator("rating", mode="before")
    @classmethod
    def default_float(cls, v):
        return v if v is not None else 0.0

    @field_validator("brands", mode="before")
    @classmethod
    def default_brands(cls, v):
        return v if v is not None else "[]"

    @field_validator("occasion", mode="before")
    @classmethod
    def default_occasion(cls, v):
        return v if v is not None else ""

    @computed_field
    @property
    def brand_ids(self) -> List[int]:
        return decode_id_set(self.brands)

    @computed_field
    @property
    def occasions(self) -> List[str]:
        return split_tags(self.occasion)

    class Config:
        from_attributes = True


class ProductList(BaseModel):
    products: List[ProductResponse]
    count: int
    last_page: int
    num_of_results_on_cur_page: int
    page: int
    page_size: int
