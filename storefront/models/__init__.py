from storefront.models.product import Product, Gender
from storefront.models.brand import Brand
from storefront.models.category import Category, ProductCategory
from storefront.models.feedback import Review, Comment

__all__ = [
    "Product",
    "Gender",
    "Brand",
    "Category",
    "ProductCategory",
    "Review",
    "Comment",
]
