"""
Category model and the product_categories join table
"""
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from storefront.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    product_links = relationship("ProductCategory", back_populates="category")


class ProductCategory(Base):
    """Join row; replaced wholesale whenever a product is updated."""
    __tablename__ = "product_categories"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    product = relationship("Product", back_populates="category_links")
    category = relationship("Category", back_populates="product_links")

    __table_args__ = (
        UniqueConstraint("product_id", "category_id", name="uq_product_category"),
        Index("ix_product_categories_product_id", "product_id"),
        Index("ix_product_categories_category_id", "category_id"),
    )
