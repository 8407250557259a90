"""
Product model

brands holds a bracket-encoded set of brand IDs ("[3,7]") and occasion a
comma-joined set of tags ("party,wedding"); see services.membership.
price is derived from old_price and discount at write time.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.core.database import Base

# Storage width of the membership-encoded columns
ENCODED_COLUMN_LENGTH = 255


class Gender(str, PyEnum):
    MEN = "men"
    WOMEN = "women"
    BOY = "boy"
    GIRL = "girl"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Pricing
    price = Column(Float, nullable=False, index=True)
    old_price = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0.0, index=True)  # percentage

    rating = Column(Float, default=0.0)
    colors = Column(String(255))
    gender = Column(
        Enum(Gender, name="product_gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    image_url = Column(Text)

    # Membership-encoded columns
    brands = Column(String(ENCODED_COLUMN_LENGTH), nullable=False, default="[]")
    occasion = Column(String(ENCODED_COLUMN_LENGTH), nullable=False, default="")

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    category_links = relationship("ProductCategory", back_populates="product")
    reviews = relationship("Review", back_populates="product")
    comments = relationship("Comment", back_populates="product")

    __table_args__ = (
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_products_discount_range"),
        CheckConstraint("old_price >= 0", name="ck_products_old_price_non_negative"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name!r}, price={self.price})>"
