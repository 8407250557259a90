"""
Brand model

Products reference brands by ID inside Product.brands; there is no foreign key.
"""
from sqlalchemy import Column, Integer, String

from storefront.core.database import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
