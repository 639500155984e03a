"""
Product model - represents an item in the catalog.
"""

from typing import Optional
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """Represents a stocked product."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    sku: str = Field(index=True, unique=True)
    min_stock: float = 0.0  # Low stock alert threshold (inclusive)
    price: float = 0.0  # Sale price per unit
    image: str = ""
    barcode: Optional[str] = Field(default=None)
