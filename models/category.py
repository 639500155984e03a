"""
Category model - groups products in the catalog.
"""

from typing import Optional
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """A product category."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""
