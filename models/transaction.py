"""
Transaction model - a stock entry or exit for a product.
Transactions are append-only: once stored they are never updated or deleted.
"""

from enum import Enum
from typing import Optional
from datetime import date
from sqlmodel import SQLModel, Field


class TransactionKind(str, Enum):
    """Direction of a stock movement."""
    ENTRY = "entry"
    EXIT = "exit"


class Transaction(SQLModel, table=True):
    """Represents an entry into or exit from stock."""
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="product.id", index=True)
    kind: TransactionKind
    quantity: float
    unit_cost: float = 0.0  # Only meaningful for entries
    transaction_date: date = Field(index=True)
    notes: str = ""
