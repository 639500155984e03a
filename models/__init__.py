"""
Database models for InventoryTracker.
All SQLModel table definitions are centralized here.
"""

from models.category import Category
from models.product import Product
from models.transaction import Transaction, TransactionKind

__all__ = [
    'Category',
    'Product',
    'Transaction',
    'TransactionKind',
]
