"""
Repositories package for InventoryTracker.
Provides data access layer for all database operations.
"""

from repositories.category_repository import CategoryRepository
from repositories.product_repository import ProductRepository
from repositories.transaction_repository import TransactionRepository

__all__ = [
    'CategoryRepository',
    'ProductRepository',
    'TransactionRepository',
]
