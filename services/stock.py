"""
Stock projection: net stock of a product from its transaction history.
Used for low stock alerts and to validate exits before they are recorded.
"""

from typing import Iterable

from models import TransactionKind


def current_stock(transactions: Iterable) -> float:
    """
    Net stock implied by a product's transactions (entries minus exits).

    The sum is order independent, so no sorting is done. The result is not
    clamped: a negative value means the stored history is inconsistent.
    """
    stock = 0.0
    for tx in transactions:
        if tx.kind == TransactionKind.ENTRY:
            stock += tx.quantity
        else:
            stock -= tx.quantity
    return stock


def is_low_stock(product, transactions: Iterable) -> bool:
    """True when stock is at or below the product's minimum."""
    return current_stock(transactions) <= product.min_stock
