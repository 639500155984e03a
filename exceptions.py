"""
Domain exceptions for InventoryTracker.

Raised by the write path (InventoryService) and, in strict mode only,
by the valuation engine.
"""

from typing import Optional


class InventoryError(Exception):
    """Base class for all inventory domain errors."""
    default_detail = 'Inventory error.'
    code = 'INVENTORY_ERROR'

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Rejected writes
# ---------------------------------------------------------------------------

class BusinessRuleViolation(InventoryError):
    """Raised when a business rule is violated at the service layer."""
    default_detail = 'Business rule violation.'
    code = 'BUSINESS_RULE_VIOLATION'


class InvalidTransactionError(BusinessRuleViolation):
    """Raised when a transaction has a non-positive quantity or an invalid cost."""
    default_detail = 'Invalid transaction.'
    code = 'INVALID_TRANSACTION'


class InsufficientStockError(BusinessRuleViolation):
    """Raised when an exit exceeds the product's current stock."""
    default_detail = 'Insufficient stock for this operation.'
    code = 'INSUFFICIENT_STOCK'

    def __init__(self, available: float, requested: float, detail: Optional[str] = None):
        self.available = available
        self.requested = requested
        super().__init__(
            detail or f'Insufficient stock: {available:g} available, {requested:g} requested.'
        )


class DuplicateResourceError(InventoryError):
    default_detail = 'Resource already exists.'
    code = 'DUPLICATE_RESOURCE'


class ResourceNotFoundError(InventoryError):
    default_detail = 'Resource not found.'
    code = 'RESOURCE_NOT_FOUND'


# ---------------------------------------------------------------------------
# Valuation
# ---------------------------------------------------------------------------

class ValuationUnderflowError(InventoryError):
    """Raised by strict valuation when exits cannot be matched against stock."""
    default_detail = 'Exits exceed the stock available in the valuation window.'
    code = 'VALUATION_UNDERFLOW'

    def __init__(self, unsatisfied_quantity: float, detail: Optional[str] = None):
        self.unsatisfied_quantity = unsatisfied_quantity
        super().__init__(
            detail or f'{unsatisfied_quantity:g} units of exits could not be matched to stock.'
        )
