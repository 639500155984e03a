"""
Services package for InventoryTracker.
Provides core business logic separated from presentation and data layers.
"""

from services.stock import current_stock, is_low_stock
from services.valuation import (
    CostingMethod,
    Lot,
    ValuationResult,
    valuate,
    filter_window
)
from services.inventory import InventoryService
from services.reporting import ReportingService
from services.notification import EmailService

__all__ = [
    # Stock projection
    'current_stock',
    'is_low_stock',
    # Valuation
    'CostingMethod',
    'Lot',
    'ValuationResult',
    'valuate',
    'filter_window',
    # Services
    'InventoryService',
    'ReportingService',
    'EmailService',
]
