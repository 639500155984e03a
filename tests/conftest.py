"""
Shared fixtures for the InventoryTracker test suite.

Every test runs against a fresh in-memory SQLite database.
"""

from datetime import date

import pytest

import config
import db_engine
from models import Transaction, TransactionKind
from repositories import TransactionRepository
from services.inventory import InventoryService


@pytest.fixture(autouse=True)
def settings():
    """Point the application at an empty in-memory database."""
    current = config.reload_settings(database_url="sqlite://")
    db_engine.reset_engine()
    db_engine.init_db()
    yield current
    TransactionRepository.clear_listeners()
    db_engine.reset_engine()


@pytest.fixture
def category():
    return InventoryService.add_category("Hardware", "Nuts and bolts")


@pytest.fixture
def product(category):
    return InventoryService.add_product(
        name="Widget",
        sku="W-001",
        category_id=category.id,
        min_stock=5,
        price=2.5,
    )


@pytest.fixture
def make_tx():
    """Build unsaved transactions for the pure stock and valuation functions."""
    counter = {'id': 0}

    def _make(kind, quantity, day, unit_cost=0.0, product_id=1):
        counter['id'] += 1
        return Transaction(
            id=counter['id'],
            product_id=product_id,
            kind=TransactionKind(kind),
            quantity=quantity,
            unit_cost=unit_cost,
            transaction_date=day if not isinstance(day, str) else date.fromisoformat(day),
        )

    return _make
