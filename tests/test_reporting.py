"""
Tests for ReportingService dashboard figures and tables.
"""

from datetime import date

import pytest

from services.inventory import InventoryService
from services.reporting import TRANSACTION_COLUMNS, VALUATION_COLUMNS, ReportingService


@pytest.fixture
def catalog(category):
    widget = InventoryService.add_product(name="Widget", sku="W-1", category_id=category.id, min_stock=2, price=4.0)
    bolt = InventoryService.add_product(name="Bolt", sku="B-1", category_id=category.id, min_stock=50, price=0.5)
    spare = InventoryService.add_category("Spares")
    gear = InventoryService.add_product(name="Gear", sku="G-1", category_id=spare.id, min_stock=0, price=9.0)

    InventoryService.add_transaction(widget.id, 'entry', 10, 1.0, date(2024, 1, 1))
    InventoryService.add_transaction(widget.id, 'entry', 10, 2.0, date(2024, 1, 5))
    InventoryService.add_transaction(widget.id, 'exit', 12, transaction_date=date(2024, 1, 8))
    InventoryService.add_transaction(bolt.id, 'entry', 20, 0.1, date(2024, 1, 3))
    return {'widget': widget, 'bolt': bolt, 'gear': gear, 'spares': spare}


def test_dashboard_summary(catalog):
    summary = ReportingService.dashboard_summary()
    assert summary == {
        'total_products': 3,
        'total_categories': 2,
        'low_stock_products': 2,  # bolt (20 <= 50) and gear (0 <= 0)
        'total_entries': 40,
        'total_exits': 12,
        'inventory_value': 8 * 4.0 + 20 * 0.5,
    }


def test_dashboard_summary_empty():
    summary = ReportingService.dashboard_summary()
    assert summary['total_products'] == 0
    assert summary['inventory_value'] == 0


def test_recent_transactions_newest_first(catalog):
    recent = ReportingService.recent_transactions(limit=2)
    assert [tx.transaction_date for tx in recent] == [date(2024, 1, 8), date(2024, 1, 5)]


def test_top_stock_products(catalog):
    top = ReportingService.top_stock_products(limit=2)
    assert [row['name'] for row in top] == ["Bolt", "Widget"]
    assert top[0]['stock'] == 20
    assert top[1]['min_stock'] == 2


def test_category_distribution_omits_empty_categories(catalog):
    distribution = ReportingService.category_distribution()
    assert distribution == [
        {'category_id': catalog['widget'].category_id, 'name': "Hardware", 'stock': 28},
    ]


def test_valuation_report(catalog):
    df = ReportingService.valuation_report('FIFO', '2024-01-01', '2024-01-31')
    assert list(df.columns) == VALUATION_COLUMNS
    assert len(df) == 3

    widget = df.set_index('sku').loc['W-1']
    assert widget['remaining_stock'] == 8
    assert widget['total_cost'] == pytest.approx(16.0)
    assert widget['average_cost'] == pytest.approx(2.0)

    gear = df.set_index('sku').loc['G-1']
    assert gear['remaining_stock'] == 0
    assert gear['average_cost'] == 0


def test_valuation_report_reports_unmatched_exits(catalog):
    df = ReportingService.valuation_report('weighted', '2024-01-06', '2024-01-31')
    widget = df.set_index('sku').loc['W-1']
    assert widget['unsatisfied_quantity'] == 12
    assert widget['entries'] == 0


def test_valuation_report_rejects_unknown_method():
    with pytest.raises(ValueError):
        ReportingService.valuation_report('average', '2024-01-01', '2024-01-31')


def test_transactions_frame(catalog):
    df = ReportingService.transactions_frame(catalog['widget'].id, '2024-01-01', '2024-01-31')
    assert list(df.columns) == TRANSACTION_COLUMNS
    assert list(df['kind']) == ['entry', 'entry', 'exit']
    assert list(df['total']) == [10.0, 20.0, 0.0]


def test_transactions_frame_by_kind(catalog):
    df = ReportingService.transactions_frame(catalog['widget'].id, '2024-01-01', '2024-01-31', kind='exit')
    assert list(df['quantity']) == [12]


def test_transactions_frame_empty_window(catalog):
    df = ReportingService.transactions_frame(catalog['widget'].id, '2023-01-01', '2023-12-31')
    assert df.empty
    assert list(df.columns) == TRANSACTION_COLUMNS
