"""
Tests for stock projection.
"""

import itertools

from models import Product
from services.stock import current_stock, is_low_stock


def test_empty_history_is_zero():
    assert current_stock([]) == 0


def test_entries_minus_exits(make_tx):
    transactions = [
        make_tx('entry', 10, '2024-01-01'),
        make_tx('exit', 3, '2024-01-02'),
        make_tx('entry', 2.5, '2024-01-03'),
    ]
    assert current_stock(transactions) == 9.5


def test_order_does_not_matter(make_tx):
    transactions = [
        make_tx('entry', 10, '2024-01-01'),
        make_tx('exit', 4, '2024-01-02'),
        make_tx('entry', 6, '2024-01-03'),
        make_tx('exit', 1, '2024-01-04'),
    ]
    results = {current_stock(list(p)) for p in itertools.permutations(transactions)}
    assert results == {11}


def test_negative_stock_is_reported_not_clamped(make_tx):
    transactions = [
        make_tx('entry', 2, '2024-01-01'),
        make_tx('exit', 5, '2024-01-02'),
    ]
    assert current_stock(transactions) == -3


class TestIsLowStock:

    def test_equal_to_minimum_is_low(self, make_tx):
        product = Product(name="Bolt", sku="B-1", min_stock=5)
        assert is_low_stock(product, [make_tx('entry', 5, '2024-01-01')])

    def test_above_minimum_is_not_low(self, make_tx):
        product = Product(name="Bolt", sku="B-1", min_stock=5)
        assert not is_low_stock(product, [make_tx('entry', 6, '2024-01-01')])

    def test_no_history_with_zero_minimum_is_low(self):
        product = Product(name="Bolt", sku="B-1", min_stock=0)
        assert is_low_stock(product, [])
